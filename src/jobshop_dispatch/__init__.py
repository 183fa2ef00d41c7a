"""jobshop-dispatch: Greedy job-shop scheduling with maintenance windows."""

from jobshop_dispatch.config import ScheduleConfig
from jobshop_dispatch.greedy import dispatch, schedule_jobs
from jobshop_dispatch.metrics import compute_metrics
from jobshop_dispatch.policy import available_policies, resolve_policy, task_priority
from jobshop_dispatch.timeline import MachineTimeline, earliest_start
from jobshop_dispatch.types import (
    Infeasible,
    InfeasibleError,
    Job,
    MaintenanceWindow,
    ScheduledTask,
    ScheduleMetrics,
    ScheduleReport,
    ScheduleResult,
    Task,
    ValidationIssue,
)
from jobshop_dispatch.validation import (
    validate_jobs,
    validate_maintenance_windows,
    validate_schedule,
)

__all__ = [
    "Infeasible",
    "InfeasibleError",
    "Job",
    "MachineTimeline",
    "MaintenanceWindow",
    "ScheduleConfig",
    "ScheduleMetrics",
    "ScheduleReport",
    "ScheduleResult",
    "ScheduledTask",
    "Task",
    "ValidationIssue",
    "available_policies",
    "compute_metrics",
    "dispatch",
    "earliest_start",
    "resolve_policy",
    "schedule_jobs",
    "task_priority",
    "validate_jobs",
    "validate_maintenance_windows",
    "validate_schedule",
]
