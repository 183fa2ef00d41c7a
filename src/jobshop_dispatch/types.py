"""Shared types: the job-shop domain model, per-run records and results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Task:
    """A unit of work bound to one machine for a fixed number of time units.

    Identity is ``task_id`` within the owning job. The start time is not
    stored here; the dispatcher produces a ``ScheduledTask`` per run.
    """

    task_id: str
    job_id: int
    machine_id: int
    duration: int
    deadline: int | None = None
    setup_time: int | None = None
    maintenance_aware: bool = False


@dataclass(frozen=True)
class Job:
    """An ordered chain of tasks. Position in ``tasks`` is precedence."""

    job_id: int
    tasks: tuple[Task, ...]
    priority: float | None = None
    deadline: int | None = None

    @property
    def total_duration(self) -> int:
        return sum(t.duration for t in self.tasks)

    def index_of(self, task_id: str) -> int:
        """Position of ``task_id`` in this job, or -1 if the job lacks it."""
        for i, task in enumerate(self.tasks):
            if task.task_id == task_id:
                return i
        return -1


@dataclass(frozen=True)
class MaintenanceWindow:
    """Fixed occupied interval ``[start, start + duration)`` on one machine.

    ``flexible``, ``min_start``, ``max_start`` and ``priority`` are carried
    for callers that edit windows; the dispatcher treats every window as
    fixed.
    """

    window_id: str
    machine_id: int
    start: int
    duration: int
    flexible: bool = False
    min_start: int | None = None
    max_start: int | None = None
    priority: float | None = None

    @property
    def finish(self) -> int:
        return self.start + self.duration


@dataclass(frozen=True)
class ScheduledTask:
    """Immutable record of a committed task.

    Invariants:
        - finish == start + task.duration
        - start >= 0 for every record the dispatcher produces; records
          assembled elsewhere may carry None, which validate_schedule reports
    """

    task: Task
    start: int

    @property
    def finish(self) -> int:
        return self.start + self.task.duration

    @property
    def task_id(self) -> str:
        return self.task.task_id

    @property
    def job_id(self) -> int:
        return self.task.job_id

    @property
    def machine_id(self) -> int:
        return self.task.machine_id

    @property
    def duration(self) -> int:
        return self.task.duration


@dataclass(frozen=True)
class Interval:
    """One occupied span on a machine timeline."""

    start: int
    finish: int
    kind: str  # "task" or "maintenance"
    owner_id: str
    job_id: int | None = None

    def describe(self) -> str:
        if self.kind == "task":
            return f"task {self.owner_id} of job {self.job_id} ({self.start}-{self.finish})"
        return f"maintenance {self.owner_id} ({self.start}-{self.finish})"


@dataclass(frozen=True)
class ScheduleResult:
    """Committed schedule in commit order, plus its makespan."""

    schedule: tuple[ScheduledTask, ...] = ()
    makespan: int = 0

    @classmethod
    def from_schedule(cls, schedule: list[ScheduledTask] | tuple[ScheduledTask, ...]) -> ScheduleResult:
        """Build a result, computing makespan (0 for an empty schedule)."""
        entries = tuple(schedule)
        makespan = max((e.finish for e in entries), default=0)
        return cls(schedule=entries, makespan=makespan)

    def __len__(self) -> int:
        return len(self.schedule)

    def start_of(self, job_id: int, task_id: str) -> int | None:
        for entry in self.schedule:
            if entry.job_id == job_id and entry.task_id == task_id:
                return entry.start
        return None


@dataclass(frozen=True)
class Infeasible:
    """Dispatch stopped with tasks that could never become ready.

    Happens when a task names a job that does not list it (or does not
    exist), so its predecessors can never all be committed.
    """

    partial: ScheduleResult
    remaining_task_ids: tuple[str, ...]


@dataclass(frozen=True)
class ScheduleMetrics:
    """Quality figures for a finished schedule.

    ``longest_job`` is the job with the largest total processing time.
    ``critical_path`` is the chain of back-to-back tasks that ends at the
    makespan.
    """

    machine_utilization: dict[int, float] = field(default_factory=dict)
    average_wait_time: float = 0.0
    longest_job: tuple[ScheduledTask, ...] = ()
    critical_path: tuple[ScheduledTask, ...] = ()
    setup_time_total: int = 0
    deadline_misses: int = 0


@dataclass(frozen=True)
class ScheduleReport:
    """What ``schedule_jobs`` returns."""

    result: ScheduleResult
    metrics: ScheduleMetrics
    unscheduled: tuple[str, ...] = ()

    @property
    def schedule(self) -> tuple[ScheduledTask, ...]:
        return self.result.schedule

    @property
    def makespan(self) -> int:
        return self.result.makespan

    @property
    def feasible(self) -> bool:
        return not self.unscheduled


@dataclass(frozen=True)
class ValidationIssue:
    """Field-attributed pre-flight error. ``job_id`` is -1 for problem-level issues."""

    job_id: int
    message: str
    task_id: str | None = None

    def __str__(self) -> str:
        if self.task_id is not None:
            return f"Job {self.job_id}, task {self.task_id}: {self.message}"
        if self.job_id < 0:
            return self.message
        return f"Job {self.job_id}: {self.message}"


class InfeasibleError(Exception):
    """Raised when strict scheduling leaves tasks that can never become ready."""

    def __init__(
        self,
        remaining_task_ids: tuple[str, ...],
        scheduled_count: int,
        reason: str,
    ) -> None:
        self.remaining_task_ids = remaining_task_ids
        self.scheduled_count = scheduled_count
        self.reason = reason
        super().__init__(
            f"Infeasible: {len(remaining_task_ids)} task(s) could not be "
            f"scheduled after {scheduled_count} committed "
            f"(remaining: {', '.join(remaining_task_ids)}; reason: {reason})"
        )
