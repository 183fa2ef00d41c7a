"""Loading problems from JSON and serialising schedules back out."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jobshop_dispatch.config import ScheduleConfig, config_from_dict
from jobshop_dispatch.types import Job, ScheduledTask, ScheduleReport, Task
from jobshop_dispatch.validation import validate_jobs, validate_maintenance_windows


def jobs_from_dict(data: list[dict[str, Any]]) -> list[Job]:
    """Build jobs from the camelCase JSON form.

    Job ids default to list position; task ids default to "<job>-<index>";
    a task's jobId defaults to its owning job.
    """
    jobs: list[Job] = []
    for position, job_data in enumerate(data):
        job_id = job_data.get("id", position)
        tasks = tuple(
            Task(
                task_id=str(t.get("id", f"{job_id}-{i}")),
                job_id=t.get("jobId", job_id),
                machine_id=t["machineId"],
                duration=t["duration"],
                deadline=t.get("deadline"),
                setup_time=t.get("setupTime"),
                maintenance_aware=bool(t.get("maintenanceAware", False)),
            )
            for i, t in enumerate(job_data.get("tasks", []))
        )
        jobs.append(Job(
            job_id=job_id,
            tasks=tasks,
            priority=job_data.get("priority"),
            deadline=job_data.get("deadline"),
        ))
    return jobs


def load_problem_json(path: str | Path) -> tuple[list[Job], ScheduleConfig]:
    """Load jobs and scheduling config from a JSON problem file.

    The JSON file has the front-end format:
    {
        "jobs": [
            {"id": 0, "tasks": [{"id": "0-0", "machineId": 0, "duration": 3}, ...]},
            ...
        ],
        "config": {
            "algorithm": "priority",
            "considerMaintenance": true,
            "maintenanceWindows": [
                {"id": "mw-1", "machineId": 0, "startTime": 0, "duration": 5}
            ]
        }
    }

    Raises ValueError if validation fails.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    jobs = jobs_from_dict(data.get("jobs", []))
    config = config_from_dict(data.get("config"))

    errors = [str(issue) for issue in validate_jobs(jobs)]
    errors.extend(validate_maintenance_windows(config.maintenance_windows))
    if errors:
        raise ValueError(
            f"Validation errors in {path.name}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    return jobs, config


def _entry_to_dict(entry: ScheduledTask) -> dict[str, Any]:
    return {
        "id": entry.task_id,
        "jobId": entry.job_id,
        "machineId": entry.machine_id,
        "duration": entry.duration,
        "startTime": entry.start,
    }


def report_to_dict(report: ScheduleReport) -> dict[str, Any]:
    """Serialise a report to the camelCase form consumers render or export."""
    metrics = report.metrics
    return {
        "schedule": [_entry_to_dict(e) for e in report.schedule],
        "makespan": report.makespan,
        "metrics": {
            "machineUtilization": {
                str(m): u for m, u in metrics.machine_utilization.items()
            },
            "averageWaitTime": metrics.average_wait_time,
            "longestJob": [_entry_to_dict(e) for e in metrics.longest_job],
            "criticalPath": [_entry_to_dict(e) for e in metrics.critical_path],
            "setupTimeTotal": metrics.setup_time_total,
            "deadlineMisses": metrics.deadline_misses,
        },
        "unscheduled": list(report.unscheduled),
    }
