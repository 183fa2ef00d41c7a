"""Input validation for jobs and maintenance windows, and schedule checking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from jobshop_dispatch.types import (
    Interval,
    Job,
    MaintenanceWindow,
    ScheduledTask,
    ScheduleResult,
    ValidationIssue,
)


def validate_jobs(jobs: Sequence[Job]) -> list[ValidationIssue]:
    """Validate jobs before scheduling. Returns issues (empty = valid).

    Checks:
    - At least one job
    - Each job has at least one task
    - Machine ids are non-negative
    - Durations are positive
    - Task ids are unique within a job
    - Each task's job_id names the job that lists it
    - Job ids are unique
    """
    issues: list[ValidationIssue] = []

    if not jobs:
        issues.append(ValidationIssue(job_id=-1, message="At least one job is required"))
        return issues

    seen_jobs: set[int] = set()
    for job in jobs:
        if job.job_id in seen_jobs:
            issues.append(ValidationIssue(job_id=job.job_id, message="Job ID is repeated"))
        seen_jobs.add(job.job_id)

        if not job.tasks:
            issues.append(
                ValidationIssue(job_id=job.job_id, message="Job must have at least one task")
            )
            continue

        seen: set[str] = set()
        for task in job.tasks:
            if task.machine_id < 0:
                issues.append(ValidationIssue(
                    job_id=job.job_id,
                    task_id=task.task_id,
                    message="Machine ID must be non-negative",
                ))
            if task.duration <= 0:
                issues.append(ValidationIssue(
                    job_id=job.job_id,
                    task_id=task.task_id,
                    message="Duration must be positive",
                ))
            if task.task_id in seen:
                issues.append(ValidationIssue(
                    job_id=job.job_id,
                    task_id=task.task_id,
                    message="Task ID is repeated within the job",
                ))
            seen.add(task.task_id)
            if task.job_id != job.job_id:
                issues.append(ValidationIssue(
                    job_id=job.job_id,
                    task_id=task.task_id,
                    message=f"Task belongs to job {task.job_id}, not this job",
                ))

    return issues


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_maintenance_windows(windows: Sequence[MaintenanceWindow]) -> list[str]:
    """Validate maintenance windows. Returns error messages (1-based window numbers)."""
    errors: list[str] = []

    for i, window in enumerate(windows, start=1):
        if not _is_number(window.machine_id) or window.machine_id < 0:
            errors.append(f"Maintenance window {i}: Invalid machine ID")
        if not _is_number(window.start) or window.start < 0:
            errors.append(f"Maintenance window {i}: Invalid start time")
        if not _is_number(window.duration) or window.duration <= 0:
            errors.append(f"Maintenance window {i}: Invalid duration")

    return errors


def validate_schedule(
    result: ScheduleResult,
    windows: Iterable[MaintenanceWindow] = (),
) -> list[str]:
    """Re-check a produced schedule. Returns violations (empty = valid).

    Read-only; never repairs the schedule.

    Checks:
    - Every task has a start time
    - No two intervals on a machine overlap (tasks and maintenance)
    - Within a job, each task finishes before the next one starts
    """
    errors: list[str] = []
    placed: list[ScheduledTask] = []
    timelines: dict[int, list[Interval]] = {}

    for entry in result.schedule:
        if entry.start is None:
            errors.append(f"Task {entry.task_id} (job {entry.job_id}) has no start time")
            continue
        placed.append(entry)
        timelines.setdefault(entry.machine_id, []).append(
            Interval(entry.start, entry.finish, "task", entry.task_id, entry.job_id)
        )

    for window in windows:
        timelines.setdefault(window.machine_id, []).append(
            Interval(window.start, window.finish, "maintenance", window.window_id)
        )

    for machine_id, timeline in timelines.items():
        timeline.sort(key=lambda iv: iv.start)
        for current, following in zip(timeline, timeline[1:]):
            if current.finish > following.start:
                errors.append(
                    f"Overlap detected on machine {machine_id}: "
                    f"{current.describe()} overlaps with {following.describe()}"
                )

    sequences: dict[int, list[ScheduledTask]] = {}
    for entry in placed:
        sequences.setdefault(entry.job_id, []).append(entry)

    for job_id, entries in sequences.items():
        entries.sort(key=lambda e: e.start)
        for current, following in zip(entries, entries[1:]):
            if current.finish > following.start:
                errors.append(
                    f"Invalid task sequence in job {job_id}: task {current.task_id} "
                    f"on machine {current.machine_id} must complete before task "
                    f"{following.task_id} on machine {following.machine_id} can start"
                )

    return errors
