"""Post-processing of a finished schedule into quality metrics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from jobshop_dispatch.types import (
    Job,
    MaintenanceWindow,
    ScheduledTask,
    ScheduleMetrics,
    ScheduleResult,
)


def group_by_job(result: ScheduleResult) -> dict[int, list[ScheduledTask]]:
    """Committed tasks per job, each list sorted by start, jobs by id."""
    groups: dict[int, list[ScheduledTask]] = {}
    for entry in result.schedule:
        groups.setdefault(entry.job_id, []).append(entry)
    return {
        job_id: sorted(groups[job_id], key=lambda e: e.start)
        for job_id in sorted(groups)
    }


def machine_utilization(
    result: ScheduleResult,
    windows: Iterable[MaintenanceWindow] = (),
) -> dict[int, float]:
    """Percentage of the makespan each machine is busy (tasks + maintenance).

    Every machine that appears in the schedule or in a window is reported.
    All values are 0 when the makespan is 0.
    """
    busy: dict[int, int] = {}
    for entry in result.schedule:
        busy[entry.machine_id] = busy.get(entry.machine_id, 0) + entry.duration
    for window in windows:
        busy[window.machine_id] = busy.get(window.machine_id, 0) + window.duration

    if result.makespan <= 0:
        return {machine: 0.0 for machine in busy}
    return {machine: 100.0 * t / result.makespan for machine, t in busy.items()}


def average_wait_time(result: ScheduleResult) -> float:
    """Mean idle gap between consecutive tasks of the same job."""
    waits: list[int] = []
    for entries in group_by_job(result).values():
        for prev, curr in zip(entries, entries[1:]):
            waits.append(max(0, curr.start - prev.finish))
    if not waits:
        return 0.0
    return sum(waits) / len(waits)


def longest_job(result: ScheduleResult) -> tuple[ScheduledTask, ...]:
    """Tasks of the job with the largest total processing time.

    This is not a path through the timeline: machine waits are ignored.
    Ties keep the lowest job id.
    """
    best: list[ScheduledTask] = []
    best_total = -1
    for entries in group_by_job(result).values():
        total = sum(e.duration for e in entries)
        if total > best_total:
            best = entries
            best_total = total
    return tuple(best)


def critical_path(result: ScheduleResult) -> tuple[ScheduledTask, ...]:
    """Chain of back-to-back tasks that ends at the makespan.

    Starting from the last task to finish, repeatedly step to a task that
    finishes exactly when the current one starts: the job predecessor if
    it does, otherwise a task on the same machine. The chain stops at time
    0 or when the start was set by maintenance or idle time.
    """
    if not result.schedule:
        return ()

    job_prev: dict[tuple[int, str], ScheduledTask] = {}
    for entries in group_by_job(result).values():
        for prev, curr in zip(entries, entries[1:]):
            job_prev[(curr.job_id, curr.task_id)] = prev

    by_machine_finish: dict[tuple[int, int], ScheduledTask] = {}
    for entry in result.schedule:
        by_machine_finish.setdefault((entry.machine_id, entry.finish), entry)

    current = max(result.schedule, key=lambda e: e.finish)
    chain = [current]
    while current.start > 0:
        prev = job_prev.get((current.job_id, current.task_id))
        if prev is None or prev.finish != current.start:
            prev = by_machine_finish.get((current.machine_id, current.start))
        if prev is None or prev.start >= current.start:
            break
        chain.append(prev)
        current = prev
    chain.reverse()
    return tuple(chain)


def deadline_misses(
    result: ScheduleResult,
    jobs: Sequence[Job] = (),
) -> int:
    """Tasks finishing after their own deadline plus jobs finishing after theirs."""
    misses = sum(
        1
        for e in result.schedule
        if e.task.deadline is not None and e.finish > e.task.deadline
    )
    groups = group_by_job(result)
    for job in jobs:
        entries = groups.get(job.job_id)
        if job.deadline is None or not entries:
            continue
        if max(e.finish for e in entries) > job.deadline:
            misses += 1
    return misses


def compute_metrics(
    result: ScheduleResult,
    windows: Iterable[MaintenanceWindow] = (),
    jobs: Sequence[Job] = (),
) -> ScheduleMetrics:
    """All metrics for a finished schedule.

    Args:
        result: The committed schedule.
        windows: Maintenance windows honoured during dispatch. Counted as
            busy time in utilisation.
        jobs: Job definitions, only needed for job-level deadlines.
    """
    return ScheduleMetrics(
        machine_utilization=machine_utilization(result, windows),
        average_wait_time=average_wait_time(result),
        longest_job=longest_job(result),
        critical_path=critical_path(result),
        setup_time_total=sum(e.task.setup_time or 0 for e in result.schedule),
        deadline_misses=deadline_misses(result, jobs),
    )
