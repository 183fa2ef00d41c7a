"""Greedy dispatcher: builds a schedule one committed task at a time.

Each round looks at every ready task (all job predecessors committed),
asks its machine timeline for the earliest feasible start, and commits
the task that can start soonest. The ordering policy only breaks ties.
Single pass, no backtracking.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from jobshop_dispatch.config import ScheduleConfig
from jobshop_dispatch.logger import get_logger
from jobshop_dispatch.metrics import compute_metrics
from jobshop_dispatch.policy import resolve_policy
from jobshop_dispatch.timeline import MachineTimeline, build_timelines
from jobshop_dispatch.types import (
    Infeasible,
    InfeasibleError,
    Job,
    ScheduledTask,
    ScheduleMetrics,
    ScheduleReport,
    ScheduleResult,
    Task,
)

logger = get_logger("greedy")


def _is_ready(
    task: Task,
    jobs: dict[int, Job],
    committed: set[tuple[int, str]],
) -> bool:
    """Whether every task before ``task`` in its job is committed.

    A task whose job is missing, or whose job does not list it, is never
    ready.
    """
    job = jobs.get(task.job_id)
    if job is None:
        return False
    index = job.index_of(task.task_id)
    if index < 0:
        return False
    return all((job.job_id, t.task_id) in committed for t in job.tasks[:index])


def dispatch(
    jobs: Sequence[Job],
    config: ScheduleConfig | None = None,
) -> ScheduleResult | Infeasible:
    """Assign a start time to every task, earliest feasible start first.

    Args:
        jobs: Jobs to schedule. Tasks are looked up in their owning job by
            ``task.job_id``.
        config: Algorithm and maintenance settings. Defaults to priority
            ordering with no maintenance.

    Returns:
        ScheduleResult with tasks in commit order, or Infeasible carrying
        the partial schedule when some tasks can never become ready.
    """
    if config is None:
        config = ScheduleConfig()
    for option in config.ignored_options:
        logger.info("Option %s is not supported by the greedy dispatcher; ignored", option)

    by_id = {job.job_id: job for job in jobs}
    policy = resolve_policy(config.algorithm)
    pool = policy([task for job in jobs for task in job.tasks], by_id)

    timelines = build_timelines(config.active_windows)
    schedule: list[ScheduledTask] = []
    committed: set[tuple[int, str]] = set()
    job_finish: dict[int, int] = {}

    while pool:
        best_index = -1
        best_start = 0
        for i, task in enumerate(pool):
            if not _is_ready(task, by_id, committed):
                continue
            timeline = timelines.get(task.machine_id)
            lower_bound = job_finish.get(task.job_id, 0)
            if timeline is None:
                start = lower_bound
            else:
                start = timeline.walk(task.duration, lower_bound)
            if best_index < 0 or start < best_start:
                best_index = i
                best_start = start

        if best_index < 0:
            remaining = tuple(t.task_id for t in pool)
            logger.warning(
                "No ready task with %d pending; stopping after %d committed: %s",
                len(pool), len(schedule), ", ".join(remaining),
            )
            return Infeasible(
                partial=ScheduleResult.from_schedule(schedule),
                remaining_task_ids=remaining,
            )

        task = pool.pop(best_index)
        timeline = timelines.setdefault(task.machine_id, MachineTimeline(task.machine_id))
        entry = timeline.allocate(task, job_finish.get(task.job_id, 0))
        schedule.append(entry)
        committed.add((task.job_id, task.task_id))
        job_finish[task.job_id] = entry.finish
        logger.debug(
            "Committed %s (job %d) on machine %d at %d-%d",
            task.task_id, task.job_id, task.machine_id, entry.start, entry.finish,
        )

    result = ScheduleResult.from_schedule(schedule)
    logger.info(
        "Scheduled %d task(s) with %r ordering, makespan %d",
        len(result), config.algorithm, result.makespan,
    )
    return result


def schedule_jobs(
    jobs: Iterable[Job],
    config: ScheduleConfig | None = None,
    *,
    strict: bool = False,
) -> ScheduleReport:
    """Schedule jobs and compute metrics for the result.

    Run validation.validate_jobs first; behaviour on malformed jobs
    (negative machine ids, non-positive durations) is undefined.

    Args:
        jobs: Jobs to schedule.
        config: Algorithm and maintenance settings.
        strict: Raise instead of returning a partial report when some
            tasks can never become ready.

    Returns:
        ScheduleReport with the schedule, makespan, metrics and the ids of
        any tasks left unscheduled.

    Raises:
        InfeasibleError: Only when ``strict`` is set and dispatch stops early.
    """
    jobs = list(jobs)
    if config is None:
        config = ScheduleConfig()
    if not jobs:
        return ScheduleReport(result=ScheduleResult(), metrics=ScheduleMetrics())

    outcome = dispatch(jobs, config)
    if isinstance(outcome, Infeasible):
        if strict:
            raise InfeasibleError(
                remaining_task_ids=outcome.remaining_task_ids,
                scheduled_count=len(outcome.partial),
                reason="tasks never became ready",
            )
        result = outcome.partial
        unscheduled = outcome.remaining_task_ids
    else:
        result = outcome
        unscheduled = ()

    metrics = compute_metrics(result, config.active_windows, jobs)
    return ScheduleReport(result=result, metrics=metrics, unscheduled=unscheduled)
