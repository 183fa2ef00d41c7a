"""Task-ordering policies that seed the dispatch pool.

A policy only decides the pool order. The dispatcher still picks the
ready task with the earliest feasible start; pool order breaks ties.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from jobshop_dispatch.logger import get_logger
from jobshop_dispatch.types import Job, Task

logger = get_logger("policy")

OrderingPolicy = Callable[[list[Task], Mapping[int, Job]], list[Task]]

# Score weights for the priority policy
REMAINING_WEIGHT = 0.5
POSITION_WEIGHT = 0.3
DURATION_WEIGHT = 0.2


def task_priority(task: Task, job: Job) -> float:
    """Priority score of a task within its job. Higher is dispatched first.

    Combines the work left in the job from this task on, the job's total
    work less the task's position, and the task's own duration.
    """
    index = job.index_of(task.task_id)
    if index < 0:
        index = 0
    remaining = sum(t.duration for t in job.tasks[index:])
    return (
        remaining * REMAINING_WEIGHT
        + (job.total_duration - index) * POSITION_WEIGHT
        + task.duration * DURATION_WEIGHT
    )


def fifo(pool: list[Task], jobs: Mapping[int, Job]) -> list[Task]:
    """Declaration order: jobs as given, tasks in job order."""
    return list(pool)


def shortest_processing_time(pool: list[Task], jobs: Mapping[int, Job]) -> list[Task]:
    """Ascending duration. Equal durations keep declaration order."""
    return sorted(pool, key=lambda t: t.duration)


def earliest_deadline(pool: list[Task], jobs: Mapping[int, Job]) -> list[Task]:
    """Ascending deadline (task deadline, else the job's). No deadline sorts last."""

    def due(task: Task) -> tuple[int, int]:
        deadline = task.deadline
        if deadline is None:
            job = jobs.get(task.job_id)
            deadline = job.deadline if job is not None else None
        if deadline is None:
            return (1, 0)
        return (0, deadline)

    return sorted(pool, key=due)


def highest_priority(pool: list[Task], jobs: Mapping[int, Job]) -> list[Task]:
    """Descending task_priority score. Equal scores keep declaration order."""
    def score(task: Task) -> float:
        job = jobs.get(task.job_id)
        return task_priority(task, job) if job is not None else 0.0

    return sorted(pool, key=score, reverse=True)


_POLICIES: dict[str, OrderingPolicy] = {
    "priority": highest_priority,
    "fifo": fifo,
    "spt": shortest_processing_time,
    # "edd" has always sorted by duration, not by due date
    "edd": shortest_processing_time,
    "deadline": earliest_deadline,
}

FALLBACK_POLICY = "priority"


def available_policies() -> list[str]:
    """Names with an ordering policy behind them."""
    return sorted(_POLICIES)


def register_policy(name: str, policy: OrderingPolicy) -> None:
    """Make a new ordering available under ``name``."""
    _POLICIES[name] = policy


def resolve_policy(name: str) -> OrderingPolicy:
    """Return the ordering policy for an algorithm name.

    Names without an implementation fall back to the priority policy and
    log a warning.
    """
    policy = _POLICIES.get(name)
    if policy is None:
        logger.warning(
            "Algorithm %r has no ordering policy; using %r", name, FALLBACK_POLICY
        )
        return _POLICIES[FALLBACK_POLICY]
    return policy
