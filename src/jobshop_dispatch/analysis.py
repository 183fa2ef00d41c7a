"""Completion forecast and efficiency recommendations for a schedule.

Heuristic read-outs for people looking at a schedule. Nothing here feeds
back into dispatch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from jobshop_dispatch.metrics import group_by_job
from jobshop_dispatch.types import ScheduleResult

MACHINE_COUNT_RISK = 3
LONG_TASK_RISK = 10
GAP_THRESHOLD = 2
LOW_UTILIZATION = 60.0


@dataclass(frozen=True)
class CompletionForecast:
    completion_time: datetime
    confidence: int
    risk_factors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Recommendation:
    kind: str  # "critical", "warning" or "improvement"
    title: str
    description: str
    potential_improvement: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _machine_loads(result: ScheduleResult) -> dict[int, int]:
    loads: dict[int, int] = {}
    for entry in result.schedule:
        loads[entry.machine_id] = loads.get(entry.machine_id, 0) + entry.duration
    return loads


def forecast_completion(
    result: ScheduleResult,
    now: datetime | None = None,
    unit: timedelta = timedelta(minutes=1),
) -> CompletionForecast:
    """Estimate wall-clock completion and how much to trust it.

    Confidence drops 5 points per machine and 2 per task, clamped to 0-100.

    Args:
        result: The committed schedule.
        now: When the schedule starts. Defaults to the current time.
        unit: Wall-clock length of one schedule time unit.
    """
    if now is None:
        now = datetime.now()
    completion = now + unit * result.makespan

    loads = _machine_loads(result)
    confidence = max(0, min(100, 100 - len(loads) * 5 - len(result) * 2))

    risks: list[str] = []
    if len(loads) > MACHINE_COUNT_RISK:
        risks.append("Complex machine coordination required")
    if any(e.duration > LONG_TASK_RISK for e in result.schedule):
        risks.append("Long-duration tasks present")
    spread = sum(abs(load - result.makespan / 2) for load in loads.values())
    if loads and spread > result.makespan:
        risks.append("Uneven machine workload distribution")

    return CompletionForecast(
        completion_time=completion, confidence=confidence, risk_factors=risks
    )


def efficiency_recommendations(result: ScheduleResult) -> list[Recommendation]:
    """Suggestions for workload balance, job gaps and idle machines."""
    loads = _machine_loads(result)
    if not loads or result.makespan <= 0:
        return []

    recommendations: list[Recommendation] = []

    avg_load = sum(loads.values()) / len(loads)
    max_load = max(loads.values())
    min_load = min(loads.values())
    if max_load - min_load > avg_load * 0.5:
        recommendations.append(Recommendation(
            kind="critical",
            title="Balance Machine Workload",
            description=(
                "Significant workload imbalance detected. "
                "Consider redistributing tasks across machines."
            ),
            potential_improvement=_round_half_up((max_load - avg_load) / max_load * 100),
        ))

    for job_id, entries in group_by_job(result).items():
        for prev, curr in zip(entries, entries[1:]):
            gap = curr.start - prev.finish
            if gap > GAP_THRESHOLD:
                recommendations.append(Recommendation(
                    kind="warning",
                    title="Reduce Task Gaps",
                    description=(
                        f"Large gap detected between tasks in job {job_id}. "
                        "Consider tightening task sequence."
                    ),
                    potential_improvement=_round_half_up(gap / result.makespan * 100),
                ))
                break

    utilization = [load / result.makespan * 100 for load in loads.values()]
    low = [u for u in utilization if u < LOW_UTILIZATION]
    if low:
        recommendations.append(Recommendation(
            kind="improvement",
            title="Optimize Resource Usage",
            description=(
                f"{len(low)} machine(s) have utilization below "
                f"{LOW_UTILIZATION:.0f}%. Consider consolidating tasks."
            ),
            potential_improvement=_round_half_up((LOW_UTILIZATION - min(utilization)) / 2),
        ))

    return recommendations
