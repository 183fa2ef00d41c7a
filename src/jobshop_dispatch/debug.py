"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from collections.abc import Iterable

from jobshop_dispatch.types import MaintenanceWindow, ScheduleResult

_JOB_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def show_schedule(
    result: ScheduleResult,
    windows: Iterable[MaintenanceWindow] = (),
) -> str:
    """Print ASCII machine timelines, one row per machine, one char per unit.

    Legend: '.' = idle, '#' = maintenance, 'A'-'Z' = task of a job
    (jobs lettered in order of first appearance). Returns the string and
    also prints to stdout.
    """
    windows = list(windows)
    width = max(
        [result.makespan] + [w.finish for w in windows]
    )

    job_labels: dict[int, str] = {}
    for entry in result.schedule:
        if entry.job_id not in job_labels:
            job_labels[entry.job_id] = _JOB_LABELS[len(job_labels) % len(_JOB_LABELS)]

    machines = sorted(
        {e.machine_id for e in result.schedule} | {w.machine_id for w in windows}
    )
    rows: dict[int, list[str]] = {m: ["."] * width for m in machines}

    for window in windows:
        for t in range(window.start, window.finish):
            rows[window.machine_id][t] = "#"
    for entry in result.schedule:
        for t in range(entry.start, entry.finish):
            rows[entry.machine_id][t] = job_labels[entry.job_id]

    lines: list[str] = []
    header = "".join(str(t % 10) for t in range(width))
    lines.append(f"{'':>6s}  {header}")
    for machine in machines:
        lines.append(f"{'M' + str(machine):>6s}  {''.join(rows[machine])}")

    lines.append(f"\nmakespan = {result.makespan}")
    if job_labels:
        legend_parts = [f"{v}=job {k}" for k, v in job_labels.items()]
        lines.append(f"Legend: . = idle, # = maintenance, {', '.join(legend_parts)}")

    text = "\n".join(lines)
    print(text)
    return text
