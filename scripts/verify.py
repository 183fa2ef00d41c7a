#!/usr/bin/env python
"""Visual verification report for jobshop-dispatch.

Run:  uv run python scripts/verify.py

Produces a formatted report showing:
  1. Timeline walk cases  -- input/output tables
  2. Dispatch cases per ordering policy  -- commit order, starts, ASCII timelines
  3. Metrics for each dispatch case
  4. Problem files under data/fixtures/problems  -- schedule + validator verdict
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"
PROBLEMS = FIXTURES / "problems"

sys.path.insert(0, str(ROOT / "src"))

from jobshop_dispatch.config import config_from_dict
from jobshop_dispatch.debug import show_schedule
from jobshop_dispatch.greedy import dispatch, schedule_jobs
from jobshop_dispatch.loaders import jobs_from_dict, load_problem_json
from jobshop_dispatch.metrics import compute_metrics
from jobshop_dispatch.timeline import MachineTimeline
from jobshop_dispatch.types import Infeasible, MaintenanceWindow
from jobshop_dispatch.validation import validate_schedule


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


def _verdict(ok: bool) -> str:
    return "PASS" if ok else "FAIL"


# ---------------------------------------------------------------------------
# Section 1: Timeline walk
# ---------------------------------------------------------------------------
def section_walk():
    banner("TIMELINE: EARLIEST FEASIBLE START")
    heading("Function: MachineTimeline.walk(duration, earliest_start) -> int")
    print("    Leftmost fit over the machine's occupied intervals.\n")

    rows = []
    for case in _load(SCENARIOS / "timeline.json")["walk"]:
        windows = [
            MaintenanceWindow(f"w{i}", 0, s, e - s)
            for i, (s, e) in enumerate(case["intervals"])
        ]
        timeline = MachineTimeline.from_windows(0, windows)
        got = timeline.walk(case["duration"], case["earliest_start"])
        occupied = " ".join(f"[{s},{e})" for s, e in case["intervals"]) or "(idle)"
        rows.append([
            case["id"], occupied, str(case["duration"]),
            str(case["earliest_start"]), str(case["expected"]), str(got),
            _verdict(got == case["expected"]),
        ])
    table(["Case", "Occupied", "Dur", "Bound", "Expected", "Got", ""], rows)


# ---------------------------------------------------------------------------
# Section 2: Dispatch
# ---------------------------------------------------------------------------
def section_dispatch():
    banner("GREEDY DISPATCH")
    data = _load(SCENARIOS / "greedy.json")

    for case in data["dispatch"]:
        heading(f"Case: {case['id']}")
        jobs = jobs_from_dict(data["jobs"][case["jobs"]])
        config = config_from_dict(case["config"])
        result = dispatch(jobs, config)
        if isinstance(result, Infeasible):
            print(f"    INFEASIBLE: {', '.join(result.remaining_task_ids)}")
            continue

        rows = []
        for entry, exp_id, exp_start in zip(
            result.schedule, case["expected_order"], case["expected_starts"]
        ):
            ok = entry.task_id == exp_id and entry.start == exp_start
            rows.append([
                entry.task_id, str(entry.job_id), str(entry.machine_id),
                str(entry.start), str(entry.finish),
                f"{exp_id}@{exp_start}", _verdict(ok),
            ])
        table(["Task", "Job", "Machine", "Start", "Finish", "Expected", ""], rows)

        errors = validate_schedule(result, config.active_windows)
        print(f"\n    makespan {result.makespan} (expected {case['expected_makespan']}), "
              f"validator: {_verdict(not errors)}")
        for e in errors:
            print(f"      - {e}")
        print()
        show_schedule(result, config.active_windows)


# ---------------------------------------------------------------------------
# Section 3: Metrics
# ---------------------------------------------------------------------------
def section_metrics():
    banner("METRICS")
    data = _load(SCENARIOS / "greedy.json")

    rows = []
    for case in data["dispatch"]:
        jobs = jobs_from_dict(data["jobs"][case["jobs"]])
        config = config_from_dict(case["config"])
        result = dispatch(jobs, config)
        if isinstance(result, Infeasible):
            continue
        m = compute_metrics(result, config.active_windows, jobs)
        util = ", ".join(f"M{k}={v:.1f}%" for k, v in sorted(m.machine_utilization.items()))
        rows.append([
            case["id"], util, f"{m.average_wait_time:.2f}",
            " ".join(e.task_id for e in m.longest_job),
            " ".join(e.task_id for e in m.critical_path),
        ])
    table(["Case", "Utilization", "Avg wait", "Longest job", "Critical path"], rows)


# ---------------------------------------------------------------------------
# Section 4: Problem files
# ---------------------------------------------------------------------------
def section_problems():
    banner("PROBLEM FILES")

    for path in sorted(PROBLEMS.glob("*.json")):
        heading(f"Problem: {path.name}")
        try:
            jobs, config = load_problem_json(path)
        except ValueError as e:
            print(f"    Rejected by validation:\n{e}")
            continue

        report = schedule_jobs(jobs, config)
        errors = validate_schedule(report.result, config.active_windows)
        print(f"    algorithm {config.algorithm}, {len(report.schedule)} task(s), "
              f"makespan {report.makespan}, validator: {_verdict(not errors)}")
        print()
        show_schedule(report.result, config.active_windows)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    banner("JOBSHOP-DISPATCH   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_walk()
    section_dispatch()
    section_metrics()
    section_problems()

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
