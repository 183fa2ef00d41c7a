"""Shared test fixtures and data loading for jobshop-dispatch.

All test data lives in data/fixtures/ as JSON files. Problems use the
camelCase front-end format (jobs[].tasks[] with machineId/duration) and
are turned into domain objects through jobshop_dispatch.loaders.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"
PROBLEMS_DIR = FIXTURES_DIR / "problems"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_greedy = _load_json(SCENARIOS_DIR / "greedy.json")
JOB_SETS: dict[str, list[dict]] = _greedy["jobs"]
DISPATCH_CASES: list[dict] = _greedy["dispatch"]


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


def problem_path(name: str) -> Path:
    return PROBLEMS_DIR / f"{name}.json"


# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------
def make_jobs(name: str):
    """Build Job objects for a named job set in greedy.json."""
    from jobshop_dispatch.loaders import jobs_from_dict

    return jobs_from_dict(JOB_SETS[name])


def make_config(data: dict | None):
    from jobshop_dispatch.config import config_from_dict

    return config_from_dict(data)


def dispatch_case(case_id: str) -> dict:
    return next(c for c in DISPATCH_CASES if c["id"] == case_id)


def run_case(case_id: str):
    """Dispatch a named case. Returns (jobs, config, outcome)."""
    from jobshop_dispatch.greedy import dispatch

    case = dispatch_case(case_id)
    jobs = make_jobs(case["jobs"])
    config = make_config(case["config"])
    return jobs, config, dispatch(jobs, config)


def task(task_id: str, job_id: int, machine_id: int, duration: int, **kwargs):
    from jobshop_dispatch.types import Task

    return Task(task_id, job_id, machine_id, duration, **kwargs)


def placed(task_id: str, job_id: int, machine_id: int, duration: int, start):
    """A ScheduledTask built by hand, bypassing the dispatcher."""
    from jobshop_dispatch.types import ScheduledTask

    return ScheduledTask(task(task_id, job_id, machine_id, duration), start)


def window(window_id: str, machine_id: int, start: int, duration: int):
    from jobshop_dispatch.types import MaintenanceWindow

    return MaintenanceWindow(window_id, machine_id, start, duration)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def two_by_two():
    """Job0: (M0,3),(M1,2). Job1: (M1,2),(M0,4)."""
    return make_jobs("two_by_two")


@pytest.fixture
def three_by_three():
    return make_jobs("three_by_three")


@pytest.fixture(autouse=True)
def _clean_logger():
    """Leave the package logger as the library ships it."""
    from jobshop_dispatch.logger import reset_logger

    reset_logger()
    yield
    reset_logger()
