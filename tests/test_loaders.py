"""Tests for JSON problem loading and report serialisation.

Test data loaded from: data/fixtures/problems/*.json
"""

from __future__ import annotations

import json
import logging

import pytest

from conftest import problem_path


class TestLoadProblem:

    def test_two_by_two(self):
        from jobshop_dispatch.loaders import load_problem_json

        jobs, config = load_problem_json(problem_path("two_by_two"))
        assert [job.job_id for job in jobs] == [0, 1]
        assert [t.task_id for t in jobs[1].tasks] == ["1-0", "1-1"]
        assert jobs[1].tasks[1].machine_id == 0
        assert jobs[1].tasks[1].duration == 4
        assert config.algorithm == "priority"
        assert config.active_windows == ()

    def test_windows_loaded(self):
        from jobshop_dispatch.loaders import load_problem_json

        _, config = load_problem_json(problem_path("three_by_three"))
        assert config.algorithm == "fifo"
        assert config.consider_maintenance is True
        (mw,) = config.active_windows
        assert (mw.window_id, mw.machine_id, mw.start, mw.duration) == ("mw-1", 0, 12, 3)

    def test_defaults_filled_in(self):
        from jobshop_dispatch.loaders import load_problem_json

        jobs, _ = load_problem_json(problem_path("maintenance_blocked"))
        (only,) = jobs[0].tasks
        assert only.task_id == "0-0"
        assert only.job_id == 0

    def test_invalid_problem_raises(self):
        from jobshop_dispatch.loaders import load_problem_json

        with pytest.raises(ValueError) as excinfo:
            load_problem_json(problem_path("invalid"))
        message = str(excinfo.value)
        assert "invalid.json" in message
        assert "Machine ID must be non-negative" in message
        assert "Duration must be positive" in message
        assert "Job 1: Job must have at least one task" in message
        assert "Maintenance window 1: Invalid start time" in message

    def test_minimal_file(self, tmp_path):
        from jobshop_dispatch.loaders import load_problem_json

        path = tmp_path / "tiny.json"
        path.write_text(json.dumps({"jobs": [{"tasks": [{"machineId": 2, "duration": 1}]}]}))
        jobs, config = load_problem_json(path)
        assert jobs[0].job_id == 0
        assert jobs[0].tasks[0].machine_id == 2
        assert config.algorithm == "priority"


class TestConfigFromDict:

    def test_known_algorithm_is_quiet(self, caplog):
        from jobshop_dispatch.config import config_from_dict

        with caplog.at_level(logging.WARNING, logger="jobshop_dispatch"):
            config = config_from_dict({"algorithm": "dynamic"})
        assert config.algorithm == "dynamic"
        assert caplog.records == []

    def test_unknown_algorithm_warns_and_is_kept(self, caplog):
        from jobshop_dispatch.config import config_from_dict

        with caplog.at_level(logging.WARNING, logger="jobshop_dispatch"):
            config = config_from_dict({"algorithm": "genetic"})
        assert config.algorithm == "genetic"
        assert "Unknown algorithm 'genetic'" in caplog.text


class TestEndToEnd:
    """Load, schedule, validate: the order callers are expected to follow."""

    @pytest.mark.parametrize(
        "name", ["two_by_two", "three_by_three", "maintenance_blocked"]
    )
    def test_schedule_validates(self, name):
        from jobshop_dispatch.greedy import schedule_jobs
        from jobshop_dispatch.loaders import load_problem_json
        from jobshop_dispatch.validation import validate_schedule

        jobs, config = load_problem_json(problem_path(name))
        report = schedule_jobs(jobs, config)
        assert report.feasible
        assert validate_schedule(report.result, config.active_windows) == []

    def test_blocked_start(self):
        from jobshop_dispatch.greedy import schedule_jobs
        from jobshop_dispatch.loaders import load_problem_json

        jobs, config = load_problem_json(problem_path("maintenance_blocked"))
        report = schedule_jobs(jobs, config)
        assert report.schedule[0].start >= 5


class TestReportToDict:

    def test_shape(self):
        from jobshop_dispatch.greedy import schedule_jobs
        from jobshop_dispatch.loaders import load_problem_json, report_to_dict

        jobs, config = load_problem_json(problem_path("two_by_two"))
        data = report_to_dict(schedule_jobs(jobs, config))

        assert data["makespan"] == 7
        assert data["schedule"][0] == {
            "id": "1-0", "jobId": 1, "machineId": 1, "duration": 2, "startTime": 0,
        }
        assert set(data["metrics"]) == {
            "machineUtilization", "averageWaitTime", "longestJob",
            "criticalPath", "setupTimeTotal", "deadlineMisses",
        }
        assert data["metrics"]["machineUtilization"]["0"] == pytest.approx(100.0)
        assert data["unscheduled"] == []
        json.dumps(data)
