"""Tests for MachineTimeline walk/allocate and earliest_start.

Test data loaded from: data/fixtures/scenarios/timeline.json
"""

from __future__ import annotations

import pytest

from conftest import load_scenarios, placed, task, window

_data = load_scenarios("timeline")


def _timeline(intervals: list[list[int]], machine_id: int = 0):
    """Timeline occupied by maintenance windows at the given spans."""
    from jobshop_dispatch.timeline import MachineTimeline

    return MachineTimeline.from_windows(
        machine_id,
        [window(f"w{i}", machine_id, s, e - s) for i, (s, e) in enumerate(intervals)],
    )


class TestWalk:
    """walk() - read-only leftmost fit."""

    @pytest.mark.parametrize("case", _data["walk"], ids=lambda s: s["id"])
    def test_walk(self, case):
        tl = _timeline(case["intervals"])
        start = tl.walk(case["duration"], case["earliest_start"])
        assert start == case["expected"], case["notes"]

    def test_walk_is_read_only(self):
        tl = _timeline([[2, 4]])
        before = list(tl.intervals)
        tl.walk(3, 0)
        assert tl.intervals == before

    def test_windows_for_other_machines_ignored(self):
        from jobshop_dispatch.timeline import MachineTimeline

        tl = MachineTimeline.from_windows(0, [window("w", 1, 0, 10)])
        assert tl.intervals == []
        assert tl.walk(3) == 0


class TestAllocate:
    """allocate() - walk + commit."""

    def test_sequential_allocates(self):
        from jobshop_dispatch.timeline import MachineTimeline

        tl = MachineTimeline(0)
        first = tl.allocate(task("a", 0, 0, 3))
        second = tl.allocate(task("b", 1, 0, 2))
        assert (first.start, first.finish) == (0, 3)
        assert (second.start, second.finish) == (3, 5)
        assert tl.busy_time == 5

    def test_allocate_fills_earlier_gap(self):
        tl = _timeline([[5, 9]])
        entry = tl.allocate(task("a", 0, 0, 4))
        assert entry.start == 0
        later = tl.allocate(task("b", 0, 0, 2))
        assert later.start == 9

    def test_intervals_stay_sorted(self):
        from jobshop_dispatch.timeline import MachineTimeline

        tl = MachineTimeline(0)
        tl.allocate(task("a", 0, 0, 2), earliest_start=10)
        tl.allocate(task("b", 1, 0, 2), earliest_start=0)
        tl.reserve(window("mw", 0, 4, 1))
        assert [iv.start for iv in tl.intervals] == [0, 4, 10]
        assert [iv.kind for iv in tl.intervals] == ["task", "maintenance", "task"]

    def test_wrong_machine_rejected(self):
        from jobshop_dispatch.timeline import MachineTimeline

        with pytest.raises(ValueError, match="machine 1"):
            MachineTimeline(0).allocate(task("a", 0, 1, 2))

    def test_copy_is_independent(self):
        from jobshop_dispatch.timeline import MachineTimeline

        tl = MachineTimeline(0)
        tl.allocate(task("a", 0, 0, 2))
        branch = tl.copy()
        branch.allocate(task("b", 0, 0, 2))
        assert len(tl.intervals) == 1
        assert len(branch.intervals) == 2


class TestBuildTimelines:

    def test_one_timeline_per_window_machine(self):
        from jobshop_dispatch.timeline import build_timelines

        timelines = build_timelines([
            window("a", 0, 0, 2), window("b", 2, 1, 1), window("c", 0, 5, 1),
        ])
        assert sorted(timelines) == [0, 2]
        assert [iv.owner_id for iv in timelines[0].intervals] == ["a", "c"]


class TestEarliestStart:
    """earliest_start() rebuilt from a committed schedule."""

    def test_after_committed_task(self):
        from jobshop_dispatch.timeline import earliest_start

        schedule = [placed("a", 0, 0, 3, start=0), placed("b", 1, 1, 5, start=0)]
        assert earliest_start(task("c", 2, 0, 2), schedule, [], 0) == 3

    def test_respects_lower_bound(self):
        from jobshop_dispatch.timeline import earliest_start

        schedule = [placed("a", 0, 0, 3, start=0)]
        assert earliest_start(task("c", 2, 0, 2), schedule, [], 6) == 6

    def test_maintenance_blocks_start(self):
        from jobshop_dispatch.timeline import earliest_start

        assert earliest_start(task("c", 0, 0, 3), [], [window("mw", 0, 0, 5)], 0) == 5

    def test_task_and_window_combined(self):
        from jobshop_dispatch.timeline import earliest_start

        schedule = [placed("a", 0, 0, 2, start=0)]
        windows = [window("mw", 0, 3, 2)]
        # [0,2) task, [3,5) maintenance: a 1-unit task fits at 2, a 2-unit one does not
        assert earliest_start(task("c", 1, 0, 1), schedule, windows, 0) == 2
        assert earliest_start(task("d", 1, 0, 2), schedule, windows, 0) == 5
