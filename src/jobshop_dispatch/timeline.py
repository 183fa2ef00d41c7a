"""MachineTimeline: per-machine occupancy and earliest-slot search.

Provides walk (read-only slot finding) and allocate (commit) over a sorted
list of occupied intervals, plus the stateless earliest_start helper that
rebuilds a machine's occupancy from a committed schedule.
"""

from __future__ import annotations

from bisect import insort
from collections.abc import Iterable
from dataclasses import dataclass, field

from jobshop_dispatch.types import Interval, MaintenanceWindow, ScheduledTask, Task


@dataclass
class MachineTimeline:
    """Mutable occupancy for one machine.

    intervals are kept sorted by start. They may overlap one another
    (two maintenance windows can), which walk tolerates.
    """

    machine_id: int
    intervals: list[Interval] = field(default_factory=list)

    @classmethod
    def from_windows(
        cls, machine_id: int, windows: Iterable[MaintenanceWindow]
    ) -> MachineTimeline:
        """Timeline pre-occupied by this machine's maintenance windows."""
        timeline = cls(machine_id)
        for window in windows:
            if window.machine_id == machine_id:
                timeline.reserve(window)
        return timeline

    @property
    def busy_time(self) -> int:
        """Sum of interval lengths (overlaps counted twice)."""
        return sum(iv.finish - iv.start for iv in self.intervals)

    def reserve(self, window: MaintenanceWindow) -> None:
        """Block a maintenance window on this machine."""
        self._insert(
            Interval(window.start, window.finish, "maintenance", window.window_id)
        )

    def walk(self, duration: int, earliest_start: int = 0) -> int:
        """Read-only: earliest start >= earliest_start where duration fits.

        Leftmost fit. Never considers moving anything already placed.
        """
        candidate = max(0, earliest_start)
        for iv in self.intervals:
            if candidate + duration <= iv.start:
                break
            if candidate < iv.finish:
                candidate = iv.finish
        return candidate

    def allocate(self, task: Task, earliest_start: int = 0) -> ScheduledTask:
        """Walk + commit. Returns the scheduled record."""
        if task.machine_id != self.machine_id:
            raise ValueError(
                f"task {task.task_id!r} runs on machine {task.machine_id}, "
                f"not machine {self.machine_id}"
            )
        start = self.walk(task.duration, earliest_start)
        entry = ScheduledTask(task=task, start=start)
        self._insert(
            Interval(entry.start, entry.finish, "task", task.task_id, task.job_id)
        )
        return entry

    def copy(self) -> MachineTimeline:
        return MachineTimeline(self.machine_id, list(self.intervals))

    def _insert(self, interval: Interval) -> None:
        insort(self.intervals, interval, key=lambda iv: iv.start)


def build_timelines(
    windows: Iterable[MaintenanceWindow] = (),
) -> dict[int, MachineTimeline]:
    """One timeline per machine that has a maintenance window."""
    timelines: dict[int, MachineTimeline] = {}
    for window in windows:
        timeline = timelines.setdefault(
            window.machine_id, MachineTimeline(window.machine_id)
        )
        timeline.reserve(window)
    return timelines


def earliest_start(
    task: Task,
    schedule: Iterable[ScheduledTask],
    windows: Iterable[MaintenanceWindow],
    lower_bound: int = 0,
) -> int:
    """Earliest conflict-free start for ``task`` at or after ``lower_bound``.

    Occupancy is everything committed on the task's machine plus the
    machine's maintenance windows. Pass no windows when maintenance is
    not being considered.
    """
    timeline = MachineTimeline.from_windows(task.machine_id, windows)
    for entry in schedule:
        if entry.machine_id == task.machine_id:
            timeline._insert(
                Interval(entry.start, entry.finish, "task", entry.task_id, entry.job_id)
            )
    return timeline.walk(task.duration, lower_bound)
