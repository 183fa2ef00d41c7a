"""Scheduling configuration: algorithm choice and maintenance windows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jobshop_dispatch.logger import get_logger
from jobshop_dispatch.types import MaintenanceWindow

logger = get_logger("config")

# Names accepted in ScheduleConfig.algorithm. Only some have an ordering
# policy behind them; see policy.resolve_policy for the fallback.
ALGORITHMS = ("priority", "fifo", "edd", "spt", "deadline", "maintenance-aware", "dynamic")
DEFAULT_ALGORITHM = "priority"


@dataclass(frozen=True)
class ScheduleConfig:
    """How to order the task pool and which maintenance windows to honour.

    optimize_maintenance, balance_load and minimize_setup are accepted so
    that callers can round-trip their settings; the greedy dispatcher
    does not act on them.
    """

    algorithm: str = DEFAULT_ALGORITHM
    consider_maintenance: bool = False
    maintenance_windows: tuple[MaintenanceWindow, ...] = ()
    optimize_maintenance: bool = False
    balance_load: bool = False
    minimize_setup: bool = False

    @property
    def active_windows(self) -> tuple[MaintenanceWindow, ...]:
        """Windows the dispatcher must avoid (none unless maintenance is considered)."""
        if not self.consider_maintenance:
            return ()
        return self.maintenance_windows

    @property
    def ignored_options(self) -> list[str]:
        """Names of options that are set but have no effect."""
        names = ("optimize_maintenance", "balance_load", "minimize_setup")
        return [n for n in names if getattr(self, n)]


def window_from_dict(data: dict[str, Any], index: int = 0) -> MaintenanceWindow:
    """Build a MaintenanceWindow from the camelCase JSON form."""
    return MaintenanceWindow(
        window_id=str(data.get("id", f"mw-{index}")),
        machine_id=data["machineId"],
        start=data["startTime"],
        duration=data["duration"],
        flexible=data.get("flexible", False),
        min_start=data.get("minStartTime"),
        max_start=data.get("maxStartTime"),
        priority=data.get("priority"),
    )


def config_from_dict(data: dict[str, Any] | None) -> ScheduleConfig:
    """Build a ScheduleConfig from the camelCase JSON form.

    Missing keys take their defaults. Unknown algorithm names are kept
    as given, with a warning; the dispatcher falls back to the priority
    policy for them.
    """
    if not data:
        return ScheduleConfig()

    algorithm = data.get("algorithm", DEFAULT_ALGORITHM)
    if algorithm not in ALGORITHMS:
        logger.warning(
            "Unknown algorithm %r; expected one of %s", algorithm, ", ".join(ALGORITHMS)
        )

    windows = tuple(
        window_from_dict(w, i)
        for i, w in enumerate(data.get("maintenanceWindows") or [])
    )
    return ScheduleConfig(
        algorithm=algorithm,
        consider_maintenance=bool(data.get("considerMaintenance", False)),
        maintenance_windows=windows,
        optimize_maintenance=bool(data.get("optimizeMaintenance", False)),
        balance_load=bool(data.get("balanceLoad", False)),
        minimize_setup=bool(data.get("minimizeSetup", False)),
    )
