"""Strategy model: a tagged stint layout with its pit stops.

Each strategy carries the same payload (stints and the stops between them)
and a ``kind`` tag saying how the stints were laid out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pit_planner.core.stint import Stint, Stop


class StrategyKind(Enum):
    """How the race time was split into stints."""

    SINGLE_STINT = "single_stint"
    LONG_STINTS = "long_stints"
    EQUAL_STINTS = "equal_stints"


_TITLES: dict[StrategyKind, str] = {
    StrategyKind.SINGLE_STINT: "Single Stint",
    StrategyKind.LONG_STINTS: "Longer Stints",
    StrategyKind.EQUAL_STINTS: "Equal Stints",
}


@dataclass(frozen=True)
class Strategy:
    """A complete race plan.

    Attributes:
        kind: Stint layout this plan was built with.
        stints: Driving stints in race order.
        stops: Pit stops in race order.  ``stops[i]`` sits between
            ``stints[i]`` and ``stints[i + 1]``, so its length is
            ``len(stints) - 1`` (zero when there are no stints).
    """

    kind: StrategyKind
    stints: tuple[Stint, ...]
    stops: tuple[Stop, ...] = ()

    def __post_init__(self) -> None:
        """Validate the stint/stop structure."""
        if len(self.stops) != max(len(self.stints) - 1, 0):
            raise ValueError("stops length must be len(stints) - 1.")
        laps = [s.lap for s in self.stops]
        if any(b <= a for a, b in zip(laps, laps[1:])):
            raise ValueError("stop laps must be strictly increasing.")
        if self.kind is StrategyKind.SINGLE_STINT and self.stops:
            raise ValueError("a single-stint strategy cannot have stops.")

    @property
    def title(self) -> str:
        """Human-readable name of the layout."""
        return _TITLES[self.kind]

    @property
    def stop_count(self) -> int:
        return len(self.stops)

    @property
    def total_laps(self) -> int:
        return sum(s.laps for s in self.stints)

    @property
    def starting_fuel(self) -> int:
        """Fuel to load on the grid (zero for an empty plan)."""
        return self.stints[0].fuel_required if self.stints else 0

    @property
    def total_fuel(self) -> int:
        return sum(s.fuel_required for s in self.stints)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable view, durations in seconds."""
        return {
            "kind": self.kind.value,
            "title": self.title,
            "stints": [
                {
                    "duration_s": s.duration.total_seconds(),
                    "laps": s.laps,
                    "fuel_required": s.fuel_required,
                }
                for s in self.stints
            ],
            "stops": [
                {"lap": s.lap, "fuel_to_add": s.fuel_to_add} for s in self.stops
            ],
        }
