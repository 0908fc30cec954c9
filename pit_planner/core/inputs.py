"""Race input model for the strategy calculator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# Longest duration a timedelta can hold.
_MAX_DURATION_S: float = timedelta.max.total_seconds()


@dataclass(frozen=True)
class StrategyInput:
    """Everything the calculator needs to know about a race and a car.

    Attributes:
        race_duration: Total race time.
        avg_laptime: Average time to complete one lap.
        fuel_per_lap: Fuel consumed per lap, in the same unit as
            ``fuel_capacity``.
        fuel_capacity: Maximum fuel the car can carry.
        mandatory_pits: Stops the rules require regardless of fuel.  Each
            one is assumed to include a tyre change.
        permitted_max_stint_length: Regulatory ceiling on a single stint.
    """

    race_duration: timedelta
    avg_laptime: timedelta
    fuel_per_lap: float
    fuel_capacity: int
    mandatory_pits: int | None = None
    permitted_max_stint_length: timedelta | None = None

    def __post_init__(self) -> None:
        """Validate race parameters."""
        if self.race_duration < timedelta(0):
            raise ValueError("race_duration must be >= 0.")
        if self.avg_laptime <= timedelta(0):
            raise ValueError("avg_laptime must be > 0.")
        if self.fuel_per_lap <= 0.0:
            raise ValueError("fuel_per_lap must be > 0.")
        if self.fuel_capacity <= 0:
            raise ValueError("fuel_capacity must be > 0.")
        if self.fuel_capacity < self.fuel_per_lap:
            raise ValueError("fuel_capacity must cover at least one lap.")
        tank_range_s = (
            self.fuel_capacity / self.fuel_per_lap
        ) * self.avg_laptime.total_seconds()
        if tank_range_s >= _MAX_DURATION_S:
            raise ValueError("fuel_per_lap is too small: tank range overflows.")
        if self.mandatory_pits is not None and self.mandatory_pits < 0:
            raise ValueError("mandatory_pits must be >= 0.")
        if (
            self.permitted_max_stint_length is not None
            and self.permitted_max_stint_length <= timedelta(0)
        ):
            raise ValueError("permitted_max_stint_length must be > 0.")
