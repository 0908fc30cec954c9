"""Stint and pit stop records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class Stint:
    """One continuous driving segment.

    Attributes:
        duration: Time driven in this stint.
        laps: Laps completed, rounded up from ``duration / avg_laptime``.
        fuel_required: Fuel consumed, rounded up from
            ``laps * fuel_per_lap``.
    """

    duration: timedelta
    laps: int
    fuel_required: int


@dataclass(frozen=True)
class Stop:
    """A pit stop between two consecutive stints.

    Attributes:
        lap: Cumulative lap count at which the car pits.
        fuel_to_add: Fuel loaded, enough for the stint that follows.
    """

    lap: int
    fuel_to_add: int
