"""Fuel and pit stop strategy calculator.

The number of stints a race needs is the largest of three independent
minimums:

* fuel range -- how far a full tank goes,
* mandatory pit stops -- ``mandatory_pits + 1`` stints,
* the regulatory stint cap -- how many capped stints cover the race.

From that count two layouts are produced: *long* stints, each as long as
fuel and regulations allow with the last one absorbing the remainder, and
*equal* stints spreading the race evenly.  A race that fits in one stint
gets a single-stint plan and nothing else.

Rounding directions are deliberate and must not be unified:

* laps from fuel are truncated (a partial lap's fuel cannot finish a lap),
* laps from time are rounded up (a started lap is driven to the line),
* fuel from laps is rounded up (never run dry mid-lap).
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from pit_planner.core.inputs import StrategyInput
from pit_planner.core.stint import Stint, Stop
from pit_planner.core.strategy import Strategy, StrategyKind

logger = logging.getLogger(__name__)

# Quotients and products are rounded to this many decimals before floor/ceil
# so that float noise (``100 * 0.07 == 7.000000000000001``) is not counted.
_ROUNDING_DECIMALS: int = 9


def _floor(value: float) -> int:
    return math.floor(round(value, _ROUNDING_DECIMALS))


def _ceil(value: float) -> int:
    return math.ceil(round(value, _ROUNDING_DECIMALS))


def _ratio(a: timedelta, b: timedelta) -> float:
    return a.total_seconds() / b.total_seconds()


# ---------------------------------------------------------------------------
# Fuel / time conversions
# ---------------------------------------------------------------------------


def fuel_duration(inp: StrategyInput, fuel: float) -> timedelta:
    """Return how long the car can drive on *fuel*.

    Only whole laps count: ``floor(fuel / fuel_per_lap)`` laps of
    ``avg_laptime`` each.  The count never needs more than *fuel* once
    refuelled with :func:`fuel_for_stint`.
    """
    laps = _floor(fuel / inp.fuel_per_lap)
    # A quotient just under a whole number may have been snapped up to it.
    if laps > 0 and _ceil(laps * inp.fuel_per_lap) > fuel:
        laps -= 1
    return laps * inp.avg_laptime


def max_fuel_duration(inp: StrategyInput) -> timedelta:
    """Longest stint a full tank permits."""
    return fuel_duration(inp, inp.fuel_capacity)


def laps_for_stint(inp: StrategyInput, length: timedelta) -> int:
    """Laps driven in a stint of *length*, a partial lap counting as one."""
    return _ceil(_ratio(length, inp.avg_laptime))


def fuel_for_stint(inp: StrategyInput, length: timedelta) -> int:
    """Fuel needed to drive a stint of *length*, rounded up."""
    return _ceil(laps_for_stint(inp, length) * inp.fuel_per_lap)


def max_stint_time(inp: StrategyInput) -> timedelta:
    """The longest possible stint given both the tank and the regulations."""
    fuel_limit = max_fuel_duration(inp)
    if inp.permitted_max_stint_length is None:
        return fuel_limit
    return min(inp.permitted_max_stint_length, fuel_limit)


# ---------------------------------------------------------------------------
# Stint counts
# ---------------------------------------------------------------------------


def fuel_required_stints(inp: StrategyInput) -> int:
    """Stints required by fuel consumption and capacity alone."""
    return _ceil(_ratio(inp.race_duration, max_fuel_duration(inp)))


def mandatory_pits_required_stints(inp: StrategyInput) -> int:
    """Stints required by the mandatory pit count."""
    if inp.mandatory_pits is None:
        return 1
    return inp.mandatory_pits + 1


def permitted_stint_length_required_stints(inp: StrategyInput) -> int:
    """Stints required by the maximum permitted stint length."""
    if inp.permitted_max_stint_length is None:
        return 1
    return _ceil(_ratio(inp.race_duration, inp.permitted_max_stint_length))


def required_stints(inp: StrategyInput) -> int:
    """Stints required once fuel and regulations are both considered."""
    return max(
        fuel_required_stints(inp),
        mandatory_pits_required_stints(inp),
        permitted_stint_length_required_stints(inp),
    )


def all_pits_mandatory(inp: StrategyInput) -> bool:
    """Return True if every stop fuel and regulations force is a mandatory one.

    Mandatory stops are assumed to include a tyre change, so when they
    already cover every stop the car would make anyway, running long
    stints gains nothing over equal ones.
    """
    if inp.mandatory_pits is None:
        return False
    time_required_stints = _ceil(_ratio(inp.race_duration, max_stint_time(inp)))
    return time_required_stints - 1 <= inp.mandatory_pits


# ---------------------------------------------------------------------------
# Stint and stop generation
# ---------------------------------------------------------------------------


def calculate_stints(inp: StrategyInput, target_stint_time: timedelta) -> list[Stint]:
    """Split the race into stints of at most *target_stint_time*.

    The final stint takes whatever time remains.

    Raises:
        ValueError: If *target_stint_time* is not positive while race
            time remains.
    """
    remaining = inp.race_duration
    if remaining > timedelta(0) and target_stint_time <= timedelta(0):
        raise ValueError("target_stint_time must be > 0.")

    stints: list[Stint] = []
    while remaining > timedelta(0):
        this_stint = min(remaining, target_stint_time)
        stints.append(
            Stint(
                duration=this_stint,
                laps=laps_for_stint(inp, this_stint),
                fuel_required=fuel_for_stint(inp, this_stint),
            )
        )
        remaining = max(remaining - this_stint, timedelta(0))

    return stints


def calculate_stops(stints: list[Stint]) -> list[Stop]:
    """Return the stops between consecutive *stints*.

    Each stop happens on the cumulative lap count of the stints before it
    and loads the fuel the following stint needs.
    """
    stops: list[Stop] = []
    lap = 0
    for previous, upcoming in zip(stints, stints[1:]):
        lap += previous.laps
        stops.append(Stop(lap=lap, fuel_to_add=upcoming.fuel_required))
    return stops


def _build_strategy(
    inp: StrategyInput,
    kind: StrategyKind,
    target_stint_time: timedelta,
) -> Strategy:
    stints = calculate_stints(inp, target_stint_time)
    stops = [] if kind is StrategyKind.SINGLE_STINT else calculate_stops(stints)
    logger.debug(
        "%s: target %s -> %d stints, %d stops",
        kind.value,
        target_stint_time,
        len(stints),
        len(stops),
    )
    return Strategy(kind=kind, stints=tuple(stints), stops=tuple(stops))


def calculate_equal_stint_strategy(inp: StrategyInput) -> Strategy:
    """Spread the race evenly over the required number of stints."""
    seconds = _ceil(inp.race_duration.total_seconds() / required_stints(inp))
    return _build_strategy(
        inp, StrategyKind.EQUAL_STINTS, timedelta(seconds=seconds)
    )


def calculate_long_stint_strategy(inp: StrategyInput) -> Strategy:
    """Run every stint as long as fuel and regulations allow."""
    return _build_strategy(inp, StrategyKind.LONG_STINTS, max_stint_time(inp))


def calculate_single_stint_strategy(inp: StrategyInput) -> Strategy:
    """Drive the whole race on one tank."""
    return _build_strategy(inp, StrategyKind.SINGLE_STINT, max_stint_time(inp))


def calculate(inp: StrategyInput) -> list[Strategy]:
    """Return every worthwhile strategy for *inp*.

    A race that fits in one stint gets the single-stint plan alone.
    Otherwise the long-stint plan comes first, unless all stops are
    mandatory tyre stops, followed by the equal-stint plan.

    Args:
        inp: Race and car parameters.

    Returns:
        Strategies in presentation order; the first is the preferred one.
    """
    stints_needed = required_stints(inp)
    logger.debug(
        "required stints: fuel=%d mandatory=%d stint_cap=%d -> %d",
        fuel_required_stints(inp),
        mandatory_pits_required_stints(inp),
        permitted_stint_length_required_stints(inp),
        stints_needed,
    )

    if stints_needed == 1:
        return [calculate_single_stint_strategy(inp)]

    result: list[Strategy] = []
    if not all_pits_mandatory(inp):
        # Later stops need no tyre change, so stretching stints saves time.
        result.append(calculate_long_stint_strategy(inp))
    result.append(calculate_equal_stint_strategy(inp))
    return result
