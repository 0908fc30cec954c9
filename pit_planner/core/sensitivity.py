"""Fuel consumption sensitivity for the strategy calculator.

Answers two questions a strategist asks before the race:

* how does the plan change as fuel consumption drifts
  (:func:`fuel_per_lap_sweep`), and
* how much must the driver save to drop a fuel stop
  (:func:`fuel_saving_target`).

Inputs are perturbed with :func:`dataclasses.replace`; the calculator
itself is untouched.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any

import numpy as np

from pit_planner.core.calculator import (
    calculate,
    fuel_required_stints,
    mandatory_pits_required_stints,
    max_fuel_duration,
    permitted_stint_length_required_stints,
    required_stints,
)
from pit_planner.core.inputs import StrategyInput

# ---------------------------------------------------------------------------
# Fuel-per-lap sweep
# ---------------------------------------------------------------------------


def fuel_per_lap_sweep(
    inp: StrategyInput,
    low: float,
    high: float,
    steps: int = 11,
) -> dict[str, Any]:
    """Evaluate the planner across a range of fuel consumption values.

    Consumption values are ``numpy.linspace(low, high, steps)``.  Values
    at or below zero, or above the tank capacity (the car could not finish
    a single lap), are skipped.

    Args:
        inp: Baseline race parameters.
        low: Lowest fuel per lap to evaluate.
        high: Highest fuel per lap to evaluate.
        steps: Number of evenly spaced values (>= 2).

    Returns:
        Dictionary of equal-length arrays:
            fuel_per_lap        -- Evaluated consumption values (float).
            required_stints     -- Minimum stint count (int).
            min_stops           -- Stops of the preferred strategy (int).
            max_fuel_duration_s -- Full-tank range in seconds (float).

    Raises:
        ValueError: If steps < 2 or low > high.
    """
    if steps < 2:
        raise ValueError("steps must be >= 2.")
    if low > high:
        raise ValueError("low must be <= high.")

    candidates = np.linspace(low, high, steps)
    valid = candidates[(candidates > 0.0) & (candidates <= inp.fuel_capacity)]

    stints = np.empty(valid.size, dtype=np.int64)
    stops = np.empty(valid.size, dtype=np.int64)
    ranges = np.empty(valid.size, dtype=np.float64)

    for i, fpl in enumerate(valid):
        variant = replace(inp, fuel_per_lap=float(fpl))
        stints[i] = required_stints(variant)
        stops[i] = calculate(variant)[0].stop_count
        ranges[i] = max_fuel_duration(variant).total_seconds()

    return {
        "fuel_per_lap": valid,
        "required_stints": stints,
        "min_stops": stops,
        "max_fuel_duration_s": ranges,
    }


# ---------------------------------------------------------------------------
# Fuel saving target
# ---------------------------------------------------------------------------


def fuel_saving_target(inp: StrategyInput) -> float | None:
    """Return the highest fuel per lap that saves one fuel-driven stint.

    Dropping from ``n`` to ``n - 1`` stints needs a full tank to last
    ``race_duration / (n - 1)``, i.e. ``L`` whole laps where
    ``L = ceil(race_duration / ((n - 1) * avg_laptime))``.  The tank gives
    ``floor(capacity / fuel_per_lap)`` laps, so consumption must not
    exceed ``capacity / L``.

    Returns:
        The consumption target, or ``None`` if the race is already a
        single stint or another constraint (mandatory pits, stint cap)
        would still require ``n`` stints.
    """
    n = fuel_required_stints(inp)
    if n <= 1:
        return None
    other_minimum = max(
        mandatory_pits_required_stints(inp),
        permitted_stint_length_required_stints(inp),
    )
    if other_minimum >= n:
        return None

    laps_per_tank = math.ceil(
        inp.race_duration.total_seconds()
        / ((n - 1) * inp.avg_laptime.total_seconds())
    )
    return inp.fuel_capacity / laps_per_tank
