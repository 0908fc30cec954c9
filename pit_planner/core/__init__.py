"""Pure calculation core: inputs, stint layouts and strategy selection."""

from pit_planner.core.calculator import (
    all_pits_mandatory,
    calculate,
    calculate_equal_stint_strategy,
    calculate_long_stint_strategy,
    calculate_single_stint_strategy,
    calculate_stints,
    calculate_stops,
    fuel_duration,
    fuel_for_stint,
    fuel_required_stints,
    laps_for_stint,
    mandatory_pits_required_stints,
    max_fuel_duration,
    max_stint_time,
    permitted_stint_length_required_stints,
    required_stints,
)
from pit_planner.core.inputs import StrategyInput
from pit_planner.core.sensitivity import fuel_per_lap_sweep, fuel_saving_target
from pit_planner.core.stint import Stint, Stop
from pit_planner.core.strategy import Strategy, StrategyKind

__all__ = [
    "Stint",
    "Stop",
    "Strategy",
    "StrategyInput",
    "StrategyKind",
    "all_pits_mandatory",
    "calculate",
    "calculate_equal_stint_strategy",
    "calculate_long_stint_strategy",
    "calculate_single_stint_strategy",
    "calculate_stints",
    "calculate_stops",
    "fuel_duration",
    "fuel_for_stint",
    "fuel_per_lap_sweep",
    "fuel_required_stints",
    "fuel_saving_target",
    "laps_for_stint",
    "mandatory_pits_required_stints",
    "max_fuel_duration",
    "max_stint_time",
    "permitted_stint_length_required_stints",
    "required_stints",
]
