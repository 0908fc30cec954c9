"""Tests for the strategy calculator: stint counts, layouts and policy."""

from datetime import timedelta

import pytest

from pit_planner.core.calculator import (
    all_pits_mandatory,
    calculate,
    calculate_equal_stint_strategy,
    calculate_long_stint_strategy,
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
from pit_planner.core.stint import Stint
from pit_planner.core.strategy import StrategyKind

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _make_input(
    race_s: float = 7200,
    lap_s: float = 138,
    fuel_per_lap: float = 3.93,
    fuel_capacity: int = 110,
    mandatory_pits: int | None = None,
    max_stint_s: float | None = None,
) -> StrategyInput:
    return StrategyInput(
        race_duration=timedelta(seconds=race_s),
        avg_laptime=timedelta(seconds=lap_s),
        fuel_per_lap=fuel_per_lap,
        fuel_capacity=fuel_capacity,
        mandatory_pits=mandatory_pits,
        permitted_max_stint_length=(
            timedelta(seconds=max_stint_s) if max_stint_s is not None else None
        ),
    )


def _sample_inputs() -> list[StrategyInput]:
    return [
        _make_input(),
        _make_input(race_s=600),
        _make_input(mandatory_pits=2),
        _make_input(race_s=600, mandatory_pits=2),
        _make_input(fuel_capacity=125, max_stint_s=3540),
        _make_input(fuel_capacity=125, max_stint_s=3540, mandatory_pits=1),
        _make_input(race_s=8640, fuel_capacity=125, max_stint_s=3540),
        _make_input(race_s=14400, fuel_per_lap=3.25, mandatory_pits=3),
        _make_input(race_s=14400, fuel_per_lap=3.90),
        _make_input(race_s=21600, lap_s=212, fuel_per_lap=4.6, fuel_capacity=75),
        _make_input(race_s=86400, lap_s=225.4, fuel_per_lap=2.71, fuel_capacity=90),
        _make_input(race_s=5520, max_stint_s=2760),
        _make_input(fuel_per_lap=3.9285714286),
    ]


# ---------------------------------------------------------------------------
# Fuel / time conversions
# ---------------------------------------------------------------------------


def test_fuel_duration_truncates_partial_laps() -> None:
    """110 / 3.93 = 27.99 laps must count as 27 whole laps."""
    inp = _make_input()
    assert fuel_duration(inp, 110) == timedelta(seconds=27 * 138)
    assert fuel_duration(inp, 3.92) == timedelta(0)
    assert max_fuel_duration(inp) == timedelta(seconds=3726)


def test_fuel_duration_exact_whole_laps() -> None:
    """A tank holding exactly N laps of fuel must give N laps."""
    inp = _make_input(fuel_per_lap=2.5, fuel_capacity=100)
    assert max_fuel_duration(inp) == 40 * timedelta(seconds=138)


def test_fuel_duration_ignores_float_noise() -> None:
    """7 / 0.07 must be 100 laps even if the float division lands below."""
    inp = _make_input(lap_s=60, fuel_per_lap=0.07, fuel_capacity=7)
    assert max_fuel_duration(inp) == timedelta(seconds=6000)


def test_fuel_duration_never_overstates_tank() -> None:
    """110 / 3.9285714286 is just under 28 laps; only 27 fit in the tank."""
    inp = _make_input(fuel_per_lap=3.9285714286)
    assert max_fuel_duration(inp) == 27 * timedelta(seconds=138)
    assert fuel_for_stint(inp, max_fuel_duration(inp)) <= 110

    for strat in calculate(inp):
        assert max(s.fuel_required for s in strat.stints) <= 110


def test_laps_for_stint_rounds_partial_laps_up() -> None:
    """A started lap is driven to the line."""
    inp = _make_input()
    assert laps_for_stint(inp, timedelta(seconds=2760)) == 20
    assert laps_for_stint(inp, timedelta(seconds=2761)) == 21
    assert laps_for_stint(inp, timedelta(seconds=1)) == 1
    assert laps_for_stint(inp, timedelta(0)) == 0


def test_fuel_for_stint_rounds_up() -> None:
    """Fuel is ceil(laps * fuel_per_lap) on a rounded-up lap count."""
    inp = _make_input()
    # 20 laps * 3.93 = 78.6
    assert fuel_for_stint(inp, timedelta(seconds=2760)) == 79
    # 21 laps * 3.93 = 82.53
    assert fuel_for_stint(inp, timedelta(seconds=2761)) == 83


def test_fuel_for_stint_exact_product_not_bumped() -> None:
    """100 laps * 0.07 is exactly 7; float noise must not add a litre."""
    inp = _make_input(lap_s=60, fuel_per_lap=0.07, fuel_capacity=10)
    assert fuel_for_stint(inp, timedelta(seconds=6000)) == 7


def test_full_tank_stint_never_exceeds_capacity() -> None:
    """The longest fuel-limited stint must fit in the tank."""
    for inp in _sample_inputs():
        fuel = fuel_for_stint(inp, max_fuel_duration(inp))
        assert fuel <= inp.fuel_capacity, f"{inp}: needs {fuel}"


def test_max_stint_time_takes_smaller_limit() -> None:
    """Regulation caps the stint only when it is shorter than the tank."""
    assert max_stint_time(_make_input()) == timedelta(seconds=3726)
    capped = _make_input(fuel_capacity=125, max_stint_s=3540)
    assert max_stint_time(capped) == timedelta(seconds=3540)
    loose = _make_input(max_stint_s=5000)
    assert max_stint_time(loose) == timedelta(seconds=3726)


# ---------------------------------------------------------------------------
# Stint counts
# ---------------------------------------------------------------------------


def test_fuel_req_only() -> None:
    """Two hours on 110 L at 3.93 L/lap needs two stints; ten minutes one."""
    assert required_stints(_make_input()) == 2
    assert required_stints(_make_input(race_s=600)) == 1


def test_stints_mandatory_pit() -> None:
    """Two mandatory pits force three stints even in a short race."""
    assert required_stints(_make_input(mandatory_pits=2)) == 3
    assert required_stints(_make_input(race_s=600, mandatory_pits=2)) == 3


def test_stints_max_time() -> None:
    """A 59-minute stint cap forces three stints in a two-hour race."""
    inp = _make_input(fuel_capacity=125, max_stint_s=3540)
    assert fuel_required_stints(inp) == 2
    assert permitted_stint_length_required_stints(inp) == 3
    assert required_stints(inp) == 3


def test_unconstrained_counts_default_to_one() -> None:
    """Without regulations the mandatory and cap minimums are one stint."""
    inp = _make_input()
    assert mandatory_pits_required_stints(inp) == 1
    assert permitted_stint_length_required_stints(inp) == 1


def test_stint_cap_on_exact_boundary() -> None:
    """A race exactly two caps long needs exactly two stints."""
    inp = _make_input(race_s=5520, max_stint_s=2760)
    assert permitted_stint_length_required_stints(inp) == 2
    assert required_stints(inp) == 2


def test_all_mandatory_pits() -> None:
    """One mandatory pit of two needed stops leaves a free stop; two do not."""
    inp = _make_input(fuel_capacity=125, max_stint_s=3540, mandatory_pits=1)
    assert all_pits_mandatory(inp) is False

    inp = _make_input(fuel_capacity=125, max_stint_s=3540, mandatory_pits=2)
    assert all_pits_mandatory(inp) is True


def test_all_pits_mandatory_false_without_mandatory_pits() -> None:
    assert all_pits_mandatory(_make_input(race_s=14400)) is False


# ---------------------------------------------------------------------------
# Stint and stop generation
# ---------------------------------------------------------------------------


def test_calculate_stints_last_stint_takes_remainder() -> None:
    """Stints are carved at the target and the remainder ends the race."""
    inp = _make_input(race_s=14400, fuel_per_lap=3.25)
    stints = calculate_stints(inp, timedelta(seconds=4554))
    assert [s.duration.total_seconds() for s in stints] == [4554, 4554, 4554, 738]
    assert stints[-1].laps == 6
    assert stints[-1].fuel_required == 20


def test_calculate_stints_exact_multiple() -> None:
    """A target that divides the race exactly leaves no sliver stint."""
    inp = _make_input(race_s=5520)
    stints = calculate_stints(inp, timedelta(seconds=2760))
    assert len(stints) == 2
    assert all(s.laps == 20 for s in stints)


def test_calculate_stints_zero_race_is_empty() -> None:
    assert calculate_stints(_make_input(race_s=0), timedelta(seconds=60)) == []


def test_calculate_stints_rejects_non_positive_target() -> None:
    with pytest.raises(ValueError, match="target_stint_time"):
        calculate_stints(_make_input(), timedelta(0))


def test_calculate_stops_fuel_covers_upcoming_stint() -> None:
    """Each stop loads the fuel of the stint after it, not before it."""
    stints = [
        Stint(duration=timedelta(seconds=4554), laps=33, fuel_required=108),
        Stint(duration=timedelta(seconds=738), laps=6, fuel_required=20),
    ]
    stops = calculate_stops(stints)
    assert len(stops) == 1
    assert stops[0].lap == 33
    assert stops[0].fuel_to_add == 20


# ---------------------------------------------------------------------------
# Layouts
# ---------------------------------------------------------------------------


def test_calculate_even_stints_strategy() -> None:
    """2h24 with a 59-minute cap splits into three 48-minute stints."""
    inp = _make_input(race_s=8640, fuel_capacity=125, max_stint_s=3540)
    strat = calculate_equal_stint_strategy(inp)

    assert strat.kind is StrategyKind.EQUAL_STINTS
    assert len(strat.stints) == 3
    assert len(strat.stops) == 2
    assert strat.stops[0].lap == 21
    assert strat.stops[1].lap == 42
    assert all(s.duration == timedelta(seconds=2880) for s in strat.stints)
    # 21 laps * 3.93 = 82.53
    assert strat.stops[0].fuel_to_add == 83


def test_calculate_long_stint_strategy() -> None:
    """Four hours on 110 L at 3.25 L/lap: three full tanks and a splash."""
    inp = _make_input(race_s=14400, fuel_per_lap=3.25, mandatory_pits=3)
    strat = calculate_long_stint_strategy(inp)

    assert strat.kind is StrategyKind.LONG_STINTS
    assert len(strat.stints) == 4
    assert len(strat.stops) == 3
    assert strat.stops[0].lap == 33
    assert strat.stops[0].fuel_to_add == 108
    assert [s.lap for s in strat.stops] == [33, 66, 99]
    assert strat.stops[-1].fuel_to_add == 20


# ---------------------------------------------------------------------------
# Top-level policy
# ---------------------------------------------------------------------------


def test_calculate_simple_strategy() -> None:
    """A one-hour race fits one tank: 27 laps needing 88 L."""
    result = calculate(_make_input(race_s=3600, fuel_per_lap=3.25))
    assert len(result) == 1
    strat = result[0]
    assert strat.kind is StrategyKind.SINGLE_STINT
    assert strat.stops == ()
    assert strat.stints[0].laps == 27
    assert strat.stints[0].fuel_required == 88


def test_calculates_both_strategies() -> None:
    """Fuel-driven stops offer long stints first, then equal stints."""
    result = calculate(_make_input(race_s=14400, fuel_per_lap=3.90))
    assert [s.kind for s in result] == [
        StrategyKind.LONG_STINTS,
        StrategyKind.EQUAL_STINTS,
    ]


def test_calculates_only_one_strategy_where_appropriate() -> None:
    """All stops being tyre stops leaves only the equal-stint plan."""
    result = calculate(_make_input(race_s=14400, fuel_per_lap=3.90, mandatory_pits=3))
    assert [s.kind for s in result] == [StrategyKind.EQUAL_STINTS]


def test_zero_length_race_is_single_empty_stint() -> None:
    result = calculate(_make_input(race_s=0))
    assert len(result) == 1
    assert result[0].kind is StrategyKind.SINGLE_STINT
    assert result[0].stints == ()


def test_policy_matches_stint_counts() -> None:
    """Result shape follows required_stints and all_pits_mandatory."""
    for inp in _sample_inputs():
        result = calculate(inp)
        if required_stints(inp) == 1:
            assert [s.kind for s in result] == [StrategyKind.SINGLE_STINT]
            assert result[0].stops == ()
        elif all_pits_mandatory(inp):
            assert [s.kind for s in result] == [StrategyKind.EQUAL_STINTS]
        else:
            assert [s.kind for s in result] == [
                StrategyKind.LONG_STINTS,
                StrategyKind.EQUAL_STINTS,
            ]


def test_strategy_structure_invariants() -> None:
    """Stops sit between stints, laps increase, durations sum to the race."""
    for inp in _sample_inputs():
        for strat in calculate(inp):
            assert len(strat.stops) == len(strat.stints) - 1
            laps = [s.lap for s in strat.stops]
            assert laps == sorted(set(laps))

            total = sum((s.duration for s in strat.stints), timedelta(0))
            assert total == inp.race_duration

            cumulative = 0
            for stint, stop, upcoming in zip(
                strat.stints, strat.stops, strat.stints[1:]
            ):
                cumulative += stint.laps
                assert stop.lap == cumulative
                assert stop.fuel_to_add == upcoming.fuel_required


def test_no_stint_exceeds_limits() -> None:
    """Every stint respects both the tank and the regulatory cap."""
    for inp in _sample_inputs():
        for strat in calculate(inp):
            for stint in strat.stints:
                assert stint.duration <= max_stint_time(inp)
                assert stint.fuel_required <= inp.fuel_capacity


def test_equal_stints_use_required_count() -> None:
    for inp in _sample_inputs():
        if required_stints(inp) > 1:
            strat = calculate_equal_stint_strategy(inp)
            assert len(strat.stints) == required_stints(inp)


def test_calculate_is_deterministic() -> None:
    inp = _make_input(race_s=21600, lap_s=212, fuel_per_lap=4.6, fuel_capacity=75)
    assert calculate(inp) == calculate(inp)
