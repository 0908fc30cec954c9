"""CLI entrypoint for the pit-stop and fuel strategy planner.

Examples::

    python main.py 2:00 2:18 3.93 110
    python main.py 4:00 2:18 3.25 110 3
    python main.py --preset gt3-2h-stint-cap --plain
    python main.py --preset gt3-4h --sweep 3.5 4.2 8
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import timedelta

from pit_planner import __version__
from pit_planner.config import PresetError, get_preset, load_presets
from pit_planner.core.calculator import calculate
from pit_planner.core.inputs import StrategyInput
from pit_planner.core.sensitivity import fuel_per_lap_sweep, fuel_saving_target
from pit_planner.parsing import USAGE, StrategyParseError, parse_strategy_args
from pit_planner.rendering import format_duration, render_strategies

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pit-planner",
        description="Plan fuel stops and stint lengths for an endurance race.",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "request",
        nargs="*",
        metavar="VALUE",
        help="race length, lap time, fuel per lap, fuel capacity "
        "[, mandatory pits [, max stint length]]",
    )
    parser.add_argument("--preset", help="use a named preset instead of VALUEs")
    parser.add_argument(
        "--list-presets", action="store_true", help="list known presets and exit"
    )
    parser.add_argument(
        "--plain", action="store_true", help="omit markdown emphasis markers"
    )
    parser.add_argument(
        "--sweep",
        nargs=3,
        type=float,
        metavar=("LOW", "HIGH", "STEPS"),
        help="also tabulate stints/stops across a fuel-per-lap range",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def _resolve_input(args: argparse.Namespace) -> StrategyInput:
    if args.preset:
        if args.request:
            raise StrategyParseError("give either --preset or VALUEs, not both")
        return get_preset(args.preset)
    return parse_strategy_args(args.request)


def _print_sweep(inp: StrategyInput, low: float, high: float, steps: int) -> None:
    sweep = fuel_per_lap_sweep(inp, low, high, steps)
    print(f"\n  {'Fuel/lap':>8}  {'Stints':>6}  {'Stops':>5}  {'Tank range':>10}")
    print(f"  {'--------':>8}  {'------':>6}  {'-----':>5}  {'----------':>10}")
    for fpl, stints, stops, secs in zip(
        sweep["fuel_per_lap"],
        sweep["required_stints"],
        sweep["min_stops"],
        sweep["max_fuel_duration_s"],
    ):
        tank_range = format_duration(timedelta(seconds=float(secs)))
        print(f"  {fpl:8.3f}  {stints:6d}  {stops:5d}  {tank_range:>10}")


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the request, print every strategy and return an exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        try:
            names = list(load_presets())
        except (FileNotFoundError, PresetError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        for name in names:
            print(name)
        return 0

    try:
        inp = _resolve_input(args)
    except (FileNotFoundError, StrategyParseError, PresetError) as exc:
        print(f"error: {exc}\n\n{USAGE}", file=sys.stderr)
        return 2

    strategies = calculate(inp)
    logger.debug("calculated %d strategies for %s", len(strategies), inp)
    print(render_strategies(strategies, markdown=not args.plain))

    target = fuel_saving_target(inp)
    if target is not None:
        print(f"\nSave to {target:.2f} per lap to drop a fuel stop.")

    if args.sweep:
        low, high, steps = args.sweep
        try:
            _print_sweep(inp, low, high, int(steps))
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
