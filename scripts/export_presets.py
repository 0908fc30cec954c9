#!/usr/bin/env python
"""Plan every race preset and export the strategies as JSON.

This script:

1. Loads the named presets (``data/presets.yaml`` or
   ``$PIT_PLANNER_PRESETS``).
2. Runs the strategy calculator on each.
3. Saves results to ``results/strategies.json``.
4. Prints a structured summary.

Usage
-----
::

    python scripts/export_presets.py
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any

# Ensure the project root is on the import path.
_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from pit_planner import __version__  # noqa: E402
from pit_planner.config import load_presets  # noqa: E402
from pit_planner.core.calculator import calculate, required_stints  # noqa: E402
from pit_planner.core.inputs import StrategyInput  # noqa: E402
from pit_planner.core.sensitivity import fuel_saving_target  # noqa: E402

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

RESULTS_DIR: str = os.path.join(_project_root, "results")
OUTPUT_PATH: str = os.path.join(RESULTS_DIR, "strategies.json")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _input_to_dict(inp: StrategyInput) -> dict[str, Any]:
    max_stint = inp.permitted_max_stint_length
    return {
        "race_duration_s": inp.race_duration.total_seconds(),
        "avg_laptime_s": inp.avg_laptime.total_seconds(),
        "fuel_per_lap": inp.fuel_per_lap,
        "fuel_capacity": inp.fuel_capacity,
        "mandatory_pits": inp.mandatory_pits,
        "permitted_max_stint_length_s": (
            max_stint.total_seconds() if max_stint is not None else None
        ),
    }


def build_report(presets: dict[str, StrategyInput]) -> dict[str, Any]:
    """Plan each preset and collect a JSON-serialisable report.

    Args:
        presets: Mapping of preset name to input.

    Returns:
        Dictionary with ``metadata`` and one ``presets`` entry per name,
        each holding the input, the required stint count, the fuel saving
        target (or ``None``) and every strategy's ``to_dict()``.
    """
    entries: dict[str, Any] = {}
    for name, inp in presets.items():
        entries[name] = {
            "input": _input_to_dict(inp),
            "required_stints": required_stints(inp),
            "fuel_saving_target": fuel_saving_target(inp),
            "strategies": [s.to_dict() for s in calculate(inp)],
        }
    return {
        "metadata": {"version": __version__, "preset_count": len(entries)},
        "presets": entries,
    }


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------


def main() -> None:
    """Plan all presets, save the report and print a summary."""
    print("=" * 60)
    print("PRESET STRATEGY EXPORT")
    print("=" * 60)
    print()

    # -- Step 1: Load presets -------------------------------------------------
    print("[1/3] Loading presets")
    presets = load_presets()
    print(f"      {len(presets)} presets loaded.")
    print()

    # -- Step 2: Plan ---------------------------------------------------------
    print("[2/3] Calculating strategies")
    report = build_report(presets)
    print()

    # -- Step 3: Save and summarise -------------------------------------------
    print("[3/3] Saving results")
    os.makedirs(RESULTS_DIR, exist_ok=True)
    with open(OUTPUT_PATH, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2, sort_keys=True)
    print(f"      Results saved to {OUTPUT_PATH}")
    print()

    print("=" * 60)
    print("STRATEGY SUMMARY")
    print("=" * 60)
    for name, entry in report["presets"].items():
        plans = ", ".join(
            f"{s['title']} ({len(s['stops'])} stops)" for s in entry["strategies"]
        )
        print(f"  {name:<22s}  stints: {entry['required_stints']:2d}  {plans}")
    print()
    print("Export complete.")


if __name__ == "__main__":
    main()
