"""Race preset loader for the strategy planner."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from pit_planner.core.inputs import StrategyInput
from pit_planner.parsing import (
    parse_lap_time,
    parse_max_stint_length,
    parse_race_length,
)

logger = logging.getLogger(__name__)

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
PRESETS_PATH: Path = DATA_DIR / "presets.yaml"
PRESETS_ENV_VAR: str = "PIT_PLANNER_PRESETS"

_REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "race_length",
    "lap_time",
    "fuel_per_lap",
    "fuel_capacity",
)


class PresetError(ValueError):
    """A presets file entry is missing, malformed or unknown."""


def presets_path(path: Path | None = None) -> Path:
    """Resolve the presets file: *path*, then the environment, then the default."""
    if path is not None:
        return path
    env_path = os.environ.get(PRESETS_ENV_VAR)
    return Path(env_path) if env_path else PRESETS_PATH


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _build_input(idx: int, entry: dict[str, Any]) -> StrategyInput:
    label = f"Preset entry {idx} ({entry['name']})"

    # --- Validate numeric fields ---
    fuel_per_lap = entry["fuel_per_lap"]
    if not (_is_int(fuel_per_lap) or isinstance(fuel_per_lap, float)):
        raise PresetError(
            f"{label}: 'fuel_per_lap' must be numeric, "
            f"got {type(fuel_per_lap).__name__}"
        )
    for field in ("fuel_capacity", "mandatory_pits"):
        value = entry.get(field)
        if value is not None and not _is_int(value):
            raise PresetError(
                f"{label}: '{field}' must be an integer, got {type(value).__name__}"
            )

    # Unquoted HH:MM is read by YAML as a base-60 integer, so lap times
    # must be strings; bare minute counts may be plain integers.
    if not isinstance(entry["lap_time"], str):
        raise PresetError(f"{label}: 'lap_time' must be a quoted \"MM:SS\" string")

    # --- Parse durations and build ---
    try:
        race_duration = parse_race_length(str(entry["race_length"]))
        avg_laptime = parse_lap_time(entry["lap_time"])
        max_stint = entry.get("max_stint_length")
        return StrategyInput(
            race_duration=race_duration,
            avg_laptime=avg_laptime,
            fuel_per_lap=float(fuel_per_lap),
            fuel_capacity=entry["fuel_capacity"],
            mandatory_pits=entry.get("mandatory_pits"),
            permitted_max_stint_length=(
                parse_max_stint_length(str(max_stint))
                if max_stint is not None
                else None
            ),
        )
    except ValueError as exc:
        raise PresetError(f"{label}: {exc}") from exc


def load_presets(path: Path | None = None) -> dict[str, StrategyInput]:
    """Load named race presets from a YAML file.

    Each entry is validated and converted into a :class:`StrategyInput`.

    Args:
        path: Optional override for the presets file path.  Falls back to
            ``$PIT_PLANNER_PRESETS`` and then ``data/presets.yaml``.

    Returns:
        Mapping of preset name to input, in file order.

    Raises:
        FileNotFoundError: If the presets file does not exist.
        PresetError: If any entry is missing fields, has malformed values,
            or reuses a name.
    """
    file_path = presets_path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Presets file not found: {file_path}")

    with open(file_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict) or not isinstance(data.get("presets"), list):
        raise PresetError(f"{file_path}: expected a top-level 'presets' list")

    presets: dict[str, StrategyInput] = {}
    for idx, entry in enumerate(data["presets"]):
        if not isinstance(entry, dict):
            raise PresetError(f"Preset entry {idx} must be a mapping")

        # --- Validate required fields ---
        for field in _REQUIRED_FIELDS:
            if field not in entry:
                raise PresetError(
                    f"Preset entry {idx} ({entry.get('name', '<unknown>')}) "
                    f"is missing required field '{field}'"
                )

        name = str(entry["name"])
        if name in presets:
            raise PresetError(f"Preset entry {idx}: duplicate name '{name}'")
        presets[name] = _build_input(idx, entry)

    logger.info("Loaded %d presets from %s", len(presets), file_path)
    return presets


def get_preset(name: str, path: Path | None = None) -> StrategyInput:
    """Return the preset called *name*.

    Raises:
        PresetError: If no preset has that name.
    """
    presets = load_presets(path)
    try:
        return presets[name]
    except KeyError:
        known = ", ".join(sorted(presets))
        raise PresetError(f"Unknown preset '{name}'. Known presets: {known}") from None
