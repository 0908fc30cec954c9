"""Tests for the command-line entrypoint."""

from pathlib import Path

import pytest

from main import main
from pit_planner.config import PRESETS_ENV_VAR

# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_prints_both_strategies(capsys: pytest.CaptureFixture[str]) -> None:
    """A fuel-limited race prints long then equal stints."""
    assert main(["4:00", "2:18", "3.90", "110"]) == 0
    out = capsys.readouterr().out
    assert out.index("__Longer Stints__") < out.index("__Equal Stints__")
    assert "Save to" in out


def test_single_stint_plain(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["60", "2:18", "3.25", "110", "--plain"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("SINGLE STINT\nStarting Fuel\n88 L\n27 Laps")
    assert "**" not in out
    assert "Save to" not in out


def test_regulated_race(capsys: pytest.CaptureFixture[str]) -> None:
    """All stops mandatory: only the equal-stint plan is printed."""
    assert main(["4:00", "2:18", "3.25", "110", "3"]) == 0
    out = capsys.readouterr().out
    assert "__Equal Stints__" in out
    assert "Longer Stints" not in out


def test_bad_request_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["2:00", "138", "3.93", "110"]) == 2
    err = capsys.readouterr().err
    assert "lap time" in err
    assert "Usage:" in err


def test_preset(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--preset", "gt3-2h-stint-cap"]) == 0
    out = capsys.readouterr().out
    assert "__Longer Stints__" in out


def test_unknown_preset(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--preset", "no-such-race"]) == 2
    assert "Unknown preset" in capsys.readouterr().err


def test_preset_and_values_conflict(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--preset", "gt3-2h", "2:00", "2:18", "3.93", "110"]) == 2
    assert "not both" in capsys.readouterr().err


def test_list_presets(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--list-presets"]) == 0
    assert "gt3-2h" in capsys.readouterr().out.splitlines()


def test_sweep_table(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["4:00", "2:18", "3.90", "110", "--sweep", "3.0", "4.0", "3"]) == 0
    out = capsys.readouterr().out
    assert "Fuel/lap" in out
    assert "   3.500" in out


def test_sweep_invalid_range(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["4:00", "2:18", "3.90", "110", "--sweep", "4.0", "3.0", "3"]) == 2
    assert "low must be <= high" in capsys.readouterr().err


def test_near_zero_fuel_per_lap_is_rejected(
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert main(["2:00", "2:18", "0.000000000001", "110"]) == 2
    err = capsys.readouterr().err
    assert "fuel_per_lap is too small" in err
    assert "Usage:" in err


def test_list_presets_bad_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A broken presets file is reported, not raised."""
    path = tmp_path / "presets.yaml"
    path.write_text("races: []\n", encoding="utf-8")
    monkeypatch.setenv(PRESETS_ENV_VAR, str(path))
    assert main(["--list-presets"]) == 2
    assert "error: " in capsys.readouterr().err


def test_list_presets_missing_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv(PRESETS_ENV_VAR, str(tmp_path / "nope.yaml"))
    assert main(["--list-presets"]) == 2
    assert main(["--preset", "gt3-2h"]) == 2
    assert capsys.readouterr().err.count("error: ") == 2
