"""Parse strategy requests written as free text.

Request grammar (whitespace separated)::

    <race length> <lap time> <fuel per lap> <fuel capacity>
        [<mandatory pits> [<max stint length>]]

Race length and max stint length are "minutes or HH:MM"; lap time is
strictly "MM:SS".  A value containing ``:`` must split into exactly two
numeric parts; a value without one is a bare minute count.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from pit_planner.core.inputs import StrategyInput

USAGE: str = (
    "Usage: <race length: minutes or HH:MM> <lap time: MM:SS> "
    "<fuel per lap> <fuel capacity> "
    "[<mandatory pits> [<max stint length: minutes or HH:MM>]]\n"
    "Example: 2:00 2:18 3.93 110 1 55"
)


class StrategyParseError(ValueError):
    """A request could not be turned into a :class:`StrategyInput`.

    Attributes:
        field: Name of the offending field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def _split_pair(text: str, field: str) -> tuple[str, str]:
    parts = text.strip().split(":")
    if len(parts) != 2 or not all(parts):
        raise StrategyParseError(
            f"{field} must have exactly two parts separated by ':', got {text!r}",
            field,
        )
    return parts[0], parts[1]


def _parse_whole(text: str, field: str) -> int:
    if not text.isdecimal():
        raise StrategyParseError(
            f"{field} must be a whole non-negative number, got {text!r}", field
        )
    return int(text)


def parse_minutes_or_hhmm(text: str, field: str = "duration") -> timedelta:
    """Parse a duration given as bare minutes (``"90"``) or ``HH:MM``.

    Raises:
        StrategyParseError: If the text is not in either form.
    """
    text = text.strip()
    if ":" not in text:
        return timedelta(minutes=_parse_whole(text, field))

    hours_text, minutes_text = _split_pair(text, field)
    hours = _parse_whole(hours_text, field)
    minutes = _parse_whole(minutes_text, field)
    if minutes >= 60:
        raise StrategyParseError(
            f"{field} minutes must be < 60, got {minutes}", field
        )
    return timedelta(hours=hours, minutes=minutes)


def parse_race_length(text: str) -> timedelta:
    return parse_minutes_or_hhmm(text, "race length")


def parse_max_stint_length(text: str) -> timedelta:
    return parse_minutes_or_hhmm(text, "max stint length")


def parse_lap_time(text: str) -> timedelta:
    """Parse a lap time given strictly as ``MM:SS`` (``"2:18"``, ``"1:59.5"``).

    Seconds may carry a decimal fraction.

    Raises:
        StrategyParseError: If the text is not ``MM:SS``.
    """
    field = "lap time"
    minutes_text, seconds_text = _split_pair(text, field)
    minutes = _parse_whole(minutes_text, field)
    whole, _, fraction = seconds_text.partition(".")
    if not whole.isdecimal() or (fraction and not fraction.isdecimal()):
        raise StrategyParseError(
            f"{field} seconds must be numeric, got {seconds_text!r}", field
        )
    seconds = float(seconds_text)
    if seconds >= 60.0:
        raise StrategyParseError(
            f"{field} seconds must be < 60, got {seconds_text}", field
        )
    return timedelta(minutes=minutes, seconds=seconds)


def _parse_fuel_per_lap(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise StrategyParseError(
            f"fuel per lap must be a number, got {text!r}", "fuel per lap"
        ) from None
    # float() also accepts "nan" and "inf"
    if not 0.0 < value < float("inf"):
        raise StrategyParseError(
            f"fuel per lap must be a positive number, got {text!r}", "fuel per lap"
        )
    return value


def parse_strategy_args(tokens: Sequence[str]) -> StrategyInput:
    """Build a :class:`StrategyInput` from already-split request tokens.

    Raises:
        StrategyParseError: On a wrong token count, a malformed value, or
            values the calculator cannot accept.
    """
    if not 4 <= len(tokens) <= 6:
        raise StrategyParseError(f"expected 4 to 6 values, got {len(tokens)}")

    race_duration = parse_race_length(tokens[0])
    avg_laptime = parse_lap_time(tokens[1])
    fuel_per_lap = _parse_fuel_per_lap(tokens[2])
    fuel_capacity = _parse_whole(tokens[3], "fuel capacity")
    mandatory_pits = (
        _parse_whole(tokens[4], "mandatory pits") if len(tokens) >= 5 else None
    )
    max_stint = parse_max_stint_length(tokens[5]) if len(tokens) == 6 else None

    try:
        return StrategyInput(
            race_duration=race_duration,
            avg_laptime=avg_laptime,
            fuel_per_lap=fuel_per_lap,
            fuel_capacity=fuel_capacity,
            mandatory_pits=mandatory_pits,
            permitted_max_stint_length=max_stint,
        )
    except ValueError as exc:
        raise StrategyParseError(str(exc)) from exc


def parse_strategy_command(text: str) -> StrategyInput:
    """Parse a whole request line, e.g. ``"2:00 2:18 3.93 110 1 55"``."""
    return parse_strategy_args(text.split())
