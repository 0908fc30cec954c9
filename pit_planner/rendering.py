"""Plain-text and markdown rendering of calculated strategies."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from pit_planner.core.strategy import Strategy

_UNITS: tuple[tuple[str, int], ...] = (
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


def format_duration(duration: timedelta) -> str:
    """Format *duration* compactly, e.g. ``1h 2m 6s`` or ``2days 3h``.

    Zero-valued units are omitted; a zero duration is ``0s``.
    Sub-second remainders are shown in milliseconds.
    """
    total_ms = round(duration.total_seconds() * 1000)
    if total_ms < 0:
        raise ValueError("duration must be >= 0.")
    seconds, millis = divmod(total_ms, 1000)
    days, seconds = divmod(seconds, 86400)

    parts: list[str] = []
    if days:
        parts.append(f"{days}day" if days == 1 else f"{days}days")
    for suffix, size in _UNITS:
        value, seconds = divmod(seconds, size)
        if value:
            parts.append(f"{value}{suffix}")
    if millis:
        parts.append(f"{millis}ms")
    return " ".join(parts) or "0s"


def _heading(text: str, markdown: bool) -> str:
    return f"**{text}**" if markdown else text


def render_strategy(strategy: Strategy, markdown: bool = True) -> str:
    """Render one strategy's body: starting fuel, then stints and stops.

    Args:
        strategy: Strategy to render.
        markdown: Wrap section headings in ``**`` for chat clients.

    Returns:
        Multi-section text; sections are separated by a blank line.
    """
    first_laps = strategy.stints[0].laps if strategy.stints else 0
    sections = [
        f"{_heading('Starting Fuel', markdown)}\n"
        f"{strategy.starting_fuel} L\n{first_laps} Laps"
    ]
    for i, stint in enumerate(strategy.stints):
        sections.append(
            f"{_heading(f'Stint {i + 1}', markdown)}\n"
            f"{format_duration(stint.duration)}"
        )
        if i < len(strategy.stops):
            stop = strategy.stops[i]
            sections.append(
                f"{_heading(f'Stop {i + 1}', markdown)}\n"
                f"Lap {stop.lap}\nAdd fuel: {stop.fuel_to_add} L"
            )
    return "\n\n".join(sections)


def render_strategies(strategies: Iterable[Strategy], markdown: bool = True) -> str:
    """Render each strategy's title and body in order."""
    blocks: list[str] = []
    for strategy in strategies:
        title = f"__{strategy.title}__" if markdown else strategy.title.upper()
        blocks.append(f"{title}\n{render_strategy(strategy, markdown)}")
    return "\n\n\n".join(blocks)
