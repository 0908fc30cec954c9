"""Endurance Fuel Strategy Dashboard.

Interactive planner built with Streamlit and Plotly.  Enter a race (or
pick a preset) to see every worthwhile pit strategy, a stint timeline,
per-stint tables and how the plan shifts with fuel consumption.

Launch with::

    streamlit run dashboard/app.py
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from pit_planner.config import PresetError, load_presets
from pit_planner.core.calculator import (
    all_pits_mandatory,
    calculate,
    max_stint_time,
    required_stints,
)
from pit_planner.core.inputs import StrategyInput
from pit_planner.core.sensitivity import fuel_per_lap_sweep, fuel_saving_target
from pit_planner.core.strategy import Strategy, StrategyKind
from pit_planner.parsing import USAGE, StrategyParseError, parse_strategy_args
from pit_planner.rendering import format_duration, render_strategy

_KIND_COLOURS: dict[StrategyKind, str] = {
    StrategyKind.SINGLE_STINT: "#2e7d32",
    StrategyKind.LONG_STINTS: "#e10600",
    StrategyKind.EQUAL_STINTS: "#1e1e1e",
}

_CUSTOM: str = "(custom)"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _stint_table(strategy: Strategy) -> pd.DataFrame:
    """One row per stint, with the stop that ends it (if any)."""
    rows: list[dict[str, object]] = []
    for i, stint in enumerate(strategy.stints):
        stop = strategy.stops[i] if i < len(strategy.stops) else None
        rows.append(
            {
                "Stint": i + 1,
                "Duration": format_duration(stint.duration),
                "Laps": stint.laps,
                "Fuel (L)": stint.fuel_required,
                "Pit on lap": stop.lap if stop else None,
                "Add fuel (L)": stop.fuel_to_add if stop else None,
            }
        )
    return pd.DataFrame(rows)


def _timeline(strategies: list[Strategy]) -> go.Figure:
    """Horizontal stacked bars: one row per strategy, one segment per stint."""
    fig = go.Figure()
    for strategy in strategies:
        elapsed = 0.0
        for i, stint in enumerate(strategy.stints):
            minutes = stint.duration.total_seconds() / 60.0
            fig.add_trace(
                go.Bar(
                    x=[minutes],
                    y=[strategy.title],
                    base=[elapsed],
                    orientation="h",
                    marker_color=_KIND_COLOURS[strategy.kind],
                    marker_line_color="#ffffff",
                    marker_line_width=2,
                    text=f"S{i + 1}: {stint.laps} laps",
                    hovertext=(
                        f"{format_duration(stint.duration)}, "
                        f"{stint.fuel_required} L"
                    ),
                    showlegend=False,
                )
            )
            elapsed += minutes
    fig.update_layout(
        title="Stint Timeline",
        xaxis_title="Race time (minutes)",
        barmode="overlay",
        yaxis=dict(autorange="reversed"),
        height=140 + 60 * len(strategies),
        margin=dict(l=140),
    )
    return fig


def _sweep_chart(inp: StrategyInput, low: float, high: float, steps: int) -> go.Figure:
    sweep = fuel_per_lap_sweep(inp, low, high, steps)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=sweep["fuel_per_lap"],
            y=sweep["min_stops"],
            mode="lines+markers",
            line_shape="hv",
            name="Stops (preferred plan)",
            marker_color="#e10600",
        )
    )
    fig.add_vline(x=inp.fuel_per_lap, line_dash="dash", line_color="#888888")
    fig.update_layout(
        title="Pit Stops vs Fuel Consumption",
        xaxis_title="Fuel per lap",
        yaxis_title="Stops",
        height=350,
    )
    return fig


def _read_input(presets: dict[str, StrategyInput]) -> StrategyInput | None:
    """Build the input from the sidebar, reporting errors in the page."""
    choice: str = st.sidebar.selectbox(
        "Preset", options=[_CUSTOM, *presets.keys()], index=0
    )
    if choice != _CUSTOM:
        return presets[choice]

    tokens = [
        st.sidebar.text_input("Race length (minutes or HH:MM)", value="2:00"),
        st.sidebar.text_input("Lap time (MM:SS)", value="2:18"),
        st.sidebar.text_input("Fuel per lap", value="3.93"),
        st.sidebar.text_input("Fuel capacity", value="110"),
    ]
    mandatory = st.sidebar.text_input("Mandatory pits (optional)", value="")
    max_stint = st.sidebar.text_input(
        "Max stint length (optional, minutes or HH:MM)", value=""
    )
    if max_stint.strip():
        tokens += [mandatory.strip() or "0", max_stint]
    elif mandatory.strip():
        tokens.append(mandatory)

    try:
        return parse_strategy_args([t.strip() for t in tokens])
    except StrategyParseError as exc:
        st.error(f"{exc}\n\n{USAGE}")
        return None


# ---------------------------------------------------------------------------
# Streamlit app
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the Streamlit dashboard."""
    st.set_page_config(
        page_title="Endurance Fuel Strategy",
        layout="wide",
    )

    st.title("Endurance Fuel Strategy Planner")

    # ── Sidebar ──────────────────────────────────────────────────────────
    st.sidebar.header("Race Parameters")

    try:
        presets = load_presets()
    except (FileNotFoundError, PresetError) as exc:
        st.sidebar.warning(f"Presets unavailable: {exc}")
        presets = {}

    inp = _read_input(presets)
    if inp is None:
        return

    # ── Section 1: Constraints ───────────────────────────────────────────
    st.header("1 -- Constraints")

    col_r, col_m, col_a = st.columns(3)
    col_r.metric("Required stints", required_stints(inp))
    col_m.metric("Longest stint", format_duration(max_stint_time(inp)))
    col_a.metric("All stops mandatory", "Yes" if all_pits_mandatory(inp) else "No")

    target = fuel_saving_target(inp)
    if target is not None:
        st.info(
            f"Saving fuel down to **{target:.2f}** per lap "
            f"(from {inp.fuel_per_lap:.2f}) removes one fuel stop."
        )

    # ── Section 2: Strategies ────────────────────────────────────────────
    st.header("2 -- Strategies")

    strategies = calculate(inp)
    st.plotly_chart(_timeline(strategies), use_container_width=True)

    columns = st.columns(len(strategies))
    for col, strategy in zip(columns, strategies):
        with col:
            st.subheader(strategy.title)
            c1, c2, c3 = st.columns(3)
            c1.metric("Stops", strategy.stop_count)
            c2.metric("Starting fuel", f"{strategy.starting_fuel} L")
            c3.metric("Total laps", strategy.total_laps)
            st.dataframe(_stint_table(strategy), hide_index=True)
            with st.expander("Text for the team chat"):
                st.code(render_strategy(strategy), language="markdown")

    # ── Section 3: Fuel sensitivity ──────────────────────────────────────
    st.header("3 -- Fuel Sensitivity")

    spread: float = st.slider(
        "Consumption range (+/- %)",
        min_value=5,
        max_value=40,
        value=15,
        step=5,
    )
    low = inp.fuel_per_lap * (1 - spread / 100)
    high = inp.fuel_per_lap * (1 + spread / 100)
    st.plotly_chart(_sweep_chart(inp, low, high, 41), use_container_width=True)

    # ── Footer ───────────────────────────────────────────────────────────
    st.markdown("---")
    st.caption(
        "Assumes constant lap time and fuel consumption. "
        "Core calculator is not modified by this dashboard."
    )


if __name__ == "__main__":
    main()
