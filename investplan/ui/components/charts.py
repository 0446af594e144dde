"""Chart components for the projection preview."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from investplan.domain.models.projection import Projection


def schedule_frame(projection: Projection) -> pd.DataFrame:
    """Yearly balances per allocation in long format.

    Allocations share a horizon, so their year marks line up.
    """
    rows = [
        {
            "Year": entry.year,
            "Category": alloc.category,
            "Balance": entry.end_balance,
            "Contributions": entry.contributions,
            "Withdrawals": entry.withdrawals,
            "Interest": entry.interest,
        }
        for alloc in projection.snapshot
        for entry in alloc.schedule
    ]
    if not rows:
        return pd.DataFrame(columns=["Year", "Category", "Balance", "Contributions", "Withdrawals", "Interest"])
    return pd.DataFrame(rows)


def build_growth_figure(projection: Projection) -> go.Figure | None:
    """Stacked area of balances per allocation over time."""
    df = schedule_frame(projection)
    if df.empty:
        return None

    suffix = " (real)" if projection.real_valued else ""
    fig = px.area(
        df,
        x="Year",
        y="Balance",
        color="Category",
        title=f"Projected Balance{suffix}",
        labels={"Balance": f"Amount ({projection.currency})"},
    )
    fig.update_layout(hovermode="x unified", legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1))
    return fig


def build_split_figure(projection: Projection) -> go.Figure | None:
    """Donut of normalized allocation shares."""
    if projection.is_empty:
        return None

    fig = go.Figure(go.Pie(
        labels=[p.category for p in projection.snapshot],
        values=[p.percent_normalized for p in projection.snapshot],
        hole=0.5,
    ))
    fig.update_layout(title="Allocation Split")
    return fig


def render_projection_charts(projection: Projection, key: str = "proj") -> None:
    """Render the growth and split charts side by side."""
    growth = build_growth_figure(projection)
    if growth is None:
        st.warning("No projection data available.")
        return

    col_growth, col_split = st.columns([0.65, 0.35])
    with col_growth:
        st.plotly_chart(growth, use_container_width=True, key=f"growth_{key}")
    with col_split:
        st.plotly_chart(build_split_figure(projection), use_container_width=True, key=f"split_{key}")
