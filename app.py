"""Projection preview entry point.

Streamlit page that runs the projection engine locally for instant
feedback while a strategy is being edited.
"""

import math
from typing import Any

import streamlit as st
from pydantic import ValidationError

from investplan.application.services import ResultExporter, StrategyAggregator, validate_allocations
from investplan.core.exceptions import AllocationError
from investplan.core.logging import get_logger
from investplan.core.settings import get_settings
from investplan.domain.calculator.rates import real_rate, years_to_double
from investplan.domain.calculator.risk import RiskProfile, preset_allocations
from investplan.domain.models import Compounding, ContributionMode, Strategy
from investplan.ui.components.charts import render_projection_charts

log = get_logger(__name__)

AMOUNT_LABELS = {
    ContributionMode.LUMPSUM: "Investment",
    ContributionMode.SIP: "Deposit per period",
    ContributionMode.GOAL: "Target amount",
    ContributionMode.WITHDRAWAL: "Starting pool",
}


def format_money(value: float | None, currency: str) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f} {currency}"


def format_rate(value: float | None) -> str:
    if value is None:
        return "-"
    if math.isinf(value):
        return "∞"
    return f"{value * 100:.2f}%"


def format_doubling(rate: float | None) -> str:
    """Doubling time, or a dash when the plan does not grow."""
    if rate is None or not 0 < rate < math.inf:
        return "-"
    return f"{years_to_double(rate):.1f}"


def render_sidebar() -> dict[str, Any]:
    """Collect strategy parameters."""
    settings = get_settings()
    with st.sidebar:
        st.title("Strategy")
        name = st.text_input("Name", "My plan")
        mode = ContributionMode(st.selectbox("Mode", [m.value for m in ContributionMode]))
        amount = st.number_input(AMOUNT_LABELS[mode], min_value=0.0, value=100000.0, step=1000.0)
        duration = st.number_input("Duration (years)", min_value=0.0, max_value=50.0, value=10.0, step=0.5)
        compounding = st.selectbox(
            "Compounding",
            [c.value for c in Compounding],
            index=[c.value for c in Compounding].index(settings.default_compounding),
        )
        at_start = False
        if mode in (ContributionMode.SIP, ContributionMode.GOAL):
            at_start = st.checkbox("Deposit at start of period")
        withdrawal = None
        if mode is ContributionMode.WITHDRAWAL and st.checkbox("Fixed withdrawal"):
            withdrawal = st.number_input("Withdrawal per period", min_value=0.0, value=1000.0)
        normalize = st.checkbox("Inflation-adjusted (real) values", value=False)
        inflation = st.slider("Inflation (%)", -5.0, 15.0, settings.default_inflation_rate * 100, 0.5) / 100
        profile = st.selectbox("Preset", [p.value for p in RiskProfile], index=1)

    return {
        "name": name,
        "mode": mode,
        "amount": amount,
        "duration_years": duration,
        "compounding": compounding,
        "withdrawal_amount": withdrawal,
        "contribution_at_start": at_start,
        "normalize_mode": normalize,
        "inflation_rate": inflation,
        "currency": settings.default_currency,
        "profile": profile,
    }


def render_allocation_editor(profile: str) -> list[dict[str, Any]]:
    """Editable allocation table seeded from a risk preset."""
    seed = [
        {"category": a.category, "percent": a.percent, "expected_annual_return": a.expected_annual_return}
        for a in preset_allocations(profile)
    ]
    edited = st.data_editor(seed, num_rows="dynamic", use_container_width=True, key=f"alloc_{profile}")
    return [row for row in edited if row.get("category")]


def render_summary(projection, strategy: Strategy) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Future value", format_money(projection.aggregate_fv, projection.currency))
    c2.metric("Committed", format_money(projection.total_principal, projection.currency))
    c3.metric("CAGR", format_rate(projection.aggregate_cagr))
    c4.metric("Years to double", format_doubling(projection.aggregate_cagr))

    if not strategy.normalize_mode and projection.aggregate_cagr is not None:
        st.caption(
            f"Real CAGR at {strategy.inflation_rate:.1%} inflation: "
            f"{format_rate(real_rate(projection.aggregate_cagr, strategy.inflation_rate))}"
        )

    st.dataframe(projection.to_frame(), use_container_width=True)


def main() -> None:
    st.set_page_config(page_title="Investment Planner", layout="wide")
    st.header("Strategy Projection")

    params = render_sidebar()
    rows = render_allocation_editor(params.pop("profile"))

    errors = validate_allocations(rows)
    if errors:
        for e in errors:
            st.error(e)
        return

    try:
        strategy = Strategy(**params, allocations=rows)
        projection = StrategyAggregator().aggregate(strategy)
    except (ValidationError, AllocationError) as e:
        st.error(str(e))
        return

    render_summary(projection, strategy)
    render_projection_charts(projection)

    if get_settings().enable_export and st.button("Export"):
        exporter = ResultExporter()
        path = exporter.save_json(projection, metadata={"source": "preview"})
        st.success(f"Saved to {path}")
        log.info("preview_exported", path=path)


if __name__ == "__main__":
    main()
