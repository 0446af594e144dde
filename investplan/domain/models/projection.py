"""Projection result models.

A projection is a point-in-time snapshot derived from a strategy. It is
frozen: recomputing a strategy yields a new projection.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, computed_field


def _json_float(value: float | None) -> float | str | None:
    """JSON has no infinity; keep the sentinel readable."""
    if value is None or math.isfinite(value):
        return value
    return "inf" if value > 0 else "-inf"


class ScheduleEntry(BaseModel):
    """Balance movement over one year of a projection."""

    year: float
    start_balance: float
    contributions: float = 0.0
    withdrawals: float = 0.0
    interest: float = 0.0
    end_balance: float

    model_config = {"frozen": True}


class AllocationProjection(BaseModel):
    """Projected outcome of a single allocation."""

    category: str
    percent_normalized: float
    expected_annual_return: float
    principal: float = Field(
        ..., description="Capital committed: share, or total deposits (today's value when real)"
    )
    periodic_contribution: float = Field(default=0.0, description="Nominal deposit per compounding period")
    periodic_withdrawal: float = Field(default=0.0, description="Nominal withdrawal per compounding period")
    periods_per_year: int = Field(default=1, ge=1, description="Compounding periods per year")
    periods: float = Field(default=0.0, ge=0, description="Compounding periods in the horizon")
    contribution_at_start: bool = False
    total_withdrawals: float = Field(default=0.0, description="Sum of withdrawals (today's value when real)")
    future_value: float
    cagr: float | None = Field(None, description="Realized growth rate, None when undefined")
    depletion_period: float | None = Field(None, description="Period at which the pool runs dry")
    schedule: tuple[ScheduleEntry, ...] = ()
    real_valued: bool = False

    model_config = {"frozen": True}

    @computed_field
    @property
    def total_returns(self) -> float:
        """Growth earned on top of the committed capital."""
        return self.future_value + self.total_withdrawals - self.principal


class Projection(BaseModel):
    """Aggregated projection of a strategy."""

    strategy_name: str
    currency: str
    mode: str
    duration_years: float
    snapshot: tuple[AllocationProjection, ...] = ()
    total_principal: float = 0.0
    aggregate_fv: float | None = None
    aggregate_cagr: float | None = None
    real_valued: bool = False
    inflation_rate: float | None = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @computed_field
    @property
    def is_empty(self) -> bool:
        return not self.snapshot

    def to_frame(self) -> pd.DataFrame:
        """Per-allocation breakdown as a DataFrame."""
        rows = [
            {
                "Category": p.category,
                "Percent": p.percent_normalized,
                "Expected Return": p.expected_annual_return,
                "Principal": p.principal,
                "Contribution / Period": p.periodic_contribution,
                "Withdrawal / Period": p.periodic_withdrawal,
                "Future Value": p.future_value,
                "Total Returns": p.total_returns,
                "CAGR": p.cagr,
            }
            for p in self.snapshot
        ]
        return pd.DataFrame(rows)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation for the persistence layer."""
        data = self.model_dump(mode="json")
        data["aggregate_cagr"] = _json_float(self.aggregate_cagr)
        for item, alloc in zip(data["snapshot"], self.snapshot):
            item["cagr"] = _json_float(alloc.cagr)
        return data
