"""Strategy and allocation data models.

A strategy is a named investment plan split into capital allocations,
each with its own expected annual return.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator


class ContributionMode(str, Enum):
    """How capital enters (or leaves) the plan."""

    LUMPSUM = "lumpsum"
    SIP = "sip"
    GOAL = "goal"
    WITHDRAWAL = "withdrawal"


class Compounding(str, Enum):
    """Compounding convention of a strategy."""

    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    Compounding.DAILY: 365,
    Compounding.MONTHLY: 12,
    Compounding.QUARTERLY: 4,
    Compounding.ANNUALLY: 1,
}


class Allocation(BaseModel):
    """One capital bucket within a strategy."""

    category: str = Field(..., min_length=1, description="Asset category label")
    percent: float = Field(..., ge=0, le=100, description="Raw share of capital, 0-100")
    percent_normalized: float | None = Field(
        None, ge=0, le=100, description="Share after normalization (set sums to 100)"
    )
    expected_annual_return: float = Field(..., description="Expected annual return as decimal")

    @field_validator("category")
    @classmethod
    def strip_category(cls, v: str) -> str:
        """Reject whitespace-only labels."""
        v = v.strip()
        if not v:
            raise ValueError("category must not be blank")
        return v

    @property
    def share_pct(self) -> float:
        """Normalized share when available, raw share otherwise."""
        return self.percent if self.percent_normalized is None else self.percent_normalized


class Strategy(BaseModel):
    """Investment plan with its ordered allocations.

    Range checks happen here, at construction time. The calculators assume
    a validated strategy and only apply their numeric edge policies.
    """

    name: str = Field(default="Untitled strategy", description="Display name")
    mode: ContributionMode = Field(default=ContributionMode.LUMPSUM, description="Contribution mode")
    amount: float = Field(..., ge=0, description="Investment, per-period deposit, target or pool")
    duration_years: float = Field(..., ge=0, description="Horizon in years, fractions allowed")
    compounding: Compounding = Field(default=Compounding.MONTHLY, description="Compounding convention")
    normalize_mode: bool = Field(default=False, description="Express results in real terms")
    inflation_rate: float = Field(default=0.05, gt=-1, description="Annual inflation as decimal")
    currency: str = Field(default="INR", description="ISO currency code")
    withdrawal_amount: float | None = Field(
        None, ge=0, description="Per-period withdrawal for withdrawal mode"
    )
    contribution_at_start: bool = Field(
        default=False, description="SIP/goal deposits at the start of each period"
    )
    allocations: list[Allocation] = Field(default_factory=list, description="Ordered allocations")

    @computed_field
    @property
    def periods_per_year(self) -> int:
        """Compounding periods per year."""
        return self.compounding.periods_per_year

    @computed_field
    @property
    def total_percent(self) -> float:
        """Sum of raw allocation percentages."""
        return sum(a.percent for a in self.allocations)
