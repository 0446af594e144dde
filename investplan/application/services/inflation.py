"""Inflation adjustment service.

Restates nominal projections in today's purchasing power. Not idempotent:
a second pass discounts inflation twice, so results carry ``real_valued``
and callers apply the adjustment at most once.
"""

from __future__ import annotations

import math

from investplan.core.logging import get_logger
from investplan.domain.calculator.growth import calculate_annuity_pv
from investplan.domain.calculator.rates import aggregate_rate, deflate, real_rate
from investplan.domain.models.projection import AllocationProjection, Projection, ScheduleEntry

log = get_logger(__name__)


class InflationAdjuster:
    """Deflates projections by a constant annual inflation rate."""

    def __init__(self, inflation_rate: float):
        self.inflation_rate = inflation_rate

    def periodic_inflation(self, periods_per_year: int) -> float:
        """Inflation per compounding period, equivalent to the annual rate."""
        return (1.0 + self.inflation_rate) ** (1.0 / periods_per_year) - 1.0

    def _deflate_entry(self, entry: ScheduleEntry) -> ScheduleEntry:
        i = self.inflation_rate
        start_balance = deflate(entry.start_balance, i, math.ceil(entry.year) - 1)
        end_balance = deflate(entry.end_balance, i, entry.year)
        contributions = deflate(entry.contributions, i, entry.year)
        withdrawals = deflate(entry.withdrawals, i, entry.year)
        return ScheduleEntry(
            year=entry.year,
            start_balance=start_balance,
            contributions=contributions,
            withdrawals=withdrawals,
            interest=end_balance - start_balance - contributions + withdrawals,
            end_balance=end_balance,
        )

    def to_real(self, projection: AllocationProjection, years: float) -> AllocationProjection:
        """Restate one allocation projection in real terms.

        Terminal figures are discounted over the full horizon. Deposits and
        withdrawals spread over the horizon become the present value of
        their stream, each payment discounted from the period it falls in.
        Per-period amounts stay nominal. The realized CAGR becomes the
        Fisher real rate of the nominal CAGR.
        """
        if projection.real_valued:
            log.warning(
                "inflation_already_applied",
                category=projection.category,
                inflation_rate=self.inflation_rate,
            )

        i = self.inflation_rate
        g = self.periodic_inflation(projection.periods_per_year)

        realized = projection.cagr
        if realized is not None and years > 0:
            realized = real_rate(realized, i)

        principal = projection.principal
        if projection.periodic_contribution > 0 and projection.periods > 0:
            principal = calculate_annuity_pv(
                projection.periodic_contribution,
                g,
                projection.periods,
                projection.contribution_at_start,
            )

        total_withdrawals = projection.total_withdrawals
        if projection.periodic_withdrawal > 0:
            drawn = projection.periods if projection.depletion_period is None else projection.depletion_period
            total_withdrawals = calculate_annuity_pv(projection.periodic_withdrawal, g, drawn)

        return projection.model_copy(
            update={
                "principal": principal,
                "future_value": deflate(projection.future_value, i, years),
                "total_withdrawals": total_withdrawals,
                "cagr": realized,
                "schedule": tuple(self._deflate_entry(e) for e in projection.schedule),
                "real_valued": True,
            }
        )

    def to_real_projection(self, projection: Projection) -> Projection:
        """Restate a whole strategy projection and its aggregates in real terms."""
        snapshot = tuple(self.to_real(p, projection.duration_years) for p in projection.snapshot)
        total_principal = math.fsum(p.principal for p in snapshot)
        aggregate_fv = None
        aggregate_cagr = None
        if snapshot:
            aggregate_fv = math.fsum(p.future_value for p in snapshot)
            aggregate_cagr = aggregate_rate(total_principal, aggregate_fv, projection.duration_years)

        return Projection(
            strategy_name=projection.strategy_name,
            currency=projection.currency,
            mode=projection.mode,
            duration_years=projection.duration_years,
            snapshot=snapshot,
            total_principal=total_principal,
            aggregate_fv=aggregate_fv,
            aggregate_cagr=aggregate_cagr,
            real_valued=True,
            inflation_rate=self.inflation_rate,
        )
