"""Allocation projection service.

Projects the future value of one allocation over a strategy's horizon.
Dispatch is on the contribution mode: one function per mode, selected from
``_MODE_HANDLERS``. Every formula is closed form.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from investplan.core.exceptions import InvalidParameterError
from investplan.core.logging import get_logger
from investplan.domain.calculator.growth import (
    calculate_depletion_period,
    calculate_goal_contribution,
    calculate_level_withdrawal,
    calculate_lumpsum_fv,
    calculate_remaining_balance,
    calculate_sip_fv,
)
from investplan.domain.calculator.rates import cagr, periodic_rate, periods_per_year
from investplan.domain.models.projection import AllocationProjection, ScheduleEntry
from investplan.domain.models.strategy import Allocation, Compounding, ContributionMode

log = get_logger(__name__)


@dataclass(frozen=True)
class ProjectionInputs:
    """Resolved numeric inputs for one allocation."""

    share: float
    rate: float
    periods_per_year: int
    years: float
    withdrawal: float | None = None
    at_start: bool = False

    @property
    def periodic_rate(self) -> float:
        return self.rate / self.periods_per_year

    @property
    def periods(self) -> float:
        return self.periods_per_year * self.years


@dataclass(frozen=True)
class ModeResult:
    """Outcome of a mode formula before packaging."""

    principal: float
    future_value: float
    contribution: float = 0.0
    withdrawal: float = 0.0
    depletion_period: float | None = None


def _balance_lumpsum(inputs: ProjectionInputs, result: ModeResult, k: float) -> float:
    return calculate_lumpsum_fv(inputs.share, inputs.periodic_rate, k)


def _balance_annuity(inputs: ProjectionInputs, result: ModeResult, k: float) -> float:
    return calculate_sip_fv(result.contribution, inputs.periodic_rate, k, inputs.at_start)


def _balance_withdrawal(inputs: ProjectionInputs, result: ModeResult, k: float) -> float:
    if result.depletion_period is not None and k >= result.depletion_period:
        return 0.0
    return calculate_remaining_balance(inputs.share, result.withdrawal, inputs.periodic_rate, k)


def project_lumpsum(inputs: ProjectionInputs) -> ModeResult:
    """Single deposit compounded over the whole horizon."""
    fv = calculate_lumpsum_fv(inputs.share, inputs.periodic_rate, inputs.periods)
    return ModeResult(principal=inputs.share, future_value=fv)


def project_sip(inputs: ProjectionInputs) -> ModeResult:
    """The share is deposited every period, at its end unless ``at_start``."""
    fv = calculate_sip_fv(inputs.share, inputs.periodic_rate, inputs.periods, inputs.at_start)
    return ModeResult(
        principal=inputs.share * inputs.periods,
        future_value=fv,
        contribution=inputs.share,
    )


def project_goal(inputs: ProjectionInputs) -> ModeResult:
    """The share is a target; solve for the deposit that reaches it."""
    contribution = calculate_goal_contribution(
        inputs.share, inputs.periodic_rate, inputs.periods, inputs.at_start
    )
    return ModeResult(
        principal=contribution * inputs.periods,
        future_value=inputs.share,
        contribution=contribution,
    )


def project_withdrawal(inputs: ProjectionInputs) -> ModeResult:
    """The share is a pool drawn down by equal withdrawals."""
    if inputs.withdrawal is None:
        # Level withdrawal empties the pool on the last period by construction
        withdrawal = calculate_level_withdrawal(inputs.share, inputs.periodic_rate, inputs.periods)
        depletion = inputs.periods if withdrawal > 0 else None
        return ModeResult(
            principal=inputs.share,
            future_value=0.0 if withdrawal > 0 else inputs.share,
            withdrawal=withdrawal,
            depletion_period=depletion,
        )

    withdrawal = inputs.withdrawal
    balance = calculate_remaining_balance(
        inputs.share, withdrawal, inputs.periodic_rate, inputs.periods
    )
    depletion = None
    if balance == 0 and withdrawal > 0:
        depletion = calculate_depletion_period(inputs.share, withdrawal, inputs.periodic_rate)
        depletion = inputs.periods if depletion is None else min(inputs.periods, depletion)
    return ModeResult(
        principal=inputs.share,
        future_value=balance,
        withdrawal=withdrawal,
        depletion_period=depletion,
    )


_MODE_HANDLERS = {
    ContributionMode.LUMPSUM: (project_lumpsum, _balance_lumpsum),
    ContributionMode.SIP: (project_sip, _balance_annuity),
    ContributionMode.GOAL: (project_goal, _balance_annuity),
    ContributionMode.WITHDRAWAL: (project_withdrawal, _balance_withdrawal),
}


def _year_marks(years: float) -> list[float]:
    """Year boundaries 1, 2, ... ending exactly on ``years``."""
    marks = [float(y) for y in range(1, math.ceil(years))]
    marks.append(float(years))
    return marks


def build_schedule(
    mode: ContributionMode,
    inputs: ProjectionInputs,
    result: ModeResult,
) -> tuple[ScheduleEntry, ...]:
    """Yearly balances taken from the closed forms at each year boundary."""
    if inputs.years <= 0:
        return ()

    _, balance_at = _MODE_HANDLERS[mode]
    m = inputs.periods_per_year
    start_k = 0.0
    start_balance = balance_at(inputs, result, 0.0)
    entries = []

    for mark in _year_marks(inputs.years):
        end_k = m * mark
        end_balance = balance_at(inputs, result, end_k)
        contributions = result.contribution * (end_k - start_k)
        withdrawals = 0.0
        if result.withdrawal > 0:
            last_k = end_k if result.depletion_period is None else min(end_k, result.depletion_period)
            withdrawals = result.withdrawal * max(0.0, last_k - start_k)
        entries.append(
            ScheduleEntry(
                year=mark,
                start_balance=start_balance,
                contributions=contributions,
                withdrawals=withdrawals,
                interest=end_balance - start_balance - contributions + withdrawals,
                end_balance=end_balance,
            )
        )
        start_k, start_balance = end_k, end_balance

    return tuple(entries)


class AllocationProjector:
    """Projects single allocations for a strategy's mode and horizon.

    Holds configuration only; each call is independent, so one instance can
    serve concurrent requests.
    """

    def __init__(
        self,
        mode: ContributionMode | str,
        duration_years: float,
        compounding: Compounding | str = Compounding.MONTHLY,
        withdrawal_amount: float | None = None,
        contribution_at_start: bool = False,
    ):
        try:
            self.mode = ContributionMode(mode)
        except ValueError:
            raise InvalidParameterError("mode", mode, "expected lumpsum, sip, goal or withdrawal") from None
        try:
            self.compounding = Compounding(compounding)
        except ValueError:
            raise InvalidParameterError(
                "compounding", compounding, "expected daily, monthly, quarterly or annually"
            ) from None
        if duration_years < 0:
            raise InvalidParameterError("duration_years", duration_years, "must be >= 0")
        if withdrawal_amount is not None and withdrawal_amount < 0:
            raise InvalidParameterError("withdrawal_amount", withdrawal_amount, "must be >= 0")

        self.duration_years = duration_years
        self.withdrawal_amount = withdrawal_amount
        self.contribution_at_start = contribution_at_start

    def inputs_for(self, allocation: Allocation, amount: float) -> ProjectionInputs:
        """Resolve the allocation's notional share of ``amount``."""
        weight = allocation.share_pct / 100.0
        withdrawal = None
        if self.withdrawal_amount is not None:
            withdrawal = self.withdrawal_amount * weight
        return ProjectionInputs(
            share=amount * weight,
            rate=allocation.expected_annual_return,
            periods_per_year=periods_per_year(self.compounding),
            years=self.duration_years,
            withdrawal=withdrawal,
            at_start=self.contribution_at_start,
        )

    def project(self, allocation: Allocation, amount: float) -> AllocationProjection:
        """Project one allocation.

        Args:
            allocation: Allocation (normalized share used when present)
            amount: Strategy amount (deposit, per-period deposit, target or pool)

        Returns:
            AllocationProjection with final value, realized CAGR and yearly schedule
        """
        inputs = self.inputs_for(allocation, amount)

        if inputs.years == 0:
            return self._zero_duration(allocation, inputs)

        project_mode, _ = _MODE_HANDLERS[self.mode]
        result = project_mode(inputs)

        realized = None
        if result.principal > 0:
            realized = cagr(result.principal, result.future_value, inputs.years)

        total_withdrawals = 0.0
        if result.withdrawal > 0:
            drawn_periods = inputs.periods if result.depletion_period is None else result.depletion_period
            total_withdrawals = result.withdrawal * drawn_periods

        log.debug(
            "allocation_projected",
            category=allocation.category,
            mode=self.mode.value,
            periodic_rate=periodic_rate(inputs.rate, self.compounding),
            future_value=result.future_value,
        )

        return AllocationProjection(
            category=allocation.category,
            percent_normalized=allocation.share_pct,
            expected_annual_return=inputs.rate,
            principal=result.principal,
            periodic_contribution=result.contribution,
            periodic_withdrawal=result.withdrawal,
            periods_per_year=inputs.periods_per_year,
            periods=inputs.periods,
            contribution_at_start=inputs.at_start,
            total_withdrawals=total_withdrawals,
            future_value=result.future_value,
            cagr=realized,
            depletion_period=result.depletion_period,
            schedule=build_schedule(self.mode, inputs, result),
        )

    def _zero_duration(self, allocation: Allocation, inputs: ProjectionInputs) -> AllocationProjection:
        """No time elapses: the amount comes back unchanged at a 0 rate."""
        contribution = inputs.share if self.mode in (ContributionMode.SIP, ContributionMode.GOAL) else 0.0
        return AllocationProjection(
            category=allocation.category,
            percent_normalized=allocation.share_pct,
            expected_annual_return=inputs.rate,
            principal=inputs.share,
            periodic_contribution=contribution,
            periods_per_year=inputs.periods_per_year,
            contribution_at_start=inputs.at_start,
            future_value=inputs.share,
            cagr=0.0,
        )
