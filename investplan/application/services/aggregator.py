"""Strategy aggregation service.

Normalizes allocation shares, projects every allocation and folds the
results into one immutable Projection.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

from investplan.application.services.inflation import InflationAdjuster
from investplan.application.services.projector import AllocationProjector
from investplan.core.exceptions import AllocationError
from investplan.core.logging import get_logger
from investplan.core.settings import get_settings
from investplan.domain.calculator.rates import aggregate_rate
from investplan.domain.models.projection import AllocationProjection, Projection
from investplan.domain.models.strategy import Allocation, Strategy

log = get_logger(__name__)


def validate_allocations(allocations: list[Allocation | dict]) -> list[str]:
    """Collect human-readable problems with an allocation set.

    Models already enforce ranges; this is for raw dict payloads from forms.
    """
    errors: list[str] = []
    if not allocations:
        errors.append("At least one allocation is required")

    for index, alloc in enumerate(allocations, start=1):
        category = alloc.get("category") if isinstance(alloc, dict) else alloc.category
        percent = (alloc.get("percent") or 0.0) if isinstance(alloc, dict) else alloc.percent
        if not category or not str(category).strip():
            errors.append(f"Allocation {index}: Category name is required")
        if percent < 0:
            errors.append(f"Allocation {index}: Percentage cannot be negative")
        if percent > 100:
            errors.append(f"Allocation {index}: Single allocation cannot exceed 100%")

    return errors


def normalize_allocations(
    allocations: list[Allocation],
    strict: bool = False,
    tolerance: float | None = None,
) -> list[Allocation]:
    """Rescale ``percent`` so the set sums to 100.

    Args:
        allocations: Allocations with raw percentages
        strict: If True, refuse sets that do not already sum to 100
        tolerance: Sum tolerance (defaults to settings)

    Returns:
        New allocations with ``percent_normalized`` set. Empty input gives
        an empty list.

    Raises:
        AllocationError: strict mode with a wrong total, or an all-zero set
    """
    if not allocations:
        return []

    settings = get_settings()
    total = math.fsum(a.percent for a in allocations)

    if strict:
        if abs(total - 100.0) > settings.strict_tolerance:
            raise AllocationError(f"Allocations must sum to 100%. Current total: {total:.2f}%")
        return [a.model_copy(update={"percent_normalized": a.percent}) for a in allocations]

    tol = settings.normalization_tolerance if tolerance is None else tolerance
    if abs(total - 100.0) <= tol:
        return [a.model_copy(update={"percent_normalized": a.percent}) for a in allocations]

    if total == 0:
        raise AllocationError("Total allocation percentage is 0%")

    return [
        a.model_copy(update={"percent_normalized": a.percent / total * 100.0})
        for a in allocations
    ]


def allocated_amounts(total_amount: float, allocations: list[Allocation]) -> list[float]:
    """Notional share of ``total_amount`` for each allocation."""
    return [total_amount * a.share_pct / 100.0 for a in allocations]


class StrategyAggregator:
    """Builds a Projection for a strategy.

    Per-allocation projections are independent; with ``parallel`` enabled
    they fan out to a thread pool and are collected in input order before
    aggregation.
    """

    def __init__(self, parallel: bool | None = None, max_workers: int | None = None):
        settings = get_settings()
        self.parallel = settings.parallel_projection if parallel is None else parallel
        self.max_workers = max_workers or settings.max_workers

    def _project_all(
        self,
        projector: AllocationProjector,
        allocations: list[Allocation],
        amount: float,
    ) -> list[AllocationProjection]:
        if self.parallel and len(allocations) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                return list(pool.map(lambda a: projector.project(a, amount), allocations))
        return [projector.project(a, amount) for a in allocations]

    def aggregate(self, strategy: Strategy) -> Projection:
        """Normalize, project and aggregate a strategy.

        Args:
            strategy: Validated strategy with its allocations

        Returns:
            New Projection; aggregates are None for an empty allocation set
        """
        base = {
            "strategy_name": strategy.name,
            "currency": strategy.currency,
            "mode": strategy.mode.value,
            "duration_years": strategy.duration_years,
            "real_valued": strategy.normalize_mode,
            "inflation_rate": strategy.inflation_rate if strategy.normalize_mode else None,
        }

        if not strategy.allocations:
            log.info("projection_skipped_empty", strategy=strategy.name)
            return Projection(**base)

        allocations = normalize_allocations(strategy.allocations)
        projector = AllocationProjector(
            mode=strategy.mode,
            duration_years=strategy.duration_years,
            compounding=strategy.compounding,
            withdrawal_amount=strategy.withdrawal_amount,
            contribution_at_start=strategy.contribution_at_start,
        )
        snapshot = self._project_all(projector, allocations, strategy.amount)

        if strategy.normalize_mode:
            adjuster = InflationAdjuster(strategy.inflation_rate)
            snapshot = [adjuster.to_real(p, strategy.duration_years) for p in snapshot]

        total_principal = math.fsum(p.principal for p in snapshot)
        aggregate_fv = math.fsum(p.future_value for p in snapshot)
        aggregate_cagr = aggregate_rate(total_principal, aggregate_fv, strategy.duration_years)

        log.info(
            "projection_generated",
            strategy=strategy.name,
            mode=strategy.mode.value,
            allocations=len(snapshot),
            aggregate_fv=aggregate_fv,
            real_valued=strategy.normalize_mode,
        )

        return Projection(
            **base,
            snapshot=tuple(snapshot),
            total_principal=total_principal,
            aggregate_fv=aggregate_fv,
            aggregate_cagr=aggregate_cagr,
        )


def project_strategy(strategy: Strategy) -> Projection:
    """Convenience wrapper around StrategyAggregator with default settings."""
    return StrategyAggregator().aggregate(strategy)
