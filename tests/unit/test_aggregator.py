"""Unit tests for investplan.application.services.aggregator."""

import math

import pytest

from investplan.application.services.aggregator import (
    StrategyAggregator,
    allocated_amounts,
    normalize_allocations,
    project_strategy,
    validate_allocations,
)
from investplan.core.exceptions import AllocationError
from investplan.domain.calculator.rates import cagr
from investplan.domain.models import Allocation, Strategy


class TestValidateAllocations:
    """Tests for validate_allocations."""

    def test_valid(self, sample_allocations):
        assert validate_allocations(sample_allocations) == []

    def test_empty(self):
        assert "At least one allocation is required" in validate_allocations([])

    def test_raw_payload_problems(self):
        errors = validate_allocations([
            {"category": "", "percent": 50},
            {"category": "Stocks", "percent": -10},
            {"category": "Bonds", "percent": 150},
        ])
        assert any("Category name is required" in e for e in errors)
        assert any("negative" in e for e in errors)
        assert any("exceed 100%" in e for e in errors)


class TestNormalizeAllocations:
    """Tests for normalize_allocations."""

    def test_rescales_to_hundred(self, unbalanced_allocations):
        normalized = normalize_allocations(unbalanced_allocations)
        assert normalized[0].percent_normalized == pytest.approx(46.15, abs=0.01)
        assert normalized[1].percent_normalized == pytest.approx(30.77, abs=0.01)
        assert normalized[2].percent_normalized == pytest.approx(23.08, abs=0.01)
        assert sum(a.percent_normalized for a in normalized) == pytest.approx(100, abs=1e-6)

    def test_noop_when_already_hundred(self, sample_allocations):
        normalized = normalize_allocations(sample_allocations)
        assert [a.percent_normalized for a in normalized] == [60, 40]

    def test_inputs_untouched(self, unbalanced_allocations):
        normalize_allocations(unbalanced_allocations)
        assert all(a.percent_normalized is None for a in unbalanced_allocations)

    def test_empty(self):
        assert normalize_allocations([]) == []

    def test_all_zero_rejected(self):
        with pytest.raises(AllocationError):
            normalize_allocations([Allocation(category="Cash", percent=0, expected_annual_return=0.04)])

    def test_strict_rejects_wrong_total(self):
        allocations = [
            Allocation(category="Stocks", percent=60, expected_annual_return=0.12),
            Allocation(category="Bonds", percent=30, expected_annual_return=0.07),
        ]
        with pytest.raises(AllocationError) as exc_info:
            normalize_allocations(allocations, strict=True)
        assert "must sum to 100%" in str(exc_info.value)

    def test_strict_accepts_hundred(self, sample_allocations):
        normalized = normalize_allocations(sample_allocations, strict=True)
        assert [a.percent_normalized for a in normalized] == [60, 40]


class TestAllocatedAmounts:
    def test_amounts(self, sample_allocations):
        assert allocated_amounts(100000, sample_allocations) == pytest.approx([60000, 40000])

    def test_uses_normalized_share(self):
        alloc = Allocation(category="Stocks", percent=70, percent_normalized=50, expected_annual_return=0.12)
        assert allocated_amounts(100000, [alloc]) == [50000]


class TestStrategyAggregator:
    """Tests for StrategyAggregator.aggregate."""

    def test_aggregate_fv_is_sum(self, sample_strategy):
        projection = StrategyAggregator().aggregate(sample_strategy)
        assert len(projection.snapshot) == 2
        assert projection.aggregate_fv == pytest.approx(sum(p.future_value for p in projection.snapshot))
        assert projection.total_principal == pytest.approx(100000)

    def test_aggregate_cagr_from_totals(self, sample_strategy):
        """Blended rate comes from totals, not an average of rates."""
        projection = StrategyAggregator().aggregate(sample_strategy)
        assert projection.aggregate_cagr == pytest.approx(cagr(100000, projection.aggregate_fv, 10))
        assert projection.aggregate_cagr > 0.6 * 0.12 + 0.4 * 0.07

    def test_empty_strategy_has_null_aggregates(self, sample_strategy_data):
        sample_strategy_data["allocations"] = []
        projection = StrategyAggregator().aggregate(Strategy(**sample_strategy_data))
        assert projection.aggregate_fv is None
        assert projection.aggregate_cagr is None
        assert projection.is_empty

    def test_unbalanced_percentages_normalized(self, sample_strategy_data):
        sample_strategy_data["allocations"].append(
            {"category": "Gold", "percent": 30, "expected_annual_return": 0.06}
        )
        projection = StrategyAggregator().aggregate(Strategy(**sample_strategy_data))
        assert sum(p.percent_normalized for p in projection.snapshot) == pytest.approx(100, abs=1e-6)
        assert projection.total_principal == pytest.approx(100000)

    def test_normalize_mode_gives_real_values(self, sample_strategy_data):
        nominal = StrategyAggregator().aggregate(Strategy(**sample_strategy_data))
        sample_strategy_data["normalize_mode"] = True
        real = StrategyAggregator().aggregate(Strategy(**sample_strategy_data))
        assert real.real_valued is True
        assert real.inflation_rate == 0.05
        assert all(p.real_valued for p in real.snapshot)
        assert real.aggregate_fv == pytest.approx(nominal.aggregate_fv / 1.05 ** 10)

    def test_parallel_matches_serial(self, sample_strategy_data):
        sample_strategy_data["mode"] = "sip"
        sample_strategy_data["compounding"] = "monthly"
        strategy = Strategy(**sample_strategy_data)
        serial = StrategyAggregator(parallel=False).aggregate(strategy)
        parallel = StrategyAggregator(parallel=True, max_workers=2).aggregate(strategy)
        assert [p.category for p in parallel.snapshot] == ["Stocks", "Bonds"]
        assert [p.future_value for p in parallel.snapshot] == [p.future_value for p in serial.snapshot]
        assert parallel.aggregate_fv == serial.aggregate_fv

    def test_new_projection_each_time(self, sample_strategy):
        first = project_strategy(sample_strategy)
        second = project_strategy(sample_strategy)
        assert first is not second
        assert first.aggregate_fv == second.aggregate_fv

    def test_zero_duration(self, sample_strategy_data):
        sample_strategy_data["duration_years"] = 0
        projection = project_strategy(Strategy(**sample_strategy_data))
        assert projection.aggregate_fv == pytest.approx(100000)
        assert projection.aggregate_cagr == 0

    def test_zero_amount(self, sample_strategy_data):
        sample_strategy_data["amount"] = 0
        projection = project_strategy(Strategy(**sample_strategy_data))
        assert projection.aggregate_fv == 0
        assert projection.aggregate_cagr is None
        assert all(p.cagr is None for p in projection.snapshot)

    def test_goal_strategy(self, sample_strategy_data):
        sample_strategy_data.update(mode="goal", amount=1_000_000, compounding="monthly")
        projection = project_strategy(Strategy(**sample_strategy_data))
        assert projection.aggregate_fv == pytest.approx(1_000_000)
        assert projection.total_principal < 1_000_000
        assert not math.isinf(projection.aggregate_cagr)
