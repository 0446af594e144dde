"""Unit tests for investplan.domain.calculator.growth."""

import pytest

from investplan.domain.calculator.growth import (
    calculate_annuity_pv,
    calculate_depletion_period,
    calculate_goal_contribution,
    calculate_level_withdrawal,
    calculate_lumpsum_fv,
    calculate_remaining_balance,
    calculate_sip_fv,
)


class TestLumpsum:
    """Tests for calculate_lumpsum_fv."""

    def test_monthly_compounding(self):
        """25,000 at 12% for 10 years, compounded monthly."""
        fv = calculate_lumpsum_fv(25000, 0.01, 120)
        assert fv == pytest.approx(82509.67, rel=1e-6)

    def test_zero_periods(self):
        assert calculate_lumpsum_fv(25000, 0.01, 0) == 25000

    def test_zero_rate(self):
        assert calculate_lumpsum_fv(25000, 0.0, 120) == 25000

    def test_negative_rate_declines(self):
        assert calculate_lumpsum_fv(25000, -0.01, 12) < 25000


class TestSip:
    """Tests for calculate_sip_fv."""

    def test_monthly_sip(self):
        """5,000 a month at 12% for 10 years (deposits at period end)."""
        fv = calculate_sip_fv(5000, 0.01, 120)
        assert fv == pytest.approx(1_150_193.45, rel=1e-6)

    def test_zero_rate_is_sum_of_deposits(self):
        assert calculate_sip_fv(1000, 0.0, 24) == 24000

    def test_zero_contribution(self):
        assert calculate_sip_fv(0, 0.01, 120) == 0

    def test_deposits_at_start(self):
        """Annuity due earns one extra period on every deposit."""
        fv = calculate_sip_fv(5000, 0.01, 120, at_start=True)
        assert fv == pytest.approx(1_161_695.38, abs=0.01)
        assert fv == pytest.approx(calculate_sip_fv(5000, 0.01, 120) * 1.01)

    def test_deposits_at_start_zero_rate(self):
        assert calculate_sip_fv(1000, 0.0, 24, at_start=True) == 24000


class TestGoal:
    """Tests for calculate_goal_contribution."""

    def test_contribution_reaches_target(self):
        contribution = calculate_goal_contribution(1_000_000, 0.01, 120)
        assert contribution == pytest.approx(4347.09, abs=0.01)
        assert calculate_sip_fv(contribution, 0.01, 120) == pytest.approx(1_000_000)

    def test_zero_rate_splits_evenly(self):
        assert calculate_goal_contribution(12000, 0.0, 12) == 1000

    def test_no_time_left(self):
        assert calculate_goal_contribution(12000, 0.01, 0) == 12000

    def test_deposits_at_start(self):
        contribution = calculate_goal_contribution(1_000_000, 0.01, 120, at_start=True)
        assert contribution == pytest.approx(4347.0948 / 1.01, rel=1e-6)
        assert calculate_sip_fv(contribution, 0.01, 120, at_start=True) == pytest.approx(1_000_000)


class TestWithdrawal:
    """Tests for withdrawal helpers."""

    def test_level_withdrawal_empties_pool(self):
        w = calculate_level_withdrawal(100000, 0.01, 60)
        assert calculate_remaining_balance(100000, w, 0.01, 60) == pytest.approx(0, abs=1e-6)

    def test_balance_clamped_at_zero(self):
        assert calculate_remaining_balance(100000, 30000, 0.0, 5) == 0.0

    def test_interest_covers_withdrawal(self):
        balance = calculate_remaining_balance(100000, 5000, 0.12, 10)
        assert balance == pytest.approx(222841.1, rel=1e-5)
        assert calculate_depletion_period(100000, 5000, 0.12) is None

    def test_depletion_period_zero_rate(self):
        assert calculate_depletion_period(100000, 30000, 0.0) == pytest.approx(10 / 3)

    def test_depletion_period_positive_rate(self):
        period = calculate_depletion_period(100000, 20000, 0.05)
        assert calculate_remaining_balance(100000, 20000, 0.05, period) == pytest.approx(0, abs=1e-6)

    def test_no_withdrawal_never_depletes(self):
        assert calculate_depletion_period(100000, 0, 0.05) is None


class TestAnnuityPresentValue:
    """Tests for calculate_annuity_pv."""

    def test_two_payments(self):
        assert calculate_annuity_pv(1000, 0.1, 2) == pytest.approx(1000 / 1.1 + 1000 / 1.21)

    def test_payments_at_start(self):
        assert calculate_annuity_pv(1000, 0.1, 2, at_start=True) == pytest.approx(1000 + 1000 / 1.1)

    def test_zero_rate(self):
        assert calculate_annuity_pv(1000, 0.0, 12) == 12000

    def test_no_periods(self):
        assert calculate_annuity_pv(1000, 0.1, 0) == 0
