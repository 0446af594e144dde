"""Rate conversion functions.

Conversions between CAGR, nominal, real and effective annual rates, plus
time-horizon metrics. All rates are decimal fractions (0.10 = 10%),
horizons are in years.

Edge cases return sentinels instead of raising:
    - zero horizon in CAGR -> 0
    - zero base with positive end value -> +inf
    - total loss -> exactly -1
    - no growth in doubling / multiplier time -> +inf
    - zero compounding periods -> nominal rate unchanged

No rounding happens here; results are rounded only for display.
"""

from __future__ import annotations

import math

from investplan.domain.models.strategy import Compounding


def cagr(present_value: float, future_value: float, years: float) -> float:
    """Compound annual growth rate solving ``fv = pv * (1 + rate) ** years``.

    Args:
        present_value: Initial value
        future_value: Final value
        years: Time period in years

    Returns:
        CAGR as decimal (e.g., 0.10 for 10%)
    """
    if years == 0:
        return 0.0

    if present_value == 0:
        return math.inf if future_value > 0 else 0.0

    if future_value <= 0:
        return -1.0

    return (future_value / present_value) ** (1.0 / years) - 1.0


def real_rate(nominal: float, inflation: float) -> float:
    """Inflation-adjusted rate (Fisher relation).

    ``(1 + nominal) / (1 + inflation) - 1``. Deflation (negative inflation)
    yields a real rate above the nominal one.
    """
    if inflation == 0:
        return nominal

    if inflation == -1:
        return math.inf

    return (1.0 + nominal) / (1.0 + inflation) - 1.0


def nominal_rate(real: float, inflation: float) -> float:
    """Inverse of :func:`real_rate`: ``(1 + real) * (1 + inflation) - 1``."""
    if inflation == 0:
        return real
    return (1.0 + real) * (1.0 + inflation) - 1.0


def effective_annual_rate(nominal: float, periods_per_year: int) -> float:
    """Effective annual rate of a nominal rate compounded ``periods_per_year`` times.

    Formula: EAR = (1 + r/n)^n - 1
    """
    if periods_per_year == 0 or periods_per_year == 1:
        return nominal

    return (1.0 + nominal / periods_per_year) ** periods_per_year - 1.0


def years_to_double(rate: float) -> float:
    """Years for capital to double at ``rate``: ln(2) / ln(1 + rate)."""
    if rate <= 0:
        return math.inf

    return math.log(2.0) / math.log1p(rate)


def years_to_multiplier(rate: float, multiplier: float) -> float:
    """Years for capital to grow by ``multiplier`` at ``rate``.

    A multiplier of 1 or less is already met.
    """
    if multiplier <= 1:
        return 0.0

    if rate <= 0:
        return math.inf

    return math.log(multiplier) / math.log1p(rate)


def periods_per_year(compounding: Compounding | str) -> int:
    """Compounding periods per year (daily=365, monthly=12, quarterly=4, annually=1)."""
    return Compounding(compounding).periods_per_year


def periodic_rate(nominal: float, compounding: Compounding | str) -> float:
    """Rate applied each compounding period."""
    return nominal / periods_per_year(compounding)


def deflate(value: float, inflation: float, years: float) -> float:
    """Express ``value`` received in ``years`` in today's purchasing power."""
    if years == 0 or inflation == 0:
        return value
    return value / (1.0 + inflation) ** years


def aggregate_rate(total_principal: float, total_value: float, years: float) -> float | None:
    """Blended CAGR of summed principal and summed value.

    Follows the per-allocation rule: 0 when no time elapses, None when
    nothing was committed.
    """
    if years == 0:
        return 0.0
    if total_principal <= 0:
        return None
    return cagr(total_principal, total_value, years)
