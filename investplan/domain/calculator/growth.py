"""Closed-form growth functions.

Future values and annuity solutions used by the allocation projector.
Every function works on a periodic rate ``i`` and a period count ``n``
(``n`` may be fractional). Solutions are closed form; nothing iterates.
"""

from __future__ import annotations

import numpy_financial as npf


def calculate_lumpsum_fv(principal: float, periodic_rate: float, periods: float) -> float:
    """Future value of a single deposit.

    Formula: FV = P × (1 + i)^n
    """
    if periods == 0 or principal == 0:
        return principal

    if periodic_rate == 0:
        return principal

    return float(npf.fv(periodic_rate, periods, 0.0, -principal))


def calculate_sip_fv(
    contribution: float,
    periodic_rate: float,
    periods: float,
    at_start: bool = False,
) -> float:
    """Future value of equal periodic deposits.

    Formula: FV = A × [((1 + i)^n - 1) / i], times (1 + i) when deposits
    are made at the start of each period (annuity due).
    """
    if periods == 0 or contribution <= 0:
        return 0.0

    if periodic_rate == 0:
        return contribution * periods

    when = "begin" if at_start else "end"
    return float(npf.fv(periodic_rate, periods, -contribution, 0.0, when=when))


def calculate_goal_contribution(
    target: float,
    periodic_rate: float,
    periods: float,
    at_start: bool = False,
) -> float:
    """Per-period deposit that grows to ``target`` after ``periods``.

    Formula: A = FV × i / ((1 + i)^n - 1)

    With no time left the whole target is due at once. Deposits made at the
    start of each period earn one extra period of growth, so they are smaller.
    """
    if periods == 0 or target <= 0:
        return target

    if periodic_rate == 0:
        return target / periods

    when = "begin" if at_start else "end"
    return float(-npf.pmt(periodic_rate, periods, 0.0, target, when=when))


def calculate_level_withdrawal(pool: float, periodic_rate: float, periods: float) -> float:
    """Equal withdrawal that empties ``pool`` exactly at the last period.

    Formula: W = P × i / (1 - (1 + i)^-n)
    """
    if periods == 0 or pool <= 0:
        return 0.0

    if periodic_rate == 0:
        return pool / periods

    return float(npf.pmt(periodic_rate, periods, -pool))


def calculate_remaining_balance(
    pool: float,
    withdrawal: float,
    periodic_rate: float,
    periods: float,
) -> float:
    """Balance left after ``periods`` equal withdrawals, clamped at zero.

    Formula: B = P × (1 + i)^n - W × [((1 + i)^n - 1) / i]
    """
    if periods == 0:
        return pool

    if periodic_rate == 0:
        balance = pool - withdrawal * periods
    else:
        balance = float(npf.fv(periodic_rate, periods, withdrawal, -pool))

    return max(0.0, balance)


def calculate_depletion_period(
    pool: float,
    withdrawal: float,
    periodic_rate: float,
) -> float | None:
    """Period at which withdrawals exhaust the pool, None if they never do.

    Solved with ``npf.nper`` (closed form, logarithmic).
    """
    if withdrawal <= 0:
        return None

    if pool <= 0:
        return 0.0

    if periodic_rate == 0:
        return pool / withdrawal

    # Interest alone covers the withdrawal
    if periodic_rate > 0 and withdrawal <= pool * periodic_rate:
        return None

    return float(npf.nper(periodic_rate, withdrawal, -pool))


def calculate_annuity_pv(
    payment: float,
    periodic_rate: float,
    periods: float,
    at_start: bool = False,
) -> float:
    """Present value of ``periods`` equal payments discounted at ``periodic_rate``.

    Formula: PV = A × [(1 - (1 + i)^-n) / i]
    """
    if periods == 0 or payment == 0:
        return 0.0

    if periodic_rate == 0:
        return payment * periods

    when = "begin" if at_start else "end"
    return float(-npf.pv(periodic_rate, periods, payment, 0.0, when=when))
