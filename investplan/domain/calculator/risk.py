"""Risk profiling and planning helpers.

Questionnaire scoring, default allocation presets and a few planning
targets (emergency fund, FIRE number, years to FIRE).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple

import numpy_financial as npf

from investplan.domain.models.strategy import Allocation


class RiskProfile(str, Enum):
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"


class AssetCategory(NamedTuple):
    id: str
    name: str
    default_expected_return: float
    risk_level: str


class RiskQuestion(NamedTuple):
    id: str
    question: str
    weight: float


class RiskAssessment(NamedTuple):
    profile: RiskProfile
    score: int
    suggested_allocations: list[Allocation]


# Long-run averages, Indian market context
DEFAULT_ASSET_CATEGORIES: tuple[AssetCategory, ...] = (
    AssetCategory("stocks", "Stocks", 0.12, "high"),
    AssetCategory("mutual_funds", "Mutual Funds", 0.10, "medium"),
    AssetCategory("etfs", "ETFs", 0.09, "medium"),
    AssetCategory("index_funds", "Index Funds", 0.10, "medium"),
    AssetCategory("reits", "REITs", 0.08, "medium"),
    AssetCategory("gold", "Gold", 0.07, "low"),
    AssetCategory("silver", "Silver", 0.06, "medium"),
    AssetCategory("bonds", "Bonds", 0.07, "low"),
    AssetCategory("fixed_deposits", "Fixed Deposits", 0.065, "low"),
    AssetCategory("cash", "Cash / Savings", 0.04, "low"),
    AssetCategory("crypto", "Crypto", 0.15, "high"),
    AssetCategory("real_estate", "Real Estate", 0.09, "medium"),
    AssetCategory("p2p", "P2P Lending", 0.11, "high"),
    AssetCategory("ppf", "PPF", 0.071, "low"),
    AssetCategory("nps", "NPS", 0.09, "medium"),
)

FALLBACK_EXPECTED_RETURN = 0.08

# (category, percent, expected return)
ALLOCATION_PRESETS: dict[RiskProfile, tuple[tuple[str, float, float], ...]] = {
    RiskProfile.CONSERVATIVE: (
        ("Fixed Deposits", 30, 0.065),
        ("Bonds", 25, 0.07),
        ("Gold", 15, 0.07),
        ("Mutual Funds", 15, 0.09),
        ("PPF", 10, 0.071),
        ("Cash / Savings", 5, 0.04),
    ),
    RiskProfile.BALANCED: (
        ("Mutual Funds", 30, 0.10),
        ("Stocks", 25, 0.12),
        ("Index Funds", 15, 0.10),
        ("Bonds", 10, 0.07),
        ("Gold", 10, 0.07),
        ("REITs", 10, 0.08),
    ),
    RiskProfile.AGGRESSIVE: (
        ("Stocks", 40, 0.12),
        ("Mutual Funds", 25, 0.11),
        ("ETFs", 15, 0.10),
        ("Crypto", 10, 0.15),
        ("P2P Lending", 5, 0.11),
        ("REITs", 5, 0.08),
    ),
}

# Answers are scored 1 (most cautious) to 5 (most risk tolerant)
RISK_QUESTIONS: tuple[RiskQuestion, ...] = (
    RiskQuestion("age_group", "What is your age group?", 1.5),
    RiskQuestion("investment_horizon", "What is your investment time horizon?", 2.0),
    RiskQuestion("loss_reaction", "If your investments dropped 20% in value, you would:", 2.0),
    RiskQuestion("income_stability", "How stable is your income?", 1.5),
    RiskQuestion("emergency_fund", "Do you have an emergency fund covering 6+ months of expenses?", 1.5),
    RiskQuestion("investment_knowledge", "How would you rate your investment knowledge?", 1.0),
    RiskQuestion("risk_return_preference", "Which statement best describes your preference?", 2.0),
    RiskQuestion("financial_goals", "What is your primary financial goal?", 1.5),
)

MAX_ANSWER_SCORE = 5

EMERGENCY_FUND_MONTHS: dict[RiskProfile, tuple[int, int, int]] = {
    RiskProfile.CONSERVATIVE: (6, 9, 12),
    RiskProfile.BALANCED: (6, 8, 10),
    RiskProfile.AGGRESSIVE: (3, 6, 8),
}


def default_expected_return(category: str) -> float:
    """Default expected return for a category id or display name."""
    key = category.strip().lower()
    for c in DEFAULT_ASSET_CATEGORIES:
        if key in (c.id, c.name.lower()):
            return c.default_expected_return
    return FALLBACK_EXPECTED_RETURN


def preset_allocations(profile: RiskProfile | str) -> list[Allocation]:
    """Suggested allocations for a profile (already summing to 100)."""
    return [
        Allocation(category=cat, percent=pct, percent_normalized=pct, expected_annual_return=ret)
        for cat, pct, ret in ALLOCATION_PRESETS[RiskProfile(profile)]
    ]


def risk_score(answers: dict[str, int]) -> int:
    """Weighted questionnaire score on a 0-100 scale.

    Unknown question ids are ignored; no usable answer gives 50.
    """
    weights = {q.id: q.weight for q in RISK_QUESTIONS}
    weighted = 0.0
    max_weighted = 0.0
    for question_id, score in answers.items():
        weight = weights.get(question_id)
        if weight is None:
            continue
        weighted += score * weight
        max_weighted += weight * MAX_ANSWER_SCORE

    if max_weighted == 0:
        return 50

    return round(weighted / max_weighted * 100)


def risk_profile(score: float) -> RiskProfile:
    """Map a 0-100 score to a profile."""
    if score >= 70:
        return RiskProfile.AGGRESSIVE
    if score >= 40:
        return RiskProfile.BALANCED
    return RiskProfile.CONSERVATIVE


def assess_risk(answers: dict[str, int]) -> RiskAssessment:
    score = risk_score(answers)
    profile = risk_profile(score)
    return RiskAssessment(profile, score, preset_allocations(profile))


def emergency_fund(monthly_expenses: float, profile: RiskProfile | str) -> dict[str, float]:
    """Minimum / recommended / ideal emergency fund for a profile."""
    low, mid, high = EMERGENCY_FUND_MONTHS[RiskProfile(profile)]
    return {
        "minimum": monthly_expenses * low,
        "recommended": monthly_expenses * mid,
        "ideal": monthly_expenses * high,
    }


def fire_number(annual_expenses: float, withdrawal_rate: float = 0.04) -> float:
    """Portfolio size that sustains ``annual_expenses`` at ``withdrawal_rate``."""
    if withdrawal_rate <= 0:
        return math.inf
    return annual_expenses / withdrawal_rate


def years_to_fire(
    current_savings: float,
    monthly_contribution: float,
    expected_return: float,
    target: float,
) -> float:
    """Years until savings plus monthly deposits reach ``target``.

    Uses monthly compounding throughout and solves for the period count
    with ``npf.nper``. Returns +inf when the target is out of reach.
    """
    if current_savings >= target:
        return 0.0

    if monthly_contribution <= 0 and expected_return <= 0:
        return math.inf

    monthly_rate = expected_return / 12.0
    if monthly_rate == 0:
        return (target - current_savings) / monthly_contribution / 12.0

    periods = float(npf.nper(monthly_rate, -monthly_contribution, -current_savings, target))
    if not math.isfinite(periods) or periods < 0:
        return math.inf
    return periods / 12.0
