"""Credit score impact estimates for lump-sum payment scenarios

A deliberately rough model: utilization is the only input. Every 10 points of
utilization removed is worth about 35 score points, with a one-off bonus for
crossing below 50%, 30% or 10%.
"""

import math
from typing import List, Optional, Sequence

from payoff_engine.domain.models import (
    CreditImpactAnalysis,
    CreditImpactScenario,
    DebtAccount,
    PaymentScenario,
)
from payoff_engine.domain.exceptions import InvalidParameterError
from payoff_engine.domain.simulator import validate_accounts

SCORE_POINTS_PER_UTILIZATION_POINT = 3.5

# (threshold, impact level, bonus points), most valuable first
UTILIZATION_THRESHOLDS = [
    (0.10, "excellent", 30),
    (0.30, "significant", 20),
    (0.50, "moderate", 10),
]

# Smaller improvements than this are reported as minimal
MODEST_CHANGE = 0.05


def _utilization(debt: float, limit: float) -> float:
    return debt / limit if limit > 0 else 0.0


def _score_scenario(
    scenario: PaymentScenario,
    total_debt: float,
    total_limit: float,
    current_utilization: float,
    current_score: Optional[int],
) -> CreditImpactScenario:
    if not math.isfinite(scenario.amount) or scenario.amount < 0:
        raise InvalidParameterError("amount", f"Scenario {scenario.label!r} has invalid amount")

    new_debt = max(0.0, total_debt - scenario.amount)
    new_utilization = _utilization(new_debt, total_limit)
    change = current_utilization - new_utilization

    impact = round(change * 100 * SCORE_POINTS_PER_UTILIZATION_POINT) if change > 0 else 0

    level = "modest" if change > MODEST_CHANGE else "minimal"
    for threshold, threshold_level, bonus in UTILIZATION_THRESHOLDS:
        if new_utilization < threshold <= current_utilization:
            level = threshold_level
            impact += bonus
            break

    return CreditImpactScenario(
        label=scenario.label,
        amount=scenario.amount,
        new_debt=round(new_debt, 2),
        new_utilization=round(new_utilization, 4),
        utilization_change=round(change, 4),
        estimated_score_impact=impact,
        impact_level=level,
        projected_score=current_score + impact if current_score is not None else None,
    )


def estimate_credit_impact(
    accounts: Sequence[DebtAccount],
    scenarios: Sequence[PaymentScenario],
    current_score: Optional[int] = None,
) -> CreditImpactAnalysis:
    """
    Estimate how each lump-sum payment would move utilization and score.

    Payments are applied to total debt (never below zero); limits come from
    each account's credit_limit, missing limits counting as 0.

    Raises:
        EmptyAccountSetError, InvalidAccountDataError
        InvalidParameterError: negative or non-finite scenario amount
    """
    validate_accounts(accounts)

    total_debt = sum(a.balance for a in accounts)
    total_limit = sum(a.credit_limit or 0.0 for a in accounts)
    utilization = _utilization(total_debt, total_limit)

    results: List[CreditImpactScenario] = [
        _score_scenario(s, total_debt, total_limit, utilization, current_score) for s in scenarios
    ]

    return CreditImpactAnalysis(
        total_debt=round(total_debt, 2),
        total_limit=round(total_limit, 2),
        utilization=round(utilization, 4),
        current_score=current_score,
        scenarios=results,
    )
