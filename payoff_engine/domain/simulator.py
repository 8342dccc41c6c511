"""Debt payoff simulator - month-by-month avalanche/snowball amortization"""

import math
from typing import Dict, List, Sequence

from payoff_engine.domain.models import DebtAccount, PayoffResult, PayoffStep, Strategy, StrategyComparison
from payoff_engine.domain.exceptions import (
    EmptyAccountSetError,
    InsufficientBudgetError,
    InvalidAccountDataError,
    UnknownStrategyError,
)

# 100 years; pathological inputs (budget barely above minimums, rate near 100%)
# would otherwise converge too slowly to be useful
MAX_SIMULATION_MONTHS = 1200

# Half a cent: anything smaller is treated as paid off
BALANCE_EPSILON = 0.005


def parse_strategy(strategy: "Strategy | str") -> Strategy:
    """Normalize a strategy name to the Strategy enum"""
    if isinstance(strategy, Strategy):
        return strategy
    try:
        return Strategy(str(strategy).strip().lower())
    except ValueError:
        raise UnknownStrategyError(strategy) from None


def validate_accounts(accounts: Sequence[DebtAccount]) -> None:
    """Non-empty set, unique ids, every value in range; first violation in input order wins"""
    if not accounts:
        raise EmptyAccountSetError()

    seen_ids = set()
    for account in accounts:
        if account.id in seen_ids:
            raise InvalidAccountDataError(account.id, "id", f"Duplicate account id {account.id!r}")
        seen_ids.add(account.id)

        if not math.isfinite(account.balance) or account.balance < 0:
            raise InvalidAccountDataError(account.id, "balance")
        if not math.isfinite(account.annual_rate) or not 0 <= account.annual_rate < 1:
            raise InvalidAccountDataError(account.id, "annual_rate")
        if not math.isfinite(account.minimum_payment) or account.minimum_payment < 0:
            raise InvalidAccountDataError(account.id, "minimum_payment")


def validate_inputs(accounts: Sequence[DebtAccount], monthly_budget: float) -> None:
    """
    Check simulator preconditions before any work is done.

    Order of checks:
    1. Non-empty account set
    2. Per-account ranges, first violation in input order wins
    3. Budget covers the sum of minimum payments

    Raises:
        EmptyAccountSetError, InvalidAccountDataError, InsufficientBudgetError
    """
    validate_accounts(accounts)

    required = sum(a.minimum_payment for a in accounts)
    if not math.isfinite(monthly_budget) or monthly_budget <= 0 or monthly_budget < required:
        raise InsufficientBudgetError(monthly_budget, required)


def rank_accounts(
    accounts: Sequence[DebtAccount],
    balances: Dict[str, float],
    open_ids: List[str],
    strategy: Strategy,
) -> List[str]:
    """Order open accounts for surplus; input position is the final tie-break"""
    position = {a.id: i for i, a in enumerate(accounts)}
    rate = {a.id: a.annual_rate for a in accounts}

    if strategy is Strategy.AVALANCHE:
        return sorted(open_ids, key=lambda i: (-rate[i], -balances[i], position[i]))
    return sorted(open_ids, key=lambda i: (balances[i], -rate[i], position[i]))


def simulate(
    accounts: Sequence[DebtAccount],
    monthly_budget: float,
    strategy: "Strategy | str" = Strategy.AVALANCHE,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> PayoffResult:
    """
    Simulate paying down every account with a fixed monthly budget.

    Each month:
    - Interest accrues on open balances (balance * annual_rate / 12)
    - Every open account receives its minimum, capped at its balance
    - The remaining budget goes to the top-ranked account; whatever it cannot
      absorb cascades to the next-ranked one

    Ranking:
    - avalanche: highest rate, then higher balance, then input order
    - snowball: lowest balance, then higher rate, then input order

    Returns a non-convergent result (months_to_debt_free=None, partial steps
    kept) when max_months pass without reaching zero.
    """
    strategy = parse_strategy(strategy)
    validate_inputs(accounts, monthly_budget)

    # Working copy; caller records are never touched
    balances: Dict[str, float] = {a.id: float(a.balance) for a in accounts}
    for account_id, balance in balances.items():
        if balance <= BALANCE_EPSILON:
            balances[account_id] = 0.0

    steps: List[PayoffStep] = []
    payoff_order: List[str] = []
    payoff_months: Dict[str, int] = {}
    total_interest = 0.0
    total_paid = 0.0
    month = 0

    while any(b > 0 for b in balances.values()):
        if month >= max_months:
            return PayoffResult(
                strategy=strategy,
                monthly_budget=monthly_budget,
                months_to_debt_free=None,
                total_interest_paid=round(total_interest, 2),
                total_paid=round(total_paid, 2),
                steps=steps,
                payoff_order=payoff_order,
                payoff_months=payoff_months,
            )

        month += 1
        open_ids = [a.id for a in accounts if balances[a.id] > 0]

        # Accrue interest before any payment
        interest: Dict[str, float] = {a.id: 0.0 for a in accounts}
        for account in accounts:
            if account.id in open_ids:
                accrued = balances[account.id] * account.annual_rate / 12
                balances[account.id] += accrued
                interest[account.id] = accrued

        # Minimums first
        payments: Dict[str, float] = {a.id: 0.0 for a in accounts}
        remaining = monthly_budget
        for account in accounts:
            if account.id in open_ids:
                pay = min(account.minimum_payment, balances[account.id])
                balances[account.id] -= pay
                payments[account.id] += pay
                remaining -= pay

        # Surplus cascades down the ranking
        for account_id in rank_accounts(accounts, balances, open_ids, strategy):
            if remaining <= 0:
                break
            pay = min(balances[account_id], remaining)
            if pay > 0:
                balances[account_id] -= pay
                payments[account_id] += pay
                remaining -= pay

        for account_id in open_ids:
            if balances[account_id] <= BALANCE_EPSILON:
                balances[account_id] = 0.0
                payoff_order.append(account_id)
                payoff_months[account_id] = month

        month_interest = sum(interest.values())
        month_payment = sum(payments.values())
        total_interest += month_interest
        total_paid += month_payment

        steps.append(
            PayoffStep(
                month=month,
                balances={k: round(v, 2) for k, v in balances.items()},
                payments={k: round(v, 2) for k, v in payments.items()},
                interest={k: round(v, 2) for k, v in interest.items()},
                total_interest=round(month_interest, 2),
                total_payment=round(month_payment, 2),
            )
        )

    return PayoffResult(
        strategy=strategy,
        monthly_budget=monthly_budget,
        months_to_debt_free=month,
        total_interest_paid=round(total_interest, 2),
        total_paid=round(total_paid, 2),
        steps=steps,
        payoff_order=payoff_order,
        payoff_months=payoff_months,
    )


def compare_strategies(
    accounts: Sequence[DebtAccount],
    monthly_budget: float,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> StrategyComparison:
    """
    Run avalanche and snowball on the same inputs.

    Avalanche is recommended unless snowball is strictly cheaper in interest.
    """
    avalanche = simulate(accounts, monthly_budget, Strategy.AVALANCHE, max_months)
    snowball = simulate(accounts, monthly_budget, Strategy.SNOWBALL, max_months)

    interest_savings = round(snowball.total_interest_paid - avalanche.total_interest_paid, 2)

    months_saved = None
    if avalanche.converged and snowball.converged:
        months_saved = snowball.months_to_debt_free - avalanche.months_to_debt_free

    recommended = Strategy.SNOWBALL if interest_savings < 0 else Strategy.AVALANCHE

    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_savings=interest_savings,
        months_saved=months_saved,
        recommended=recommended,
    )
