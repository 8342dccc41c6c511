"""Single-month payment allocation across accounts"""

import math
from typing import Sequence

from payoff_engine.domain.models import (
    DebtAccount,
    PaymentAllocation,
    PaymentFrequency,
    PaymentPlan,
    Strategy,
)
from payoff_engine.domain.exceptions import InsufficientBudgetError, InvalidParameterError
from payoff_engine.domain.simulator import rank_accounts, validate_accounts

# Common issuer rule when the statement minimum is not known: 2% of balance, at least $25
FALLBACK_MINIMUM_RATE = 0.02
FALLBACK_MINIMUM_FLOOR = 25.0


def parse_frequency(frequency: "PaymentFrequency | str") -> PaymentFrequency:
    if isinstance(frequency, PaymentFrequency):
        return frequency
    try:
        return PaymentFrequency(str(frequency).strip().lower())
    except ValueError:
        raise InvalidParameterError(
            "payment_frequency", f"Unknown payment frequency {frequency!r}"
        ) from None


def estimated_minimum(account: DebtAccount) -> float:
    """Stated minimum, or the 2%-or-$25 rule when none is given; never more than the balance"""
    minimum = account.minimum_payment
    if minimum <= 0:
        minimum = max(FALLBACK_MINIMUM_FLOOR, account.balance * FALLBACK_MINIMUM_RATE)
    return min(minimum, account.balance)


def plan_payments(
    accounts: Sequence[DebtAccount],
    monthly_budget: float,
    frequency: "PaymentFrequency | str" = PaymentFrequency.MONTHLY,
) -> PaymentPlan:
    """
    Split one month's budget: every account gets its minimum, the rest goes
    to the highest-rate account and cascades when that one is covered.

    Allocations are listed in avalanche order.

    Raises:
        InvalidParameterError: unknown frequency
        EmptyAccountSetError, InvalidAccountDataError
        InsufficientBudgetError: budget below the (estimated) minimums
    """
    frequency = parse_frequency(frequency)
    validate_accounts(accounts)

    minimums = {a.id: estimated_minimum(a) for a in accounts}
    total_minimum = sum(minimums.values())
    if not math.isfinite(monthly_budget) or monthly_budget <= 0 or monthly_budget < total_minimum:
        raise InsufficientBudgetError(monthly_budget, total_minimum)

    extra_budget = monthly_budget - total_minimum
    remaining = extra_budget
    balances = {a.id: a.balance for a in accounts}
    by_id = {a.id: a for a in accounts}

    allocations = []
    for account_id in rank_accounts(accounts, balances, list(balances), Strategy.AVALANCHE):
        account = by_id[account_id]
        payment = minimums[account_id]
        top_up = min(account.balance - payment, remaining)
        if top_up > 0:
            payment += top_up
            remaining -= top_up

        allocations.append(
            PaymentAllocation(
                account_id=account_id,
                annual_rate=account.annual_rate,
                balance=account.balance,
                minimum_payment=round(minimums[account_id], 2),
                recommended_payment=round(payment, 2),
                monthly_interest=round(account.balance * account.annual_rate / 12, 2),
            )
        )

    return PaymentPlan(
        monthly_budget=monthly_budget,
        total_minimum=round(total_minimum, 2),
        extra_budget=round(extra_budget, 2),
        frequency=frequency,
        allocations=allocations,
    )
