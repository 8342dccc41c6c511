"""Balance transfer evaluation - promotional rate plus fee versus current interest"""

import math
from typing import Sequence

from payoff_engine.domain.models import BalanceTransferAnalysis, DebtAccount
from payoff_engine.domain.exceptions import InvalidParameterError
from payoff_engine.domain.simulator import validate_accounts

# Typical issuer fee, charged once on the amount moved
DEFAULT_TRANSFER_FEE = 0.03


def evaluate_balance_transfer(
    accounts: Sequence[DebtAccount],
    transfer_apr: float,
    promo_months: int,
    transfer_fee: float = DEFAULT_TRANSFER_FEE,
) -> BalanceTransferAnalysis:
    """
    Compare keeping every balance where it is against moving all of it to a promo card.

    Both paths are costed over the promo period only, without amortization:
    - current: sum(balance * apr / 12) * promo_months
    - transfer: total_debt * fee + total_debt * transfer_apr / 12 * promo_months

    Raises:
        EmptyAccountSetError, InvalidAccountDataError, InvalidParameterError
    """
    validate_accounts(accounts)
    if not math.isfinite(transfer_apr) or not 0 <= transfer_apr < 1:
        raise InvalidParameterError("transfer_apr")
    if not math.isfinite(transfer_fee) or not 0 <= transfer_fee < 1:
        raise InvalidParameterError("transfer_fee")
    if promo_months < 1:
        raise InvalidParameterError("promo_months", "Promotional period must be at least one month")

    total_debt = sum(a.balance for a in accounts)
    current_monthly_interest = sum(a.balance * a.annual_rate / 12 for a in accounts)
    current_interest = current_monthly_interest * promo_months

    fee = total_debt * transfer_fee
    promo_interest = total_debt * transfer_apr / 12 * promo_months
    transfer_cost = fee + promo_interest

    return BalanceTransferAnalysis(
        total_debt=round(total_debt, 2),
        transfer_apr=transfer_apr,
        transfer_fee_rate=transfer_fee,
        promo_months=promo_months,
        current_monthly_interest=round(current_monthly_interest, 2),
        current_interest_over_promo=round(current_interest, 2),
        transfer_fee=round(fee, 2),
        promo_interest=round(promo_interest, 2),
        transfer_cost=round(transfer_cost, 2),
        savings=round(current_interest - transfer_cost, 2),
    )
