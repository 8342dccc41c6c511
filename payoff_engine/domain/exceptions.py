"""Domain-specific exceptions"""

from typing import Optional

# Smallest budget the simulator accepts when no minimums are owed
MINIMUM_BUDGET = 0.01


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class EmptyAccountSetError(DomainException):
    """No accounts were supplied to the simulator"""

    def __init__(self, message: str = "At least one debt account is required"):
        super().__init__(message)


class InsufficientBudgetError(DomainException):
    """
    Monthly budget does not cover the sum of minimum payments.

    shortfall is the smallest increase that makes the budget acceptable, so it
    is always positive: a non-positive budget must also clear MINIMUM_BUDGET.
    """

    def __init__(self, monthly_budget: float, required: float):
        self.monthly_budget = monthly_budget
        self.required = required
        self.shortfall = round(max(required, MINIMUM_BUDGET) - monthly_budget, 2)
        super().__init__(
            f"Monthly budget {monthly_budget:.2f} is short by {self.shortfall:.2f} "
            f"(minimum payments require {required:.2f})"
        )


class InvalidAccountDataError(DomainException):
    """An account carries a value outside its allowed range"""

    def __init__(self, account_id: Optional[str], field: str, message: str | None = None):
        self.account_id = account_id
        self.field = field
        super().__init__(message or f"Account {account_id!r} has invalid {field}")


class InvalidParameterError(DomainException):
    """A scalar input to a planning calculation is out of range"""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Invalid value for {field}")


class UnknownStrategyError(DomainException):
    """Strategy name is not one of the supported strategies"""

    def __init__(self, strategy: object):
        self.strategy = strategy
        super().__init__(f"Unknown payoff strategy {strategy!r} (expected 'avalanche' or 'snowball')")
