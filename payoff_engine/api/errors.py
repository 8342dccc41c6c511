"""Translate domain exceptions into client-facing error payloads"""

from typing import Any, Dict

from payoff_engine.domain.exceptions import (
    DomainException,
    EmptyAccountSetError,
    InsufficientBudgetError,
    InvalidAccountDataError,
    InvalidParameterError,
    UnknownStrategyError,
)


def error_detail(error: DomainException) -> Dict[str, Any]:
    """Structured detail for a domain error; the message is safe to show end users"""
    if isinstance(error, InsufficientBudgetError):
        return {
            "error": "insufficient_budget",
            "message": str(error),
            "shortfall": error.shortfall,
            "required": round(error.required, 2),
            "hint": "Increase your monthly budget to at least cover all minimum payments",
        }
    if isinstance(error, InvalidAccountDataError):
        return {
            "error": "invalid_account_data",
            "message": str(error),
            "account_id": error.account_id,
            "field": error.field,
        }
    if isinstance(error, EmptyAccountSetError):
        return {"error": "empty_account_set", "message": str(error)}
    if isinstance(error, InvalidParameterError):
        return {"error": "invalid_parameter", "message": str(error), "field": error.field}
    if isinstance(error, UnknownStrategyError):
        return {"error": "unknown_strategy", "message": str(error)}
    return {"error": "domain_error", "message": str(error)}
