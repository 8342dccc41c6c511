"""Callable tools exposing the engine to a conversational assistant

Only the descriptors and the dispatch are provided here; sending them to a
language model and relaying results is the caller's concern.
"""

import logging
from typing import Any, Dict, List

from payoff_engine.api.errors import error_detail
from payoff_engine.api.v1.schemas import (
    BalanceTransferRequest,
    BalanceTransferResponse,
    ComparisonRequest,
    ComparisonResponse,
    CreditImpactRequest,
    CreditImpactResponse,
    PaymentPlanRequest,
    PaymentPlanResponse,
    PayoffResultSchema,
    SimulationRequest,
)
from payoff_engine.config import settings
from payoff_engine.domain.balance_transfer import evaluate_balance_transfer
from payoff_engine.domain.credit_impact import estimate_credit_impact
from payoff_engine.domain.exceptions import DomainException
from payoff_engine.domain.payment_plan import plan_payments
from payoff_engine.domain.recommendations import (
    FREQUENCY_ADVICE,
    balance_transfer_advice,
    compare_recommendation,
    generate_recommendation,
    utilization_advice,
)
from payoff_engine.domain.simulator import compare_strategies, simulate

logger = logging.getLogger(__name__)

CREDIT_IMPACT_DISCLAIMER = (
    "Credit score impact estimates are approximate. Actual changes depend on many factors "
    "including payment history, credit age and credit mix."
)


class UnknownToolError(Exception):
    """Requested tool name is not registered"""

    pass


_ACCOUNT_PARAMETERS = {
    "type": "array",
    "description": "Debt accounts to pay off",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "Account identifier"},
            "name": {"type": "string", "description": "Card name or nickname"},
            "balance": {"type": "number", "description": "Current balance"},
            "apr": {"type": "number", "description": "Annual rate as a decimal (e.g. 0.1899 for 18.99%)"},
            "minimum_payment": {"type": "number", "description": "Minimum monthly payment"},
        },
        "required": ["balance", "apr", "minimum_payment"],
    },
}

_CARD_LIMIT_PARAMETERS = {
    "type": "array",
    "description": "Credit cards with balances and limits",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "Account identifier"},
            "name": {"type": "string", "description": "Card name or nickname"},
            "balance": {"type": "number", "description": "Current balance"},
            "limit": {"type": "number", "description": "Credit limit"},
        },
        "required": ["balance", "limit"],
    },
}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "simulate_debt_payoff",
        "description": (
            "Simulates credit card debt payoff with the avalanche or snowball strategy. "
            "Returns months to debt-free, total interest paid and the monthly breakdown."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "accounts": _ACCOUNT_PARAMETERS,
                "monthly_budget": {
                    "type": "number",
                    "description": "Total monthly amount for debt, minimum payments included",
                },
                "strategy": {"type": "string", "enum": ["avalanche", "snowball"]},
            },
            "required": ["accounts", "monthly_budget", "strategy"],
        },
    },
    {
        "name": "compare_payoff_strategies",
        "description": (
            "Runs both avalanche and snowball on the same accounts and budget and "
            "reports which one costs less interest."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "accounts": _ACCOUNT_PARAMETERS,
                "monthly_budget": {"type": "number"},
            },
            "required": ["accounts", "monthly_budget"],
        },
    },
    {
        "name": "recommend_balance_transfer",
        "description": (
            "Evaluates whether moving all balances to a promotional card saves money. "
            "Weighs the transfer fee and promo interest against current interest over the promo period."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "accounts": _ACCOUNT_PARAMETERS,
                "transfer_apr": {
                    "type": "number",
                    "description": "Promotional annual rate as a decimal (e.g. 0.0 for 0%)",
                },
                "transfer_fee": {
                    "type": "number",
                    "description": "One-off transfer fee as a decimal of the amount moved (default 0.03)",
                },
                "promo_months": {"type": "integer", "description": "Months the promotional rate lasts"},
            },
            "required": ["accounts", "transfer_apr", "promo_months"],
        },
    },
    {
        "name": "optimize_payment_timing",
        "description": (
            "Splits this month's budget across cards: minimums everywhere, the rest to the "
            "highest-rate card. Also advises on payment frequency."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "accounts": _ACCOUNT_PARAMETERS,
                "monthly_budget": {"type": "number"},
                "payment_frequency": {"type": "string", "enum": ["weekly", "biweekly", "monthly"]},
            },
            "required": ["accounts", "monthly_budget"],
        },
    },
    {
        "name": "calculate_credit_impact",
        "description": (
            "Estimates how lump-sum payments would change credit utilization and, roughly, "
            "the credit score."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "accounts": _CARD_LIMIT_PARAMETERS,
                "payment_scenarios": {
                    "type": "array",
                    "description": "Payment amounts to compare",
                    "items": {
                        "type": "object",
                        "properties": {
                            "label": {"type": "string", "description": "Scenario name, e.g. Double Payment"},
                            "amount": {"type": "number", "description": "Payment amount in dollars"},
                        },
                        "required": ["label", "amount"],
                    },
                },
                "current_score": {"type": "integer", "description": "Current credit score, if known"},
            },
            "required": ["accounts", "payment_scenarios"],
        },
    },
]


def _with_account_ids(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """
    Models often omit ids; fall back to the account name, then account_{n}.

    Generated ids skip any id already in use so they never collide with one
    the caller supplied.
    """
    raw = arguments.get("accounts") or []
    used = {str(a["id"]) for a in raw if isinstance(a, dict) and a.get("id")}

    accounts = []
    for position, account in enumerate(raw, start=1):
        if isinstance(account, dict) and not account.get("id"):
            account_id = account.get("name")
            if not account_id or account_id in used:
                suffix = position
                account_id = f"account_{suffix}"
                while account_id in used:
                    suffix += 1
                    account_id = f"account_{suffix}"
            used.add(account_id)
            account = {**account, "id": account_id}
        accounts.append(account)
    return {**arguments, "accounts": accounts}


def _simulate_tool(arguments: Dict[str, Any]) -> Dict[str, Any]:
    request = SimulationRequest.model_validate(_with_account_ids(arguments))
    result = simulate(
        [a.to_domain() for a in request.accounts],
        request.monthly_budget,
        request.strategy,
        max_months=settings.max_simulation_months,
    )
    summary = PayoffResultSchema.from_domain(result).model_dump(mode="json")
    summary["recommendation"] = generate_recommendation(result)
    return summary


def _compare_tool(arguments: Dict[str, Any]) -> Dict[str, Any]:
    request = ComparisonRequest.model_validate(_with_account_ids(arguments))
    comparison = compare_strategies(
        [a.to_domain() for a in request.accounts],
        request.monthly_budget,
        max_months=settings.max_simulation_months,
    )
    return ComparisonResponse.from_domain(comparison, compare_recommendation(comparison)).model_dump(mode="json")


def _balance_transfer_tool(arguments: Dict[str, Any]) -> Dict[str, Any]:
    request = BalanceTransferRequest.model_validate(_with_account_ids(arguments))
    analysis = evaluate_balance_transfer(
        [a.to_domain() for a in request.accounts],
        transfer_apr=request.transfer_apr,
        promo_months=request.promo_months,
        transfer_fee=request.transfer_fee,
    )
    return BalanceTransferResponse.from_domain(analysis, balance_transfer_advice(analysis)).model_dump(mode="json")


def _payment_timing_tool(arguments: Dict[str, Any]) -> Dict[str, Any]:
    request = PaymentPlanRequest.model_validate(_with_account_ids(arguments))
    plan = plan_payments(
        [a.to_domain() for a in request.accounts],
        request.monthly_budget,
        request.payment_frequency,
    )
    return PaymentPlanResponse.from_domain(plan, FREQUENCY_ADVICE[plan.frequency]).model_dump(mode="json")


def _credit_impact_tool(arguments: Dict[str, Any]) -> Dict[str, Any]:
    request = CreditImpactRequest.model_validate(_with_account_ids(arguments))
    analysis = estimate_credit_impact(
        [a.to_domain() for a in request.accounts],
        [s.to_domain() for s in request.payment_scenarios],
        request.current_score,
    )
    summary = CreditImpactResponse.from_domain(analysis, utilization_advice(analysis.utilization))
    return {**summary.model_dump(mode="json"), "disclaimer": CREDIT_IMPACT_DISCLAIMER}


_HANDLERS = {
    "simulate_debt_payoff": _simulate_tool,
    "compare_payoff_strategies": _compare_tool,
    "recommend_balance_transfer": _balance_transfer_tool,
    "optimize_payment_timing": _payment_timing_tool,
    "calculate_credit_impact": _credit_impact_tool,
}


def dispatch_tool(name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """
    Execute a tool call and return a JSON-serializable result.

    Domain validation failures come back as an error payload so the assistant
    can relay them; malformed arguments raise pydantic.ValidationError.

    Raises:
        UnknownToolError: name is not in TOOL_DEFINITIONS
    """
    handler = _HANDLERS.get(name)
    if handler is None:
        raise UnknownToolError(f"Unknown tool {name!r}")

    logger.info("Executing tool", extra={"tool": name})
    try:
        return handler(arguments)
    except DomainException as e:
        logger.warning(f"Tool {name} rejected input: {e}", extra={"tool": name})
        return error_detail(e)
