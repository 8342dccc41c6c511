"""Unit tests for conversational tool dispatch and recommendation text"""

import pytest
from pydantic import ValidationError
from payoff_engine.api.tools import TOOL_DEFINITIONS, UnknownToolError, dispatch_tool
from payoff_engine.domain.models import DebtAccount, PayoffResult, Strategy
from payoff_engine.domain.recommendations import format_duration, generate_recommendation
from payoff_engine.domain.simulator import simulate


def test_tool_definitions_are_named_and_described():
    names = [tool["name"] for tool in TOOL_DEFINITIONS]
    assert names == [
        "simulate_debt_payoff",
        "compare_payoff_strategies",
        "recommend_balance_transfer",
        "optimize_payment_timing",
        "calculate_credit_impact",
    ]
    for tool in TOOL_DEFINITIONS:
        assert tool["description"]
        assert tool["parameters"]["type"] == "object"


def test_simulate_tool_accepts_model_style_arguments():
    """Cards without ids and with apr/minPayment keys, as a model tends to send them"""
    result = dispatch_tool(
        "simulate_debt_payoff",
        {
            "accounts": [
                {"name": "Visa", "balance": 1200, "apr": 0.0, "minPayment": 100},
            ],
            "monthly_budget": 100,
            "strategy": "snowball",
        },
    )

    assert result["converged"] is True
    assert result["months_to_debt_free"] == 12
    assert result["payoff_order"] == ["Visa"]
    assert "1 year and 0 months" in result["recommendation"]


def test_simulate_tool_numbers_unnamed_accounts():
    result = dispatch_tool(
        "simulate_debt_payoff",
        {
            "accounts": [
                {"balance": 300, "apr": 0.0, "minimum_payment": 100},
                {"balance": 200, "apr": 0.0, "minimum_payment": 100},
            ],
            "monthly_budget": 250,
            "strategy": "avalanche",
        },
    )

    assert set(result["payoff_months"]) == {"account_1", "account_2"}


def test_generated_ids_skip_ids_already_in_use():
    """The second card would be account_2, which the first card already uses"""
    result = dispatch_tool(
        "simulate_debt_payoff",
        {
            "accounts": [
                {"id": "account_2", "balance": 300, "apr": 0.0, "minimum_payment": 100},
                {"balance": 200, "apr": 0.0, "minimum_payment": 100},
            ],
            "monthly_budget": 250,
            "strategy": "avalanche",
        },
    )

    assert "error" not in result
    assert set(result["payoff_months"]) == {"account_2", "account_3"}


def test_cards_sharing_a_name_get_distinct_ids():
    result = dispatch_tool(
        "simulate_debt_payoff",
        {
            "accounts": [
                {"name": "Visa", "balance": 300, "apr": 0.0, "minimum_payment": 100},
                {"name": "Visa", "balance": 200, "apr": 0.0, "minimum_payment": 100},
            ],
            "monthly_budget": 250,
            "strategy": "avalanche",
        },
    )

    assert set(result["payoff_months"]) == {"Visa", "account_2"}


def test_compare_tool_returns_both_strategies():
    result = dispatch_tool(
        "compare_payoff_strategies",
        {
            "accounts": [
                {"id": "low", "balance": 700, "apr": 0.1, "minimum_payment": 25},
                {"id": "high", "balance": 4000, "apr": 0.28, "minimum_payment": 100},
            ],
            "monthly_budget": 400,
        },
    )

    assert result["recommended"] == "avalanche"
    assert result["avalanche"]["total_interest_paid"] < result["snowball"]["total_interest_paid"]
    assert result["recommendation"].startswith("The avalanche method saves $")


def test_domain_errors_come_back_as_payload():
    result = dispatch_tool(
        "simulate_debt_payoff",
        {
            "accounts": [{"id": "a", "balance": 1000, "apr": 0.2, "minimum_payment": 150}],
            "monthly_budget": 100,
            "strategy": "avalanche",
        },
    )

    assert result["error"] == "insufficient_budget"
    assert result["shortfall"] == 50.0


def test_malformed_arguments_raise_validation_error():
    with pytest.raises(ValidationError):
        dispatch_tool("simulate_debt_payoff", {"accounts": "not a list", "monthly_budget": 100})


def test_unknown_tool_raises():
    with pytest.raises(UnknownToolError):
        dispatch_tool("get_weather", {})


@pytest.mark.parametrize(
    "months, expected",
    [
        (1, "1 month"),
        (5, "5 months"),
        (12, "1 year and 0 months"),
        (14, "1 year and 2 months"),
        (25, "2 years and 1 month"),
    ],
)
def test_format_duration(months, expected):
    assert format_duration(months) == expected


def test_recommendation_for_converged_plan():
    account = DebtAccount(id="a", balance=1200.0, annual_rate=0.0, minimum_payment=100.0)
    text = generate_recommendation(simulate([account], 100.0, "avalanche"))
    assert text == "Using the avalanche method, you'll be debt-free in 1 year and 0 months and pay $0.00 in total interest."


def test_recommendation_for_non_convergent_plan():
    result = PayoffResult(
        strategy=Strategy.SNOWBALL,
        monthly_budget=100.0,
        months_to_debt_free=None,
        total_interest_paid=9000.0,
        total_paid=1200.0,
    )
    text = generate_recommendation(result)
    assert "would not be paid off" in text
    assert "Increase your monthly budget" in text


def test_balance_transfer_tool_recommends_cheaper_promo():
    """12 months at 24% on 5000 costs 1200; the transfer costs a 150 fee"""
    result = dispatch_tool(
        "recommend_balance_transfer",
        {
            "accounts": [{"name": "Visa", "balance": 5000, "apr": 0.24}],
            "transferAPR": 0.0,
            "promoMonths": 12,
        },
    )

    assert result["recommended"] is True
    assert result["transfer_fee"] == pytest.approx(150.0)
    assert result["current_interest_over_promo"] == pytest.approx(1200.0)
    assert result["savings"] == pytest.approx(1050.0)
    assert result["advice"].startswith("You could save $1,050.00")


def test_balance_transfer_tool_rejects_costly_fee():
    result = dispatch_tool(
        "recommend_balance_transfer",
        {
            "accounts": [{"id": "card", "balance": 1000, "apr": 0.05}],
            "transfer_apr": 0.0,
            "transfer_fee": 0.05,
            "promo_months": 6,
        },
    )

    assert result["recommended"] is False
    assert result["savings"] == pytest.approx(-25.0)
    assert "5.0% transfer fee" in result["advice"]


def test_balance_transfer_tool_reports_invalid_promo_period():
    result = dispatch_tool(
        "recommend_balance_transfer",
        {"accounts": [{"balance": 1000, "apr": 0.2}], "transfer_apr": 0.0, "promo_months": 0},
    )

    assert result["error"] == "invalid_parameter"
    assert result["field"] == "promo_months"


def test_payment_timing_tool_sends_extra_to_highest_rate():
    result = dispatch_tool(
        "optimize_payment_timing",
        {
            "accounts": [
                {"id": "low", "balance": 2000, "apr": 0.12, "minimum_payment": 50},
                {"id": "high", "balance": 300, "apr": 0.29, "minimum_payment": 25},
            ],
            "monthly_budget": 500,
            "payment_frequency": "biweekly",
        },
    )

    assert result["total_minimum"] == 75.0
    assert result["extra_budget"] == 425.0
    # high is cleared with 300, the remaining 150 cascades to low
    assert [a["account_id"] for a in result["allocations"]] == ["high", "low"]
    assert [a["recommended_payment"] for a in result["allocations"]] == [300.0, 200.0]
    assert result["payment_frequency"] == "biweekly"
    assert result["frequency_advice"].startswith("Biweekly payments")


def test_payment_timing_tool_reports_shortfall():
    result = dispatch_tool(
        "optimize_payment_timing",
        {
            "accounts": [{"id": "a", "balance": 2000, "apr": 0.2, "minimum_payment": 75}],
            "monthly_budget": 50,
        },
    )

    assert result["error"] == "insufficient_budget"
    assert result["shortfall"] == 25.0


def test_payment_timing_tool_rejects_unknown_frequency():
    result = dispatch_tool(
        "optimize_payment_timing",
        {
            "accounts": [{"id": "a", "balance": 2000, "apr": 0.2, "minimum_payment": 75}],
            "monthly_budget": 500,
            "payment_frequency": "daily",
        },
    )

    assert result["error"] == "invalid_parameter"
    assert result["field"] == "payment_frequency"


def test_credit_impact_tool_scores_scenarios():
    """5000 owed on 15000 of limit is 33% utilization"""
    result = dispatch_tool(
        "calculate_credit_impact",
        {
            "accounts": [
                {"name": "Visa", "balance": 4000, "limit": 10000},
                {"name": "Store", "balance": 1000, "limit": 5000},
            ],
            "paymentScenarios": [
                {"label": "Minimum", "amount": 100},
                {"label": "Bonus", "amount": 2000},
                {"label": "Everything", "amount": 6000},
            ],
            "currentScore": 680,
        },
    )

    assert result["utilization"] == pytest.approx(0.3333)
    minimum, bonus, everything = result["scenarios"]

    assert minimum["impact_level"] == "minimal"
    assert minimum["estimated_score_impact"] == 2

    # 0.333 -> 0.2: 47 points plus 20 for dropping under 30%
    assert bonus["new_utilization"] == pytest.approx(0.2)
    assert bonus["impact_level"] == "significant"
    assert bonus["estimated_score_impact"] == 67
    assert bonus["projected_score"] == 747

    assert everything["new_debt"] == 0.0
    assert everything["impact_level"] == "excellent"
    assert everything["estimated_score_impact"] == 147

    assert len(result["recommendations"]) == 2
    assert result["disclaimer"]


def test_credit_impact_tool_reports_negative_amount():
    result = dispatch_tool(
        "calculate_credit_impact",
        {
            "accounts": [{"id": "a", "balance": 1000, "limit": 2000}],
            "payment_scenarios": [{"label": "Refund", "amount": -50}],
        },
    )

    assert result["error"] == "invalid_parameter"
    assert result["field"] == "amount"
