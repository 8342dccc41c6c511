"""Human-readable summaries of simulation results"""

from typing import List

from payoff_engine.domain.models import (
    BalanceTransferAnalysis,
    PaymentFrequency,
    PayoffResult,
    StrategyComparison,
)


def format_duration(months: int) -> str:
    """14 -> '1 year and 2 months', 5 -> '5 months'"""
    years, remainder = divmod(months, 12)
    month_part = f"{remainder} month{'s' if remainder != 1 else ''}"
    if years == 0:
        return month_part
    year_part = f"{years} year{'s' if years > 1 else ''}"
    return f"{year_part} and {month_part}"


def generate_recommendation(result: PayoffResult) -> str:
    """One-sentence summary of a simulation suitable for showing to the user"""
    strategy = result.strategy.value

    if not result.converged:
        return (
            f"Using the {strategy} method, your debt would not be paid off within "
            f"{format_duration(len(result.steps))}. Increase your monthly budget above "
            f"${result.monthly_budget:,.2f} so payments outpace interest."
        )

    if result.months_to_debt_free == 0:
        return "You have no outstanding balances to pay off."

    return (
        f"Using the {strategy} method, you'll be debt-free in "
        f"{format_duration(result.months_to_debt_free)} and pay "
        f"${result.total_interest_paid:,.2f} in total interest."
    )


def compare_recommendation(comparison: StrategyComparison) -> str:
    """Summarize which strategy to pick and what it saves"""
    recommended = comparison.recommended.value
    savings = abs(comparison.interest_savings)

    if savings < 0.01:
        return (
            f"Both methods cost the same in interest; {recommended} is recommended "
            f"because it targets the highest rates first."
        )

    chosen = comparison.avalanche if recommended == "avalanche" else comparison.snowball
    summary = f"The {recommended} method saves ${savings:,.2f} in interest"
    if chosen.converged:
        summary += f" and clears your debt in {format_duration(chosen.months_to_debt_free)}"
    return summary + "."


def balance_transfer_advice(analysis: BalanceTransferAnalysis) -> str:
    if analysis.recommended:
        return (
            f"You could save ${analysis.savings:,.2f} with a balance transfer. Pay the balance off "
            f"before the {analysis.promo_months}-month promotional period ends."
        )
    return (
        f"A balance transfer would cost you more once the {analysis.transfer_fee_rate * 100:.1f}% "
        f"transfer fee is included. Consider asking your current issuer for a lower rate instead."
    )


FREQUENCY_ADVICE = {
    PaymentFrequency.WEEKLY: "Weekly payments keep your average daily balance low, which lowers interest charges.",
    PaymentFrequency.BIWEEKLY: "Biweekly payments reduce your average daily balance faster than monthly payments.",
    PaymentFrequency.MONTHLY: "Consider switching to biweekly or weekly payments to save on interest.",
}


def utilization_advice(utilization: float) -> List[str]:
    """Every tip that applies at the given utilization, most urgent first"""
    if utilization <= 0.10:
        return ["Your utilization is under 10%, which is optimal for credit scores."]

    tips = []
    if utilization > 0.50:
        tips.append("High utilization (over 50%) significantly hurts your score. Prioritize getting under 30%.")
    if utilization > 0.30:
        tips.append("Getting under 30% utilization will have a noticeable positive impact on your credit score.")
    tips.append("Reaching under 10% utilization is ideal for maximizing your credit score.")
    return tips
