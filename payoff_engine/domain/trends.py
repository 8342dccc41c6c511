"""Trend and projection engine - statistics over a snapshot history"""

import math
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from payoff_engine.domain.models import (
    DebtAccount,
    FinancialSnapshot,
    Improvement,
    Milestone,
    ProjectionResult,
)
from payoff_engine.utils.date_utils import add_months, days_between

UTILIZATION_GOOD = 0.30
UTILIZATION_EXCELLENT = 0.10
TRACKING_SHORT = 30
TRACKING_LONG = 90
DEBT_REDUCTION_THRESHOLD = 1000.0


def weighted_apr(accounts: Iterable[DebtAccount]) -> float:
    """
    Balance-weighted blended annual rate across accounts with a positive balance.

    sum(balance_i * rate_i) / sum(balance_i); 0.0 when nothing is owed.
    An unweighted mean would understate the blended cost when balances are uneven.
    """
    owing = [a for a in accounts if a.balance > 0]
    if not owing:
        return 0.0

    # Same rate everywhere: return it untouched rather than a rounded quotient
    rates = {a.annual_rate for a in owing}
    if len(rates) == 1:
        return owing[0].annual_rate

    total_balance = math.fsum(a.balance for a in owing)
    weighted = math.fsum(a.balance * a.annual_rate for a in owing)
    return weighted / total_balance


def _chronological(snapshots: Iterable[FinancialSnapshot]) -> List[FinancialSnapshot]:
    return sorted(snapshots, key=lambda s: s.timestamp)


def average_monthly_reduction(snapshots: Sequence[FinancialSnapshot]) -> float:
    """
    Mean decrease across consecutive pairs where debt went down.

    Pairs where debt rose are left out entirely rather than counted as
    negative progress. 0.0 when no pair shows a decrease.
    """
    ordered = _chronological(snapshots)

    total_reduction = 0.0
    reducing_periods = 0
    for previous, current in zip(ordered, ordered[1:]):
        reduction = previous.total_debt - current.total_debt
        if reduction > 0:
            total_reduction += reduction
            reducing_periods += 1

    return total_reduction / reducing_periods if reducing_periods > 0 else 0.0


def months_until_debt_free(current_debt: float, monthly_reduction: float) -> Optional[int]:
    """Months needed at the given pace, always rounded up; None when no progress is being made"""
    if monthly_reduction <= 0 or current_debt <= 0:
        return None
    ratio = current_debt / monthly_reduction
    if not math.isfinite(ratio):
        return None
    # Strip float noise so an exact 5.0 never becomes 6
    return math.ceil(round(ratio, 9))


def _within_calendar(start: date, months: int) -> bool:
    """True when start shifted by months is still representable as a date"""
    return start.year + (start.month - 1 + months) // 12 <= date.max.year


def detect_milestones(snapshots: Sequence[FinancialSnapshot]) -> List[Milestone]:
    """
    Walk the whole history and collect each milestone the first time it is reached.

    Per snapshot the checks run in a fixed order, so the output order is the
    discovery order through the history.
    """
    ordered = _chronological(snapshots)
    if not ordered:
        return []

    starting_debt = ordered[0].total_debt
    milestones: List[Milestone] = []

    def reach(milestone: Milestone) -> None:
        if milestone not in milestones:
            milestones.append(milestone)

    for position, snapshot in enumerate(ordered, start=1):
        if snapshot.credit_utilization < UTILIZATION_GOOD:
            reach(Milestone.UNDER_30_UTILIZATION)
        if snapshot.credit_utilization < UTILIZATION_EXCELLENT:
            reach(Milestone.UNDER_10_UTILIZATION)
        if position >= TRACKING_SHORT:
            reach(Milestone.TRACKED_30_SNAPSHOTS)
        if position >= TRACKING_LONG:
            reach(Milestone.TRACKED_90_SNAPSHOTS)
        if starting_debt - snapshot.total_debt > DEBT_REDUCTION_THRESHOLD:
            reach(Milestone.DEBT_REDUCED_1000)

    return milestones


def calculate_improvement(snapshots: Sequence[FinancialSnapshot]) -> Optional[Improvement]:
    """Compare the oldest and latest snapshot; None with fewer than two"""
    ordered = _chronological(snapshots)
    if len(ordered) < 2:
        return None

    oldest, latest = ordered[0], ordered[-1]
    debt_change = oldest.total_debt - latest.total_debt
    percentage = (debt_change / oldest.total_debt) * 100 if oldest.total_debt > 0 else 0.0

    return Improvement(
        debt_change=round(debt_change, 2),
        debt_change_percentage=round(percentage, 2),
        utilization_change=round(oldest.credit_utilization - latest.credit_utilization, 4),
        days_tracked=days_between(oldest.timestamp, latest.timestamp),
    )


def classify_trend(snapshots: Sequence[FinancialSnapshot]) -> str:
    """improving / worsening / stable, by latest versus oldest debt"""
    ordered = _chronological(snapshots)
    if len(ordered) < 2:
        return "stable"
    if ordered[-1].total_debt < ordered[0].total_debt:
        return "improving"
    if ordered[-1].total_debt > ordered[0].total_debt:
        return "worsening"
    return "stable"


def project(snapshots: Sequence[FinancialSnapshot], today: date | None = None) -> ProjectionResult:
    """
    Main entry point: derive trend statistics and a debt-free projection.

    The projected date is today plus months_remaining calendar months. No
    projection (None for both) when the reduction rate or current debt is not
    positive. A pace so slow that the date would land past year 9999 keeps
    months_remaining but has no projected date.
    """
    if today is None:
        today = date.today()

    ordered = _chronological(snapshots)
    current_debt = ordered[-1].total_debt if ordered else 0.0
    reduction = average_monthly_reduction(ordered)

    months_remaining = months_until_debt_free(current_debt, reduction)
    projected_date = None
    if months_remaining is not None and _within_calendar(today, months_remaining):
        projected_date = add_months(today, months_remaining)

    return ProjectionResult(
        current_debt=current_debt,
        average_monthly_reduction=reduction,
        months_remaining=months_remaining,
        projected_debt_free_date=projected_date,
        milestones=detect_milestones(ordered),
        improvement=calculate_improvement(ordered),
        trend=classify_trend(ordered),
    )


def build_snapshot(
    accounts: Sequence[DebtAccount],
    timestamp: datetime,
    previous: FinancialSnapshot | None = None,
) -> FinancialSnapshot:
    """
    Summarize current accounts into a snapshot.

    Utilization is total debt over total credit limit (0 when no limits are
    known), capped at 1.0 for over-limit debt. debt_change_from_previous is
    positive when debt went down.
    """
    total_debt = sum(a.balance for a in accounts)
    total_limit = sum(a.credit_limit or 0.0 for a in accounts)
    utilization = min(total_debt / total_limit, 1.0) if total_limit > 0 else 0.0

    change = None
    if previous is not None:
        change = round(previous.total_debt - total_debt, 2)

    return FinancialSnapshot(
        timestamp=timestamp,
        total_debt=round(total_debt, 2),
        credit_utilization=utilization,
        weighted_average_rate=weighted_apr(accounts),
        debt_change_from_previous=change,
        total_credit_limit=round(total_limit, 2),
        minimum_payment_total=round(sum(a.minimum_payment for a in accounts), 2),
    )
