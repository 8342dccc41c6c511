"""Unit tests for trend statistics and debt-free projection"""

import pytest
from datetime import date, datetime, timedelta
from payoff_engine.domain.models import DebtAccount, FinancialSnapshot, Milestone
from payoff_engine.domain.trends import (
    average_monthly_reduction,
    build_snapshot,
    calculate_improvement,
    classify_trend,
    detect_milestones,
    months_until_debt_free,
    project,
    weighted_apr,
)


def test_weighted_apr_single_account_is_exact():
    account = DebtAccount(id="a", balance=3.0, annual_rate=0.1, minimum_payment=1.0)
    assert weighted_apr([account]) == 0.1


def test_weighted_apr_is_balance_weighted():
    """(9000 * 0.2 + 1000 * 0.1) / 10000 = 0.19, not the 0.15 arithmetic mean"""
    accounts = [
        DebtAccount(id="big", balance=9000.0, annual_rate=0.2, minimum_payment=100.0),
        DebtAccount(id="small", balance=1000.0, annual_rate=0.1, minimum_payment=25.0),
    ]
    assert weighted_apr(accounts) == pytest.approx(0.19)


def test_weighted_apr_ignores_zero_balances():
    accounts = [
        DebtAccount(id="paid", balance=0.0, annual_rate=0.29, minimum_payment=0.0),
        DebtAccount(id="open", balance=500.0, annual_rate=0.15, minimum_payment=25.0),
    ]
    assert weighted_apr(accounts) == 0.15


def test_weighted_apr_zero_total_balance_is_zero():
    accounts = [DebtAccount(id="a", balance=0.0, annual_rate=0.2, minimum_payment=0.0)]
    assert weighted_apr(accounts) == 0.0
    assert weighted_apr([]) == 0.0


def test_constant_decrease_gives_constant_reduction(history):
    snapshots = history([5000.0, 4750.0, 4500.0, 4250.0, 4000.0])
    assert average_monthly_reduction(snapshots) == 250.0


def test_increases_excluded_from_average(history):
    """Decreases of 300 and 100 average to 200; the 500 jump is ignored"""
    snapshots = history([5000.0, 4700.0, 5200.0, 5100.0])
    assert average_monthly_reduction(snapshots) == pytest.approx(200.0)


def test_no_decreasing_pair_gives_zero(history):
    assert average_monthly_reduction(history([1000.0, 1200.0, 1200.0])) == 0.0
    assert average_monthly_reduction(history([1000.0])) == 0.0
    assert average_monthly_reduction([]) == 0.0


def test_unordered_input_is_sorted_first(history):
    snapshots = history([3000.0, 2000.0, 1000.0])
    assert average_monthly_reduction(list(reversed(snapshots))) == 1000.0


@pytest.mark.parametrize(
    "current, reduction, expected",
    [
        (500.0, 100.0, 5),
        (401.0, 100.0, 5),
        (0.7, 0.1, 7),
        (100.0, 0.0, None),
        (0.0, 100.0, None),
        (100.0, -5.0, None),
    ],
)
def test_months_until_debt_free_rounds_up(current, reduction, expected):
    assert months_until_debt_free(current, reduction) == expected


def test_project_exact_and_fractional_ceiling(history):
    exact = project(history([700.0, 600.0, 500.0]), today=date(2025, 1, 15))
    assert exact.months_remaining == 5
    assert exact.projected_debt_free_date == date(2025, 6, 15)

    fractional = project(history([601.0, 501.0, 401.0]), today=date(2025, 1, 15))
    assert fractional.months_remaining == 5


def test_project_clamps_day_of_month(history):
    projection = project(history([300.0, 200.0, 100.0]), today=date(2025, 1, 31))
    assert projection.months_remaining == 1
    assert projection.projected_debt_free_date == date(2025, 2, 28)


def test_project_without_progress_has_no_projection(history):
    projection = project(history([1000.0, 1100.0, 1300.0]), today=date(2025, 1, 1))

    assert projection.months_remaining is None
    assert projection.projected_debt_free_date is None
    assert projection.average_monthly_reduction == 0.0
    assert projection.trend == "worsening"


def test_project_debt_already_cleared(history):
    projection = project(history([500.0, 0.0]), today=date(2025, 1, 1))

    assert projection.average_monthly_reduction == 500.0
    assert projection.months_remaining is None
    assert projection.current_debt == 0.0


def test_project_empty_history():
    projection = project([], today=date(2025, 1, 1))

    assert projection.months_remaining is None
    assert projection.milestones == []
    assert projection.improvement is None
    assert projection.trend == "stable"


def test_project_too_slow_for_the_calendar_keeps_months_only(history):
    """0.01 a month against a million takes about 1e8 months, far past year 9999"""
    projection = project(history([1_000_000.0, 999_999.99]), today=date(2026, 10, 19))

    assert projection.months_remaining > 99_000_000
    assert projection.projected_debt_free_date is None
    assert projection.trend == "improving"


def test_project_last_representable_month(history):
    """95699 months from January 2025 is December 9999; one more month is out of range"""
    last = project(history([95_700.0, 95_699.0]), today=date(2025, 1, 15))
    assert last.months_remaining == 95_699
    assert last.projected_debt_free_date == date(9999, 12, 15)

    beyond = project(history([95_701.0, 95_700.0]), today=date(2025, 1, 15))
    assert beyond.months_remaining == 95_700
    assert beyond.projected_debt_free_date is None


def test_thirty_entry_milestone_emitted_once(history):
    snapshots = history([2000.0] * 31, interval=timedelta(days=1))

    milestones = detect_milestones(snapshots)

    assert milestones.count(Milestone.TRACKED_30_SNAPSHOTS) == 1
    assert Milestone.TRACKED_90_SNAPSHOTS not in milestones


def test_ninety_entry_milestone(history):
    snapshots = history([2000.0] * 90, interval=timedelta(days=1))
    milestones = detect_milestones(snapshots)
    assert milestones == [Milestone.TRACKED_30_SNAPSHOTS, Milestone.TRACKED_90_SNAPSHOTS]


def test_utilization_milestones_found_anywhere_in_history(history):
    """An early dip below 10% still counts after utilization climbs back"""
    snapshots = history([1000.0, 900.0, 1500.0], utilizations=[0.45, 0.08, 0.6])

    milestones = detect_milestones(snapshots)

    assert milestones == [Milestone.UNDER_30_UTILIZATION, Milestone.UNDER_10_UTILIZATION]


def test_milestones_in_discovery_order(history):
    snapshots = history(
        [5000.0, 4500.0, 3900.0, 3500.0],
        utilizations=[0.5, 0.4, 0.35, 0.25],
    )

    milestones = detect_milestones(snapshots)

    # 1100 paid down at the third snapshot, utilization under 30% only at the fourth
    assert milestones == [Milestone.DEBT_REDUCED_1000, Milestone.UNDER_30_UTILIZATION]


def test_debt_reduction_milestone_needs_more_than_threshold(history):
    assert detect_milestones(history([3000.0, 2000.0])) == []
    assert detect_milestones(history([3000.0, 1999.0])) == [Milestone.DEBT_REDUCED_1000]


def test_milestone_labels():
    assert Milestone.UNDER_30_UTILIZATION.label == "Under 30% credit utilization"
    assert all(m.label for m in Milestone)


def test_improvement_between_oldest_and_latest(history):
    snapshots = history([4000.0, 3500.0, 3000.0], utilizations=[0.5, 0.45, 0.4])

    improvement = calculate_improvement(snapshots)

    assert improvement.debt_change == 1000.0
    assert improvement.debt_change_percentage == 25.0
    assert improvement.utilization_change == pytest.approx(0.1)
    assert improvement.days_tracked == 60


def test_improvement_needs_two_snapshots(history):
    assert calculate_improvement(history([1000.0])) is None


def test_trend_classification(history):
    assert classify_trend(history([2000.0, 1500.0])) == "improving"
    assert classify_trend(history([1500.0, 2000.0])) == "worsening"
    assert classify_trend(history([1500.0, 1500.0])) == "stable"


def test_project_full_result(history):
    snapshots = history([3000.0, 2800.0, 2900.0, 2600.0], utilizations=[0.4, 0.35, 0.36, 0.28])

    projection = project(snapshots, today=date(2025, 3, 10))

    # reductions 200 and 300 -> 250/month; 2600 / 250 = 10.4 -> 11
    assert projection.average_monthly_reduction == 250.0
    assert projection.months_remaining == 11
    assert projection.projected_debt_free_date == date(2026, 2, 10)
    assert projection.milestones == [Milestone.UNDER_30_UTILIZATION]
    assert projection.trend == "improving"
    assert projection.current_debt == 2600.0


def test_build_snapshot_from_accounts():
    accounts = [
        DebtAccount(id="a", balance=1500.0, annual_rate=0.2, minimum_payment=45.0, credit_limit=5000.0),
        DebtAccount(id="b", balance=500.0, annual_rate=0.1, minimum_payment=25.0, credit_limit=5000.0),
    ]
    previous = FinancialSnapshot(
        timestamp=datetime(2025, 1, 1),
        total_debt=2400.0,
        credit_utilization=0.24,
        weighted_average_rate=0.18,
    )

    snapshot = build_snapshot(accounts, timestamp=datetime(2025, 2, 1), previous=previous)

    assert snapshot.total_debt == 2000.0
    assert snapshot.total_credit_limit == 10000.0
    assert snapshot.credit_utilization == pytest.approx(0.2)
    assert snapshot.weighted_average_rate == pytest.approx(0.175)
    assert snapshot.minimum_payment_total == 70.0
    assert snapshot.debt_change_from_previous == 400.0


def test_build_snapshot_without_limits_or_previous():
    accounts = [DebtAccount(id="a", balance=800.0, annual_rate=0.22, minimum_payment=30.0)]

    snapshot = build_snapshot(accounts, timestamp=datetime(2025, 2, 1))

    assert snapshot.credit_utilization == 0.0
    assert snapshot.debt_change_from_previous is None
    assert snapshot.weighted_average_rate == 0.22


def test_build_snapshot_caps_over_limit_utilization():
    account = DebtAccount(id="a", balance=1200.0, annual_rate=0.25, minimum_payment=40.0, credit_limit=1000.0)

    snapshot = build_snapshot([account], timestamp=datetime(2025, 2, 1))

    assert snapshot.credit_utilization == 1.0
    assert snapshot.total_debt == 1200.0
