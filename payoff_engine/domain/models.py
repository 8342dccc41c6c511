"""Domain models - pure Python dataclasses representing engine inputs and outputs"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional


class Strategy(str, Enum):
    """Surplus allocation strategy"""

    AVALANCHE = "avalanche"  # highest rate first
    SNOWBALL = "snowball"  # lowest balance first


class Milestone(str, Enum):
    """Progress tags detected in a snapshot history"""

    UNDER_30_UTILIZATION = "under_30_utilization"
    UNDER_10_UTILIZATION = "under_10_utilization"
    TRACKED_30_SNAPSHOTS = "tracked_30_snapshots"
    TRACKED_90_SNAPSHOTS = "tracked_90_snapshots"
    DEBT_REDUCED_1000 = "debt_reduced_1000"

    @property
    def label(self) -> str:
        return MILESTONE_LABELS[self]


MILESTONE_LABELS = {
    Milestone.UNDER_30_UTILIZATION: "Under 30% credit utilization",
    Milestone.UNDER_10_UTILIZATION: "Under 10% credit utilization",
    Milestone.TRACKED_30_SNAPSHOTS: "30 snapshots of tracking",
    Milestone.TRACKED_90_SNAPSHOTS: "90 snapshots of tracking",
    Milestone.DEBT_REDUCED_1000: "$1,000 of debt paid down",
}


@dataclass(frozen=True)
class DebtAccount:
    """Revolving debt account supplied by the caller"""

    id: str
    balance: float
    annual_rate: float  # fraction, e.g. 0.1999 for 19.99%
    minimum_payment: float
    name: Optional[str] = None
    credit_limit: Optional[float] = None


@dataclass
class PayoffStep:
    """One simulated month"""

    month: int  # 1-based
    balances: Dict[str, float]  # end-of-month balance per account
    payments: Dict[str, float]
    interest: Dict[str, float]
    total_interest: float
    total_payment: float


@dataclass
class PayoffResult:
    """Outcome of a payoff simulation"""

    strategy: Strategy
    monthly_budget: float
    months_to_debt_free: Optional[int]  # None when the safety bound was hit
    total_interest_paid: float
    total_paid: float
    steps: List[PayoffStep] = field(default_factory=list)
    payoff_order: List[str] = field(default_factory=list)
    payoff_months: Dict[str, int] = field(default_factory=dict)

    @property
    def converged(self) -> bool:
        return self.months_to_debt_free is not None


@dataclass
class StrategyComparison:
    """Avalanche and snowball run side by side on identical inputs"""

    avalanche: PayoffResult
    snowball: PayoffResult
    interest_savings: float  # snowball interest minus avalanche interest
    months_saved: Optional[int]
    recommended: Strategy


@dataclass(frozen=True)
class FinancialSnapshot:
    """Point-in-time summary of a user's aggregate debt state"""

    timestamp: datetime
    total_debt: float
    credit_utilization: float  # fraction in [0, 1]
    weighted_average_rate: float
    debt_change_from_previous: Optional[float] = None  # previous minus current
    total_credit_limit: Optional[float] = None
    minimum_payment_total: Optional[float] = None


@dataclass
class Improvement:
    """Change between the oldest and latest snapshot"""

    debt_change: float
    debt_change_percentage: float
    utilization_change: float
    days_tracked: int


@dataclass
class ProjectionResult:
    """Trend statistics and debt-free projection"""

    current_debt: float
    average_monthly_reduction: float
    months_remaining: Optional[int]
    projected_debt_free_date: Optional[date]
    milestones: List[Milestone]
    improvement: Optional[Improvement]
    trend: str  # "improving" | "worsening" | "stable"


class PaymentFrequency(str, Enum):
    """How often the user can send payments"""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass
class BalanceTransferAnalysis:
    """Staying on current cards versus a promotional transfer, over the promo period"""

    total_debt: float
    transfer_apr: float
    transfer_fee_rate: float
    promo_months: int
    current_monthly_interest: float
    current_interest_over_promo: float
    transfer_fee: float  # dollars
    promo_interest: float
    transfer_cost: float  # fee plus promo interest
    savings: float  # positive when the transfer is cheaper

    @property
    def recommended(self) -> bool:
        return self.savings > 0


@dataclass
class PaymentAllocation:
    """Suggested payment for one account within a monthly budget"""

    account_id: str
    annual_rate: float
    balance: float
    minimum_payment: float
    recommended_payment: float
    monthly_interest: float  # interest the current balance accrues in a month


@dataclass
class PaymentPlan:
    """One month's budget split across accounts, highest rate first"""

    monthly_budget: float
    total_minimum: float
    extra_budget: float
    frequency: PaymentFrequency
    allocations: List[PaymentAllocation] = field(default_factory=list)


@dataclass(frozen=True)
class PaymentScenario:
    """A one-off lump-sum payment to evaluate"""

    label: str
    amount: float


@dataclass
class CreditImpactScenario:
    """Estimated utilization and score effect of one payment scenario"""

    label: str
    amount: float
    new_debt: float
    new_utilization: float
    utilization_change: float  # current minus new, positive is better
    estimated_score_impact: int
    impact_level: str  # "excellent" | "significant" | "moderate" | "modest" | "minimal"
    projected_score: Optional[int] = None


@dataclass
class CreditImpactAnalysis:
    """Current utilization plus one estimate per payment scenario"""

    total_debt: float
    total_limit: float
    utilization: float
    current_score: Optional[int]
    scenarios: List[CreditImpactScenario] = field(default_factory=list)
