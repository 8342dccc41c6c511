"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from payoff_engine.config import settings
from payoff_engine.domain.balance_transfer import DEFAULT_TRANSFER_FEE
from payoff_engine.domain.models import (
    BalanceTransferAnalysis,
    CreditImpactAnalysis,
    DebtAccount,
    FinancialSnapshot,
    Improvement,
    Milestone,
    PaymentPlan,
    PaymentScenario,
    PayoffResult,
    PayoffStep,
    ProjectionResult,
    StrategyComparison,
)


class AccountSchema(BaseModel):
    """Debt account as supplied by a client"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Account identifier, unique within the request")
    balance: float = Field(..., description="Current balance owed")
    annual_rate: float = Field(
        ...,
        validation_alias=AliasChoices("annual_rate", "apr"),
        description="Annual rate as a fraction, e.g. 0.1999 for 19.99%",
    )
    minimum_payment: float = Field(
        ...,
        validation_alias=AliasChoices("minimum_payment", "min_payment", "minPayment"),
        description="Monthly minimum payment",
    )
    name: Optional[str] = None
    credit_limit: Optional[float] = Field(
        None, validation_alias=AliasChoices("credit_limit", "limit")
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> DebtAccount:
        return DebtAccount(
            id=self.id,
            balance=self.balance,
            annual_rate=self.annual_rate,
            minimum_payment=self.minimum_payment,
            name=self.name,
            credit_limit=self.credit_limit,
        )


class SimulationRequest(BaseModel):
    """Request body for POST /v1/payoff/simulate"""

    accounts: List[AccountSchema]
    monthly_budget: float = Field(..., description="Total amount available for debt each month, minimums included")
    strategy: str = Field(settings.default_strategy, description="avalanche or snowball")


class ComparisonRequest(BaseModel):
    """Request body for POST /v1/payoff/compare"""

    accounts: List[AccountSchema]
    monthly_budget: float


class PayoffStepSchema(BaseModel):
    """Single simulated month"""

    month: int
    balances: Dict[str, float]
    payments: Dict[str, float]
    interest: Dict[str, float]
    total_interest: float
    total_payment: float

    @classmethod
    def from_domain(cls, step: PayoffStep) -> "PayoffStepSchema":
        return cls(
            month=step.month,
            balances=step.balances,
            payments=step.payments,
            interest=step.interest,
            total_interest=step.total_interest,
            total_payment=step.total_payment,
        )


class PayoffResultSchema(BaseModel):
    """Complete simulation outcome"""

    strategy: str
    monthly_budget: float
    converged: bool
    months_to_debt_free: Optional[int] = None
    total_interest_paid: float
    total_paid: float
    payoff_order: List[str]
    payoff_months: Dict[str, int]
    steps: List[PayoffStepSchema]

    @classmethod
    def from_domain(cls, result: PayoffResult) -> "PayoffResultSchema":
        return cls(
            strategy=result.strategy.value,
            monthly_budget=result.monthly_budget,
            converged=result.converged,
            months_to_debt_free=result.months_to_debt_free,
            total_interest_paid=result.total_interest_paid,
            total_paid=result.total_paid,
            payoff_order=result.payoff_order,
            payoff_months=result.payoff_months,
            steps=[PayoffStepSchema.from_domain(s) for s in result.steps],
        )


class SimulationResponse(BaseModel):
    """Response for POST /v1/payoff/simulate"""

    strategy: str
    result: PayoffResultSchema
    recommendation: str


class ComparisonResponse(BaseModel):
    """Response for POST /v1/payoff/compare"""

    avalanche: PayoffResultSchema
    snowball: PayoffResultSchema
    interest_savings: float
    months_saved: Optional[int] = None
    recommended: str
    recommendation: str

    @classmethod
    def from_domain(cls, comparison: StrategyComparison, recommendation: str) -> "ComparisonResponse":
        return cls(
            avalanche=PayoffResultSchema.from_domain(comparison.avalanche),
            snowball=PayoffResultSchema.from_domain(comparison.snowball),
            interest_savings=comparison.interest_savings,
            months_saved=comparison.months_saved,
            recommended=comparison.recommended.value,
            recommendation=recommendation,
        )


class SnapshotSchema(BaseModel):
    """Recorded point-in-time debt summary"""

    timestamp: datetime
    total_debt: float
    credit_utilization: float = Field(..., ge=0, le=1)
    weighted_average_rate: float = Field(..., ge=0)
    debt_change_from_previous: Optional[float] = None
    total_credit_limit: Optional[float] = None
    minimum_payment_total: Optional[float] = None

    def to_domain(self) -> FinancialSnapshot:
        return FinancialSnapshot(
            timestamp=self.timestamp,
            total_debt=self.total_debt,
            credit_utilization=self.credit_utilization,
            weighted_average_rate=self.weighted_average_rate,
            debt_change_from_previous=self.debt_change_from_previous,
            total_credit_limit=self.total_credit_limit,
            minimum_payment_total=self.minimum_payment_total,
        )

    @classmethod
    def from_domain(cls, snapshot: FinancialSnapshot) -> "SnapshotSchema":
        return cls(
            timestamp=snapshot.timestamp,
            total_debt=snapshot.total_debt,
            credit_utilization=snapshot.credit_utilization,
            weighted_average_rate=snapshot.weighted_average_rate,
            debt_change_from_previous=snapshot.debt_change_from_previous,
            total_credit_limit=snapshot.total_credit_limit,
            minimum_payment_total=snapshot.minimum_payment_total,
        )


class ProjectionRequest(BaseModel):
    """Request body for POST /v1/projections"""

    snapshots: List[SnapshotSchema]


class MilestoneSchema(BaseModel):
    tag: str
    label: str

    @classmethod
    def from_domain(cls, milestone: Milestone) -> "MilestoneSchema":
        return cls(tag=milestone.value, label=milestone.label)


class ImprovementSchema(BaseModel):
    debt_change: float
    debt_change_percentage: float
    utilization_change: float
    days_tracked: int

    @classmethod
    def from_domain(cls, improvement: Improvement) -> "ImprovementSchema":
        return cls(
            debt_change=improvement.debt_change,
            debt_change_percentage=improvement.debt_change_percentage,
            utilization_change=improvement.utilization_change,
            days_tracked=improvement.days_tracked,
        )


class ProjectionResponse(BaseModel):
    """Response for POST /v1/projections"""

    current_debt: float
    average_monthly_reduction: float
    months_remaining: Optional[int] = None
    projected_debt_free_date: Optional[date] = None
    milestones: List[MilestoneSchema]
    improvement: Optional[ImprovementSchema] = None
    trend: str

    @classmethod
    def from_domain(cls, projection: ProjectionResult) -> "ProjectionResponse":
        return cls(
            current_debt=projection.current_debt,
            average_monthly_reduction=projection.average_monthly_reduction,
            months_remaining=projection.months_remaining,
            projected_debt_free_date=projection.projected_debt_free_date,
            milestones=[MilestoneSchema.from_domain(m) for m in projection.milestones],
            improvement=(
                ImprovementSchema.from_domain(projection.improvement)
                if projection.improvement is not None
                else None
            ),
            trend=projection.trend,
        )


class WeightedAprRequest(BaseModel):
    """Request body for POST /v1/projections/weighted-apr"""

    accounts: List[AccountSchema]


class WeightedAprResponse(BaseModel):
    weighted_apr: float
    total_balance: float


class SnapshotBuildRequest(BaseModel):
    """Request body for POST /v1/projections/snapshot"""

    accounts: List[AccountSchema]
    timestamp: Optional[datetime] = None
    previous: Optional[SnapshotSchema] = None


class CardSchema(AccountSchema):
    """Card from a tool call; rate and minimum may be left out"""

    annual_rate: float = Field(0.0, validation_alias=AliasChoices("annual_rate", "apr"))
    minimum_payment: float = Field(
        0.0, validation_alias=AliasChoices("minimum_payment", "min_payment", "minPayment")
    )


class BalanceTransferRequest(BaseModel):
    """Arguments for the balance transfer tool"""

    model_config = ConfigDict(populate_by_name=True)

    accounts: List[CardSchema]
    transfer_apr: float = Field(..., validation_alias=AliasChoices("transfer_apr", "transferAPR"))
    transfer_fee: float = Field(
        DEFAULT_TRANSFER_FEE, validation_alias=AliasChoices("transfer_fee", "transferFee")
    )
    promo_months: int = Field(..., validation_alias=AliasChoices("promo_months", "promoMonths"))


class BalanceTransferResponse(BaseModel):
    recommended: bool
    total_debt: float
    transfer_apr: float
    transfer_fee_rate: float
    promo_months: int
    current_monthly_interest: float
    current_interest_over_promo: float
    transfer_fee: float
    promo_interest: float
    transfer_cost: float
    savings: float
    advice: str

    @classmethod
    def from_domain(cls, analysis: BalanceTransferAnalysis, advice: str) -> "BalanceTransferResponse":
        return cls(
            recommended=analysis.recommended,
            total_debt=analysis.total_debt,
            transfer_apr=analysis.transfer_apr,
            transfer_fee_rate=analysis.transfer_fee_rate,
            promo_months=analysis.promo_months,
            current_monthly_interest=analysis.current_monthly_interest,
            current_interest_over_promo=analysis.current_interest_over_promo,
            transfer_fee=analysis.transfer_fee,
            promo_interest=analysis.promo_interest,
            transfer_cost=analysis.transfer_cost,
            savings=analysis.savings,
            advice=advice,
        )


class PaymentPlanRequest(BaseModel):
    """Arguments for the payment timing tool"""

    model_config = ConfigDict(populate_by_name=True)

    accounts: List[CardSchema]
    monthly_budget: float = Field(..., validation_alias=AliasChoices("monthly_budget", "monthlyBudget"))
    payment_frequency: str = Field(
        "monthly", validation_alias=AliasChoices("payment_frequency", "paymentFrequency")
    )


class PaymentAllocationSchema(BaseModel):
    account_id: str
    annual_rate: float
    balance: float
    minimum_payment: float
    recommended_payment: float
    monthly_interest: float


class PaymentPlanResponse(BaseModel):
    monthly_budget: float
    total_minimum: float
    extra_budget: float
    payment_frequency: str
    allocations: List[PaymentAllocationSchema]
    frequency_advice: str

    @classmethod
    def from_domain(cls, plan: PaymentPlan, frequency_advice: str) -> "PaymentPlanResponse":
        return cls(
            monthly_budget=plan.monthly_budget,
            total_minimum=plan.total_minimum,
            extra_budget=plan.extra_budget,
            payment_frequency=plan.frequency.value,
            allocations=[
                PaymentAllocationSchema(
                    account_id=a.account_id,
                    annual_rate=a.annual_rate,
                    balance=a.balance,
                    minimum_payment=a.minimum_payment,
                    recommended_payment=a.recommended_payment,
                    monthly_interest=a.monthly_interest,
                )
                for a in plan.allocations
            ],
            frequency_advice=frequency_advice,
        )


class PaymentScenarioSchema(BaseModel):
    label: str
    amount: float

    def to_domain(self) -> PaymentScenario:
        return PaymentScenario(label=self.label, amount=self.amount)


class CreditImpactRequest(BaseModel):
    """Arguments for the credit impact tool"""

    model_config = ConfigDict(populate_by_name=True)

    accounts: List[CardSchema]
    payment_scenarios: List[PaymentScenarioSchema] = Field(
        ..., min_length=1, validation_alias=AliasChoices("payment_scenarios", "paymentScenarios")
    )
    current_score: Optional[int] = Field(
        None, ge=300, le=850, validation_alias=AliasChoices("current_score", "currentScore")
    )


class CreditImpactScenarioSchema(BaseModel):
    label: str
    amount: float
    new_debt: float
    new_utilization: float
    utilization_change: float
    estimated_score_impact: int
    impact_level: str
    projected_score: Optional[int] = None


class CreditImpactResponse(BaseModel):
    total_debt: float
    total_limit: float
    utilization: float
    current_score: Optional[int] = None
    scenarios: List[CreditImpactScenarioSchema]
    recommendations: List[str]

    @classmethod
    def from_domain(cls, analysis: CreditImpactAnalysis, recommendations: List[str]) -> "CreditImpactResponse":
        return cls(
            total_debt=analysis.total_debt,
            total_limit=analysis.total_limit,
            utilization=analysis.utilization,
            current_score=analysis.current_score,
            scenarios=[
                CreditImpactScenarioSchema(
                    label=s.label,
                    amount=s.amount,
                    new_debt=s.new_debt,
                    new_utilization=s.new_utilization,
                    utilization_change=s.utilization_change,
                    estimated_score_impact=s.estimated_score_impact,
                    impact_level=s.impact_level,
                    projected_score=s.projected_score,
                )
                for s in analysis.scenarios
            ],
            recommendations=recommendations,
        )
