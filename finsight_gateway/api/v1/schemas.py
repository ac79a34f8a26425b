"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Dict, List, Optional

from finsight_gateway.domain.models import Debt, Recurrence, Strategy


# ---------------------------------------------------------------------------
# Debts
# ---------------------------------------------------------------------------


class DebtSchema(BaseModel):
    """Single debt submitted for simulation"""

    id: Optional[str] = None
    name: str = Field(..., min_length=1, description="Display label")
    balance: float = Field(..., ge=0, allow_inf_nan=False, description="Current balance")
    interest_rate: float = Field(..., ge=0, allow_inf_nan=False, description="Annual interest rate in percent")
    minimum_payment: float = Field(0.0, ge=0, allow_inf_nan=False, description="Minimum monthly payment")

    def to_domain(self, position: int) -> Debt:
        return Debt(
            id=self.id or f"debt-{position + 1}",
            name=self.name,
            balance=self.balance,
            interest_rate=self.interest_rate,
            minimum_payment=self.minimum_payment,
        )


class SimulationRequest(BaseModel):
    """Request body for POST /v1/debts/simulate"""

    debts: List[DebtSchema] = Field(default_factory=list)
    extra_monthly_payment: float = Field(0.0, ge=0, allow_inf_nan=False)


class MonthlyPaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    payment: float
    remaining_balance: float
    interest_paid: float
    principal_paid: float


class DebtProgressSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    initial_balance: float
    amount_paid: float
    interest_paid: float
    days_to_payoff: int


class PayoffResultSchema(BaseModel):
    """One strategy's payoff schedule"""

    model_config = ConfigDict(from_attributes=True)

    strategy: Strategy
    total_interest: float
    total_payments: float
    months_to_payoff: int
    debt_free_date: date
    payoff_order: List[str]
    monthly_payments: List[MonthlyPaymentSchema]
    debt_progress: List[DebtProgressSchema]


class SimulationResponse(BaseModel):
    """Response for debt payoff simulation endpoints"""

    results: List[PayoffResultSchema]
    best_strategy: Optional[Strategy] = None
    interest_saved_vs_worst: float = 0.0
    comparison: List[Dict[str, float]] = Field(default_factory=list)
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


class MonthlyEquivalentRequest(BaseModel):
    """Request body for POST /v1/income/monthly-equivalent"""

    amount: float = Field(..., allow_inf_nan=False)
    recurrence: Recurrence


class MonthlyEquivalentResponse(BaseModel):
    amount: float
    recurrence: Recurrence
    monthly_equivalent: float


class IncomeBreakdownSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    source_name: str
    monthly_amount: float
    percentage: float
    score_contribution: float


class RecommendationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str
    priority: str


class DiversificationResponse(BaseModel):
    """Response for GET /v1/income/diversification"""

    model_config = ConfigDict(from_attributes=True)

    overall_score: int
    rating: str
    source_count: int
    primary_dependency: float
    stability_score: int
    growth_potential: int
    total_monthly_income: float
    breakdown: List[IncomeBreakdownSchema]
    recommendations: List[RecommendationSchema]


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------


class InvestmentPerformanceSchema(BaseModel):
    """Per-investment return metrics"""

    id: str
    name: str
    cost_basis: float
    current_value: float
    purchase_date: Optional[date] = None
    absolute_return: float
    percent_return: float
    annualized_return: float


class RiskMetricsSchema(BaseModel):
    volatility: float
    volatility_label: str
    sharpe_ratio: float
    sharpe_label: str
    beta: float
    beta_label: str


class PerformanceResponse(BaseModel):
    """Response for GET /v1/investments/performance"""

    total_invested: float
    total_value: float
    total_return: float
    annualized_return: float
    risk_metrics: RiskMetricsSchema
    investments: List[InvestmentPerformanceSchema]
