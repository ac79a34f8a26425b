"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Strategy(str, Enum):
    """Debt payoff prioritization policy"""

    AVALANCHE = "avalanche"  # highest interest rate first
    SNOWBALL = "snowball"  # smallest balance first
    HYBRID = "hybrid"  # weighted composite score


class Recurrence(str, Enum):
    """How often an income stream pays out"""

    NONE = "none"  # one-time
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"


class AssetClass(str, Enum):
    """Coarse asset classes used by the portfolio risk proxies"""

    STOCKS = "stocks"
    BONDS = "bonds"
    CASH = "cash"
    ALTERNATIVES = "alternatives"


# ---------------------------------------------------------------------------
# Debts
# ---------------------------------------------------------------------------


@dataclass
class Debt:
    """One liability loaded from the record source"""

    id: str
    name: str
    balance: float
    interest_rate: float  # annual percentage, e.g. 19.99
    minimum_payment: float


@dataclass(frozen=True)
class MonthlyPayment:
    """Aggregate payment activity across all debts for one simulated month"""

    month: int
    payment: float
    remaining_balance: float
    interest_paid: float
    principal_paid: float


@dataclass(frozen=True)
class DebtProgress:
    """Per-debt totals at the end of a simulation run"""

    id: str
    name: str
    initial_balance: float
    amount_paid: float
    interest_paid: float
    days_to_payoff: int  # 0 when the debt was not retired within the cap


@dataclass(frozen=True)
class PayoffResult:
    """Outcome of running one strategy over a debt snapshot"""

    strategy: Strategy
    total_interest: float
    total_payments: float
    months_to_payoff: int
    debt_free_date: date
    payoff_order: List[str]
    monthly_payments: List[MonthlyPayment]
    debt_progress: List[DebtProgress]


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


@dataclass
class NamedAmount:
    """A deduction or side hustle attached to an income"""

    name: str
    amount: float


@dataclass
class IncomeRecord:
    """One income stream"""

    amount: float
    recurrence: Recurrence = Recurrence.MONTHLY
    category: Optional[str] = None
    source_name: str = ""
    deductions: List[NamedAmount] = field(default_factory=list)
    side_hustles: List[NamedAmount] = field(default_factory=list)

    @property
    def total_deductions(self) -> float:
        return sum(d.amount for d in self.deductions)

    @property
    def total_side_hustles(self) -> float:
        return sum(h.amount for h in self.side_hustles)

    @property
    def adjusted_amount(self) -> float:
        """Amount after deductions, plus side hustle earnings"""
        return self.amount - self.total_deductions + self.total_side_hustles


@dataclass(frozen=True)
class IncomeBreakdownItem:
    """Share of monthly income held by a single category"""

    source_name: str
    monthly_amount: float
    percentage: float
    score_contribution: float


@dataclass(frozen=True)
class DiversificationScore:
    """Output of the income diversification scorer"""

    overall_score: int
    source_count: int
    primary_dependency: float
    stability_score: int
    growth_potential: int
    breakdown: List[IncomeBreakdownItem] = field(default_factory=list)
    fallback: bool = False  # True when the neutral default was returned after an error


@dataclass(frozen=True)
class Recommendation:
    """Actionable advice derived from a diversification score"""

    title: str
    description: str
    priority: str  # "high" | "medium"


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------


@dataclass
class Investment:
    """One investment position"""

    id: str
    name: str
    cost_basis: float
    current_value: float
    purchase_date: Optional[date] = None
    asset_type: Optional[str] = None  # free-form label, e.g. "Stocks", "Crypto"


@dataclass(frozen=True)
class PerformanceSnapshot:
    """Return metrics for a single investment"""

    absolute_return: float
    percent_return: float
    annualized_return: float


@dataclass(frozen=True)
class OverallPerformance:
    """Portfolio-wide returns plus composition-based risk proxies"""

    total_invested: float
    total_value: float
    total_return: float
    annualized_return: float
    volatility: float
    sharpe_ratio: float
    beta: float
