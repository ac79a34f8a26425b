"""Debt repayment strategy simulator - core business logic for payoff planning"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from finsight_gateway.domain.exceptions import InvalidInputError, SimulationError
from finsight_gateway.domain.models import Debt, DebtProgress, MonthlyPayment, PayoffResult, Strategy
from finsight_gateway.utils.date_utils import add_months

logger = logging.getLogger(__name__)

MAX_MONTHS = 360  # 30-year cap
SMALL_DEBT_THRESHOLD = 5000.0
PAID_OFF_TOLERANCE = 0.005  # sub-cent residue counts as paid off
DAYS_PER_MONTH = 30

STRATEGY_ORDER = (Strategy.AVALANCHE, Strategy.SNOWBALL, Strategy.HYBRID)

# Hybrid composite weights; interest and balance weights are dynamic (see hybrid_scores)
RATIO_WEIGHT = 0.15
BURDEN_WEIGHT = 0.15


@dataclass
class _WorkingDebt:
    """Mutable copy of a Debt owned by a single simulation run"""

    id: str
    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    initial_balance: float
    amount_paid: float = 0.0
    interest_paid: float = 0.0
    days_to_payoff: int = 0
    unpaid_interest: float = 0.0  # interest this month's minimum did not cover

    @classmethod
    def from_debt(cls, debt: Debt) -> "_WorkingDebt":
        return cls(
            id=debt.id,
            name=debt.name,
            balance=float(debt.balance),
            interest_rate=float(debt.interest_rate),
            minimum_payment=float(debt.minimum_payment),
            initial_balance=float(debt.balance),
        )

    @property
    def monthly_interest(self) -> float:
        return self.balance * self.interest_rate / 100 / 12


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _coerce_strategy(strategy: Union[Strategy, str]) -> Strategy:
    try:
        return Strategy(strategy)
    except ValueError as e:
        raise InvalidInputError(f"Unknown repayment strategy: {strategy!r}") from e


def validate_debts(debts: Sequence[Debt], extra_monthly_payment: float) -> None:
    """
    Reject malformed input before any simulation starts.

    Raises:
        InvalidInputError: non-finite or negative balance, rate, minimum payment or extra payment
    """
    if not _is_finite_number(extra_monthly_payment) or extra_monthly_payment < 0:
        raise InvalidInputError("extra_monthly_payment must be a finite, non-negative amount")

    for debt in debts:
        for field_name in ("balance", "interest_rate", "minimum_payment"):
            value = getattr(debt, field_name)
            if not _is_finite_number(value):
                raise InvalidInputError(f"Debt {debt.name!r}: {field_name} must be a finite number")
            if value < 0:
                raise InvalidInputError(f"Debt {debt.name!r}: {field_name} must not be negative")


def _normalize(values: List[float], higher_is_better: bool) -> List[float]:
    """
    Min-max scale values to 0-1 so that 1.0 is the most favourable.

    Identical values all score 0.5. Infinite values (balance/minimum ratio of a
    debt with no minimum payment) sit beyond the top of the finite range.
    """
    if len(set(values)) <= 1:
        return [0.5] * len(values)

    finite = [v for v in values if math.isfinite(v)]
    lo, hi = min(finite), max(finite)

    scores = []
    for value in values:
        if not math.isfinite(value):
            scaled = 1.0
        elif hi == lo:
            scaled = 0.0
        else:
            scaled = (value - lo) / (hi - lo)
        scores.append(scaled if higher_is_better else 1.0 - scaled)
    return scores


def hybrid_scores(debts: Sequence, small_debt_threshold: float = SMALL_DEBT_THRESHOLD) -> List[float]:
    """
    Composite priority score per debt; higher is paid first.

    Factors (each normalized to 0-1):
    - interest rate: higher rate -> higher priority
    - balance: lower balance -> higher priority
    - balance / minimum payment: lower ratio -> higher priority
    - monthly interest burden: lower burden -> higher priority

    Weights shift with the portfolio:
    - interest_weight = 0.4 + (avg_rate / 30) * 0.2
    - balance_weight  = 0.3 + (share of debts below small_debt_threshold) * 0.2
    - ratio and burden weights are fixed at 0.15
    """
    if not debts:
        return []

    count = len(debts)
    avg_rate = sum(d.interest_rate for d in debts) / count
    small_fraction = sum(1 for d in debts if d.balance < small_debt_threshold) / count

    interest_weight = 0.4 + (avg_rate / 30) * 0.2
    balance_weight = 0.3 + small_fraction * 0.2

    rate_scores = _normalize([d.interest_rate for d in debts], higher_is_better=True)
    balance_scores = _normalize([d.balance for d in debts], higher_is_better=False)
    ratio_scores = _normalize(
        [d.balance / d.minimum_payment if d.minimum_payment > 0 else math.inf for d in debts],
        higher_is_better=False,
    )
    burden_scores = _normalize(
        [d.balance * d.interest_rate / 1200 for d in debts],
        higher_is_better=False,
    )

    return [
        interest_weight * rate
        + balance_weight * balance
        + RATIO_WEIGHT * ratio
        + BURDEN_WEIGHT * burden
        for rate, balance, ratio, burden in zip(rate_scores, balance_scores, ratio_scores, burden_scores)
    ]


def prioritize(
    debts: Sequence,
    strategy: Union[Strategy, str],
    small_debt_threshold: float = SMALL_DEBT_THRESHOLD,
) -> List:
    """Order debts for extra payments; ties keep input order (stable sort)"""
    strategy = _coerce_strategy(strategy)

    if strategy is Strategy.AVALANCHE:
        return sorted(debts, key=lambda d: -d.interest_rate)
    if strategy is Strategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.balance)

    scores = hybrid_scores(debts, small_debt_threshold)
    order = sorted(range(len(debts)), key=lambda i: -scores[i])
    return [debts[i] for i in order]


def _run_strategy(
    debts: Sequence[Debt],
    strategy: Strategy,
    extra_monthly_payment: float,
    today: date,
    max_months: int,
    small_debt_threshold: float,
) -> PayoffResult:
    working = [_WorkingDebt.from_debt(d) for d in debts]
    active = [d for d in working if d.balance > 0]

    # Budget is fixed for the whole run; minimums freed by retired debts roll into extra payments
    monthly_budget = sum(d.minimum_payment for d in active) + extra_monthly_payment

    payoff_order: List[str] = []
    monthly_payments: List[MonthlyPayment] = []
    total_interest = 0.0
    total_payments = 0.0
    month = 0

    while active and month < max_months:
        month += 1
        available = monthly_budget
        month_interest = 0.0
        month_payment = 0.0

        # 1. Minimum payments; interest accrues before the payment lands.
        # Payments never exceed minimums, so available stays >= extra_monthly_payment.
        for debt in active:
            interest = debt.monthly_interest
            payment = min(debt.minimum_payment, debt.balance + interest)
            available -= payment

            debt.balance += interest - payment
            debt.interest_paid += interest
            debt.amount_paid += payment
            month_interest += interest
            month_payment += payment
            debt.unpaid_interest = max(interest - payment, 0.0)

        priority = prioritize(active, strategy, small_debt_threshold)

        # 2. Interest the minimums left unpaid is covered from the remaining budget in
        # priority order; whatever cannot be covered stays capitalised
        for debt in priority:
            shortfall = debt.unpaid_interest
            if shortfall <= 0:
                continue
            cover = min(shortfall, max(available, 0.0))
            if cover <= 0:
                break
            debt.balance -= cover
            debt.amount_paid += cover
            month_payment += cover
            available -= cover

        # 3. Unspent budget goes to debts in strategy priority order
        for debt in priority:
            if available <= 0:
                break
            if debt.balance <= 0:
                continue
            payment = min(available, debt.balance)
            debt.balance -= payment
            debt.amount_paid += payment
            month_payment += payment
            available -= payment

        # 4. Retire debts that reached zero
        for debt in active:
            if debt.balance <= PAID_OFF_TOLERANCE:
                debt.balance = 0.0
                debt.days_to_payoff = month * DAYS_PER_MONTH
                payoff_order.append(debt.name)
        active = [d for d in active if d.balance > 0]

        total_interest += month_interest
        total_payments += month_payment
        monthly_payments.append(
            MonthlyPayment(
                month=month,
                payment=round(month_payment, 2),
                remaining_balance=round(sum(d.balance for d in active), 2),
                interest_paid=round(month_interest, 2),
                principal_paid=round(month_payment - month_interest, 2),
            )
        )

    if active:
        logger.info(
            "Simulation hit month cap with debts remaining",
            extra={"strategy": strategy.value, "max_months": max_months, "remaining_debts": len(active)},
        )

    return PayoffResult(
        strategy=strategy,
        total_interest=round(total_interest, 2),
        total_payments=round(total_payments, 2),
        months_to_payoff=month,
        debt_free_date=add_months(today, month),
        payoff_order=payoff_order,
        monthly_payments=monthly_payments,
        debt_progress=[
            DebtProgress(
                id=d.id,
                name=d.name,
                initial_balance=round(d.initial_balance, 2),
                amount_paid=round(d.amount_paid, 2),
                interest_paid=round(d.interest_paid, 2),
                days_to_payoff=d.days_to_payoff,
            )
            for d in working
        ],
    )


def simulate_strategy(
    debts: Sequence[Debt],
    strategy: Union[Strategy, str],
    extra_monthly_payment: float = 0.0,
    today: Optional[date] = None,
    max_months: int = MAX_MONTHS,
    small_debt_threshold: float = SMALL_DEBT_THRESHOLD,
) -> PayoffResult:
    """Run a single strategy over a snapshot of debts (inputs are never mutated)"""
    strategy = _coerce_strategy(strategy)
    validate_debts(debts, extra_monthly_payment)
    if today is None:
        today = date.today()
    return _run_strategy(debts, strategy, extra_monthly_payment, today, max_months, small_debt_threshold)


def simulate(
    debts: Sequence[Debt],
    extra_monthly_payment: float = 0.0,
    today: Optional[date] = None,
    max_months: int = MAX_MONTHS,
    small_debt_threshold: float = SMALL_DEBT_THRESHOLD,
) -> List[PayoffResult]:
    """
    Main entry point: compare avalanche, snowball and hybrid payoff over the same snapshot.

    Returns one PayoffResult per strategy in STRATEGY_ORDER, or an empty list
    when there are no debts (the caller prompts the user to add some).

    Raises:
        InvalidInputError: malformed debts or extra payment
        SimulationError: unexpected failure during the run; safe to retry
    """
    validate_debts(debts, extra_monthly_payment)
    if not debts:
        return []
    if today is None:
        today = date.today()

    try:
        return [
            _run_strategy(debts, strategy, extra_monthly_payment, today, max_months, small_debt_threshold)
            for strategy in STRATEGY_ORDER
        ]
    except Exception as e:
        logger.error(f"Payoff simulation failed: {e}", extra={"debt_count": len(debts)})
        raise SimulationError("Payoff calculation failed, please retry") from e


def best_strategy(results: Sequence[PayoffResult]) -> Optional[PayoffResult]:
    """Result with the lowest total interest; earlier strategies win ties"""
    if not results:
        return None
    return min(results, key=lambda r: r.total_interest)


def comparison_series(results: Sequence[PayoffResult], step: int = 1) -> List[Dict[str, float]]:
    """
    Remaining balance per strategy by month, as plain points for chart renderers.

    Example point: {"month": 6, "avalanche": 4210.55, "snowball": 4302.10, "hybrid": 4250.00}
    """
    if not results:
        return []

    step = max(1, step)
    initial_total = round(sum(p.initial_balance for p in results[0].debt_progress), 2)
    horizon = max(r.months_to_payoff for r in results)
    balances = {
        r.strategy.value: {p.month: p.remaining_balance for p in r.monthly_payments}
        for r in results
    }

    months = list(range(0, horizon + 1, step))
    if months[-1] != horizon:
        months.append(horizon)

    series = []
    for month in months:
        point: Dict[str, float] = {"month": month}
        for strategy, by_month in balances.items():
            point[strategy] = initial_total if month == 0 else by_month.get(month, 0.0)
        series.append(point)
    return series
