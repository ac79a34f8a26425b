"""Income normalization and diversification scoring"""

import logging
import math
from collections import OrderedDict
from typing import Dict, List, Sequence, Union

from finsight_gateway.domain.exceptions import InvalidInputError
from finsight_gateway.domain.models import (
    DiversificationScore,
    IncomeBreakdownItem,
    IncomeRecord,
    Recommendation,
    Recurrence,
)

logger = logging.getLogger(__name__)

ONE_TIME_INCOME_MONTHS = 12
UNCATEGORIZED = "Other Income"
SYNTHETIC_PRIMARY = "Primary Income"

SINGLE_SOURCE_SCORE = 25
NEUTRAL_SCORE = 50

GROWTH_KEYWORDS = ("passive", "investment", "business", "freelance", "side")

_MONTHLY_FACTORS = {
    Recurrence.WEEKLY: 52 / 12,
    Recurrence.BI_WEEKLY: 26 / 12,
    Recurrence.MONTHLY: 1.0,
    Recurrence.QUARTERLY: 1 / 3,
    Recurrence.SEMI_ANNUAL: 1 / 6,
    Recurrence.ANNUAL: 1 / 12,
}


def monthly_equivalent(
    amount: float,
    recurrence: Union[Recurrence, str],
    one_time_months: int = ONE_TIME_INCOME_MONTHS,
) -> float:
    """
    Normalize an amount to a per-month basis.

    One-time income (Recurrence.NONE) is amortized over one_time_months,
    12 by default, i.e. spread across a year.

    Raises:
        InvalidInputError: unknown recurrence or non-finite amount
    """
    try:
        recurrence = Recurrence(recurrence)
    except ValueError as e:
        raise InvalidInputError(f"Unknown recurrence: {recurrence!r}") from e

    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        raise InvalidInputError("Income amount must be a finite number")

    if recurrence is Recurrence.NONE:
        return amount / max(one_time_months, 1)
    return amount * _MONTHLY_FACTORS[recurrence]


def income_monthly_amount(income: IncomeRecord, one_time_months: int = ONE_TIME_INCOME_MONTHS) -> float:
    """Monthly equivalent of an income after deductions and side hustles"""
    return monthly_equivalent(income.adjusted_amount, income.recurrence, one_time_months)


def total_monthly_income(incomes: Sequence[IncomeRecord], one_time_months: int = ONE_TIME_INCOME_MONTHS) -> float:
    return sum(income_monthly_amount(i, one_time_months) for i in incomes)


def _empty_score() -> DiversificationScore:
    return DiversificationScore(
        overall_score=0,
        source_count=0,
        primary_dependency=0.0,
        stability_score=0,
        growth_potential=0,
        breakdown=[],
    )


def _group_by_category(incomes: Sequence[IncomeRecord], one_time_months: int) -> Dict[str, float]:
    categories: Dict[str, float] = OrderedDict()
    for income in incomes:
        name = (income.category or "").strip() or UNCATEGORIZED
        categories[name] = categories.get(name, 0.0) + income_monthly_amount(income, one_time_months)
    return categories


def herfindahl_index(amounts: Sequence[float]) -> float:
    """Sum of squared shares; 1/n for an even split, 1.0 for full concentration"""
    total = sum(amounts)
    if total <= 0:
        return 0.0
    return sum((amount / total) ** 2 for amount in amounts)


def _stability_score(primary_dependency: float, source_count: int) -> int:
    score = 100 - primary_dependency + 10 * max(source_count - 1, 0)
    return int(min(max(round(score), 0), 100))


def _growth_potential(shares: Dict[str, float]) -> int:
    growth_share = sum(
        share for name, share in shares.items()
        if any(keyword in name.lower() for keyword in GROWTH_KEYWORDS)
    )
    score = growth_share * 70 + min(len(shares), 5) * 6
    return int(min(max(round(score), 0), 100))


def _score_diversification(incomes: Sequence[IncomeRecord], one_time_months: int) -> DiversificationScore:
    if not incomes:
        return _empty_score()

    categories = _group_by_category(incomes, one_time_months)
    total = sum(categories.values())
    if total <= 0:
        logger.info("Total monthly income is zero or negative; skipping concentration index")
        return DiversificationScore(
            overall_score=SINGLE_SOURCE_SCORE if len(incomes) == 1 else 0,
            source_count=len(incomes),
            primary_dependency=0.0,
            stability_score=0,
            growth_potential=0,
            breakdown=[],
        )

    shares = {name: amount / total for name, amount in categories.items()}
    primary_dependency = round(max(shares.values()) * 100, 2)

    if len(incomes) == 1:
        overall = SINGLE_SOURCE_SCORE
    else:
        # A lone category is split 80/20 so the index stays informative
        amounts = list(categories.values())
        if len(amounts) == 1:
            amounts = [total * 0.8, total * 0.2]

        hhi = herfindahl_index(amounts)
        min_hhi = 1 / max(len(amounts), 2)
        normalized = (hhi - min_hhi) / (1 - min_hhi)
        diversification_raw = round((1 - normalized) * 100)
        source_bonus = min(len(incomes) * 5, 25)
        overall = min(round(diversification_raw * 0.75 + source_bonus), 100)
        overall = max(overall, 0)

        logger.debug(
            "Diversification computed",
            extra={"hhi": round(hhi, 4), "raw_score": diversification_raw, "source_bonus": source_bonus},
        )

    breakdown = [
        IncomeBreakdownItem(
            source_name=name,
            monthly_amount=round(categories[name], 2),
            percentage=round(share * 100, 2),
            score_contribution=round(share * overall, 2),
        )
        for name, share in shares.items()
    ]

    return DiversificationScore(
        overall_score=int(overall),
        source_count=len(incomes),
        primary_dependency=primary_dependency,
        stability_score=_stability_score(primary_dependency, len(incomes)),
        growth_potential=_growth_potential(shares),
        breakdown=breakdown,
    )


def score_diversification(
    incomes: Sequence[IncomeRecord],
    one_time_months: int = ONE_TIME_INCOME_MONTHS,
) -> DiversificationScore:
    """
    Score how well income is spread across categories (0-100, higher is better).

    - 0 incomes: all-zero score
    - 1 income: fixed baseline of 25
    - 2+ incomes: inverted Herfindahl-Hirschman Index over category shares,
      weighted 75%, plus a source-count bonus of 5 per source (max 25)

    Scoring is advisory: unexpected errors are logged and a neutral score of 50
    is returned instead of raising.
    """
    try:
        return _score_diversification(incomes, one_time_months)
    except Exception as e:
        logger.error(f"Diversification scoring failed: {e}", extra={"source_count": len(incomes)})
        return DiversificationScore(
            overall_score=NEUTRAL_SCORE,
            source_count=len(incomes),
            primary_dependency=0.0,
            stability_score=NEUTRAL_SCORE,
            growth_potential=NEUTRAL_SCORE,
            breakdown=[],
            fallback=True,
        )


def score_rating(score: int) -> str:
    if score >= 80:
        return "Excellent"
    elif score >= 60:
        return "Good"
    elif score >= 40:
        return "Fair"
    else:
        return "Needs Improvement"


def diversification_recommendations(score: DiversificationScore) -> List[Recommendation]:
    """Advice items for the income dashboard, highest priority first"""
    if score.source_count == 0:
        return [
            Recommendation(
                title="Add your income sources",
                description="Record at least one income stream to measure diversification",
                priority="high",
            )
        ]

    recommendations = []

    if score.source_count < 3:
        recommendations.append(
            Recommendation(
                title="Add more income sources",
                description="Aim for at least 3-5 different income sources to improve stability",
                priority="high",
            )
        )

    if score.primary_dependency > 70:
        recommendations.append(
            Recommendation(
                title="Reduce reliance on primary income",
                description=(
                    f"Your largest income source accounts for {round(score.primary_dependency)}% "
                    "of your total income"
                ),
                priority="high",
            )
        )

    has_passive_income = any(
        "passive" in item.source_name.lower() or "investment" in item.source_name.lower()
        for item in score.breakdown
    )
    if not has_passive_income:
        recommendations.append(
            Recommendation(
                title="Add passive income streams",
                description="Passive income improves your financial resilience and long-term stability",
                priority="medium",
            )
        )

    if score.source_count >= 3 and score.primary_dependency < 60 and score.overall_score < 70:
        recommendations.append(
            Recommendation(
                title="Balance your income sources",
                description="Try to make your income sources more evenly distributed",
                priority="medium",
            )
        )

    return recommendations
