"""Income endpoints - monthly normalization and diversification score"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from finsight_gateway.api.v1.schemas import (
    DiversificationResponse,
    IncomeBreakdownSchema,
    MonthlyEquivalentRequest,
    MonthlyEquivalentResponse,
    RecommendationSchema,
)
from finsight_gateway.api.dependencies import get_current_user_id, get_income_repository, get_request_id
from finsight_gateway.infrastructure.database.repositories import IncomeRepository
from finsight_gateway.domain.income import (
    diversification_recommendations,
    monthly_equivalent,
    score_diversification,
    score_rating,
    total_monthly_income,
)
from finsight_gateway.domain.exceptions import InvalidInputError
from finsight_gateway.infrastructure.observability.metrics import record_diversification
from finsight_gateway.infrastructure.observability.logging import log_diversification
from finsight_gateway.config import settings

router = APIRouter()


@router.post("/income/monthly-equivalent", response_model=MonthlyEquivalentResponse)
def get_monthly_equivalent(request_body: MonthlyEquivalentRequest):
    """Normalize a single amount to its per-month value"""
    try:
        monthly = monthly_equivalent(
            request_body.amount,
            request_body.recurrence,
            settings.one_time_income_months,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return MonthlyEquivalentResponse(
        amount=request_body.amount,
        recurrence=request_body.recurrence,
        monthly_equivalent=round(monthly, 2),
    )


@router.get("/income/diversification", response_model=DiversificationResponse)
def get_diversification(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    income_repo: IncomeRepository = Depends(get_income_repository),
):
    """
    Score how well the current user's income is spread across categories.

    Returns:
        Score (0-100) with rating, breakdown by category and recommendations
    """
    request_id = get_request_id(request)

    # Unknown stored recurrences raise InvalidInputError, answered 422 by the app handler
    incomes = income_repo.get_incomes_by_user(user_id)

    score = score_diversification(incomes, settings.one_time_income_months)
    try:
        total = round(total_monthly_income(incomes, settings.one_time_income_months), 2)
    except InvalidInputError as e:
        logging.warning(
            f"Monthly income total unavailable: {e}",
            extra={"request_id": request_id, "user_id": user_id, "fallback": score.fallback},
        )
        total = 0.0

    record_diversification(score.overall_score, score.fallback)
    log_diversification(request_id, user_id, score.overall_score, score.source_count, score.fallback)

    return DiversificationResponse(
        overall_score=score.overall_score,
        rating=score_rating(score.overall_score),
        source_count=score.source_count,
        primary_dependency=score.primary_dependency,
        stability_score=score.stability_score,
        growth_potential=score.growth_potential,
        total_monthly_income=total,
        breakdown=[IncomeBreakdownSchema.model_validate(item) for item in score.breakdown],
        recommendations=[
            RecommendationSchema.model_validate(rec) for rec in diversification_recommendations(score)
        ],
    )
