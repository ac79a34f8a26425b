"""GET /v1/investments/performance - portfolio returns and risk proxies"""

from fastapi import APIRouter, Depends

from finsight_gateway.api.v1.schemas import InvestmentPerformanceSchema, PerformanceResponse, RiskMetricsSchema
from finsight_gateway.api.dependencies import get_current_user_id, get_investment_repository
from finsight_gateway.infrastructure.database.repositories import InvestmentRepository
from finsight_gateway.domain.performance import (
    beta_label,
    overall_performance,
    performance,
    sharpe_label,
    volatility_label,
)
from finsight_gateway.config import settings

router = APIRouter()


@router.get("/investments/performance", response_model=PerformanceResponse)
def get_performance(
    user_id: str = Depends(get_current_user_id),
    investment_repo: InvestmentRepository = Depends(get_investment_repository),
):
    """
    Retrieve per-investment and overall performance for the current user.

    Returns:
        Totals, CAGR-based annualized return and composition-based risk metrics
    """
    investments = investment_repo.get_investments_by_user(user_id)
    cap = settings.annualized_return_cap

    items = []
    for investment in investments:
        snapshot = performance(investment, cap=cap)
        items.append(
            InvestmentPerformanceSchema(
                id=investment.id,
                name=investment.name,
                cost_basis=investment.cost_basis,
                current_value=investment.current_value,
                purchase_date=investment.purchase_date,
                absolute_return=snapshot.absolute_return,
                percent_return=snapshot.percent_return,
                annualized_return=snapshot.annualized_return,
            )
        )

    overall = overall_performance(investments, risk_free_rate=settings.risk_free_rate, cap=cap)

    return PerformanceResponse(
        total_invested=overall.total_invested,
        total_value=overall.total_value,
        total_return=overall.total_return,
        annualized_return=overall.annualized_return,
        risk_metrics=RiskMetricsSchema(
            volatility=overall.volatility,
            volatility_label=volatility_label(overall.volatility),
            sharpe_ratio=overall.sharpe_ratio,
            sharpe_label=sharpe_label(overall.sharpe_ratio),
            beta=overall.beta,
            beta_label=beta_label(overall.beta),
        ),
        investments=items,
    )
