"""Debt repayment endpoints - compare avalanche, snowball and hybrid payoff"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from finsight_gateway.api.v1.schemas import PayoffResultSchema, SimulationRequest, SimulationResponse
from finsight_gateway.api.dependencies import get_current_user_id, get_debt_repository, get_request_id
from finsight_gateway.infrastructure.database.repositories import DebtRepository
from finsight_gateway.domain.models import Debt
from finsight_gateway.domain.repayment import best_strategy, comparison_series, simulate
from finsight_gateway.domain.exceptions import InvalidInputError, SimulationError
from finsight_gateway.infrastructure.observability.metrics import record_simulation, simulation_failure_counter
from finsight_gateway.infrastructure.observability.logging import log_simulation
from finsight_gateway.config import settings

router = APIRouter()

NO_DEBTS_MESSAGE = "Add your debts to compare repayment strategies"
RETRY_MESSAGE = "Payoff calculation failed, please retry"


def _run_simulation(
    debts: List[Debt],
    extra_monthly_payment: float,
    request_id: str,
    user_id: str,
) -> SimulationResponse:
    """
    Simulate all strategies and shape the response.

    Flow:
    1. Validate and simulate the snapshot (no debts -> empty results + prompt)
    2. Pick the lowest-interest strategy
    3. Build chart series for the comparison view
    4. Record metrics and structured logs
    """
    start_time = time.time()

    try:
        results = simulate(
            debts,
            extra_monthly_payment,
            max_months=settings.max_simulation_months,
            small_debt_threshold=settings.small_debt_threshold,
        )

    except InvalidInputError as e:
        logging.warning(f"Invalid simulation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except SimulationError as e:
        simulation_failure_counter.inc()
        logging.error(f"Simulation error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE)

    except Exception as e:
        simulation_failure_counter.inc()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=RETRY_MESSAGE)

    best = best_strategy(results)
    best_name = best.strategy.value if best is not None else None

    duration_ms = (time.time() - start_time) * 1000
    record_simulation(results, best_name, settings.max_simulation_months)
    log_simulation(
        request_id,
        user_id,
        len(debts),
        best_name,
        best.months_to_payoff if best is not None else None,
        duration_ms,
    )

    if not results:
        return SimulationResponse(results=[], message=NO_DEBTS_MESSAGE)

    worst_interest = max(r.total_interest for r in results)
    return SimulationResponse(
        results=[PayoffResultSchema.model_validate(r) for r in results],
        best_strategy=best.strategy,
        interest_saved_vs_worst=round(worst_interest - best.total_interest, 2),
        comparison=comparison_series(results),
    )


@router.post("/debts/simulate", response_model=SimulationResponse)
def simulate_payoff(
    request_body: SimulationRequest,
    request: Request,
    x_user_id: str | None = Header(default=None),
):
    """
    Compare payoff strategies for an ad-hoc set of debts.

    Returns:
        One schedule per strategy, the cheapest strategy and chart series
    """
    debts = [d.to_domain(i) for i, d in enumerate(request_body.debts)]
    return _run_simulation(
        debts,
        request_body.extra_monthly_payment,
        get_request_id(request),
        x_user_id or "anonymous",
    )


@router.get("/debts/strategies", response_model=SimulationResponse)
def get_strategy_comparison(
    request: Request,
    extra_monthly_payment: float = Query(0.0, ge=0, description="Extra amount paid each month"),
    user_id: str = Depends(get_current_user_id),
    debt_repo: DebtRepository = Depends(get_debt_repository),
):
    """
    Compare payoff strategies for the current user's stored debts.

    Returns:
        Same shape as /debts/simulate; empty results with a prompt when no debts exist
    """
    debts = debt_repo.get_debts_by_user(user_id)
    return _run_simulation(debts, extra_monthly_payment, get_request_id(request), user_id)
