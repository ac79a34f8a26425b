"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finsight_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finsight_gateway.api.dependencies import get_request_id
from finsight_gateway.api.v1 import debts, income, investments
from finsight_gateway.domain.exceptions import InvalidInputError
from finsight_gateway.infrastructure.observability.logging import setup_logging
from finsight_gateway.config import settings

setup_logging(settings.log_level)

API_PREFIX = "/v1"
ROUTERS = (
    (debts.router, "debts"),
    (income.router, "income"),
    (investments.router, "investments"),
)


def _register_error_handlers(app: FastAPI) -> None:
    """Answer malformed stored records that escape a route with 422"""

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logging.warning(f"Invalid records: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create the finsight API: payoff simulation, income scoring and portfolio performance"""
    app = FastAPI(
        title="Finsight Gateway",
        description="Debt payoff simulation, income diversification and portfolio performance service",
        version="0.1.0",
    )

    # Request IDs must exist before latency is recorded (last added runs first)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    _register_error_handlers(app)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "max_simulation_months": settings.max_simulation_months,
        }

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in ROUTERS:
        app.include_router(router, prefix=API_PREFIX, tags=[tag])

    return app


app = create_app()
