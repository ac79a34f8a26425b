"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.infrastructure.database.repositories import (
    DebtRepository,
    IncomeRepository,
    InvestmentRepository,
)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Current user id as forwarded by the authenticating proxy"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-ID header")
    return x_user_id.strip()


def get_debt_repository(db: Session = Depends(get_db)) -> DebtRepository:
    return DebtRepository(db)


def get_income_repository(db: Session = Depends(get_db)) -> IncomeRepository:
    return IncomeRepository(db)


def get_investment_repository(db: Session = Depends(get_db)) -> InvestmentRepository:
    return InvestmentRepository(db)
