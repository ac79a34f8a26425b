"""Pytest fixtures for testing"""

import os

# Point settings at SQLite before any finsight_gateway module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finsight.db")

import pytest
from datetime import date
from typing import Callable, Generator, List, Optional, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finsight_gateway.api.main import create_app
from finsight_gateway.infrastructure.database.models import (
    Base,
    DebtRecord,
    IncomeCategoryRecord,
    IncomeDeductionRecord,
    IncomeHustleRecord,
    IncomeSourceRecord,
    InvestmentRecord,
)
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.domain.models import Debt


# Test database
TEST_DATABASE_URL = "sqlite:///./test_finsight.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2026, 10, 17)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def today() -> date:
    """Fixed clock for date-relative calculations"""
    return TODAY


@pytest.fixture
def divergent_debts() -> list[Debt]:
    """Avalanche and snowball disagree: A has the higher rate, B the smaller balance"""
    return [
        Debt(id="a", name="A", balance=5000.0, interest_rate=20.0, minimum_payment=100.0),
        Debt(id="b", name="B", balance=1000.0, interest_rate=5.0, minimum_payment=30.0),
    ]


@pytest.fixture
def three_debts() -> list[Debt]:
    """Mixed portfolio where A is both highest-rate and smallest"""
    return [
        Debt(id="a", name="A", balance=1000.0, interest_rate=20.0, minimum_payment=50.0),
        Debt(id="b", name="B", balance=5000.0, interest_rate=10.0, minimum_payment=100.0),
        Debt(id="c", name="C", balance=2000.0, interest_rate=5.0, minimum_payment=40.0),
    ]


@pytest.fixture
def underwater_debts() -> list[Debt]:
    """Store card's minimum (60) is below its monthly interest (80)"""
    return [
        Debt(id="store", name="Store Card", balance=4000.0, interest_rate=24.0, minimum_payment=60.0),
        Debt(id="auto", name="Auto Loan", balance=1500.0, interest_rate=8.0, minimum_payment=60.0),
        Debt(id="personal", name="Personal Loan", balance=2500.0, interest_rate=12.0, minimum_payment=75.0),
    ]


@pytest.fixture
def seed_debt(db: Session) -> Callable[..., DebtRecord]:
    """Insert a debt row for a user"""

    def _seed(user_id: str, name: str, balance: float, interest_rate: float, minimum_payment: float) -> DebtRecord:
        record = DebtRecord(
            user_id=user_id,
            name=name,
            current_balance=balance,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
        )
        db.add(record)
        db.commit()
        return record

    return _seed


@pytest.fixture
def seed_income(db: Session) -> Callable[..., IncomeSourceRecord]:
    """Insert an income row (with optional category, deductions and side hustles) for a user"""
    categories: dict[Tuple[str, str], IncomeCategoryRecord] = {}

    def _seed(
        user_id: str,
        source_name: str,
        amount: float,
        recurrence: str = "monthly",
        category: Optional[str] = None,
        deductions: Optional[List[Tuple[str, float]]] = None,
        hustles: Optional[List[Tuple[str, float]]] = None,
    ) -> IncomeSourceRecord:
        category_record = None
        if category is not None:
            key = (user_id, category)
            if key not in categories:
                categories[key] = IncomeCategoryRecord(user_id=user_id, name=category)
                db.add(categories[key])
            category_record = categories[key]

        record = IncomeSourceRecord(
            user_id=user_id,
            source_name=source_name,
            amount=amount,
            recurrence=recurrence,
            category=category_record,
            start_date=date(2025, 1, 1),
        )
        for name, value in deductions or []:
            record.deductions.append(IncomeDeductionRecord(name=name, amount=value))
        for name, value in hustles or []:
            record.hustles.append(IncomeHustleRecord(user_id=user_id, hustle_name=name, hustle_amount=value))

        db.add(record)
        db.commit()
        return record

    return _seed


@pytest.fixture
def seed_investment(db: Session) -> Callable[..., InvestmentRecord]:
    """Insert an investment row for a user"""

    def _seed(
        user_id: str,
        name: str,
        cost_basis: float,
        value: float,
        purchase_date: Optional[date],
        type: Optional[str] = "Stocks",
    ) -> InvestmentRecord:
        record = InvestmentRecord(
            user_id=user_id,
            name=name,
            cost_basis=cost_basis,
            value=value,
            purchase_date=purchase_date,
            type=type,
        )
        db.add(record)
        db.commit()
        return record

    return _seed
