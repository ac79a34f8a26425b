"""Data access layer - read-only record source for the calculation engines"""

from typing import List
from sqlalchemy.orm import Session, selectinload
from finsight_gateway.infrastructure.database.models import (
    DebtRecord,
    IncomeSourceRecord,
    InvestmentRecord,
)
from finsight_gateway.domain.exceptions import InvalidInputError
from finsight_gateway.domain.models import Debt, IncomeRecord, Investment, NamedAmount, Recurrence


class DebtRepository:
    """Repository for debts"""

    def __init__(self, db: Session):
        self.db = db

    def get_debts_by_user(self, user_id: str) -> List[Debt]:
        """Fetch a user's debts in creation order; empty list when none exist"""
        records = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.user_id == user_id)
            .order_by(DebtRecord.created_at, DebtRecord.name)
            .all()
        )
        return [
            Debt(
                id=str(r.id),
                name=r.name,
                balance=float(r.current_balance or 0.0),
                interest_rate=float(r.interest_rate or 0.0),
                minimum_payment=float(r.minimum_payment or 0.0),
            )
            for r in records
        ]


class IncomeRepository:
    """Repository for income sources with their deductions and side hustles"""

    def __init__(self, db: Session):
        self.db = db

    def get_incomes_by_user(self, user_id: str) -> List[IncomeRecord]:
        """
        Fetch a user's incomes; empty list when none exist.

        Raises:
            InvalidInputError: stored recurrence is not a known frequency
        """
        records = (
            self.db.query(IncomeSourceRecord)
            .options(
                selectinload(IncomeSourceRecord.category),
                selectinload(IncomeSourceRecord.deductions),
                selectinload(IncomeSourceRecord.hustles),
            )
            .filter(IncomeSourceRecord.user_id == user_id)
            .order_by(IncomeSourceRecord.created_at, IncomeSourceRecord.source_name)
            .all()
        )

        try:
            return [
                IncomeRecord(
                    amount=float(r.amount),
                    recurrence=Recurrence(r.recurrence),
                    category=r.category.name if r.category is not None else None,
                    source_name=r.source_name,
                    deductions=[NamedAmount(name=d.name, amount=float(d.amount)) for d in r.deductions],
                    side_hustles=[NamedAmount(name=h.hustle_name, amount=float(h.hustle_amount)) for h in r.hustles],
                )
                for r in records
            ]
        except (ValueError, TypeError) as e:
            raise InvalidInputError(f"Invalid income record for user {user_id}: {e}") from e


class InvestmentRepository:
    """Repository for investment positions"""

    def __init__(self, db: Session):
        self.db = db

    def get_investments_by_user(self, user_id: str) -> List[Investment]:
        """Fetch a user's investments; empty list when none exist"""
        records = (
            self.db.query(InvestmentRecord)
            .filter(InvestmentRecord.user_id == user_id)
            .order_by(InvestmentRecord.created_at, InvestmentRecord.name)
            .all()
        )
        return [
            Investment(
                id=str(r.id),
                name=r.name,
                cost_basis=float(r.cost_basis or 0.0),
                current_value=float(r.value or 0.0),
                purchase_date=r.purchase_date,
                asset_type=r.type,
            )
            for r in records
        ]
