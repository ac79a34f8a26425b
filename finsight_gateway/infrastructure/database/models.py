"""SQLAlchemy ORM models for the records the calculation engines read"""

import uuid
from sqlalchemy import Column, String, Float, Numeric, DateTime, Date, ForeignKey, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2, asdecimal=False)


class DebtRecord(Base):
    """Loan, credit card or other liability"""

    __tablename__ = "debts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(String(32), nullable=False, default="other")  # credit_card | personal_loan | ...
    current_balance = Column(Money, nullable=False)
    interest_rate = Column(Float, nullable=False, default=0.0)  # annual %
    minimum_payment = Column(Money, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class IncomeCategoryRecord(Base):
    """User-defined income category"""

    __tablename__ = "income_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class IncomeSourceRecord(Base):
    """Income stream with its recurrence"""

    __tablename__ = "incomes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    source_name = Column(Text, nullable=False)
    amount = Column(Money, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category_id = Column(Uuid, ForeignKey("income_categories.id", ondelete="SET NULL"), nullable=True)
    recurrence = Column(String(16), nullable=False, default="none")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("IncomeCategoryRecord")
    deductions = relationship("IncomeDeductionRecord", back_populates="income", cascade="all, delete-orphan")
    hustles = relationship("IncomeHustleRecord", back_populates="income", cascade="all, delete-orphan")


class IncomeDeductionRecord(Base):
    """Named reduction applied to an income (tax, retirement contribution, ...)"""

    __tablename__ = "income_deductions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    income_id = Column(Uuid, ForeignKey("incomes.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    amount = Column(Money, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    income = relationship("IncomeSourceRecord", back_populates="deductions")


class IncomeHustleRecord(Base):
    """Side hustle earnings added on top of an income"""

    __tablename__ = "income_hustles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    income_id = Column(Uuid, ForeignKey("incomes.id", ondelete="CASCADE"), nullable=False)
    hustle_name = Column(Text, nullable=False)
    hustle_amount = Column(Money, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    income = relationship("IncomeSourceRecord", back_populates="hustles")


class InvestmentRecord(Base):
    """Investment position"""

    __tablename__ = "investments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    symbol = Column(Text, nullable=True)
    type = Column(Text, nullable=True)  # Stocks | Bonds | Cash | Crypto | Real Estate | ...
    cost_basis = Column(Money, nullable=False, default=0.0)
    value = Column(Money, nullable=False, default=0.0)
    purchase_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
