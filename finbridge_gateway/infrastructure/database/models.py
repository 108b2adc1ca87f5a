"""SQLAlchemy ORM models for transactions, loans and profiles"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionRecord(Base):
    """Income or expense row; amount is signed"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)  # income | expense
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False, default="other")
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class LoanRecord(Base):
    """Saved loan with its EMI and risk at save time"""

    __tablename__ = "loan_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    loan_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    tenure = Column(Integer, nullable=False)
    emi = Column(Float, nullable=False)
    debt_to_income = Column(Float, nullable=False)
    risk_level = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ProfileRecord(Base):
    """One profile per user"""

    __tablename__ = "profiles"

    user_id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, default="")
    persona = Column(Text, nullable=False, default="salaried")
    monthly_income = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
