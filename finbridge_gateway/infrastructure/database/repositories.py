"""SQL implementation of the record store"""

import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from finbridge_gateway.domain.models import Loan, Profile, Transaction
from finbridge_gateway.infrastructure.database.models import LoanRecord, ProfileRecord, TransactionRecord

TRANSACTION_FIELDS = {"kind": "type", "amount": "amount", "category": "category", "date": "date", "description": "description"}
PROFILE_FIELDS = {"display_name": "name", "persona": "persona", "monthly_income": "monthly_income"}


def _to_transaction(row: TransactionRecord) -> Transaction:
    return Transaction(
        transaction_id=str(row.id),
        owner_id=row.user_id,
        kind=row.type,
        amount=row.amount,
        category=row.category,
        date=row.date,
        description=row.description,
        created_at=row.created_at,
    )


def _to_loan(row: LoanRecord) -> Loan:
    return Loan(
        loan_id=str(row.id),
        owner_id=row.user_id,
        principal=row.loan_amount,
        annual_rate=row.interest_rate,
        tenure_months=row.tenure,
        emi=row.emi,
        debt_to_income=row.debt_to_income,
        risk_level=row.risk_level,
        created_at=row.created_at,
    )


def _to_profile(row: ProfileRecord) -> Profile:
    return Profile(
        owner_id=row.user_id,
        display_name=row.name,
        persona=row.persona,
        monthly_income=row.monthly_income,
    )


def _parse_id(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


class SqlRecordStore:
    """
    Record store over one SQLAlchemy session.

    Each write commits its single row; on failure the session is rolled
    back and the SQLAlchemy error is re-raised unchanged.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, row=None):
        try:
            if row is not None:
                self.db.add(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if row is not None:
            self.db.refresh(row)
        return row

    # Transactions

    def insert_transaction(
        self,
        owner_id: str,
        kind: str,
        amount: float,
        category: str,
        on_date: date,
        description: str = "",
    ) -> Transaction:
        row = TransactionRecord(
            user_id=owner_id,
            type=kind,
            amount=amount,
            category=category or "other",
            description=description,
            date=on_date,
        )
        return _to_transaction(self._commit(row))

    def update_transaction(self, transaction_id: str, fields: Dict[str, Any]) -> Optional[Transaction]:
        key = _parse_id(transaction_id)
        row = self.db.get(TransactionRecord, key) if key else None
        if row is None:
            return None
        for name, value in fields.items():
            if name in TRANSACTION_FIELDS and value is not None:
                setattr(row, TRANSACTION_FIELDS[name], value)
        return _to_transaction(self._commit(row))

    def delete_transaction(self, transaction_id: str) -> bool:
        key = _parse_id(transaction_id)
        row = self.db.get(TransactionRecord, key) if key else None
        if row is None:
            return False
        self.db.delete(row)
        self._commit()
        return True

    def list_transactions(self, owner_id: str) -> List[Transaction]:
        """Most recent first"""
        rows = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == owner_id)
            .order_by(TransactionRecord.created_at.desc())
            .all()
        )
        return [_to_transaction(row) for row in rows]

    # Loans

    def insert_loan(
        self,
        owner_id: str,
        principal: float,
        annual_rate: float,
        tenure_months: int,
        emi: float,
        debt_to_income: float,
        risk_level: str,
    ) -> Loan:
        row = LoanRecord(
            user_id=owner_id,
            loan_amount=principal,
            interest_rate=annual_rate,
            tenure=tenure_months,
            emi=emi,
            debt_to_income=debt_to_income,
            risk_level=risk_level,
        )
        return _to_loan(self._commit(row))

    def delete_loan(self, loan_id: str) -> bool:
        key = _parse_id(loan_id)
        row = self.db.get(LoanRecord, key) if key else None
        if row is None:
            return False
        self.db.delete(row)
        self._commit()
        return True

    def list_loans(self, owner_id: str) -> List[Loan]:
        rows = (
            self.db.query(LoanRecord)
            .filter(LoanRecord.user_id == owner_id)
            .order_by(LoanRecord.created_at.desc())
            .all()
        )
        return [_to_loan(row) for row in rows]

    # Profile

    def get_profile(self, owner_id: str) -> Optional[Profile]:
        row = self.db.get(ProfileRecord, owner_id)
        return _to_profile(row) if row else None

    def upsert_profile(self, owner_id: str, fields: Dict[str, Any]) -> Profile:
        row = self.db.get(ProfileRecord, owner_id)
        if row is None:
            row = ProfileRecord(user_id=owner_id, name="", persona="salaried", monthly_income=0.0)
        for name, value in fields.items():
            if name in PROFILE_FIELDS and value is not None:
                setattr(row, PROFILE_FIELDS[name], value)
        return _to_profile(self._commit(row))
