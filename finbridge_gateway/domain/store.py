"""Record store contract the command and analytics layers depend on"""

from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from finbridge_gateway.domain.models import Loan, Profile, Transaction


class RecordStore(Protocol):
    """
    Persistent transactions, loans and profiles.

    Every write is atomic at the row level. Errors propagate to the caller
    untouched; retry policy, if any, belongs to the implementation.
    """

    def insert_transaction(
        self,
        owner_id: str,
        kind: str,
        amount: float,
        category: str,
        on_date: date,
        description: str = "",
    ) -> Transaction: ...

    def update_transaction(self, transaction_id: str, fields: Dict[str, Any]) -> Optional[Transaction]: ...

    def delete_transaction(self, transaction_id: str) -> bool: ...

    def list_transactions(self, owner_id: str) -> List[Transaction]: ...

    def insert_loan(
        self,
        owner_id: str,
        principal: float,
        annual_rate: float,
        tenure_months: int,
        emi: float,
        debt_to_income: float,
        risk_level: str,
    ) -> Loan: ...

    def delete_loan(self, loan_id: str) -> bool: ...

    def list_loans(self, owner_id: str) -> List[Loan]: ...

    def get_profile(self, owner_id: str) -> Optional[Profile]: ...

    def upsert_profile(self, owner_id: str, fields: Dict[str, Any]) -> Profile: ...
