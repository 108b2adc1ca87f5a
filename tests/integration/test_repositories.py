"""Integration tests for the SQL record store"""

import pytest
from datetime import date
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore


def test_transaction_crud(store: SqlRecordStore):
    created = store.insert_transaction("user_1", "expense", 300, "food", date(2024, 6, 3), "lunch")

    assert created.transaction_id
    assert created.created_at is not None

    updated = store.update_transaction(created.transaction_id, {"amount": 350, "category": "dining", "kind": None})
    assert updated.amount == 350
    assert updated.category == "dining"
    assert updated.kind == "expense"

    assert store.delete_transaction(created.transaction_id) is True
    assert store.list_transactions("user_1") == []


def test_missing_or_malformed_ids(store: SqlRecordStore):
    assert store.update_transaction("not-a-uuid", {"amount": 1}) is None
    assert store.delete_transaction("00000000-0000-0000-0000-000000000000") is False
    assert store.delete_loan("nope") is False


def test_transactions_are_scoped_to_owner(store: SqlRecordStore):
    store.insert_transaction("user_1", "income", 1_000, "salary", date(2024, 6, 1))
    store.insert_transaction("user_2", "income", 2_000, "salary", date(2024, 6, 1))

    assert [t.amount for t in store.list_transactions("user_1")] == [1_000]


def test_empty_category_defaults_to_other(store: SqlRecordStore):
    assert store.insert_transaction("user_1", "expense", 10, "", date(2024, 6, 1)).category == "other"


def test_loan_history(store: SqlRecordStore):
    loan = store.insert_loan("user_1", 500_000, 10, 60, 10623.52, 21.2, "safe")

    loans = store.list_loans("user_1")
    assert [l.loan_id for l in loans] == [loan.loan_id]
    assert loans[0].principal == 500_000
    assert loans[0].tenure_months == 60

    assert store.delete_loan(loan.loan_id) is True
    assert store.list_loans("user_1") == []


def test_profile_upsert(store: SqlRecordStore):
    assert store.get_profile("user_1") is None

    created = store.upsert_profile("user_1", {"monthly_income": 25_000})
    assert created.persona == "salaried"
    assert created.monthly_income == 25_000

    updated = store.upsert_profile("user_1", {"display_name": "Asha", "persona": "farmer", "ignored": 1})
    assert updated.display_name == "Asha"
    assert updated.persona == "farmer"
    assert updated.monthly_income == 25_000


def test_failed_commit_rolls_back_and_propagates(store: SqlRecordStore):
    error = OperationalError("INSERT", {}, Exception("database is locked"))
    with patch.object(store.db, "commit", side_effect=error):
        with pytest.raises(OperationalError):
            store.insert_transaction("user_1", "expense", 300, "food", date(2024, 6, 3))

    assert store.list_transactions("user_1") == []
