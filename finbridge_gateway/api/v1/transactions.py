"""Transaction list and CRUD endpoints"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from finbridge_gateway.api.dependencies import get_store
from finbridge_gateway.api.v1.schemas import TransactionCreate, TransactionSchema, TransactionUpdate
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore

router = APIRouter()


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(
    user_id: str = Query(..., description="User identifier"),
    limit: int = Query(50, ge=1, le=500),
    store: SqlRecordStore = Depends(get_store),
):
    """Most recent first"""
    return [TransactionSchema.model_validate(t) for t in store.list_transactions(user_id)[:limit]]


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(request_body: TransactionCreate, store: SqlRecordStore = Depends(get_store)):
    transaction = store.insert_transaction(
        request_body.user_id,
        kind=request_body.kind,
        amount=request_body.amount,
        category=request_body.category,
        on_date=request_body.date or date.today(),
        description=request_body.description,
    )
    return TransactionSchema.model_validate(transaction)


@router.patch("/transactions/{transaction_id}", response_model=TransactionSchema)
def update_transaction(
    transaction_id: str,
    request_body: TransactionUpdate,
    store: SqlRecordStore = Depends(get_store),
):
    transaction = store.update_transaction(transaction_id, request_body.model_dump(exclude_none=True))
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionSchema.model_validate(transaction)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, store: SqlRecordStore = Depends(get_store)):
    if not store.delete_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return Response(status_code=204)
