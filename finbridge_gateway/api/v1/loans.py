"""Loan simulation and loan history endpoints"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from finbridge_gateway.api.dependencies import get_executor, get_request_id, get_simulator, get_store
from finbridge_gateway.api.v1.schemas import LoanRequest, LoanSchema, LoanSimulationResponse
from finbridge_gateway.config import settings
from finbridge_gateway.domain.exceptions import InvalidLoanTermsError
from finbridge_gateway.domain.models import LoanSimulation
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore
from finbridge_gateway.services.executor import CommandExecutor
from finbridge_gateway.services.simulator import LoanSimulator

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run_simulation(
    request_body: LoanRequest,
    request: Request,
    executor: CommandExecutor,
    simulator: LoanSimulator,
) -> LoanSimulation:
    try:
        return await simulator.simulate(
            request_body.principal,
            request_body.annual_rate,
            request_body.tenure_months,
            executor.snapshot(request_body.user_id),
            executor.store.get_profile(request_body.user_id),
            request_body.language or settings.default_language,
        )
    except InvalidLoanTermsError as e:
        logger.warning(f"Invalid loan terms: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/loans/simulate", response_model=LoanSimulationResponse)
async def simulate_loan(
    request_body: LoanRequest,
    request: Request,
    executor: CommandExecutor = Depends(get_executor),
    simulator: LoanSimulator = Depends(get_simulator),
):
    """Project EMI, DTI and risk for a prospective loan without saving it"""
    simulation = await _run_simulation(request_body, request, executor, simulator)
    return LoanSimulationResponse.model_validate(simulation)


@router.post("/loans", response_model=LoanSchema, status_code=201)
async def save_loan(
    request_body: LoanRequest,
    request: Request,
    executor: CommandExecutor = Depends(get_executor),
    simulator: LoanSimulator = Depends(get_simulator),
):
    """Simulate, then persist the loan with the EMI, DTI and risk level at save time"""
    simulation = await _run_simulation(request_body, request, executor, simulator)
    loan = executor.store.insert_loan(
        request_body.user_id,
        principal=simulation.principal,
        annual_rate=simulation.annual_rate,
        tenure_months=simulation.tenure_months,
        emi=simulation.emi,
        debt_to_income=simulation.after.debt_to_income,
        risk_level=simulation.after.risk_level,
    )
    logger.info("Loan saved", extra={"loan_id": loan.loan_id, "risk": loan.risk_level})
    return LoanSchema.model_validate(loan)


@router.get("/loans", response_model=List[LoanSchema])
def list_loans(
    user_id: str = Query(..., description="User identifier"),
    store: SqlRecordStore = Depends(get_store),
):
    """Saved loans, most recent first"""
    return [LoanSchema.model_validate(loan) for loan in store.list_loans(user_id)]


@router.delete("/loans/{loan_id}", status_code=204)
def delete_loan(loan_id: str, store: SqlRecordStore = Depends(get_store)):
    if not store.delete_loan(loan_id):
        raise HTTPException(status_code=404, detail="Loan not found")
    return Response(status_code=204)
