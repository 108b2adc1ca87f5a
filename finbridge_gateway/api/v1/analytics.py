"""GET /v1/analytics - financial snapshot for the dashboard"""

from fastapi import APIRouter, Depends, Query

from finbridge_gateway.api.v1.schemas import AnalyticsResponse
from finbridge_gateway.api.dependencies import get_executor
from finbridge_gateway.services.executor import CommandExecutor

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    user_id: str = Query(..., description="User identifier"),
    executor: CommandExecutor = Depends(get_executor),
):
    """
    Current-month figures, risk scores, persona tips and safety warnings,
    plus category, daily and six-month spending breakdowns.
    """
    return AnalyticsResponse.model_validate(executor.snapshot(user_id))
