"""Pydantic schemas for API request/response validation"""

from datetime import date as Date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Persona = Literal["student", "farmer", "shopkeeper", "salaried"]


class CommandRequest(BaseModel):
    """Request body for POST /v1/commands"""

    user_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, description="Final transcript or typed command")
    language: Optional[str] = Field(default=None, description="Language tag such as en-US or hi-IN")


class TransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    kind: str
    amount: float
    category: str
    date: Date
    description: str
    created_at: Optional[datetime] = None


class LoanMetricsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_emi: float
    debt_to_income: float
    health_score: int
    stress_probability: float
    risk_level: str


class LoanSimulationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    principal: float
    annual_rate: float
    tenure_months: int
    emi: float
    effective_income: float
    before: LoanMetricsSchema
    after: LoanMetricsSchema
    tips: List[str]
    warning: Optional[str] = None
    narration: Optional[str] = None


class CommandResponse(BaseModel):
    """Response for POST /v1/commands"""

    action: str
    intent: str
    category: str
    amount: Optional[float] = None
    language_detected: str
    confidence: float
    message: str
    transaction: Optional[TransactionSchema] = None
    monthly_income: Optional[float] = None
    simulation: Optional[LoanSimulationResponse] = None


class TransactionCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    kind: Literal["income", "expense"]
    amount: float
    category: str = "other"
    date: Optional[Date] = None
    description: str = ""


class TransactionUpdate(BaseModel):
    kind: Optional[Literal["income", "expense"]] = None
    amount: Optional[float] = None
    category: Optional[str] = Field(default=None, min_length=1)
    date: Optional[Date] = None
    description: Optional[str] = None


class LoanRequest(BaseModel):
    """Request body for POST /v1/loans/simulate and POST /v1/loans"""

    user_id: str = Field(..., min_length=1)
    principal: float = Field(..., gt=0)
    annual_rate: float = Field(..., ge=0, description="Annual interest rate in %")
    tenure_months: int = Field(..., gt=0)
    language: Optional[str] = None


class LoanSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loan_id: str
    principal: float
    annual_rate: float
    tenure_months: int
    emi: float
    debt_to_income: float
    risk_level: str
    created_at: Optional[datetime] = None


class ProfileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    owner_id: str
    display_name: str
    persona: str
    monthly_income: float


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    persona: Optional[Persona] = None
    monthly_income: Optional[float] = Field(default=None, ge=0)


class SafetyWarningSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    message: str
    severity: str


class DailyTotalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: int
    amount: float


class MonthlyTotalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    amount: float


class AnalyticsResponse(BaseModel):
    """Response for GET /v1/analytics"""

    model_config = ConfigDict(from_attributes=True)

    monthly_income: float
    monthly_expenses: float
    effective_income: float
    savings_rate: float
    total_emi: float
    debt_to_income: float
    expense_volatility: float
    income_stability: float
    health_score: int
    stress_probability: float
    default_risk: float
    persona: str
    tips: List[str]
    warnings: List[SafetyWarningSchema]
    category_breakdown: Dict[str, float]
    daily_spending: List[DailyTotalSchema]
    monthly_spending: List[MonthlyTotalSchema]
