"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional


@dataclass
class Transaction:
    """Income or expense row owned by one user"""

    transaction_id: str
    owner_id: str
    kind: str  # "income" or "expense"
    amount: float  # Signed: refunds and corrections are negative
    category: str
    date: date
    description: str = ""
    created_at: Optional[datetime] = None


@dataclass
class Loan:
    """Loan saved to a user's history"""

    loan_id: str
    owner_id: str
    principal: float
    annual_rate: float
    tenure_months: int
    emi: float
    debt_to_income: float  # DTI at save time
    risk_level: str  # "safe" | "caution" | "high_risk"
    created_at: Optional[datetime] = None


@dataclass
class Profile:
    """User profile; monthly_income is replaced by SET_VALUE/income"""

    owner_id: str
    display_name: str = ""
    persona: str = "salaried"  # student | farmer | shopkeeper | salaried
    monthly_income: float = 0.0


@dataclass
class SafetyWarning:
    """Tagged, severity-labelled risk warning"""

    type: str  # savings | emi | volatility | borrowing
    message: str
    severity: str  # warning | critical


@dataclass
class DailyTotal:
    day: int
    amount: float


@dataclass
class MonthlyTotal:
    month: str  # YYYY-MM
    amount: float


@dataclass
class AnalyticsSnapshot:
    """Derived metrics, recomputed from current records on every read"""

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
    tips: List[str] = field(default_factory=list)
    warnings: List[SafetyWarning] = field(default_factory=list)
    category_breakdown: Dict[str, float] = field(default_factory=dict)
    daily_spending: List[DailyTotal] = field(default_factory=list)
    monthly_spending: List[MonthlyTotal] = field(default_factory=list)


@dataclass
class LoanMetrics:
    """Debt position on one side of a loan simulation"""

    total_emi: float
    debt_to_income: float
    health_score: int
    stress_probability: float
    risk_level: str


@dataclass
class LoanSimulation:
    """Before/after impact of a hypothetical loan"""

    principal: float
    annual_rate: float
    tenure_months: int
    emi: float
    effective_income: float
    before: LoanMetrics
    after: LoanMetrics
    tips: List[str]
    warning: Optional[str] = None
    narration: Optional[str] = None
