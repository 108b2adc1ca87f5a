"""Financial health formulas - savings, debt burden, volatility and banded risk heuristics"""

import math
from typing import Dict, List, Sequence

from finbridge_gateway.domain.models import SafetyWarning

MAX_TIPS = 3


def calculate_emi(principal: float, annual_rate: float, tenure_months: int) -> float:
    """
    Equated monthly installment for a fully amortizing loan.

    EMI = P × r × (1+r)^n / ((1+r)^n − 1), r = annual_rate / 12 / 100.
    A zero rate degenerates to principal / tenure.

    Example:
        500000 at 10% over 60 months → 10623.52
    """
    monthly_rate = annual_rate / 12 / 100
    if monthly_rate == 0:
        return principal / tenure_months
    factor = (1 + monthly_rate) ** tenure_months
    return principal * monthly_rate * factor / (factor - 1)


def calculate_debt_to_income(total_emi: float, monthly_income: float) -> float:
    """EMI as % of income; 100 (maximal risk) when income is not positive"""
    if monthly_income <= 0:
        return 100.0
    return total_emi / monthly_income * 100


def calculate_savings_rate(income: float, expenses: float) -> float:
    if income <= 0:
        return 0.0
    return max(0.0, (income - expenses) / income * 100)


def _coefficient_of_variation(values: Sequence[float]) -> float:
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


def calculate_expense_volatility(monthly_expenses: Sequence[float]) -> float:
    """Population CV of monthly expense totals, capped at 1"""
    if len(monthly_expenses) < 2:
        return 0.0
    if sum(monthly_expenses) <= 0:
        return 0.0
    return min(1.0, _coefficient_of_variation(monthly_expenses))


def calculate_income_stability(monthly_incomes: Sequence[float]) -> float:
    """1 − CV of monthly income totals; 1 with too little history, 0 with no income"""
    if len(monthly_incomes) < 2:
        return 1.0
    if sum(monthly_incomes) <= 0:
        return 0.0
    return max(0.0, 1 - _coefficient_of_variation(monthly_incomes))


def calculate_health_score(
    savings_rate: float,
    debt_to_income: float,
    expense_volatility: float,
    income_stability: float,
) -> int:
    """
    Financial health score from 0 to 100.

    Weights:
    - 30: savings rate (full marks at 30%)
    - 30: debt-to-income (full marks at 0%)
    - 20: expense volatility (full marks when flat)
    - 20: income stability
    """
    savings_score = min(savings_rate / 30, 1.0) * 30
    debt_score = max(0.0, (100 - debt_to_income) / 100) * 30
    volatility_score = max(0.0, 1 - expense_volatility) * 20
    stability_score = income_stability * 20
    total = savings_score + debt_score + volatility_score + stability_score
    return round(max(0.0, min(100.0, total)))


def calculate_stress_probability(
    savings_rate: float,
    debt_to_income: float,
    expense_volatility: float,
    income_stability: float,
) -> float:
    """Additive banded heuristic; each factor contributes independently"""
    factors = [
        0.3 if savings_rate < 10 else 0.15 if savings_rate < 20 else 0.0,
        0.3 if debt_to_income > 50 else 0.15 if debt_to_income > 30 else 0.0,
        0.2 if expense_volatility > 0.5 else 0.1 if expense_volatility > 0.3 else 0.0,
        0.2 if income_stability < 0.5 else 0.1 if income_stability < 0.7 else 0.0,
    ]
    return min(1.0, sum(factors))


def calculate_default_risk(debt_to_income: float, savings_rate: float, health_score: float) -> float:
    dti_risk = 0.4 if debt_to_income > 50 else 0.2 if debt_to_income > 30 else 0.05
    savings_risk = 0.3 if savings_rate < 10 else 0.15 if savings_rate < 20 else 0.05
    health_risk = 0.3 if health_score < 40 else 0.15 if health_score < 60 else 0.05
    return min(1.0, dti_risk + savings_risk + health_risk)


def determine_risk_level(debt_to_income: float) -> str:
    """
    DTI bands:
    - < 30: safe
    - < 50: caution
    - otherwise: high_risk
    """
    if debt_to_income < 30:
        return "safe"
    elif debt_to_income < 50:
        return "caution"
    else:
        return "high_risk"


PERSONA_PHRASES: Dict[str, Dict[str, str]] = {
    "farmer": {
        "save_low": "Keep seed grain aside before the harvest is eaten:",
        "save_med": "You hold some reserve grain already:",
        "debt_high": "Too many crop loans are due before the harvest:",
        "debt_med": "Fertilizer credit is stacking on the seed loan:",
        "volatile": "Spending swings like the monsoon:",
        "good": "Your season is well irrigated and planned:",
    },
    "student": {
        "save_low": "The stipend is gone in the first weeks:",
        "save_med": "Your semester budget is careful:",
        "debt_high": "A new loan on top of the education loan is heavy:",
        "debt_med": "Fees and hostel rent already compete for the same money:",
        "volatile": "Irregular gig income makes the month unpredictable:",
        "good": "Your semester budget still leaves savings:",
    },
    "shopkeeper": {
        "save_low": "The counter has no cash reserve:",
        "save_med": "You keep some stock buffer for slow days:",
        "debt_high": "Supplier credit is piling onto old dues:",
        "debt_med": "Inventory costs and shop rent take a large share:",
        "volatile": "Seasonal sales make the till unpredictable:",
        "good": "Steady daily sales with healthy margins:",
    },
    "salaried": {
        "save_low": "The paycheck runs out before month-end:",
        "save_med": "You save, but the emergency fund can grow:",
        "debt_high": "EMIs eat most of the paycheck:",
        "debt_med": "EMIs compete with your savings goals:",
        "volatile": "Surprise expenses keep breaking the monthly budget:",
        "good": "A well-structured salary budget:",
    },
}


def generate_tips(
    savings_rate: float,
    debt_to_income: float,
    expense_volatility: float,
    persona: str,
) -> List[str]:
    """Persona-flavoured advice, at most three, or one healthy-habits tip"""
    phrases = PERSONA_PHRASES.get(persona, PERSONA_PHRASES["salaried"])
    tips: List[str] = []

    if savings_rate < 10:
        tips.append(f"{phrases['save_low']} try to save at least 20% of your income.")
    elif savings_rate < 20:
        tips.append(f"{phrases['save_med']} aim for a 20-30% savings rate.")

    if debt_to_income > 50:
        tips.append(f"{phrases['debt_high']} your debt burden is critical, consider consolidating.")
    elif debt_to_income > 30:
        tips.append(f"{phrases['debt_med']} reduce EMI commitments before taking new loans.")

    if expense_volatility > 0.5:
        tips.append(f"{phrases['volatile']} set a fixed monthly budget to smooth spending.")

    if not tips:
        tips.append(f"{phrases['good']} keep up these healthy financial habits!")

    return tips[:MAX_TIPS]


def generate_warnings(
    savings_rate: float,
    emi_burden: float,
    expense_volatility: float,
    recent_loans: int,
) -> List[SafetyWarning]:
    """All applicable warnings, each evaluated independently"""
    warnings: List[SafetyWarning] = []

    if savings_rate < 10:
        warnings.append(
            SafetyWarning(
                type="savings",
                message=f"Savings rate is critically low at {savings_rate:.1f}%. Aim for at least 20%.",
                severity="critical" if savings_rate < 5 else "warning",
            )
        )

    if emi_burden > 50:
        warnings.append(
            SafetyWarning(
                type="emi",
                message=f"EMI burden is {emi_burden:.1f}% of income. This is dangerously high.",
                severity="critical" if emi_burden > 70 else "warning",
            )
        )

    if expense_volatility > 0.5:
        warnings.append(
            SafetyWarning(
                type="volatility",
                message="Your spending pattern is highly volatile. Consider a fixed monthly budget.",
                severity="warning",
            )
        )

    if recent_loans >= 3:
        warnings.append(
            SafetyWarning(
                type="borrowing",
                message=f"You have taken {recent_loans} loans recently. Rapid borrowing increases financial risk.",
                severity="critical" if recent_loans >= 5 else "warning",
            )
        )

    return warnings
