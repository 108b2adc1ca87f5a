"""Loan impact simulation against the current analytics snapshot"""

from typing import Optional

from finbridge_gateway.domain.exceptions import InvalidLoanTermsError
from finbridge_gateway.domain.financial import (
    calculate_debt_to_income,
    calculate_emi,
    calculate_health_score,
    calculate_stress_probability,
    determine_risk_level,
    generate_tips,
)
from finbridge_gateway.domain.models import AnalyticsSnapshot, LoanMetrics, LoanSimulation, Profile

INCOME_MULTIPLE_LIMIT = 5  # Principal above 5x annual income is flagged


def resolve_effective_income(
    snapshot: AnalyticsSnapshot,
    profile: Optional[Profile],
    default_income: float,
) -> float:
    """Transaction income, then profile income, then the configured default"""
    if snapshot.monthly_income > 0:
        return snapshot.monthly_income
    if profile is not None and profile.monthly_income > 0:
        return profile.monthly_income
    return default_income


def _metrics(snapshot: AnalyticsSnapshot, total_emi: float, income: float) -> LoanMetrics:
    dti = calculate_debt_to_income(total_emi, income)
    return LoanMetrics(
        total_emi=total_emi,
        debt_to_income=dti,
        health_score=calculate_health_score(
            snapshot.savings_rate, dti, snapshot.expense_volatility, snapshot.income_stability
        ),
        stress_probability=calculate_stress_probability(
            snapshot.savings_rate, dti, snapshot.expense_volatility, snapshot.income_stability
        ),
        risk_level=determine_risk_level(dti),
    )


def simulate_loan(
    principal: float,
    annual_rate: float,
    tenure_months: int,
    snapshot: AnalyticsSnapshot,
    profile: Optional[Profile],
    default_income: float,
) -> LoanSimulation:
    """
    Project the effect of taking a new loan.

    Savings rate, volatility and stability are held at their current values;
    only the EMI total and therefore DTI, health score, stress and risk move.

    Raises:
        InvalidLoanTermsError: principal or tenure not positive, or negative rate
    """
    if principal <= 0 or tenure_months <= 0 or annual_rate < 0:
        raise InvalidLoanTermsError(
            f"Invalid loan terms: principal={principal}, rate={annual_rate}, tenure={tenure_months}"
        )

    emi = calculate_emi(principal, annual_rate, tenure_months)
    income = resolve_effective_income(snapshot, profile, default_income)

    before = _metrics(snapshot, snapshot.total_emi, income)
    after = _metrics(snapshot, snapshot.total_emi + emi, income)

    annual_income = income * 12
    warning = None
    if principal > annual_income * INCOME_MULTIPLE_LIMIT:
        warning = f"Loan amount exceeds {INCOME_MULTIPLE_LIMIT}x your annual income ({annual_income:,.0f})."

    tips = generate_tips(
        snapshot.savings_rate, after.debt_to_income, snapshot.expense_volatility, snapshot.persona
    )

    return LoanSimulation(
        principal=principal,
        annual_rate=annual_rate,
        tenure_months=tenure_months,
        emi=emi,
        effective_income=income,
        before=before,
        after=after,
        tips=tips,
        warning=warning,
    )
