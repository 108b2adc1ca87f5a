"""Analytics snapshot - derives every health metric from current records"""

from datetime import date
from typing import Dict, List, Optional, Sequence

from finbridge_gateway.domain.financial import (
    calculate_debt_to_income,
    calculate_default_risk,
    calculate_expense_volatility,
    calculate_health_score,
    calculate_income_stability,
    calculate_savings_rate,
    calculate_stress_probability,
    generate_tips,
    generate_warnings,
)
from finbridge_gateway.domain.models import (
    AnalyticsSnapshot,
    DailyTotal,
    Loan,
    MonthlyTotal,
    Profile,
    Transaction,
)
from finbridge_gateway.utils.date_utils import days_in_month, same_month, shift_month, trailing_months

TRAILING_MONTHS = 6
RECENT_LOAN_MONTHS = 3


def _month_total(transactions: Sequence[Transaction], kind: str, month: date) -> float:
    return sum(t.amount for t in transactions if t.kind == kind and same_month(t.date, month))


def count_recent_loans(loans: Sequence[Loan], today: date) -> int:
    """Loans opened on or after the same day three months ago"""
    cutoff_month = shift_month(today, -RECENT_LOAN_MONTHS)
    cutoff = cutoff_month.replace(day=min(today.day, days_in_month(cutoff_month)))
    return sum(1 for loan in loans if loan.created_at is not None and loan.created_at.date() >= cutoff)


def build_snapshot(
    transactions: Sequence[Transaction],
    loans: Sequence[Loan],
    profile: Optional[Profile],
    today: Optional[date] = None,
) -> AnalyticsSnapshot:
    """
    Compute the full analytics snapshot.

    Requirements:
    - Current-month income and expenses from transactions
    - DTI against transaction income, falling back to profile income
    - Volatility and stability over the trailing 6 months (zero months included)
    - Category, daily (zero-filled) and monthly breakdowns
    """
    today = today or date.today()
    persona = profile.persona if profile and profile.persona else "salaried"

    this_month = [t for t in transactions if same_month(t.date, today)]
    monthly_income = sum(t.amount for t in this_month if t.kind == "income")
    monthly_expenses = sum(t.amount for t in this_month if t.kind == "expense")
    savings_rate = calculate_savings_rate(monthly_income, monthly_expenses)

    months = trailing_months(today, TRAILING_MONTHS)
    expense_history = [_month_total(transactions, "expense", m) for m in months]
    income_history = [_month_total(transactions, "income", m) for m in months]
    expense_volatility = calculate_expense_volatility(expense_history)
    income_stability = calculate_income_stability(income_history)

    total_emi = sum(loan.emi for loan in loans)
    profile_income = profile.monthly_income if profile else 0.0
    effective_income = monthly_income if monthly_income > 0 else profile_income
    debt_to_income = calculate_debt_to_income(total_emi, effective_income)

    health_score = calculate_health_score(savings_rate, debt_to_income, expense_volatility, income_stability)
    stress_probability = calculate_stress_probability(
        savings_rate, debt_to_income, expense_volatility, income_stability
    )
    default_risk = calculate_default_risk(debt_to_income, savings_rate, health_score)

    tips = generate_tips(savings_rate, debt_to_income, expense_volatility, persona)
    # The 100 sentinel means "no income", not an actual EMI burden
    emi_burden = debt_to_income if total_emi > 0 else 0.0
    warnings = generate_warnings(
        savings_rate, emi_burden, expense_volatility, count_recent_loans(loans, today)
    )

    category_breakdown: Dict[str, float] = {}
    for t in this_month:
        if t.kind == "expense":
            category_breakdown[t.category] = category_breakdown.get(t.category, 0.0) + t.amount

    daily: List[DailyTotal] = []
    for day in range(1, days_in_month(today) + 1):
        amount = sum(t.amount for t in this_month if t.kind == "expense" and t.date.day == day)
        daily.append(DailyTotal(day=day, amount=amount))

    monthly = [
        MonthlyTotal(month=m.strftime("%Y-%m"), amount=amount)
        for m, amount in zip(months, expense_history)
    ]

    return AnalyticsSnapshot(
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        effective_income=effective_income,
        savings_rate=savings_rate,
        total_emi=total_emi,
        debt_to_income=debt_to_income,
        expense_volatility=expense_volatility,
        income_stability=income_stability,
        health_score=health_score,
        stress_probability=stress_probability,
        default_risk=default_risk,
        persona=persona,
        tips=tips,
        warnings=warnings,
        category_breakdown=category_breakdown,
        daily_spending=daily,
        monthly_spending=monthly,
    )
