"""Unit tests for loan impact simulation"""

import pytest
from datetime import date
from finbridge_gateway.domain.analytics import build_snapshot
from finbridge_gateway.domain.exceptions import InvalidLoanTermsError
from finbridge_gateway.domain.loans import resolve_effective_income, simulate_loan
from finbridge_gateway.domain.models import Profile, Transaction

TODAY = date(2024, 6, 15)


def snapshot_with_income(income: float, expenses: float = 0.0, persona: str = "salaried"):
    transactions = []
    if income:
        transactions.append(Transaction("i", "user_1", "income", income, "salary", TODAY))
    if expenses:
        transactions.append(Transaction("e", "user_1", "expense", expenses, "rent", TODAY))
    profile = Profile(owner_id="user_1", persona=persona)
    return build_snapshot(transactions, [], profile, today=TODAY)


def test_simulate_loan_projection():
    snapshot = snapshot_with_income(50_000, 20_000)

    simulation = simulate_loan(500_000, 10, 60, snapshot, None, default_income=50_000)

    assert simulation.emi == pytest.approx(10623.52, abs=0.01)
    assert simulation.effective_income == 50_000
    assert simulation.before.debt_to_income == 0
    assert simulation.before.risk_level == "safe"
    assert simulation.after.debt_to_income == pytest.approx(21.247, abs=0.01)
    assert simulation.after.health_score <= simulation.before.health_score
    assert simulation.warning is None


def test_simulate_loan_high_risk():
    snapshot = snapshot_with_income(20_000, 15_000)

    simulation = simulate_loan(1_000_000, 12, 60, snapshot, None, default_income=50_000)

    assert simulation.after.risk_level == "high_risk"
    assert simulation.after.stress_probability > simulation.before.stress_probability


def test_simulate_loan_income_multiple_warning():
    snapshot = snapshot_with_income(10_000)

    simulation = simulate_loan(700_000, 10, 120, snapshot, None, default_income=50_000)

    # 700000 > 5 × 120000
    assert simulation.warning == "Loan amount exceeds 5x your annual income (120,000)."


def test_simulate_loan_tips_use_projected_dti():
    snapshot = snapshot_with_income(20_000, 2_000, persona="shopkeeper")

    simulation = simulate_loan(1_000_000, 12, 60, snapshot, None, default_income=50_000)

    assert any(tip.startswith("Supplier credit is piling") for tip in simulation.tips)


@pytest.mark.parametrize(
    "principal, rate, tenure",
    [(0, 10, 12), (-5, 10, 12), (1000, 10, 0), (1000, -1, 12)],
)
def test_simulate_loan_invalid_terms(principal, rate, tenure):
    snapshot = snapshot_with_income(50_000)
    with pytest.raises(InvalidLoanTermsError):
        simulate_loan(principal, rate, tenure, snapshot, None, default_income=50_000)


def test_resolve_effective_income_order():
    empty = snapshot_with_income(0)
    profile = Profile(owner_id="user_1", monthly_income=30_000)

    assert resolve_effective_income(snapshot_with_income(45_000), profile, 50_000) == 45_000
    assert resolve_effective_income(empty, profile, 50_000) == 30_000
    assert resolve_effective_income(empty, None, 50_000) == 50_000
    assert resolve_effective_income(empty, Profile(owner_id="user_1"), 50_000) == 50_000
