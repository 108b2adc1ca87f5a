"""
Command executor - the safety gate between interpretation and storage.

Maps one StructuredCommand onto at most one record-store mutation:
- SET_VALUE/income    → profile.monthly_income replaced, no transaction
- SET_VALUE/expense   → one signed adjustment so the month total equals amount
- ADD_VALUE           → one transaction of +|amount|
- SUBTRACT_VALUE      → one transaction of −|amount|
- QUERY_ONLY          → no mutation, answer surfaced
- SIMULATE_LOAN       → loan simulator, no mutation

A mutating command without an amount, or a SET_VALUE below zero, is rejected
before the store is touched.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from finbridge_gateway.domain.analytics import build_snapshot
from finbridge_gateway.domain.commands import StructuredCommand
from finbridge_gateway.domain.exceptions import AmbiguousAmountError, NegativeAmountError
from finbridge_gateway.domain.languages import response_text
from finbridge_gateway.domain.models import AnalyticsSnapshot, LoanSimulation, Profile, Transaction
from finbridge_gateway.domain.store import RecordStore
from finbridge_gateway.infrastructure.observability.metrics import ambiguous_amount_counter, record_command
from finbridge_gateway.services.simulator import LoanSimulator
from finbridge_gateway.utils.date_utils import same_month

logger = logging.getLogger(__name__)

ADJUSTMENT_CATEGORY = "adjustment"
TARGET_TOLERANCE = 1.0  # Currency units


@dataclass
class CommandOutcome:
    """What the gate did with one command"""

    action: str  # income_set | transaction_added | expense_adjusted | no_change | answered | loan_simulated
    command: StructuredCommand
    message: str
    transaction: Optional[Transaction] = None
    profile: Optional[Profile] = None
    simulation: Optional[LoanSimulation] = None


class CommandExecutor:
    def __init__(
        self,
        store: RecordStore,
        simulator: LoanSimulator,
        default_loan_rate: float,
        default_loan_tenure_months: int,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.simulator = simulator
        self.default_loan_rate = default_loan_rate
        self.default_loan_tenure_months = default_loan_tenure_months
        self.today = today

    def snapshot(self, owner_id: str) -> AnalyticsSnapshot:
        return build_snapshot(
            self.store.list_transactions(owner_id),
            self.store.list_loans(owner_id),
            self.store.get_profile(owner_id),
            today=self.today(),
        )

    async def execute(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        """
        Apply one command.

        Raises:
            AmbiguousAmountError: amount missing for a mutating intent
            NegativeAmountError: SET_VALUE with an amount below zero
            InvalidLoanTermsError: SIMULATE_LOAN with non-positive principal or tenure
            SQLAlchemyError: store failures, unchanged
        """
        if command.intent != "QUERY_ONLY" and command.amount is None:
            ambiguous_amount_counter.inc()
            logger.warning("Amount missing for mutating command", extra={"intent": command.intent})
            raise AmbiguousAmountError(f"Amount missing for {command.intent}/{command.category}")

        if command.intent == "SET_VALUE" and command.amount < 0:
            logger.warning("Negative total for SET_VALUE", extra={"category": command.category})
            raise NegativeAmountError(f"Cannot set {command.category} to a negative amount")

        if command.intent == "SET_VALUE":
            outcome = self._set_value(owner_id, command, language)
        elif command.intent in ("ADD_VALUE", "SUBTRACT_VALUE"):
            outcome = self._add_value(owner_id, command, language)
        elif command.intent == "SIMULATE_LOAN":
            outcome = await self._simulate_loan(owner_id, command, language)
        else:
            outcome = self._answer(owner_id, command, language)

        record_command(command.intent, outcome.action)
        return outcome

    def _set_value(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        amount = command.amount
        if command.category == "income":
            profile = self.store.upsert_profile(owner_id, {"monthly_income": amount})
            message = command.response or response_text(language, "income_set", amount=amount)
            return CommandOutcome("income_set", command, message, profile=profile)

        if command.category == "expense":
            return self._set_expense_total(owner_id, command, language)

        # No stored total exists for savings/other/loan
        message = command.response or response_text(language, "unknown")
        return CommandOutcome("no_change", command, message)

    def _set_expense_total(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        today = self.today()
        current_total = sum(
            t.amount
            for t in self.store.list_transactions(owner_id)
            if t.kind == "expense" and same_month(t.date, today)
        )
        target = command.amount
        delta = target - current_total

        if abs(delta) < TARGET_TOLERANCE:
            message = command.response or response_text(language, "expense_at_target", amount=target)
            return CommandOutcome("no_change", command, message)

        transaction = self.store.insert_transaction(
            owner_id,
            kind="expense",
            amount=delta,
            category=ADJUSTMENT_CATEGORY,
            on_date=today,
            description=f"Correction to set total to {target:,.2f}",
        )
        message = command.response or response_text(language, "expense_adjusted", amount=target)
        return CommandOutcome("expense_adjusted", command, message, transaction=transaction)

    def _add_value(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        kind = "income" if command.category == "income" else "expense"
        magnitude = abs(command.amount)
        signed = -magnitude if command.intent == "SUBTRACT_VALUE" else magnitude

        transaction = self.store.insert_transaction(
            owner_id,
            kind=kind,
            amount=signed,
            category=command.tag or "other",
            on_date=self.today(),
            description=f"Voice command ({command.language_detected})",
        )

        if command.response:
            message = command.response
        elif command.intent == "SUBTRACT_VALUE":
            message = response_text(language, "amount_reduced", kind=kind.capitalize(), amount=magnitude)
        else:
            message = response_text(language, f"{kind}_added", amount=magnitude)
        return CommandOutcome("transaction_added", command, message, transaction=transaction)

    async def _simulate_loan(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        rate = command.interest_rate if command.interest_rate is not None else self.default_loan_rate
        tenure = command.tenure_months or self.default_loan_tenure_months
        simulation = await self.simulator.simulate(
            abs(command.amount),
            rate,
            tenure,
            self.snapshot(owner_id),
            self.store.get_profile(owner_id),
            language,
        )
        return CommandOutcome("loan_simulated", command, simulation.narration or "", simulation=simulation)

    def _answer(self, owner_id: str, command: StructuredCommand, language: str) -> CommandOutcome:
        message = command.response
        if not message:
            message = health_summary(self.snapshot(owner_id), language)
        return CommandOutcome("answered", command, message)


def health_summary(snapshot: AnalyticsSnapshot, language: str) -> str:
    summary = response_text(
        language,
        "health",
        health_score=snapshot.health_score,
        savings_rate=snapshot.savings_rate,
        debt_to_income=snapshot.debt_to_income,
        stress=snapshot.stress_probability * 100,
    )
    if snapshot.tips:
        summary = f"{summary} {snapshot.tips[0]}"
    return summary


def dashboard_summary(snapshot: AnalyticsSnapshot, language: str) -> str:
    return response_text(
        language,
        "dashboard",
        health_score=snapshot.health_score,
        income=snapshot.monthly_income,
        expenses=snapshot.monthly_expenses,
    )
