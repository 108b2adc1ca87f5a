"""Loan simulator service: projection plus spoken narration"""

import logging
from dataclasses import asdict
from typing import Optional

from finbridge_gateway.domain.languages import response_text
from finbridge_gateway.domain.loans import simulate_loan
from finbridge_gateway.domain.models import AnalyticsSnapshot, LoanSimulation, Profile
from finbridge_gateway.infrastructure.clients.classifier import AdvisoryNarrator
from finbridge_gateway.infrastructure.observability.metrics import loan_simulation_counter

logger = logging.getLogger(__name__)


def fallback_narration(simulation: LoanSimulation, language: str) -> str:
    """Deterministic summary: new EMI, DTI transition and risk label"""
    sentence = response_text(
        language,
        "loan_summary",
        emi=simulation.emi,
        dti_before=simulation.before.debt_to_income,
        dti_after=simulation.after.debt_to_income,
        risk=simulation.after.risk_level.replace("_", " "),
    )
    if simulation.warning:
        sentence = f"{sentence} {simulation.warning}"
    return sentence


class LoanSimulator:
    def __init__(self, narrator: Optional[AdvisoryNarrator], default_income: float):
        self.narrator = narrator
        self.default_income = default_income

    async def simulate(
        self,
        principal: float,
        annual_rate: float,
        tenure_months: int,
        snapshot: AnalyticsSnapshot,
        profile: Optional[Profile],
        language: str,
    ) -> LoanSimulation:
        """Project the loan and attach narration; raises InvalidLoanTermsError on bad terms"""
        simulation = simulate_loan(principal, annual_rate, tenure_months, snapshot, profile, self.default_income)
        loan_simulation_counter.labels(risk_level=simulation.after.risk_level).inc()

        fallback = fallback_narration(simulation, language)
        if self.narrator is None:
            simulation.narration = fallback
        else:
            data = {
                "type": "loan_simulation",
                "principal": simulation.principal,
                "annual_rate": simulation.annual_rate,
                "tenure_months": simulation.tenure_months,
                "emi": round(simulation.emi, 2),
                "before": asdict(simulation.before),
                "after": asdict(simulation.after),
                "warning": simulation.warning,
                "tips": simulation.tips,
            }
            simulation.narration = await self.narrator.narrate(data, language, fallback, simulation=True)

        logger.info(
            "Loan simulated",
            extra={"emi": simulation.emi, "dti_after": simulation.after.debt_to_income, "risk": simulation.after.risk_level},
        )
        return simulation
