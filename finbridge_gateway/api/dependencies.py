"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from finbridge_gateway.config import settings
from finbridge_gateway.domain.exceptions import MissingCredentialError
from finbridge_gateway.infrastructure.clients.classifier import AdvisoryNarrator, IntentClassifier
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore
from finbridge_gateway.infrastructure.database.session import get_db
from finbridge_gateway.services.assistant import SessionRegistry, VoiceAssistant
from finbridge_gateway.services.executor import CommandExecutor
from finbridge_gateway.services.simulator import LoanSimulator

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store(db: Session = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


def get_classifier() -> Optional[IntentClassifier]:
    """Remote classifier, or None when no credential is configured"""
    try:
        return IntentClassifier.from_settings(settings)
    except MissingCredentialError as e:
        logger.warning(f"Remote classifier unavailable: {e}")
        return None


def get_narrator() -> Optional[AdvisoryNarrator]:
    try:
        return AdvisoryNarrator.from_settings(settings)
    except MissingCredentialError:
        return None


def get_simulator(narrator: Optional[AdvisoryNarrator] = Depends(get_narrator)) -> LoanSimulator:
    return LoanSimulator(narrator, settings.default_monthly_income)


def get_executor(
    store: SqlRecordStore = Depends(get_store),
    simulator: LoanSimulator = Depends(get_simulator),
) -> CommandExecutor:
    return CommandExecutor(
        store,
        simulator,
        default_loan_rate=settings.default_loan_rate,
        default_loan_tenure_months=settings.default_loan_tenure_months,
    )


def get_assistant(
    executor: CommandExecutor = Depends(get_executor),
    classifier: Optional[IntentClassifier] = Depends(get_classifier),
) -> VoiceAssistant:
    return VoiceAssistant(executor, classifier, context_transactions=settings.context_transactions)


def get_sessions(request: Request) -> SessionRegistry:
    """Session registry shared across requests"""
    return request.app.state.sessions
