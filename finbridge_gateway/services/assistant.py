"""
Voice/command coordinator.

Owns per-session state (listening flag, last transcript, language) and
routes each final transcript through interpretation and the safety gate.
One session processes one command at a time.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple

from finbridge_gateway.domain.commands import StructuredCommand, command_from_local
from finbridge_gateway.domain.exceptions import AmbiguousAmountError, SessionBusyError
from finbridge_gateway.domain.languages import normalize_language, response_text
from finbridge_gateway.domain.models import AnalyticsSnapshot
from finbridge_gateway.domain.normalizer import LocalCommand, parse_command
from finbridge_gateway.domain.prompts import FinancialContext
from finbridge_gateway.infrastructure.clients.classifier import IntentClassifier
from finbridge_gateway.infrastructure.observability.logging import log_command
from finbridge_gateway.infrastructure.observability.metrics import local_fallback_counter
from finbridge_gateway.services.executor import CommandExecutor, CommandOutcome, dashboard_summary, health_summary

logger = logging.getLogger(__name__)


@dataclass
class TranscriptEvent:
    """Interim or final speech-to-text result"""

    text: str
    is_final: bool


class SpeechSynthesizer(Protocol):
    async def speak(self, text: str, language: str) -> None: ...


@dataclass
class VoiceSession:
    owner_id: str
    language: str = "en-US"
    is_listening: bool = False
    last_transcript: str = ""
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def is_processing(self) -> bool:
        return self._lock.locked()


class SessionRegistry:
    """One VoiceSession per owner"""

    def __init__(self, default_language: str = "en-US"):
        self.default_language = default_language
        self._sessions: Dict[str, VoiceSession] = {}

    def get(self, owner_id: str, language: Optional[str] = None) -> VoiceSession:
        session = self._sessions.get(owner_id)
        if session is None:
            session = VoiceSession(owner_id=owner_id, language=normalize_language(language or self.default_language))
            self._sessions[owner_id] = session
        elif language:
            session.language = normalize_language(language)
        return session


class VoiceAssistant:
    def __init__(
        self,
        executor: CommandExecutor,
        classifier: Optional[IntentClassifier],
        synthesizer: Optional[SpeechSynthesizer] = None,
        context_transactions: int = 5,
    ):
        self.executor = executor
        self.classifier = classifier
        self.synthesizer = synthesizer
        self.context_transactions = context_transactions

    def start_listening(self, session: VoiceSession) -> None:
        if session.is_listening:
            raise SessionBusyError(f"Session {session.owner_id} is already listening")
        session.is_listening = True
        session.last_transcript = ""

    def stop_listening(self, session: VoiceSession) -> None:
        session.is_listening = False

    async def handle_transcript(self, session: VoiceSession, event: TranscriptEvent) -> Optional[CommandOutcome]:
        """
        Interim events only update the transcript. A final one runs the command;
        the session stays busy until the command completes or fails.
        """
        session.last_transcript = event.text
        if not event.is_final:
            return None
        try:
            return await self.process(session, event.text)
        finally:
            self.stop_listening(session)

    async def process(self, session: VoiceSession, text: str) -> CommandOutcome:
        """
        Interpret and execute one command for the session.

        Raises:
            CascadeExhaustedError: remote classification failed on every candidate
            AmbiguousAmountError: no amount for a mutating command (also spoken to the user)
        """
        async with session._lock:
            start_time = time.time()
            snapshot = self.executor.snapshot(session.owner_id)
            command, local = await self._interpret(session, text, snapshot)

            try:
                outcome = await self.executor.execute(session.owner_id, command, session.language)
            except AmbiguousAmountError:
                await self._speak(response_text(session.language, "amount_missing"), session.language)
                raise

            log_command(
                session.owner_id,
                command.intent,
                command.category,
                outcome.action,
                "local" if local is not None else "remote",
                (time.time() - start_time) * 1000,
                transaction_id=outcome.transaction.transaction_id if outcome.transaction else None,
            )
            await self._speak(outcome.message, session.language)
            return outcome

    async def _interpret(
        self, session: VoiceSession, text: str, snapshot: AnalyticsSnapshot
    ) -> Tuple[StructuredCommand, Optional[LocalCommand]]:
        if self.classifier is None:
            local_fallback_counter.inc()
            logger.warning("No remote classifier configured, using local normalizer")
            local = parse_command(text, session.language)
            command = command_from_local(local)
            if command.intent == "QUERY_ONLY":
                command.response = self._local_answer(local, snapshot, session.language)
            return command, local

        context = self._context(session.owner_id, snapshot)
        return await self.classifier.classify(text, context), None

    def _context(self, owner_id: str, snapshot: AnalyticsSnapshot) -> FinancialContext:
        recent = self.executor.store.list_transactions(owner_id)[: self.context_transactions]
        return FinancialContext(
            income=snapshot.monthly_income,
            expenses=snapshot.monthly_expenses,
            debt=snapshot.total_emi,
            savings_rate=snapshot.savings_rate,
            health_score=snapshot.health_score,
            recent_transactions=[
                {"type": t.kind, "amount": t.amount, "category": t.category} for t in recent
            ],
        )

    @staticmethod
    def _local_answer(local: LocalCommand, snapshot: AnalyticsSnapshot, language: str) -> str:
        if local.intent == "show_dashboard":
            return dashboard_summary(snapshot, language)
        if local.intent == "health_query":
            return health_summary(snapshot, language)
        return response_text(language, "unknown")

    async def _speak(self, text: str, language: str) -> None:
        if self.synthesizer is not None and text:
            await self.synthesizer.speak(text, language)
