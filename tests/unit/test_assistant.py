"""Unit tests for the voice session coordinator"""

import asyncio
import pytest
from conftest import FakeClassifier
from finbridge_gateway.domain.commands import StructuredCommand
from finbridge_gateway.domain.exceptions import AmbiguousAmountError, CascadeExhaustedError, SessionBusyError
from finbridge_gateway.infrastructure.database.repositories import SqlRecordStore
from finbridge_gateway.services.assistant import SessionRegistry, TranscriptEvent, VoiceAssistant
from finbridge_gateway.services.executor import CommandExecutor

USER = "user_1"


class RecordingSynthesizer:
    def __init__(self):
        self.spoken = []

    async def speak(self, text: str, language: str) -> None:
        self.spoken.append((text, language))


def classified(intent: str, category: str, amount, **extra) -> StructuredCommand:
    return StructuredCommand(
        intent=intent, category=category, amount=amount, language_detected="English", confidence=0.95, **extra
    )


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry("en-US")


def test_registry_reuses_session_and_updates_language(registry: SessionRegistry):
    first = registry.get(USER)
    second = registry.get(USER, "hi-IN")

    assert first is second
    assert second.language == "hi-IN"
    assert registry.get("other", "xx-XX").language == "en-US"


def test_start_listening_twice_is_busy(executor: CommandExecutor, registry: SessionRegistry):
    assistant = VoiceAssistant(executor, None)
    session = registry.get(USER)

    assistant.start_listening(session)
    with pytest.raises(SessionBusyError):
        assistant.start_listening(session)

    assistant.stop_listening(session)
    assistant.start_listening(session)
    assert session.is_listening


async def test_interim_transcript_does_not_execute(executor: CommandExecutor, store: SqlRecordStore, registry):
    assistant = VoiceAssistant(executor, None)
    session = registry.get(USER)
    assistant.start_listening(session)

    outcome = await assistant.handle_transcript(session, TranscriptEvent("Spent 300", is_final=False))

    assert outcome is None
    assert session.is_listening
    assert session.last_transcript == "Spent 300"
    assert store.list_transactions(USER) == []


async def test_final_transcript_runs_local_fallback(executor: CommandExecutor, store: SqlRecordStore, registry):
    synthesizer = RecordingSynthesizer()
    assistant = VoiceAssistant(executor, None, synthesizer=synthesizer)
    session = registry.get(USER)
    assistant.start_listening(session)

    outcome = await assistant.handle_transcript(session, TranscriptEvent("Spent 300 on food", is_final=True))

    assert not session.is_listening
    assert outcome.action == "transaction_added"
    assert store.list_transactions(USER)[0].amount == 300
    assert synthesizer.spoken == [("Expense of 300 added.", "en-US")]


async def test_local_fallback_in_hindi(executor: CommandExecutor, store: SqlRecordStore, registry):
    assistant = VoiceAssistant(executor, None)
    session = registry.get(USER, "hi-IN")

    outcome = await assistant.process(session, "paanch hazaar kharcha")

    assert outcome.message == "5,000 ka kharcha jod diya."
    assert store.list_transactions(USER)[0].amount == 5_000


async def test_local_health_query_answers_from_snapshot(executor: CommandExecutor, store: SqlRecordStore, registry):
    assistant = VoiceAssistant(executor, None)

    outcome = await assistant.process(registry.get(USER), "How is my financial health")

    assert outcome.action == "answered"
    assert outcome.message.startswith("Your financial health score is")
    assert store.list_transactions(USER) == []


async def test_local_unknown_command(executor: CommandExecutor, registry):
    assistant = VoiceAssistant(executor, None)
    outcome = await assistant.process(registry.get(USER), "what a lovely day")
    assert outcome.message.startswith("I did not understand that.")


async def test_missing_amount_is_spoken_and_raised(executor: CommandExecutor, store: SqlRecordStore, registry):
    synthesizer = RecordingSynthesizer()
    assistant = VoiceAssistant(executor, None, synthesizer=synthesizer)

    with pytest.raises(AmbiguousAmountError):
        await assistant.process(registry.get(USER), "I spent money on food")

    assert store.list_transactions(USER) == []
    assert synthesizer.spoken[0][0].startswith("I could not detect the amount")


async def test_salary_statement_sets_income(executor: CommandExecutor, store: SqlRecordStore, registry):
    classifier = FakeClassifier(classified("SET_VALUE", "income", 25_000))
    assistant = VoiceAssistant(executor, classifier)

    outcome = await assistant.process(registry.get(USER), "My salary is 25000")

    assert outcome.action == "income_set"
    assert store.get_profile(USER).monthly_income == 25_000
    assert store.list_transactions(USER) == []


async def test_spending_statement_adds_one_expense(executor: CommandExecutor, store: SqlRecordStore, registry):
    classifier = FakeClassifier(classified("ADD_VALUE", "expense", 300, tag="food", response="Added 300 for food."))
    assistant = VoiceAssistant(executor, classifier)

    outcome = await assistant.process(registry.get(USER), "Spent 300 on food")

    rows = store.list_transactions(USER)
    assert len(rows) == 1
    assert rows[0].category == "food"
    assert outcome.message == "Added 300 for food."


async def test_classifier_receives_financial_context(executor: CommandExecutor, store: SqlRecordStore, registry):
    store.upsert_profile(USER, {"monthly_income": 40_000})
    for amount in range(1, 8):
        store.insert_transaction(USER, "expense", amount * 100, "food", executor.today())
    classifier = FakeClassifier(classified("QUERY_ONLY", "other", None, response="ok"))
    assistant = VoiceAssistant(executor, classifier, context_transactions=5)

    await assistant.process(registry.get(USER), "how am I doing")

    _, context = classifier.calls[0]
    assert context.expenses == 2_800
    assert len(context.recent_transactions) == 5
    assert context.recent_transactions[0]["type"] == "expense"


async def test_cascade_exhaustion_mutates_nothing(executor: CommandExecutor, store: SqlRecordStore, registry):
    classifier = FakeClassifier(error=CascadeExhaustedError("All 3 model candidates failed"))
    assistant = VoiceAssistant(executor, classifier)

    with pytest.raises(CascadeExhaustedError):
        await assistant.process(registry.get(USER), "Spent 300 on food")

    assert store.list_transactions(USER) == []
    assert store.get_profile(USER) is None


async def test_one_command_at_a_time_per_session(executor: CommandExecutor, registry):
    release = asyncio.Event()
    order = []

    class SlowClassifier:
        async def classify(self, text, context=None):
            order.append(f"start {text}")
            if text == "first":
                await release.wait()
            order.append(f"end {text}")
            return classified("QUERY_ONLY", "other", None, response=text)

    assistant = VoiceAssistant(executor, SlowClassifier())
    session = registry.get(USER)

    first = asyncio.create_task(assistant.process(session, "first"))
    await asyncio.sleep(0)
    assert session.is_processing
    second = asyncio.create_task(assistant.process(session, "second"))
    await asyncio.sleep(0)
    release.set()
    await asyncio.gather(first, second)

    assert order == ["start first", "end first", "start second", "end second"]


async def test_session_busy_until_final_transcript_completes(executor: CommandExecutor, registry):
    release = asyncio.Event()

    class SlowClassifier:
        async def classify(self, text, context=None):
            await release.wait()
            return classified("QUERY_ONLY", "other", None, response="done")

    assistant = VoiceAssistant(executor, SlowClassifier())
    session = registry.get(USER)
    assistant.start_listening(session)

    running = asyncio.create_task(assistant.handle_transcript(session, TranscriptEvent("first", is_final=True)))
    await asyncio.sleep(0)

    with pytest.raises(SessionBusyError):
        assistant.start_listening(session)

    release.set()
    outcome = await running
    assert outcome.message == "done"
    assert not session.is_listening
    assistant.start_listening(session)


async def test_session_released_after_failed_command(executor: CommandExecutor, registry):
    assistant = VoiceAssistant(executor, FakeClassifier(error=CascadeExhaustedError("All 2 model candidates failed")))
    session = registry.get(USER)
    assistant.start_listening(session)

    with pytest.raises(CascadeExhaustedError):
        await assistant.handle_transcript(session, TranscriptEvent("Spent 300", is_final=True))

    assert not session.is_listening
