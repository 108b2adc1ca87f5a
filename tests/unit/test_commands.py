"""Unit tests for model-output parsing and offline command mapping"""

import pytest
from finbridge_gateway.domain.commands import command_from_local, extract_json_object, parse_structured_command
from finbridge_gateway.domain.exceptions import CandidateFailure
from finbridge_gateway.domain.normalizer import LocalCommand
from finbridge_gateway.domain.prompts import FinancialContext, build_advice_prompt, build_command_prompt

VALID = '{"intent": "SET_VALUE", "category": "income", "amount": 25000, "confidence": 0.95}'


def test_extract_json_object_plain():
    assert extract_json_object(VALID) == VALID


def test_extract_json_object_strips_fences_and_commentary():
    raw = f"Sure! Here is the result:\n```json\n{VALID}\n```\nLet me know if you need more."
    assert extract_json_object(raw) == VALID


def test_extract_json_object_braces_inside_strings():
    raw = '{"intent": "QUERY_ONLY", "response": "use {braces} and \\"quotes\\"", "x": {"y": 1}} trailing }'
    assert extract_json_object(raw) == raw[: raw.index(" trailing")]


def test_extract_json_object_missing_or_unbalanced():
    with pytest.raises(CandidateFailure):
        extract_json_object("I cannot help with that.")
    with pytest.raises(CandidateFailure):
        extract_json_object('{"intent": "SET_VALUE"')


def test_parse_structured_command():
    command = parse_structured_command(f"```{VALID}```")
    assert command.intent == "SET_VALUE"
    assert command.category == "income"
    assert command.amount == 25000
    assert command.language_detected == "unknown"
    assert command.tag is None


def test_parse_structured_command_null_amount():
    command = parse_structured_command(
        '{"intent": "ADD_VALUE", "category": "expense", "amount": null, "confidence": 0.4}'
    )
    assert command.amount is None


@pytest.mark.parametrize(
    "payload",
    [
        '{"intent": "MULTIPLY", "category": "income", "amount": 1, "confidence": 0.9}',
        '{"intent": "ADD_VALUE", "category": "groceries", "amount": 1, "confidence": 0.9}',
        '{"intent": "ADD_VALUE", "category": "expense", "amount": 1, "confidence": 1.5}',
        '{"intent": "ADD_VALUE", "category": "expense", "amount": 1}',
        '{"intent": "SIMULATE_LOAN", "category": "loan", "amount": 1, "confidence": 0.9, "tenure_months": 0}',
    ],
)
def test_parse_structured_command_rejects_invalid_shape(payload):
    with pytest.raises(CandidateFailure):
        parse_structured_command(payload)


@pytest.mark.parametrize(
    "intent, expected",
    [
        ("add_income", ("ADD_VALUE", "income")),
        ("add_expense", ("ADD_VALUE", "expense")),
        ("check_loan", ("SIMULATE_LOAN", "loan")),
        ("show_dashboard", ("QUERY_ONLY", "other")),
        ("health_query", ("QUERY_ONLY", "other")),
        ("unknown", ("QUERY_ONLY", "other")),
    ],
)
def test_command_from_local(intent, expected):
    command = command_from_local(LocalCommand(intent=intent, amount=300.0, language="hi-IN", text="..."))
    assert (command.intent, command.category) == expected
    assert command.amount == 300.0
    assert command.language_detected == "hi-IN"


def test_command_from_local_confidence():
    known = command_from_local(LocalCommand("add_expense", 1.0, "en-US", "spent 1"))
    unknown = command_from_local(LocalCommand("unknown", None, "en-US", "hello"))
    assert known.confidence == 0.6
    assert unknown.confidence == 0.0


def test_build_command_prompt_with_context():
    context = FinancialContext(
        income=50000,
        expenses=20000,
        debt=5000,
        savings_rate=60,
        health_score=82,
        recent_transactions=[{"type": "expense", "amount": 300, "category": "food"}],
    )
    prompt = build_command_prompt("Spent 300 on food", context)
    assert "CURRENT FINANCIAL CONTEXT:" in prompt
    assert "Income: 50000.00" in prompt
    assert '"category": "food"' in prompt
    assert prompt.endswith('User Command: "Spent 300 on food"\n\nRespond with ONLY the JSON.')


def test_build_command_prompt_without_context():
    assert "CURRENT FINANCIAL CONTEXT" not in build_command_prompt("hello")


def test_build_advice_prompt_names_language():
    prompt = build_advice_prompt({"emi": 10623.52}, "hi-IN", simulation=True)
    assert "speaking to the user in hi-IN" in prompt
    assert "new EMI" in prompt
    assert '"emi": 10623.52' in prompt
