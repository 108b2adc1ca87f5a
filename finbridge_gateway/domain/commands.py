"""Structured command shape and parsing of model output into it"""

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from finbridge_gateway.domain.exceptions import CandidateFailure
from finbridge_gateway.domain.normalizer import LocalCommand

Intent = Literal["SET_VALUE", "ADD_VALUE", "SUBTRACT_VALUE", "QUERY_ONLY", "SIMULATE_LOAN"]
Category = Literal["income", "expense", "savings", "other", "loan"]

MUTATING_INTENTS = ("SET_VALUE", "ADD_VALUE", "SUBTRACT_VALUE", "SIMULATE_LOAN")

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class StructuredCommand(BaseModel):
    """One interpreted user command; never persisted"""

    intent: Intent
    category: Category
    amount: Optional[float] = None
    currency: Optional[str] = None
    language_detected: str = "unknown"
    confidence: float = Field(ge=0.0, le=1.0)
    response: Optional[str] = None

    # Optional extras a classifier may fill
    tag: Optional[str] = Field(default=None, description="Spending category such as food or rent")
    interest_rate: Optional[float] = Field(default=None, ge=0)
    tenure_months: Optional[int] = Field(default=None, gt=0)


def extract_json_object(raw_text: str) -> str:
    """
    Return the first balanced {...} block in model output.

    Code fences are stripped first; commentary before or after the object is
    ignored. Braces inside JSON strings do not count.

    Raises:
        CandidateFailure: no complete object found
    """
    text = _FENCE.sub("", raw_text).strip()
    start = text.find("{")
    if start < 0:
        raise CandidateFailure("No JSON object in model output")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    raise CandidateFailure("Unbalanced JSON object in model output")


def parse_structured_command(raw_text: str) -> StructuredCommand:
    """
    Parse model output into a StructuredCommand.

    Raises:
        CandidateFailure: output has no object of the expected shape
    """
    payload = extract_json_object(raw_text)
    try:
        return StructuredCommand.model_validate_json(payload)
    except ValidationError as e:
        raise CandidateFailure(f"Malformed command object: {e.error_count()} validation errors") from e


def command_from_local(local: LocalCommand) -> StructuredCommand:
    """
    Map a normalizer result onto a StructuredCommand.

    Income and expense keywords become ADD_VALUE (the normalizer cannot
    tell "set" from "add"); loan keywords become SIMULATE_LOAN; everything
    else is a query answered locally.
    """
    if local.intent == "add_income":
        intent, category = "ADD_VALUE", "income"
    elif local.intent == "add_expense":
        intent, category = "ADD_VALUE", "expense"
    elif local.intent == "check_loan":
        intent, category = "SIMULATE_LOAN", "loan"
    else:
        intent, category = "QUERY_ONLY", "other"

    return StructuredCommand(
        intent=intent,
        category=category,
        amount=local.amount,
        language_detected=local.language,
        confidence=0.0 if local.intent == "unknown" else 0.6,
    )
