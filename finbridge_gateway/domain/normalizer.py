"""
Deterministic multilingual number and command normalizer.

Used on its own when no remote classifier is available. Never returns 0
for "no number found": absence is None so callers can tell it from an
explicit zero.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from finbridge_gateway.domain.languages import (
    KEYWORD_CATEGORIES,
    keyword_table,
    normalize_language,
    number_lexicon,
    zero_words,
)

UNKNOWN = "unknown"

_DIGITS = re.compile(r"\d[\d,]*(?:\.\d+)?")
# Whitespace and ASCII punctuation only; Indic vowel signs are not \w
_TOKEN = re.compile(r"[^\s,.!?;:'\"()\[\]{}₹$€£]+")


@dataclass
class LocalCommand:
    """Coarse parse of an utterance"""

    intent: str  # add_income | add_expense | check_loan | show_dashboard | health_query | unknown
    amount: Optional[float]
    language: str
    text: str


def tokenize(text: str) -> List[str]:
    return _TOKEN.findall(text.lower())


def parse_spoken_number(text: str, language: str) -> Optional[float]:
    """
    Resolve a number written as digits or spoken as words.

    - Digits win: "500", "10,000", "1.5 lakh", "5k", "500 aayiram"
    - Words accumulate: "five thousand two hundred" → 5200, "paanch hazaar" → 5000
    - A zero keyword returns 0.0
    - Nothing numeric returns None
    """
    language = normalize_language(language)
    lexicon = number_lexicon(language)
    lowered = text.lower()

    match = _DIGITS.search(lowered)
    if match:
        value = float(match.group().replace(",", ""))
        following = tokenize(lowered[match.end():])
        if following:
            scale = lexicon.get(following[0])
            if scale is not None and scale >= 100:
                value *= scale
        return value

    tokens = tokenize(lowered)
    if any(token in zero_words(language) for token in tokens):
        return 0.0

    total = 0.0
    subtotal = 0.0
    found = False
    for token in tokens:
        value = lexicon.get(token)
        if value is None:
            continue
        found = True
        if value >= 100:
            subtotal = (subtotal or 1) * value
            if value >= 1000:
                total += subtotal
                subtotal = 0.0
        else:
            subtotal += value

    if not found:
        return None
    return total + subtotal


def classify_intent(text: str, language: str) -> str:
    """Keyword containment test; first matching category wins"""
    padded = f" {' '.join(tokenize(text))} "
    table = keyword_table(normalize_language(language))
    for category in KEYWORD_CATEGORIES:
        if any(f" {keyword} " in padded for keyword in table[category]):
            return category
    return UNKNOWN


def parse_command(text: str, language: str) -> LocalCommand:
    language = normalize_language(language)
    return LocalCommand(
        intent=classify_intent(text, language),
        amount=parse_spoken_number(text, language),
        language=language,
        text=text,
    )
