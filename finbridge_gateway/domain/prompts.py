"""Prompt builders for command classification and advisory narration"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

COMMAND_INSTRUCTIONS = """You are the financial command interpreter of a personal finance app.
Users speak or type in any language (English, Hindi, Tamil, Marwadi, mixed).
Turn each utterance into exactly one structured action. Never invent arithmetic.

Classify the intent as one of:
- SET_VALUE: the user states a new absolute value ("my salary is 25000",
  "set income to 10000", "total expense this month is 8000"). Replace, never add.
- ADD_VALUE: the user adds to a total ("spent 300 on food", "earned 200 today",
  "add income 1000"). When an expense statement is ambiguous prefer ADD_VALUE
  unless a total is explicitly mentioned.
- SUBTRACT_VALUE: the user reduces a total ("refund of 200", "remove 500 from expenses").
- QUERY_ONLY: the user asks for information or advice. Put the answer, based on
  the financial context below, in "response" in the user's own language.
- SIMULATE_LOAN: the user asks whether a specific loan is affordable. Put the
  principal in "amount" and, if stated, "interest_rate" (annual %) and "tenure_months".

Numbers may look like 10,000 / 10k / 1.5 lakh / ₹10,000 / "paanch hazaar".
Prefer SET_VALUE for "is", "equals", "set", "my X is Y". Do not assume addition
without additive words. If no amount is stated, use null; never guess one.

Respond with ONLY one JSON object:
{"intent": "SET_VALUE | ADD_VALUE | SUBTRACT_VALUE | QUERY_ONLY | SIMULATE_LOAN",
 "category": "income | expense | savings | other | loan",
 "amount": number or null,
 "currency": "detected currency or null",
 "language_detected": "language name",
 "confidence": 0.0-1.0,
 "response": "confirmation or answer in the user's language",
 "tag": "spending category such as food, rent, fuel, or null",
 "interest_rate": number or null,
 "tenure_months": integer or null}"""

ADVICE_INSTRUCTIONS = """You are a financial assistant speaking to the user in {language}.
Convert the financial data below into a natural spoken reply in {language}.
{detail}
Reply with plain text only, no markdown."""

SIMULATION_DETAIL = (
    "Compare before and after for debt-to-income, health score and stress risk. "
    "State the new EMI, explain the risk level and read out any warning."
)
SHORT_DETAIL = "Keep it to one or two sentences."


@dataclass
class FinancialContext:
    """Current position sent alongside each utterance"""

    income: float
    expenses: float
    debt: float
    savings_rate: float
    health_score: int
    recent_transactions: List[Dict[str, Any]] = field(default_factory=list)


def build_command_prompt(text: str, context: Optional[FinancialContext] = None) -> str:
    parts = [COMMAND_INSTRUCTIONS]
    if context is not None:
        parts.append(
            "CURRENT FINANCIAL CONTEXT:\n"
            f"Income: {context.income:.2f}\n"
            f"Expenses: {context.expenses:.2f}\n"
            f"Debt/Loans (monthly EMI): {context.debt:.2f}\n"
            f"Savings Rate: {context.savings_rate:.1f}%\n"
            f"Health Score: {context.health_score}\n"
            f"Recent Transactions: {json.dumps(context.recent_transactions, ensure_ascii=False)}"
        )
    parts.append(f'User Command: "{text}"')
    parts.append("Respond with ONLY the JSON.")
    return "\n\n".join(parts)


def build_advice_prompt(data: Any, language: str, simulation: bool = False) -> str:
    payload = asdict(data) if hasattr(data, "__dataclass_fields__") else data
    header = ADVICE_INSTRUCTIONS.format(
        language=language,
        detail=SIMULATION_DETAIL if simulation else SHORT_DETAIL,
    )
    return f"{header}\n\nData:\n{json.dumps(payload, indent=2, default=str, ensure_ascii=False)}"
