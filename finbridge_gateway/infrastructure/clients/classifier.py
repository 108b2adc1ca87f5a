"""Intent classification and advisory narration over the model cascade"""

import logging
from typing import Any, Optional

from finbridge_gateway.config import Settings, settings
from finbridge_gateway.domain.commands import StructuredCommand, parse_structured_command
from finbridge_gateway.domain.exceptions import CandidateFailure, CascadeExhaustedError
from finbridge_gateway.domain.prompts import FinancialContext, build_advice_prompt, build_command_prompt
from finbridge_gateway.infrastructure.clients.llm import ModelCascade, build_model_cascade
from finbridge_gateway.infrastructure.observability.metrics import narration_fallback_counter

logger = logging.getLogger(__name__)


class IntentClassifier:
    """Turns free text plus financial context into a StructuredCommand"""

    def __init__(self, cascade: ModelCascade):
        self.cascade = cascade

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "IntentClassifier":
        """Raises MissingCredentialError when no API key is configured"""
        return cls(build_model_cascade(config))

    async def classify(self, text: str, context: Optional[FinancialContext] = None) -> StructuredCommand:
        """
        Raises:
            CascadeExhaustedError: No candidate produced a valid command object
        """
        prompt = build_command_prompt(text, context)
        command = await self.cascade.run(prompt, parse_structured_command)
        logger.info(
            "Command classified",
            extra={"intent": command.intent, "category": command.category, "confidence": command.confidence},
        )
        return command


def _plain_text(raw: str) -> str:
    text = raw.strip()
    if not text:
        raise CandidateFailure("Empty narration")
    return text


class AdvisoryNarrator:
    """Free-text spoken advice; never fails, falls back to a caller sentence"""

    def __init__(self, cascade: Optional[ModelCascade]):
        self.cascade = cascade

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "AdvisoryNarrator":
        """Advice model first, then the remaining classifier models"""
        config = config or settings
        models = [config.advice_model] + [m for m in config.llm_models if m != config.advice_model]
        return cls(build_model_cascade(config, models))

    async def narrate(self, data: Any, language: str, fallback: str, simulation: bool = False) -> str:
        if self.cascade is None:
            narration_fallback_counter.inc()
            return fallback
        prompt = build_advice_prompt(data, language, simulation=simulation)
        try:
            return await self.cascade.run(prompt, _plain_text)
        except CascadeExhaustedError as e:
            narration_fallback_counter.inc()
            logger.warning(f"Narration fell back to template: {e.last_error}")
            return fallback
