"""Remote language model candidates and the sequential cascade that drives them"""

import logging
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

import httpx

from finbridge_gateway.config import Settings, settings
from finbridge_gateway.domain.exceptions import CandidateFailure, CascadeExhaustedError, MissingCredentialError
from finbridge_gateway.infrastructure.observability.metrics import (
    candidate_failure_counter,
    cascade_exhausted_counter,
    model_latency_histogram,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TextModel(Protocol):
    """Anything that turns a prompt into text or raises CandidateFailure"""

    name: str

    async def generate(self, prompt: str) -> str: ...


class GeminiModel:
    """Client for one Gemini generateContent model"""

    def __init__(
        self,
        model_name: str,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = model_name
        self.api_key = api_key
        self.base_url = base_url or settings.llm_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def generate(self, prompt: str) -> str:
        """
        Send one prompt and return the first candidate's text.

        Raises:
            CandidateFailure: On transport errors, non-2xx status, or a payload without text
        """
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with model_latency_histogram.labels(model=self.name).time():
                    response = await client.post(
                        f"{self.base_url}/models/{self.name}:generateContent",
                        params={"key": self.api_key},
                        json=payload,
                    )
                response.raise_for_status()
                data = response.json()
                text = data["candidates"][0]["content"]["parts"][0]["text"]
                if not isinstance(text, str):
                    raise CandidateFailure(f"{self.name}: non-text reply")

            except httpx.TimeoutException as e:
                raise CandidateFailure(f"{self.name}: timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise CandidateFailure(f"{self.name}: HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise CandidateFailure(f"{self.name}: {e.__class__.__name__}") from e
            except (KeyError, IndexError, TypeError, ValueError) as e:
                raise CandidateFailure(f"{self.name}: unexpected payload shape") from e

        if not text or not text.strip():
            raise CandidateFailure(f"{self.name}: empty response")
        return text


class ModelCascade:
    """
    Ordered candidates tried one at a time until one succeeds.

    A candidate fails when generation raises CandidateFailure or when
    `parse` rejects its output; the next candidate is then tried. The first
    parsed result wins and later candidates are never called.
    """

    def __init__(self, candidates: Sequence[TextModel]):
        self.candidates: List[TextModel] = list(candidates)

    async def run(self, prompt: str, parse: Callable[[str], T]) -> T:
        """
        Raises:
            CascadeExhaustedError: Every candidate failed; carries the last cause
        """
        last_error: Optional[BaseException] = None
        for candidate in self.candidates:
            try:
                raw = await candidate.generate(prompt)
                return parse(raw)
            except CandidateFailure as e:
                candidate_failure_counter.labels(model=candidate.name).inc()
                logger.warning(f"Model candidate failed: {e}", extra={"model": candidate.name})
                last_error = e

        cascade_exhausted_counter.inc()
        logger.error(
            "All model candidates failed",
            extra={"candidates": [c.name for c in self.candidates], "last_error": str(last_error)},
        )
        raise CascadeExhaustedError(
            f"All {len(self.candidates)} model candidates failed", last_error=last_error
        )


def build_model_cascade(config: Settings | None = None, models: Sequence[str] | None = None) -> ModelCascade:
    """
    Cascade over the configured Gemini models.

    Raises:
        MissingCredentialError: No API key configured
    """
    config = config or settings
    if not config.llm_api_key:
        raise MissingCredentialError("LLM_API_KEY is not configured")
    names = list(models) if models is not None else config.llm_models
    return ModelCascade(
        [
            GeminiModel(name, config.llm_api_key, base_url=config.llm_api_base, timeout=config.http_timeout_seconds)
            for name in names
        ]
    )
