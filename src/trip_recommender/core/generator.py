"""LLM-backed itinerary generation with typed error classification."""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from trip_recommender.core.config import ApiSettings
from trip_recommender.core.errors import (
    EmptyResponseError,
    GenerationFailedError,
    InputValidationError,
    InvalidFormatError,
    ItineraryError,
    ServiceOverloadedError,
)
from trip_recommender.core.post_processing import parse_itinerary
from trip_recommender.core.prompts import DEFAULT_SCHEMA_VERSION, BuiltPrompt, build_prompt
from trip_recommender.core.schemas import (
    SUPPORTED_MODEL_IDS,
    ItineraryDay,
    Location,
)
from trip_recommender.core.types import SchemaVersion

logger = logging.getLogger(__name__)

LLMFactory = Callable[[str, BuiltPrompt], BaseChatModel]

_OVERLOAD_STATUS_CODES = {503, 529}
_OVERLOAD_MARKERS = ("overloaded", "unavailable")


def _iter_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_overload_error(exc: BaseException) -> bool:
    """Return True when the LLM service reported overload or unavailability."""

    for candidate in _iter_exception_chain(exc):
        for attr in ("code", "status_code"):
            code = getattr(candidate, attr, None)
            if isinstance(code, int) and code in _OVERLOAD_STATUS_CODES:
                return True
        message = str(candidate).lower()
        if any(marker in message for marker in _OVERLOAD_MARKERS):
            return True
    return False


def classify_llm_error(exc: Exception) -> ItineraryError:
    """Translate a raw service exception into the generation error taxonomy."""

    if isinstance(exc, ItineraryError):
        return exc
    if is_overload_error(exc):
        return ServiceOverloadedError(detail=str(exc))
    return GenerationFailedError(detail=f"{type(exc).__name__}: {exc}")


def extract_response_text(response: Any) -> Optional[str]:
    """Return the text carried by a chat model response, if any."""

    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return None


def make_gemini_factory(settings: ApiSettings) -> LLMFactory:
    """Return a factory that builds a Gemini chat model bound to a schema."""

    api_key = settings.ensure("google_api_key")

    def factory(model_id: str, prompt: BuiltPrompt) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=model_id,
            google_api_key=api_key,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout_s,
            max_retries=0,
            response_mime_type="application/json",
            response_schema=prompt.schema,
        )

    return factory


class ItineraryGenerator:
    """Single-attempt itinerary generation against the LLM service.

    Every failure leaves this class as an ``ItineraryError`` subclass; raw
    service exceptions never propagate to the caller.
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        llm_factory: Optional[LLMFactory] = None,
        schema_version: SchemaVersion = DEFAULT_SCHEMA_VERSION,
    ) -> None:
        self.settings = settings
        self.schema_version = schema_version
        self._llm_factory = llm_factory or make_gemini_factory(settings)

    @staticmethod
    def validate_request(prompt: Optional[str], model_id: str) -> str:
        """Return the trimmed prompt or raise before any network call."""

        cleaned = (prompt or "").strip()
        if not cleaned:
            raise InputValidationError()
        if model_id not in SUPPORTED_MODEL_IDS:
            raise InputValidationError(
                f"Modelo no soportado: {model_id}. Selecciona uno de la lista.",
                detail=model_id,
            )
        return cleaned

    async def generate(
        self,
        prompt: str,
        location: Optional[Location] = None,
        model_id: Optional[str] = None,
    ) -> List[ItineraryDay]:
        """Generate and parse an itinerary for a free-text travel request.

        ``model_id`` falls back to ``settings.default_model_id``.
        """

        model_id = model_id or self.settings.default_model_id
        cleaned = self.validate_request(prompt, model_id)
        built = build_prompt(cleaned, location, self.schema_version)
        logger.info("Requesting itinerary from %s (schema=%s)", model_id, built.version)
        logger.debug("Itinerary prompt: %s", built.text)

        try:
            llm = self._llm_factory(model_id, built)
            response = await llm.ainvoke([HumanMessage(content=built.text)])
        except Exception as exc:
            error = classify_llm_error(exc)
            logger.error("Error generating itinerary with %s: %s", model_id, exc)
            raise error from exc

        text = extract_response_text(response)
        if not text or not text.strip():
            logger.error("Model %s returned an empty response", model_id)
            raise EmptyResponseError()

        try:
            days = parse_itinerary(text)
        except InvalidFormatError:
            logger.error("Model %s returned an unparseable itinerary", model_id)
            raise

        logger.info(
            "Parsed itinerary with %s days and %s places",
            len(days),
            sum(len(day.places) for day in days),
        )
        return days
