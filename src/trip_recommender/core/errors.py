"""Typed errors surfaced by the itinerary pipeline.

Every error carries a stable ``code`` for API clients and a ``user_message``
that the presentation layer can show as-is. Geocoding failures have no entry
here: they never leave the coordinate resolver.
"""
from __future__ import annotations

from typing import Optional


class ItineraryError(Exception):
    """Base class for all errors reported to the caller."""

    code = "itinerary_error"
    default_message = "No se pudo generar el itinerario de viaje."

    def __init__(self, user_message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.user_message = user_message or self.default_message
        self.detail = detail
        super().__init__(self.user_message if detail is None else f"{self.user_message} ({detail})")


class InputValidationError(ItineraryError):
    """Empty or invalid user input, rejected before any network call."""

    code = "validation_error"
    default_message = "Describe tu viaje antes de generar un itinerario."


class PipelineBusyError(ItineraryError):
    """A submission arrived while another pipeline run is still in flight."""

    code = "pipeline_busy"
    default_message = "Ya se está generando un itinerario. Espera a que termine."


class GenerationError(ItineraryError):
    """Base class for failures of the LLM generation stage."""

    code = "generation_error"


class EmptyResponseError(GenerationError):
    code = "empty_response"
    default_message = "No se recibió respuesta del modelo de IA."


class InvalidFormatError(GenerationError):
    code = "invalid_format"
    default_message = (
        "No se pudo generar el itinerario de viaje. "
        "El modelo devolvió un formato JSON no válido."
    )


class ServiceOverloadedError(GenerationError):
    code = "service_overloaded"
    default_message = (
        "El modelo está sobrecargado en este momento. Por favor, intenta nuevamente "
        "en unos segundos o selecciona otro modelo."
    )


class GenerationFailedError(GenerationError):
    code = "generation_failed"
    default_message = (
        "No se pudo generar el itinerario de viaje. Ocurrió un error inesperado."
    )


__all__ = [
    "EmptyResponseError",
    "GenerationError",
    "GenerationFailedError",
    "InputValidationError",
    "InvalidFormatError",
    "ItineraryError",
    "PipelineBusyError",
    "ServiceOverloadedError",
]
