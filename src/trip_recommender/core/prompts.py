"""Prompt templates and structured-output schemas for itinerary generation."""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, Optional

from trip_recommender.core.schemas import PLACE_CATEGORIES, Location
from trip_recommender.core.types import SchemaVersion

DEFAULT_SCHEMA_VERSION: SchemaVersion = "extended"

itinerary_prompt = """Crea un itinerario de viaje detallado basado en la solicitud del usuario. Responde en español.
Solicitud del usuario: "{user_prompt}"
{location_context}
El itinerario debe estar desglosado día por día, apropiado para la duración del viaje mencionada en la solicitud.
Para cada día, proporciona un título o tema conciso para las actividades del día.
Para cada día, sugiere de 2 a 4 lugares para visitar o actividades.
Para cada lugar/actividad, proporciona:
- El nombre oficial completo del lugar (no abreviaturas ni apodos).
- Una breve descripción (1-2 oraciones).
{address_rules}- Sus coordenadas geográficas (latitud y longitud) con al menos 5 decimales, lo bastante precisas para ubicarlo en un mapa.
- Una categoría de las siguientes opciones: {categories}.
"""

address_rules = """- La dirección postal completa en el formato "calle y número (si aplica), ciudad, código postal de 5 dígitos, país", por ejemplo "Calle Larios, Málaga, 29005, España".
"""

location_context_template = (
    "El usuario se encuentra actualmente en la latitud {latitude} y longitud {longitude}. "
    "Usa esto como contexto si la solicitud es sobre lugares cercanos."
)


@dataclass(frozen=True, slots=True)
class BuiltPrompt:
    """Instruction text plus the schema the LLM response must conform to."""

    text: str
    schema: Dict[str, Any]
    version: SchemaVersion


_PLACE_PROPERTIES: Dict[str, Dict[str, Any]] = {
    "name": {
        "type": "string",
        "description": "The full official name of the place or activity.",
    },
    "description": {
        "type": "string",
        "description": "A short, 1-2 sentence description of the place or activity.",
    },
    "address": {
        "type": "string",
        "description": (
            "Full postal address: street (if applicable), city, 5-digit postal code, country."
        ),
    },
    "latitude": {
        "type": "number",
        "description": "The geographic latitude of the place.",
    },
    "longitude": {
        "type": "number",
        "description": "The geographic longitude of the place.",
    },
    "category": {
        "type": "string",
        "description": "Categorize the place.",
        "enum": list(PLACE_CATEGORIES),
    },
}


def build_itinerary_schema(version: SchemaVersion = DEFAULT_SCHEMA_VERSION) -> Dict[str, Any]:
    """Return the array-of-days schema for the requested variant.

    ``basic`` omits the address field and relies on LLM coordinates only;
    ``extended`` requires an address so the resolver can geocode it.
    """

    if version not in ("basic", "extended"):
        raise ValueError(f"Unsupported schema version '{version}'")

    place_fields = [
        field for field in _PLACE_PROPERTIES if version == "extended" or field != "address"
    ]
    place_schema = {
        "type": "object",
        "properties": {field: copy.deepcopy(_PLACE_PROPERTIES[field]) for field in place_fields},
        "required": place_fields,
    }
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "day": {
                    "type": "integer",
                    "description": "The day number of the itinerary, starting from 1.",
                },
                "title": {
                    "type": "string",
                    "description": "A concise title or theme for the day's activities.",
                },
                "places": {
                    "type": "array",
                    "description": "A list of places to visit or activities for the day.",
                    "items": place_schema,
                },
            },
            "required": ["day", "title", "places"],
        },
    }


def build_prompt(
    user_prompt: str,
    location: Optional[Location] = None,
    version: SchemaVersion = DEFAULT_SCHEMA_VERSION,
) -> BuiltPrompt:
    """Build the instruction text and output schema for one request.

    Pure function of its arguments: the location only adds a context sentence
    to the text and never changes the schema.
    """

    schema = build_itinerary_schema(version)
    location_context = (
        location_context_template.format(
            latitude=location.latitude, longitude=location.longitude
        )
        if location is not None
        else ""
    )
    text = itinerary_prompt.format(
        user_prompt=user_prompt.strip(),
        location_context=location_context,
        address_rules=address_rules if version == "extended" else "",
        categories=", ".join(f"'{category}'" for category in PLACE_CATEGORIES),
    )
    return BuiltPrompt(text=text, schema=schema, version=version)
