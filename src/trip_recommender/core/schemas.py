"""Pydantic data models for the itinerary recommendation pipeline.

This module holds every value that crosses a component boundary:

- Place / ItineraryDay: the itinerary produced by the LLM and refined by the
  coordinate resolver
- Location: optional device position used only as prompt context
- ItineraryRequest: what the presentation layer submits
- ModelOption: one entry of the fixed set of supported LLM models
- State: LangGraph workflow state passed between pipeline nodes
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trip_recommender.core.types import DayNumber, Lat, Lon, NonEmptyStr, PlaceCategory

PLACE_CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Culture",
    "Nature",
    "Shopping",
    "Accommodation",
    "Beach",
    "Other",
)
_CATEGORY_LOOKUP = {value.lower(): value for value in PLACE_CATEGORIES}


def normalize_category(value: Any) -> PlaceCategory:
    """Map any raw category value onto the fixed enumeration (default ``Other``)."""

    if isinstance(value, str):
        return _CATEGORY_LOOKUP.get(value.strip().lower(), "Other")  # type: ignore[return-value]
    return "Other"


@dataclass(frozen=True, slots=True)
class ModelOption:
    """Supported LLM model identifier with its display label."""

    id: str
    name: str


AVAILABLE_MODELS: Tuple[ModelOption, ...] = (
    ModelOption(id="gemini-2.5-flash", name="Gemini 2.5 Flash (Recomendado)"),
    ModelOption(id="gemini-2.5-flash-lite", name="Gemini 2.5 Flash-Lite"),
    ModelOption(id="gemini-2.5-pro", name="Gemini 2.5 Pro"),
    ModelOption(id="gemini-2.0-flash", name="Gemini 2.0 Flash"),
)
DEFAULT_MODEL_ID = AVAILABLE_MODELS[0].id
SUPPORTED_MODEL_IDS = frozenset(option.id for option in AVAILABLE_MODELS)


class Location(BaseModel):
    """Latitude/longitude pair describing where the user currently is."""

    latitude: Lat
    longitude: Lon

    model_config = ConfigDict(extra="forbid", frozen=True)


class Place(BaseModel):
    """Single point of interest inside an itinerary day.

    ``name`` doubles as the marker key on the map, so callers are expected to
    keep it unique within one itinerary. ``address`` is only used as
    geocoding input and is absent when the basic schema variant was used.
    """

    name: NonEmptyStr = Field(description="Full official name of the place")
    description: str = Field(default="", description="Short 1-2 sentence description")
    address: Optional[str] = Field(default=None, description="Postal address used for geocoding")
    latitude: Lat
    longitude: Lon
    category: PlaceCategory = "Other"

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> PlaceCategory:
        return normalize_category(value)

    def with_coordinates(self, latitude: float, longitude: float) -> "Place":
        """Return a copy that differs from this place only in its coordinates."""

        return self.model_copy(update={"latitude": latitude, "longitude": longitude})


class ItineraryDay(BaseModel):
    """One day of the trip: a themed, ordered list of places."""

    day: DayNumber
    title: str = ""
    places: List[Place] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", frozen=True)


def iter_places(days: List[ItineraryDay]) -> Iterator[Place]:
    """Yield every place in itinerary order (days first, then places)."""

    for day in days:
        yield from day.places


def count_places(days: List[ItineraryDay]) -> int:
    return sum(len(day.places) for day in days)


class ItineraryRequest(BaseModel):
    """Input accepted from the presentation layer for one submission.

    A missing ``model_id`` means the configured default model.
    """

    prompt: str
    location: Optional[Location] = None
    model_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class State(BaseModel):
    """LangGraph workflow state that flows between the pipeline nodes.

    Attributes:
        itinerary: Days parsed from the LLM, later replaced by the refined copy
        resolved_places: Places whose coordinates came from the geocoder
        fallback_places: Places that kept the LLM-estimated coordinate
    """

    itinerary: List[ItineraryDay] = Field(default_factory=list)
    resolved_places: int = 0
    fallback_places: int = 0

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "AVAILABLE_MODELS",
    "DEFAULT_MODEL_ID",
    "ItineraryDay",
    "ItineraryRequest",
    "Location",
    "ModelOption",
    "PLACE_CATEGORIES",
    "Place",
    "State",
    "SUPPORTED_MODEL_IDS",
    "count_places",
    "iter_places",
    "normalize_category",
]
