import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from trip_recommender.core.errors import InvalidFormatError
from trip_recommender.core.schemas import ItineraryDay, Place

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_ENVELOPE_KEYS = ("itinerary", "days", "data")
_BRACKET_PAIRS = {"[": "]", "{": "}"}


def _json_candidates(text: str) -> Iterator[str]:
    """Yield slices of ``text`` that may hold the JSON payload, most literal first."""

    body = text.strip()
    if body:
        yield body
    for fenced in _FENCED_JSON.findall(text):
        if fenced.strip():
            yield fenced.strip()

    opening = [pos for pos in (body.find("["), body.find("{")) if pos >= 0]
    if not opening:
        return
    first = min(opening)
    last = body.rfind(_BRACKET_PAIRS[body[first]])
    if last > first:
        yield body[first : last + 1]


def extract_json_from_output(raw_output: str) -> Any:
    """Decode the JSON payload of an LLM reply, tolerating prose and code fences.

    Raises:
        InvalidFormatError: when no candidate slice of the text decodes as JSON.
    """
    failure: Optional[str] = None
    tried = set()
    for candidate in _json_candidates(raw_output):
        if candidate in tried:
            continue
        tried.add(candidate)
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as exc:
            failure = str(exc)

    logger.warning("LLM output is not valid JSON: %s", failure or "empty payload")
    raise InvalidFormatError(detail=failure or "empty payload")


def _normalise_days(json_data: Any) -> Sequence[Any]:
    if isinstance(json_data, dict):
        for key in _ENVELOPE_KEYS:
            value = json_data.get(key)
            if isinstance(value, list):
                return value
        if "places" in json_data:
            return [json_data]
        raise InvalidFormatError(detail="expected an array of itinerary days")
    if isinstance(json_data, list):
        return json_data
    raise InvalidFormatError(detail=f"unexpected JSON root of type {type(json_data).__name__}")


def _coerce_day_number(value: Any, position: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return position
    return number if number >= 1 else position


def _build_places(raw_places: Any, day_number: int) -> List[Place]:
    if not isinstance(raw_places, list):
        logger.debug("Day %s has no places list; got %s", day_number, type(raw_places).__name__)
        return []

    places: List[Place] = []
    for idx, item in enumerate(raw_places):
        if not isinstance(item, dict):
            logger.debug(
                "Skipping place %s of day %s; expected dict-like structure, got %s",
                idx,
                day_number,
                type(item).__name__,
            )
            continue
        try:
            places.append(Place(**item))
        except ValidationError as exc:
            logger.warning(
                "Skipping place %s of day %s due to validation error: %s",
                idx,
                day_number,
                exc,
            )
    return places


def build_itinerary(json_data: Any) -> List[ItineraryDay]:
    """Validate decoded JSON into itinerary days while tolerating partial failures.

    Places that fail validation (for instance without coordinates) are dropped
    so that every returned place carries numeric latitude and longitude.
    """
    days: List[ItineraryDay] = []
    for position, entry in enumerate(_normalise_days(json_data), start=1):
        if not isinstance(entry, dict):
            logger.debug("Skipping itinerary day at position %s: %r", position, entry)
            continue
        day_data: Dict[str, Any] = entry
        day_number = _coerce_day_number(day_data.get("day"), position)
        title = day_data.get("title")
        days.append(
            ItineraryDay(
                day=day_number,
                title=title.strip() if isinstance(title, str) else "",
                places=_build_places(day_data.get("places"), day_number),
            )
        )
    return days


def parse_itinerary(raw_output: str) -> List[ItineraryDay]:
    """Parse the LLM text payload into validated itinerary days."""

    return build_itinerary(extract_json_from_output(raw_output))
