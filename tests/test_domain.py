"""Tests for domain models and data validation."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from trip_recommender.core.schemas import (
    PLACE_CATEGORIES,
    ItineraryDay,
    ItineraryRequest,
    Location,
    Place,
    count_places,
    iter_places,
    normalize_category,
)


def _place(**overrides) -> Place:
    data = {
        "name": "Museo Picasso Málaga",
        "description": "Museo dedicado a Picasso.",
        "address": "Calle San Agustín, 8, Málaga, 29015, España",
        "latitude": 36.7216,
        "longitude": -4.4186,
        "category": "Culture",
    }
    data.update(overrides)
    return Place(**data)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Food", "Food"),
        ("beach", "Beach"),
        ("  NATURE ", "Nature"),
        ("Nightlife", "Other"),
        ("", "Other"),
        (None, "Other"),
        (3, "Other"),
    ],
)
def test_normalize_category(raw, expected):
    assert normalize_category(raw) == expected


def test_place_unknown_category_becomes_other():
    place = _place(category="Museum")
    assert place.category == "Other"


def test_place_missing_category_defaults_to_other():
    data = _place().model_dump()
    data.pop("category")
    assert Place(**data).category == "Other"


def test_place_requires_coordinates():
    with pytest.raises(ValidationError):
        Place(name="Sin coordenadas", description="", category="Other")


def test_place_rejects_out_of_range_latitude():
    with pytest.raises(ValidationError):
        _place(latitude=123.0)


def test_place_address_is_optional():
    place = _place(address=None)
    assert place.address is None


def test_with_coordinates_only_changes_coordinates():
    place = _place()
    moved = place.with_coordinates(36.72, -4.42)

    assert (moved.latitude, moved.longitude) == (36.72, -4.42)
    assert moved.name == place.name
    assert moved.description == place.description
    assert moved.category == place.category
    assert moved.address == place.address
    assert (place.latitude, place.longitude) == (36.7216, -4.4186)


def test_place_is_immutable():
    place = _place()
    with pytest.raises(ValidationError):
        place.latitude = 0.0


def test_itinerary_day_rejects_non_positive_day():
    with pytest.raises(ValidationError):
        ItineraryDay(day=0, title="Invalid", places=[])


def test_iter_places_follows_itinerary_order():
    days = [
        ItineraryDay(day=1, title="A", places=[_place(name="a1"), _place(name="a2")]),
        ItineraryDay(day=2, title="B", places=[_place(name="b1")]),
    ]
    assert [place.name for place in iter_places(days)] == ["a1", "a2", "b1"]
    assert count_places(days) == 3


def test_itinerary_request_defaults():
    request = ItineraryRequest(prompt="Fin de semana en Málaga")
    assert request.model_id is None
    assert request.location is None


def test_itinerary_request_accepts_location():
    request = ItineraryRequest(
        prompt="Playas cerca",
        location={"latitude": 36.72, "longitude": -4.42},
    )
    assert request.location == Location(latitude=36.72, longitude=-4.42)


def test_category_enumeration_is_fixed():
    assert PLACE_CATEGORIES == (
        "Food",
        "Culture",
        "Nature",
        "Shopping",
        "Accommodation",
        "Beach",
        "Other",
    )
