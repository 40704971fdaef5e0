import json

import pytest

from trip_recommender.core.errors import InvalidFormatError
from trip_recommender.core.post_processing import (
    build_itinerary,
    extract_json_from_output,
    parse_itinerary,
)
from trip_recommender.core.schemas import PLACE_CATEGORIES, iter_places


def _day(places, day=1, title="Día"):
    return {"day": day, "title": title, "places": places}


def _place(name="Alcazaba", **overrides):
    data = {
        "name": name,
        "description": "Fortaleza.",
        "address": "Calle Alcazabilla, 2, Málaga, 29012, España",
        "latitude": 36.7212,
        "longitude": -4.4157,
        "category": "Culture",
    }
    data.update(overrides)
    return data


def test_parse_itinerary_returns_days_in_order(malaga_payload):
    days = parse_itinerary(malaga_payload)

    assert [day.day for day in days] == [1, 2]
    assert [len(day.places) for day in days] == [2, 2]
    for place in iter_places(days):
        assert isinstance(place.latitude, float)
        assert isinstance(place.longitude, float)
        assert place.category in PLACE_CATEGORIES


def test_parse_itinerary_accepts_code_fenced_json():
    raw = "Aquí tienes tu itinerario:\n```json\n" + json.dumps([_day([_place()])]) + "\n```"

    days = parse_itinerary(raw)

    assert days[0].places[0].name == "Alcazaba"


def test_parse_itinerary_unwraps_envelope():
    days = parse_itinerary(json.dumps({"itinerary": [_day([_place()])]}))
    assert len(days) == 1


def test_parse_itinerary_accepts_single_day_object():
    days = parse_itinerary(json.dumps(_day([_place()], day=3)))
    assert days[0].day == 3


def test_invalid_json_raises_invalid_format():
    with pytest.raises(InvalidFormatError):
        parse_itinerary("esto no es JSON")


def test_truncated_json_raises_invalid_format():
    with pytest.raises(InvalidFormatError):
        parse_itinerary('[{"day": 1, "title": "Centro", "places": [')


@pytest.mark.parametrize("payload", ['"texto"', "42", '{"foo": "bar"}'])
def test_unexpected_root_raises_invalid_format(payload):
    with pytest.raises(InvalidFormatError):
        parse_itinerary(payload)


def test_places_without_coordinates_are_skipped():
    payload = [
        _day(
            [
                _place("Con coordenadas"),
                _place("Sin latitud", latitude=None),
                {"name": "Incompleto"},
                "no es un objeto",
            ]
        )
    ]

    days = build_itinerary(payload)

    assert [place.name for place in days[0].places] == ["Con coordenadas"]


def test_categories_are_normalised():
    days = build_itinerary(
        [_day([_place("a", category="beach"), _place("b", category="Nightlife"), _place("c", category=None)])]
    )

    assert [place.category for place in days[0].places] == ["Beach", "Other", "Other"]


def test_invalid_day_number_falls_back_to_position():
    days = build_itinerary([_day([_place()], day="uno"), _day([_place()], day=0)])
    assert [day.day for day in days] == [1, 2]


def test_empty_array_yields_empty_itinerary():
    assert parse_itinerary("[]") == []


def test_extract_json_prefers_whole_payload():
    assert extract_json_from_output('  [{"day": 1}]  ') == [{"day": 1}]
