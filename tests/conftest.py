"""Pytest configuration and shared test doubles for the itinerary pipeline."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import pytest
from langchain_core.messages import AIMessage

from trip_recommender.core.config import ApiSettings
from trip_recommender.core.prompts import BuiltPrompt
from trip_recommender.services.geocoding import GeoPoint


MALAGA_ITINERARY: List[Dict[str, Any]] = [
    {
        "day": 1,
        "title": "Centro histórico",
        "places": [
            {
                "name": "Calle Marqués de Larios",
                "description": "La calle comercial más elegante de Málaga.",
                "address": "Calle Larios, Málaga, 29005, España",
                "latitude": 36.7196,
                "longitude": -4.4214,
                "category": "Shopping",
            },
            {
                "name": "Alcazaba de Málaga",
                "description": "Fortaleza palaciega de época musulmana.",
                "address": "Calle Alcazabilla, 2, Málaga, 29012, España",
                "latitude": 36.7212,
                "longitude": -4.4157,
                "category": "Culture",
            },
        ],
    },
    {
        "day": 2,
        "title": "Costa",
        "places": [
            {
                "name": "Playa de Burriana",
                "description": "Playa animada con chiringuitos.",
                "address": "Playa de Burriana, Nerja, 29780, España",
                "latitude": 36.7511,
                "longitude": -3.8667,
                "category": "Beach",
            },
            {
                "name": "El Pimpi",
                "description": "Bodega emblemática junto al teatro romano.",
                "address": "Calle Granada, 62, Málaga, 29015, España",
                "latitude": 36.7217,
                "longitude": -4.4172,
                "category": "Food",
            },
        ],
    },
]


class StubLLM:
    """Captures prompts and yields a preconfigured response or error."""

    def __init__(self, response: Union[str, Exception, None] = None) -> None:
        self.response = response
        self.calls: List[List[Any]] = []

    async def ainvoke(self, messages: List[Any]) -> AIMessage:
        self.calls.append(messages)
        if isinstance(self.response, Exception):
            raise self.response
        return AIMessage(content=self.response or "")


class StubLLMFactory:
    """Records which model/prompt combinations the generator asked for."""

    def __init__(self, llm: StubLLM) -> None:
        self.llm = llm
        self.requests: List[Tuple[str, BuiltPrompt]] = []

    def __call__(self, model_id: str, prompt: BuiltPrompt) -> StubLLM:
        self.requests.append((model_id, prompt))
        return self.llm


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class StubGeocoder:
    """Answers queries from a lookup table; unknown queries have no match."""

    def __init__(
        self,
        results: Optional[Mapping[str, Union[GeoPoint, Exception]]] = None,
        *,
        clock: Optional[FakeClock] = None,
        default: Union[GeoPoint, Exception, None] = None,
    ) -> None:
        self.results = dict(results or {})
        self.default = default
        self.clock = clock
        self.queries: List[str] = []
        self.timestamps: List[float] = []

    async def search(self, query: str) -> Optional[GeoPoint]:
        self.queries.append(query)
        if self.clock is not None:
            self.timestamps.append(self.clock())
        result = self.results.get(query, self.default)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def settings() -> ApiSettings:
    return ApiSettings(google_api_key="test-key")


@pytest.fixture
def malaga_payload() -> str:
    return json.dumps(MALAGA_ITINERARY, ensure_ascii=False)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
