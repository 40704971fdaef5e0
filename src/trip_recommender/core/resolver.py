"""Sequential, rate-limited coordinate refinement for itinerary places."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from trip_recommender.core.config import MIN_GEOCODER_DELAY_S
from trip_recommender.core.schemas import ItineraryDay, Place
from trip_recommender.services.geocoding import AddressTokens, GeoPoint, parse_address

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def search(self, query: str) -> Optional[GeoPoint]: ...


@dataclass(frozen=True, slots=True)
class QueryStrategy:
    """Named rule that turns a place into a geocoder query, or declines."""

    name: str
    build: Callable[[Place, AddressTokens], Optional[str]]


def _name_city_postal_country(place: Place, tokens: AddressTokens) -> Optional[str]:
    if not tokens.is_complete:
        return None
    return f"{place.name}, {tokens.city}, {tokens.postal_code}, {tokens.country}"


def _raw_address(place: Place, tokens: AddressTokens) -> Optional[str]:
    if not place.address or not place.address.strip():
        return None
    return place.address


DEFAULT_STRATEGIES: Sequence[QueryStrategy] = (
    QueryStrategy("name_city_postal_country", _name_city_postal_country),
    QueryStrategy("raw_address", _raw_address),
)


@dataclass(slots=True)
class ResolutionReport:
    """Outcome of one resolver pass."""

    days: List[ItineraryDay] = field(default_factory=list)
    resolved: int = 0
    fallback: int = 0
    attempts: int = 0
    queries: List[str] = field(default_factory=list)


class CoordinateResolver:
    """Refine LLM-estimated coordinates through free-text geocoding.

    Places are processed strictly in itinerary order. For each place the
    strategies are tried in sequence until one yields a match; otherwise the
    original coordinate is kept. After every place the resolver waits
    ``delay_s`` and it never issues two geocoder requests closer together
    than ``delay_s``. Nothing raised by the geocoder escapes ``resolve``.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        *,
        strategies: Sequence[QueryStrategy] = DEFAULT_STRATEGIES,
        delay_s: float = MIN_GEOCODER_DELAY_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.geocoder = geocoder
        self.strategies = tuple(strategies)
        self.delay_s = max(delay_s, MIN_GEOCODER_DELAY_S)
        self._sleep = sleep
        self._clock = clock
        self._last_request_at: Optional[float] = None
        self._lock = asyncio.Lock()

    async def _throttle(self) -> None:
        if self._last_request_at is None:
            return
        remaining = self.delay_s - (self._clock() - self._last_request_at)
        if remaining > 0:
            await self._sleep(remaining)

    async def _lookup(self, query: str, report: ResolutionReport) -> Optional[GeoPoint]:
        await self._throttle()
        report.attempts += 1
        report.queries.append(query)
        try:
            return await self.geocoder.search(query)
        except Exception as exc:
            logger.warning("Geocoder raised for %r, treating as no match: %s", query, exc)
            return None
        finally:
            self._last_request_at = self._clock()

    async def resolve_place(self, place: Place, report: ResolutionReport) -> Place:
        """Return ``place`` with refined coordinates when a strategy matches."""

        tokens = parse_address(place.address)
        for strategy in self.strategies:
            query = strategy.build(place, tokens)
            if not query:
                continue
            point = await self._lookup(query, report)
            if point is not None:
                logger.info("Resolved '%s' via %s", place.name, strategy.name)
                report.resolved += 1
                return place.with_coordinates(point.latitude, point.longitude)

        logger.info("Keeping LLM coordinates for '%s'", place.name)
        report.fallback += 1
        return place

    async def resolve(self, days: Sequence[ItineraryDay]) -> ResolutionReport:
        """Resolve every place of the itinerary, preserving order.

        Concurrent callers sharing one resolver are serialised so the
        geocoder never sees parallel requests.
        """

        report = ResolutionReport()
        async with self._lock:
            for day in days:
                places: List[Place] = []
                for place in day.places:
                    places.append(await self.resolve_place(place, report))
                    await self._sleep(self.delay_s)
                report.days.append(day.model_copy(update={"places": places}))

        logger.info(
            "Coordinate resolution finished: %s resolved, %s kept, %s requests",
            report.resolved,
            report.fallback,
            report.attempts,
        )
        return report
