"""Async client for the public Nominatim geocoding service."""
from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional

import httpx

logger = logging.getLogger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"


class GeoPoint(NamedTuple):
    latitude: float
    longitude: float


def parse_first_match(data: Any) -> Optional[GeoPoint]:
    """Return the coordinate of the first candidate in a search response."""

    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        return None
    try:
        latitude = float(first["lat"])
        longitude = float(first["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return GeoPoint(latitude, longitude)


class NominatimGeocoder:
    """Thin async wrapper around Nominatim free-text search.

    Nominatim's usage policy requires an identifying ``User-Agent`` on every
    request, which is set once on the underlying client.
    """

    def __init__(
        self,
        *,
        user_agent: str = "TripRecommender/1.0",
        base_url: str = NOMINATIM_SEARCH_URL,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.user_agent = user_agent
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent, "accept": "application/json"},
            timeout=httpx.Timeout(timeout_s),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client if this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "NominatimGeocoder":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def search(self, query: str) -> Optional[GeoPoint]:
        """Return the best match for ``query`` or ``None``.

        Network errors, HTTP errors, timeouts and malformed payloads all count
        as "no match".
        """

        if not query or not query.strip():
            return None

        try:
            response = await self._client.get(
                self.base_url,
                params={"q": query, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoding request failed for %r: %s", query, exc)
            return None

        point = parse_first_match(data)
        logger.debug("Geocoding %r -> %s", query, point)
        return point
