"""External service integrations for itinerary refinement.

- Geocoding: free-text coordinate lookup via Nominatim and address tokenisation

Example Usage:
    >>> from trip_recommender.services.geocoding import NominatimGeocoder
    >>>
    >>> async with NominatimGeocoder(user_agent="TripRecommender/1.0") as geocoder:
    ...     point = await geocoder.search("Calle Larios, Málaga, 29005, España")
"""

from trip_recommender.services.geocoding import (
    AddressTokens,
    GeoPoint,
    NominatimGeocoder,
    parse_address,
)

__all__ = [
    "AddressTokens",
    "GeoPoint",
    "NominatimGeocoder",
    "parse_address",
]
