"""Geocoding and address tokenisation services.

This module provides free-text geocoding through the Nominatim OpenStreetMap
API plus the helpers that split postal addresses into query tokens.

Public API:
    - NominatimGeocoder: Async client returning the first match for a query
    - GeoPoint: Latitude/longitude pair returned by the geocoder
    - parse_address: Extract postal code, city and country from an address
"""
from trip_recommender.services.geocoding.address import (
    AddressTokens,
    extract_city,
    extract_country,
    extract_postal_code,
    parse_address,
)
from trip_recommender.services.geocoding.geocoding import (
    GeoPoint,
    NominatimGeocoder,
    parse_first_match,
)

__all__ = [
    "AddressTokens",
    "GeoPoint",
    "NominatimGeocoder",
    "extract_city",
    "extract_country",
    "extract_postal_code",
    "parse_address",
    "parse_first_match",
]
