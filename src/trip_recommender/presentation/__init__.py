"""Presentation-side collaborators that consume finished itineraries."""
from trip_recommender.presentation.map_view import (
    ItineraryMapPresenter,
    MapView,
    MarkerSpec,
)

__all__ = ["ItineraryMapPresenter", "MapView", "MarkerSpec"]
