"""Map abstraction driven by explicit calls instead of UI lifecycle hooks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from trip_recommender.core.schemas import ItineraryDay, iter_places, normalize_category

LatLng = Tuple[float, float]

WORLD_CENTER: LatLng = (20.0, 0.0)
WORLD_ZOOM = 2
PLACE_ZOOM = 14
FIT_PADDING = 0.1
FIT_MAX_ZOOM = 15

CATEGORY_COLORS: Mapping[str, str] = {
    "Food": "orange",
    "Culture": "purple",
    "Nature": "green",
    "Shopping": "pink",
    "Accommodation": "cyan",
    "Beach": "yellow",
    "Other": "gray",
}


@dataclass(frozen=True, slots=True)
class MarkerSpec:
    key: str
    position: LatLng
    category: str
    color: str
    popup: str


class MapView(Protocol):
    """Operations a concrete map widget must provide."""

    def add_markers(self, markers: Sequence[MarkerSpec]) -> None: ...

    def fit_bounds(
        self, bounds: Tuple[LatLng, LatLng], *, padding: float, max_zoom: int
    ) -> None: ...

    def fly_to(self, position: LatLng, zoom: int) -> None: ...

    def clear_markers(self) -> None: ...


def marker_for(place) -> MarkerSpec:
    category = normalize_category(place.category)
    return MarkerSpec(
        key=place.name,
        position=(place.latitude, place.longitude),
        category=category,
        color=CATEGORY_COLORS[category],
        popup=place.name,
    )


def bounds_of(positions: Sequence[LatLng]) -> Tuple[LatLng, LatLng]:
    lats = [lat for lat, _ in positions]
    lngs = [lng for _, lng in positions]
    return (min(lats), min(lngs)), (max(lats), max(lngs))


class ItineraryMapPresenter:
    """Keeps a ``MapView`` in sync with the latest itinerary.

    Markers are keyed by place name, so a duplicate name overwrites the
    earlier marker for click-to-locate purposes.
    """

    def __init__(self, view: MapView) -> None:
        self.view = view
        self._markers: Dict[str, MarkerSpec] = {}

    def show(self, days: Sequence[ItineraryDay]) -> List[MarkerSpec]:
        self.view.clear_markers()
        self._markers = {}
        markers = [marker_for(place) for place in iter_places(list(days))]
        if not markers:
            self.view.fly_to(WORLD_CENTER, WORLD_ZOOM)
            return markers

        self.view.add_markers(markers)
        self._markers = {marker.key: marker for marker in markers}
        self.view.fit_bounds(
            bounds_of([marker.position for marker in markers]),
            padding=FIT_PADDING,
            max_zoom=FIT_MAX_ZOOM,
        )
        return markers

    def focus(self, place_name: str) -> Optional[MarkerSpec]:
        """Fly to the marker of ``place_name``; unknown names are ignored."""

        marker = self._markers.get(place_name)
        if marker is not None:
            self.view.fly_to(marker.position, PLACE_ZOOM)
        return marker
