"""Shared type aliases used across the itinerary modules."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, StringConstraints

Lat = Annotated[float, Field(ge=-90, le=90)]
Lon = Annotated[float, Field(ge=-180, le=180)]
DayNumber = Annotated[int, Field(ge=1)]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

PlaceCategory = Literal[
    "Food",
    "Culture",
    "Nature",
    "Shopping",
    "Accommodation",
    "Beach",
    "Other",
]
SchemaVersion = Literal["basic", "extended"]
