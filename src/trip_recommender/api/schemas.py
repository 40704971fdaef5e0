from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from trip_recommender.core.schemas import ItineraryDay, ItineraryRequest


class PlanRequest(ItineraryRequest):
    """Request payload used to generate a new itinerary."""


class ItineraryResponse(BaseModel):
    """Result of one itinerary submission."""

    status: Literal["done", "failed"] = Field(..., description="Pipeline outcome")
    itinerary: List[ItineraryDay] = Field(
        default_factory=list, description="Days with refined place coordinates"
    )
    message: Optional[str] = Field(
        default=None, description="User-displayable notice or error message"
    )
    error_code: Optional[str] = Field(
        default=None, description="Stable error identifier when status is 'failed'"
    )
    resolved_places: int = Field(default=0, description="Places geocoded successfully")
    fallback_places: int = Field(
        default=0, description="Places that kept the LLM-estimated coordinate"
    )


class ModelInfo(BaseModel):
    id: str
    name: str
    default: bool = False


class ErrorDetail(BaseModel):
    code: str
    message: str
