"""Caller-side state for one user session: status, busy guard, last result."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from trip_recommender.core.errors import ItineraryError, PipelineBusyError
from trip_recommender.core.schemas import ItineraryDay, ItineraryRequest, count_places

logger = logging.getLogger(__name__)

EMPTY_ITINERARY_NOTICE = (
    "No se pudo generar un itinerario. Por favor, inténtalo de nuevo con otra descripción."
)


class PipelineStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineOutcome:
    """Result of one submission as seen by the presentation layer."""

    status: PipelineStatus
    itinerary: List[ItineraryDay] = field(default_factory=list)
    message: Optional[str] = None
    error_code: Optional[str] = None
    resolved_places: int = 0
    fallback_places: int = 0


class TripSession:
    """Runs at most one generation+resolution pipeline at a time.

    The last itinerary is replaced wholesale by every run; nothing is merged
    across submissions.
    """

    def __init__(self, graph: Any) -> None:
        self.graph = graph
        self.status = PipelineStatus.IDLE
        self.itinerary: List[ItineraryDay] = []
        self.error: Optional[ItineraryError] = None
        self.search_attempted = False

    @property
    def busy(self) -> bool:
        return self.status is PipelineStatus.RUNNING

    async def submit(self, request: ItineraryRequest) -> PipelineOutcome:
        """Run the pipeline for ``request`` and record its outcome.

        Raises:
            PipelineBusyError: if another run is still in flight.
        """
        if self.busy:
            raise PipelineBusyError()

        self.status = PipelineStatus.RUNNING
        self.itinerary = []
        self.error = None
        self.search_attempted = True

        try:
            result = await self.graph.ainvoke({"itinerary": []}, context=request)
        except ItineraryError as exc:
            self.status = PipelineStatus.FAILED
            self.error = exc
            logger.warning("Itinerary pipeline failed: %s", exc.code)
            return PipelineOutcome(
                status=self.status, message=exc.user_message, error_code=exc.code
            )
        except BaseException:
            self.status = PipelineStatus.FAILED
            raise

        self.itinerary = list(result.get("itinerary") or [])
        self.status = PipelineStatus.DONE
        message = EMPTY_ITINERARY_NOTICE if count_places(self.itinerary) == 0 else None
        return PipelineOutcome(
            status=self.status,
            itinerary=self.itinerary,
            message=message,
            resolved_places=result.get("resolved_places", 0),
            fallback_places=result.get("fallback_places", 0),
        )
