import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional

from trip_recommender.core.config import ApiSettings
from trip_recommender.core.generator import ItineraryGenerator, LLMFactory
from trip_recommender.core.graph_builder import build_itinerary_graph
from trip_recommender.core.resolver import CoordinateResolver, Geocoder
from trip_recommender.core.schemas import SUPPORTED_MODEL_IDS, ItineraryRequest
from trip_recommender.core.session import PipelineOutcome, TripSession
from trip_recommender.services.geocoding import NominatimGeocoder

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = [
    "google_api_key",
]


def _ensure_configuration(settings: ApiSettings) -> None:
    missing = [field for field in REQUIRED_SETTINGS if not getattr(settings, field)]
    if missing:
        joined = ", ".join(missing)
        raise RuntimeError(
            f"Missing required environment variables for itinerary pipeline: {joined}"
        )
    if settings.default_model_id not in SUPPORTED_MODEL_IDS:
        raise RuntimeError(
            f"Unsupported DEFAULT_MODEL_ID '{settings.default_model_id}'; "
            f"expected one of: {', '.join(sorted(SUPPORTED_MODEL_IDS))}"
        )


class ItineraryBundle:
    """Container for the itinerary graph, its services and per-session state.

    Attributes:
        settings: API configuration with credentials and service tuning
        generator: LLM itinerary generator
        geocoder: Nominatim client shared by all sessions
        resolver: Coordinate resolver (serialises geocoding across sessions)
        graph: Compiled LangGraph pipeline
        _sessions: Session-specific status and last itinerary
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        llm_factory: Optional[LLMFactory] = None,
        geocoder: Optional[Geocoder] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        _ensure_configuration(settings)

        self.settings = settings
        self.generator = ItineraryGenerator(settings, llm_factory=llm_factory)
        self.geocoder = geocoder or NominatimGeocoder(
            user_agent=settings.nominatim_user_agent,
            base_url=settings.nominatim_url,
            timeout_s=settings.geocoder_timeout_s,
        )
        self.resolver = CoordinateResolver(
            self.geocoder, delay_s=settings.geocoder_delay_s, sleep=sleep
        )
        self.graph = build_itinerary_graph(generator=self.generator, resolver=self.resolver)

        self._sessions: Dict[str, TripSession] = {}
        self._session_timestamps: Dict[str, datetime] = {}

    def __repr__(self) -> str:
        return (
            f"ItineraryBundle(default_model='{self.settings.default_model_id}', "
            f"geocoder={type(self.geocoder).__name__}, "
            f"active_sessions={len(self._sessions)})"
        )

    def get_session(self, session_id: str) -> TripSession:
        """Return the session for ``session_id``, creating it on first use."""

        session = self._sessions.get(session_id)
        if session is None:
            session = TripSession(self.graph)
            self._sessions[session_id] = session
        self._session_timestamps[session_id] = datetime.now()
        return session

    def cleanup_old_sessions(self, max_age_minutes: int = 60) -> int:
        """Drop idle sessions untouched for ``max_age_minutes``; return the count."""

        cutoff = datetime.now() - timedelta(minutes=max_age_minutes)
        old_sessions = [
            sid
            for sid, ts in self._session_timestamps.items()
            if ts < cutoff and not self._sessions[sid].busy
        ]
        for session_id in old_sessions:
            self._sessions.pop(session_id, None)
            self._session_timestamps.pop(session_id, None)
        return len(old_sessions)

    async def close(self) -> None:
        close = getattr(self.geocoder, "aclose", None)
        if close is not None:
            await close()

    async def plan_itinerary(
        self,
        *,
        request: ItineraryRequest,
        session_id: str = "default",
    ) -> PipelineOutcome:
        """Run generation + coordinate resolution for one submission.

        Raises:
            PipelineBusyError: if the session already has a run in flight
        """
        if not request.model_id:
            request = request.model_copy(update={"model_id": self.settings.default_model_id})
        session = self.get_session(session_id)
        return await session.submit(request)
