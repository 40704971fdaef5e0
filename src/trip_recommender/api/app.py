"""FastAPI surface for the itinerary recommendation pipeline."""
from __future__ import annotations

# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from trip_recommender.api.dependencies import get_itinerary_bundle, lifespan
from trip_recommender.api.response_builder import (
    _error_detail,
    _outcome_to_response,
    _status_code_for,
)
from trip_recommender.api.schemas import ItineraryResponse, ModelInfo, PlanRequest
from trip_recommender.core.errors import PipelineBusyError
from trip_recommender.core.schemas import AVAILABLE_MODELS
from trip_recommender.core.session import PipelineStatus

logger = logging.getLogger(__name__)

app = FastAPI(title="Trip Recommender API", version="0.1.0", lifespan=lifespan)

origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/itinerary", response_model=ItineraryResponse)
async def create_itinerary(
    payload: PlanRequest,
    x_session_id: Optional[str] = Header(default=None),
) -> ItineraryResponse:
    """Generate a day-by-day itinerary with geocoded places.

    The request is rejected with 409 while the same session still has a run
    in flight. Generation failures carry a user-displayable message in
    ``detail.message``; geocoding failures never fail the request.

    Example JSON payload:
        ```json
        {
            "prompt": "Fin de semana en Málaga",
            "location": {"latitude": 36.7213, "longitude": -4.4214},
            "model_id": "gemini-2.5-flash"
        }
        ```
    """

    session_id = x_session_id or "default"
    logger.info("Itinerary request received (session=%s, model=%s)", session_id, payload.model_id)

    bundle = get_itinerary_bundle()
    try:
        outcome = await bundle.plan_itinerary(request=payload, session_id=session_id)
    except PipelineBusyError as exc:
        logger.warning("Rejected submission for busy session %s", session_id)
        raise HTTPException(
            status_code=_status_code_for(exc.code),
            detail={"code": exc.code, "message": exc.user_message},
        ) from exc
    except Exception as exc:
        logger.error(f"Unexpected error during itinerary generation: {str(exc)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if outcome.status is PipelineStatus.FAILED:
        raise HTTPException(
            status_code=_status_code_for(outcome.error_code or ""),
            detail=_error_detail(outcome),
        )

    logger.info(
        "Itinerary ready: %s days, %s resolved, %s fallback",
        len(outcome.itinerary),
        outcome.resolved_places,
        outcome.fallback_places,
    )
    return _outcome_to_response(outcome)


@app.get("/models", response_model=List[ModelInfo])
async def list_models() -> List[ModelInfo]:
    """List the supported LLM models; the configured default is flagged."""

    default_model_id = get_itinerary_bundle().settings.default_model_id
    return [
        ModelInfo(id=option.id, name=option.name, default=option.id == default_model_id)
        for option in AVAILABLE_MODELS
    ]


@app.post("/sessions/cleanup", response_model=int)
async def cleanup_sessions(max_age_minutes: int = 60) -> int:
    """Forget idle sessions older than ``max_age_minutes``."""

    bundle = get_itinerary_bundle()
    return bundle.cleanup_old_sessions(max_age_minutes)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness probes."""

    return {"status": "healthy", "service": "trip-recommender-api"}
