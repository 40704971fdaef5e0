from typing import Dict

from trip_recommender.api.schemas import ErrorDetail, ItineraryResponse
from trip_recommender.core.errors import (
    EmptyResponseError,
    GenerationFailedError,
    InputValidationError,
    InvalidFormatError,
    PipelineBusyError,
    ServiceOverloadedError,
)
from trip_recommender.core.session import PipelineOutcome, PipelineStatus

_STATUS_CODES: Dict[str, int] = {
    InputValidationError.code: 400,
    PipelineBusyError.code: 409,
    EmptyResponseError.code: 502,
    InvalidFormatError.code: 502,
    GenerationFailedError.code: 502,
    ServiceOverloadedError.code: 503,
}


def _status_code_for(error_code: str) -> int:
    return _STATUS_CODES.get(error_code, 500)


def _error_detail(outcome: PipelineOutcome) -> Dict[str, str]:
    return ErrorDetail(
        code=outcome.error_code or "itinerary_error",
        message=outcome.message or "",
    ).model_dump()


def _outcome_to_response(outcome: PipelineOutcome) -> ItineraryResponse:
    return ItineraryResponse(
        status="failed" if outcome.status is PipelineStatus.FAILED else "done",
        itinerary=outcome.itinerary,
        message=outcome.message,
        error_code=outcome.error_code,
        resolved_places=outcome.resolved_places,
        fallback_places=outcome.fallback_places,
    )
