"""LangGraph nodes for the itinerary pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict

from langgraph.graph import END
from langgraph.runtime import Runtime

from trip_recommender.core.generator import ItineraryGenerator
from trip_recommender.core.resolver import CoordinateResolver
from trip_recommender.core.schemas import ItineraryRequest, State, count_places

logger = logging.getLogger(__name__)


def make_generate_node(generator: ItineraryGenerator):
    """Return the generation node bound to the itinerary generator.

    Generation errors are not caught here: they abort the graph run and reach
    the caller unchanged.
    """

    async def node(state: State, runtime: Runtime[ItineraryRequest]) -> Dict[str, Any]:
        request = runtime.context
        days = await generator.generate(
            request.prompt,
            location=request.location,
            model_id=request.model_id,
        )
        return {"itinerary": days}

    return node


def make_resolve_node(resolver: CoordinateResolver):
    """Return the coordinate-resolution node bound to the resolver."""

    async def node(state: State) -> Dict[str, Any]:
        report = await resolver.resolve(state.itinerary)
        return {
            "itinerary": report.days,
            "resolved_places": report.resolved,
            "fallback_places": report.fallback,
        }

    return node


def route_after_generation(state: State) -> str:
    """Skip geocoding when the itinerary has no places to refine."""

    if count_places(state.itinerary) == 0:
        logger.info("Itinerary has no places; skipping coordinate resolution")
        return END
    return "resolve_coordinates"
