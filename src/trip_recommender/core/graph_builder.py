from typing import Any

from langgraph.graph import END, START, StateGraph

from trip_recommender.core.generator import ItineraryGenerator
from trip_recommender.core.nodes import (
    make_generate_node,
    make_resolve_node,
    route_after_generation,
)
from trip_recommender.core.resolver import CoordinateResolver
from trip_recommender.core.schemas import ItineraryRequest, State


def build_itinerary_graph(
    *,
    generator: ItineraryGenerator,
    resolver: CoordinateResolver,
) -> Any:
    """Wire generation and coordinate resolution into a compiled LangGraph."""

    graph_builder = StateGraph(state_schema=State, context_schema=ItineraryRequest)

    graph_builder.add_node("generate_itinerary", make_generate_node(generator))
    graph_builder.add_node("resolve_coordinates", make_resolve_node(resolver))

    graph_builder.add_edge(START, "generate_itinerary")
    graph_builder.add_conditional_edges(
        "generate_itinerary",
        route_after_generation,
        ["resolve_coordinates", END],
    )
    graph_builder.add_edge("resolve_coordinates", END)

    return graph_builder.compile()
