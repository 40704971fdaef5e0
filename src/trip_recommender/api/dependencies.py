from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI

from trip_recommender.api.workflow_service import ItineraryBundle
from trip_recommender.core.config import ApiSettings


@lru_cache(maxsize=1)
def get_itinerary_bundle() -> ItineraryBundle:
    settings = ApiSettings.from_env()
    return ItineraryBundle(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # A missing API key must stop the process at startup.
    bundle = get_itinerary_bundle()
    try:
        yield
    finally:
        await bundle.close()
