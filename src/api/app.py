"""
FastAPI application factory.

* Registers routes for fares, bookings, locations and admin.
* Builds / closes the shared geocoding HTTP client via lifespan events.
* Maps domain errors to HTTP status codes.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, bookings, fares, locations
from src.config import settings
from src.domain.errors import (
    InvalidArgument,
    InvalidCoordinate,
    StoreUnavailable,
    ValidationError,
)
from src.infrastructure.geocoding import NominatimResolver
from src.infrastructure.redis_client import close_redis, get_redis

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the geocoder's HTTP client on startup; close it on shutdown."""
    client = httpx.AsyncClient(timeout=settings.geocoder_timeout_seconds)
    app.state.location_resolver = NominatimResolver(
        client,
        base_url=settings.nominatim_url,
        user_agent=settings.geocoder_user_agent,
        country_codes=settings.geocoder_country_codes,
        limit=settings.geocoder_search_limit,
        cache=get_redis(),
        cache_ttl=settings.geocode_cache_ttl_seconds,
    )
    yield
    await client.aclose()
    await close_redis()


async def _unprocessable(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _store_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Booking store unavailable: %s", exc.__cause__ or exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Unable to reach the booking store. Please try again."},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Taxi Booking API",
        description=(
            "Estimates fares from pickup / dropoff coordinates, books "
            "rides and lists a rider's booking history.  Location search "
            "is proxied to OpenStreetMap Nominatim."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    for exc_type in (InvalidCoordinate, InvalidArgument, ValidationError):
        app.add_exception_handler(exc_type, _unprocessable)
    app.add_exception_handler(StoreUnavailable, _store_unavailable)

    # Routers
    app.include_router(fares.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(locations.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
