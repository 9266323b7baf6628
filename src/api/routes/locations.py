"""
Location endpoints
==================

GET /api/v1/locations/search?q=...        -- place search (Nominatim)
GET /api/v1/locations/reverse?lat=&lng=   -- label for a map click
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies import get_location_resolver
from src.api.middleware import limiter
from src.api.schemas import LocationOut, ReverseGeocodeResponse
from src.config import settings
from src.domain.entities import GeoPoint
from src.infrastructure.geocoding import LocationResolver

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get(
    "/search",
    response_model=list[LocationOut],
    summary="Search places by name",
)
@limiter.limit(settings.search_rate_limit)
async def search_locations(
    request: Request,
    q: str = Query(..., max_length=200),
    countrycodes: Optional[str] = Query(None, max_length=32),
    resolver: LocationResolver = Depends(get_location_resolver),
):
    results = await resolver.search(q, countrycodes)
    return [LocationOut.from_domain(loc) for loc in results]


@router.get(
    "/reverse",
    response_model=ReverseGeocodeResponse,
    summary="Address label for a coordinate",
)
@limiter.limit(settings.search_rate_limit)
async def reverse_geocode(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    resolver: LocationResolver = Depends(get_location_resolver),
):
    label = await resolver.reverse_geocode(GeoPoint(lat, lng))
    return ReverseGeocodeResponse(lat=lat, lng=lng, label=label)
