"""
Fare endpoints
==============

POST /api/v1/fares/estimate -- distance and fare between two points
"""

from fastapi import APIRouter, Depends, Request

from src.api.middleware import limiter
from src.api.dependencies import get_pricing_engine
from src.api.schemas import FareEstimateRequest, FareEstimateResponse
from src.config import settings
from src.domain.pricing import PricingEngine

router = APIRouter(prefix="/fares", tags=["fares"])


@router.post(
    "/estimate",
    response_model=FareEstimateResponse,
    summary="Estimate the fare for a trip",
)
@limiter.limit(settings.default_rate_limit)
async def estimate_fare(
    request: Request,
    body: FareEstimateRequest,
    pricing: PricingEngine = Depends(get_pricing_engine),
):
    estimate = pricing.quote(
        body.pickup.to_domain(), body.dropoff.to_domain(), body.duration_min
    )
    return FareEstimateResponse(
        distance_km=estimate.distance_km,
        duration_min=estimate.duration_min,
        fare=estimate.fare,
        currency=settings.currency,
    )
