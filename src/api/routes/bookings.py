"""
Booking endpoints
=================

POST /api/v1/bookings                 -- book a ride (priced server-side)
GET  /api/v1/bookings                 -- the caller's bookings, newest first
GET  /api/v1/bookings/{id}/receipt    -- shareable plain-text receipt
"""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from src.api.auth import AuthenticatedUser, require_user
from src.api.dependencies import get_booking_store
from src.api.middleware import limiter
from src.api.schemas import BookingCreateRequest, BookingResponse
from src.config import settings
from src.domain.entities import BookingDraft
from src.domain.receipt import render_receipt
from src.infrastructure.repositories import BookingStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    status_code=201,
    response_model=BookingResponse,
    summary="Book a ride",
    responses={503: {"description": "Booking store unavailable; retry later."}},
)
@limiter.limit(settings.default_rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    user: AuthenticatedUser = Depends(require_user),
    store: BookingStore = Depends(get_booking_store),
):
    draft = BookingDraft(
        user_id=user.id,
        user_email=user.email,
        pickup=body.pickup.to_domain(),
        dropoff=body.dropoff.to_domain(),
        payment_mode=body.payment_mode,
    )
    booking = await store.create(draft)
    logger.info(
        "Booking %s created for user %s (%.2f km, fare %s)",
        booking.id,
        booking.user_id,
        booking.distance_km,
        booking.fare,
    )
    return BookingResponse.from_domain(booking)


@router.get(
    "",
    response_model=list[BookingResponse],
    summary="List my bookings, most recent first",
)
@limiter.limit(settings.default_rate_limit)
async def list_bookings(
    request: Request,
    user: AuthenticatedUser = Depends(require_user),
    store: BookingStore = Depends(get_booking_store),
):
    bookings = await store.list(user.id)
    return [BookingResponse.from_domain(b) for b in bookings]


@router.get(
    "/{booking_id}/receipt",
    response_class=PlainTextResponse,
    summary="Plain-text receipt for one of my bookings",
)
@limiter.limit(settings.default_rate_limit)
async def booking_receipt(
    request: Request,
    booking_id: str,
    user: AuthenticatedUser = Depends(require_user),
    store: BookingStore = Depends(get_booking_store),
):
    booking = await store.get(booking_id, user.id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return render_receipt(
        booking, settings.currency, ZoneInfo(settings.receipt_timezone)
    )
