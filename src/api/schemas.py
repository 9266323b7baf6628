"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.entities import Booking, GeoPoint, Location


# ── Requests ──────────────────────────────────────────────────────────


class PointIn(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


class LocationIn(PointIn):
    address: str = Field(..., min_length=1, max_length=512)

    def to_domain(self) -> Location:
        return Location(GeoPoint(self.lat, self.lng), self.address)


class FareEstimateRequest(BaseModel):
    pickup: PointIn
    dropoff: PointIn
    duration_min: Optional[float] = Field(None, ge=0)


class BookingCreateRequest(BaseModel):
    """Fare and distance are never accepted from the client."""

    pickup: LocationIn
    dropoff: LocationIn
    payment_mode: str = Field("Cash", description="Cash, MobileMoney or Card")


# ── Responses ─────────────────────────────────────────────────────────


class LocationOut(BaseModel):
    lat: float
    lng: float
    address: str

    @classmethod
    def from_domain(cls, location: Location) -> LocationOut:
        return cls(
            lat=location.point.latitude,
            lng=location.point.longitude,
            address=location.address,
        )


class FareEstimateResponse(BaseModel):
    distance_km: float
    duration_min: float
    fare: Decimal
    currency: str


class BookingResponse(BaseModel):
    id: str
    user_id: str
    user_email: str
    pickup: LocationOut
    dropoff: LocationOut
    payment_mode: str
    distance_km: float
    fare: Decimal
    status: str
    created_at: datetime

    @classmethod
    def from_domain(cls, booking: Booking) -> BookingResponse:
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            user_email=booking.user_email,
            pickup=LocationOut.from_domain(booking.pickup),
            dropoff=LocationOut.from_domain(booking.dropoff),
            payment_mode=booking.payment_mode.value,
            distance_km=booking.distance_km,
            fare=booking.fare,
            status=booking.status.value,
            created_at=booking.created_at,
        )


class ReverseGeocodeResponse(BaseModel):
    lat: float
    lng: float
    label: str


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
