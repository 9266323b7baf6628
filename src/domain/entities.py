"""
Domain entities and value objects.

* ``GeoPoint`` / ``Location`` validate themselves on construction, so an
  invalid coordinate never reaches the pricing engine or the store.
* ``BookingDraft`` is the booking-in-progress: a plain serialisable value
  that the API builds from a request and hands to ``BookingStore.create``.
  It deliberately carries no fare -- the store prices it itself.
* ``Booking`` is the immutable record read back from the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from .distance import check_coordinate
from .enums import BookingStatus, PaymentMode
from .errors import ValidationError


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        check_coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class Location:
    point: GeoPoint
    address: str

    def __post_init__(self) -> None:
        if not self.address or not self.address.strip():
            raise ValidationError("Location address must not be empty")

    @classmethod
    def from_coordinates(cls, lat: float, lng: float, address: str) -> Location:
        return cls(GeoPoint(lat, lng), address)

    def to_dict(self) -> dict[str, Any]:
        return {
            "lat": self.point.latitude,
            "lng": self.point.longitude,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Location:
        return cls.from_coordinates(data["lat"], data["lng"], data["address"])


@dataclass(frozen=True)
class FareEstimate:
    distance_km: float
    duration_min: float
    fare: Decimal


# ── Booking in progress ───────────────────────────────────────────────


@dataclass
class BookingDraft:
    user_id: str = ""
    user_email: str = ""
    pickup: Optional[Location] = None
    dropoff: Optional[Location] = None
    payment_mode: str = PaymentMode.CASH.value

    def validated_payment_mode(self) -> PaymentMode:
        try:
            return PaymentMode(self.payment_mode)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown payment mode {self.payment_mode!r}"
            ) from exc

    def validate(self) -> PaymentMode:
        """Raise ``ValidationError`` unless the draft can be booked."""
        if not self.user_id or not self.user_id.strip():
            raise ValidationError("A signed-in user is required to book a ride")
        if self.pickup is None or self.dropoff is None:
            raise ValidationError("Both pickup and dropoff must be selected")
        return self.validated_payment_mode()

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "user_email": self.user_email,
            "pickup": self.pickup.to_dict() if self.pickup else None,
            "dropoff": self.dropoff.to_dict() if self.dropoff else None,
            "payment_mode": str(getattr(self.payment_mode, "value", self.payment_mode)),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BookingDraft:
        pickup = data.get("pickup")
        dropoff = data.get("dropoff")
        return cls(
            user_id=data.get("user_id", ""),
            user_email=data.get("user_email") or "",
            pickup=Location.from_dict(pickup) if pickup else None,
            dropoff=Location.from_dict(dropoff) if dropoff else None,
            payment_mode=data.get("payment_mode", PaymentMode.CASH.value),
        )


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Booking:
    id: str
    user_id: str
    pickup: Location
    dropoff: Location
    payment_mode: PaymentMode
    distance_km: float
    fare: Decimal
    created_at: datetime
    user_email: str = ""
    status: BookingStatus = field(default=BookingStatus.PENDING)
