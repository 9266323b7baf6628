"""Plain-text booking receipt, as shared from the booking screen."""

from __future__ import annotations

from datetime import timezone, tzinfo

from .entities import Booking


def render_receipt(booking: Booking, currency: str, tz: tzinfo = timezone.utc) -> str:
    created = booking.created_at
    if created.tzinfo is None:
        # the store hands back naive UTC on backends without tz support
        created = created.replace(tzinfo=timezone.utc)
    lines = [
        "Taxi Booking Receipt",
        f"Pickup Location: {booking.pickup.address}",
        f"Dropoff Location: {booking.dropoff.address}",
        f"Distance: {booking.distance_km:.2f} km",
        f"Fare: {currency} {booking.fare:.2f}",
        f"Payment Method: {booking.payment_mode.value}",
        f"Date: {created.astimezone(tz):%Y-%m-%d %H:%M}",
        f"Booked by: {booking.user_email or 'Anonymous'}",
        f"Booking ID: {booking.id.upper()}",
    ]
    return "\n".join(lines)
