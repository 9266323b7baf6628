"""
Repository Pattern -- abstracts document-store access so the booking
lifecycle stays backend-agnostic.

``BookingStore`` receives an ``AsyncSession`` (unit-of-work) and exposes
the only operations a booking has: create it once, read it back.
There is no update or delete.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BookingModel
from .queries import DEFAULT_LIST_STRATEGIES, BookingListStrategy, as_utc
from src.domain.entities import Booking, BookingDraft, Location
from src.domain.enums import BookingStatus, PaymentMode
from src.domain.errors import StoreUnavailable, ValidationError
from src.domain.pricing import PricingEngine

logger = logging.getLogger(__name__)

# Backend failures the store translates into ``StoreUnavailable``
BACKEND_ERRORS = (SQLAlchemyError, OSError)


class WriteClock:
    """Hands out strictly increasing UTC timestamps for ``created_at``."""

    def __init__(self) -> None:
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        stamp = datetime.now(timezone.utc)
        if self._last is not None and stamp <= self._last:
            stamp = self._last + timedelta(microseconds=1)
        self._last = stamp
        return stamp


_clock = WriteClock()


def to_entity(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        user_id=row.user_id,
        user_email=row.user_email or "",
        pickup=Location.from_coordinates(
            row.pickup_lat, row.pickup_lng, row.pickup_address
        ),
        dropoff=Location.from_coordinates(
            row.dropoff_lat, row.dropoff_lng, row.dropoff_address
        ),
        payment_mode=PaymentMode(row.payment_mode),
        distance_km=row.distance_km,
        fare=Decimal(row.fare).quantize(Decimal("0.01")),
        status=BookingStatus(row.status),
        created_at=as_utc(row.created_at),
    )


class BookingStore:
    def __init__(
        self,
        session: AsyncSession,
        pricing: PricingEngine | None = None,
        strategies: Sequence[BookingListStrategy] = DEFAULT_LIST_STRATEGIES,
        clock: WriteClock | None = None,
    ):
        self.session = session
        self.pricing = pricing or PricingEngine()
        self.strategies = tuple(strategies)
        self.clock = clock or _clock

    async def create(self, draft: BookingDraft) -> Booking:
        """Price *draft* from its own pickup / dropoff and persist it."""
        payment_mode = draft.validate()
        estimate = self.pricing.quote(draft.pickup.point, draft.dropoff.point)

        row = BookingModel(
            id=uuid.uuid4().hex,
            user_id=draft.user_id,
            user_email=draft.user_email or "",
            pickup_lat=draft.pickup.point.latitude,
            pickup_lng=draft.pickup.point.longitude,
            pickup_address=draft.pickup.address,
            dropoff_lat=draft.dropoff.point.latitude,
            dropoff_lng=draft.dropoff.point.longitude,
            dropoff_address=draft.dropoff.address,
            payment_mode=payment_mode,
            distance_km=estimate.distance_km,
            fare=estimate.fare,
            status=BookingStatus.PENDING,
            created_at=self.clock.now(),
        )
        try:
            self.session.add(row)
            await self.session.flush()
            await self.session.commit()
        except BACKEND_ERRORS as exc:
            await self._rollback()
            raise StoreUnavailable("Booking could not be saved") from exc
        return to_entity(row)

    async def list(self, user_id: str) -> list[Booking]:
        """Return *user_id*'s bookings, newest first."""
        if not user_id or not user_id.strip():
            raise ValidationError("user_id is required to list bookings")

        last_error: BaseException | None = None
        for strategy in self.strategies:
            try:
                rows = await strategy.fetch(self.session, user_id)
            except BACKEND_ERRORS as exc:
                logger.warning(
                    "Booking query %s failed for user %s: %s",
                    strategy.name,
                    user_id,
                    exc,
                )
                last_error = exc
                await self._rollback()
                continue
            return [to_entity(row) for row in rows]

        raise StoreUnavailable("Bookings could not be loaded") from last_error

    async def get(self, booking_id: str, user_id: str) -> Optional[Booking]:
        try:
            result = await self.session.execute(
                select(BookingModel).where(
                    BookingModel.id == booking_id,
                    BookingModel.user_id == user_id,
                )
            )
            row = result.scalar_one_or_none()
        except BACKEND_ERRORS as exc:
            raise StoreUnavailable("Booking could not be loaded") from exc
        return to_entity(row) if row else None

    async def _rollback(self) -> None:
        """Roll back after a backend error; a dead connection may refuse even that."""
        try:
            await self.session.rollback()
        except BACKEND_ERRORS as exc:
            logger.warning("Rollback failed: %s", exc)
