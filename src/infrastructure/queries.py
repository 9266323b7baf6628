"""
Named query strategies for "list a user's bookings, newest first".

``BookingStore.list`` walks its strategies in order and returns the first
result that comes back without a backend error:

1. ``OrderedByRecency`` -- filter + ORDER BY in the database.  Cheapest,
   but needs the ``(user_id, created_at)`` index to be usable.
2. ``FilterThenSort``   -- filter only, sort in Python.  Slower for users
   with many bookings, but depends on nothing but the user_id filter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BookingModel


def as_utc(stamp: datetime) -> datetime:
    """Backends without tz support hand timestamps back naive (UTC)."""
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp


class BookingListStrategy(ABC):
    name: str = "abstract"

    @abstractmethod
    async def fetch(
        self, session: AsyncSession, user_id: str
    ) -> list[BookingModel]: ...


class OrderedByRecency(BookingListStrategy):
    name = "ordered_by_recency"

    async def fetch(
        self, session: AsyncSession, user_id: str
    ) -> list[BookingModel]:
        result = await session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc())
        )
        return list(result.scalars().all())


class FilterThenSort(BookingListStrategy):
    name = "filter_then_sort"

    async def fetch(
        self, session: AsyncSession, user_id: str
    ) -> list[BookingModel]:
        result = await session.execute(
            select(BookingModel).where(BookingModel.user_id == user_id)
        )
        return sorted(
            result.scalars().all(), key=lambda b: as_utc(b.created_at), reverse=True
        )


DEFAULT_LIST_STRATEGIES: tuple[BookingListStrategy, ...] = (
    OrderedByRecency(),
    FilterThenSort(),
)
