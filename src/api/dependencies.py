"""FastAPI dependency injection helpers."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.domain.pricing import PricingEngine, Tariff
from src.infrastructure.database import async_session_factory
from src.infrastructure.geocoding import LocationResolver
from src.infrastructure.repositories import BookingStore


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_pricing_engine() -> PricingEngine:
    return PricingEngine(
        Tariff(
            base_fare=settings.base_fare,
            rate_per_km=settings.rate_per_km,
            rate_per_minute=settings.rate_per_minute,
            minimum_fare=settings.minimum_fare,
        ),
        default_duration_min=settings.default_trip_minutes,
    )


def get_booking_store(
    db: AsyncSession = Depends(get_db),
    pricing: PricingEngine = Depends(get_pricing_engine),
) -> BookingStore:
    return BookingStore(db, pricing)


def get_location_resolver(request: Request) -> LocationResolver:
    """The resolver built in the app lifespan (holds the shared HTTP client)."""
    return request.app.state.location_resolver
