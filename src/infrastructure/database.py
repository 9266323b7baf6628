"""
Async SQLAlchemy engine and session factory backing the booking store.

Uses ``asyncpg`` as the PostgreSQL driver for non-blocking I/O.  Each
request gets its own ``AsyncSession``; bookings are committed by
``BookingStore.create`` itself, so ``expire_on_commit`` is off to keep the
returned row readable afterwards.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_size=10,
    max_overflow=5,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
