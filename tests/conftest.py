"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The production models carry no
backend-specific column types, so they are created as-is.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.domain.entities import BookingDraft, Location
from src.infrastructure.database import Base
from src.infrastructure.models import BookingModel  # noqa: F401  (registers table)
from src.infrastructure.queries import BookingListStrategy


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Sample data ───────────────────────────────────────────────────────

CBD = Location.from_coordinates(-1.2864, 36.8172, "Kenyatta Avenue, Nairobi CBD")
UPPER_HILL = Location.from_coordinates(-1.3000, 36.8000, "Upper Hill, Nairobi")
JKIA = Location.from_coordinates(-1.3192, 36.9278, "Jomo Kenyatta International Airport")


def make_draft(**overrides) -> BookingDraft:
    fields = dict(
        user_id="rider-1",
        user_email="rider@example.com",
        pickup=CBD,
        dropoff=UPPER_HILL,
        payment_mode="Cash",
    )
    fields.update(overrides)
    return BookingDraft(**fields)


class BrokenQuery(BookingListStrategy):
    """Stands in for a store that rejects the ordered query (missing index)."""

    name = "broken"

    def __init__(self):
        self.calls = 0

    async def fetch(self, session, user_id):
        self.calls += 1
        raise OperationalError(
            "SELECT ... ORDER BY created_at DESC", {}, Exception("index missing")
        )


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables created."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
