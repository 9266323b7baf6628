"""
Seed script -- populates the database with sample bookings for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 sample bookings for two demo riders around Nairobi CBD
"""

import asyncio

from sqlalchemy import text

from src.api.dependencies import get_pricing_engine
from src.domain.entities import BookingDraft, Location
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.repositories import BookingStore

PLACES = {
    "cbd": Location.from_coordinates(-1.2864, 36.8172, "Kenyatta Avenue, Nairobi CBD"),
    "upperhill": Location.from_coordinates(-1.3000, 36.8000, "Upper Hill, Nairobi"),
    "westlands": Location.from_coordinates(-1.2676, 36.8108, "Westlands, Nairobi"),
    "jkia": Location.from_coordinates(-1.3192, 36.9278, "Jomo Kenyatta International Airport"),
    "kilimani": Location.from_coordinates(-1.2921, 36.7831, "Kilimani, Nairobi"),
    "karen": Location.from_coordinates(-1.3197, 36.7076, "Karen, Nairobi"),
}

RIDERS = [
    ("demo-rider-1", "wanjiru@example.com"),
    ("demo-rider-2", "otieno@example.com"),
]

TRIPS = [
    (0, "cbd", "upperhill", "Cash"),
    (0, "upperhill", "westlands", "M-Pesa"),
    (0, "westlands", "jkia", "Card"),
    (0, "jkia", "cbd", "MobileMoney"),
    (1, "kilimani", "karen", "Cash"),
    (1, "karen", "cbd", "Card"),
    (1, "cbd", "kilimani", "M-Pesa"),
    (1, "kilimani", "westlands", "Cash"),
]


async def seed() -> None:
    async with async_session_factory() as session:
        existing = await session.execute(text("SELECT COUNT(*) FROM bookings"))
        if existing.scalar():
            print("Database already seeded -- skipping.")
            return

        store = BookingStore(session, get_pricing_engine())
        for rider_idx, origin, destination, payment in TRIPS:
            user_id, email = RIDERS[rider_idx]
            booking = await store.create(
                BookingDraft(
                    user_id=user_id,
                    user_email=email,
                    pickup=PLACES[origin],
                    dropoff=PLACES[destination],
                    payment_mode=payment,
                )
            )
            print(
                f"  {booking.id}  {user_id:<13} {origin:>9} -> {destination:<9} "
                f"{booking.distance_km:6.2f} km  {booking.fare}"
            )

    print(f"\nSeed complete! {len(TRIPS)} bookings.")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
