"""
SQLAlchemy ORM models.

Tables
------
* ``bookings`` -- one document per booked ride.  Pickup / dropoff are
  flattened into lat / lng / address columns.

Indexes
-------
* **Composite B-Tree** on ``(user_id, created_at)`` serving the
  "my bookings, newest first" query.  Without it the ordered query
  degrades and the store falls back to filter-then-sort.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    Float,
    Index,
    Numeric,
    String,
)

from .database import Base
from src.domain.enums import BookingStatus, PaymentMode


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(128), nullable=False)
    user_email = Column(String(255), nullable=False, default="")

    pickup_lat = Column(Float, nullable=False)
    pickup_lng = Column(Float, nullable=False)
    pickup_address = Column(String(512), nullable=False)
    dropoff_lat = Column(Float, nullable=False)
    dropoff_lng = Column(Float, nullable=False)
    dropoff_address = Column(String(512), nullable=False)

    payment_mode = Column(Enum(PaymentMode), nullable=False)
    distance_km = Column(Float, nullable=False)
    fare = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False
    )

    # Assigned by the store at write time, never by the client
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_bookings_user_created", "user_id", "created_at"),
    )
