"""
flight_booking.db.models

Persistence schema for users, flights and bookings.

Responsibilities:
- Define ORM models with generated UUID ids and automatic timestamps.
- Store bookings with both a flight foreign key and an immutable flight snapshot.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from flight_booking.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps; presenters render them with a trailing "Z".
    return datetime.now(UTC).replace(tzinfo=None)


class DecimalText(TypeDecorator[Decimal]):
    """Monetary decimal persisted as its canonical text (exact on every backend)."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: Any) -> str | None:
        # Fixed-point text: "1E+2" is stored as "100".
        return None if value is None else format(value, "f")

    def process_result_value(self, value: str | None, dialect: Any) -> Decimal | None:
        return None if value is None else Decimal(value)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class Flight(Base):
    __tablename__ = "flights"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalText, nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    def snapshot(self) -> dict[str, Any]:
        # JSON-safe copy embedded in bookings; later flight edits must not leak into it.
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": format(self.price, "f"),
            "date": self.date.isoformat(),
        }


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    flight_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("flights.id"), nullable=False, index=True
    )
    flight_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("ix_bookings_user_created", "user_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# No relationships are declared: nested user/flight fields are resolved by the
# presenters with explicit single-entity fetches.
