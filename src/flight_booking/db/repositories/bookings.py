"""
flight_booking.db.repositories.bookings

Repository for `Booking` entities.

Responsibilities:
- Insert bookings carrying a flight snapshot.
- Query bookings by owner.
- Delete a single booking by id.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.db.models import Booking


class BookingRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        user_id: uuid.UUID,
        flight_id: uuid.UUID,
        flight_snapshot: dict[str, Any],
    ) -> Booking:
        booking = Booking(user_id=user_id, flight_id=flight_id, flight_snapshot=flight_snapshot)
        self._session.add(booking)
        await self._session.flush()
        return booking

    async def get(self, booking_id: uuid.UUID) -> Booking | None:
        return await self._session.get(Booking, booking_id)

    async def list_for_user(self, user_id: uuid.UUID) -> list[Booking]:
        stmt = select(Booking).where(Booking.user_id == user_id).order_by(Booking.created_at)
        return list((await self._session.execute(stmt)).scalars().all())

    async def delete(self, booking_id: uuid.UUID) -> bool:
        # Keyed strictly by booking id; the loaded object stays readable for the response.
        stmt = (
            delete(Booking)
            .where(Booking.id == booking_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0


# --- Module Notes -----------------------------------------------------------
# Flights and users are never touched here; cancellation has no dependent cleanup.
