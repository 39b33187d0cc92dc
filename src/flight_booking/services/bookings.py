"""
flight_booking.services.bookings

Booking lifecycle service.

Responsibilities:
- Create bookings only for flights that exist, embedding a snapshot of the flight.
- List a user's bookings.
- Cancel a booking with a single delete keyed by booking id.

Consistency:
- The flight fetch and the booking insert share one session transaction. A flight
  deleted by another writer between the two steps can still leave a booking behind;
  flight deletion is not an exposed operation, so this race is accepted.
- No capacity or double-booking constraint: the same user may book the same flight
  any number of times, and concurrent bookings all succeed.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.db.models import Booking
from flight_booking.db.repositories.bookings import BookingRepo
from flight_booking.db.repositories.flights import FlightRepo
from flight_booking.db.repositories.users import UserRepo
from flight_booking.errors import AuthenticationRequired, NotFound, PermissionDenied
from flight_booking.observability.logging import get_logger
from flight_booking.settings import Settings

log = get_logger(__name__)


class BookingService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._bookings = BookingRepo(session)
        self._flights = FlightRepo(session)
        self._users = UserRepo(session)

    async def create(self, *, user_id: uuid.UUID, flight_id: uuid.UUID) -> Booking:
        # A validly signed token can outlive its user (e.g. a reset database).
        if await self._users.get(user_id) is None:
            raise AuthenticationRequired()

        flight = await self._flights.get(flight_id)
        if flight is None:
            raise NotFound("Flight not found.")

        booking = await self._bookings.create(
            user_id=user_id,
            flight_id=flight.id,
            flight_snapshot=flight.snapshot(),
        )
        await self._session.commit()
        log.info("booking.created", booking_id=str(booking.id), flight_id=str(flight.id))
        return booking

    async def list_for_user(self, *, user_id: uuid.UUID) -> list[Booking]:
        return await self._bookings.list_for_user(user_id)

    async def cancel(self, *, user_id: uuid.UUID, booking_id: uuid.UUID) -> Booking:
        booking = await self._bookings.get(booking_id)
        if booking is None:
            raise NotFound("Booking not found.")
        if self._settings.enforce_booking_ownership and booking.user_id != user_id:
            log.info("booking.cancel_denied", booking_id=str(booking_id))
            raise PermissionDenied("Not authorized to cancel this booking.")

        if not await self._bookings.delete(booking_id):
            # Deleted concurrently between the fetch and the delete.
            await self._session.rollback()
            raise NotFound("Booking not found.")
        await self._session.commit()
        log.info("booking.cancelled", booking_id=str(booking_id), flight_id=str(booking.flight_id))
        return booking


# --- Module Notes -----------------------------------------------------------
# Returned bookings carry raw foreign keys; nested user/flight fields are resolved
# by `api.presenters`.
