"""
tests.test_booking_service

Booking lifecycle invariants checked directly against the service layer.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from flight_booking.api.presenters import EntityLoader, present_booking
from flight_booking.db.models import Booking
from flight_booking.db.repositories.bookings import BookingRepo
from flight_booking.db.repositories.flights import FlightRepo
from flight_booking.errors import AuthenticationRequired, NotFound, PermissionDenied
from flight_booking.services.accounts import AccountService
from flight_booking.services.bookings import BookingService
from flight_booking.services.flights import FlightService


async def _seed(session, settings):
    user = await AccountService(session=session, settings=settings).register(
        email="a@x.com", password="pw123"
    )
    flight = await FlightService(session=session).create_flight(
        name="AB1",
        description="d",
        price=Decimal("100.50"),
        date=datetime(2025, 1, 1, 9, 30),
    )
    return user, flight


@pytest.mark.asyncio
async def test_snapshot_is_not_affected_by_later_flight_changes(session_factory, settings) -> None:
    async with session_factory() as session:
        user, flight = await _seed(session, settings)
        booking = await BookingService(session=session, settings=settings).create(
            user_id=user.id, flight_id=flight.id
        )

    async with session_factory() as session:
        stored = await FlightRepo(session).get(flight.id)
        stored.name = "AB1-renamed"
        stored.price = Decimal("999")
        await session.commit()

    async with session_factory() as session:
        bookings = await BookingService(session=session, settings=settings).list_for_user(
            user_id=user.id
        )
        assert [b.id for b in bookings] == [booking.id]
        view = await present_booking(bookings[0], EntityLoader(session))

    assert view.flight.name == "AB1"
    assert view.flight.price == Decimal("100.50")
    assert view.flight.date == "2025-01-01T09:30:00.000Z"
    assert view.user.email == "a@x.com"


@pytest.mark.asyncio
async def test_create_for_missing_flight_raises_not_found(session_factory, settings) -> None:
    async with session_factory() as session:
        user, _ = await _seed(session, settings)
        svc = BookingService(session=session, settings=settings)
        with pytest.raises(NotFound):
            await svc.create(user_id=user.id, flight_id=uuid.uuid4())
        assert await svc.list_for_user(user_id=user.id) == []


@pytest.mark.asyncio
async def test_cancel_deletes_only_the_booking(session_factory, settings) -> None:
    async with session_factory() as session:
        user, flight = await _seed(session, settings)
        svc = BookingService(session=session, settings=settings)
        keep = await svc.create(user_id=user.id, flight_id=flight.id)
        drop = await svc.create(user_id=user.id, flight_id=flight.id)

        cancelled = await svc.cancel(user_id=user.id, booking_id=drop.id)
        assert cancelled.id == drop.id
        assert cancelled.flight_snapshot["name"] == "AB1"

    async with session_factory() as session:
        svc = BookingService(session=session, settings=settings)
        assert [b.id for b in await svc.list_for_user(user_id=user.id)] == [keep.id]
        still_there = await FlightRepo(session).get(flight.id)
        assert still_there is not None
        assert still_there.name == "AB1"

        with pytest.raises(NotFound):
            await svc.cancel(user_id=user.id, booking_id=drop.id)


@pytest.mark.asyncio
async def test_cancel_by_non_owner(session_factory, settings) -> None:
    async with session_factory() as session:
        user, flight = await _seed(session, settings)
        booking = await BookingService(session=session, settings=settings).create(
            user_id=user.id, flight_id=flight.id
        )

    async with session_factory() as session:
        with pytest.raises(PermissionDenied):
            await BookingService(session=session, settings=settings).cancel(
                user_id=uuid.uuid4(), booking_id=booking.id
            )

    # With ownership enforcement off, any authenticated caller may cancel.
    permissive = settings.model_copy(update={"enforce_booking_ownership": False})
    async with session_factory() as session:
        svc = BookingService(session=session, settings=permissive)
        await svc.cancel(user_id=uuid.uuid4(), booking_id=booking.id)
        assert await svc.list_for_user(user_id=user.id) == []


async def _booking_count(session) -> int:
    return (await session.execute(select(func.count()).select_from(Booking))).scalar_one()


@pytest.mark.asyncio
async def test_create_for_unknown_user_writes_nothing(session_factory, settings) -> None:
    async with session_factory() as session:
        _, flight = await _seed(session, settings)
        with pytest.raises(AuthenticationRequired):
            await BookingService(session=session, settings=settings).create(
                user_id=uuid.uuid4(), flight_id=flight.id
            )

    async with session_factory() as session:
        assert await _booking_count(session) == 0


@pytest.mark.asyncio
async def test_foreign_keys_are_enforced(session_factory, settings) -> None:
    async with session_factory() as session:
        _, flight = await _seed(session, settings)
        with pytest.raises(IntegrityError):
            await BookingRepo(session).create(
                user_id=uuid.uuid4(), flight_id=flight.id, flight_snapshot=flight.snapshot()
            )
        await session.rollback()

    async with session_factory() as session:
        assert await _booking_count(session) == 0


@pytest.mark.asyncio
async def test_price_is_stored_as_plain_decimal_text(session_factory, settings) -> None:
    async with session_factory() as session:
        user, _ = await _seed(session, settings)
        flight = await FlightService(session=session).create_flight(
            name="AB2", description="d", price=Decimal("1E+2"), date=datetime(2025, 1, 1)
        )
        assert str(flight.price) == "100"
        booking = await BookingService(session=session, settings=settings).create(
            user_id=user.id, flight_id=flight.id
        )
        assert booking.flight_snapshot["price"] == "100"

    async with session_factory() as session:
        stored = await FlightRepo(session).get(flight.id)
        assert str(stored.price) == "100"
