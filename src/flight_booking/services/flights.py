from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.db.models import Flight
from flight_booking.db.repositories.flights import FlightRepo
from flight_booking.observability.logging import get_logger

log = get_logger(__name__)


def to_naive_utc(value: datetime) -> datetime:
    # Naive input is taken to be UTC already.
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


class FlightService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._flights = FlightRepo(session)

    async def list_flights(self) -> list[Flight]:
        return await self._flights.list_all()

    async def create_flight(
        self,
        *,
        name: str,
        description: str,
        price: Decimal,
        date: datetime,
    ) -> Flight:
        flight = await self._flights.create(
            name=name,
            description=description,
            price=Decimal(format(price, "f")),
            date=to_naive_utc(date),
        )
        await self._session.commit()
        log.info("flight.created", flight_id=str(flight.id))
        return flight
