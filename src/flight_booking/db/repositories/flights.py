from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.db.models import Flight


class FlightRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        description: str,
        price: Decimal,
        date: datetime,
    ) -> Flight:
        flight = Flight(name=name, description=description, price=price, date=date)
        self._session.add(flight)
        await self._session.flush()
        return flight

    async def get(self, flight_id: uuid.UUID) -> Flight | None:
        return await self._session.get(Flight, flight_id)

    async def list_all(self) -> list[Flight]:
        stmt = select(Flight).order_by(Flight.created_at)
        return list((await self._session.execute(stmt)).scalars().all())
