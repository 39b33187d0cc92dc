"""
flight_booking.api.presenters

Response models and the second phase of booking resolution.

Responsibilities:
- Render ORM records into camelCase response models.
- Resolve nested booking fields on demand: `user` through a per-request
  memoised single-entity fetch, `flight` from the snapshot taken at booking time.
- Render every timestamp in one canonical format (`YYYY-MM-DDTHH:MM:SS.mmmZ`).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.db.models import Booking, Flight, User
from flight_booking.db.repositories.users import UserRepo
from flight_booking.errors import NotFound
from flight_booking.services.accounts import AuthToken


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserView(CamelModel):
    id: uuid.UUID
    email: str
    # Always null: the password (or its hash) is never returned.
    password: None = None


class FlightView(CamelModel):
    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    date: str


class BookingView(CamelModel):
    id: uuid.UUID
    user: UserView
    flight: FlightView
    created_at: str
    updated_at: str


class AuthData(CamelModel):
    user_id: uuid.UUID
    token: str
    token_expiration: int


class EntityLoader:
    """
    Per-request cache of single-entity fetches used while rendering nested fields.
    A user's bookings all point at the same user, so this collapses N fetches to one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._users = UserRepo(session)
        self._user_cache: dict[uuid.UUID, User | None] = {}

    async def user(self, user_id: uuid.UUID) -> User | None:
        if user_id not in self._user_cache:
            self._user_cache[user_id] = await self._users.get(user_id)
        return self._user_cache[user_id]


def present_user(user: User) -> UserView:
    return UserView(id=user.id, email=user.email)


def present_flight(flight: Flight) -> FlightView:
    return FlightView(
        id=flight.id,
        name=flight.name,
        description=flight.description,
        price=flight.price,
        date=format_timestamp(flight.date),
    )


def present_flight_snapshot(snapshot: dict[str, Any]) -> FlightView:
    return FlightView(
        id=uuid.UUID(snapshot["id"]),
        name=snapshot["name"],
        description=snapshot["description"],
        price=Decimal(snapshot["price"]),
        date=format_timestamp(datetime.fromisoformat(snapshot["date"])),
    )


async def present_booking(booking: Booking, loader: EntityLoader) -> BookingView:
    user = await loader.user(booking.user_id)
    if user is None:
        raise NotFound("User not found.")
    return BookingView(
        id=booking.id,
        user=present_user(user),
        flight=present_flight_snapshot(booking.flight_snapshot),
        created_at=format_timestamp(booking.created_at),
        updated_at=format_timestamp(booking.updated_at),
    )


def present_auth_token(token: AuthToken) -> AuthData:
    return AuthData(
        user_id=token.user_id,
        token=token.token,
        token_expiration=token.token_expiration,
    )
