"""
flight_booking.api.operations

Named operation registry and dispatcher.

Responsibilities:
- Declare every operation the API exposes, with a typed argument model.
- Run the authorization gate at the top of every gated handler.
- Turn domain errors into the response envelope's error list.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.presenters import (
    AuthData,
    BookingView,
    CamelModel,
    EntityLoader,
    FlightView,
    UserView,
    present_auth_token,
    present_booking,
    present_flight,
    present_user,
)
from flight_booking.auth.deps import require_authenticated
from flight_booking.auth.models import AuthContext
from flight_booking.errors import AuthenticationRequired, InvalidInput, ServiceError, Unexpected
from flight_booking.observability.logging import get_logger
from flight_booking.services.accounts import AccountService
from flight_booking.services.bookings import BookingService
from flight_booking.services.flights import FlightService
from flight_booking.settings import Settings

log = get_logger(__name__)


class OperationName(enum.StrEnum):
    # Wire names; treat as stable API contract.
    flights = "flights"
    users = "users"
    bookings = "bookings"
    login = "login"
    create_flight = "createFlight"
    create_user = "createUser"
    book_flight = "bookFlight"
    cancel_booking = "cancelBooking"


# --- Request/response envelope ------------------------------------------------


class OperationRequest(BaseModel):
    operation: str = Field(min_length=1, max_length=64)
    variables: dict[str, Any] = Field(default_factory=dict)


class OperationError(BaseModel):
    message: str
    code: str


class OperationResponse(BaseModel):
    data: Any = None
    errors: list[OperationError] | None = None


# --- Operation arguments ------------------------------------------------------


class NoArgs(CamelModel):
    pass


class FlightInput(CamelModel):
    name: str = Field(min_length=1, max_length=256)
    description: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    date: datetime


class UserInput(CamelModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1)


class LoginArgs(CamelModel):
    email: str | None = None
    password: str


class CreateFlightArgs(CamelModel):
    flight_input: FlightInput


class CreateUserArgs(CamelModel):
    user_input: UserInput


class BookFlightArgs(CamelModel):
    flight_id: uuid.UUID


class CancelBookingArgs(CamelModel):
    booking_id: uuid.UUID


# --- Handlers -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OperationContext:
    auth: AuthContext
    session: AsyncSession
    settings: Settings
    loader: EntityLoader


async def _flights(ctx: OperationContext, _: NoArgs) -> list[FlightView]:
    flights = await FlightService(session=ctx.session).list_flights()
    return [present_flight(f) for f in flights]


async def _users(ctx: OperationContext, _: NoArgs) -> list[UserView]:
    users = await AccountService(session=ctx.session, settings=ctx.settings).list_users()
    return [present_user(u) for u in users]


async def _bookings(ctx: OperationContext, _: NoArgs) -> list[BookingView]:
    user_id = require_authenticated(ctx.auth)
    svc = BookingService(session=ctx.session, settings=ctx.settings)
    bookings = await svc.list_for_user(user_id=user_id)
    return [await present_booking(b, ctx.loader) for b in bookings]


async def _login(ctx: OperationContext, args: LoginArgs) -> AuthData:
    svc = AccountService(session=ctx.session, settings=ctx.settings)
    token = await svc.login(email=args.email, password=args.password)
    return present_auth_token(token)


async def _create_flight(ctx: OperationContext, args: CreateFlightArgs) -> FlightView:
    require_authenticated(ctx.auth)
    body = args.flight_input
    flight = await FlightService(session=ctx.session).create_flight(
        name=body.name,
        description=body.description,
        price=body.price,
        date=body.date,
    )
    return present_flight(flight)


async def _create_user(ctx: OperationContext, args: CreateUserArgs) -> UserView:
    svc = AccountService(session=ctx.session, settings=ctx.settings)
    user = await svc.register(email=args.user_input.email, password=args.user_input.password)
    return present_user(user)


async def _book_flight(ctx: OperationContext, args: BookFlightArgs) -> BookingView:
    user_id = require_authenticated(ctx.auth)
    svc = BookingService(session=ctx.session, settings=ctx.settings)
    booking = await svc.create(user_id=user_id, flight_id=args.flight_id)
    return await present_booking(booking, ctx.loader)


async def _cancel_booking(ctx: OperationContext, args: CancelBookingArgs) -> BookingView:
    user_id = require_authenticated(ctx.auth)
    svc = BookingService(session=ctx.session, settings=ctx.settings)
    booking = await svc.cancel(user_id=user_id, booking_id=args.booking_id)
    return await present_booking(booking, ctx.loader)


@dataclass(frozen=True, slots=True)
class Operation:
    args_model: type[BaseModel]
    handler: Callable[[OperationContext, Any], Awaitable[Any]]
    # Gated operations reject anonymous callers before their arguments are looked at.
    gated: bool = False


OPERATIONS: dict[OperationName, Operation] = {
    OperationName.flights: Operation(NoArgs, _flights),
    OperationName.users: Operation(NoArgs, _users),
    OperationName.bookings: Operation(NoArgs, _bookings, gated=True),
    OperationName.login: Operation(LoginArgs, _login),
    OperationName.create_flight: Operation(CreateFlightArgs, _create_flight, gated=True),
    OperationName.create_user: Operation(CreateUserArgs, _create_user),
    OperationName.book_flight: Operation(BookFlightArgs, _book_flight, gated=True),
    OperationName.cancel_booking: Operation(CancelBookingArgs, _cancel_booking, gated=True),
}


# --- Dispatch -------------------------------------------------------------------


def _describe_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _to_json(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    return value


def _failure(error: ServiceError) -> OperationResponse:
    return OperationResponse(
        data=None, errors=[OperationError(message=error.message, code=error.code)]
    )


async def dispatch(request: OperationRequest, *, ctx: OperationContext) -> OperationResponse:
    try:
        name = OperationName(request.operation)
    except ValueError:
        return _failure(InvalidInput(f"Unknown operation: {request.operation}"))

    op = OPERATIONS[name]
    if op.gated and not ctx.auth.is_authenticated:
        return _failure(AuthenticationRequired())

    try:
        args = op.args_model.model_validate(request.variables)
    except ValidationError as e:
        return _failure(InvalidInput(_describe_validation_error(e)))

    try:
        result = await op.handler(ctx, args)
    except ServiceError as e:
        log.info("operation.failed", operation=name.value, code=e.code)
        return _failure(e)
    except Exception:
        # Store/network failures: report a generic error, keep the details in logs.
        log.exception("operation.unexpected_error", operation=name.value)
        return _failure(Unexpected())

    return OperationResponse(data=_to_json(result))


# --- Module Notes -----------------------------------------------------------
# Gated handlers call `require_authenticated` before constructing any service, so an
# anonymous caller never reaches the store. `flights`, `users`, `login` and
# `createUser` are public.
