"""
flight_booking.auth.deps

Identity resolution and the authorization gate.

Responsibilities:
- Convert the raw `Authorization` header into a typed `AuthContext` (never raising).
- Provide the per-operation gate that rejects anonymous callers.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import Depends, Request

from flight_booking.api.deps import settings_dep
from flight_booking.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from flight_booking.auth.models import AuthContext
from flight_booking.errors import AuthenticationRequired
from flight_booking.observability.logging import get_logger
from flight_booking.settings import Settings

log = get_logger(__name__)

_BEARER = "bearer"


def resolve_identity(authorization: str | None, *, cfg: JwtConfig) -> AuthContext:
    """
    Public operations must stay reachable without a credential, so every failure
    here degrades to an anonymous context; gated handlers decide what to do with it.
    """

    if not authorization:
        return AuthContext.anonymous()

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != _BEARER or not token:
        return AuthContext.anonymous()

    try:
        payload = decode_and_validate(cfg=cfg, token=token)
    except JwtValidationError as e:
        log.info("auth.token_rejected", reason=str(e))
        return AuthContext.anonymous()

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        log.info("auth.token_rejected", reason="subject is not a user id")
        return AuthContext.anonymous()

    email = payload.get("email")
    return AuthContext(user_id=user_id, email=str(email) if email else None)


def get_auth_context(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> AuthContext:
    ctx = resolve_identity(
        request.headers.get("authorization"), cfg=JwtConfig.from_settings(settings)
    )
    if ctx.is_authenticated:
        structlog.contextvars.bind_contextvars(user_id=str(ctx.user_id))
    return ctx


def require_authenticated(ctx: AuthContext) -> uuid.UUID:
    # Called first thing in gated handlers, before any store access.
    if ctx.user_id is None:
        raise AuthenticationRequired()
    return ctx.user_id


# --- Module Notes -----------------------------------------------------------
# Authorization is checked per operation, not per route: `flights`, `users`,
# `login` and `createUser` share the endpoint with gated operations.
