"""
flight_booking.services.accounts

Registration and login.

Responsibilities:
- Register identities with a bcrypt-hashed password (email is the unique login key).
- Exchange email + password for a signed, time-limited bearer token.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.auth.jwt import JwtConfig, JwtIssueError, issue_token
from flight_booking.auth.passwords import dummy_hash, hash_password, verify_password
from flight_booking.db.models import User
from flight_booking.db.repositories.users import UserRepo
from flight_booking.errors import Conflict, InvalidCredentials, Unexpected
from flight_booking.observability.logging import get_logger
from flight_booking.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AuthToken:
    user_id: uuid.UUID
    token: str
    # Whole hours, as reported to clients.
    token_expiration: int


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    async def register(self, *, email: str, password: str) -> User:
        email = normalize_email(email)
        if await self._users.get_by_email(email) is not None:
            raise Conflict()

        # bcrypt is CPU-bound; keep the event loop free for other requests.
        password_hash = await asyncio.to_thread(
            hash_password, password, rounds=self._settings.password_hash_rounds
        )
        try:
            user = await self._users.create(email=email, password_hash=password_hash)
            await self._session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration of the same email.
            await self._session.rollback()
            raise Conflict() from e

        log.info("user.registered", registered_user_id=str(user.id))
        return user

    async def login(self, *, email: str | None, password: str) -> AuthToken:
        user = await self._users.get_by_email(normalize_email(email)) if email else None
        if user is None:
            rounds = self._settings.password_hash_rounds
            await asyncio.to_thread(lambda: verify_password(password, dummy_hash(rounds)))
            raise InvalidCredentials()
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise InvalidCredentials()

        ttl_hours = self._settings.token_ttl_hours
        try:
            token = issue_token(
                cfg=JwtConfig.from_settings(self._settings),
                subject=str(user.id),
                email=user.email,
                ttl=timedelta(hours=ttl_hours),
            )
        except JwtIssueError as e:
            raise Unexpected("Could not issue an access token.") from e

        log.info("user.logged_in", login_user_id=str(user.id))
        return AuthToken(user_id=user.id, token=token, token_expiration=ttl_hours)

    async def list_users(self) -> list[User]:
        return await self._users.list_all()
