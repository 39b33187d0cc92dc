"""
tests.test_accounts

Registration, password hashing and token issuance.
"""

from __future__ import annotations

import pytest

from flight_booking.auth.deps import resolve_identity
from flight_booking.auth.jwt import JwtConfig
from flight_booking.auth.passwords import hash_password, verify_password
from flight_booking.errors import Conflict, InvalidCredentials, InvalidInput
from flight_booking.services import accounts
from flight_booking.services.accounts import AccountService


def test_password_hash_round_trip() -> None:
    hashed = hash_password("pw123", rounds=4)
    assert hashed != "pw123"
    assert verify_password("pw123", hashed)
    assert not verify_password("pw124", hashed)
    assert not verify_password("pw123", "not-a-bcrypt-hash")


def test_overlong_password_is_rejected() -> None:
    with pytest.raises(InvalidInput):
        hash_password("x" * 73, rounds=4)


@pytest.mark.asyncio
async def test_login_token_carries_user_id(session_factory, settings) -> None:
    async with session_factory() as session:
        svc = AccountService(session=session, settings=settings)
        user = await svc.register(email="A@x.com", password="pw123")
        assert user.email == "a@x.com"

        token = await svc.login(email="a@x.com", password="pw123")

    assert token.user_id == user.id
    assert token.token_expiration == 1
    ctx = resolve_identity(f"Bearer {token.token}", cfg=JwtConfig.from_settings(settings))
    assert ctx.user_id == user.id
    assert ctx.email == "a@x.com"


@pytest.mark.asyncio
async def test_register_twice_conflicts(session_factory, settings) -> None:
    async with session_factory() as session:
        svc = AccountService(session=session, settings=settings)
        await svc.register(email="a@x.com", password="pw123")
        with pytest.raises(Conflict):
            await svc.register(email="a@x.com", password="pw123")


@pytest.mark.asyncio
async def test_login_without_email_is_invalid(session_factory, settings) -> None:
    async with session_factory() as session:
        svc = AccountService(session=session, settings=settings)
        with pytest.raises(InvalidCredentials):
            await svc.login(email=None, password="pw123")


@pytest.mark.asyncio
async def test_unknown_email_still_runs_a_password_check(
    session_factory, settings, monkeypatch
) -> None:
    checked: list[str] = []

    def recording_verify(raw: str, hashed: str) -> bool:
        checked.append(hashed)
        return verify_password(raw, hashed)

    monkeypatch.setattr(accounts, "verify_password", recording_verify)

    async with session_factory() as session:
        svc = AccountService(session=session, settings=settings)
        await svc.register(email="a@x.com", password="pw123")

        with pytest.raises(InvalidCredentials):
            await svc.login(email="nobody@x.com", password="pw123")
        with pytest.raises(InvalidCredentials):
            await svc.login(email="a@x.com", password="wrong")

    assert len(checked) == 2
    assert all(h.startswith("$2") for h in checked)
