"""
tests.conftest

Shared fixtures: an isolated app per test backed by a temporary SQLite file.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flight_booking.api.app import create_app
from flight_booking.db.init_db import init_db
from flight_booking.db.session import create_engine, create_sessionmaker
from flight_booking.settings import Settings

CallOp = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        password_hash_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)
    # ASGITransport does not drive the lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            yield http


@pytest.fixture
def call_op(client: httpx.AsyncClient) -> CallOp:
    async def _call(
        operation: str, variables: dict[str, Any] | None = None, *, token: str | None = None
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        r = await client.post(
            "/v1/operations",
            json={"operation": operation, "variables": variables or {}},
            headers=headers,
        )
        assert r.status_code == 200
        return r.json()

    return _call


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()
