"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"

    r = await client.get("/healthz")
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_unknown_operation_is_a_bad_request(client: httpx.AsyncClient) -> None:
    r = await client.post("/v1/operations", json={"operation": "deleteFlight"})
    assert r.status_code == 200
    body = r.json()
    assert body["data"] is None
    assert body["errors"][0]["code"] == "BAD_REQUEST"
    assert "deleteFlight" in body["errors"][0]["message"]
