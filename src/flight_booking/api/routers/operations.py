"""
flight_booking.api.routers.operations

The single operation endpoint.

Responsibilities:
- Accept `{"operation": ..., "variables": {...}}` request bodies.
- Attach the request's `AuthContext` (resolved once) and a DB session, then dispatch.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.deps import db_session, settings_dep
from flight_booking.api.operations import (
    OperationContext,
    OperationRequest,
    OperationResponse,
    dispatch,
)
from flight_booking.api.presenters import EntityLoader
from flight_booking.auth.deps import get_auth_context
from flight_booking.auth.models import AuthContext
from flight_booking.settings import Settings

router = APIRouter(prefix="/v1", tags=["operations"])


@router.post("/operations", response_model=OperationResponse)
async def run_operation(
    body: OperationRequest,
    auth: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> OperationResponse:
    ctx = OperationContext(
        auth=auth,
        session=session,
        settings=settings,
        loader=EntityLoader(session),
    )
    return await dispatch(body, ctx=ctx)


# --- Module Notes -----------------------------------------------------------
# Domain failures are reported in the envelope with HTTP 200; only malformed
# envelopes (not JSON, missing `operation`) are rejected by FastAPI with 422.
