"""
flight_booking.auth.models

Auth domain models.

Responsibilities:
- Define the per-request authentication result (`AuthContext`) passed to operation handlers.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    Result of identity resolution for one inbound request.

    Anonymous when no valid bearer credential was presented; never persisted.
    """

    user_id: uuid.UUID | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls()
