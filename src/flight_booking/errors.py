"""
flight_booking.errors

Domain error taxonomy.

Responsibilities:
- Give every failure a stable machine code and a human-readable message.
- Let services raise errors without knowing about the transport envelope.
"""

from __future__ import annotations

from typing import ClassVar


class ServiceError(Exception):
    code: ClassVar[str] = "UNEXPECTED"
    default_message: ClassVar[str] = "Unexpected error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(ServiceError):
    code = "UNAUTHENTICATED"
    default_message = "Not authenticated."


class InvalidCredentials(ServiceError):
    # Same message for unknown email and wrong password (no user enumeration).
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials. Please try again!"


class Conflict(ServiceError):
    code = "CONFLICT"
    default_message = "The user already exists"


class NotFound(ServiceError):
    code = "NOT_FOUND"
    default_message = "Not found."


class PermissionDenied(ServiceError):
    code = "FORBIDDEN"
    default_message = "Not authorized to perform this action."


class InvalidInput(ServiceError):
    code = "BAD_REQUEST"
    default_message = "Invalid input."


class Unexpected(ServiceError):
    pass
