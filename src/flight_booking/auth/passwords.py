"""
flight_booking.auth.passwords

One-way password hashing (bcrypt).

Responsibilities:
- Hash raw passwords with a configurable work factor.
- Verify candidates with bcrypt's constant-time comparison.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

from flight_booking.errors import InvalidInput

# bcrypt only considers the first 72 bytes of input.
MAX_PASSWORD_BYTES = 72


def hash_password(raw: str, *, rounds: int) -> str:
    encoded = raw.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(raw: str, hashed: str) -> bool:
    encoded = raw.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("ascii"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


@lru_cache(maxsize=4)
def dummy_hash(rounds: int) -> str:
    # Verified against when the login email is unknown, so both failures cost one bcrypt check.
    return hash_password("unknown-user-placeholder", rounds=rounds)
