"""
flight_booking.auth

Authentication/authorization package.

Responsibilities:
- JWT and password hashing helpers.
- Per-request identity resolution and the authorization gate.
"""

# Package marker.
