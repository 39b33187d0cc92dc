"""
flight_booking.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Enforce domain invariants and raise `flight_booking.errors` types.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services take an already-authenticated user id; the gate runs in the API layer.
