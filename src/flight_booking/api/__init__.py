"""
flight_booking.api

API package for the Flight Booking service.

Responsibilities:
- FastAPI app factory and router modules.
- Operation registry, request/response models and presenters.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
