"""
flight_booking.api.routers

HTTP routers.
"""

# Package marker.
