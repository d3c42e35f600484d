# litrato/models/__init__.py
"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking_request import BookingRequest, BookingRequestStatus
from .confirmed_booking import ConfirmedBooking, ConfirmedBookingStatus
from .package import Package

__all__ = [
    "BookingRequest",
    "BookingRequestStatus",
    "ConfirmedBooking",
    "ConfirmedBookingStatus",
    "Package",
]
