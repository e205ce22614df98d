# backend/coaching/services/booking/__init__.py
"""
Booking writer and its error taxonomy.
"""

from .errors import (
    BookingError,
    InvalidTransition,
    NotFound,
    PolicyReason,
    PolicyViolation,
    SlotConflict,
)
from .writer import BookingStatus, create_booking, set_booking_status

__all__ = [
    "BookingError",
    "InvalidTransition",
    "NotFound",
    "PolicyReason",
    "PolicyViolation",
    "SlotConflict",
    "BookingStatus",
    "create_booking",
    "set_booking_status",
]
