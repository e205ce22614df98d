# backend/coaching/services/booking/errors.py
"""
Booking error taxonomy.

PolicyViolation and SlotConflict are raised by the writer only;
NotFound and InvalidTransition by administrative status changes.
"""

from enum import Enum


class PolicyReason(str, Enum):
    PAST_DATE = "past_date"
    INACTIVE_DAY = "inactive_day"
    BLOCKED_DATE = "blocked_date"
    OUTSIDE_WINDOW = "outside_window"
    LEAD_TIME = "lead_time"
    OFF_GRID = "off_grid"
    INVALID_DURATION = "invalid_duration"


class BookingError(Exception):
    """Base class for booking failures."""


class PolicyViolation(BookingError):
    """Requested date/time breaks an availability rule."""

    def __init__(self, reason: PolicyReason, detail: str):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


class SlotConflict(BookingError):
    """Slot already held by another scheduled booking; re-fetch availability."""


class NotFound(BookingError):
    pass


class InvalidTransition(BookingError):
    pass
