from .generated import (
    Base,
    BookingSlotClaims,
    CoachAvailability,
    CoachBlockedDates,
    SessionBookings,
)

__all__ = [
    "Base",
    "BookingSlotClaims",
    "CoachAvailability",
    "CoachBlockedDates",
    "SessionBookings",
]
