# backend/coaching/services/slots/__init__.py
"""
Slots calculation module.

Resolver: is a date bookable (weekly rules + blocked dates)
Generator: start times of a day (window − busy intervals − lead time)
Level 1: window slots per day (cached in Redis Sorted Sets)
Level 2: day availability with bookings (calculated on-the-fly)
"""

from .config import BookingConfig, SessionType, get_booking_config
from .resolver import DayOfWeek, WeeklyRule, bookable_dates, is_date_bookable, rule_for_date
from .generator import BookingSnapshot, SlotSequence, busy_intervals, generate_slots
from .redis_store import SlotsRedisStore
from .invalidator import invalidate_window_cache
from .availability import calculate_calendar, calculate_day_availability

__all__ = [
    "BookingConfig",
    "SessionType",
    "get_booking_config",
    "DayOfWeek",
    "WeeklyRule",
    "bookable_dates",
    "is_date_bookable",
    "rule_for_date",
    "BookingSnapshot",
    "SlotSequence",
    "busy_intervals",
    "generate_slots",
    "SlotsRedisStore",
    "invalidate_window_cache",
    "calculate_calendar",
    "calculate_day_availability",
]
