# backend/coaching/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from functools import lru_cache


class SessionType(str, Enum):
    DISCOVERY_CALL = "discovery_call"
    ONLINE_SESSION = "online_session"
    IN_PERSON_SESSION = "in_person_session"


@dataclass(frozen=True)
class SessionOffer:
    duration_minutes: int
    price: float


DEFAULT_CATALOG: dict[SessionType, SessionOffer] = {
    SessionType.DISCOVERY_CALL: SessionOffer(duration_minutes=30, price=0.0),
    SessionType.ONLINE_SESSION: SessionOffer(duration_minutes=60, price=85.0),
    SessionType.IN_PERSON_SESSION: SessionOffer(duration_minutes=90, price=120.0),
}


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for booking/slots system.

    Attributes:
        horizon_days: How many days ahead to show slots
        min_lead_minutes: Minimum minutes between now and a same-day slot
        slot_step_minutes: Claim grid step in minutes (15/30/60)
        cache_ttl_seconds: Redis cache TTL for the window grid
        catalog: Session type → default duration and price
    """
    horizon_days: int = 60
    min_lead_minutes: int = 120
    slot_step_minutes: int = 15  # 15 / 30 / 60
    cache_ttl_seconds: int = 86400  # 24 hours
    catalog: dict[SessionType, SessionOffer] = field(
        default_factory=lambda: dict(DEFAULT_CATALOG)
    )

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.min_lead_minutes < 0:
            raise ValueError(f"min_lead_minutes must be >= 0, got {self.min_lead_minutes}")

    def offer_for(self, session_type: SessionType) -> SessionOffer:
        return self.catalog[SessionType(session_type)]

    def is_on_grid(self, minutes: int) -> bool:
        return minutes % self.slot_step_minutes == 0

    def is_time_on_grid(self, value: time) -> bool:
        """Whole minutes and a multiple of the grid step."""
        if value.second or value.microsecond:
            return False
        return self.is_on_grid(time_to_minutes(value))

    def blocks_for(self, start_min: int, duration_minutes: int) -> list[int]:
        """Grid block starts (minutes since midnight) covered by [start, start+duration)."""
        first = start_min - start_min % self.slot_step_minutes
        end_min = start_min + duration_minutes
        return list(range(first, end_min, self.slot_step_minutes))


@lru_cache
def get_booking_config() -> BookingConfig:
    """
    Get booking configuration (singleton).

    In the future, this can read from environment or database.
    """
    return BookingConfig()


# ── Time helpers ─────────────────────────────────────────────────────────


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    return time(minutes // 60, minutes % 60)
