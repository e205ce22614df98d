# backend/coaching/services/slots/snapshot.py
"""
Snapshot loading: turns persisted rows into the plain inputs of the
resolver and generator.

When no weekly rules are stored, the default weekday 09:00-17:00
template is used instead.
"""

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy.orm import Session

from ...models.generated import CoachAvailability, CoachBlockedDates, SessionBookings
from .config import BookingConfig, get_booking_config
from .generator import SCHEDULED, BookingSnapshot
from .resolver import DayOfWeek, WeeklyRule

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATE: tuple[WeeklyRule, ...] = tuple(
    WeeklyRule(day, time(9, 0), time(17, 0), True)
    for day in (
        DayOfWeek.MONDAY,
        DayOfWeek.TUESDAY,
        DayOfWeek.WEDNESDAY,
        DayOfWeek.THURSDAY,
        DayOfWeek.FRIDAY,
    )
)


def load_rules(db: Session, config: BookingConfig | None = None) -> list[WeeklyRule]:
    """
    Stored weekly rules, or the default template when none exist.

    Rows whose window is empty or off the slot grid are skipped: the
    writer would refuse every slot generated from them.
    """
    config = config or get_booking_config()
    rows = db.query(CoachAvailability).all()
    if not rows:
        return list(DEFAULT_TEMPLATE)

    rules = []
    for row in rows:
        # A broken row closes that day rather than the whole calendar
        if not (config.is_time_on_grid(row.start_time) and config.is_time_on_grid(row.end_time)):
            logger.warning(f"Skipping off-grid availability row id={row.id} ({row.day_of_week})")
            continue
        try:
            rules.append(WeeklyRule(
                day_of_week=row.day_of_week,
                start_time=row.start_time,
                end_time=row.end_time,
                is_active=bool(row.is_active),
            ))
        except ValueError:
            logger.warning(f"Skipping invalid availability row id={row.id} ({row.day_of_week})")
    return rules


def load_blocked_dates(
    db: Session,
    start: date | None = None,
    end: date | None = None,
) -> set[date]:
    """Blocked dates, optionally limited to [start, end]."""
    query = db.query(CoachBlockedDates.blocked_date)
    if start is not None:
        query = query.filter(CoachBlockedDates.blocked_date >= start)
    if end is not None:
        query = query.filter(CoachBlockedDates.blocked_date <= end)
    return {row.blocked_date for row in query.all()}


def load_scheduled_bookings(db: Session, target_date: date) -> list[BookingSnapshot]:
    """Scheduled bookings starting on target_date."""
    day_start = datetime.combine(target_date, time.min)
    day_end = day_start + timedelta(days=1)

    rows = (
        db.query(SessionBookings)
        .filter(
            SessionBookings.session_date >= day_start,
            SessionBookings.session_date < day_end,
            SessionBookings.status == SCHEDULED,
        )
        .order_by(SessionBookings.session_date)
        .all()
    )
    return [
        BookingSnapshot(
            session_date=row.session_date,
            duration_minutes=row.duration_minutes,
            status=row.status,
        )
        for row in rows
    ]
