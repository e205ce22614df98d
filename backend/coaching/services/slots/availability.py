# backend/coaching/services/slots/availability.py
"""
Client-facing availability: calendar of bookable days and slots of a day.

Level 1 (calendar): window slots from weekly rules, blocked dates and lead
time, cached in Redis Sorted Sets when a client is configured.
Level 2 (day): Level 1 minus existing scheduled bookings, calculated
on-the-fly from a fresh snapshot.

Both levels are advisory; the booking writer re-validates on commit.
"""

import logging
from datetime import date, datetime, timedelta

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from .config import BookingConfig, SessionType, get_booking_config
from .generator import generate_slots
from .redis_store import SlotsRedisStore
from .resolver import WeeklyRule, bookable_dates, is_date_bookable, rule_for_date
from .snapshot import load_blocked_dates, load_rules, load_scheduled_bookings

logger = logging.getLogger(__name__)


def calculate_window_slots(
    target_date: date,
    rules: list[WeeklyRule],
    blocked_dates: set[date],
    duration_minutes: int,
    config: BookingConfig,
    now: datetime,
) -> list[tuple[str, float]]:
    """
    Window slots of a day, ignoring bookings.

    Returns:
        List of (time_str, expire_ts) pairs; expire_ts is the moment the
        slot drops inside the lead time. Empty list = no slots.
    """
    lead = timedelta(minutes=config.min_lead_minutes)
    slots = generate_slots(
        target_date,
        rule_for_date(target_date, rules),
        duration_minutes,
        (),
        now,
        lead,
        blocked_dates,
    )
    result = []
    for start in slots:
        slot_dt = datetime.combine(target_date, start)
        result.append((start.strftime("%H:%M"), (slot_dt - lead).timestamp()))
    return result


def calculate_calendar(
    db: Session,
    session_type: SessionType,
    start_date: date,
    end_date: date,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
    now: datetime | None = None,
) -> list[dict]:
    """
    Per-day status for [start_date, end_date].

    Returns:
        List of {"date", "has_slots", "open_slots_count"} dicts.
    """
    config = config or get_booking_config()
    now = now or datetime.now()
    duration = config.offer_for(session_type).duration_minutes

    dates = []
    current = start_date
    while current <= end_date:
        dates.append(current)
        current += timedelta(days=1)

    cached_counts: dict[date, int | None] = {}
    store = SlotsRedisStore(redis, config) if redis is not None else None
    if store is not None:
        try:
            cached_counts = store.mget_counts(duration, dates, now)
        except RedisError as e:
            logger.error(f"Slots cache read failed, calculating: {e}")
            store = None

    rules: list[WeeklyRule] | None = None
    blocked: set[date] = set()
    open_dates: set[date] = set()
    days_to_store: dict[date, list[tuple[str, float]]] = {}
    days = []

    for dt in dates:
        count = cached_counts.get(dt)

        if count is None:
            if rules is None:
                rules = load_rules(db, config)
                blocked = load_blocked_dates(db, start_date, end_date)
                open_dates = set(bookable_dates(start_date, end_date, now.date(), rules, blocked))
            if dt in open_dates:
                slots = calculate_window_slots(dt, rules, blocked, duration, config, now)
            else:
                slots = []
            days_to_store[dt] = slots
            count = len(slots)

        days.append({
            "date": dt,
            "has_slots": count > 0,
            "open_slots_count": count,
        })

    if store is not None and days_to_store:
        try:
            store.store_multiple_days(duration, days_to_store)
        except RedisError as e:
            logger.error(f"Slots cache write failed: {e}")

    return days


def calculate_day_availability(
    db: Session,
    session_type: SessionType,
    target_date: date,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Exact slots for a session type on a day.

    Returns:
        Dict for SlotsDayResponse.
    """
    config = config or get_booking_config()
    now = now or datetime.now()
    offer = config.offer_for(session_type)

    rules = load_rules(db, config)
    blocked = load_blocked_dates(db, target_date, target_date)
    bookable = is_date_bookable(target_date, now.date(), rules, blocked)

    times: list[str] = []
    if bookable:
        slots = generate_slots(
            target_date,
            rule_for_date(target_date, rules),
            offer.duration_minutes,
            load_scheduled_bookings(db, target_date),
            now,
            timedelta(minutes=config.min_lead_minutes),
            blocked,
        )
        times = [start.strftime("%H:%M") for start in slots]

    return {
        "date": target_date,
        "session_type": SessionType(session_type).value,
        "duration_minutes": offer.duration_minutes,
        "price": offer.price,
        "is_bookable": bookable,
        "available_times": times,
    }
