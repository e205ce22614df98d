from datetime import date, datetime, time, timedelta

from coaching.models import CoachBlockedDates
from coaching.services.slots import (
    SessionType,
    SlotsRedisStore,
    calculate_calendar,
    calculate_day_availability,
    get_booking_config,
    invalidate_window_cache,
)
from coaching.services.slots.availability import calculate_window_slots
from coaching.services.slots.redis_store import EMPTY_SENTINEL
from coaching.services.slots.snapshot import DEFAULT_TEMPLATE
from coaching.services.booking import create_booking

TODAY = date(2030, 1, 2)
NOW = datetime.combine(TODAY, time(8, 0))


def next_weekday(from_date: date, weekday: int) -> date:
    days_ahead = (weekday - from_date.weekday()) % 7 or 7
    return from_date + timedelta(days=days_ahead)


MONDAY = next_weekday(TODAY, 0)
SATURDAY = MONDAY + timedelta(days=5)


def test_window_slots_carry_lead_time_expiry():
    config = get_booking_config()
    slots = calculate_window_slots(MONDAY, list(DEFAULT_TEMPLATE), set(), 60, config, NOW)

    assert [t for t, _ in slots] == ["09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00"]
    first_start = datetime.combine(MONDAY, time(9, 0))
    assert slots[0][1] == (first_start - timedelta(minutes=config.min_lead_minutes)).timestamp()


def test_store_counts_only_live_slots(memory_redis):
    store = SlotsRedisStore(memory_redis)
    now = datetime.combine(MONDAY, time(10, 0))
    store.store_multiple_days(60, {
        MONDAY: [
            ("09:00", (now - timedelta(hours=1)).timestamp()),
            ("12:00", (now + timedelta(hours=1)).timestamp()),
            ("13:00", (now + timedelta(hours=2)).timestamp()),
        ],
        SATURDAY: [],
    })

    counts = store.mget_counts(60, [MONDAY, SATURDAY, MONDAY + timedelta(days=1)], now)
    assert counts == {MONDAY: 2, SATURDAY: 0, MONDAY + timedelta(days=1): None}
    assert EMPTY_SENTINEL in memory_redis.zsets[f"slots:window:60:{SATURDAY.isoformat()}"]


def test_invalidate_by_date_and_all(memory_redis):
    store = SlotsRedisStore(memory_redis)
    store.store_multiple_days(60, {MONDAY: [("09:00", 1.0)], SATURDAY: []})
    store.store_multiple_days(30, {MONDAY: [("09:00", 1.0)]})

    assert invalidate_window_cache(memory_redis, [MONDAY]) == 2
    assert memory_redis.keys("slots:window:*") == [f"slots:window:60:{SATURDAY.isoformat()}"]
    assert invalidate_window_cache(memory_redis) == 1
    assert invalidate_window_cache(None) == 0


def test_calendar_uses_and_fills_cache(db, memory_redis):
    start, end = MONDAY, MONDAY + timedelta(days=6)
    days = calculate_calendar(db, SessionType.ONLINE_SESSION, start, end, redis=memory_redis, now=NOW)

    assert [d["date"] for d in days] == [start + timedelta(days=i) for i in range(7)]
    assert [d["has_slots"] for d in days] == [True] * 5 + [False] * 2
    assert days[0]["open_slots_count"] == 8
    assert len(memory_redis.keys("slots:window:60:*")) == 7

    # A blocked date only shows up once its cache entry is invalidated
    db.add(CoachBlockedDates(blocked_date=MONDAY))
    db.commit()
    cached = calculate_calendar(db, SessionType.ONLINE_SESSION, start, end, redis=memory_redis, now=NOW)
    assert cached[0]["has_slots"] is True

    invalidate_window_cache(memory_redis, [MONDAY])
    fresh = calculate_calendar(db, SessionType.ONLINE_SESSION, start, end, redis=memory_redis, now=NOW)
    assert fresh[0]["has_slots"] is False


def test_calendar_without_redis(db):
    days = calculate_calendar(db, SessionType.IN_PERSON_SESSION, MONDAY, MONDAY, now=NOW)
    assert days == [{"date": MONDAY, "has_slots": True, "open_slots_count": 5}]


def test_day_availability_subtracts_bookings(db):
    create_booking(db, "client-1", SessionType.ONLINE_SESSION, MONDAY, time(11, 0), now=NOW)

    result = calculate_day_availability(db, SessionType.ONLINE_SESSION, MONDAY, now=NOW)
    assert result["is_bookable"] is True
    assert result["duration_minutes"] == 60
    assert result["available_times"] == ["09:00", "10:00", "12:00", "13:00", "14:00", "15:00", "16:00"]


def test_day_availability_for_closed_day(db):
    result = calculate_day_availability(db, SessionType.ONLINE_SESSION, SATURDAY, now=NOW)
    assert result["is_bookable"] is False
    assert result["available_times"] == []
