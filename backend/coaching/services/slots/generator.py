# backend/coaching/services/slots/generator.py
"""
Slot generator: start times a client may pick on one date.

Candidates step by the session duration from the rule's start time;
the last candidate ends exactly at the rule's end time at the latest.

Removed:
✓ candidates overlapping busy time of scheduled bookings
✓ candidates starting before now + lead time

Busy time is a merged list of [start, end) minute intervals, so bookings
of different durations share one representation.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Collection, Iterable, Iterator, Optional

from .config import minutes_to_time, time_to_minutes
from .resolver import WeeklyRule, is_date_bookable

SCHEDULED = "scheduled"


@dataclass(frozen=True)
class BookingSnapshot:
    """Read-only view of a persisted booking."""
    session_date: datetime
    duration_minutes: int
    status: str = SCHEDULED


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Closed-open interval overlap: [a) and [b) share at least one minute."""
    return start_a < end_b and start_b < end_a


def busy_intervals(bookings: Iterable, target_date: date) -> list[tuple[int, int]]:
    """
    Merged [start, end) minute intervals held by scheduled bookings on target_date.

    Accepts anything with session_date / duration_minutes / status
    (ORM rows or BookingSnapshot).
    """
    raw: list[tuple[int, int]] = []
    for booking in bookings:
        if booking.status != SCHEDULED:
            continue
        start_dt = booking.session_date
        if start_dt.date() != target_date:
            continue
        start_min = start_dt.hour * 60 + start_dt.minute
        raw.append((start_min, start_min + booking.duration_minutes))

    raw.sort()
    merged: list[tuple[int, int]] = []
    for start_min, end_min in raw:
        if merged and start_min <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end_min))
        else:
            merged.append((start_min, end_min))
    return merged


class SlotSequence:
    """
    Lazy, finite, restartable sequence of slot start times.

    Every iteration recomputes from the captured inputs, so the sequence
    can be consumed more than once and always yields ascending times.
    """

    def __init__(
        self,
        target_date: date,
        rule: Optional[WeeklyRule],
        duration_minutes: int,
        busy: list[tuple[int, int]],
        earliest_start: datetime,
        bookable: bool,
    ):
        self.target_date = target_date
        self.rule = rule
        self.duration_minutes = duration_minutes
        self.busy = busy
        self.earliest_start = earliest_start
        self.bookable = bookable

    def __iter__(self) -> Iterator[time]:
        if not self.bookable or self.rule is None:
            return

        start_min = time_to_minutes(self.rule.start_time)
        last_start = time_to_minutes(self.rule.end_time) - self.duration_minutes
        day_start = datetime.combine(self.target_date, time.min)
        busy_idx = 0

        t = start_min
        while t <= last_start:
            end_min = t + self.duration_minutes

            # busy is sorted; skip intervals that end before this candidate
            while busy_idx < len(self.busy) and self.busy[busy_idx][1] <= t:
                busy_idx += 1

            taken = busy_idx < len(self.busy) and intervals_overlap(
                t, end_min, *self.busy[busy_idx]
            )
            too_soon = day_start + timedelta(minutes=t) < self.earliest_start

            if not taken and not too_soon:
                yield minutes_to_time(t)

            t += self.duration_minutes

    def __repr__(self) -> str:
        return f"SlotSequence({self.target_date.isoformat()}, {[s.strftime('%H:%M') for s in self]})"


def generate_slots(
    target_date: date,
    rule: Optional[WeeklyRule],
    duration_minutes: int,
    existing_bookings: Iterable,
    now: datetime,
    min_lead_time: timedelta,
    blocked_dates: Collection[date] = (),
) -> SlotSequence:
    """
    Slots for target_date under rule.

    Returns an empty sequence when the date is not bookable
    (past, no/inactive rule, rule for another weekday, blocked).
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")

    rules = [rule] if rule is not None else []
    bookable = is_date_bookable(target_date, now.date(), rules, blocked_dates)

    return SlotSequence(
        target_date=target_date,
        rule=rule,
        duration_minutes=duration_minutes,
        busy=busy_intervals(existing_bookings, target_date),
        earliest_start=now + min_lead_time,
        bookable=bookable,
    )
