# backend/coaching/services/slots/resolver.py
"""
Availability resolver: is a calendar date bookable at all.

Inputs are plain snapshots (weekly rules + blocked dates); nothing here
touches the database, so the same rules apply to the calendar view and
to the write-time re-validation in services/booking/writer.py.
"""

from dataclasses import dataclass
from datetime import date, time, timedelta
from enum import Enum
from typing import Collection, Iterable, Optional, Sequence


class DayOfWeek(str, Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


# date.weekday(): 0 = Monday, 6 = Sunday
_WEEKDAY_NAMES = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]


def day_of_week(target_date: date) -> DayOfWeek:
    return _WEEKDAY_NAMES[target_date.weekday()]


@dataclass(frozen=True)
class WeeklyRule:
    """Active hours for one day of the week."""
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, "day_of_week", DayOfWeek(self.day_of_week))
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start_time must be before end_time for {self.day_of_week.value}: "
                f"{self.start_time} >= {self.end_time}"
            )


def rule_for_date(target_date: date, rules: Iterable[WeeklyRule]) -> Optional[WeeklyRule]:
    """Weekly rule for the date's day of week, or None."""
    name = day_of_week(target_date)
    for rule in rules:
        if rule.day_of_week == name:
            return rule
    return None


def is_date_bookable(
    target_date: date,
    today: date,
    rules: Sequence[WeeklyRule],
    blocked_dates: Collection[date],
) -> bool:
    """
    True when a client may book anything on target_date.

    Past dates, days without an active weekly rule and blocked dates
    are not bookable. A blocked date wins over an active rule.
    """
    if target_date < today:
        return False

    rule = rule_for_date(target_date, rules)
    if rule is None or not rule.is_active:
        return False

    if target_date in blocked_dates:
        return False

    return True


def bookable_dates(
    start: date,
    end: date,
    today: date,
    rules: Sequence[WeeklyRule],
    blocked_dates: Collection[date],
) -> list[date]:
    """Bookable dates in [start, end], ascending."""
    blocked = set(blocked_dates)
    result = []
    current = start
    while current <= end:
        if is_date_bookable(current, today, rules, blocked):
            result.append(current)
        current += timedelta(days=1)
    return result
