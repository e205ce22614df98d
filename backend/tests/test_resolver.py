from datetime import date, time, timedelta

import pytest

from coaching.services.slots import DayOfWeek, WeeklyRule, bookable_dates, is_date_bookable, rule_for_date
from coaching.services.slots.resolver import day_of_week
from coaching.services.slots.snapshot import DEFAULT_TEMPLATE

TODAY = date(2030, 1, 2)


def next_weekday(from_date: date, weekday: int) -> date:
    days_ahead = (weekday - from_date.weekday()) % 7 or 7
    return from_date + timedelta(days=days_ahead)


def test_day_of_week_names():
    monday = next_weekday(TODAY, 0)
    assert day_of_week(monday) == DayOfWeek.MONDAY
    assert day_of_week(monday + timedelta(days=6)) == DayOfWeek.SUNDAY


def test_weekly_rule_requires_start_before_end():
    with pytest.raises(ValueError):
        WeeklyRule(DayOfWeek.MONDAY, time(17, 0), time(9, 0))
    with pytest.raises(ValueError):
        WeeklyRule(DayOfWeek.MONDAY, time(9, 0), time(9, 0))


def test_weekly_rule_accepts_plain_day_name():
    rule = WeeklyRule("tuesday", time(9, 0), time(12, 0))
    assert rule.day_of_week is DayOfWeek.TUESDAY


def test_active_weekday_is_bookable():
    monday = next_weekday(TODAY, 0)
    assert is_date_bookable(monday, TODAY, DEFAULT_TEMPLATE, set())


def test_past_date_is_not_bookable():
    yesterday = TODAY - timedelta(days=1)
    rules = [WeeklyRule(day_of_week(yesterday), time(9, 0), time(17, 0))]
    assert not is_date_bookable(yesterday, TODAY, rules, set())


def test_today_is_bookable_when_rule_is_active():
    rules = [WeeklyRule(day_of_week(TODAY), time(9, 0), time(17, 0))]
    assert is_date_bookable(TODAY, TODAY, rules, set())


def test_missing_rule_is_not_bookable():
    saturday = next_weekday(TODAY, 5)
    assert not is_date_bookable(saturday, TODAY, DEFAULT_TEMPLATE, set())


def test_inactive_rule_is_not_bookable():
    monday = next_weekday(TODAY, 0)
    rules = [WeeklyRule(DayOfWeek.MONDAY, time(9, 0), time(17, 0), is_active=False)]
    assert not is_date_bookable(monday, TODAY, rules, set())


def test_blocked_date_overrides_active_rule_all_year():
    all_days = [WeeklyRule(day, time(8, 0), time(20, 0)) for day in DayOfWeek]
    for offset in range(365):
        target = TODAY + timedelta(days=offset)
        assert is_date_bookable(target, TODAY, all_days, set())
        assert not is_date_bookable(target, TODAY, all_days, {target})


def test_rule_for_date():
    tuesday = next_weekday(TODAY, 1)
    rule = rule_for_date(tuesday, DEFAULT_TEMPLATE)
    assert rule.day_of_week == DayOfWeek.TUESDAY
    assert rule_for_date(next_weekday(TODAY, 6), DEFAULT_TEMPLATE) is None


def test_bookable_dates_skips_weekends_and_blocked():
    monday = next_weekday(TODAY, 0)
    wednesday = monday + timedelta(days=2)
    result = bookable_dates(monday, monday + timedelta(days=13), TODAY, DEFAULT_TEMPLATE, {wednesday})

    assert len(result) == 9
    assert wednesday not in result
    assert all(d.weekday() < 5 for d in result)
    assert result == sorted(result)
