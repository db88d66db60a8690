"""
Tests for week resolution, blackout dates and special dates.
"""

from datetime import date

import pytest

from arena_scheduler.models import DayDesignator, SpecialDate
from arena_scheduler.services.calendar_rules import (
    is_blackout, resolve_date, resolve_friday, special_dates_in_week, week_window
)

from conftest import local


@pytest.mark.parametrize("anchor, friday", [
    (date(2025, 1, 6), date(2025, 1, 10)),   # Monday looks ahead
    (date(2025, 1, 8), date(2025, 1, 10)),   # Wednesday
    (date(2025, 1, 9), date(2025, 1, 10)),   # Thursday
    (date(2025, 1, 10), date(2025, 1, 10)),  # Friday
    (date(2025, 1, 11), date(2025, 1, 10)),  # Saturday looks back
    (date(2025, 1, 12), date(2025, 1, 10)),  # Sunday looks back
])
def test_resolve_friday(anchor, friday):
    assert resolve_friday(anchor) == friday


def test_resolve_friday_applies_week_offset():
    assert resolve_friday(date(2025, 1, 10), 1) == date(2025, 1, 17)
    assert resolve_friday(date(2025, 1, 10), -1) == date(2025, 1, 3)


def test_resolve_friday_reads_arena_local_date():
    """A late-evening local instant stays on its local date."""
    assert resolve_friday(local(2025, 1, 12, 23, 30)) == date(2025, 1, 10)


def test_resolve_date_for_each_designator():
    anchor = local(2025, 1, 15, 10, 0)
    assert resolve_date(anchor, DayDesignator.FRIDAY) == date(2025, 1, 17)
    assert resolve_date(anchor, DayDesignator.SATURDAY) == date(2025, 1, 18)
    assert resolve_date(anchor, DayDesignator.SUNDAY) == date(2025, 1, 19)
    assert resolve_date(anchor, DayDesignator.MONDAY) == date(2025, 1, 13)
    assert resolve_date(anchor, DayDesignator.WEDNESDAY) == date(2025, 1, 15)


def test_resolve_date_is_repeatable():
    anchor = local(2025, 3, 1, 10, 0)
    for designator in DayDesignator:
        assert resolve_date(anchor, designator, 3) == resolve_date(anchor, designator, 3)


def test_special_is_inapplicable_in_ordinary_week():
    assert resolve_date(date(2025, 1, 17), DayDesignator.SPECIAL) is None
    assert special_dates_in_week(date(2025, 1, 17)) == []


def test_boxing_day_week():
    assert special_dates_in_week(date(2025, 12, 22)) == [SpecialDate(date(2025, 12, 26), "Boxing Day")]
    assert resolve_date(date(2025, 12, 22), DayDesignator.SPECIAL) == date(2025, 12, 26)


def test_epiphany_week():
    assert resolve_date(date(2025, 1, 10), DayDesignator.SPECIAL) == date(2025, 1, 6)


def test_epiphany_found_across_year_boundary():
    """Week of Mon 2029-12-31 to Sun 2030-01-06 picks up the next year's Epiphany."""
    window = week_window(date(2029, 12, 31))
    assert window.monday == date(2029, 12, 31)
    assert window.sunday == date(2030, 1, 6)
    assert window.special_dates == [SpecialDate(date(2030, 1, 6), "Epiphany")]


def test_special_dates_follow_week_offset():
    assert special_dates_in_week(date(2025, 12, 15), 1) == [SpecialDate(date(2025, 12, 26), "Boxing Day")]
    assert special_dates_in_week(date(2025, 12, 15), 0) == []


@pytest.mark.parametrize("day", [
    date(2025, 12, 24), date(2025, 12, 25), date(2025, 12, 31),
    date(1999, 12, 24), date(2040, 12, 31),
])
def test_blackout_dates(day):
    assert is_blackout(day)


@pytest.mark.parametrize("day", [
    date(2025, 12, 23), date(2025, 12, 26), date(2026, 1, 1), date(2025, 1, 6), date(2025, 11, 24),
])
def test_not_blackout_dates(day):
    assert not is_blackout(day)


def test_blackout_accepts_instants():
    assert is_blackout(local(2025, 12, 24, 21, 15))
    assert not is_blackout(local(2025, 12, 26, 12, 30))


def test_week_window_contains():
    window = week_window(date(2025, 1, 10))
    assert window.contains(date(2025, 1, 6))
    assert window.contains(date(2025, 1, 12))
    assert not window.contains(date(2025, 1, 13))
    assert window.to_dict()["special_dates"] == [{"date": "2025-01-06", "label": "Epiphany"}]
