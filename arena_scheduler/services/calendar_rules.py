"""
Calendar rules for the Arena Ice-Time Scheduling System.
Maps day-designators and week offsets to concrete dates and classifies
blackout and special dates. All functions are pure.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from arena_scheduler.core.clock import local_date
from arena_scheduler.core.config import BLACKOUT_DATES, SPECIAL_DATES
from arena_scheduler.models import DayDesignator, SpecialDate, WeekWindow

DateLike = Union[date, datetime]


def resolve_friday(anchor: DateLike, week_offset: int = 0) -> date:
    """
    Friday of the anchor's week, shifted by week_offset weeks.
    
    Saturday and Sunday belong to the Friday just before them; Monday to
    Thursday look ahead to the coming Friday.
    """
    anchor_date = local_date(anchor)
    weekday = anchor_date.weekday()  # 0=Monday, 6=Sunday
    
    if weekday == 6:
        delta = -2
    elif weekday == 5:
        delta = -1
    else:
        delta = 4 - weekday
    
    return anchor_date + timedelta(days=delta + week_offset * 7)


def is_blackout(day: DateLike) -> bool:
    """True on Dec 24, Dec 25 and Dec 31 of any year."""
    day = local_date(day)
    return (day.day, day.month) in BLACKOUT_DATES


def _week_bounds(friday: date):
    return friday - timedelta(days=4), friday + timedelta(days=2)


def special_dates_in_week(anchor: DateLike, week_offset: int = 0) -> List[SpecialDate]:
    """
    Special bookable dates inside [monday, sunday] of the resolved week.
    
    Both the week's year and the following year are tried so a January
    date shows up when the week straddles New Year.
    """
    monday, sunday = _week_bounds(resolve_friday(anchor, week_offset))
    
    found = []
    for year in (monday.year, monday.year + 1):
        for day, month, label in SPECIAL_DATES:
            candidate = date(year, month, day)
            if monday <= candidate <= sunday:
                found.append(SpecialDate(date=candidate, label=label))
    
    return sorted(found, key=lambda s: s.date)


def week_window(anchor: DateLike, week_offset: int = 0) -> WeekWindow:
    friday = resolve_friday(anchor, week_offset)
    return WeekWindow(
        monday=friday - timedelta(days=4),
        wednesday=friday - timedelta(days=2),
        friday=friday,
        saturday=friday + timedelta(days=1),
        sunday=friday + timedelta(days=2),
        special_dates=special_dates_in_week(anchor, week_offset),
    )


def resolve_date(anchor: DateLike, designator: DayDesignator, week_offset: int = 0) -> Optional[date]:
    """
    Concrete date of a day-designator in the anchor's week (plus offset).
    
    Returns None for SPECIAL when the week holds no special date; callers
    must not offer the designator in that case.
    """
    return week_window(anchor, week_offset).date_for(designator)


def special_label(day: DateLike) -> Optional[str]:
    day = local_date(day)
    for special_day, month, label in SPECIAL_DATES:
        if (day.day, day.month) == (special_day, month):
            return label
    return None
