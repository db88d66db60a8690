"""
Arena-local time helpers.
Every instant handled by the scheduler is normalised into ARENA_TIMEZONE so
that dates, weekdays and times-of-day are read on the arena's wall clock.
"""

from datetime import datetime, date, time
from typing import Optional, Union
from zoneinfo import ZoneInfo

from arena_scheduler.core.config import ARENA_TIMEZONE


def local_timezone() -> ZoneInfo:
    return ZoneInfo(ARENA_TIMEZONE)


def to_local(instant: datetime) -> datetime:
    """Attach the arena zone to naive instants, convert aware ones into it."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=local_timezone())
    return instant.astimezone(local_timezone())


def parse_instant(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 instant as delivered by the store.
    
    Args:
        value: ISO string (a trailing "Z" is accepted), datetime or None
        
    Returns:
        Arena-local aware datetime, or None for empty values
        
    Raises:
        ValueError: If the string is not ISO-8601
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local(value)
    
    value = value.strip()
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_local(datetime.fromisoformat(value))


def combine(day: date, time_of_day: time) -> datetime:
    """Arena-local instant for a wall-clock time on a date."""
    return datetime.combine(day, time_of_day, tzinfo=local_timezone())


def local_date(instant: Union[date, datetime]) -> date:
    if isinstance(instant, datetime):
        return to_local(instant).date()
    return instant


def now() -> datetime:
    return datetime.now(local_timezone())
