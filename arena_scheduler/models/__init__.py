"""
Data models for the scheduling system.
"""

from .intervals import Interval, BookingIndex, overlaps, validate_duration
from .models import (
    DayDesignator,
    Game,
    Slot,
    SpecialDate,
    WeekWindow,
    CompactionChange,
    CompactionResult,
    SchedulingConstraint,
    ScheduleValidationResult
)

__all__ = [
    "Interval",
    "BookingIndex",
    "overlaps",
    "validate_duration",
    "DayDesignator",
    "Game",
    "Slot",
    "SpecialDate",
    "WeekWindow",
    "CompactionChange",
    "CompactionResult",
    "SchedulingConstraint",
    "ScheduleValidationResult"
]
