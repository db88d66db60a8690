"""
Services for slot evaluation, compaction, validation and store integration.
"""

from .availability import AvailabilityEvaluator
from .compactor import DayCompactor
from .manual_override import schedule_manually
from .scheduler import SchedulingService
from .slot_catalog import SlotCatalog
from .validator import ScheduleValidator

__all__ = [
    "AvailabilityEvaluator",
    "DayCompactor",
    "schedule_manually",
    "SchedulingService",
    "SlotCatalog",
    "ScheduleValidator"
]
