"""
Slot catalog: the fixed, ordered start times offered per day-designator.
The table is configuration (see core.config); this module only reads it.
"""

from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Sequence

from arena_scheduler.core.clock import combine, to_local
from arena_scheduler.core.config import (
    SHORT_FORMAT_ICE_TIME, SHORT_FORMAT_ONLY_DAYS, get_slot_catalog_config
)
from arena_scheduler.core.exceptions import NoApplicableSlots
from arena_scheduler.models import DayDesignator, Slot, validate_duration
from arena_scheduler.services.calendar_rules import special_label, week_window

_WEEKDAY_DESIGNATORS = {
    0: DayDesignator.MONDAY,
    2: DayDesignator.WEDNESDAY,
    4: DayDesignator.FRIDAY,
    5: DayDesignator.SATURDAY,
    6: DayDesignator.SUNDAY,
}


def _parse_time_of_day(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValueError(f"Slot times must be HH:MM strings, got {value!r}")


class SlotCatalog:
    """
    Lookup table of start times keyed by day-designator.
    
    Designators listed as short-format-only exist in the catalog solely for
    games whose ice time equals the short-format duration; for every other
    duration they are absent, not merely unavailable.
    """
    
    def __init__(
        self,
        entries: Optional[Dict[str, Sequence[str]]] = None,
        short_format_only: Optional[Iterable[str]] = None,
        short_format_ice_time: int = SHORT_FORMAT_ICE_TIME,
    ):
        if entries is None:
            entries = get_slot_catalog_config()
        if short_format_only is None:
            short_format_only = SHORT_FORMAT_ONLY_DAYS
        
        self.entries: Dict[DayDesignator, List[time]] = {}
        for name, times in entries.items():
            designator = DayDesignator(name)
            self.entries[designator] = sorted(_parse_time_of_day(t) for t in times)
        
        self.short_format_only = {DayDesignator(name) for name in short_format_only}
        self.short_format_ice_time = short_format_ice_time
    
    def is_applicable(self, designator: DayDesignator, ice_time: int) -> bool:
        validate_duration(ice_time)
        if designator not in self.entries or not self.entries[designator]:
            return False
        if designator in self.short_format_only:
            return ice_time == self.short_format_ice_time
        return True
    
    def designators_for(self, ice_time: int) -> List[DayDesignator]:
        """Designators offered for this ice time, in DayDesignator order."""
        return [d for d in DayDesignator if self.is_applicable(d, ice_time)]
    
    def times_for(self, designator: DayDesignator, ice_time: int) -> List[time]:
        if not self.is_applicable(designator, ice_time):
            raise NoApplicableSlots(
                f"{designator.value.capitalize()} is not offered for {ice_time}-minute games",
                designator=designator.value,
                ice_time=ice_time,
            )
        return list(self.entries[designator])
    
    def slots_for_week(self, ice_time: int, anchor, week_offset: int = 0) -> List[Slot]:
        """
        Candidate slots for one week, not yet checked against bookings.
        
        Designators that resolve to no date (SPECIAL in an ordinary week)
        contribute nothing.
        """
        window = week_window(anchor, week_offset)
        slots = []
        
        for designator in self.designators_for(ice_time):
            day = window.date_for(designator)
            if day is None:
                continue
            label = special_label(day) if designator == DayDesignator.SPECIAL else None
            for start_time in self.entries[designator]:
                slots.append(Slot(
                    designator=designator,
                    start_time=start_time,
                    starts_at=combine(day, start_time),
                    label=label,
                ))
        
        return slots
    
    def designators_on(self, day: date) -> List[DayDesignator]:
        """Designators whose catalog entries may fall on this date."""
        designators = []
        if special_label(day) is not None:
            designators.append(DayDesignator.SPECIAL)
        weekday_designator = _WEEKDAY_DESIGNATORS.get(day.weekday())
        if weekday_designator is not None:
            designators.append(weekday_designator)
        return designators
    
    def match(self, instant: datetime, ice_time: int) -> Slot:
        """
        Catalog slot corresponding to a concrete instant.
        
        Raises:
            NoApplicableSlots: If no designator offered for this ice time has
                that start time on that date
        """
        instant = to_local(instant)
        day = instant.date()
        start_time = instant.time()
        
        for designator in self.designators_on(day):
            if not self.is_applicable(designator, ice_time):
                continue
            if start_time in self.entries[designator]:
                label = special_label(day) if designator == DayDesignator.SPECIAL else None
                return Slot(designator=designator, start_time=start_time, starts_at=instant, label=label)
        
        raise NoApplicableSlots(
            f"{instant:%A %Y-%m-%d %H:%M} is not a catalog slot for {ice_time}-minute games",
            designator=self.designators_on(day)[0].value if self.designators_on(day) else None,
            ice_time=ice_time,
        )
