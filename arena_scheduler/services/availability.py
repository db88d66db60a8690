"""
Availability evaluation for candidate slots.
Combines the calendar blackout rules, the slot catalog and an in-memory
snapshot of an arena's games. Performs no I/O.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from arena_scheduler.core.clock import local_date, to_local
from arena_scheduler.core.config import MAX_WEEKS_AHEAD
from arena_scheduler.core.exceptions import BlackoutDate, SlotConflict
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import BookingIndex, Game, Slot, validate_duration
from arena_scheduler.services.calendar_rules import is_blackout
from arena_scheduler.services.slot_catalog import SlotCatalog

logger = get_logger(__name__)


class AvailabilityEvaluator:
    """
    Decides which slots are free for a candidate game.
    
    The snapshot is taken as given; freshness is the caller's concern. The
    candidate itself is skipped by id when scanning for conflicts.
    """
    
    def __init__(self, games: Iterable[Game], catalog: Optional[SlotCatalog] = None):
        self.games = list(games)
        self.catalog = catalog or SlotCatalog()
        self._indexes: Dict[int, BookingIndex] = {}
    
    def _index_for(self, arena_id: int) -> BookingIndex:
        if arena_id not in self._indexes:
            self._indexes[arena_id] = BookingIndex(g for g in self.games if g.arena_id == arena_id)
        return self._indexes[arena_id]
    
    def find_conflict(self, candidate: Game, slot_instant: datetime) -> Optional[Game]:
        """First game in the candidate's arena overlapping the candidate placed at slot_instant."""
        validate_duration(candidate.ice_time)
        return self._index_for(candidate.arena_id).find_conflict(
            to_local(slot_instant), candidate.ice_time, exclude_id=candidate.id
        )
    
    def is_available(self, candidate: Game, slot_instant: datetime) -> bool:
        validate_duration(candidate.ice_time)
        if is_blackout(slot_instant):
            return False
        return self.find_conflict(candidate, slot_instant) is None
    
    def check_slot(self, candidate: Game, slot_instant: datetime) -> None:
        """
        Raise instead of returning False.
        
        Raises:
            BlackoutDate: If the slot falls on a blackout date
            SlotConflict: If another game in the arena overlaps
        """
        validate_duration(candidate.ice_time)
        if is_blackout(slot_instant):
            raise BlackoutDate(local_date(slot_instant))
        
        conflict = self.find_conflict(candidate, slot_instant)
        if conflict is not None:
            logger.info(f"Slot {slot_instant.isoformat()} for game {candidate.id} conflicts with game {conflict.id}")
            raise SlotConflict(candidate.id, to_local(slot_instant), conflict)
    
    def evaluate_week(self, candidate: Game, anchor: Optional[datetime] = None, week_offset: int = 0) -> List[Slot]:
        """Every catalog slot of the week, each marked available or not."""
        validate_duration(candidate.ice_time)
        if anchor is None:
            anchor = candidate.starts_at
        
        slots = self.catalog.slots_for_week(candidate.ice_time, anchor, week_offset)
        for slot in slots:
            slot.available = self.is_available(candidate, slot.starts_at)
        return slots
    
    def available_slots(self, candidate: Game, anchor: Optional[datetime] = None, week_offset: int = 0) -> List[Slot]:
        return [s for s in self.evaluate_week(candidate, anchor, week_offset) if s.available]
    
    def all_slots_exhausted(self, candidate: Game, anchor: Optional[datetime] = None, week_offset: int = 0) -> bool:
        """
        True when no slot of the week is available, blacked-out weeks included.
        A week with no applicable slots at all also counts as exhausted.
        """
        return not any(s.available for s in self.evaluate_week(candidate, anchor, week_offset))
    
    def next_open_week(
        self,
        candidate: Game,
        anchor: Optional[datetime] = None,
        start_offset: int = 0,
        max_weeks: int = MAX_WEEKS_AHEAD,
    ) -> Optional[int]:
        """First week offset with a free slot among max_weeks weeks from start_offset, else None."""
        for week_offset in range(start_offset, start_offset + max_weeks):
            if not self.all_slots_exhausted(candidate, anchor, week_offset):
                return week_offset
        return None
