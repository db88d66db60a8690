"""
Interval Model for booked ice time.
A game occupies the half-open span [starts_at, starts_at + ice_time).
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

from arena_scheduler.core.exceptions import InvalidDuration


def validate_duration(ice_time: Any) -> int:
    """Return ice_time unchanged, or raise InvalidDuration if it is not a positive int."""
    if isinstance(ice_time, bool) or not isinstance(ice_time, int) or ice_time <= 0:
        raise InvalidDuration(ice_time)
    return ice_time


def overlaps(a_start: datetime, a_duration: int, b_start: datetime, b_duration: int) -> bool:
    """
    Check whether two bookings overlap.
    
    Back-to-back bookings (one ends exactly when the other starts) do not overlap.
    Durations are minutes and must already be validated as positive.
    """
    a_end = a_start + timedelta(minutes=a_duration)
    b_end = b_start + timedelta(minutes=b_duration)
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class Interval:
    start: datetime
    duration: int
    
    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration)
    
    def overlaps_with(self, other: 'Interval') -> bool:
        return overlaps(self.start, self.duration, other.start, other.duration)


class BookingIndex:
    """
    One arena's games sorted by start time.
    
    A conflict for [start, start + d) can only come from a game that starts
    before start + d and after start - longest_duration, so the lookup scans
    that bisected range instead of every game. Overlap semantics are those
    of overlaps().
    """
    
    def __init__(self, games: Iterable[Any]):
        self._games = sorted(games, key=lambda g: (g.starts_at, g.id))
        self._starts = [g.starts_at for g in self._games]
        self._longest = max((g.ice_time for g in self._games), default=0)
    
    def __len__(self) -> int:
        return len(self._games)
    
    @property
    def games(self) -> List[Any]:
        return list(self._games)
    
    def find_conflict(self, start: datetime, duration: int, exclude_id: Any = None) -> Optional[Any]:
        """Return the earliest game overlapping [start, start + duration), skipping exclude_id."""
        if not self._games:
            return None
        
        end = start + timedelta(minutes=duration)
        lo = bisect_right(self._starts, start - timedelta(minutes=self._longest))
        hi = bisect_left(self._starts, end)
        
        for game in self._games[lo:hi]:
            if exclude_id is not None and game.id == exclude_id:
                continue
            if overlaps(start, duration, game.starts_at, game.ice_time):
                return game
        return None
    
    def find_all_conflicts(self, start: datetime, duration: int, exclude_id: Any = None) -> List[Any]:
        if not self._games:
            return []
        
        end = start + timedelta(minutes=duration)
        lo = bisect_right(self._starts, start - timedelta(minutes=self._longest))
        hi = bisect_left(self._starts, end)
        return [
            game for game in self._games[lo:hi]
            if not (exclude_id is not None and game.id == exclude_id)
            and overlaps(start, duration, game.starts_at, game.ice_time)
        ]
