"""
Scheduling Exception Hierarchy

    SchedulingError (base)
    ├── InvalidDuration      ice time <= 0, rejected before evaluation
    ├── SlotConflict         overlap with an existing game in the arena
    ├── BlackoutDate         slot falls on Dec 24, Dec 25 or Dec 31
    ├── NoApplicableSlots    day-designator not offered for this ice time
    ├── PersistenceFailure   the store rejected or failed a write
    └── GameNotFound         the store has no game with that id

None of these are fatal: callers re-query the store and retry.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional


class SchedulingError(Exception):
    """
    Base exception for scheduling failures.

    Attributes:
        message: Human-readable error message
        context: What the caller needs to retry (slot, conflicting game, ...)
    """

    error_code = "scheduling_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses and logging"""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class InvalidDuration(SchedulingError):
    error_code = "invalid_duration"

    def __init__(self, ice_time: Any):
        self.ice_time = ice_time
        super().__init__(
            f"Ice time must be a positive number of minutes, got {ice_time!r}",
            {"ice_time": ice_time},
        )


class SlotConflict(SchedulingError):
    """Raised when the requested start overlaps another game in the same arena."""

    error_code = "slot_conflict"

    def __init__(self, game_id: Any, starts_at: datetime, conflicting_game: Any):
        self.game_id = game_id
        self.starts_at = starts_at
        self.conflicting_game = conflicting_game
        super().__init__(
            f"Game {game_id} at {starts_at.isoformat()} overlaps game "
            f"{conflicting_game.id} ({conflicting_game.starts_at.isoformat()}, "
            f"{conflicting_game.ice_time} min)",
            {
                "game_id": game_id,
                "starts_at": starts_at.isoformat(),
                "conflicting_game_id": conflicting_game.id,
                "conflicting_starts_at": conflicting_game.starts_at.isoformat(),
                "conflicting_ice_time": conflicting_game.ice_time,
            },
        )


class BlackoutDate(SchedulingError):
    error_code = "blackout_date"

    def __init__(self, day: date):
        self.day = day
        super().__init__(
            f"No games may be scheduled on {day.isoformat()}",
            {"date": day.isoformat()},
        )


class NoApplicableSlots(SchedulingError):
    """Raised when a day-designator or time is not in the catalog for this ice time."""

    error_code = "no_applicable_slots"

    def __init__(self, message: str, designator: Optional[str] = None, ice_time: Optional[int] = None):
        self.designator = designator
        self.ice_time = ice_time
        super().__init__(message, {"designator": designator, "ice_time": ice_time})


class PersistenceFailure(SchedulingError):
    error_code = "persistence_failure"

    def __init__(self, game_id: Any, reason: str):
        self.game_id = game_id
        self.reason = reason
        super().__init__(
            f"Failed to persist game {game_id}: {reason}",
            {"game_id": game_id, "reason": reason},
        )


class GameNotFound(SchedulingError):
    error_code = "game_not_found"

    def __init__(self, game_id: Any):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found", {"game_id": game_id})
