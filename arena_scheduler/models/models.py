"""
Data models for the Arena Ice-Time Scheduling System.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date, time, timedelta
from typing import Any, Dict, List, Optional
from enum import Enum

from arena_scheduler.core.clock import parse_instant, to_local
from arena_scheduler.core.config import UNSET_START_TIME
from arena_scheduler.models.intervals import validate_duration


class DayDesignator(Enum):
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    MONDAY = "monday"
    WEDNESDAY = "wednesday"
    SPECIAL = "special"


@dataclass
class Game:
    id: int
    home_team_id: int
    away_team_id: int
    league_id: int
    arena_id: int
    starts_at: datetime
    ice_time: int
    scheduled_at: Optional[datetime] = None  # None until confirmed by the scheduling flow
    
    def __post_init__(self):
        self.starts_at = parse_instant(self.starts_at)
        self.scheduled_at = parse_instant(self.scheduled_at)
    
    def __str__(self):
        return f"Game {self.id}: {self.home_team_id} vs {self.away_team_id} at arena {self.arena_id} {self.starts_at:%Y-%m-%d %H:%M} ({self.ice_time} min)"
    
    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.ice_time)
    
    @property
    def is_confirmed(self) -> bool:
        return self.scheduled_at is not None
    
    @property
    def is_placeholder(self) -> bool:
        """True while the game still sits at the unset time-of-day."""
        return self.starts_at.time() == UNSET_START_TIME
    
    def moved_to(self, starts_at: datetime, scheduled_at: Optional[datetime] = None) -> 'Game':
        """Copy of this game at a new start; scheduled_at is kept unless given."""
        return replace(
            self,
            starts_at=to_local(starts_at),
            scheduled_at=scheduled_at if scheduled_at is not None else self.scheduled_at,
        )
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Game':
        """
        Build a game from a store row.
        
        Raises:
            InvalidDuration: If ice_time is missing or not a positive int
        """
        return cls(
            id=row['id'],
            home_team_id=row['home_team_id'],
            away_team_id=row['away_team_id'],
            league_id=row['league_id'],
            arena_id=row['arena_id'],
            starts_at=row['starts_at'],
            ice_time=validate_duration(row.get('ice_time')),
            scheduled_at=row.get('scheduled_at'),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "league_id": self.league_id,
            "arena_id": self.arena_id,
            "starts_at": self.starts_at.isoformat(),
            "ice_time": self.ice_time,
            "scheduled_at": self.scheduled_at.isoformat() if self.scheduled_at else None,
        }


@dataclass
class Slot:
    """A catalog start time bound to a concrete date. Never cached across queries."""
    designator: DayDesignator
    start_time: time
    starts_at: datetime
    label: Optional[str] = None
    available: bool = True
    
    def __str__(self):
        name = self.label or self.designator.value.capitalize()
        return f"{name} {self.starts_at:%Y-%m-%d %H:%M}"
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "designator": self.designator.value,
            "time": self.start_time.strftime("%H:%M"),
            "date": self.starts_at.date().isoformat(),
            "starts_at": self.starts_at.isoformat(),
            "label": self.label,
            "available": self.available,
        }


@dataclass(frozen=True)
class SpecialDate:
    date: date
    label: str


@dataclass
class WeekWindow:
    """The concrete dates one week offset resolves to."""
    monday: date
    wednesday: date
    friday: date
    saturday: date
    sunday: date
    special_dates: List[SpecialDate] = field(default_factory=list)
    
    def contains(self, day: date) -> bool:
        return self.monday <= day <= self.sunday
    
    def date_for(self, designator: DayDesignator) -> Optional[date]:
        if designator == DayDesignator.SPECIAL:
            return self.special_dates[0].date if self.special_dates else None
        return getattr(self, designator.value)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "monday": self.monday.isoformat(),
            "wednesday": self.wednesday.isoformat(),
            "friday": self.friday.isoformat(),
            "saturday": self.saturday.isoformat(),
            "sunday": self.sunday.isoformat(),
            "special_dates": [
                {"date": s.date.isoformat(), "label": s.label} for s in self.special_dates
            ],
        }


@dataclass
class CompactionChange:
    game_id: int
    old_starts_at: datetime
    new_starts_at: datetime


@dataclass
class CompactionResult:
    """Outcome of a best-effort compaction batch. Applied updates are never rolled back."""
    arena_id: int
    date: date
    changes: List[CompactionChange] = field(default_factory=list)
    succeeded: List[int] = field(default_factory=list)
    failed: Dict[int, str] = field(default_factory=dict)
    games_considered: int = 0
    
    @property
    def nothing_to_compact(self) -> bool:
        return self.games_considered == 0
    
    @property
    def is_complete(self) -> bool:
        return not self.failed
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "arena_id": self.arena_id,
            "date": self.date.isoformat(),
            "games_considered": self.games_considered,
            "nothing_to_compact": self.nothing_to_compact,
            "changes": [
                {
                    "game_id": c.game_id,
                    "old_starts_at": c.old_starts_at.isoformat(),
                    "new_starts_at": c.new_starts_at.isoformat(),
                }
                for c in self.changes
            ],
            "succeeded": list(self.succeeded),
            "failed": {str(game_id): reason for game_id, reason in self.failed.items()},
        }


@dataclass
class SchedulingConstraint:
    constraint_type: str
    severity: str
    description: str
    affected_games: List[Game] = field(default_factory=list)
    penalty_score: float = 0.0


@dataclass
class ScheduleValidationResult:
    is_valid: bool
    hard_constraint_violations: List[SchedulingConstraint] = field(default_factory=list)
    soft_constraint_violations: List[SchedulingConstraint] = field(default_factory=list)
    total_penalty_score: float = 0.0
    
    def add_violation(self, constraint: SchedulingConstraint):
        if constraint.severity == 'hard':
            self.hard_constraint_violations.append(constraint)
            self.is_valid = False
        else:
            self.soft_constraint_violations.append(constraint)
        self.total_penalty_score += constraint.penalty_score
    
    def get_summary(self) -> str:
        summary = f"Schedule Valid: {self.is_valid}\n"
        summary += f"Hard Violations: {len(self.hard_constraint_violations)}\n"
        summary += f"Soft Violations: {len(self.soft_constraint_violations)}\n"
        summary += f"Total Penalty Score: {self.total_penalty_score:.2f}\n"
        return summary
    
    def to_dict(self) -> Dict[str, Any]:
        def _describe(violations):
            return [
                {
                    "type": v.constraint_type,
                    "description": v.description,
                    "game_ids": [g.id for g in v.affected_games],
                }
                for v in violations
            ]
        
        return {
            "is_valid": self.is_valid,
            "hard_violations": _describe(self.hard_constraint_violations),
            "soft_violations": _describe(self.soft_constraint_violations),
            "total_penalty": self.total_penalty_score,
        }
