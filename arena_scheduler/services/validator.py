"""
Schedule validation module for the Arena Ice-Time Scheduling System.
Audits a set of booked games against the hard and soft scheduling rules.
"""

from typing import Iterable, List, Optional
from collections import defaultdict

from arena_scheduler.core.clock import local_date
from arena_scheduler.core.exceptions import NoApplicableSlots
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import (
    BookingIndex, Game, SchedulingConstraint, ScheduleValidationResult
)
from arena_scheduler.services.calendar_rules import is_blackout
from arena_scheduler.services.slot_catalog import SlotCatalog

logger = get_logger(__name__)


class ScheduleValidator:
    """
    Validates booked games against all constraints.
    Checks both hard constraints (must be satisfied) and soft constraints (preferences).
    """
    
    def __init__(self, catalog: Optional[SlotCatalog] = None):
        self.catalog = catalog or SlotCatalog()
    
    def validate_games(self, games: Iterable[Game]) -> ScheduleValidationResult:
        """
        Validate booked games against all constraints.
        
        Args:
            games: Games of one or more arenas
            
        Returns:
            ScheduleValidationResult with all violations found
        """
        games = list(games)
        result = ScheduleValidationResult(is_valid=True)
        
        self._check_invalid_ice_time(games, result)
        self._check_arena_overlaps(games, result)
        self._check_blackout_dates(games, result)
        self._check_unconfirmed_games(games, result)
        self._check_off_catalog_starts(games, result)
        
        logger.info(
            f"Validated {len(games)} games: valid={result.is_valid}, "
            f"hard={len(result.hard_constraint_violations)}, "
            f"soft={len(result.soft_constraint_violations)}"
        )
        for violation in result.hard_constraint_violations[:10]:
            logger.warning(f"{violation.constraint_type}: {violation.description}")
        
        return result
    
    def _check_invalid_ice_time(self, games: List[Game], result: ScheduleValidationResult):
        for game in games:
            if not isinstance(game.ice_time, int) or game.ice_time <= 0:
                result.add_violation(SchedulingConstraint(
                    constraint_type="invalid_ice_time",
                    severity="hard",
                    description=f"Game {game.id} has ice time {game.ice_time!r}",
                    affected_games=[game],
                    penalty_score=1000.0
                ))
    
    def _check_arena_overlaps(self, games: List[Game], result: ScheduleValidationResult):
        """
        Check for overlapping bookings in the same arena.
        This is a CRITICAL constraint - the ice can only host one game at a time.
        """
        games_by_arena = defaultdict(list)
        for game in games:
            if isinstance(game.ice_time, int) and game.ice_time > 0:
                games_by_arena[game.arena_id].append(game)
        
        for arena_id, arena_games in games_by_arena.items():
            index = BookingIndex(arena_games)
            reported = set()
            for game in index.games:
                for other in index.find_all_conflicts(game.starts_at, game.ice_time, exclude_id=game.id):
                    pair = tuple(sorted((game.id, other.id)))
                    if pair in reported:
                        continue
                    reported.add(pair)
                    result.add_violation(SchedulingConstraint(
                        constraint_type="arena_overlap",
                        severity="hard",
                        description=(
                            f"Games {pair[0]} and {pair[1]} overlap in arena {arena_id} "
                            f"on {local_date(game.starts_at)}"
                        ),
                        affected_games=[game, other],
                        penalty_score=3000.0
                    ))
    
    def _check_blackout_dates(self, games: List[Game], result: ScheduleValidationResult):
        for game in games:
            if is_blackout(game.starts_at):
                result.add_violation(SchedulingConstraint(
                    constraint_type="blackout_date",
                    severity="hard",
                    description=f"Game {game.id} is scheduled on blackout date {local_date(game.starts_at)}",
                    affected_games=[game],
                    penalty_score=2000.0
                ))
    
    def _check_unconfirmed_games(self, games: List[Game], result: ScheduleValidationResult):
        """Games still at the placeholder time or never confirmed (soft constraint)."""
        for game in games:
            if game.is_placeholder:
                result.add_violation(SchedulingConstraint(
                    constraint_type="placeholder_time",
                    severity="soft",
                    description=f"Game {game.id} is still at the unset time on {local_date(game.starts_at)}",
                    affected_games=[game],
                    penalty_score=10.0
                ))
            elif not game.is_confirmed:
                result.add_violation(SchedulingConstraint(
                    constraint_type="unconfirmed_game",
                    severity="soft",
                    description=f"Game {game.id} has not been confirmed by the scheduling flow",
                    affected_games=[game],
                    penalty_score=5.0
                ))
    
    def _check_off_catalog_starts(self, games: List[Game], result: ScheduleValidationResult):
        """Starts outside the slot catalog, typically manual overrides (soft constraint)."""
        for game in games:
            if game.is_placeholder or not isinstance(game.ice_time, int) or game.ice_time <= 0:
                continue
            try:
                self.catalog.match(game.starts_at, game.ice_time)
            except NoApplicableSlots:
                result.add_violation(SchedulingConstraint(
                    constraint_type="off_catalog_start",
                    severity="soft",
                    description=f"Game {game.id} starts at {game.starts_at:%A %H:%M}, outside the slot catalog",
                    affected_games=[game],
                    penalty_score=1.0
                ))
    
    def generate_schedule_report(self, games: Iterable[Game]) -> str:
        """
        Generate a report of the booked games, grouped by arena and date.
        
        Args:
            games: The games to report on
            
        Returns:
            Formatted report string
        """
        games = list(games)
        report = []
        report.append("=" * 80)
        report.append("SCHEDULE REPORT")
        report.append("=" * 80)
        report.append(f"Total Games: {len(games)}")
        report.append(f"Confirmed: {len([g for g in games if g.is_confirmed])}")
        report.append("")
        
        games_by_arena_date = defaultdict(list)
        for game in games:
            games_by_arena_date[(game.arena_id, local_date(game.starts_at))].append(game)
        
        for (arena_id, game_date) in sorted(games_by_arena_date.keys()):
            day_games = sorted(games_by_arena_date[(arena_id, game_date)], key=lambda g: g.starts_at)
            report.append(f"Arena {arena_id} - {game_date} ({game_date:%A}):")
            for game in day_games:
                status = "confirmed" if game.is_confirmed else "pending"
                report.append(
                    f"  {game.starts_at:%H:%M}-{game.ends_at:%H:%M}  "
                    f"{game.home_team_id} vs {game.away_team_id}  [{status}]"
                )
        
        report.append("=" * 80)
        
        return "\n".join(report)
