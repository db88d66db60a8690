"""
Scheduling service: one scheduling interaction over a fresh store snapshot.
Fetches games from the collaborator store, runs the pure engine on them and
writes the chosen start back.
"""

from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from arena_scheduler.core.clock import now, to_local
from arena_scheduler.core.config import MAX_PERSIST_ATTEMPTS, MAX_WEEKS_AHEAD
from arena_scheduler.core.exceptions import PersistenceFailure
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import CompactionResult, Game, ScheduleValidationResult, Slot
from arena_scheduler.services.availability import AvailabilityEvaluator
from arena_scheduler.services.compactor import DayCompactor
from arena_scheduler.services.manual_override import schedule_manually
from arena_scheduler.services.slot_catalog import SlotCatalog
from arena_scheduler.services.validator import ScheduleValidator

logger = get_logger(__name__)


class SchedulingService:
    """
    Entry point used by the API, the Celery tasks and the CLI.
    
    The store must provide load_game, load_arena_games and update_game (see
    SupabaseGameStore). Local validation is optimistic: a write the store
    rejects is retried after re-fetching and re-validating, so a conflict
    that became visible in the meantime surfaces as SlotConflict.
    """
    
    def __init__(
        self,
        store,
        catalog: Optional[SlotCatalog] = None,
        clock: Callable[[], datetime] = now,
        max_attempts: int = MAX_PERSIST_ATTEMPTS,
    ):
        self.store = store
        self.catalog = catalog or SlotCatalog()
        self.clock = clock
        self.max_attempts = max(1, max_attempts)
        self.compactor = DayCompactor()
        self.validator = ScheduleValidator(self.catalog)
    
    def _snapshot(self, game_id: int) -> Tuple[Game, List[Game]]:
        game = self.store.load_game(game_id)
        return game, self.store.load_arena_games(game.arena_id)
    
    def _evaluator(self, games: List[Game]) -> AvailabilityEvaluator:
        return AvailabilityEvaluator(games, self.catalog)
    
    def propose_slots(
        self,
        game_id: int,
        week_offset: int = 0,
        anchor: Optional[datetime] = None,
        include_unavailable: bool = False,
    ) -> List[Slot]:
        game, games = self._snapshot(game_id)
        slots = self._evaluator(games).evaluate_week(game, anchor, week_offset)
        if include_unavailable:
            return slots
        return [s for s in slots if s.available]
    
    def is_exhausted(self, game_id: int, week_offset: int = 0, anchor: Optional[datetime] = None) -> bool:
        game, games = self._snapshot(game_id)
        return self._evaluator(games).all_slots_exhausted(game, anchor, week_offset)
    
    def next_open_week(
        self,
        game_id: int,
        start_offset: int = 0,
        anchor: Optional[datetime] = None,
        max_weeks: int = MAX_WEEKS_AHEAD,
    ) -> Optional[int]:
        game, games = self._snapshot(game_id)
        return self._evaluator(games).next_open_week(game, anchor, start_offset, max_weeks)
    
    def confirm_slot(self, game_id: int, starts_at: datetime) -> Game:
        """
        Book a catalog slot for a game and mark it scheduled.
        
        Raises:
            NoApplicableSlots: If starts_at is not a catalog slot for the game
            BlackoutDate: If starts_at falls on a blackout date
            SlotConflict: If the slot overlaps another game in the arena
            PersistenceFailure: If every write attempt was rejected
        """
        starts_at = to_local(starts_at)
        last_failure = None
        
        for attempt in range(1, self.max_attempts + 1):
            game, games = self._snapshot(game_id)
            self.catalog.match(starts_at, game.ice_time)
            self._evaluator(games).check_slot(game, starts_at)
            
            try:
                updated = self.store.update_game(
                    game_id,
                    starts_at=starts_at,
                    scheduled_at=self.clock(),
                    guard_overlaps=True,
                )
            except PersistenceFailure as e:
                last_failure = e
                logger.warning(f"Attempt {attempt}/{self.max_attempts} to book game {game_id} failed: {e.reason}")
                continue
            
            logger.info(f"Game {game_id} booked at {starts_at.isoformat()}")
            return updated
        
        raise last_failure
    
    def schedule_manually(self, game_id: int, starts_at: datetime) -> Game:
        """Admin placement: overlap check only, then persist."""
        game, games = self._snapshot(game_id)
        updated = schedule_manually(game, starts_at, games, confirmed_at=self.clock())
        
        persisted = self.store.update_game(
            game_id,
            starts_at=updated.starts_at,
            scheduled_at=updated.scheduled_at,
            guard_overlaps=True,
        )
        logger.info(f"Game {game_id} manually placed at {updated.starts_at.isoformat()}")
        return persisted
    
    def compact_day(self, arena_id: int, day: date) -> CompactionResult:
        games = self.store.load_arena_games(arena_id)
        return self.compactor.apply(games, arena_id, day, self.store)
    
    def validate_arena(self, arena_id: int) -> ScheduleValidationResult:
        return self.validator.validate_games(self.store.load_arena_games(arena_id))
    
    def validate_league(self, league_id: int) -> ScheduleValidationResult:
        """Audit a league's games; overlaps with other leagues' games are not visible here."""
        return self.validator.validate_games(self.store.load_league_games(league_id))
