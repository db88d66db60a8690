"""
Day compaction: packs one arena's games on one date back-to-back.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from arena_scheduler.core.clock import local_date
from arena_scheduler.core.config import UNSET_START_TIME
from arena_scheduler.core.exceptions import PersistenceFailure
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import CompactionChange, CompactionResult, Game

logger = get_logger(__name__)


class DayCompactor:
    """
    Removes idle gaps between a day's games.
    
    Games still at the unset placeholder time are not yet scheduled and are
    left out entirely. The first game keeps its start; every following game
    starts when the previous one ends, in the original order.
    """
    
    def __init__(self, unset_time=UNSET_START_TIME):
        self.unset_time = unset_time
    
    def _is_unset(self, game: Game) -> bool:
        return game.starts_at.time() == self.unset_time
    
    def select_day(self, games: Iterable[Game], arena_id: int, day: date) -> List[Game]:
        """Scheduled games of one arena on one date."""
        return [
            g for g in games
            if g.arena_id == arena_id
            and local_date(g.starts_at) == day
            and not self._is_unset(g)
        ]
    
    def compact_day(self, games: Iterable[Game]) -> List[Game]:
        """
        Re-sequence a day's games contiguously.
        
        Args:
            games: Games of one arena on one date
            
        Returns:
            The same games with updated starts_at, in ascending start order;
            empty when nothing is scheduled that day
        """
        ordered = sorted(
            (g for g in games if not self._is_unset(g)),
            key=lambda g: (g.starts_at, g.id),
        )
        if not ordered:
            return []
        
        compacted = []
        cursor = ordered[0].starts_at
        for game in ordered:
            compacted.append(game.moved_to(cursor))
            cursor = cursor + timedelta(minutes=game.ice_time)
        return compacted
    
    def plan(self, games: Iterable[Game], arena_id: int, day: date) -> CompactionResult:
        """Compute the changes for a day without persisting anything."""
        day_games = self.select_day(games, arena_id, day)
        result = CompactionResult(arena_id=arena_id, date=day, games_considered=len(day_games))
        
        originals = {g.id: g for g in day_games}
        for game in self.compact_day(day_games):
            old_start = originals[game.id].starts_at
            if game.starts_at != old_start:
                result.changes.append(CompactionChange(
                    game_id=game.id,
                    old_starts_at=old_start,
                    new_starts_at=game.starts_at,
                ))
        return result
    
    def apply(self, games: Iterable[Game], arena_id: int, day: date, store) -> CompactionResult:
        """
        Plan and persist a compaction as a best-effort batch.
        
        Each changed game is written independently with the store's overlap
        guard on. A failed write is recorded in result.failed and does not undo
        the writes already made; a later game that would now land on a game
        left in place fails the guard and is recorded too. The caller
        re-queries and retries the remainder.
        """
        result = self.plan(games, arena_id, day)
        
        if result.nothing_to_compact:
            logger.info(f"Nothing to compact for arena {arena_id} on {day}")
            return result
        if not result.changes:
            logger.info(f"Arena {arena_id} on {day} is already compact ({result.games_considered} games)")
            return result
        
        for change in result.changes:
            try:
                store.update_game(change.game_id, starts_at=change.new_starts_at, guard_overlaps=True)
            except PersistenceFailure as e:
                logger.warning(f"Compaction update failed for game {change.game_id}: {e.reason}")
                result.failed[change.game_id] = e.reason
                continue
            result.succeeded.append(change.game_id)
        
        logger.info(
            f"Compacted arena {arena_id} on {day}: {len(result.succeeded)} moved, {len(result.failed)} failed"
        )
        return result
