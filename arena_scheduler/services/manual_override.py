"""
Manual placement of a game by an administrator.
Only the overlap check applies; blackout dates and the slot catalog are
deliberately not enforced on this path.
"""

from datetime import datetime
from typing import Iterable, Optional

from arena_scheduler.core.clock import now, to_local
from arena_scheduler.core.exceptions import SlotConflict
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import BookingIndex, Game, validate_duration

logger = get_logger(__name__)


def schedule_manually(
    game: Game,
    new_instant: datetime,
    existing_games: Iterable[Game],
    confirmed_at: Optional[datetime] = None,
) -> Game:
    """
    Place a game at an arbitrary instant.
    
    Args:
        game: The game to move
        new_instant: Requested start
        existing_games: Snapshot of games; only those in game's arena are checked
        confirmed_at: Value for scheduled_at (defaults to now)
        
    Returns:
        The updated game, ready to persist
        
    Raises:
        InvalidDuration: If the game's ice time is not positive
        SlotConflict: If another game in the arena overlaps
    """
    validate_duration(game.ice_time)
    new_instant = to_local(new_instant)
    
    index = BookingIndex(g for g in existing_games if g.arena_id == game.arena_id)
    conflict = index.find_conflict(new_instant, game.ice_time, exclude_id=game.id)
    if conflict is not None:
        logger.info(f"Manual placement of game {game.id} at {new_instant.isoformat()} rejected: overlaps game {conflict.id}")
        raise SlotConflict(game.id, new_instant, conflict)
    
    return game.moved_to(new_instant, scheduled_at=confirmed_at or now())
