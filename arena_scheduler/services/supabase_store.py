"""
Supabase game store for the Arena Ice-Time Scheduling System.
Reads arena and league game snapshots and writes single-game updates.
"""

from datetime import datetime
from typing import List, Optional

from supabase import create_client, Client

from arena_scheduler.core.clock import to_local
from arena_scheduler.core.config import SUPABASE_URL, SUPABASE_KEY, GAMES_TABLE
from arena_scheduler.core.exceptions import GameNotFound, InvalidDuration, PersistenceFailure
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import BookingIndex, Game

logger = get_logger(__name__)


class SupabaseGameStore:
    """
    Collaborator CRUD store backed by the Supabase "games" table.
    
    Reads are uncached: every scheduling interaction takes a fresh snapshot.
    The overlap guard on writes narrows, but cannot close, the window between
    two schedulers picking the same slot; only a database exclusion
    constraint gives true mutual exclusion.
    """
    
    def __init__(self, client: Optional[Client] = None, table: str = GAMES_TABLE):
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError(
                    "Supabase credentials not found. Please set SUPABASE_URL and SUPABASE_ANON_KEY"
                )
            client = create_client(SUPABASE_URL, SUPABASE_KEY)
        self.client: Client = client
        self.table = table
    
    def _rows_to_games(self, rows) -> List[Game]:
        games = []
        for row in rows:
            try:
                games.append(Game.from_row(row))
            except (KeyError, TypeError, ValueError, InvalidDuration) as e:
                logger.warning(f"Skipping malformed game row {row.get('id')}: {e}")
        return games
    
    def load_game(self, game_id: int) -> Game:
        response = self.client.table(self.table).select('*').eq('id', game_id).execute()
        if not response.data:
            raise GameNotFound(game_id)
        return Game.from_row(response.data[0])
    
    def load_arena_games(self, arena_id: int) -> List[Game]:
        response = (
            self.client.table(self.table)
            .select('*')
            .eq('arena_id', arena_id)
            .order('starts_at')
            .execute()
        )
        games = self._rows_to_games(response.data)
        logger.info(f"Loaded {len(games)} games for arena {arena_id}")
        return games
    
    def load_league_games(self, league_id: int) -> List[Game]:
        response = (
            self.client.table(self.table)
            .select('*')
            .eq('league_id', league_id)
            .order('starts_at')
            .execute()
        )
        games = self._rows_to_games(response.data)
        logger.info(f"Loaded {len(games)} games for league {league_id}")
        return games
    
    def update_game(
        self,
        game_id: int,
        starts_at: datetime,
        scheduled_at: Optional[datetime] = None,
        guard_overlaps: bool = False,
    ) -> Game:
        """
        Write a game's start (and confirmation time when given).
        
        Raises:
            PersistenceFailure: If the write fails, matches no row, or the
                guard finds an overlap visible at write time
        """
        starts_at = to_local(starts_at)
        
        if guard_overlaps:
            current = self.load_game(game_id)
            index = BookingIndex(self.load_arena_games(current.arena_id))
            conflict = index.find_conflict(starts_at, current.ice_time, exclude_id=game_id)
            if conflict is not None:
                raise PersistenceFailure(
                    game_id, f"overlaps game {conflict.id} at write time"
                )
        
        updates = {"starts_at": starts_at.isoformat()}
        if scheduled_at is not None:
            updates["scheduled_at"] = to_local(scheduled_at).isoformat()
        
        try:
            response = self.client.table(self.table).update(updates).eq('id', game_id).execute()
        except Exception as e:
            logger.error(f"Error updating game {game_id}: {e}")
            raise PersistenceFailure(game_id, str(e)) from e
        
        if not response.data:
            raise PersistenceFailure(game_id, "update matched no rows")
        
        return Game.from_row(response.data[0])
