"""
Shared fixtures for the Arena Ice-Time Scheduling System tests.
Provides an in-memory stand-in for the collaborator game store.
"""

from datetime import datetime
from typing import Dict, List

import pytest

from arena_scheduler.core.clock import to_local
from arena_scheduler.core.exceptions import GameNotFound, PersistenceFailure
from arena_scheduler.models import BookingIndex, Game

FIXED_NOW = datetime(2025, 1, 2, 9, 0)


def local(*args) -> datetime:
    """Arena-local aware datetime from datetime() arguments."""
    return to_local(datetime(*args))


def make_game(game_id, starts_at, ice_time=140, arena_id=1, league_id=1, scheduled_at=None,
              home_team_id=None, away_team_id=None) -> Game:
    return Game(
        id=game_id,
        home_team_id=home_team_id or game_id * 10,
        away_team_id=away_team_id or game_id * 10 + 1,
        league_id=league_id,
        arena_id=arena_id,
        starts_at=starts_at,
        ice_time=ice_time,
        scheduled_at=scheduled_at,
    )


class InMemoryGameStore:
    """Game store kept in a dict, with knobs for rejecting writes."""
    
    def __init__(self, games=()):
        self.games: Dict[int, Game] = {g.id: g for g in games}
        self.failing_ids = set()
        self.reject_next = 0
        self.on_reject = None
        self.writes: List[int] = []
    
    def add(self, game: Game):
        self.games[game.id] = game
    
    def load_game(self, game_id):
        if game_id not in self.games:
            raise GameNotFound(game_id)
        return self.games[game_id]
    
    def load_arena_games(self, arena_id):
        return [g for g in self.games.values() if g.arena_id == arena_id]
    
    def load_league_games(self, league_id):
        return [g for g in self.games.values() if g.league_id == league_id]
    
    def update_game(self, game_id, starts_at, scheduled_at=None, guard_overlaps=False):
        if game_id not in self.games:
            raise PersistenceFailure(game_id, "update matched no rows")
        if game_id in self.failing_ids:
            raise PersistenceFailure(game_id, "store unavailable")
        if self.reject_next > 0:
            self.reject_next -= 1
            if self.on_reject is not None:
                self.on_reject(self)
            raise PersistenceFailure(game_id, "write rejected")
        
        current = self.games[game_id]
        if guard_overlaps:
            index = BookingIndex(self.load_arena_games(current.arena_id))
            conflict = index.find_conflict(to_local(starts_at), current.ice_time, exclude_id=game_id)
            if conflict is not None:
                raise PersistenceFailure(game_id, f"overlaps game {conflict.id} at write time")
        
        updated = current.moved_to(starts_at, scheduled_at=scheduled_at)
        self.games[game_id] = updated
        self.writes.append(game_id)
        return updated


@pytest.fixture
def fixed_clock():
    return lambda: local(2025, 1, 2, 9, 0)


@pytest.fixture
def friday_game():
    """A 140-minute game booked Friday 2025-01-10 19:45 in arena 1."""
    return make_game(1, local(2025, 1, 10, 19, 45), scheduled_at=local(2024, 12, 1, 12, 0))


@pytest.fixture
def candidate():
    """An unplaced 140-minute game in the same week and arena."""
    return make_game(2, local(2025, 1, 10, 10, 0))


@pytest.fixture
def store(friday_game, candidate):
    return InMemoryGameStore([friday_game, candidate])
