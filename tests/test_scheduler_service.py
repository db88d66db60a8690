"""
Tests for the scheduling service over an in-memory store.
"""

from datetime import date

import pytest

from arena_scheduler.core.exceptions import (
    BlackoutDate, GameNotFound, NoApplicableSlots, PersistenceFailure, SlotConflict
)
from arena_scheduler.models import DayDesignator
from arena_scheduler.services.scheduler import SchedulingService
from arena_scheduler.services.slot_catalog import SlotCatalog

from conftest import InMemoryGameStore, local, make_game


@pytest.fixture
def service(store, fixed_clock):
    return SchedulingService(store, clock=fixed_clock)


def test_propose_slots_skips_taken_friday(service):
    slots = service.propose_slots(2)
    assert slots
    assert DayDesignator.FRIDAY not in {s.designator for s in slots}


def test_propose_slots_can_include_unavailable(service):
    slots = service.propose_slots(2, include_unavailable=True)
    friday = [s for s in slots if s.designator == DayDesignator.FRIDAY]
    assert len(friday) == 2
    assert not any(s.available for s in friday)


def test_confirm_slot_books_and_stamps(service, store):
    booked = service.confirm_slot(2, local(2025, 1, 11, 10, 30))
    assert booked.starts_at == local(2025, 1, 11, 10, 30)
    assert booked.scheduled_at == local(2025, 1, 2, 9, 0)
    assert store.games[2] == booked
    assert store.writes == [2]


def test_confirm_slot_rejects_off_catalog_time(service, store):
    with pytest.raises(NoApplicableSlots):
        service.confirm_slot(2, local(2025, 1, 11, 11, 0))
    assert store.writes == []


def test_confirm_slot_rejects_weekday_for_long_game(service):
    with pytest.raises(NoApplicableSlots):
        service.confirm_slot(2, local(2025, 1, 8, 21, 15))


def test_confirm_slot_rejects_blackout(fixed_clock):
    short_game = make_game(5, local(2025, 12, 22, 10, 0), ice_time=75)
    service = SchedulingService(InMemoryGameStore([short_game]), clock=fixed_clock)
    with pytest.raises(BlackoutDate):
        service.confirm_slot(5, local(2025, 12, 24, 21, 15))


def test_confirm_slot_rejects_overlap(service, store):
    with pytest.raises(SlotConflict) as excinfo:
        service.confirm_slot(2, local(2025, 1, 10, 20, 10))
    assert excinfo.value.conflicting_game.id == 1
    assert store.writes == []


def test_rejected_write_is_retried(service, store):
    store.reject_next = 1
    booked = service.confirm_slot(2, local(2025, 1, 12, 12, 30))
    assert booked.starts_at == local(2025, 1, 12, 12, 30)
    assert store.writes == [2]


def test_persistent_write_failure_surfaces(service, store):
    store.failing_ids = {2}
    with pytest.raises(PersistenceFailure):
        service.confirm_slot(2, local(2025, 1, 12, 12, 30))
    assert store.games[2].starts_at == local(2025, 1, 10, 10, 0)


def test_concurrent_booking_surfaces_as_conflict(service, store):
    """Another writer takes the slot between validation and write."""
    def _someone_else_books(s):
        s.add(make_game(9, local(2025, 1, 11, 10, 30), scheduled_at=local(2025, 1, 2, 8, 59)))
    
    store.reject_next = 1
    store.on_reject = _someone_else_books
    
    with pytest.raises(SlotConflict) as excinfo:
        service.confirm_slot(2, local(2025, 1, 11, 10, 30))
    assert excinfo.value.conflicting_game.id == 9


def test_unknown_game(service):
    with pytest.raises(GameNotFound):
        service.confirm_slot(404, local(2025, 1, 11, 10, 30))


def test_exhaustion_and_next_open_week(fixed_clock):
    blocker = make_game(1, local(2025, 1, 10, 18, 0), ice_time=300, scheduled_at=local(2024, 12, 1, 12, 0))
    candidate = make_game(2, local(2025, 1, 10, 10, 0))
    store = InMemoryGameStore([blocker, candidate])
    
    catalog = SlotCatalog({"friday": ["19:45", "20:10"]}, short_format_only=[])
    service = SchedulingService(store, catalog=catalog, clock=fixed_clock)
    
    assert service.is_exhausted(2)
    assert not service.is_exhausted(2, week_offset=1)
    assert service.next_open_week(2) == 1


def test_manual_placement_persists(service, store):
    placed = service.schedule_manually(2, local(2025, 12, 24, 18, 0))
    assert placed.starts_at == local(2025, 12, 24, 18, 0)
    assert placed.scheduled_at == local(2025, 1, 2, 9, 0)
    assert store.games[2].starts_at == local(2025, 12, 24, 18, 0)


def test_manual_placement_rejects_overlap(service, store):
    with pytest.raises(SlotConflict):
        service.schedule_manually(2, local(2025, 1, 10, 21, 0))
    assert store.writes == []


def test_compact_day_through_service(fixed_clock):
    games = [
        make_game(1, local(2025, 1, 11, 18, 0), ice_time=60),
        make_game(2, local(2025, 1, 11, 19, 30), ice_time=60),
    ]
    store = InMemoryGameStore(games)
    result = SchedulingService(store, clock=fixed_clock).compact_day(1, date(2025, 1, 11))
    assert result.succeeded == [2]
    assert store.games[2].starts_at == local(2025, 1, 11, 19, 0)


def test_validate_arena(service):
    result = service.validate_arena(1)
    assert result.is_valid
    assert "placeholder_time" in [v.constraint_type for v in result.soft_constraint_violations]


def test_validate_league_reads_league_games_across_arenas(fixed_clock):
    confirmed = local(2024, 12, 1, 12, 0)
    store = InMemoryGameStore([
        make_game(1, local(2025, 1, 11, 10, 30), league_id=7, arena_id=1, scheduled_at=confirmed),
        make_game(2, local(2025, 1, 11, 12, 0), league_id=7, arena_id=1, scheduled_at=confirmed),
        make_game(3, local(2025, 1, 11, 10, 30), league_id=7, arena_id=2, scheduled_at=confirmed),
        make_game(4, local(2025, 1, 11, 11, 0), league_id=8, arena_id=2, scheduled_at=confirmed),
    ])
    result = SchedulingService(store, clock=fixed_clock).validate_league(7)
    
    assert not result.is_valid
    assert len(result.hard_constraint_violations) == 1
    assert {g.id for g in result.hard_constraint_violations[0].affected_games} == {1, 2}
