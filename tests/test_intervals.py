"""
Tests for the interval model and the sorted booking index.
"""

from datetime import timedelta

import pytest

from arena_scheduler.core.exceptions import InvalidDuration
from arena_scheduler.models import BookingIndex, Interval, overlaps, validate_duration

from conftest import local, make_game


def test_overlapping_intervals():
    """Intervals that share any minute overlap."""
    start = local(2025, 1, 10, 19, 45)
    assert overlaps(start, 140, start + timedelta(minutes=60), 60)
    assert overlaps(start + timedelta(minutes=60), 60, start, 140)
    assert overlaps(start, 140, start, 140)
    assert overlaps(start, 140, start - timedelta(minutes=30), 31)


def test_back_to_back_is_not_a_conflict():
    start = local(2025, 1, 10, 18, 0)
    assert not overlaps(start, 60, start + timedelta(minutes=60), 60)
    assert not overlaps(start + timedelta(minutes=60), 60, start, 60)
    assert not overlaps(start, 60, start + timedelta(minutes=90), 60)


def test_interval_end_and_overlap():
    a = Interval(local(2025, 1, 11, 10, 30), 140)
    b = Interval(local(2025, 1, 11, 12, 50), 140)
    assert a.end == local(2025, 1, 11, 12, 50)
    assert not a.overlaps_with(b)
    assert a.overlaps_with(Interval(local(2025, 1, 11, 12, 49), 10))


@pytest.mark.parametrize("ice_time", [0, -15, None, "75", 1.5, True])
def test_invalid_durations_are_rejected(ice_time):
    with pytest.raises(InvalidDuration):
        validate_duration(ice_time)


def test_validate_duration_returns_value():
    assert validate_duration(75) == 75


def test_booking_index_matches_linear_scan():
    """The bisected lookup finds exactly what a full scan finds."""
    games = [
        make_game(1, local(2025, 1, 11, 10, 30), ice_time=140),
        make_game(2, local(2025, 1, 11, 12, 50), ice_time=75),
        make_game(3, local(2025, 1, 11, 14, 30), ice_time=300),
        make_game(4, local(2025, 1, 11, 20, 0), ice_time=60),
    ]
    index = BookingIndex(games)
    
    start = local(2025, 1, 11, 8, 0)
    for step in range(0, 15 * 60, 25):
        probe = start + timedelta(minutes=step)
        expected = [g for g in games if overlaps(probe, 90, g.starts_at, g.ice_time)]
        assert index.find_all_conflicts(probe, 90) == expected
        found = index.find_conflict(probe, 90)
        assert found == (expected[0] if expected else None)


def test_booking_index_excludes_candidate_by_id():
    game = make_game(7, local(2025, 1, 11, 10, 30))
    index = BookingIndex([game])
    assert index.find_conflict(game.starts_at, game.ice_time) is game
    assert index.find_conflict(game.starts_at, game.ice_time, exclude_id=7) is None


def test_empty_index_has_no_conflicts():
    index = BookingIndex([])
    assert len(index) == 0
    assert index.find_conflict(local(2025, 1, 11, 10, 30), 140) is None
