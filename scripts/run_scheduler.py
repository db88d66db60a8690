"""
Command-line entry point for the Arena Ice-Time Scheduling System.
Lists free slots, compacts a game day or audits an arena against the
configured Supabase store.
"""

import sys
import argparse
import logging
from datetime import date, datetime
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from arena_scheduler.core.exceptions import SchedulingError
from arena_scheduler.core.logging_config import setup_logging
from arena_scheduler.services.scheduler import SchedulingService
from arena_scheduler.services.supabase_store import SupabaseGameStore


def _print_slots(service: SchedulingService, args) -> int:
    slots = service.propose_slots(args.game_id, args.week_offset, include_unavailable=True)
    print(f"\nSlots for game {args.game_id}, week offset {args.week_offset}:")
    for slot in slots:
        status = "free" if slot.available else "taken"
        print(f"  {str(slot):<32} {status}")
    if not any(s.available for s in slots):
        print("\nAll slots exhausted - try another week.")
    return 0


def _compact(service: SchedulingService, args) -> int:
    result = service.compact_day(args.arena_id, date.fromisoformat(args.day))
    if result.nothing_to_compact:
        print(f"\nNothing to compact for arena {args.arena_id} on {args.day}")
        return 0
    
    for change in result.changes:
        status = "FAILED" if change.game_id in result.failed else "moved"
        print(f"  Game {change.game_id}: {change.old_starts_at:%H:%M} -> {change.new_starts_at:%H:%M} [{status}]")
    for game_id, reason in result.failed.items():
        print(f"  ERROR: game {game_id}: {reason}")
    return 0 if result.is_complete else 1


def _validate(service: SchedulingService, args) -> int:
    games = service.store.load_arena_games(args.arena_id)
    result = service.validator.validate_games(games)
    print(service.validator.generate_schedule_report(games))
    print(result.get_summary())
    return 0 if result.is_valid else 1


def _validate_league(service: SchedulingService, args) -> int:
    result = service.validate_league(args.league_id)
    print(result.get_summary())
    for violation in result.hard_constraint_violations + result.soft_constraint_violations:
        print(f"  [{violation.severity}] {violation.description}")
    return 0 if result.is_valid else 1


def main():
    """
    Main function to run the scheduling system from the command line.
    """
    parser = argparse.ArgumentParser(
        description='Arena Ice-Time Scheduling System - slot lookup, compaction and validation'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    slots_parser = subparsers.add_parser('slots', help='List candidate slots for a game')
    slots_parser.add_argument('game_id', type=int)
    slots_parser.add_argument('--week-offset', type=int, default=0)
    
    compact_parser = subparsers.add_parser('compact', help='Pack a day\'s games back-to-back')
    compact_parser.add_argument('arena_id', type=int)
    compact_parser.add_argument('day', help='Date as YYYY-MM-DD')
    
    validate_parser = subparsers.add_parser('validate', help='Audit an arena\'s bookings')
    validate_parser.add_argument('arena_id', type=int)
    
    league_parser = subparsers.add_parser('validate-league', help='Audit a league\'s games across arenas')
    league_parser.add_argument('league_id', type=int)
    
    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    
    print("\n" + "=" * 80)
    print("ARENA ICE-TIME SCHEDULING SYSTEM")
    print("=" * 80)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)
    
    commands = {
        'slots': _print_slots,
        'compact': _compact,
        'validate': _validate,
        'validate-league': _validate_league,
    }
    
    try:
        service = SchedulingService(SupabaseGameStore())
        return commands[args.command](service, args)
    except SchedulingError as e:
        print(f"\nERROR: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
