"""
API routes for slot lookup, booking and day compaction.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
from datetime import datetime, date
from celery.result import AsyncResult

from arena_scheduler.core.celery_app import celery_app
from arena_scheduler.core.exceptions import (
    SchedulingError, InvalidDuration, SlotConflict, BlackoutDate,
    NoApplicableSlots, PersistenceFailure, GameNotFound
)
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.models import Game
from arena_scheduler.services.calendar_rules import week_window
from arena_scheduler.services.scheduler import SchedulingService
from arena_scheduler.services.supabase_store import SupabaseGameStore
from arena_scheduler.tasks.scheduler_tasks import compact_day_task

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["schedule"])

ERROR_STATUS = {
    InvalidDuration: 422,
    SlotConflict: 409,
    BlackoutDate: 409,
    NoApplicableSlots: 400,
    PersistenceFailure: 502,
    GameNotFound: 404,
}


def get_scheduling_service() -> SchedulingService:
    return SchedulingService(SupabaseGameStore())


def _http_error(e: SchedulingError) -> HTTPException:
    status_code = next(
        (status for cls, status in ERROR_STATUS.items() if isinstance(e, cls)),
        500,
    )
    return HTTPException(status_code=status_code, detail=e.to_dict())


class BookingRequest(BaseModel):
    """Request model for booking a game."""
    starts_at: datetime


class CompactRequest(BaseModel):
    """Request model for day compaction."""
    day: date


class GameResponse(BaseModel):
    """Response model for a single game."""
    id: int
    home_team_id: int
    away_team_id: int
    league_id: int
    arena_id: int
    starts_at: str
    ice_time: int
    scheduled_at: Optional[str] = None


class SlotResponse(BaseModel):
    designator: str
    time: str
    date: str
    starts_at: str
    label: Optional[str] = None
    available: bool


class SlotsResponse(BaseModel):
    """Candidate slots for one game and week."""
    game_id: int
    week_offset: int
    exhausted: bool
    slots: List[SlotResponse]


def _game_response(game: Game) -> GameResponse:
    return GameResponse(**game.to_dict())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@router.get("/calendar/week")
async def get_calendar_week(anchor: date, week_offset: int = 0):
    """Dates each day-designator resolves to, plus special dates in the week."""
    return week_window(anchor, week_offset).to_dict()


@router.get("/games/{game_id}/slots", response_model=SlotsResponse)
def get_game_slots(
    game_id: int,
    week_offset: int = 0,
    anchor: Optional[datetime] = None,
    include_unavailable: bool = False,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Candidate slots for a game in one week.
    
    Occupied slots are left out unless include_unavailable is set; exhausted
    tells the caller to move on to another week.
    """
    try:
        slots = service.propose_slots(game_id, week_offset, anchor, include_unavailable=True)
    except SchedulingError as e:
        raise _http_error(e)
    
    exhausted = not any(s.available for s in slots)
    if not include_unavailable:
        slots = [s for s in slots if s.available]
    
    return SlotsResponse(
        game_id=game_id,
        week_offset=week_offset,
        exhausted=exhausted,
        slots=[SlotResponse(**s.to_dict()) for s in slots],
    )


@router.get("/games/{game_id}/next-open-week")
def get_next_open_week(
    game_id: int,
    start_offset: int = 0,
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        week_offset = service.next_open_week(game_id, start_offset)
    except SchedulingError as e:
        raise _http_error(e)
    return {"game_id": game_id, "week_offset": week_offset}


@router.post("/games/{game_id}/schedule", response_model=GameResponse)
def book_game(
    game_id: int,
    request: BookingRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book a catalog slot; 409 tells the caller to re-fetch and pick again."""
    try:
        game = service.confirm_slot(game_id, request.starts_at)
    except SchedulingError as e:
        raise _http_error(e)
    return _game_response(game)


@router.post("/games/{game_id}/manual", response_model=GameResponse)
def place_game_manually(
    game_id: int,
    request: BookingRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Admin placement at any instant; only overlaps are rejected."""
    try:
        game = service.schedule_manually(game_id, request.starts_at)
    except SchedulingError as e:
        raise _http_error(e)
    return _game_response(game)


@router.post("/arenas/{arena_id}/compact")
def compact_arena_day(
    arena_id: int,
    request: CompactRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """
    Pack a day's games back-to-back.
    
    Partial failures are reported per game in "failed"; the games listed in
    "succeeded" stay moved.
    """
    try:
        result = service.compact_day(arena_id, request.day)
    except SchedulingError as e:
        raise _http_error(e)
    return result.to_dict()


@router.post("/arenas/{arena_id}/compact/async")
async def compact_arena_day_async(arena_id: int, request: CompactRequest):
    """
    Start async day compaction.
    
    Returns:
        dict: Task ID for polling status
    """
    try:
        task = compact_day_task.delay(arena_id, request.day.isoformat())
        
        return {
            "task_id": task.id,
            "status": "PENDING",
            "message": "Compaction started"
        }
    except Exception as e:
        logger.error(f"Failed to start compaction task: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to start task: {str(e)}")


@router.get("/tasks/{task_id}")
async def get_task_status(task_id: str):
    """
    Poll an async compaction.
    
    A finished task carries the compaction summary under "result"; its
    "success" is False when some games could not be moved.
    """
    try:
        task_result = AsyncResult(task_id, app=celery_app)
        state = task_result.state
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {str(e)}")
    
    response = {"task_id": task_id, "status": state}
    
    if state == "SUCCESS":
        summary = task_result.result or {}
        response["result"] = summary
        response["message"] = summary.get("message", "Compaction finished")
    elif state == "FAILURE":
        response["message"] = str(task_result.info)
    elif isinstance(task_result.info, dict) and "status" in task_result.info:
        response["message"] = task_result.info["status"]
    elif state == "PENDING":
        response["message"] = "Waiting for a worker..."
    else:
        response["message"] = f"Task state: {state}"
    
    return response


@router.get("/arenas/{arena_id}/validation")
def validate_arena(
    arena_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Dict[str, Any]:
    """Audit an arena's bookings for overlaps, blackout dates and unplaced games."""
    return service.validate_arena(arena_id).to_dict()


@router.get("/leagues/{league_id}/validation")
def validate_league(
    league_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Dict[str, Any]:
    """Audit one league's games across all arenas it plays in."""
    return service.validate_league(league_id).to_dict()
