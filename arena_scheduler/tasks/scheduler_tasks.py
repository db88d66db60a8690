"""
Celery tasks for day compaction.
"""

from datetime import date
import traceback

from arena_scheduler.core.celery_app import celery_app
from arena_scheduler.core.exceptions import SchedulingError
from arena_scheduler.core.logging_config import get_logger
from arena_scheduler.services.scheduler import SchedulingService
from arena_scheduler.services.supabase_store import SupabaseGameStore

logger = get_logger(__name__)


@celery_app.task(bind=True, name="compact_day")
def compact_day_task(self, arena_id: int, day: str):
    """
    Async task to compact one arena's games on one date.
    
    Returns:
        dict: Compaction summary; "failed" lists games whose update was
        rejected while the others stay moved
    """
    try:
        self.update_state(
            state="PROGRESS",
            meta={"status": f"Loading games for arena {arena_id}..."}
        )
        
        service = SchedulingService(SupabaseGameStore())
        
        self.update_state(
            state="PROGRESS",
            meta={"status": f"Compacting {day}..."}
        )
        
        result = service.compact_day(arena_id, date.fromisoformat(day))
        
        summary = result.to_dict()
        summary["success"] = result.is_complete
        summary["message"] = (
            "Nothing to compact" if result.nothing_to_compact
            else f"Moved {len(result.succeeded)} games, {len(result.failed)} failed"
        )
        return summary
        
    except SchedulingError as e:
        logger.error(f"Error in compact_day_task: {e}")
        return {
            "success": False,
            "message": f"Compaction failed: {e.message}",
            "error": e.to_dict(),
            "traceback": traceback.format_exc()
        }
