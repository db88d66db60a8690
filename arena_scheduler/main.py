"""
Main FastAPI application for the Arena Ice-Time Scheduling System.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from arena_scheduler.api import routes
from arena_scheduler.core.config import CORS_ORIGINS
from arena_scheduler.core.logging_config import setup_logging

setup_logging()

app = FastAPI(
    title="Arena Ice-Time Scheduling API",
    description="API for finding free ice slots, booking games and compacting game days",
    version="1.0.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Arena Ice-Time Scheduling API",
        "version": "1.0.0",
        "endpoints": {
            "slots": "/api/games/{game_id}/slots",
            "book": "/api/games/{game_id}/schedule",
            "compact": "/api/arenas/{arena_id}/compact",
            "health": "/api/health"
        }
    }
