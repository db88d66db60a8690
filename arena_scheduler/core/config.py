"""
Configuration constants for the Arena Ice-Time Scheduling System.
All configurable settings are defined here.
"""

from datetime import time
import os
import json
from typing import Dict, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Supabase Configuration (collaborator CRUD store)
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_ANON_KEY", "")
GAMES_TABLE = os.getenv("GAMES_TABLE", "games")

# Redis connection URL for Celery (default to localhost)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# API server
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

# Wall-clock zone for day-designators, slot times and blackout dates
ARENA_TIMEZONE = os.getenv("ARENA_TIMEZONE", "Europe/Stockholm")

# Ice Time Rules (minutes)
SHORT_FORMAT_ICE_TIME = 75

# Games created by the admin pages sit at this time-of-day until placed
UNSET_START_TIME = time(10, 0)

# Blackout dates as (day, month), any year
BLACKOUT_DATES = [
    (24, 12),  # Christmas Eve
    (25, 12),  # Christmas Day
    (31, 12),  # New Year's Eve
]

# Special bookable dates as (day, month, label)
SPECIAL_DATES = [
    (26, 12, "Boxing Day"),
    (6, 1, "Epiphany"),
]

# Slot Catalog: day-designator -> ordered start times (HH:MM, 24-hour).
# Encodes the league's ice agreement with the arenas; change it here or via
# SLOT_CATALOG_JSON, never in the evaluation code.
DEFAULT_SLOT_CATALOG = {
    "friday": ["19:45", "20:10"],
    "saturday": ["10:30", "12:50", "15:10", "17:30"],
    "sunday": ["12:30", "14:50", "17:10"],
    "monday": ["21:15"],
    "wednesday": ["21:15"],
    "special": ["12:30", "14:50", "17:10"],
}

# Only offered when the game's ice time equals SHORT_FORMAT_ICE_TIME
SHORT_FORMAT_ONLY_DAYS = ["monday", "wednesday"]

SLOT_CATALOG_JSON = os.getenv("SLOT_CATALOG_JSON")  # JSON object from environment

# Scheduling flow
MAX_PERSIST_ATTEMPTS = int(os.getenv("MAX_PERSIST_ATTEMPTS", "2"))
MAX_WEEKS_AHEAD = int(os.getenv("MAX_WEEKS_AHEAD", "52"))


def get_slot_catalog_config() -> Dict[str, List[str]]:
    """
    Get the slot catalog table from the environment or the built-in default.
    
    Priority:
    1. SLOT_CATALOG_JSON (environment variable with a JSON object)
    2. DEFAULT_SLOT_CATALOG
    
    Returns:
        Mapping of day-designator name to its ordered list of "HH:MM" times
        
    Raises:
        ValueError: If SLOT_CATALOG_JSON is set but is not a JSON object of lists
    """
    if SLOT_CATALOG_JSON:
        try:
            catalog = json.loads(SLOT_CATALOG_JSON)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in SLOT_CATALOG_JSON: {e}")
        
        if not isinstance(catalog, dict) or not all(isinstance(v, list) for v in catalog.values()):
            raise ValueError("SLOT_CATALOG_JSON must map day names to lists of HH:MM strings")
        return catalog
    
    return {day: list(times) for day, times in DEFAULT_SLOT_CATALOG.items()}
