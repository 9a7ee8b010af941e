"""Centralized configuration for the empire simulation.

Universe constants, economy tuning and host-loop settings live here so that the
engine modules stay free of magic numbers. Every value can be overridden through
an environment variable of the same name.
"""
from __future__ import annotations

import os
from typing import List

# Host game loop cadence (real milliseconds between ticks)
TICK_INTERVAL_MS: int = int(os.environ.get("TICK_INTERVAL_MS", "1000"))
# Default simulation speed multiplier (game seconds per real second)
GAME_SPEED: float = float(os.environ.get("GAME_SPEED", "1.0"))
# Start the background loop from the HTTP app lifespan
AUTO_START_LOOP: bool = os.environ.get("AUTO_START_LOOP", "false").lower() == "true"

# Economy growth factors
PRODUCTION_MULTIPLIER: float = float(os.environ.get("PRODUCTION_MULTIPLIER", "1.66"))
UPGRADE_COST_MULTIPLIER: float = float(os.environ.get("UPGRADE_COST_MULTIPLIER", "1.66"))

# Base durations in game seconds; multiplied by (level + 1)
BASE_UPGRADE_TIME: int = int(os.environ.get("BASE_UPGRADE_TIME", "10"))
BASE_RESEARCH_TIME: int = int(os.environ.get("BASE_RESEARCH_TIME", "30"))

# Storage: capacity = BASE_STORAGE_CAPACITY * STORAGE_CAPACITY_GROWTH ** storage_level
BASE_STORAGE_CAPACITY: float = float(os.environ.get("BASE_STORAGE_CAPACITY", "100000"))
STORAGE_CAPACITY_GROWTH: float = float(os.environ.get("STORAGE_CAPACITY_GROWTH", "1.5"))

# Empire limits
MAX_PLANETS: int = int(os.environ.get("MAX_PLANETS", "10"))
INITIAL_PLANET_SPACES: int = int(os.environ.get("INITIAL_PLANET_SPACES", "200"))
HOMEWORLD_NAME: str = os.environ.get("HOMEWORLD_NAME", "Homeworld")
EMPIRE_NAME: str = os.environ.get("EMPIRE_NAME", "Commander")
# Planet sun distance is drawn uniformly from [0, MAX_PLANET_SUN_DISTANCE)
MAX_PLANET_SUN_DISTANCE: float = float(os.environ.get("MAX_PLANET_SUN_DISTANCE", "100"))

# Universe dimensions
GALAXIES: int = int(os.environ.get("GALAXIES", "3"))
SYSTEMS_PER_GALAXY: int = int(os.environ.get("SYSTEMS_PER_GALAXY", "15"))
POSITIONS_PER_SYSTEM: int = int(os.environ.get("POSITIONS_PER_SYSTEM", "10"))

# Universe slot generation
MIN_ORBIT_RADIUS: float = 30.0
MAX_ORBIT_RADIUS: float = 200.0
# Random variance applied to the orbit radius of a generated slot (fraction)
ORBIT_VARIANCE: float = 0.3
SLOT_SPACES_MIN: int = 150
SLOT_SPACES_MAX: int = 249

# Travel (seconds)
INTRA_SYSTEM_SPAN_SECONDS: int = int(os.environ.get("INTRA_SYSTEM_SPAN_SECONDS", "600"))
BASE_SYSTEM_TRAVEL: int = int(os.environ.get("BASE_SYSTEM_TRAVEL", "300"))
BASE_GALAXY_TRAVEL: int = int(os.environ.get("BASE_GALAXY_TRAVEL", "600"))
SYSTEM_DISTANCE_SECONDS: int = int(os.environ.get("SYSTEM_DISTANCE_SECONDS", "10"))

# Fleet arrival policy for colonize missions that can no longer found a colony
# (planet cap reached or slot taken in transit). False drops cargo and units.
COLONIZE_FAILURE_RETURNS_FLEET: bool = os.environ.get("COLONIZE_FAILURE_RETURNS_FLEET", "true").lower() == "true"

# CORS configuration for the HTTP adapter
CORS_ALLOW_ORIGINS: List[str] = [orig.strip() for orig in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",")]
CORS_ALLOW_METHODS: List[str] = [m.strip() for m in os.environ.get("CORS_ALLOW_METHODS", "*").split(",")]
CORS_ALLOW_HEADERS: List[str] = [h.strip() for h in os.environ.get("CORS_ALLOW_HEADERS", "*").split(",")]


# --- Typed getters (single source of truth) ---

def get_tick_interval_ms() -> int:
    return int(TICK_INTERVAL_MS)

def get_game_speed() -> float:
    return float(GAME_SPEED)

def get_max_planets() -> int:
    return int(MAX_PLANETS)

def get_auto_start_loop() -> bool:
    return bool(AUTO_START_LOOP)
