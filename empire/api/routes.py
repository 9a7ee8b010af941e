from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Dict, Optional
import logging
import time

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from empire.core.config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    get_auto_start_loop,
)
from empire.core.game import GameWorld
from empire.core.metrics import metrics
from empire.core.results import CommandResult
from empire.core.travel import calculate_travel_time, parse_coordinates

logger = logging.getLogger(__name__)

router = APIRouter()


class RenamePlanetRequest(BaseModel):
    name: str


class UnitOrderRequest(BaseModel):
    unit_type: str
    count: int = 1


class DefenseOrderRequest(BaseModel):
    defense_type: str
    count: int = 1


class LaunchFleetRequest(BaseModel):
    origin: str
    destination: str
    mission: str
    units: Dict[str, int]
    cargo: Dict[str, float] = Field(default_factory=dict)


class AdvanceRequest(BaseModel):
    elapsed_ms: float


class SpeedRequest(BaseModel):
    multiplier: float


def get_game(request: Request) -> GameWorld:
    return request.app.state.game_world


def _require_planet(game: GameWorld, planet_id: str) -> None:
    if game.get_planet(planet_id) is None:
        raise HTTPException(status_code=404, detail="Planet not found")


def _respond(result: CommandResult):
    """Turn a command result into a JSON body, or a 400 carrying the rejection."""
    if not result.ok:
        detail = result.to_dict()
        detail["error"] = detail.pop("kind")
        detail.pop("ok", None)
        detail.setdefault("missing", [])
        raise HTTPException(status_code=400, detail=detail)
    return result.to_dict()


@router.get("/")
async def root(game: GameWorld = Depends(get_game)):
    """Health banner with the simulated clock."""
    return {"message": "Empire simulation", "status": "running", "clock_ms": game.clock_ms}


@router.get("/empire")
async def get_empire(game: GameWorld = Depends(get_game)):
    return game.get_empire_data()


@router.get("/planets/{planet_id}")
async def get_planet(planet_id: str, game: GameWorld = Depends(get_game)):
    planet = game.get_planet(planet_id)
    if planet is None:
        raise HTTPException(status_code=404, detail="Planet not found")
    return planet


@router.patch("/planets/{planet_id}")
async def rename_planet(planet_id: str, payload: RenamePlanetRequest, game: GameWorld = Depends(get_game)):
    _require_planet(game, planet_id)
    return _respond(game.rename_planet(planet_id, payload.name))


@router.get("/planets/{planet_id}/buildings/{building_id}")
async def get_upgrade_preview(planet_id: str, building_id: str, game: GameWorld = Depends(get_game)):
    _require_planet(game, planet_id)
    preview = game.get_upgrade_preview(planet_id, building_id)
    if preview is None:
        raise HTTPException(status_code=404, detail="Building not found")
    return preview


@router.post("/planets/{planet_id}/buildings/{building_id}/upgrade")
async def upgrade_building(planet_id: str, building_id: str, game: GameWorld = Depends(get_game)):
    _require_planet(game, planet_id)
    return _respond(game.upgrade_building(planet_id, building_id))


@router.post("/research/{research_id}")
async def start_research(research_id: str, game: GameWorld = Depends(get_game)):
    return _respond(game.start_research(research_id))


@router.post("/planets/{planet_id}/units")
async def build_unit(planet_id: str, payload: UnitOrderRequest, game: GameWorld = Depends(get_game)):
    _require_planet(game, planet_id)
    return _respond(game.build_unit(planet_id, payload.unit_type, payload.count))


@router.post("/planets/{planet_id}/defenses")
async def build_defense(planet_id: str, payload: DefenseOrderRequest, game: GameWorld = Depends(get_game)):
    _require_planet(game, planet_id)
    return _respond(game.build_defense(planet_id, payload.defense_type, payload.count))


@router.get("/fleets")
async def list_fleets(game: GameWorld = Depends(get_game)):
    return {"fleets": game.list_fleets()}


@router.post("/fleets")
async def launch_fleet(payload: LaunchFleetRequest, game: GameWorld = Depends(get_game)):
    return _respond(game.launch_fleet(payload.model_dump()))


@router.post("/simulation/advance")
async def advance_simulation(payload: AdvanceRequest, game: GameWorld = Depends(get_game)):
    return _respond(game.advance_simulation(payload.elapsed_ms))


@router.put("/simulation/speed")
async def set_speed(payload: SpeedRequest, game: GameWorld = Depends(get_game)):
    return _respond(game.set_simulation_speed(payload.multiplier))


@router.get("/travel")
async def travel_time(origin: str = Query(...), destination: str = Query(...)):
    try:
        result = calculate_travel_time(parse_coordinates(origin), parse_coordinates(destination))
    except ValueError:
        raise HTTPException(status_code=400, detail="Coordinates must look like galaxy:system:position")
    return result.to_dict()


@router.get("/universe/{galaxy}/{system}")
async def get_system(galaxy: int, system: int, game: GameWorld = Depends(get_game)):
    slots = game.get_system(galaxy, system)
    if slots is None:
        raise HTTPException(status_code=404, detail="System not found")
    return {"galaxy": galaxy, "system": system, "slots": slots}


@router.get("/metrics")
async def get_metrics():
    return metrics.snapshot()


def create_app(game_world: Optional[GameWorld] = None) -> FastAPI:
    """Build the HTTP adapter around a simulation context (a fresh one by default)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        game: GameWorld = app.state.game_world
        if get_auto_start_loop():
            game.start_game_loop()
        try:
            yield
        finally:
            game.stop_game_loop()

    app = FastAPI(title="Empire Simulation", lifespan=lifespan)
    app.state.game_world = game_world if game_world is not None else GameWorld()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration = time.perf_counter() - start
            route_obj = request.scope.get("route")
            route_path = getattr(route_obj, "path", request.url.path)
            status = getattr(response, "status_code", 500)
            metrics.record_http(request.method, route_path, status, duration)

    app.include_router(router)
    return app
