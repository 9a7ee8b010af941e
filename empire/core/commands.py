from __future__ import annotations

from typing import TypedDict, NotRequired, Dict, Any, Tuple


# Command payload types
class BaseCommand(TypedDict):
    type: str


class UpgradeBuildingCommand(BaseCommand):
    planet_id: str
    building_id: str


class StartResearchCommand(BaseCommand):
    research_id: str


class BuildUnitCommand(BaseCommand):
    planet_id: str
    unit_type: str
    count: NotRequired[int]


class BuildDefenseCommand(BaseCommand):
    planet_id: str
    defense_type: str
    count: NotRequired[int]


class FleetSpec(TypedDict):
    origin: str
    destination: str
    mission: str
    units: Dict[str, int]
    cargo: NotRequired[Dict[str, float]]


class LaunchFleetCommand(BaseCommand):
    fleet: FleetSpec


class RenamePlanetCommand(BaseCommand):
    planet_id: str
    name: str


class SetSimulationSpeedCommand(BaseCommand):
    multiplier: float


class AdvanceSimulationCommand(BaseCommand):
    elapsed_ms: NotRequired[float]


# Parse helpers turning raw dicts (HTTP bodies, queued commands) into typed tuples

def _get_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _get_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _get_str(value: Any) -> str:
    return "" if value is None else str(value)


def _get_amounts(value: Any, default: float) -> Dict[str, Any]:
    """Normalize a mapping of id -> amount; unparsable amounts become ``default``."""
    if not isinstance(value, dict):
        return {}
    out: Dict[str, Any] = {}
    for key, amount in value.items():
        if isinstance(default, int):
            out[str(key)] = _get_int(amount, default)
        else:
            out[str(key)] = _get_float(amount, default)
    return out


def parse_upgrade_building(cmd: Dict[str, Any]) -> Tuple[str, str]:
    return _get_str(cmd.get("planet_id")), _get_str(cmd.get("building_id"))


def parse_start_research(cmd: Dict[str, Any]) -> str:
    return _get_str(cmd.get("research_id"))


def parse_build_unit(cmd: Dict[str, Any]) -> Tuple[str, str, int]:
    return (
        _get_str(cmd.get("planet_id")),
        _get_str(cmd.get("unit_type")),
        _get_int(cmd.get("count"), 1),
    )


def parse_build_defense(cmd: Dict[str, Any]) -> Tuple[str, str, int]:
    return (
        _get_str(cmd.get("planet_id")),
        _get_str(cmd.get("defense_type")),
        _get_int(cmd.get("count"), 1),
    )


def parse_launch_fleet(cmd: Dict[str, Any]) -> FleetSpec:
    """Accept the spec either nested under "fleet" or inline in the command."""
    raw = cmd.get("fleet") if isinstance(cmd.get("fleet"), dict) else cmd
    spec: FleetSpec = {
        "origin": _get_str(raw.get("origin")),
        "destination": _get_str(raw.get("destination")),
        "mission": _get_str(raw.get("mission")),
        # Unparsable counts turn negative so validation rejects them
        "units": _get_amounts(raw.get("units"), -1),
        "cargo": _get_amounts(raw.get("cargo"), -1.0),
    }
    return spec


def parse_rename_planet(cmd: Dict[str, Any]) -> Tuple[str, str]:
    return _get_str(cmd.get("planet_id")), _get_str(cmd.get("name"))


def parse_set_simulation_speed(cmd: Dict[str, Any]) -> float:
    return _get_float(cmd.get("multiplier"), 0.0)


def parse_advance_simulation(cmd: Dict[str, Any]) -> float:
    return _get_float(cmd.get("elapsed_ms"), 0.0)
