"""Transit time, fuel and cargo figures for fleets.

Travel time depends only on the two coordinates. Fleet speed is reported for
display but does not scale the duration.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from empire.core.catalog import UNITS
from empire.core.config import (
    BASE_GALAXY_TRAVEL,
    BASE_SYSTEM_TRAVEL,
    INTRA_SYSTEM_SPAN_SECONDS,
    POSITIONS_PER_SYSTEM,
    SYSTEM_DISTANCE_SECONDS,
)
from empire.models import Coordinates

INTRA_SYSTEM = "intra_system"
INTER_SYSTEM = "inter_system"
INTER_GALAXY = "inter_galaxy"


@dataclass(frozen=True)
class TravelTime:
    minutes: int
    seconds: int
    total: int
    travel_type: str

    def to_dict(self) -> dict:
        return {
            "minutes": self.minutes,
            "seconds": self.seconds,
            "total": self.total,
            "travel_type": self.travel_type,
        }


def parse_coordinates(value: str) -> Coordinates:
    """Parse a "galaxy:system:position" string. Raises ValueError when malformed."""
    parts = str(value).split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid coordinates {value!r}")
    galaxy, system, position = (int(p) for p in parts)
    return Coordinates(galaxy=galaxy, system=system, position=position)


def _offset_from_midpoint(position: int) -> float:
    return abs(position - POSITIONS_PER_SYSTEM / 2)


def _edge_seconds(origin: Coordinates, destination: Coordinates) -> float:
    # Time to reach the system edge from each endpoint
    offsets = _offset_from_midpoint(origin.position) + _offset_from_midpoint(destination.position)
    return offsets * INTRA_SYSTEM_SPAN_SECONDS / POSITIONS_PER_SYSTEM


def calculate_travel_time(origin: Coordinates, destination: Coordinates) -> TravelTime:
    if origin.galaxy != destination.galaxy:
        travel_type = INTER_GALAXY
    elif origin.system != destination.system:
        travel_type = INTER_SYSTEM
    else:
        travel_type = INTRA_SYSTEM

    system_diff = abs(origin.system - destination.system)
    if travel_type == INTRA_SYSTEM:
        distance = abs(origin.position - destination.position)
        total = math.ceil(distance * INTRA_SYSTEM_SPAN_SECONDS / POSITIONS_PER_SYSTEM)
    elif travel_type == INTER_SYSTEM:
        total = math.ceil(
            BASE_SYSTEM_TRAVEL
            + system_diff * SYSTEM_DISTANCE_SECONDS
            + _edge_seconds(origin, destination)
        )
    else:
        total = (
            BASE_GALAXY_TRAVEL
            + system_diff * SYSTEM_DISTANCE_SECONDS
            + math.ceil(_edge_seconds(origin, destination))
        )

    total = int(total)
    return TravelTime(minutes=total // 60, seconds=total % 60, total=total, travel_type=travel_type)


def calculate_fuel_consumption(units: Mapping[str, int], travel_seconds: float) -> int:
    hourly = 0
    for unit_id, count in units.items():
        template = UNITS.get(unit_id)
        if template is None or count <= 0:
            continue
        hourly += template.consumption * count
    return int(math.ceil(hourly * travel_seconds / 3600.0))


def calculate_fleet_speed(units: Mapping[str, int]) -> int:
    """Slowest selected unit speed; 0 for an empty selection."""
    speeds = [
        UNITS[unit_id].speed
        for unit_id, count in units.items()
        if count > 0 and unit_id in UNITS
    ]
    return min(speeds) if speeds else 0


def calculate_cargo_capacity(units: Mapping[str, int]) -> int:
    return sum(
        UNITS[unit_id].capacity * count
        for unit_id, count in units.items()
        if count > 0 and unit_id in UNITS
    )
