from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping


@dataclass(frozen=True)
class BuildingTemplate:
    """Static definition of a building type; instantiated at level 0 on every planet."""
    id: str
    name: str
    base_production: float
    base_consumption: float
    base_costs: Mapping[str, int]
    spaces: int = 1
    required_buildings: Mapping[str, int] = field(default_factory=dict)
    required_research: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class TechnologyTemplate:
    """Static definition of a research entry.

    ``requirements`` is the flat mapping used by the research tree: keys are
    either building ids (the research laboratory) or other technology ids.
    """
    id: str
    name: str
    effect: float
    costs: Mapping[str, int]
    requirements: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class UnitTemplate:
    id: str
    name: str
    attack: int
    defense: int
    shield: int
    speed: int
    capacity: int
    consumption: int
    cost: Mapping[str, int]
    requirements: Mapping[str, int]
    build_time: int


@dataclass(frozen=True)
class DefenseTemplate:
    id: str
    name: str
    attack: int
    defense: int
    shield: int
    cost: Mapping[str, int]
    requirements: Mapping[str, int]
    build_time: int


@dataclass(frozen=True)
class Coordinates:
    galaxy: int
    system: int
    position: int

    def __str__(self) -> str:
        return f"{self.galaxy}:{self.system}:{self.position}"


@dataclass
class UniverseSlot:
    """One addressable planet slot of the generated universe."""
    coordinates: Coordinates
    temperature: int
    sun_distance: float
    total_spaces: int
    is_colonized: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "coordinates": str(self.coordinates),
            "temperature": self.temperature,
            "sun_distance": self.sun_distance,
            "total_spaces": self.total_spaces,
            "is_colonized": self.is_colonized,
        }
