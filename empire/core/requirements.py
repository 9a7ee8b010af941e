from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from empire.models import Buildings, Requirements, Research
from empire.core.catalog import building_name, technology_name


@dataclass
class RequirementCheck:
    met: bool
    missing: List[str] = field(default_factory=list)


def check_requirements(
    requirements: Optional[Requirements],
    buildings: Optional[Buildings],
    research: Optional[Research],
) -> RequirementCheck:
    """Evaluate a requirement set against a planet's buildings and the empire research.

    A requirement naming a building or technology that is not on record is
    unmet. Missing entries read "<Name> level <N>".
    """
    missing: List[str] = []
    if requirements is None or requirements.is_empty():
        return RequirementCheck(met=True)

    for building_id, level in requirements.buildings.items():
        building = buildings.get(building_id) if buildings is not None else None
        if building is None or building.level < level:
            name = building.name if building is not None else building_name(building_id)
            missing.append(f"{name} level {level}")

    for tech_id, level in requirements.research.items():
        tech = research.get(tech_id) if research is not None else None
        if tech is None or tech.level < level:
            name = tech.name if tech is not None else technology_name(tech_id)
            missing.append(f"{name} level {level}")

    return RequirementCheck(met=not missing, missing=missing)


def split_requirements(raw: Mapping[str, int], building_ids: Iterable[str]) -> Requirements:
    """Split a flat id -> level mapping into building and research parts."""
    known_buildings = set(building_ids)
    buildings = {}
    research = {}
    for key, level in raw.items():
        if key in known_buildings:
            buildings[key] = int(level)
        else:
            research[key] = int(level)
    return Requirements(buildings=buildings, research=research)
