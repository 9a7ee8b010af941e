"""Entity factories for the empire aggregate and its planets.

Planets are created with every catalog building at level 0 and a starting
stockpile; the empire entity carries the research tree at level 0.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

import esper

from empire.core.catalog import BUILDINGS, TECHNOLOGIES
from empire.core.config import BASE_STORAGE_CAPACITY, INITIAL_PLANET_SPACES
from empire.core.requirements import split_requirements
from empire.models import (
    RESOURCE_TYPES,
    Building,
    Buildings,
    Coordinates,
    DefenseQueue,
    Empire,
    Garrison,
    Planet,
    Position,
    Requirements,
    Research,
    ResourcePool,
    Resources,
    Technology,
    UnitQueue,
)

logger = logging.getLogger(__name__)


def build_buildings() -> Buildings:
    items = {}
    for template in BUILDINGS.values():
        items[template.id] = Building(
            id=template.id,
            name=template.name,
            base_production=template.base_production,
            base_consumption=template.base_consumption,
            base_costs=dict(template.base_costs),
            spaces=template.spaces,
            requirements=Requirements(
                buildings=dict(template.required_buildings),
                research=dict(template.required_research),
            ),
        )
    return Buildings(items=items)


def build_research() -> Research:
    items = {}
    for template in TECHNOLOGIES.values():
        items[template.id] = Technology(
            id=template.id,
            name=template.name,
            effect=template.effect,
            costs=dict(template.costs),
            requirements=split_requirements(template.requirements, BUILDINGS.keys()),
        )
    return Research(items=items)


def build_resources(endowment: Mapping[str, float]) -> Resources:
    pools = {
        name: ResourcePool(current=float(endowment.get(name, 0.0)), capacity=BASE_STORAGE_CAPACITY)
        for name in RESOURCE_TYPES
    }
    return Resources(**pools)


def create_empire(world: esper.World, name: str, max_planets: int) -> int:
    ent = world.create_entity(Empire(name=name, max_planets=max_planets), build_research())
    logger.info(
        "empire_created",
        extra={"action_type": "empire_created", "entity": ent, "empire_name": name},
    )
    return ent


def create_planet(
    world: esper.World,
    planet_id: str,
    name: str,
    coordinates: Coordinates,
    endowment: Mapping[str, float],
    sun_distance: float,
    total_spaces: Optional[int] = None,
    is_homeworld: bool = False,
) -> int:
    """Create a planet entity with all of its sibling components and return it."""
    planet = Planet(
        id=planet_id,
        name=name,
        total_spaces=INITIAL_PLANET_SPACES if total_spaces is None else int(total_spaces),
        sun_distance=float(sun_distance),
        is_homeworld=is_homeworld,
    )
    ent = world.create_entity(
        planet,
        Position(galaxy=coordinates.galaxy, system=coordinates.system, position=coordinates.position),
        build_resources(endowment),
        build_buildings(),
        Garrison(),
        UnitQueue(),
        DefenseQueue(),
    )
    logger.info(
        "planet_created",
        extra={
            "action_type": "planet_created",
            "entity": ent,
            "planet_id": planet_id,
            "coordinates": str(coordinates),
            "is_homeworld": is_homeworld,
        },
    )
    return ent
