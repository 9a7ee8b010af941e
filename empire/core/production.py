"""Per-planet production and consumption rates.

Rates are per hour. The calculation runs in two passes: energy totals first,
then every resource building throttled by the energy efficiency ratio. Nothing
here mutates state except ``apply_production``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from empire.core.catalog import (
    ENERGY_BUILDINGS,
    ENERGY_TECHNOLOGY,
    METAL_FOUNDRY,
    MINING_BUILDINGS,
    MINING_TECHNOLOGY,
    PRODUCTION_TARGETS,
    SOLAR_PLANT,
    SPICE_MINE,
    STORAGE_BUILDINGS,
)
from empire.core.config import (
    BASE_STORAGE_CAPACITY,
    PRODUCTION_MULTIPLIER,
    STORAGE_CAPACITY_GROWTH,
)
from empire.models import RESOURCE_TYPES, Building, Buildings, Research, Resources


@dataclass
class ProductionReport:
    """Rates derived for one planet and one tick.

    ``full_yield`` holds the unthrottled output per resource so callers can
    compare it with the realized ``production``.
    """
    production: Dict[str, float] = field(default_factory=lambda: {r: 0.0 for r in RESOURCE_TYPES})
    consumption: Dict[str, float] = field(default_factory=lambda: {r: 0.0 for r in RESOURCE_TYPES})
    capacity: Dict[str, float] = field(default_factory=dict)
    full_yield: Dict[str, float] = field(default_factory=lambda: {r: 0.0 for r in RESOURCE_TYPES})
    energy_production: float = 0.0
    energy_consumption: float = 0.0
    efficiency: float = 1.0


def technology_bonus(research: Optional[Research], tech_id: str) -> float:
    if research is None:
        return 1.0
    tech = research.get(tech_id)
    if tech is None or tech.level == 0:
        return 1.0
    return 1.0 + tech.level * tech.effect


def storage_capacity(base: float, level: int) -> float:
    if level <= 0:
        return float(base)
    return float(base) * (STORAGE_CAPACITY_GROWTH ** level)


def building_yield(building: Building, sun_distance: float, research: Optional[Research]) -> float:
    """Unthrottled hourly output of one building, after technology and distance modifiers."""
    if building.level <= 0 or building.base_production == 0:
        return 0.0

    base = building.base_production * (PRODUCTION_MULTIPLIER ** (building.level - 1))

    if building.id in MINING_BUILDINGS:
        bonus = technology_bonus(research, MINING_TECHNOLOGY)
    elif building.id in ENERGY_BUILDINGS:
        bonus = technology_bonus(research, ENERGY_TECHNOLOGY)
    else:
        bonus = 1.0

    value = base * bonus
    if building.id == SPICE_MINE:
        value *= 1 + sun_distance / 100.0
    elif building.id == SOLAR_PLANT:
        value *= 1 - sun_distance / 200.0
    return max(0.0, value)


def energy_totals(buildings: Iterable[Building], sun_distance: float, research: Optional[Research]):
    """Return (produced, consumed) energy per hour for a set of buildings."""
    produced = 0.0
    consumed = 0.0
    for building in buildings:
        if building.level <= 0:
            continue
        if building.id in ENERGY_BUILDINGS:
            produced += building_yield(building, sun_distance, research)
        if building.base_consumption > 0:
            consumed += building.base_consumption * building.level
    return produced, consumed


def calculate_production(
    buildings: Buildings,
    resources: Resources,
    sun_distance: float,
    research: Optional[Research],
) -> ProductionReport:
    report = ProductionReport()

    for resource, storage_id in STORAGE_BUILDINGS.items():
        report.capacity[resource] = storage_capacity(BASE_STORAGE_CAPACITY, buildings.level(storage_id))

    produced, consumed = energy_totals(buildings, sun_distance, research)
    report.energy_production = produced
    report.energy_consumption = consumed
    report.efficiency = min(1.0, produced / max(1.0, consumed))

    overflowing = {
        resource for resource in RESOURCE_TYPES
        if resources.pool(resource).current > report.capacity[resource]
    }

    for building in buildings:
        if building.level <= 0:
            continue
        resource = PRODUCTION_TARGETS.get(building.id)
        if resource is None or resource == "energy":
            continue

        full = building_yield(building, sun_distance, research)
        actual = full * report.efficiency
        report.full_yield[resource] += full
        if resource not in overflowing:
            report.production[resource] += actual

        # The foundry smelts two iron per metal it actually outputs
        if building.id == METAL_FOUNDRY:
            report.consumption["iron"] += actual * 2

    return report


def apply_production(resources: Resources, report: ProductionReport, elapsed_hours: float) -> Dict[str, float]:
    """Write the report into the pools and accrue ``elapsed_hours`` of net output.

    Returns the realized change per resource.
    """
    deltas: Dict[str, float] = {}
    for resource in RESOURCE_TYPES:
        pool = resources.pool(resource)
        pool.capacity = report.capacity[resource]
        pool.production = report.production[resource]
        pool.consumption = report.consumption[resource]

        before = pool.current
        net = (pool.production - pool.consumption) * elapsed_hours
        pool.current = max(0.0, before + net)
        if pool.current > pool.capacity:
            pool.production = 0.0
        deltas[resource] = pool.current - before

    resources.energy.production = report.energy_production
    resources.energy.consumption = report.energy_consumption
    return deltas


def calculate_production_increase(building: Building) -> float:
    """Base output gained by the next level, before bonuses."""
    if building.base_production == 0:
        return 0.0
    current = 0.0 if building.level == 0 else building.base_production * (
        PRODUCTION_MULTIPLIER ** (building.level - 1)
    )
    upcoming = building.base_production * (PRODUCTION_MULTIPLIER ** building.level if building.level else 1.0)
    return upcoming - current
