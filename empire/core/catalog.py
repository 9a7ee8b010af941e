"""Static game catalogs: buildings, research tree, combat units and defenses.

All entries are keyed by stable string ids. Growth factors live in
``empire.core.config``; tune those instead of editing individual entries.
"""
from __future__ import annotations

from typing import Dict

from empire.models import (
    BuildingTemplate,
    TechnologyTemplate,
    UnitTemplate,
    DefenseTemplate,
)

# Building ids
IRON_MINE = "iron_mine"
KRYPTONITE_EXTRACTOR = "kryptonite_extractor"
METAL_FOUNDRY = "metal_foundry"
SPICE_MINE = "spice_mine"
FUSION_PLANT = "fusion_plant"
SOLAR_PLANT = "solar_plant"
IRON_STORAGE = "iron_storage"
KRYPTONITE_STORAGE = "kryptonite_storage"
METAL_STORAGE = "metal_storage"
SPICE_STORAGE = "spice_storage"
RESEARCH_LAB = "research_lab"
WEAPONS_FACTORY = "weapons_factory"
STARBASE = "starbase"
DEVELOPMENT_CENTER = "development_center"
MICROSYSTEM_ACCELERATOR = "microsystem_accelerator"

# Technology ids referenced by the production formulas
ENERGY_TECHNOLOGY = "energy_technology"
MINING_TECHNOLOGY = "mining_technology"

COLONY_SHIP = "colony_ship"

# Which stockpile each producing building feeds
PRODUCTION_TARGETS: Dict[str, str] = {
    IRON_MINE: "iron",
    KRYPTONITE_EXTRACTOR: "kryptonite",
    METAL_FOUNDRY: "metal",
    SPICE_MINE: "spice",
    SOLAR_PLANT: "energy",
    FUSION_PLANT: "energy",
}

MINING_BUILDINGS = frozenset({IRON_MINE, KRYPTONITE_EXTRACTOR, SPICE_MINE})
ENERGY_BUILDINGS = frozenset({SOLAR_PLANT, FUSION_PLANT})

STORAGE_BUILDINGS: Dict[str, str] = {
    "iron": IRON_STORAGE,
    "kryptonite": KRYPTONITE_STORAGE,
    "metal": METAL_STORAGE,
    "spice": SPICE_STORAGE,
}

FLEET_MISSIONS = ("attack", "spy", "transport", "recycle", "park", "colonize")


def _building(bid, name, production, consumption, iron, kryptonite, spaces=1, buildings=None, research=None):
    return BuildingTemplate(
        id=bid,
        name=name,
        base_production=float(production),
        base_consumption=float(consumption),
        base_costs={"iron": iron, "kryptonite": kryptonite},
        spaces=spaces,
        required_buildings=dict(buildings or {}),
        required_research=dict(research or {}),
    )


BUILDINGS: Dict[str, BuildingTemplate] = {
    t.id: t
    for t in (
        _building(IRON_MINE, "Iron Mine", 30, 10, 60, 15),
        _building(KRYPTONITE_EXTRACTOR, "Kryptonite Extractor", 20, 10, 75, 30),
        _building(METAL_FOUNDRY, "Metal Foundry", 15, 10, 150, 50),
        _building(SPICE_MINE, "Spice Mine", 15, 12, 80, 40),
        _building(FUSION_PLANT, "Fusion Plant", 100, 0, 500, 200),
        _building(IRON_STORAGE, "Iron Storage", 0, 0, 100, 25),
        _building(KRYPTONITE_STORAGE, "Kryptonite Storage", 0, 0, 100, 25),
        _building(METAL_STORAGE, "Metal Storage", 0, 0, 100, 25),
        _building(SPICE_STORAGE, "Spice Storage", 0, 0, 100, 25),
        _building(RESEARCH_LAB, "Research Laboratory", 0, 10, 2000, 1000, spaces=2),
        _building(WEAPONS_FACTORY, "Weapons Factory", 0, 20, 1500, 750, spaces=2),
        _building(STARBASE, "Starbase", 0, 30, 3000, 1500, spaces=3),
        _building(DEVELOPMENT_CENTER, "Development Center", 0, 15, 1000, 500, spaces=2),
        _building(
            SOLAR_PLANT, "Solar Plant", 50, 0, 200, 50,
            buildings={SPICE_MINE: 6},
            research={ENERGY_TECHNOLOGY: 4},
        ),
        _building(
            MICROSYSTEM_ACCELERATOR, "Microsystem Accelerator", 0, 20, 4000, 2000,
            buildings={RESEARCH_LAB: 3, DEVELOPMENT_CENTER: 5},
        ),
    )
}


def _tech(tid, name, effect, iron, kryptonite, metal, **requirements):
    return TechnologyTemplate(
        id=tid,
        name=name,
        effect=effect,
        costs={"iron": iron, "kryptonite": kryptonite, "metal": metal},
        requirements=requirements,
    )


TECHNOLOGIES: Dict[str, TechnologyTemplate] = {
    t.id: t
    for t in (
        _tech(ENERGY_TECHNOLOGY, "Energy Technology", 0.1, 800, 400, 200, research_lab=1),
        _tech("graviton_technology", "Graviton Technology", 0.15, 2000, 1000, 500,
              research_lab=1, energy_technology=2),
        _tech(MINING_TECHNOLOGY, "Mining Technology", 0.12, 1500, 750, 375,
              research_lab=1, energy_technology=4),
        _tech("shield_technology", "Shield Technology", 0.1, 2500, 1250, 625,
              research_lab=1, energy_technology=4),
        _tech("targeting_system", "Targeting System", 0.1, 3000, 1500, 750,
              research_lab=1, energy_technology=6),
        _tech("propulsion_research", "Propulsion Research", 0.1, 1000, 500, 250, research_lab=1),
        _tech("rocket_engines", "Rocket Engines", 0.1, 2000, 1000, 500,
              research_lab=1, propulsion_research=2),
        _tech("diffusion_drive", "Diffusion Drive", 0.15, 4000, 2000, 1000,
              research_lab=1, propulsion_research=6),
        _tech("warp_drive", "Warp Drive", 0.2, 8000, 4000, 2000,
              research_lab=1, propulsion_research=8),
        _tech("espionage_technology", "Espionage Technology", 0.1, 3000, 1500, 750, research_lab=3),
        _tech("weapon_technology", "Weapon Technology", 0.1, 4000, 2000, 1000, research_lab=3),
        _tech("defense_systems", "Defense Systems", 0.1, 5000, 2500, 1250, research_lab=5),
        _tech("particle_analyzer", "Particle Analyzer", 0.15, 6000, 3000, 1500,
              research_lab=1, shield_technology=5),
        _tech("teleportation", "Teleportation", 0.2, 10000, 5000, 2500, research_lab=10),
        _tech("black_hole_research", "Black Hole Research", 0.25, 20000, 10000, 5000,
              research_lab=1, graviton_technology=10, warp_drive=10),
    )
}


def _unit(uid, name, stats, cost, factory, build_time):
    attack, defense, shield, speed, capacity, consumption = stats
    iron, kryptonite, metal = cost
    return UnitTemplate(
        id=uid,
        name=name,
        attack=attack,
        defense=defense,
        shield=shield,
        speed=speed,
        capacity=capacity,
        consumption=consumption,
        cost={"iron": iron, "kryptonite": kryptonite, "metal": metal},
        requirements={WEAPONS_FACTORY: factory},
        build_time=build_time,
    )


# stats: attack, defense (hull), shield, speed, cargo capacity, fuel per hour
UNITS: Dict[str, UnitTemplate] = {
    t.id: t
    for t in (
        _unit("small_transport", "Small Transport", (2, 6000, 10, 3000, 6000, 2), (2000, 1000, 1500), 1, 1200),
        _unit("large_transport", "Large Transport", (5, 14000, 25, 5000, 30000, 15), (6000, 3000, 4500), 2, 2400),
        _unit("transmitter", "Transmitter", (130, 50000, 70, 7000, 250000, 25), (20000, 10000, 15000), 2, 4800),
        _unit("fighter", "Fighter", (50, 6000, 10, 9000, 60, 15), (3000, 1500, 2000), 2, 1800),
        _unit("frigate", "Frigate", (90, 12000, 30, 6500, 100, 26), (6000, 3000, 4000), 3, 3600),
        _unit("star_cruiser", "Star Cruiser", (250, 35000, 100, 4800, 200, 40), (20000, 10000, 15000), 9, 7200),
        _unit("phoenix", "Phoenix", (320, 50000, 180, 8000, 500, 55), (30000, 15000, 20000), 5, 9600),
        _unit("battleship", "Battleship", (300, 60000, 300, 6800, 1000, 90), (40000, 20000, 30000), 7, 14400),
        _unit("stealth_bomber", "Stealth Bomber", (300, 100000, 100, 5200, 1400, 110), (50000, 25000, 35000), 8, 18000),
        _unit("destroyer", "Destroyer", (700, 110000, 400, 4000, 3000, 130), (60000, 30000, 45000), 9, 21600),
        _unit("imperial_star_base", "Imperial Star Base", (35000, 5000000, 15000, 300, 3500000, 250),
              (1000000, 500000, 750000), 12, 43200),
        _unit("spy_probe", "Spy Probe", (0, 3000, 6, 15000000, 0, 3), (1000, 500, 750), 1, 900),
        _unit("recycler", "Recycler", (8, 17000, 30, 2000, 25000, 20), (10000, 5000, 7500), 4, 3600),
        _unit(COLONY_SHIP, "Colony Ship", (10, 45000, 80, 1500, 5000, 32), (20000, 10000, 15000), 4, 14400),
    )
}


def _defense(did, name, stats, cost, factory, build_time):
    attack, defense, shield = stats
    iron, kryptonite, metal = cost
    return DefenseTemplate(
        id=did,
        name=name,
        attack=attack,
        defense=defense,
        shield=shield,
        cost={"iron": iron, "kryptonite": kryptonite, "metal": metal},
        requirements={WEAPONS_FACTORY: factory},
        build_time=build_time,
    )


DEFENSES: Dict[str, DefenseTemplate] = {
    t.id: t
    for t in (
        _defense("mortar", "Mortar", (35, 2000, 15), (2000, 1000, 1500), 1, 900),
        _defense("light_graviton_cannon", "Light Graviton Cannon", (50, 3000, 25), (3000, 1500, 2000), 2, 1800),
        _defense("heavy_graviton_cannon", "Heavy Graviton Cannon", (115, 7000, 60), (6000, 3000, 4000), 3, 3600),
        _defense("ion_cannon", "Ion Cannon", (125, 10000, 125), (8000, 4000, 6000), 4, 5400),
        _defense("turbo_battery", "Turbo Battery", (220, 12000, 80), (10000, 5000, 7500), 6, 7200),
        _defense("positron_emitter", "Positron Emitter", (700, 40000, 200), (25000, 12500, 18750), 8, 10800),
        _defense("interval_cannon", "Interval Cannon", (900, 30000, 100), (20000, 10000, 15000), 7, 9000),
        _defense("laser_battery", "Laser Battery", (1000, 40000, 400), (25000, 12500, 18750), 8, 12600),
        _defense("solar_cannon", "Solar Cannon", (2000, 120000, 1000), (50000, 25000, 37500), 10, 18000),
        _defense("small_shield_dome", "Small Shield Dome", (0, 13000, 3000), (10000, 5000, 7500), 2, 7200),
        _defense("large_shield_dome", "Large Shield Dome", (0, 40000, 30000), (30000, 15000, 22500), 6, 14400),
        _defense("solar_cell", "Solar Cell", (0, 2200, 5), (2000, 1000, 1500), 1, 1800),
    )
}

# Starting stockpiles; every capacity starts at the base storage capacity
HOMEWORLD_RESOURCES: Dict[str, float] = {
    "iron": 550000.0,
    "kryptonite": 320000.0,
    "metal": 200000.0,
    "spice": 80000.0,
}

COLONY_RESOURCES: Dict[str, float] = {
    "iron": 150000.0,
    "kryptonite": 100000.0,
    "metal": 50000.0,
    "spice": 20000.0,
}


def building_name(building_id: str) -> str:
    template = BUILDINGS.get(building_id)
    return template.name if template is not None else building_id


def technology_name(tech_id: str) -> str:
    template = TECHNOLOGIES.get(tech_id)
    return template.name if template is not None else tech_id
