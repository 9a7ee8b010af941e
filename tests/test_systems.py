import esper
import pytest

from empire.models import Buildings, Coordinates, FleetMovement, Garrison, Research, Resources, UnitQueue
from empire.systems import (
    BuildingConstructionSystem,
    FleetMovementSystem,
    ResearchSystem,
    ResourceProductionSystem,
    ShipyardSystem,
)
from empire.systems.planet_creation import build_research, create_empire, create_planet


class StubFounder:
    """Records colony requests instead of creating planets."""

    colonize_failure_returns_fleet = True

    def __init__(self, blocker=None):
        self.blocker = blocker
        self.founded = []

    def colony_blocker(self, coords):
        return self.blocker

    def found_colony(self, coords, cargo, units):
        self.founded.append((coords, cargo, units))
        return "planet-x"


def _world(*processors):
    world = esper.World()
    for processor in processors:
        world.add_processor(processor)
    planet = create_planet(world, "planet-1", "Home", Coordinates(1, 1, 5), {"iron": 1000}, sun_distance=50)
    return world, planet


def test_production_system_uses_empire_research():
    world, planet = _world(ResourceProductionSystem())
    research = build_research()
    research.get("mining_technology").level = 1
    world.create_entity(research)
    buildings = world.component_for_entity(planet, Buildings)
    buildings.get("iron_mine").level = 1
    buildings.get("fusion_plant").level = 1

    world.process(3600.0, 3600000.0)

    iron = world.component_for_entity(planet, Resources).iron
    assert iron.production == pytest.approx(30 * 1.12)
    assert iron.current == pytest.approx(1000 + 30 * 1.12)


def test_construction_system_ignores_zero_elapsed():
    world, planet = _world(BuildingConstructionSystem())
    mine = world.component_for_entity(planet, Buildings).get("iron_mine")
    mine.is_upgrading = True
    mine.upgrade_time_remaining = 5.0

    world.process(0.0, 0.0)
    assert mine.upgrade_time_remaining == 5.0

    world.process(5.0, 5000.0)
    assert mine.level == 1
    assert not mine.is_upgrading


def test_research_system_completes_active_research():
    world = esper.World()
    world.add_processor(ResearchSystem())
    ent = create_empire(world, "Tester", 3)
    tech = world.component_for_entity(ent, Research).get("energy_technology")
    tech.is_researching = True
    tech.time_remaining = 30.0
    tech.planet_id = "planet-1"

    world.process(20.0, 20000.0)
    assert tech.time_remaining == pytest.approx(10.0)
    world.process(15.0, 35000.0)
    assert tech.level == 1
    assert tech.planet_id is None


def test_shipyard_credits_finished_batches():
    world, planet = _world(ShipyardSystem())
    queue = world.component_for_entity(planet, UnitQueue)
    queue.items.append({"type": "fighter", "count": 2, "time_remaining": 10.0, "cost": {}})
    queue.items.append({"type": "fighter", "count": 1, "time_remaining": 30.0, "cost": {}})

    world.process(10.0, 10000.0)
    garrison = world.component_for_entity(planet, Garrison)
    assert garrison.units == {"fighter": 2}
    assert len(queue.items) == 1
    assert queue.items[0]["time_remaining"] == pytest.approx(20.0)


def test_fleet_system_colonizes_through_founder():
    founder = StubFounder()
    world, _planet = _world(FleetMovementSystem(founder))
    world.create_entity(FleetMovement(
        id="fleet-1",
        units={"colony_ship": 1, "fighter": 2},
        origin="planet-1",
        destination="1:1:7",
        mission="colonize",
        cargo={"iron": 10.0},
        arrival_time=1000.0,
    ))

    world.process(1.0, 1000.0)

    assert founder.founded == [(Coordinates(1, 1, 7), {"iron": 10.0}, {"fighter": 2})]
    assert list(world.get_component(FleetMovement)) == []


def test_fleet_system_returns_blocked_colonizers():
    founder = StubFounder(blocker="planet limit reached")
    world, planet = _world(FleetMovementSystem(founder))
    world.create_entity(FleetMovement(
        id="fleet-1",
        units={"colony_ship": 1},
        origin="planet-1",
        destination="1:1:7",
        mission="colonize",
        departure_time=0.0,
        arrival_time=1000.0,
    ))

    world.process(1.0, 1000.0)
    [(_ent, fleet)] = world.get_component(FleetMovement)
    assert fleet.returning
    assert fleet.return_time == 2000.0

    world.process(1.0, 2000.0)
    assert founder.founded == []
    assert world.component_for_entity(planet, Garrison).units == {"colony_ship": 1}

    founder.colonize_failure_returns_fleet = False
    world.create_entity(FleetMovement(
        id="fleet-2",
        units={"colony_ship": 1},
        origin="planet-1",
        destination="1:1:7",
        mission="colonize",
        arrival_time=3000.0,
    ))
    world.process(1.0, 3000.0)
    assert list(world.get_component(FleetMovement)) == []
    assert world.component_for_entity(planet, Garrison).units == {"colony_ship": 1}
