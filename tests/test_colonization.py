import pytest

from empire.core.game import GameWorld
from empire.models import Coordinates, Garrison


def _home_coords(game):
    return game._coordinates_of(game._planet_entity("planet-1"))


def _free_slot_at(game, distance):
    home = _home_coords(game)
    for position in (home.position + distance, home.position - distance):
        coords = Coordinates(home.galaxy, home.system, position)
        if game.universe.contains(coords) and not game.universe.is_colonized(coords):
            return coords
    raise AssertionError("no free slot at that distance")


def _home_garrison(game):
    return game.world.component_for_entity(game._planet_entity("planet-1"), Garrison)


def _colonize(game, target, units=None, cargo=None):
    return game.launch_fleet({
        "origin": "planet-1",
        "destination": str(target),
        "mission": "colonize",
        "units": units or {"colony_ship": 1},
        "cargo": cargo or {},
    })


def test_colonize_founds_a_planet_on_arrival(game):
    garrison = _home_garrison(game)
    garrison.units["colony_ship"] = 1
    target = _free_slot_at(game, 2)

    result = _colonize(game, target, cargo={"iron": 1000})
    assert result.ok
    assert result.value["travel"]["total"] == 120
    assert garrison.units["colony_ship"] == 0

    game.advance_simulation(60000)
    assert game.planet_count() == 1
    assert len(game.list_fleets()) == 1

    game.advance_simulation(60000)
    assert game.planet_count() == 2
    assert game.list_fleets() == []
    assert game.universe.is_colonized(target)

    colony = game.get_planet("planet-2")
    assert colony["coordinates"] == str(target)
    assert colony["is_homeworld"] is False
    assert colony["name"] == "Colony planet-2"
    assert colony["resources"]["iron"]["current"] >= 151000
    assert colony["resources"]["kryptonite"]["current"] == 100000
    assert colony["units"] == {}


def test_escorts_stay_at_the_new_colony(game):
    _home_garrison(game).units.update({"colony_ship": 1, "small_transport": 1})
    target = _free_slot_at(game, 1)

    assert _colonize(game, target, units={"colony_ship": 1, "small_transport": 1})
    game.advance_simulation(60000)

    assert game.get_planet("planet-2")["units"] == {"small_transport": 1}


def test_colonize_launch_rejections(game):
    garrison = _home_garrison(game)
    garrison.units.update({"colony_ship": 1, "fighter": 1})

    result = _colonize(game, _free_slot_at(game, 1), units={"fighter": 1})
    assert result.kind == "prerequisite"
    assert result.missing == ["Colony Ship"]

    assert _colonize(game, _home_coords(game)).kind == "invalid_target"

    taken = _free_slot_at(game, 1)
    game.universe.mark_colonized(taken)
    assert _colonize(game, taken).kind == "invalid_target"

    crowded = GameWorld(seed=1234, speed=1.0, max_planets=1)
    _home_garrison(crowded).units["colony_ship"] = 1
    result = _colonize(crowded, _free_slot_at(crowded, 1))
    assert result.kind == "capacity"

    assert garrison.units == {"colony_ship": 1, "fighter": 1}
    assert game.list_fleets() == []


def test_planet_cap_reached_in_transit_returns_fleet():
    game = GameWorld(seed=1234, speed=1.0, max_planets=2)
    garrison = _home_garrison(game)
    garrison.units["colony_ship"] = 2

    assert _colonize(game, _free_slot_at(game, 1))
    late = _free_slot_at(game, 2)
    assert _colonize(game, late, cargo={"iron": 500})

    game.advance_simulation(120000)
    assert game.planet_count() == 2
    fleets = game.list_fleets()
    assert len(fleets) == 1
    assert fleets[0]["returning"] is True
    assert not game.universe.is_colonized(late)

    game.advance_simulation(120000)
    assert game.list_fleets() == []
    assert game.planet_count() == 2
    assert garrison.units["colony_ship"] == 1
    assert game.get_planet("planet-1")["resources"]["iron"]["current"] == pytest.approx(550000)


def test_planet_cap_loses_fleet_when_returns_disabled():
    game = GameWorld(seed=1234, speed=1.0, max_planets=2, colonize_failure_returns_fleet=False)
    garrison = _home_garrison(game)
    garrison.units["colony_ship"] = 2

    assert _colonize(game, _free_slot_at(game, 1))
    assert _colonize(game, _free_slot_at(game, 2))

    game.advance_simulation(120000)
    assert game.list_fleets() == []
    assert game.planet_count() == 2
    assert garrison.units["colony_ship"] == 0

    game.advance_simulation(240000)
    assert garrison.units["colony_ship"] == 0


def test_slot_taken_in_transit(game):
    garrison = _home_garrison(game)
    garrison.units["colony_ship"] = 1
    target = _free_slot_at(game, 1)

    assert _colonize(game, target)
    game.universe.mark_colonized(target)

    game.advance_simulation(120000)
    assert game.planet_count() == 1
    assert game.list_fleets() == []
    assert garrison.units["colony_ship"] == 1


def test_planet_ids_stay_unique(game):
    _home_garrison(game).units["colony_ship"] = 3
    for distance in (1, 2, 3):
        assert _colonize(game, _free_slot_at(game, distance))
    game.advance_simulation(600000)

    ids = [p["id"] for p in game.list_planets()]
    assert ids == ["planet-1", "planet-2", "planet-3", "planet-4"]
    assert len({p["coordinates"] for p in game.list_planets()}) == 4
