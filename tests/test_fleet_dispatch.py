import pytest

from empire.models import Coordinates, Garrison, Resources


def _home(game):
    ent = game._planet_entity("planet-1")
    return ent, game._coordinates_of(ent)


def _free_slot_at(game, distance):
    """A free slot ``distance`` positions away from the homeworld, same system."""
    _ent, home = _home(game)
    for position in (home.position + distance, home.position - distance):
        coords = Coordinates(home.galaxy, home.system, position)
        if game.universe.contains(coords) and not game.universe.is_colonized(coords):
            return coords
    raise AssertionError("no free slot at that distance")


def _station(game, planet_id="planet-1", **units):
    ent = game._planet_entity(planet_id)
    garrison = game.world.component_for_entity(ent, Garrison)
    garrison.units.update(units)
    return garrison


def _spec(destination, units, mission="transport", cargo=None, origin="planet-1"):
    return {
        "origin": origin,
        "destination": destination,
        "mission": mission,
        "units": units,
        "cargo": cargo or {},
    }


@pytest.mark.parametrize(
    "spec",
    [
        _spec("1:1:1", {"small_transport": 1}, mission="invade"),
        _spec("1:1:1", {"small_transport": 1}, origin="planet-42"),
        _spec("1:1:1", {}),
        _spec("1:1:1", {"small_transport": 0}),
        _spec("1:1:1", {"death_star": 1}),
        _spec("1:1:1", {"small_transport": -2}),
        _spec("1:1:1", {"small_transport": 1}, cargo={"energy": 10}),
        _spec("1:1:1", {"small_transport": 1}, cargo={"iron": -5}),
        _spec("9:9:9", {"small_transport": 1}),
        _spec("1:16:1", {"small_transport": 1}),
        _spec("nowhere", {"small_transport": 1}),
    ],
)
def test_launch_rejects_invalid_targets(game, spec):
    _station(game, small_transport=1)
    result = game.launch_fleet(spec)
    assert result.kind == "invalid_target"
    assert game.list_fleets() == []


def test_launch_rejects_missing_units_and_cargo(game):
    target = str(_free_slot_at(game, 1))

    result = game.launch_fleet(_spec(target, {"small_transport": 2}))
    assert result.kind == "affordability"
    assert result.shortfall == {"small_transport": 2}

    garrison = _station(game, small_transport=1)
    result = game.launch_fleet(_spec(target, {"small_transport": 1}, cargo={"spice": 100000}))
    assert result.kind == "affordability"
    assert result.shortfall == {"spice": 20000}

    result = game.launch_fleet(_spec(target, {"small_transport": 1}, cargo={"iron": 7000}))
    assert result.kind == "capacity"

    assert garrison.units == {"small_transport": 1}
    assert game.get_planet("planet-1")["resources"]["iron"]["current"] == 550000


def test_launch_debits_units_and_cargo(game):
    garrison = _station(game, small_transport=3)
    target = str(_free_slot_at(game, 2))

    result = game.launch_fleet(_spec(target, {"small_transport": 2}, cargo={"iron": 5000}))

    assert result.ok
    assert result.value["fleet_id"] == "fleet-1"
    assert result.value["travel"]["total"] == 120
    assert result.value["arrival_time"] == 120000
    assert result.value["speed"] == 3000
    assert result.value["fuel_consumption"] == 1
    assert garrison.units == {"small_transport": 1}
    assert game.get_planet("planet-1")["resources"]["iron"]["current"] == 545000

    fleets = game.list_fleets()
    assert [f["id"] for f in fleets] == ["fleet-1"]
    assert fleets[0]["returning"] is False


def test_transport_to_own_planet_delivers(game):
    colony_id = game.found_colony(_free_slot_at(game, 3), {}, {})
    garrison = _station(game, small_transport=1)

    result = game.launch_fleet(_spec(colony_id, {"small_transport": 1}, cargo={"iron": 1000}))
    assert result.ok

    game.advance_simulation(result.value["travel"]["total"] * 1000 - 1000)
    assert len(game.list_fleets()) == 1

    game.advance_simulation(1000)
    assert game.list_fleets() == []
    colony = game.get_planet(colony_id)
    assert colony["units"] == {"small_transport": 1}
    assert colony["resources"]["iron"]["current"] == pytest.approx(151000)
    assert garrison.units == {"small_transport": 0}


@pytest.mark.parametrize("mission", ["attack", "spy", "recycle", "park", "transport"])
def test_non_colonize_missions_deliver_to_owned_planet(game, mission):
    colony_id = game.found_colony(_free_slot_at(game, 3), {}, {})
    garrison = _station(game, small_transport=1, fighter=2)

    result = game.launch_fleet(_spec(
        colony_id, {"small_transport": 1, "fighter": 2}, mission=mission, cargo={"iron": 1000, "spice": 50},
    ))
    assert result.ok

    game.advance_simulation(result.value["travel"]["total"] * 1000)
    assert game.list_fleets() == []
    colony = game.get_planet(colony_id)
    assert colony_id == "planet-2"
    assert colony["units"] == {"small_transport": 1, "fighter": 2}
    assert colony["resources"]["iron"]["current"] == pytest.approx(151000)
    assert colony["resources"]["spice"]["current"] == pytest.approx(20050)
    assert garrison.units == {"small_transport": 0, "fighter": 0}


def test_fleet_to_unowned_slot_turns_back(game):
    garrison = _station(game, small_transport=1)
    target = str(_free_slot_at(game, 2))

    result = game.launch_fleet(_spec(target, {"small_transport": 1}, mission="park", cargo={"iron": 1000}))
    assert result.ok

    game.advance_simulation(120 * 1000)
    fleets = game.list_fleets()
    assert len(fleets) == 1
    assert fleets[0]["returning"] is True
    assert fleets[0]["return_time"] == 240000

    game.advance_simulation(120 * 1000)
    assert game.list_fleets() == []
    assert garrison.units == {"small_transport": 1}
    ent, _coords = _home(game)
    assert game.world.component_for_entity(ent, Resources).iron.current == 550000


def test_long_step_covers_outbound_and_return(game):
    garrison = _station(game, fighter=2)
    target = str(_free_slot_at(game, 1))

    assert game.launch_fleet(_spec(target, {"fighter": 2}, mission="attack"))
    game.advance_simulation(10 * 60 * 1000)

    assert game.list_fleets() == []
    assert garrison.units == {"fighter": 2}


def test_fleets_resolve_in_arrival_order(game):
    _station(game, small_transport=2)
    near = str(_free_slot_at(game, 1))
    far = str(_free_slot_at(game, 2))

    first = game.launch_fleet(_spec(far, {"small_transport": 1}, mission="park"))
    second = game.launch_fleet(_spec(near, {"small_transport": 1}, mission="park"))

    fleets = game.list_fleets()
    assert [f["id"] for f in fleets] == [second.value["fleet_id"], first.value["fleet_id"]]


def test_fleet_speed_does_not_change_travel_time(game):
    # Speed is reported only; transit time depends on the coordinates alone
    _station(game, small_transport=1, colony_ship=1)
    target = str(_free_slot_at(game, 2))

    fast = game.launch_fleet(_spec(target, {"small_transport": 1}, mission="park"))
    slow = game.launch_fleet(_spec(target, {"colony_ship": 1}, mission="park"))

    assert fast.value["speed"] == 3000
    assert slow.value["speed"] == 1500
    assert fast.value["arrival_time"] == slow.value["arrival_time"]
