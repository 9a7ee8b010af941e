import unittest

from empire.models import (
    Buildings,
    Coordinates,
    DefenseQueue,
    Empire,
    FleetMovement,
    Garrison,
    Planet,
    Position,
    Requirements,
    Resources,
    UnitQueue,
)
from empire.systems.planet_creation import build_buildings, build_research, build_resources


class TestComponents(unittest.TestCase):
    def test_resources_defaults(self):
        r = Resources()
        for name in ("iron", "kryptonite", "metal", "spice"):
            self.assertEqual(r.pool(name).current, 0)
            self.assertEqual(r.pool(name).capacity, 100000)
        self.assertEqual(r.energy.production, 0)

    def test_unknown_resource_raises(self):
        with self.assertRaises(KeyError):
            Resources().pool("energy")

    def test_shortfall_and_debit(self):
        r = build_resources({"iron": 100, "kryptonite": 50})
        self.assertEqual(r.shortfall({"iron": 80, "kryptonite": 70}), {"kryptonite": 20})
        self.assertFalse(r.can_afford({"kryptonite": 70}))
        self.assertTrue(r.can_afford({"iron": 100, "metal": 0}))

        r.debit({"iron": 80})
        self.assertEqual(r.iron.current, 20)
        r.credit({"spice": 5})
        self.assertEqual(r.spice.current, 5)

    def test_snapshot_includes_energy(self):
        snap = build_resources({"iron": 1}).snapshot()
        self.assertEqual(set(snap), {"iron", "kryptonite", "metal", "spice", "energy"})
        self.assertEqual(snap["iron"]["current"], 1)

    def test_catalog_buildings_start_at_level_zero(self):
        buildings = build_buildings()
        self.assertIsInstance(buildings, Buildings)
        self.assertEqual(len(list(buildings)), 15)
        self.assertTrue(all(b.level == 0 and not b.is_upgrading for b in buildings))
        self.assertEqual(buildings.level("does_not_exist"), 0)
        solar = buildings.get("solar_plant")
        self.assertEqual(solar.requirements.buildings, {"spice_mine": 6})
        self.assertEqual(solar.requirements.research, {"energy_technology": 4})

    def test_research_tree_splits_requirements(self):
        research = build_research()
        self.assertEqual(len(list(research)), 15)
        self.assertIsNone(research.active())
        mining = research.get("mining_technology")
        self.assertEqual(mining.requirements.buildings, {"research_lab": 1})
        self.assertEqual(mining.requirements.research, {"energy_technology": 4})

    def test_other_components(self):
        pos = Position(1, 2, 3)
        self.assertEqual(pos.key, "1:2:3")
        self.assertEqual(str(Coordinates(2, 3, 4)), "2:3:4")
        self.assertTrue(Requirements().is_empty())
        self.assertEqual(Empire().max_planets, 10)
        planet = Planet(id="planet-1", name="Home")
        self.assertEqual(planet.total_spaces, 200)
        self.assertEqual(planet.used_spaces, 0)
        self.assertEqual(Garrison().units, {})
        self.assertEqual(UnitQueue().items, [])
        self.assertEqual(DefenseQueue().items, [])

        fleet = FleetMovement(id="fleet-1", units={"fighter": 1}, origin="planet-1",
                              destination="1:1:2", mission="park")
        self.assertFalse(fleet.returning)
        self.assertIsNone(fleet.return_time)


if __name__ == "__main__":
    unittest.main()
