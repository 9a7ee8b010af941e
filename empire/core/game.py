from __future__ import annotations

import logging
import math
import random
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import esper

from empire.core import catalog
from empire.core.commands import (
    parse_advance_simulation,
    parse_build_defense,
    parse_build_unit,
    parse_launch_fleet,
    parse_rename_planet,
    parse_set_simulation_speed,
    parse_start_research,
    parse_upgrade_building,
)
from empire.core.config import (
    COLONIZE_FAILURE_RETURNS_FLEET,
    EMPIRE_NAME,
    HOMEWORLD_NAME,
    MAX_PLANET_SUN_DISTANCE,
    get_game_speed,
    get_max_planets,
    get_tick_interval_ms,
)
from empire.core.construction import (
    calculate_construction_time,
    calculate_military_construction_time,
    calculate_research_cost,
    calculate_research_time,
    calculate_upgrade_cost,
    military_time_reduction_percent,
)
from empire.core.metrics import metrics
from empire.core.production import calculate_production_increase
from empire.core.requirements import check_requirements, split_requirements
from empire.core.results import (
    AffordabilityError,
    CapacityError,
    CommandResult,
    InvalidTargetError,
    Ok,
    PrerequisiteError,
)
from empire.core.travel import (
    calculate_cargo_capacity,
    calculate_fleet_speed,
    calculate_fuel_consumption,
    calculate_travel_time,
    parse_coordinates,
)
from empire.core.universe import Universe, generate_universe
from empire.models import (
    RESOURCE_TYPES,
    Buildings,
    Coordinates,
    DefenseQueue,
    Empire,
    FleetMovement,
    Garrison,
    Planet,
    Position,
    Research,
    Resources,
    UnitQueue,
)
from empire.systems import (
    BuildingConstructionSystem,
    FleetMovementSystem,
    ResearchSystem,
    ResourceProductionSystem,
    ShipyardSystem,
)
from empire.systems.planet_creation import create_empire, create_planet

logger = logging.getLogger(__name__)


class GameWorld:
    """The simulation context: one empire, its planets and fleets, and a simulated clock.

    Every command and every simulation step runs under ``_lock`` so a command
    never observes a half-applied step. Commands return a ``CommandResult``;
    rejections leave the state untouched.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        speed: Optional[float] = None,
        max_planets: Optional[int] = None,
        colonize_failure_returns_fleet: Optional[bool] = None,
        universe: Optional[Universe] = None,
    ) -> None:
        self.world = esper.World()
        self.rng = random.Random(seed)
        self.universe = universe if universe is not None else generate_universe(self.rng)
        self.speed: float = get_game_speed() if speed is None else float(speed)
        self.max_planets: int = get_max_planets() if max_planets is None else int(max_planets)
        self.colonize_failure_returns_fleet: bool = (
            COLONIZE_FAILURE_RETURNS_FLEET
            if colonize_failure_returns_fleet is None
            else bool(colonize_failure_returns_fleet)
        )
        self.clock_ms: float = 0.0

        self._lock = threading.RLock()
        self.running = False
        self.game_thread: Optional[threading.Thread] = None
        self._next_planet_number = 1
        self._next_fleet_number = 1

        # Registration order is the step order
        self.world.add_processor(ResourceProductionSystem())
        self.world.add_processor(BuildingConstructionSystem())
        self.world.add_processor(ResearchSystem())
        self.world.add_processor(ShipyardSystem())
        self.world.add_processor(FleetMovementSystem(self))

        self.empire_entity = create_empire(self.world, EMPIRE_NAME, self.max_planets)
        home_slot = self.universe.random_free_slot(self.rng)
        if home_slot is None:
            raise RuntimeError("Universe has no free slot for the homeworld")
        self._create_planet(home_slot.coordinates, catalog.HOMEWORLD_RESOURCES, HOMEWORLD_NAME, is_homeworld=True)

    # --- background loop ---

    def start_game_loop(self) -> None:
        """Drive advance_simulation from a background thread every TICK_INTERVAL_MS."""
        if not self.running:
            self.running = True
            self.game_thread = threading.Thread(target=self._game_loop, daemon=True)
            self.game_thread.start()
            logger.info("Game loop started")

    def stop_game_loop(self) -> None:
        self.running = False
        if self.game_thread:
            self.game_thread.join()
            self.game_thread = None
            logger.info("Game loop stopped")

    def _game_loop(self) -> None:
        """Uses time.monotonic() so wall-clock adjustments do not distort elapsed time."""
        period_s = get_tick_interval_ms() / 1000.0
        last = time.monotonic()
        next_tick = last + period_s
        while self.running:
            sleep_time = max(0.0, next_tick - time.monotonic())
            time.sleep(sleep_time)
            planned_start = next_tick
            now = time.monotonic()
            self._step((now - last) * 1000.0, jitter_s=now - planned_start)
            last = now
            next_tick = planned_start + period_s

    # --- simulation step ---

    def advance_simulation(self, elapsed_real_ms: float) -> CommandResult:
        """Advance the simulated clock by ``elapsed_real_ms`` scaled by the speed multiplier.

        Returns Ok with the elapsed game seconds as value. A zero or negative
        interval changes nothing.
        """
        try:
            elapsed = float(elapsed_real_ms)
        except (TypeError, ValueError):
            return self._reject("advance_simulation", InvalidTargetError(reason="elapsed time must be a number"))
        if not math.isfinite(elapsed):
            return self._reject("advance_simulation", InvalidTargetError(reason="elapsed time must be finite"))
        return Ok(value=self._step(elapsed))

    def _step(self, elapsed_real_ms: float, jitter_s: Optional[float] = None) -> float:
        started = time.perf_counter()
        with self._lock:
            elapsed_s = max(0.0, elapsed_real_ms) / 1000.0 * self.speed
            if elapsed_s <= 0:
                return 0.0
            self.clock_ms += elapsed_s * 1000.0
            self.world.process(elapsed_s, self.clock_ms)
        duration = time.perf_counter() - started
        metrics.record_tick(duration, game_seconds=elapsed_s, jitter_s=jitter_s)
        logger.debug(
            "tick_complete",
            extra={
                "duration_ms": duration * 1000.0,
                "elapsed_game_s": elapsed_s,
                "clock_ms": self.clock_ms,
            },
        )
        return elapsed_s

    def set_simulation_speed(self, multiplier: float) -> CommandResult:
        with self._lock:
            try:
                value = float(multiplier)
            except (TypeError, ValueError):
                value = float("nan")
            if not math.isfinite(value) or value <= 0:
                return self._reject(
                    "set_simulation_speed",
                    InvalidTargetError(reason="speed multiplier must be a positive number"),
                    multiplier=str(multiplier),
                )
            self.speed = value
            logger.info("speed_changed", extra={"action_type": "speed_changed", "multiplier": value})
            return Ok(value=value)

    # --- lookups ---

    def _planets(self) -> List[Tuple[int, Planet]]:
        """Owned planets in creation order."""
        return sorted(self.world.get_component(Planet), key=lambda it: it[0])

    def _planet_entity(self, planet_id: str) -> Optional[int]:
        for ent, (planet,) in self.world.get_components(Planet):
            if planet.id == planet_id:
                return ent
        return None

    def _planet_at(self, coords: Coordinates) -> Optional[int]:
        for ent, (_planet, pos) in self.world.get_components(Planet, Position):
            if (pos.galaxy, pos.system, pos.position) == (coords.galaxy, coords.system, coords.position):
                return ent
        return None

    def _research(self) -> Research:
        return self.world.component_for_entity(self.empire_entity, Research)

    def _coordinates_of(self, ent: int) -> Coordinates:
        pos = self.world.component_for_entity(ent, Position)
        return Coordinates(galaxy=pos.galaxy, system=pos.system, position=pos.position)

    def planet_count(self) -> int:
        with self._lock:
            return len(self.world.get_component(Planet))

    def _reject(self, action: str, result: CommandResult, **extra: Any) -> CommandResult:
        metrics.increment_event(f"rejected.{result.kind}", 1)
        logger.info(
            f"{action}_rejected",
            extra={
                "action_type": f"{action}_rejected",
                "kind": result.kind,
                "reason": result.reason,
                **extra,
            },
        )
        return result

    # --- colonies ---

    def _create_planet(
        self,
        coords: Coordinates,
        endowment: Mapping[str, float],
        name: Optional[str] = None,
        is_homeworld: bool = False,
    ) -> Tuple[int, str]:
        planet_id = f"planet-{self._next_planet_number}"
        self._next_planet_number += 1
        ent = create_planet(
            self.world,
            planet_id,
            name or f"Colony {planet_id}",
            coords,
            endowment,
            sun_distance=self.rng.uniform(0.0, MAX_PLANET_SUN_DISTANCE),
            is_homeworld=is_homeworld,
        )
        if self.universe.get(coords) is not None:
            self.universe.mark_colonized(coords)
        return ent, planet_id

    def colony_blocker(self, coords: Coordinates) -> Optional[str]:
        """Reason a colony cannot be founded at ``coords`` right now, or None."""
        slot = self.universe.get(coords)
        if slot is None:
            return "no universe slot at destination"
        if slot.is_colonized or self._planet_at(coords) is not None:
            return "destination already colonized"
        if self.planet_count() >= self.max_planets:
            return "planet limit reached"
        return None

    def found_colony(self, coords: Coordinates, cargo: Dict[str, float], units: Dict[str, int]) -> str:
        ent, planet_id = self._create_planet(coords, catalog.COLONY_RESOURCES)
        self.world.component_for_entity(ent, Resources).credit(cargo)
        garrison = self.world.component_for_entity(ent, Garrison)
        for unit_id, count in units.items():
            garrison.units[unit_id] = garrison.units.get(unit_id, 0) + count
        logger.info(
            "colonize_complete",
            extra={
                "action_type": "colonize_complete",
                "planet_id": planet_id,
                "coordinates": str(coords),
            },
        )
        return planet_id

    # --- commands ---

    def upgrade_building(self, planet_id: str, building_id: str) -> CommandResult:
        with self._lock:
            ent = self._planet_entity(planet_id)
            if ent is None:
                return self._reject("upgrade", InvalidTargetError(reason=f"unknown planet {planet_id!r}"))
            planet = self.world.component_for_entity(ent, Planet)
            buildings = self.world.component_for_entity(ent, Buildings)
            resources = self.world.component_for_entity(ent, Resources)
            building = buildings.get(building_id)
            if building is None:
                return self._reject("upgrade", InvalidTargetError(reason=f"unknown building {building_id!r}"))
            if building.is_upgrading:
                return self._reject(
                    "upgrade",
                    CapacityError(reason=f"{building.name} is already upgrading"),
                    planet_id=planet_id,
                )

            check = check_requirements(building.requirements, buildings, self._research())
            if not check.met:
                return self._reject(
                    "upgrade",
                    PrerequisiteError(reason="requirements not met", missing=check.missing),
                    planet_id=planet_id,
                    building_id=building_id,
                )
            if planet.used_spaces + building.spaces > planet.total_spaces:
                return self._reject(
                    "upgrade",
                    CapacityError(reason="not enough free planet spaces"),
                    planet_id=planet_id,
                    building_id=building_id,
                )

            cost = calculate_upgrade_cost(building.base_costs, building.level)
            shortfall = resources.shortfall(cost)
            if shortfall:
                return self._reject(
                    "upgrade",
                    AffordabilityError(reason="insufficient resources", shortfall=shortfall),
                    planet_id=planet_id,
                    building_id=building_id,
                )

            duration = calculate_construction_time(
                building.level,
                buildings.level(catalog.DEVELOPMENT_CENTER),
                buildings.level(catalog.MICROSYSTEM_ACCELERATOR),
            )
            resources.debit(cost)
            planet.used_spaces += building.spaces
            building.is_upgrading = True
            building.upgrade_time_remaining = float(duration)

            metrics.record_timer("queue.build.planned_s", float(duration))
            logger.info(
                "build_started",
                extra={
                    "action_type": "build_started",
                    "planet_id": planet_id,
                    "building_id": building_id,
                    "target_level": building.level + 1,
                    "duration_s": duration,
                },
            )
            return Ok(value={
                "planet_id": planet_id,
                "building_id": building_id,
                "cost": cost,
                "duration_s": duration,
            })

    def start_research(self, research_id: str) -> CommandResult:
        with self._lock:
            research = self._research()
            tech = research.get(research_id)
            if tech is None:
                return self._reject("research", InvalidTargetError(reason=f"unknown research {research_id!r}"))
            active = research.active()
            if active is not None:
                return self._reject(
                    "research",
                    CapacityError(reason=f"{active.name} is already being researched"),
                    research_id=research_id,
                )

            labs = [
                (ent, planet) for ent, planet in self._planets()
                if self.world.component_for_entity(ent, Buildings).level(catalog.RESEARCH_LAB) >= 1
            ]
            if not labs:
                return self._reject(
                    "research",
                    PrerequisiteError(
                        reason="no research laboratory",
                        missing=[f"{catalog.building_name(catalog.RESEARCH_LAB)} level 1"],
                    ),
                    research_id=research_id,
                )

            eligible = []
            first_missing: List[str] = []
            for ent, planet in labs:
                check = check_requirements(tech.requirements, self.world.component_for_entity(ent, Buildings), research)
                if check.met:
                    eligible.append((ent, planet))
                elif not first_missing:
                    first_missing = check.missing
            if not eligible:
                return self._reject(
                    "research",
                    PrerequisiteError(reason="requirements not met", missing=first_missing),
                    research_id=research_id,
                )

            cost = calculate_research_cost(tech.costs, tech.level)
            payer = None
            first_shortfall: Dict[str, float] = {}
            for ent, planet in eligible:
                shortfall = self.world.component_for_entity(ent, Resources).shortfall(cost)
                if not shortfall:
                    payer = (ent, planet)
                    break
                if not first_shortfall:
                    first_shortfall = shortfall
            if payer is None:
                return self._reject(
                    "research",
                    AffordabilityError(reason="insufficient resources", shortfall=first_shortfall),
                    research_id=research_id,
                )

            ent, planet = payer
            lab_level = self.world.component_for_entity(ent, Buildings).level(catalog.RESEARCH_LAB)
            duration = calculate_research_time(tech.level, lab_level)
            self.world.component_for_entity(ent, Resources).debit(cost)
            tech.is_researching = True
            tech.time_remaining = float(duration)
            tech.planet_id = planet.id

            metrics.record_timer("queue.research.planned_s", float(duration))
            logger.info(
                "research_started",
                extra={
                    "action_type": "research_started",
                    "research_id": research_id,
                    "planet_id": planet.id,
                    "target_level": tech.level + 1,
                    "duration_s": duration,
                },
            )
            return Ok(value={
                "research_id": research_id,
                "planet_id": planet.id,
                "cost": cost,
                "duration_s": duration,
            })

    def build_unit(self, planet_id: str, unit_type_id: str, count: int) -> CommandResult:
        return self._order_military("unit", catalog.UNITS, UnitQueue, planet_id, unit_type_id, count)

    def build_defense(self, planet_id: str, defense_type_id: str, count: int) -> CommandResult:
        return self._order_military("defense", catalog.DEFENSES, DefenseQueue, planet_id, defense_type_id, count)

    def _order_military(
        self,
        kind: str,
        templates: Mapping[str, Any],
        queue_type: type,
        planet_id: str,
        type_id: str,
        count: int,
    ) -> CommandResult:
        action = f"build_{kind}"
        with self._lock:
            ent = self._planet_entity(planet_id)
            if ent is None:
                return self._reject(action, InvalidTargetError(reason=f"unknown planet {planet_id!r}"))
            template = templates.get(type_id)
            if template is None:
                return self._reject(action, InvalidTargetError(reason=f"unknown {kind} type {type_id!r}"))
            if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
                return self._reject(action, InvalidTargetError(reason="count must be a positive integer"))

            buildings = self.world.component_for_entity(ent, Buildings)
            resources = self.world.component_for_entity(ent, Resources)
            requirements = split_requirements(template.requirements, catalog.BUILDINGS.keys())
            check = check_requirements(requirements, buildings, self._research())
            if not check.met:
                return self._reject(
                    action,
                    PrerequisiteError(reason="requirements not met", missing=check.missing),
                    planet_id=planet_id,
                    type_id=type_id,
                )

            cost = {name: amount * count for name, amount in template.cost.items()}
            shortfall = resources.shortfall(cost)
            if shortfall:
                return self._reject(
                    action,
                    AffordabilityError(reason="insufficient resources", shortfall=shortfall),
                    planet_id=planet_id,
                    type_id=type_id,
                )

            duration = calculate_military_construction_time(
                template.build_time,
                count,
                buildings.level(catalog.WEAPONS_FACTORY),
                buildings.level(catalog.MICROSYSTEM_ACCELERATOR),
            )
            resources.debit(cost)
            queue = self.world.component_for_entity(ent, queue_type)
            queue.items.append({
                "type": type_id,
                "count": count,
                "time_remaining": float(duration),
                "cost": cost,
            })

            metrics.record_timer(f"queue.{kind}.planned_s", float(duration))
            logger.info(
                f"{kind}_batch_queued",
                extra={
                    "action_type": f"{kind}_batch_queued",
                    "planet_id": planet_id,
                    "type_id": type_id,
                    "count": count,
                    "duration_s": duration,
                },
            )
            return Ok(value={
                "planet_id": planet_id,
                "type": type_id,
                "count": count,
                "cost": cost,
                "duration_s": duration,
            })

    def _resolve_destination(self, destination: str) -> Tuple[Optional[Coordinates], Optional[int]]:
        """Map a destination string to (coordinates, owned planet entity)."""
        try:
            coords = parse_coordinates(destination)
        except ValueError:
            ent = self._planet_entity(destination)
            if ent is None:
                return None, None
            return self._coordinates_of(ent), ent
        if not self.universe.contains(coords):
            return None, None
        return coords, self._planet_at(coords)

    def launch_fleet(self, fleet_spec: Mapping[str, Any]) -> CommandResult:
        """Validate a fleet spec, debit its units and cargo from the origin, and put it in transit."""
        with self._lock:
            mission = str(fleet_spec.get("mission") or "")
            origin_id = str(fleet_spec.get("origin") or "")
            destination = str(fleet_spec.get("destination") or "")
            raw_units = fleet_spec.get("units") or {}
            raw_cargo = fleet_spec.get("cargo") or {}

            if mission not in catalog.FLEET_MISSIONS:
                return self._reject("launch", InvalidTargetError(reason=f"unknown mission {mission!r}"))
            origin_ent = self._planet_entity(origin_id)
            if origin_ent is None:
                return self._reject("launch", InvalidTargetError(reason=f"unknown origin planet {origin_id!r}"))
            if not isinstance(raw_units, Mapping) or not isinstance(raw_cargo, Mapping):
                return self._reject("launch", InvalidTargetError(reason="units and cargo must be mappings"))

            units: Dict[str, int] = {}
            for unit_id, count in raw_units.items():
                if unit_id not in catalog.UNITS:
                    return self._reject("launch", InvalidTargetError(reason=f"unknown unit type {unit_id!r}"))
                if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                    return self._reject("launch", InvalidTargetError(reason=f"invalid count for {unit_id}"))
                if count > 0:
                    units[unit_id] = count
            if not units:
                return self._reject("launch", InvalidTargetError(reason="no units selected"))

            cargo: Dict[str, float] = {}
            for resource, amount in raw_cargo.items():
                if resource not in RESOURCE_TYPES:
                    return self._reject("launch", InvalidTargetError(reason=f"unknown cargo resource {resource!r}"))
                if isinstance(amount, bool) or not isinstance(amount, (int, float)) \
                        or not math.isfinite(amount) or amount < 0:
                    return self._reject("launch", InvalidTargetError(reason=f"invalid cargo amount for {resource}"))
                if amount > 0:
                    cargo[resource] = float(amount)

            dest_coords, _dest_ent = self._resolve_destination(destination)
            if dest_coords is None:
                return self._reject("launch", InvalidTargetError(reason=f"unknown destination {destination!r}"))
            origin_coords = self._coordinates_of(origin_ent)

            if mission == "colonize":
                if units.get(catalog.COLONY_SHIP, 0) < 1:
                    return self._reject(
                        "launch",
                        PrerequisiteError(
                            reason="colonize missions need a colony ship",
                            missing=[catalog.UNITS[catalog.COLONY_SHIP].name],
                        ),
                    )
                if dest_coords == origin_coords:
                    return self._reject("launch", InvalidTargetError(reason="cannot colonize the origin planet"))
                slot = self.universe.get(dest_coords)
                if slot is None:
                    return self._reject("launch", InvalidTargetError(reason="no universe slot at destination"))
                if slot.is_colonized:
                    return self._reject("launch", InvalidTargetError(reason="destination already colonized"))
                if self.planet_count() >= self.max_planets:
                    return self._reject("launch", CapacityError(reason="planet limit reached"))

            garrison = self.world.component_for_entity(origin_ent, Garrison)
            resources = self.world.component_for_entity(origin_ent, Resources)
            unit_shortfall = {
                unit_id: count - garrison.units.get(unit_id, 0)
                for unit_id, count in units.items()
                if garrison.units.get(unit_id, 0) < count
            }
            if unit_shortfall:
                return self._reject(
                    "launch",
                    AffordabilityError(reason="not enough units at origin", shortfall=unit_shortfall),
                )
            cargo_shortfall = resources.shortfall(cargo)
            if cargo_shortfall:
                return self._reject(
                    "launch",
                    AffordabilityError(reason="not enough resources for cargo", shortfall=cargo_shortfall),
                )
            if sum(cargo.values()) > calculate_cargo_capacity(units):
                return self._reject("launch", CapacityError(reason="cargo exceeds fleet capacity"))

            travel = calculate_travel_time(origin_coords, dest_coords)
            for unit_id, count in units.items():
                garrison.units[unit_id] = garrison.units.get(unit_id, 0) - count
            resources.debit(cargo)

            fleet_id = f"fleet-{self._next_fleet_number}"
            self._next_fleet_number += 1
            fleet = FleetMovement(
                id=fleet_id,
                units=units,
                origin=origin_id,
                destination=destination,
                mission=mission,
                cargo=cargo,
                departure_time=self.clock_ms,
                arrival_time=self.clock_ms + travel.total * 1000.0,
                speed=calculate_fleet_speed(units),
                fuel_consumption=calculate_fuel_consumption(units, travel.total),
            )
            self.world.create_entity(fleet)

            metrics.increment_event("fleet.launched", 1)
            metrics.record_timer("fleet.travel_s", float(travel.total))
            logger.info(
                "fleet_launched",
                extra={
                    "action_type": "fleet_launched",
                    "fleet_id": fleet_id,
                    "mission": mission,
                    "origin": origin_id,
                    "destination": destination,
                    "travel_s": travel.total,
                },
            )
            return Ok(value={
                "fleet_id": fleet_id,
                "arrival_time": fleet.arrival_time,
                "travel": travel.to_dict(),
                "fuel_consumption": fleet.fuel_consumption,
                "speed": fleet.speed,
            })

    def rename_planet(self, planet_id: str, name: str) -> CommandResult:
        with self._lock:
            ent = self._planet_entity(planet_id)
            if ent is None:
                return self._reject("rename", InvalidTargetError(reason=f"unknown planet {planet_id!r}"))
            new_name = (name or "").strip()
            if not new_name:
                return self._reject("rename", InvalidTargetError(reason="name must not be empty"))
            planet = self.world.component_for_entity(ent, Planet)
            planet.name = new_name
            logger.info(
                "planet_renamed",
                extra={"action_type": "planet_renamed", "planet_id": planet_id, "new_name": new_name},
            )
            return Ok(value={"planet_id": planet_id, "name": new_name})

    def execute_command(self, command: Mapping[str, Any]) -> CommandResult:
        """Dispatch a raw command dict ({"type": ..., ...}) to the matching command."""
        cmd_type = command.get("type")
        logger.info("execute_command", extra={"action_type": cmd_type})

        handlers: Dict[str, Callable[[Mapping[str, Any]], CommandResult]] = {
            "upgrade_building": lambda c: self.upgrade_building(*parse_upgrade_building(c)),
            "start_research": lambda c: self.start_research(parse_start_research(c)),
            "build_unit": lambda c: self.build_unit(*parse_build_unit(c)),
            "build_defense": lambda c: self.build_defense(*parse_build_defense(c)),
            "launch_fleet": lambda c: self.launch_fleet(parse_launch_fleet(c)),
            "rename_planet": lambda c: self.rename_planet(*parse_rename_planet(c)),
            "set_simulation_speed": lambda c: self.set_simulation_speed(parse_set_simulation_speed(c)),
            "advance_simulation": lambda c: self.advance_simulation(parse_advance_simulation(c)),
        }
        handler = handlers.get(str(cmd_type))
        if handler is None:
            return self._reject("execute_command", InvalidTargetError(reason=f"unknown command {cmd_type!r}"))
        return handler(dict(command))

    # --- queries ---

    def _planet_snapshot(self, ent: int) -> Dict[str, Any]:
        planet = self.world.component_for_entity(ent, Planet)
        pos = self.world.component_for_entity(ent, Position)
        resources = self.world.component_for_entity(ent, Resources)
        buildings = self.world.component_for_entity(ent, Buildings)
        garrison = self.world.component_for_entity(ent, Garrison)
        unit_queue = self.world.component_for_entity(ent, UnitQueue)
        defense_queue = self.world.component_for_entity(ent, DefenseQueue)
        return {
            "id": planet.id,
            "name": planet.name,
            "coordinates": pos.key,
            "position": {"galaxy": pos.galaxy, "system": pos.system, "position": pos.position},
            "total_spaces": planet.total_spaces,
            "used_spaces": planet.used_spaces,
            "sun_distance": planet.sun_distance,
            "is_homeworld": planet.is_homeworld,
            "resources": resources.snapshot(),
            "buildings": [
                {
                    "id": b.id,
                    "name": b.name,
                    "level": b.level,
                    "spaces": b.spaces,
                    "is_upgrading": b.is_upgrading,
                    "upgrade_time_remaining": b.upgrade_time_remaining,
                }
                for b in buildings
            ],
            "units": dict(garrison.units),
            "defenses": dict(garrison.defenses),
            "units_in_production": [dict(it) for it in unit_queue.items],
            "defenses_in_production": [dict(it) for it in defense_queue.items],
            "military_time_reduction": military_time_reduction_percent(
                buildings.level(catalog.WEAPONS_FACTORY),
                buildings.level(catalog.MICROSYSTEM_ACCELERATOR),
            ),
        }

    @staticmethod
    def _fleet_snapshot(fleet: FleetMovement) -> Dict[str, Any]:
        return {
            "id": fleet.id,
            "units": dict(fleet.units),
            "origin": fleet.origin,
            "destination": fleet.destination,
            "mission": fleet.mission,
            "cargo": dict(fleet.cargo),
            "departure_time": fleet.departure_time,
            "arrival_time": fleet.arrival_time,
            "return_time": fleet.return_time,
            "speed": fleet.speed,
            "fuel_consumption": fleet.fuel_consumption,
            "returning": fleet.returning,
        }

    def get_planet(self, planet_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            ent = self._planet_entity(planet_id)
            if ent is None:
                return None
            return self._planet_snapshot(ent)

    def list_planets(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [self._planet_snapshot(ent) for ent, _planet in self._planets()]

    def list_fleets(self) -> List[Dict[str, Any]]:
        with self._lock:
            fleets = [fleet for _ent, (fleet,) in self.world.get_components(FleetMovement)]
            return [self._fleet_snapshot(f) for f in sorted(fleets, key=lambda f: (f.arrival_time or 0, f.id))]

    def get_empire_data(self) -> Dict[str, Any]:
        with self._lock:
            empire = self.world.component_for_entity(self.empire_entity, Empire)
            research = self._research()
            return {
                "name": empire.name,
                "max_planets": self.max_planets,
                "clock_ms": self.clock_ms,
                "speed": self.speed,
                "planets": self.list_planets(),
                "research": [
                    {
                        "id": t.id,
                        "name": t.name,
                        "level": t.level,
                        "effect": t.effect,
                        "is_researching": t.is_researching,
                        "time_remaining": t.time_remaining,
                        "planet_id": t.planet_id,
                        "cost": calculate_research_cost(t.costs, t.level),
                    }
                    for t in research
                ],
                "fleets": self.list_fleets(),
            }

    def get_system(self, galaxy: int, system: int) -> Optional[List[Dict[str, Any]]]:
        """Slots of one solar system, or None when it lies outside the universe."""
        with self._lock:
            if not self.universe.contains(Coordinates(galaxy, system, 1)):
                return None
            return [slot.to_dict() for slot in self.universe.system_slots(galaxy, system)]

    def get_upgrade_preview(self, planet_id: str, building_id: str) -> Optional[Dict[str, Any]]:
        """Cost, duration and readiness of the next level of a building."""
        with self._lock:
            ent = self._planet_entity(planet_id)
            if ent is None:
                return None
            planet = self.world.component_for_entity(ent, Planet)
            buildings = self.world.component_for_entity(ent, Buildings)
            resources = self.world.component_for_entity(ent, Resources)
            building = buildings.get(building_id)
            if building is None:
                return None
            cost = calculate_upgrade_cost(building.base_costs, building.level)
            check = check_requirements(building.requirements, buildings, self._research())
            return {
                "planet_id": planet_id,
                "building_id": building_id,
                "level": building.level,
                "cost": cost,
                "duration_s": calculate_construction_time(
                    building.level,
                    buildings.level(catalog.DEVELOPMENT_CENTER),
                    buildings.level(catalog.MICROSYSTEM_ACCELERATOR),
                ),
                "requirements_met": check.met,
                "missing": check.missing,
                "affordable": resources.can_afford(cost),
                "spaces_available": planet.used_spaces + building.spaces <= planet.total_spaces,
                "production_increase": calculate_production_increase(building),
            }
