from __future__ import annotations

import esper
import logging
from typing import Dict, Optional, Protocol, Tuple

from empire.models import Coordinates, FleetMovement, Garrison, Planet, Position, Resources
from empire.core.catalog import COLONY_SHIP
from empire.core.metrics import metrics
from empire.core.travel import parse_coordinates

logger = logging.getLogger(__name__)


class ColonyFounder(Protocol):
    """What the arrival resolver needs from the simulation context to found colonies."""

    colonize_failure_returns_fleet: bool

    def colony_blocker(self, coords: Coordinates) -> Optional[str]:
        ...

    def found_colony(self, coords: Coordinates, cargo: Dict[str, float], units: Dict[str, int]) -> str:
        ...


class FleetMovementSystem(esper.Processor):
    """ECS processor resolving fleets whose current leg ended on the simulated clock.

    Arrival effects by mission:
      - colonize: found a colony at the target slot, consuming one colony ship;
        when that is no longer possible the fleet heads home (or is lost when
        returning fleets is disabled)
      - anything else: cargo and units merge into the owned planet at the
        destination; with no owned planet there the fleet heads home
    Returning fleets merge into their origin planet. Attack missions have no
    combat outcome.
    """

    def __init__(self, founder: ColonyFounder) -> None:
        super().__init__()
        self.founder = founder

    def process(self, elapsed_s: float, now_ms: float) -> None:
        due = []
        for ent, (fleet,) in self.world.get_components(FleetMovement):
            leg_end = fleet.return_time if fleet.returning else fleet.arrival_time
            if leg_end is not None and leg_end <= now_ms:
                due.append((leg_end, fleet.id, ent, fleet))
        due.sort(key=lambda it: (it[0], it[1]))

        for _leg_end, _fid, ent, fleet in due:
            if fleet.returning:
                self._return_home(ent, fleet)
            elif fleet.mission == "colonize":
                self._colonize(ent, fleet, now_ms)
            else:
                self._deliver(ent, fleet, now_ms)

    # --- helpers ---

    def _planet_by_id(self, planet_id: str) -> Optional[int]:
        for ent, (planet,) in self.world.get_components(Planet):
            if planet.id == planet_id:
                return ent
        return None

    def _planet_at(self, coords: Coordinates) -> Optional[int]:
        for ent, (_planet, pos) in self.world.get_components(Planet, Position):
            if (pos.galaxy, pos.system, pos.position) == (coords.galaxy, coords.system, coords.position):
                return ent
        return None

    def _resolve_destination(self, destination: str) -> Tuple[Optional[int], Optional[Coordinates]]:
        try:
            coords = parse_coordinates(destination)
        except ValueError:
            return self._planet_by_id(destination), None
        return self._planet_at(coords), coords

    def _merge(self, planet_ent: int, fleet: FleetMovement) -> None:
        resources = self.world.component_for_entity(planet_ent, Resources)
        garrison = self.world.component_for_entity(planet_ent, Garrison)
        resources.credit(fleet.cargo)
        for unit_id, count in fleet.units.items():
            garrison.units[unit_id] = garrison.units.get(unit_id, 0) + count

    def _finish(self, ent: int, fleet: FleetMovement, action: str, **extra) -> None:
        self.world.delete_entity(ent, immediate=True)
        metrics.increment_event(f"fleet.{action}", 1)
        logger.info(
            f"fleet_{action}",
            extra={
                "action_type": f"fleet_{action}",
                "fleet_id": fleet.id,
                "mission": fleet.mission,
                "origin": fleet.origin,
                "destination": fleet.destination,
                **extra,
            },
        )

    def _send_home(self, ent: int, fleet: FleetMovement, now_ms: float, reason: str) -> None:
        leg_ms = (fleet.arrival_time or now_ms) - fleet.departure_time
        fleet.returning = True
        fleet.return_time = (fleet.arrival_time or now_ms) + leg_ms
        metrics.increment_event("fleet.turned_back", 1)
        logger.info(
            "fleet_turned_back",
            extra={
                "action_type": "fleet_turned_back",
                "fleet_id": fleet.id,
                "mission": fleet.mission,
                "reason": reason,
                "return_time": fleet.return_time,
            },
        )
        # A long step can cover the whole return leg as well
        if fleet.return_time <= now_ms:
            self._return_home(ent, fleet)

    def _return_home(self, ent: int, fleet: FleetMovement) -> None:
        origin_ent = self._planet_by_id(fleet.origin)
        if origin_ent is None:
            self._finish(ent, fleet, "lost", reason="origin planet missing")
            return
        self._merge(origin_ent, fleet)
        self._finish(ent, fleet, "returned")

    def _deliver(self, ent: int, fleet: FleetMovement, now_ms: float) -> None:
        target_ent, _coords = self._resolve_destination(fleet.destination)
        if target_ent is None:
            self._send_home(ent, fleet, now_ms, "no owned planet at destination")
            return
        self._merge(target_ent, fleet)
        self._finish(ent, fleet, "arrived")

    def _colonize(self, ent: int, fleet: FleetMovement, now_ms: float) -> None:
        coords = parse_coordinates(fleet.destination)
        blocker = self.founder.colony_blocker(coords)
        if blocker is not None:
            if self.founder.colonize_failure_returns_fleet:
                self._send_home(ent, fleet, now_ms, blocker)
            else:
                self._finish(ent, fleet, "lost", reason=blocker)
            return

        units = dict(fleet.units)
        units[COLONY_SHIP] = units.get(COLONY_SHIP, 0) - 1
        units = {unit_id: count for unit_id, count in units.items() if count > 0}
        planet_id = self.founder.found_colony(coords, dict(fleet.cargo), units)
        metrics.increment_event("colonize.completed", 1)
        self._finish(ent, fleet, "arrived", planet_id=planet_id)
