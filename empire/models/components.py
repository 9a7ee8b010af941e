from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional


RESOURCE_TYPES = ("iron", "kryptonite", "metal", "spice")


@dataclass
class Position:
    """Discrete galaxy/system/position address of a planet slot."""
    galaxy: int = 1
    system: int = 1
    position: int = 1

    @property
    def key(self) -> str:
        return f"{self.galaxy}:{self.system}:{self.position}"


@dataclass
class ResourcePool:
    """Stockpile of one tradable resource on a planet.

    Rates are expressed per hour; the production system converts them to the
    elapsed tick time. ``current`` may sit above ``capacity`` (transported
    cargo, starting endowments) but never below zero.
    """
    current: float = 0.0
    capacity: float = 100000.0
    production: float = 0.0
    consumption: float = 0.0


@dataclass
class EnergyBalance:
    """Per-tick energy balance; energy is never stockpiled."""
    production: float = 0.0
    consumption: float = 0.0


@dataclass
class Resources:
    """Holds the resource pools of a planet."""
    iron: ResourcePool = field(default_factory=ResourcePool)
    kryptonite: ResourcePool = field(default_factory=ResourcePool)
    metal: ResourcePool = field(default_factory=ResourcePool)
    spice: ResourcePool = field(default_factory=ResourcePool)
    energy: EnergyBalance = field(default_factory=EnergyBalance)

    def pool(self, name: str) -> ResourcePool:
        if name not in RESOURCE_TYPES:
            raise KeyError(f"Unknown resource type {name!r}")
        return getattr(self, name)

    def shortfall(self, cost: Dict[str, float]) -> Dict[str, float]:
        """Return the missing amount per resource for ``cost`` (empty when affordable)."""
        missing: Dict[str, float] = {}
        for name, amount in cost.items():
            if amount <= 0:
                continue
            have = self.pool(name).current
            if have < amount:
                missing[name] = amount - have
        return missing

    def can_afford(self, cost: Dict[str, float]) -> bool:
        return not self.shortfall(cost)

    def debit(self, cost: Dict[str, float]) -> None:
        """Subtract ``cost`` from the pools. Callers check affordability first."""
        for name, amount in cost.items():
            pool = self.pool(name)
            pool.current = max(0.0, pool.current - amount)

    def credit(self, amounts: Dict[str, float]) -> None:
        for name, amount in amounts.items():
            if amount:
                self.pool(name).current += amount

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        data: Dict[str, Dict[str, float]] = {}
        for name in RESOURCE_TYPES:
            pool = self.pool(name)
            data[name] = {
                "current": pool.current,
                "capacity": pool.capacity,
                "production": pool.production,
                "consumption": pool.consumption,
            }
        data["energy"] = {
            "production": self.energy.production,
            "consumption": self.energy.consumption,
        }
        return data


@dataclass
class Requirements:
    """Building-level and research-level preconditions of an action."""
    buildings: Dict[str, int] = field(default_factory=dict)
    research: Dict[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.buildings and not self.research


@dataclass
class Building:
    """A building on a planet. Level 0 means not built yet."""
    id: str
    name: str
    level: int = 0
    base_production: float = 0.0
    base_consumption: float = 0.0
    base_costs: Dict[str, int] = field(default_factory=dict)
    spaces: int = 1
    requirements: Requirements = field(default_factory=Requirements)
    is_upgrading: bool = False
    upgrade_time_remaining: float = 0.0


@dataclass
class Buildings:
    """All buildings present on a planet, keyed by building id."""
    items: Dict[str, Building] = field(default_factory=dict)

    def get(self, building_id: str) -> Optional[Building]:
        return self.items.get(building_id)

    def level(self, building_id: str) -> int:
        building = self.items.get(building_id)
        return building.level if building is not None else 0

    def __iter__(self):
        return iter(self.items.values())


@dataclass
class Technology:
    """A research entry of the empire-wide technology tree.

    ``planet_id`` records which planet paid for the research in progress.
    """
    id: str
    name: str
    level: int = 0
    effect: float = 0.0
    requirements: Requirements = field(default_factory=Requirements)
    costs: Dict[str, int] = field(default_factory=dict)
    is_researching: bool = False
    time_remaining: float = 0.0
    planet_id: Optional[str] = None


@dataclass
class Research:
    """Technology levels owned by the empire."""
    items: Dict[str, Technology] = field(default_factory=dict)

    def get(self, tech_id: str) -> Optional[Technology]:
        return self.items.get(tech_id)

    def level(self, tech_id: str) -> int:
        tech = self.items.get(tech_id)
        return tech.level if tech is not None else 0

    def active(self) -> Optional[Technology]:
        for tech in self.items.values():
            if tech.is_researching:
                return tech
        return None

    def __iter__(self):
        return iter(self.items.values())


@dataclass
class Empire:
    """The player aggregate: owns research and fleets."""
    name: str = "Commander"
    max_planets: int = 10


@dataclass
class Planet:
    """Planet metadata. Position, pools and buildings are sibling components."""
    id: str
    name: str
    total_spaces: int = 200
    used_spaces: int = 0
    sun_distance: float = 50.0
    is_homeworld: bool = False


@dataclass
class Garrison:
    """Counts of units and defenses stationed at a planet, keyed by type id."""
    units: Dict[str, int] = field(default_factory=dict)
    defenses: Dict[str, int] = field(default_factory=dict)


@dataclass
class UnitQueue:
    """Combat units in production on a planet.

    Each item is a dict with keys:
      - 'type': unit type id (e.g., 'colony_ship')
      - 'count': number of units credited on completion
      - 'time_remaining': game seconds until the batch completes
      - 'cost': resources debited when the batch was ordered
    Batches run concurrently; each one counts down on its own.
    """
    items: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class DefenseQueue:
    """Defense structures in production on a planet; same item shape as UnitQueue."""
    items: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class FleetMovement:
    """A fleet in transit.

    Attributes:
        id: Fleet identifier.
        units: Unit type id -> count carried by the fleet.
        origin: Id of the planet the fleet launched from.
        destination: Coordinate string ("g:s:p") or planet id.
        mission: One of attack, spy, transport, recycle, park, colonize.
        cargo: Resource amounts carried.
        departure_time: Simulated clock (ms) at launch.
        arrival_time: Simulated clock (ms) at which the current leg ends.
        return_time: Simulated clock (ms) of the return leg, when the fleet turned back.
        speed: Slowest unit speed in the fleet (display only).
        fuel_consumption: Fuel drawn by the outbound leg.
        returning: True once the fleet is headed back to its origin.
    """
    id: str
    units: Dict[str, int]
    origin: str
    destination: str
    mission: str
    cargo: Dict[str, float] = field(default_factory=dict)
    departure_time: float = 0.0
    arrival_time: Optional[float] = None
    return_time: Optional[float] = None
    speed: int = 0
    fuel_consumption: int = 0
    returning: bool = False
