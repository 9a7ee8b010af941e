from .resource_production import ResourceProductionSystem
from .building_construction import BuildingConstructionSystem
from .research import ResearchSystem
from .shipyard import ShipyardSystem
from .fleet_movement import FleetMovementSystem

__all__ = [
    "ResourceProductionSystem",
    "BuildingConstructionSystem",
    "ResearchSystem",
    "ShipyardSystem",
    "FleetMovementSystem",
]
