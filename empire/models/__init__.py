from .components import (
    RESOURCE_TYPES,
    Position,
    ResourcePool,
    EnergyBalance,
    Resources,
    Requirements,
    Building,
    Buildings,
    Technology,
    Research,
    Empire,
    Planet,
    Garrison,
    UnitQueue,
    DefenseQueue,
    FleetMovement,
)
from .templates import (
    BuildingTemplate,
    TechnologyTemplate,
    UnitTemplate,
    DefenseTemplate,
    Coordinates,
    UniverseSlot,
)

__all__ = [
    "RESOURCE_TYPES",
    "Position",
    "ResourcePool",
    "EnergyBalance",
    "Resources",
    "Requirements",
    "Building",
    "Buildings",
    "Technology",
    "Research",
    "Empire",
    "Planet",
    "Garrison",
    "UnitQueue",
    "DefenseQueue",
    "FleetMovement",
    "BuildingTemplate",
    "TechnologyTemplate",
    "UnitTemplate",
    "DefenseTemplate",
    "Coordinates",
    "UniverseSlot",
]
