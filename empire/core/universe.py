"""Universe generation: the catalog of addressable planet slots.

Every galaxy/system/position triple inside the configured bounds gets one slot
with a sun distance, a temperature and a number of building spaces. The
simulation only reads this catalog to validate colonize targets and flips the
colonized flag when a planet is founded on a slot.
"""
from __future__ import annotations

import logging
import random
from typing import Dict, Iterator, List, Optional

from empire.core.config import (
    GALAXIES,
    MAX_ORBIT_RADIUS,
    MIN_ORBIT_RADIUS,
    ORBIT_VARIANCE,
    POSITIONS_PER_SYSTEM,
    SLOT_SPACES_MAX,
    SLOT_SPACES_MIN,
    SYSTEMS_PER_GALAXY,
)
from empire.models import Coordinates, UniverseSlot

logger = logging.getLogger(__name__)


def calculate_temperature(sun_distance: float) -> int:
    """20 degrees at distance 100, warmer closer to the sun."""
    optimal_distance = 100
    temp_range = 250
    return int(round(20 + (optimal_distance - sun_distance) * (temp_range / 200)))


class Universe:
    def __init__(self, slots: Optional[Dict[Coordinates, UniverseSlot]] = None) -> None:
        self._slots: Dict[Coordinates, UniverseSlot] = dict(slots or {})

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[UniverseSlot]:
        return iter(self._slots.values())

    def contains(self, coords: Coordinates) -> bool:
        """True when ``coords`` lies inside the configured universe bounds."""
        return (
            1 <= coords.galaxy <= GALAXIES
            and 1 <= coords.system <= SYSTEMS_PER_GALAXY
            and 1 <= coords.position <= POSITIONS_PER_SYSTEM
        )

    def get(self, coords: Coordinates) -> Optional[UniverseSlot]:
        return self._slots.get(coords)

    def is_colonized(self, coords: Coordinates) -> bool:
        slot = self._slots.get(coords)
        return bool(slot and slot.is_colonized)

    def mark_colonized(self, coords: Coordinates) -> None:
        slot = self._slots.get(coords)
        if slot is None:
            raise KeyError(f"No universe slot at {coords}")
        slot.is_colonized = True

    def free_slots(self) -> List[UniverseSlot]:
        return [slot for slot in self._slots.values() if not slot.is_colonized]

    def random_free_slot(self, rng: random.Random) -> Optional[UniverseSlot]:
        free = self.free_slots()
        if not free:
            return None
        return rng.choice(free)

    def system_slots(self, galaxy: int, system: int) -> List[UniverseSlot]:
        """Slots of one system ordered by sun distance."""
        slots = [
            slot for coords, slot in self._slots.items()
            if coords.galaxy == galaxy and coords.system == system
        ]
        return sorted(slots, key=lambda s: s.sun_distance)


def generate_universe(rng: Optional[random.Random] = None) -> Universe:
    rng = rng or random.Random()
    slots: Dict[Coordinates, UniverseSlot] = {}
    span = MAX_ORBIT_RADIUS - MIN_ORBIT_RADIUS

    for galaxy in range(1, GALAXIES + 1):
        for system in range(1, SYSTEMS_PER_GALAXY + 1):
            for position in range(1, POSITIONS_PER_SYSTEM + 1):
                base_radius = MIN_ORBIT_RADIUS
                if POSITIONS_PER_SYSTEM > 1:
                    base_radius += (position - 1) / (POSITIONS_PER_SYSTEM - 1) * span
                variance = rng.uniform(-1.0, 1.0) * ORBIT_VARIANCE
                sun_distance = max(MIN_ORBIT_RADIUS, min(MAX_ORBIT_RADIUS, base_radius * (1 + variance)))

                coords = Coordinates(galaxy=galaxy, system=system, position=position)
                slots[coords] = UniverseSlot(
                    coordinates=coords,
                    temperature=calculate_temperature(sun_distance),
                    sun_distance=sun_distance,
                    total_spaces=rng.randint(SLOT_SPACES_MIN, SLOT_SPACES_MAX),
                )

    logger.info(
        "universe_generated",
        extra={
            "action_type": "universe_generated",
            "slots": len(slots),
        },
    )
    return Universe(slots)
