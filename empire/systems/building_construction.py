from __future__ import annotations

import esper
import logging

from empire.models import Planet, Buildings
from empire.core.metrics import metrics

logger = logging.getLogger(__name__)


class BuildingConstructionSystem(esper.Processor):
    """ECS processor that counts down building upgrades and applies the new level.

    One upgrade may run per building; any number of buildings on a planet may
    be upgrading at once.
    """

    def process(self, elapsed_s: float, now_ms: float) -> None:
        if elapsed_s <= 0:
            return

        for ent, (planet, buildings) in self.world.get_components(Planet, Buildings):
            for building in buildings:
                if not building.is_upgrading:
                    continue

                remaining = building.upgrade_time_remaining - elapsed_s
                if remaining > 0:
                    building.upgrade_time_remaining = remaining
                    continue

                building.level += 1
                building.is_upgrading = False
                building.upgrade_time_remaining = 0.0

                metrics.increment_event("build.completed", 1)
                logger.info(
                    "build_complete",
                    extra={
                        "action_type": "build_complete",
                        "entity": ent,
                        "planet_id": planet.id,
                        "building_id": building.id,
                        "new_level": building.level,
                        "clock_ms": now_ms,
                    },
                )
