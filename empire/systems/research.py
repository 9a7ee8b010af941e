from __future__ import annotations

import esper
import logging

from empire.models import Research
from empire.core.metrics import metrics

logger = logging.getLogger(__name__)


class ResearchSystem(esper.Processor):
    """ECS processor that advances the single active research of the empire.

    When the timer runs out the technology gains one level and the slot is
    freed for the next start_research command.
    """

    def process(self, elapsed_s: float, now_ms: float) -> None:
        if elapsed_s <= 0:
            return

        for ent, (research,) in self.world.get_components(Research):
            tech = research.active()
            if tech is None:
                continue

            remaining = tech.time_remaining - elapsed_s
            if remaining > 0:
                tech.time_remaining = remaining
                continue

            tech.level += 1
            tech.is_researching = False
            tech.time_remaining = 0.0
            paid_by = tech.planet_id
            tech.planet_id = None

            metrics.increment_event("research.completed", 1)
            logger.info(
                "research_complete",
                extra={
                    "action_type": "research_complete",
                    "entity": ent,
                    "research_id": tech.id,
                    "new_level": tech.level,
                    "planet_id": paid_by,
                    "clock_ms": now_ms,
                },
            )
