from __future__ import annotations

import esper

from empire.models import Planet, Resources, Buildings, Research
from empire.core.production import calculate_production, apply_production
from empire.core.metrics import metrics


class ResourceProductionSystem(esper.Processor):
    """ECS processor that recomputes every planet's rates and accrues the elapsed output.

    Runs first in a step so that buildings completing later in the same step do
    not contribute to this step's production.
    """

    def process(self, elapsed_s: float, now_ms: float) -> None:
        if elapsed_s <= 0:
            return
        hours = elapsed_s / 3600.0

        research = None
        for _ent, (found,) in self.world.get_components(Research):
            research = found
            break

        for ent, (planet, resources, buildings) in self.world.get_components(Planet, Resources, Buildings):
            report = calculate_production(buildings, resources, planet.sun_distance, research)
            deltas = apply_production(resources, report, hours)

            for resource, delta in deltas.items():
                if delta > 0:
                    metrics.increment_event(f"production.{resource}", delta)
                elif delta < 0:
                    metrics.increment_event(f"consumption.{resource}", -delta)
            if report.efficiency < 1.0 and report.energy_consumption > 0:
                metrics.increment_event("energy.deficit.count", 1)
