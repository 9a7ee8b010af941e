from __future__ import annotations

import esper
import logging
from typing import Any, Dict, List

from empire.models import Planet, Garrison, UnitQueue, DefenseQueue
from empire.core.metrics import metrics

logger = logging.getLogger(__name__)


def _advance_queue(items: List[Dict[str, Any]], tally: Dict[str, int], elapsed_s: float) -> List[Dict[str, Any]]:
    """Count every batch down; credit and drop the ones that finished. Returns the finished batches."""
    completed = []
    pending = []
    for item in items:
        remaining = float(item.get("time_remaining", 0)) - elapsed_s
        if remaining > 0:
            item["time_remaining"] = remaining
            pending.append(item)
            continue
        count = int(item.get("count", 0))
        type_id = item.get("type")
        tally[type_id] = tally.get(type_id, 0) + count
        completed.append({"type": type_id, "count": count})
    items[:] = pending
    return completed


class ShipyardSystem(esper.Processor):
    """ECS processor that completes unit and defense production batches.

    Queue items carry:
      - 'type': unit or defense type id
      - 'count': how many are credited to the planet's garrison on completion
      - 'time_remaining': game seconds left
      - 'cost': resources already debited when the order was placed
    Batches in the same queue run concurrently, each with its own timer.
    """

    def process(self, elapsed_s: float, now_ms: float) -> None:
        if elapsed_s <= 0:
            return

        for ent, (planet, garrison, unit_queue, defense_queue) in self.world.get_components(
            Planet, Garrison, UnitQueue, DefenseQueue
        ):
            finished_units = _advance_queue(unit_queue.items, garrison.units, elapsed_s)
            finished_defenses = _advance_queue(defense_queue.items, garrison.defenses, elapsed_s)

            for kind, batch in (("unit", finished_units), ("defense", finished_defenses)):
                if not batch:
                    continue
                total = sum(it["count"] for it in batch)
                metrics.increment_event(f"queue.{kind}.completed", total)
                logger.info(
                    f"{kind}_batch_complete",
                    extra={
                        "action_type": f"{kind}_batch_complete",
                        "entity": ent,
                        "planet_id": planet.id,
                        "types": ",".join(str(it["type"]) for it in batch),
                        "total_count": total,
                        "clock_ms": now_ms,
                    },
                )
