from __future__ import annotations

import math
from typing import Dict, Mapping

from empire.core.config import (
    BASE_RESEARCH_TIME,
    BASE_UPGRADE_TIME,
    UPGRADE_COST_MULTIPLIER,
)


def calculate_upgrade_cost(base_costs: Mapping[str, float], level: int) -> Dict[str, int]:
    """Cost of taking something from ``level`` to ``level + 1``.

    Level 0 pays the base cost unscaled; afterwards each level multiplies it.
    """
    multiplier = 1.0 if level == 0 else UPGRADE_COST_MULTIPLIER ** level
    return {name: int(math.floor(amount * multiplier)) for name, amount in base_costs.items()}


def calculate_research_cost(costs: Mapping[str, float], level: int) -> Dict[str, float]:
    """Research is charged the exact scaled amount; only building costs are floored."""
    multiplier = UPGRADE_COST_MULTIPLIER ** level
    return {name: amount * multiplier for name, amount in costs.items()}


def speed_reduction(factory_level: int) -> float:
    """Reduction granted by a development center or weapons factory."""
    if factory_level <= 0:
        return 0.0
    return 1.0 - 1.0 / (factory_level + 1)


def accelerator_reduction(level: int) -> float:
    """Microsystem accelerator halves the remaining time per level."""
    if level <= 0:
        return 0.0
    return 1.0 - 0.5 ** level


def combined_reduction(first: float, second: float) -> float:
    return 1.0 - (1.0 - first) * (1.0 - second)


def calculate_construction_time(level: int, development_center: int = 0, accelerator: int = 0) -> int:
    """Game seconds to upgrade a building currently at ``level``."""
    base = BASE_UPGRADE_TIME * (level + 1)
    total = combined_reduction(speed_reduction(development_center), accelerator_reduction(accelerator))
    return int(math.floor(base * (1.0 - total)))


def calculate_military_construction_time(
    build_time: int,
    count: int,
    weapons_factory: int = 0,
    accelerator: int = 0,
) -> int:
    """Game seconds to produce a batch of ``count`` units or defenses."""
    total = combined_reduction(speed_reduction(weapons_factory), accelerator_reduction(accelerator))
    return int(math.floor(build_time * count * (1.0 - total)))


def calculate_research_time(level: int, lab_level: int) -> int:
    """Each laboratory level reduces research time by a ``1 - 1/lab`` share; no lab means no reduction."""
    base = BASE_RESEARCH_TIME * (level + 1)
    if lab_level <= 0:
        return int(base)
    reduction = 1.0 - 1.0 / lab_level
    return int(math.floor(base * (1.0 - reduction)))


def military_time_reduction_percent(weapons_factory: int, accelerator: int) -> float:
    return combined_reduction(speed_reduction(weapons_factory), accelerator_reduction(accelerator)) * 100.0
