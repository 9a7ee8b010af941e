"""Typed outcomes of player commands.

Commands never raise for gameplay rejections; they return one of these values
so that callers can tell an unaffordable order from a missing prerequisite
without re-deriving the rule themselves. A rejection always leaves the
simulation state unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional


@dataclass
class CommandResult:
    kind: ClassVar[str] = "ok"
    ok: ClassVar[bool] = True

    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "kind": self.kind, "reason": self.reason}


@dataclass
class Ok(CommandResult):
    value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["value"] = self.value
        return data


@dataclass
class AffordabilityError(CommandResult):
    """Some resource pool holds less than the order costs."""
    kind: ClassVar[str] = "affordability"
    ok: ClassVar[bool] = False

    shortfall: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["shortfall"] = dict(self.shortfall)
        return data


@dataclass
class PrerequisiteError(CommandResult):
    """A building or research level requirement is not met."""
    kind: ClassVar[str] = "prerequisite"
    ok: ClassVar[bool] = False

    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["missing"] = list(self.missing)
        return data


@dataclass
class CapacityError(CommandResult):
    """A limit is reached: planet cap, active research, busy building, space or cargo hold."""
    kind: ClassVar[str] = "capacity"
    ok: ClassVar[bool] = False


@dataclass
class InvalidTargetError(CommandResult):
    """The command names something that does not exist or cannot be targeted."""
    kind: ClassVar[str] = "invalid_target"
    ok: ClassVar[bool] = False


__all__ = [
    "CommandResult",
    "Ok",
    "AffordabilityError",
    "PrerequisiteError",
    "CapacityError",
    "InvalidTargetError",
]
