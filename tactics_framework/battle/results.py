"""
Command results - failure reasons and observable stat changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tactics_framework.battle.state import BattleState


class FailureReason(str, Enum):
    """Why a command was rejected. Compares equal to its string value."""
    SOURCE_UNIT_NOT_FOUND = "source_unit_not_found"
    ABILITY_NOT_FOUND = "ability_not_found"
    NOT_ACTIVE_UNIT = "not_active_unit"
    TURN_ALREADY_ENDED = "turn_already_ended"
    CANNOT_USE_ABILITY = "cannot_use_ability"
    TARGET_UNIT_NOT_FOUND = "target_unit_not_found"
    NO_TARGET_SPECIFIED = "no_target_specified"
    INVALID_TARGET = "invalid_target"
    TARGET_VALIDATION_ERROR = "target_validation_error"
    EXECUTION_ERROR = "execution_error"

    def __str__(self) -> str:
        return self.value


class ChangeKind(str, Enum):
    """Classification of a stat change for display."""
    DAMAGE = "damage"
    HEAL = "heal"
    MP_CHANGE = "mp_change"
    STAT_CHANGE = "stat_change"


@dataclass(frozen=True)
class StatChange:
    """A single stat of a single unit changing."""
    unit_id: str
    stat: str
    before: int
    after: int

    @property
    def delta(self) -> int:
        return self.after - self.before

    @property
    def kind(self) -> ChangeKind:
        if self.stat == "hp":
            return ChangeKind.DAMAGE if self.delta < 0 else ChangeKind.HEAL
        if self.stat == "mp":
            return ChangeKind.MP_CHANGE
        return ChangeKind.STAT_CHANGE

    def to_dict(self) -> dict:
        return {
            "unit_id": self.unit_id,
            "kind": self.kind.value,
            "stat": self.stat,
            "before": self.before,
            "after": self.after,
            "delta": self.delta,
        }


@dataclass
class ActionResult:
    """Result of a facade command."""
    success: bool = True
    reason: Optional[FailureReason] = None
    effects: list[StatChange] = field(default_factory=list)

    @classmethod
    def fail(cls, reason: FailureReason) -> ActionResult:
        return cls(success=False, reason=reason)

    def effects_for(self, unit_id: str) -> list[StatChange]:
        return [e for e in self.effects if e.unit_id == unit_id]

    def __bool__(self) -> bool:
        return self.success


def diff_stats(before: BattleState, after: BattleState) -> list[StatChange]:
    """
    Every stat field that differs between two states, per unit.

    Units are matched by id; units present in only one state are ignored.
    """
    changes: list[StatChange] = []
    previous = {u.id: u for u in before.units}

    for unit in after.units:
        old = previous.get(unit.id)
        if old is None or old.stats == unit.stats:
            continue

        old_stats = old.stats.as_dict()
        for stat, value in unit.stats.as_dict().items():
            if old_stats[stat] != value:
                changes.append(StatChange(unit.id, stat, old_stats[stat], value))

    return changes
