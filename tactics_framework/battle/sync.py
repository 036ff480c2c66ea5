"""
Wire models for relaying battle state between peers.

Only the framing lives here; transport is up to the caller. Serialize
with model_dump(by_alias=True) or model_dump_json(by_alias=True) so
the defence stat goes out as "def".
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from tactics_engine.core.component import Component
from tactics_framework.battle.state import BattleState
from tactics_framework.battle.unit import Unit


class MoveMessage(Component):
    """A request to move a unit to (x, y)."""
    unit_id: str
    x: int
    y: int


class UnitSnapshot(Component):
    """Public view of a unit."""
    id: str
    name: str
    job: str
    x: int
    y: int
    team_id: int
    hp: int
    max_hp: int
    atk: int
    def_: int = Field(alias="def")
    spd: int
    ct: int

    @classmethod
    def from_unit(cls, unit: Unit) -> UnitSnapshot:
        stats = unit.stats
        return cls(
            id=unit.id,
            name=unit.name,
            job=unit.job.value,
            x=unit.position.x,
            y=unit.position.y,
            team_id=unit.team_id,
            hp=stats.hp,
            max_hp=stats.max_hp,
            atk=stats.atk,
            def_=stats.def_,
            spd=stats.spd,
            ct=stats.ct,
        )


class BattleSnapshot(Component):
    """Public view of a battle."""
    units: tuple[UnitSnapshot, ...] = ()
    active_unit_id: Optional[str] = None
    turn_count: int = 0
    tick_count: int = 0

    @classmethod
    def from_state(cls, state: BattleState) -> BattleSnapshot:
        return cls(
            units=tuple(UnitSnapshot.from_unit(u) for u in state.units),
            active_unit_id=state.active_unit_id,
            turn_count=state.turn_count,
            tick_count=state.tick_count,
        )


def apply_move_message(system, message: MoveMessage) -> Optional[BattleSnapshot]:
    """
    Apply a received move to a GameSystem.

    Returns:
        A snapshot of the resulting state, or None if the move was rejected
    """
    if not system.move_unit(message.unit_id, (message.x, message.y)):
        return None
    return BattleSnapshot.from_state(system.get_state())
