"""
Battle units - participants placed on the grid.

Units are immutable. Every function here returns a new Unit; the
battle state replaces the old value with it.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional
from uuid import uuid4

from pydantic import Field

from tactics_engine.core.component import Component
from tactics_framework.components import (
    DEFAULT_INVENTORY,
    JOB_EQUIPMENT,
    JOB_STATS,
    Direction,
    EquippedAbilities,
    Job,
    Position,
    UnitStats,
)


class ActionState(Enum):
    """
    Per-activation action budget.

    IDLE -> MOVED | ACTION_USED -> TURN_ENDED
    """
    IDLE = "idle"
    MOVED = "moved"
    ACTION_USED = "action_used"
    TURN_ENDED = "turn_ended"


class Unit(Component):
    """
    A unit on the battle grid.

    Attributes:
        id: Unique unit id
        name: Display name
        job: Job archetype the stats were derived from
        team_id: Team affiliation (0 = player, 1 = enemy, more allowed)
        position: Grid cell
        direction: Facing
        stats: Battle statistics
        action_state: What the unit has spent this activation
        equipped: Ability slots
        inventory: Item ability id -> remaining quantity
    """
    id: str
    name: str
    job: Job
    team_id: int = Field(default=0, ge=0)
    position: Position
    direction: Direction = Direction.SOUTH
    stats: UnitStats
    action_state: ActionState = ActionState.IDLE
    equipped: EquippedAbilities = EquippedAbilities()
    inventory: dict[str, int] = Field(default_factory=dict)

    @property
    def is_alive(self) -> bool:
        return self.stats.hp > 0

    @property
    def has_ended_turn(self) -> bool:
        return self.action_state is ActionState.TURN_ENDED

    def is_ally_of(self, other: Unit) -> bool:
        return self.team_id == other.team_id

    def item_quantity(self, item_id: str) -> int:
        return self.inventory.get(item_id, 0)

    def with_stats(self, **changes: int) -> Unit:
        """Copy with some stat fields replaced."""
        return self.evolve(stats=self.stats.evolve(**changes))


def create_unit(
    name: str,
    job: Job,
    position: Position,
    team_id: int,
    direction: Direction = Direction.SOUTH,
    stats: Optional[Mapping[str, int]] = None,
    equipped: Optional[Mapping[str, object]] = None,
    inventory: Optional[Mapping[str, int]] = None,
    unit_id: Optional[str] = None,
) -> Unit:
    """
    Create a unit from its job template.

    Args:
        name: Display name
        job: Job archetype; supplies base stats and equipment
        position: Starting cell
        team_id: Team affiliation
        direction: Starting facing
        stats: Stat overrides applied over the job template
        equipped: Slot overrides applied over the job equipment
        inventory: Replaces the default inventory when given
        unit_id: Explicit id; a random hex id is generated otherwise
    """
    base_stats = JOB_STATS[job]
    if stats:
        overrides = {("def" if key == "def_" else key): value for key, value in stats.items()}
        base_stats = UnitStats.model_validate({**base_stats.as_dict(), **overrides})

    base_equipped = JOB_EQUIPMENT[job]
    if equipped:
        base_equipped = EquippedAbilities.model_validate({**base_equipped.model_dump(), **equipped})

    return Unit(
        id=unit_id or uuid4().hex,
        name=name,
        job=job,
        team_id=team_id,
        position=Position(*position),
        direction=direction,
        stats=base_stats,
        equipped=base_equipped,
        inventory=dict(DEFAULT_INVENTORY if inventory is None else inventory),
    )


def update_ct(unit: Unit, ticks: int = 1) -> Unit:
    """Accumulate charge time: +spd per tick."""
    return unit.with_stats(ct=unit.stats.ct + unit.stats.spd * ticks)


def reset_ct(unit: Unit) -> Unit:
    return unit.with_stats(ct=0)


def move_unit(unit: Unit, destination: Position) -> Unit:
    """
    Place a unit on a new cell and spend its move.

    Facing follows the displacement. A unit that already moved or acted
    ends its turn.
    """
    destination = Position(*destination)
    dx = destination.x - unit.position.x
    dy = destination.y - unit.position.y

    if unit.action_state is ActionState.IDLE:
        next_state = ActionState.MOVED
    else:
        next_state = ActionState.TURN_ENDED

    return unit.evolve(
        position=destination,
        direction=Direction.from_vector(dx, dy, unit.direction),
        action_state=next_state,
    )


def mark_action_used(unit: Unit) -> Unit:
    """Spend the unit's action. A unit that already moved or acted ends its turn."""
    if unit.action_state is ActionState.IDLE:
        next_state = ActionState.ACTION_USED
    else:
        next_state = ActionState.TURN_ENDED
    return unit.evolve(action_state=next_state)


def reset_action_state(unit: Unit) -> Unit:
    """Restore the full action budget at the start of an activation."""
    return unit.evolve(action_state=ActionState.IDLE)
