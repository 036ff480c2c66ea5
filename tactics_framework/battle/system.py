"""
Battle system - the facade external collaborators drive.

Renderers, input handlers and network relays read get_state() and call
the commands below. Every command either applies in full or is
rejected with the state left exactly as it was.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from tactics_engine.core import BattleConfig, EventBus
from tactics_framework.components import Direction, Job, Position
from tactics_framework.world import PathSearch
from tactics_framework.battle.abilities import (
    Ability,
    AbilityCatalog,
    Target,
    TileTarget,
    UnitTarget,
    load_catalog,
)
from tactics_framework.battle.results import ActionResult, FailureReason, diff_stats
from tactics_framework.battle.state import BattleState
from tactics_framework.battle.unit import (
    Unit,
    create_unit,
    mark_action_used,
    move_unit,
    reset_action_state,
)


class BattleEvent(Enum):
    """Notifications published by the battle system."""
    UNIT_ACTIVATED = auto()
    UNIT_MOVED = auto()
    ABILITY_EXECUTED = auto()
    ACTION_PASSED = auto()
    TURN_ENDED = auto()
    ACTION_REJECTED = auto()


# (name, job, position, team)
DEFAULT_ROSTER: tuple[tuple[str, Job, Position, int], ...] = (
    ("Knight", Job.KNIGHT, Position(1, 1), 0),
    ("Archer", Job.ARCHER, Position(2, 1), 0),
    ("Mage", Job.MAGE, Position(3, 1), 0),
    ("Priest", Job.PRIEST, Position(4, 1), 0),
    ("Enemy Knight", Job.KNIGHT, Position(11, 11), 1),
    ("Enemy Archer", Job.ARCHER, Position(10, 11), 1),
    ("Enemy Mage", Job.MAGE, Position(9, 11), 1),
    ("Enemy Priest", Job.PRIEST, Position(8, 11), 1),
)

DEFAULT_HEIGHTS: dict[Position, int] = {
    Position(6, 6): 2,
    Position(5, 5): 1,
    Position(7, 7): 1,
}


class GameSystem:
    """
    Battle controller owning the current state and the ability catalog.

    Usage:
        system = GameSystem()
        system.setup_initial_state()

        unit_id = system.advance_to_next_activation()
        system.move_unit(unit_id, system.get_unit_move_range(unit_id)[0])
        result = system.mark_action_used(unit_id)
    """

    def __init__(
        self,
        config: Optional[BattleConfig] = None,
        events: Optional[EventBus] = None,
        catalog: Optional[AbilityCatalog] = None,
    ):
        self.config = config or BattleConfig()
        self.events = events or EventBus()
        self.logger = logging.getLogger(__name__)

        if catalog is None:
            if self.config.load_default_catalog:
                catalog = load_catalog(self.config.data_path)
            else:
                catalog = AbilityCatalog()
        self.catalog = catalog

        self._state = BattleState.create(self.config.map_width, self.config.map_height)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def setup_initial_state(self) -> BattleState:
        """
        Place the default two-team roster and terrain on a fresh map.

        The layout is drawn for a 13x13 map; entries that fall outside a
        smaller map are skipped.
        """
        state = BattleState.create(self.config.map_width, self.config.map_height)

        for position, height in DEFAULT_HEIGHTS.items():
            if not state.map.is_valid_position(position):
                self.logger.warning(f"Skipping terrain at {position}: outside the map")
                continue
            state.map.set_tile_height(position, height)

        for name, job, position, team_id in DEFAULT_ROSTER:
            if not state.map.is_valid_position(position):
                self.logger.warning(f"Skipping {name} at {position}: outside the map")
                continue
            direction = Direction.SOUTH if team_id == 0 else Direction.NORTH
            state = state.add_unit(create_unit(name, job, position, team_id, direction=direction))

        self._state = state
        self.logger.info(f"Battle set up with {len(state.units)} units")
        return state

    def add_unit(
        self,
        name: str,
        job: Job,
        position: Position,
        team_id: int,
        **kwargs,
    ) -> Unit:
        """
        Create a unit from its job template and place it.

        Keyword arguments are passed to create_unit().

        Raises:
            ValueError: Position outside the map or already occupied
        """
        position = Position(*position)
        if not self._state.map.is_valid_position(position):
            raise ValueError(f"Position {position} is outside the map")
        if self._state.unit_at(position) is not None:
            raise ValueError(f"Position {position} is already occupied")

        unit = create_unit(name, job, position, team_id, **kwargs)
        if self._state.get_unit(unit.id) is not None:
            raise ValueError(f"Unit id '{unit.id}' already exists")

        self._state = self._state.add_unit(unit)
        return unit

    def set_tile_height(self, position: Position, height: int) -> None:
        self._state.map.set_tile_height(position, height)

    def set_tile_passable(self, position: Position, passable: bool) -> None:
        self._state.map.set_tile_passable(position, passable)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def process_tick(self) -> Optional[str]:
        """
        Advance the CT scheduler by one step.

        Returns:
            Id of the unit activated by this call, or None
        """
        previous = self._state.active_unit_id
        state = self._state.process_ct(self.config.ct_threshold)

        activated = state.active_unit_id
        if activated is None or activated == previous:
            self._state = state
            return None

        state = state.replace_unit(reset_action_state(state.get_unit(activated)))
        self._state = state

        self.logger.info(f"Unit {activated} activated (tick {state.tick_count})")
        self.events.publish(BattleEvent.UNIT_ACTIVATED, unit_id=activated)
        return activated

    def advance_to_next_activation(self, max_ticks: int = 1000) -> Optional[str]:
        """
        Tick until some unit is active.

        Returns:
            The active unit's id, or None if nobody charged within max_ticks
        """
        for _ in range(max_ticks):
            if self._state.active_unit_id is not None:
                break
            self.process_tick()
        return self._state.active_unit_id

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def get_unit_move_range(self, unit_id: str) -> list[Position]:
        return self._state.get_unit_move_range(unit_id, enforce_jump=self.config.enforce_jump)

    def find_path(self, unit_id: str, target: Position) -> PathSearch:
        """
        Path for a unit from its cell to target.

        An unknown unit yields an empty search.
        """
        unit = self._state.get_unit(unit_id)
        if unit is None:
            return PathSearch()
        return self._state.search_path(
            unit.position,
            target,
            enforce_jump=self.config.enforce_jump,
            iteration_cap=self.config.path_iteration_cap,
        )

    def move_unit(self, unit_id: str, position: Position) -> bool:
        """
        Move the active unit to a cell in its move range.

        Returns:
            True if the move was applied
        """
        position = Position(*position)
        unit = self._state.get_unit(unit_id)

        if unit is None:
            return self._reject_move(FailureReason.SOURCE_UNIT_NOT_FOUND)
        if self._state.active_unit_id != unit_id:
            return self._reject_move(FailureReason.NOT_ACTIVE_UNIT)
        if unit.has_ended_turn:
            return self._reject_move(FailureReason.TURN_ALREADY_ENDED)
        if position not in self.get_unit_move_range(unit_id):
            return self._reject_move(FailureReason.INVALID_TARGET)

        moved = move_unit(unit, position)
        self._commit(self._state.replace_unit(moved), moved)

        self.logger.debug(f"Unit {unit_id} moved {unit.position} -> {position}")
        self.events.publish(
            BattleEvent.UNIT_MOVED,
            unit_id=unit_id,
            origin=unit.position,
            destination=position,
        )
        self._announce_turn_end(moved)
        return True

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def execute_ability(
        self,
        actor_id: str,
        ability_id: str,
        target_unit_id: Optional[str] = None,
        target_position: Optional[Position] = None,
    ) -> ActionResult:
        """
        Use an ability on a unit or a cell.

        A target unit id takes precedence over a target position. On
        success the result lists every stat that changed.
        """
        state = self._state
        actor = state.get_unit(actor_id)

        if actor is None:
            return self._reject("execute_ability", FailureReason.SOURCE_UNIT_NOT_FOUND)

        ability = self.catalog.get(ability_id)
        if ability is None:
            return self._reject("execute_ability", FailureReason.ABILITY_NOT_FOUND)
        if state.active_unit_id != actor_id:
            return self._reject("execute_ability", FailureReason.NOT_ACTIVE_UNIT)
        if actor.has_ended_turn:
            return self._reject("execute_ability", FailureReason.TURN_ALREADY_ENDED)
        try:
            usable = ability.can_use(actor, state)
        except Exception:
            self.logger.exception(f"Eligibility check failed for ability '{ability_id}'")
            usable = False
        if not usable:
            return self._reject("execute_ability", FailureReason.CANNOT_USE_ABILITY)

        target: Target
        if target_unit_id is not None:
            target_unit = state.get_unit(target_unit_id)
            if target_unit is None:
                return self._reject("execute_ability", FailureReason.TARGET_UNIT_NOT_FOUND)
            target = UnitTarget(target_unit)
        elif target_position is not None:
            target = TileTarget(Position(*target_position))
        else:
            return self._reject("execute_ability", FailureReason.NO_TARGET_SPECIFIED)

        try:
            valid = ability.validate_target(actor, target, state)
        except Exception:
            self.logger.exception(f"Target validation failed for ability '{ability_id}'")
            return self._reject("execute_ability", FailureReason.TARGET_VALIDATION_ERROR)
        if not valid:
            return self._reject("execute_ability", FailureReason.INVALID_TARGET)

        try:
            resolved = ability.execute(actor, target, state)
            actor_after = resolved.get_unit(actor_id)
            if actor_after is None:
                raise RuntimeError(f"Ability '{ability_id}' removed its actor")
        except Exception:
            self.logger.exception(f"Execution failed for ability '{ability_id}'")
            return self._reject("execute_ability", FailureReason.EXECUTION_ERROR)

        effects = diff_stats(state, resolved)
        acted = mark_action_used(actor_after)
        self._commit(resolved.replace_unit(acted), acted)

        self.logger.debug(f"Unit {actor_id} used '{ability_id}' ({len(effects)} changes)")
        self.events.publish(
            BattleEvent.ABILITY_EXECUTED,
            actor_id=actor_id,
            ability_id=ability_id,
            effects=effects,
        )
        self._announce_turn_end(acted)
        return ActionResult(success=True, effects=effects)

    def mark_action_used(self, unit_id: str) -> ActionResult:
        """Spend the active unit's action without using an ability."""
        unit = self._state.get_unit(unit_id)

        if unit is None:
            return self._reject("mark_action_used", FailureReason.SOURCE_UNIT_NOT_FOUND)
        if self._state.active_unit_id != unit_id:
            return self._reject("mark_action_used", FailureReason.NOT_ACTIVE_UNIT)
        if unit.has_ended_turn:
            return self._reject("mark_action_used", FailureReason.TURN_ALREADY_ENDED)

        acted = mark_action_used(unit)
        self._commit(self._state.replace_unit(acted), acted)

        self.events.publish(BattleEvent.ACTION_PASSED, unit_id=unit_id)
        self._announce_turn_end(acted)
        return ActionResult(success=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_state(self) -> BattleState:
        return self._state

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        return self._state.get_unit(unit_id)

    def get_active_unit(self) -> Optional[Unit]:
        return self._state.active_unit

    def register_ability(self, ability: Ability) -> None:
        self.catalog.register(ability)

    def get_ability(self, ability_id: str) -> Optional[Ability]:
        return self.catalog.get(ability_id)

    def get_all_abilities(self) -> list[Ability]:
        return self.catalog.all()

    def get_unit_abilities(self, unit_id: str) -> list[Ability]:
        """
        Catalog entries for a unit's equipment and stocked items.

        Ids missing from the catalog are skipped.
        """
        unit = self._state.get_unit(unit_id)
        if unit is None:
            return []

        ids = list(unit.equipped.ability_ids())
        ids.extend(
            item_id for item_id, quantity in unit.inventory.items()
            if quantity > 0 and item_id not in ids
        )

        abilities = []
        for ability_id in ids:
            ability = self.catalog.get(ability_id)
            if ability is None:
                self.logger.warning(f"Unit {unit_id} references unknown ability '{ability_id}'")
                continue
            abilities.append(ability)
        return abilities

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, state: BattleState, unit: Unit) -> None:
        """Swap in a new state, closing the activation if the unit is done."""
        if unit.has_ended_turn:
            state = state.complete_turn(unit.id)
        self._state = state

    def _announce_turn_end(self, unit: Unit) -> None:
        if not unit.has_ended_turn:
            return
        self.logger.debug(f"Unit {unit.id} ended its turn (turn {self._state.turn_count})")
        self.events.publish(
            BattleEvent.TURN_ENDED,
            unit_id=unit.id,
            turn_count=self._state.turn_count,
        )

    def _reject(self, command: str, reason: FailureReason) -> ActionResult:
        self.logger.debug(f"{command} rejected: {reason}")
        self.events.publish(BattleEvent.ACTION_REJECTED, command=command, reason=reason)
        return ActionResult.fail(reason)

    def _reject_move(self, reason: FailureReason) -> bool:
        self._reject("move_unit", reason)
        return False
