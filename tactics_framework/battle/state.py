"""
Battle state - map, units, counters and the CT scheduler.

BattleState is a frozen value. Every transition returns a new state;
the terrain map is shared between successive states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from tactics_framework.components import Position
from tactics_framework.world import GridMap, PathSearch, reachable_positions, search_path
from tactics_framework.battle.unit import Unit, reset_ct, update_ct

CT_THRESHOLD = 100


@dataclass(frozen=True)
class BattleState:
    """
    Snapshot of a battle.

    Attributes:
        map: Battle terrain
        units: Units in roster order
        turn_count: Completed activations
        tick_count: Scheduler ticks that activated nobody
        active_unit_id: Unit whose activation is in progress
    """
    map: GridMap
    units: tuple[Unit, ...] = ()
    turn_count: int = 0
    tick_count: int = 0
    active_unit_id: Optional[str] = None

    @classmethod
    def create(cls, width: int, height: int) -> BattleState:
        """Empty battle on a fresh width x height map."""
        return cls(map=GridMap(width, height))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_unit(self, unit_id: Optional[str]) -> Optional[Unit]:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None

    def unit_at(self, position: Position) -> Optional[Unit]:
        position = Position(*position)
        for unit in self.units:
            if unit.position == position:
                return unit
        return None

    @property
    def active_unit(self) -> Optional[Unit]:
        return self.get_unit(self.active_unit_id)

    def occupied_positions(self, exclude: Optional[str] = None) -> set[Position]:
        """Cells held by units, optionally ignoring one unit."""
        return {u.position for u in self.units if u.id != exclude}

    def team(self, team_id: int) -> list[Unit]:
        return [u for u in self.units if u.team_id == team_id]

    # ------------------------------------------------------------------
    # Functional updates
    # ------------------------------------------------------------------

    def add_unit(self, unit: Unit) -> BattleState:
        """Append a unit to the roster. Ids are not deduplicated."""
        return replace(self, units=self.units + (unit,))

    def replace_unit(self, unit: Unit) -> BattleState:
        """Swap in a new value for the unit with the same id."""
        return self.replace_units([unit])

    def replace_units(self, updated: Iterable[Unit]) -> BattleState:
        by_id = {u.id: u for u in updated}
        return replace(self, units=tuple(by_id.get(u.id, u) for u in self.units))

    def activate(self, unit_id: Optional[str]) -> BattleState:
        return replace(self, active_unit_id=unit_id)

    def complete_turn(self, unit_id: str) -> BattleState:
        """
        Close an activation: reset the unit's charge time, clear the
        active unit and count the turn.
        """
        unit = self.get_unit(unit_id)
        state = self.replace_unit(reset_ct(unit)) if unit else self
        return replace(
            state,
            active_unit_id=None if state.active_unit_id == unit_id else state.active_unit_id,
            turn_count=state.turn_count + 1,
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def ready_unit(self, threshold: int = CT_THRESHOLD) -> Optional[Unit]:
        """
        The unit that should act next, if any has charged.

        Highest CT wins; equal CT resolves to the smallest unit id.
        """
        ready = [u for u in self.units if u.stats.ct >= threshold]
        if not ready:
            return None
        return min(ready, key=lambda u: (-u.stats.ct, u.id))

    def process_ct(self, threshold: int = CT_THRESHOLD) -> BattleState:
        """
        Run one scheduler tick.

        1. An activation in progress blocks the scheduler.
        2. A unit already charged becomes active; nothing else changes.
        3. Otherwise every unit gains spd CT. If that charges a unit it
           becomes active in the same call; only a tick that activates
           nobody advances tick_count.
        """
        if self.active_unit_id is not None:
            return self

        ready = self.ready_unit(threshold)
        if ready is not None:
            return self.activate(ready.id)

        charged = replace(self, units=tuple(update_ct(u) for u in self.units))
        ready = charged.ready_unit(threshold)
        if ready is not None:
            return charged.activate(ready.id)

        return replace(charged, tick_count=self.tick_count + 1)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def get_unit_move_range(self, unit_id: str, enforce_jump: bool = True) -> list[Position]:
        """Cells the unit can reach this activation, excluding its own."""
        unit = self.get_unit(unit_id)
        if unit is None:
            return []

        return reachable_positions(
            self.map,
            unit.position,
            unit.stats.mov,
            blocked=self.occupied_positions(exclude=unit.id),
            jump=unit.stats.jmp if enforce_jump else None,
        )

    def search_path(
        self,
        start: Position,
        end: Position,
        enforce_jump: bool = True,
        iteration_cap: int = 1000,
    ) -> PathSearch:
        """
        A* path between two cells.

        The unit standing on start (if any) is the mover: its cell is
        not an obstacle and its jump stat limits height changes.
        """
        mover = self.unit_at(start)
        jump = mover.stats.jmp if (mover is not None and enforce_jump) else None
        return search_path(
            self.map,
            start,
            end,
            occupied=self.occupied_positions(exclude=mover.id if mover else None),
            jump=jump,
            iteration_cap=iteration_cap,
        )

    def find_path(self, start: Position, end: Position, **kwargs) -> list[Position]:
        return self.search_path(start, end, **kwargs).positions
