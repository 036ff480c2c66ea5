"""
Battle abilities - weapon, magic, item and passive definitions.

An ability is an immutable definition with three behaviours:
- can_use(actor, state): may the actor use it right now?
- validate_target(actor, target, state): is the target legal?
- execute(actor, target, state): the state after the effect

execute() never mutates; the caller swaps in the returned state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Iterable, Mapping, Optional, Union

from tactics_engine.resources import Database
from tactics_framework.components import Position, manhattan
from tactics_framework.battle.state import BattleState
from tactics_framework.battle.unit import Unit

logger = logging.getLogger(__name__)


class AbilityType(Enum):
    """Kinds of abilities."""
    WEAPON = "weapon"
    MAGIC = "magic"
    ITEM = "item"
    PASSIVE = "passive"


class TargetType(Enum):
    """Ability targeting types."""
    SINGLE_ENEMY = "single_enemy"
    SINGLE_ALLY = "single_ally"
    SINGLE_ANY = "single_any"
    AREA_ENEMY = "area_enemy"
    AREA_ALLY = "area_ally"
    AREA_ANY = "area_any"
    SELF = "self"

    @property
    def is_single(self) -> bool:
        return self in (TargetType.SINGLE_ENEMY, TargetType.SINGLE_ALLY, TargetType.SINGLE_ANY)

    @property
    def is_area(self) -> bool:
        return self in (TargetType.AREA_ENEMY, TargetType.AREA_ALLY, TargetType.AREA_ANY)

    def accepts(self, actor: Unit, other: Unit) -> bool:
        """Team-affiliation rule for a unit this ability may affect."""
        if self in (TargetType.SINGLE_ENEMY, TargetType.AREA_ENEMY):
            return not actor.is_ally_of(other)
        if self in (TargetType.SINGLE_ALLY, TargetType.AREA_ALLY):
            return actor.is_ally_of(other)
        if self is TargetType.SELF:
            return actor.id == other.id
        return True


class Element(Enum):
    """Elemental affinity."""
    NONE = "none"
    FIRE = "fire"
    ICE = "ice"
    THUNDER = "thunder"
    WIND = "wind"
    EARTH = "earth"
    HOLY = "holy"
    DARK = "dark"


class EffectKind(Enum):
    """What an ability does to each affected unit."""
    DAMAGE = "damage"
    HEAL = "heal"
    RESTORE_MP = "restore_mp"
    NONE = "none"


@dataclass(frozen=True)
class UnitTarget:
    """Ability aimed at a unit."""
    unit: Unit


@dataclass(frozen=True)
class TileTarget:
    """Ability aimed at a grid cell."""
    position: Position


Target = Union[UnitTarget, TileTarget]


@dataclass(frozen=True)
class Ability:
    """
    Base ability definition.

    Attributes:
        id: Catalog key
        name: Display name
        target_type: Who may be targeted
        effect: Damage, heal or MP restore per affected unit
        range: Maximum Manhattan distance from actor to target
        area_size: Radius around the target cell for area abilities
        power: Effect magnitude
        element: Elemental affinity
        cast_time: Charge time before resolution (data only)
        cooldown: Turns before reuse (data only)
        mp_cost: MP spent per use
        uses: Use count for consumables (data only)
        rarity: Rarity label
    """
    ability_type: ClassVar[AbilityType]

    id: str
    name: str
    description: str = ""
    target_type: TargetType = TargetType.SINGLE_ENEMY
    effect: EffectKind = EffectKind.DAMAGE
    range: int = 1
    area_size: int = 0
    power: int = 10
    element: Element = Element.NONE
    cast_time: int = 0
    cooldown: int = 0
    mp_cost: Optional[int] = None
    uses: Optional[int] = None
    rarity: str = "common"

    @property
    def type(self) -> AbilityType:
        return self.ability_type

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    def can_use(self, actor: Unit, state: BattleState) -> bool:
        """Eligibility: living units may act."""
        return actor.is_alive

    def validate_target(self, actor: Unit, target: Target, state: BattleState) -> bool:
        """Affiliation and range checks for the target type."""
        if self.target_type is TargetType.SELF:
            unit = self._resolve_unit(target, state)
            return unit is not None and unit.id == actor.id

        if self.target_type.is_single:
            unit = self._resolve_unit(target, state)
            if unit is None:
                return False
            if not self.target_type.accepts(actor, unit):
                return False
            return manhattan(actor.position, unit.position) <= self.range

        center = self._target_position(target)
        if not state.map.is_valid_position(center):
            return False
        return manhattan(actor.position, center) <= self.range

    def execute(self, actor: Unit, target: Target, state: BattleState) -> BattleState:
        """Pay the cost, then apply the effect to every affected unit."""
        actor = self.pay_cost(actor)
        state = state.replace_unit(actor)

        affected = [
            self.apply_effect(actor, unit)
            for unit in self.affected_units(actor, target, state)
        ]
        return state.replace_units(affected)

    # ------------------------------------------------------------------
    # Hooks for ability kinds
    # ------------------------------------------------------------------

    def pay_cost(self, actor: Unit) -> Unit:
        return actor

    def damage_against(self, actor: Unit, target: Unit) -> int:
        return max(1, self.power)

    def apply_effect(self, actor: Unit, target: Unit) -> Unit:
        """New value of one affected unit."""
        stats = target.stats
        if self.effect is EffectKind.DAMAGE:
            return target.with_stats(hp=max(0, stats.hp - self.damage_against(actor, target)))
        if self.effect is EffectKind.HEAL:
            return target.with_stats(hp=min(stats.max_hp, stats.hp + self.power))
        if self.effect is EffectKind.RESTORE_MP:
            return target.with_stats(mp=min(stats.max_mp, stats.mp + self.power))
        return target

    def affected_units(self, actor: Unit, target: Target, state: BattleState) -> list[Unit]:
        """Current values of the units the effect lands on."""
        if self.target_type is TargetType.SELF:
            return [state.get_unit(actor.id)]

        if self.target_type.is_single:
            unit = self._resolve_unit(target, state)
            return [unit] if unit else []

        center = self._target_position(target)
        return [
            unit for unit in state.units
            if manhattan(unit.position, center) <= self.area_size
            and self.target_type.accepts(actor, unit)
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_unit(target: Target, state: BattleState) -> Optional[Unit]:
        if isinstance(target, UnitTarget):
            return state.get_unit(target.unit.id)
        return state.unit_at(target.position)

    @staticmethod
    def _target_position(target: Target) -> Position:
        if isinstance(target, UnitTarget):
            return target.unit.position
        return Position(*target.position)


@dataclass(frozen=True)
class WeaponAbility(Ability):
    """Physical attack: max(1, atk + power - def // 2)."""
    ability_type: ClassVar[AbilityType] = AbilityType.WEAPON

    def damage_against(self, actor: Unit, target: Unit) -> int:
        return max(1, actor.stats.atk + self.power - target.stats.def_ // 2)


@dataclass(frozen=True)
class MagicAbility(Ability):
    """Spell paid with MP. Damage: max(1, mag + power - res // 2)."""
    ability_type: ClassVar[AbilityType] = AbilityType.MAGIC

    mp_cost: Optional[int] = 0

    def can_use(self, actor: Unit, state: BattleState) -> bool:
        return actor.is_alive and actor.stats.mp >= (self.mp_cost or 0)

    def pay_cost(self, actor: Unit) -> Unit:
        return actor.with_stats(mp=max(0, actor.stats.mp - (self.mp_cost or 0)))

    def damage_against(self, actor: Unit, target: Unit) -> int:
        return max(1, actor.stats.mag + self.power - target.stats.res // 2)


@dataclass(frozen=True)
class ItemAbility(Ability):
    """Consumable; each use spends one from the actor's inventory."""
    ability_type: ClassVar[AbilityType] = AbilityType.ITEM

    target_type: TargetType = TargetType.SINGLE_ALLY
    effect: EffectKind = EffectKind.HEAL
    uses: Optional[int] = 1

    def can_use(self, actor: Unit, state: BattleState) -> bool:
        return actor.is_alive and actor.item_quantity(self.id) > 0

    def pay_cost(self, actor: Unit) -> Unit:
        inventory = dict(actor.inventory)
        inventory[self.id] = max(0, inventory.get(self.id, 0) - 1)
        return actor.evolve(inventory=inventory)


@dataclass(frozen=True)
class PassiveAbility(Ability):
    """Always-on support ability; never used as an action."""
    ability_type: ClassVar[AbilityType] = AbilityType.PASSIVE

    target_type: TargetType = TargetType.SELF
    effect: EffectKind = EffectKind.NONE
    range: int = 0
    power: int = 0

    def can_use(self, actor: Unit, state: BattleState) -> bool:
        return False

    def validate_target(self, actor: Unit, target: Target, state: BattleState) -> bool:
        return False

    def execute(self, actor: Unit, target: Target, state: BattleState) -> BattleState:
        return state


ABILITY_CLASSES: dict[AbilityType, type[Ability]] = {
    AbilityType.WEAPON: WeaponAbility,
    AbilityType.MAGIC: MagicAbility,
    AbilityType.ITEM: ItemAbility,
    AbilityType.PASSIVE: PassiveAbility,
}

_ENUM_FIELDS = {
    "target_type": TargetType,
    "effect": EffectKind,
    "element": Element,
}


def ability_from_data(record: Mapping[str, Any]) -> Ability:
    """
    Build an ability from a catalog record.

    Raises:
        ValueError: Unknown ability type or enum value
    """
    data = dict(record)
    try:
        ability_type = AbilityType(data.pop("type"))
    except (KeyError, ValueError) as e:
        raise ValueError(f"Ability '{record.get('id')}' has no valid type") from e

    for key, enum_cls in _ENUM_FIELDS.items():
        if key in data:
            data[key] = enum_cls(data[key])

    return ABILITY_CLASSES[ability_type](**data)


class AbilityCatalog:
    """
    Session-wide ability registry keyed by id.

    Read-only during play except for explicit register() calls.
    """

    def __init__(self, abilities: Iterable[Ability] = ()):
        self._abilities: dict[str, Ability] = {}
        for ability in abilities:
            self.register(ability)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> AbilityCatalog:
        """Build a catalog from data records, skipping malformed ones."""
        catalog = cls()
        for record in records:
            try:
                catalog.register(ability_from_data(record))
            except (TypeError, ValueError) as e:
                logger.error(f"Skipping ability record {record.get('id')!r}: {e}")
        return catalog

    def register(self, ability: Ability) -> None:
        """Register an ability, replacing any with the same id."""
        if ability.id in self._abilities:
            logger.debug(f"Replacing ability '{ability.id}'")
        self._abilities[ability.id] = ability

    def get(self, ability_id: str) -> Optional[Ability]:
        return self._abilities.get(ability_id)

    def all(self) -> list[Ability]:
        return list(self._abilities.values())

    def __contains__(self, ability_id: object) -> bool:
        return ability_id in self._abilities

    def __len__(self) -> int:
        return len(self._abilities)


def load_catalog(data_path: Path | str) -> AbilityCatalog:
    """Load and validate the ability catalog stored under data_path."""
    database = Database(data_path)
    database.load_all()
    return AbilityCatalog.from_records(database.abilities.values())
