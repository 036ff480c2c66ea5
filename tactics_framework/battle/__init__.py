"""
Battle module - CT-scheduled grid tactics.

Provides:
- Units and their per-activation action budget
- Ability definitions and the catalog
- Battle state with the CT scheduler
- The GameSystem facade and its events
- Wire snapshots for relaying state
"""

from tactics_framework.battle.unit import (
    Unit,
    ActionState,
    create_unit,
    update_ct,
    reset_ct,
    move_unit,
    mark_action_used,
    reset_action_state,
)
from tactics_framework.battle.state import (
    BattleState,
    CT_THRESHOLD,
)
from tactics_framework.battle.abilities import (
    Ability,
    AbilityType,
    TargetType,
    Element,
    EffectKind,
    WeaponAbility,
    MagicAbility,
    ItemAbility,
    PassiveAbility,
    UnitTarget,
    TileTarget,
    Target,
    AbilityCatalog,
    ability_from_data,
    load_catalog,
)
from tactics_framework.battle.results import (
    ActionResult,
    FailureReason,
    StatChange,
    ChangeKind,
    diff_stats,
)
from tactics_framework.battle.system import (
    GameSystem,
    BattleEvent,
)
from tactics_framework.battle.sync import (
    MoveMessage,
    UnitSnapshot,
    BattleSnapshot,
    apply_move_message,
)

__all__ = [
    # Units
    "Unit",
    "ActionState",
    "create_unit",
    "update_ct",
    "reset_ct",
    "move_unit",
    "mark_action_used",
    "reset_action_state",
    # State
    "BattleState",
    "CT_THRESHOLD",
    # Abilities
    "Ability",
    "AbilityType",
    "TargetType",
    "Element",
    "EffectKind",
    "WeaponAbility",
    "MagicAbility",
    "ItemAbility",
    "PassiveAbility",
    "UnitTarget",
    "TileTarget",
    "Target",
    "AbilityCatalog",
    "ability_from_data",
    "load_catalog",
    # Results
    "ActionResult",
    "FailureReason",
    "StatChange",
    "ChangeKind",
    "diff_stats",
    # System
    "GameSystem",
    "BattleEvent",
    # Sync
    "MoveMessage",
    "UnitSnapshot",
    "BattleSnapshot",
    "apply_move_message",
]
