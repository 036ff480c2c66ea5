"""
Tactics Engine

Runtime pieces shared by the battle framework: immutable components,
the typed event bus, configuration and validated data loading.

Quick Start:
    from tactics_framework.battle import GameSystem

    game = GameSystem()
    game.setup_initial_state()
    unit_id = game.advance_to_next_activation()
"""

__version__ = "0.1.0"

from tactics_engine.core import (
    Component,
    BattleConfig,
    EventBus,
    Event,
)
from tactics_engine.resources import Database

__all__ = [
    "Component",
    "BattleConfig",
    "EventBus",
    "Event",
    "Database",
]
