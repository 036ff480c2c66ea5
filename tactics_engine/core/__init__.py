"""
Core engine module.

Exports:
- Component: Immutable data component base
- EventBus, Event: Event system
- BattleConfig: Session configuration
"""

from tactics_engine.core.component import Component
from tactics_engine.core.config import BattleConfig, DEFAULT_DATA_PATH
from tactics_engine.core.events import EventBus, Event, EventHandler

__all__ = [
    # Data
    "Component",
    # Config
    "BattleConfig",
    "DEFAULT_DATA_PATH",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
]
