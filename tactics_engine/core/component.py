"""
Component base class for value-type battle data.

Components are immutable data containers. A change never mutates a
component in place; it produces a new one. This keeps every battle
transition a plain function of (state, command) and makes it trivial
to roll back to the previous state when a command is rejected.

Usage:
    class Health(Component):
        current: int
        max_hp: int

    hurt = health.evolve(current=health.current - 10)
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

C = TypeVar("C", bound="Component")


class Component(BaseModel):
    """
    Base class for all battle components.

    Uses Pydantic for:
    - Validation at construction time
    - JSON serialization
    - Hashable, frozen instances

    IMPORTANT: Do NOT add methods that modify state.
    Return a new instance with evolve() instead.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
        populate_by_name=True,
        use_enum_values=False,
    )

    def evolve(self: C, **changes: Any) -> C:
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=changes)
