"""
Battle components - immutable value types.

Components are frozen Pydantic models or plain value tuples.
Changes produce new instances; nothing is mutated in place.
"""

from tactics_framework.components.transform import (
    Position,
    Direction,
    manhattan,
    adjacent,
)
from tactics_framework.components.character import (
    Job,
    UnitStats,
    EquippedAbilities,
    JOB_STATS,
    JOB_EQUIPMENT,
    DEFAULT_INVENTORY,
)

__all__ = [
    # Transform
    "Position",
    "Direction",
    "manhattan",
    "adjacent",
    # Character
    "Job",
    "UnitStats",
    "EquippedAbilities",
    "JOB_STATS",
    "JOB_EQUIPMENT",
    "DEFAULT_INVENTORY",
]
