"""
World module - battle terrain and grid search.
"""

from tactics_framework.world.map import GridMap, Tile
from tactics_framework.world.pathfinding import (
    PathSearch,
    reachable_positions,
    search_path,
    find_path,
    linear_path,
)

__all__ = [
    "GridMap",
    "Tile",
    "PathSearch",
    "reachable_positions",
    "search_path",
    "find_path",
    "linear_path",
]
