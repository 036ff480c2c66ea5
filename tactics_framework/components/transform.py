"""
Transform components - grid position and facing.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, NamedTuple


class Position(NamedTuple):
    """Integer grid coordinate. y grows southward."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Position:
        """Position shifted by a delta."""
        return Position(self.x + dx, self.y + dy)


def manhattan(a: Position, b: Position) -> int:
    """Grid distance |dx| + |dy|."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def adjacent(position: Position) -> Iterator[Position]:
    """4-connected neighbours in north, east, south, west order."""
    x, y = position
    yield Position(x, y - 1)
    yield Position(x + 1, y)
    yield Position(x, y + 1)
    yield Position(x - 1, y)


class Direction(Enum):
    """Cardinal facing directions."""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def vector(self) -> tuple[int, int]:
        """Get unit grid vector."""
        vectors = {
            Direction.NORTH: (0, -1),
            Direction.EAST: (1, 0),
            Direction.SOUTH: (0, 1),
            Direction.WEST: (-1, 0),
        }
        return vectors[self]

    @staticmethod
    def from_vector(dx: int, dy: int, current: Direction | None = None) -> Direction:
        """
        Get facing from a displacement.

        The dominant axis wins; equal magnitudes resolve to the
        horizontal axis. A zero displacement keeps the current facing
        (south when there is none).
        """
        if dx == 0 and dy == 0:
            return current or Direction.SOUTH

        if abs(dx) >= abs(dy):
            return Direction.EAST if dx > 0 else Direction.WEST
        return Direction.SOUTH if dy > 0 else Direction.NORTH
