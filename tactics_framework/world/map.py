"""
Grid map - fixed-size terrain of tiles with height and passability.

Tile data is stored as two numpy arrays of shape (height, width),
so every lookup is a direct index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from tactics_framework.components.transform import Position


@dataclass(frozen=True)
class Tile:
    """A single grid cell."""
    position: Position
    height: int = 0
    passable: bool = True


class GridMap:
    """
    Rectangular battle map.

    The shape is fixed at construction. Terrain is only changed through
    set_tile_height() and set_tile_passable(); both ignore positions
    outside the map.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Map size must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._heights: np.ndarray = np.zeros((height, width), dtype=np.int32)
        self._passable: np.ndarray = np.ones((height, width), dtype=bool)

    @property
    def width(self) -> int:
        """Map width in tiles."""
        return self._width

    @property
    def height(self) -> int:
        """Map height in tiles."""
        return self._height

    @property
    def tile_count(self) -> int:
        return self._width * self._height

    @property
    def heights(self) -> np.ndarray:
        """Read-only view of tile heights, indexed [y, x]."""
        view = self._heights.view()
        view.flags.writeable = False
        return view

    @property
    def passability(self) -> np.ndarray:
        """Read-only view of tile passability, indexed [y, x]."""
        view = self._passable.view()
        view.flags.writeable = False
        return view

    def is_valid_position(self, position: Position) -> bool:
        """Check if a position lies inside the map."""
        x, y = position
        return 0 <= x < self._width and 0 <= y < self._height

    def get_tile(self, position: Position) -> Tile | None:
        """Get the tile at a position, or None when out of bounds."""
        if not self.is_valid_position(position):
            return None
        x, y = position
        return Tile(
            position=Position(x, y),
            height=int(self._heights[y, x]),
            passable=bool(self._passable[y, x]),
        )

    def is_passable(self, position: Position) -> bool:
        """Check if a tile exists and can be entered."""
        if not self.is_valid_position(position):
            return False
        x, y = position
        return bool(self._passable[y, x])

    def height_at(self, position: Position) -> int | None:
        if not self.is_valid_position(position):
            return None
        x, y = position
        return int(self._heights[y, x])

    def set_tile_height(self, position: Position, height: int) -> None:
        """Set tile height."""
        if self.is_valid_position(position):
            x, y = position
            self._heights[y, x] = height

    def set_tile_passable(self, position: Position, passable: bool) -> None:
        """Set tile passability."""
        if self.is_valid_position(position):
            x, y = position
            self._passable[y, x] = passable

    def iter_tiles(self) -> Iterator[Tile]:
        """Iterate tiles in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                yield Tile(
                    position=Position(x, y),
                    height=int(self._heights[y, x]),
                    passable=bool(self._passable[y, x]),
                )

    def get_all_tiles(self) -> list[Tile]:
        """All tiles in row-major order."""
        return list(self.iter_tiles())

    def __repr__(self) -> str:
        return f"GridMap({self._width}x{self._height})"
