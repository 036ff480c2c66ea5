"""
Grid search - movement range and path finding.

Both searches use 4-directional adjacency on a GridMap. A cell can be
entered when it is inside the map, passable, not held by a blocking
unit and, when a jump limit is given, within that many height levels
of the cell being left.
"""

from __future__ import annotations

import heapq
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from itertools import count
from typing import Container, Optional

from tactics_framework.components.transform import Position, adjacent, manhattan
from tactics_framework.world.map import GridMap

logger = logging.getLogger(__name__)

DEFAULT_ITERATION_CAP = 1000


@dataclass
class PathSearch:
    """
    Outcome of a path search.

    Attributes:
        positions: Path from start to end, both inclusive
        is_fallback: True when no route was found and positions is a
            straight-line interpolation that ignores terrain and units
        iterations: Node expansions performed
    """
    positions: list[Position] = field(default_factory=list)
    is_fallback: bool = False
    iterations: int = 0


def _can_step(grid: GridMap, current: Position, nxt: Position, jump: Optional[int]) -> bool:
    if not grid.is_passable(nxt):
        return False
    if jump is not None:
        if abs(grid.height_at(nxt) - grid.height_at(current)) > jump:
            return False
    return True


def reachable_positions(
    grid: GridMap,
    start: Position,
    budget: int,
    blocked: Container[Position] = (),
    jump: Optional[int] = None,
) -> list[Position]:
    """
    Breadth-first search for every cell reachable within budget steps.

    Args:
        grid: Terrain to search
        start: Origin cell (never part of the result)
        budget: Maximum number of steps
        blocked: Cells occupied by other units
        jump: Largest height difference per step, None for no limit

    Returns:
        Reachable positions in discovery order
    """
    start = Position(*start)
    visited = {start}
    result: list[Position] = []
    queue: deque[tuple[Position, int]] = deque([(start, 0)])

    while queue:
        position, steps = queue.popleft()
        if steps >= budget:
            continue

        for nxt in adjacent(position):
            if nxt in visited:
                continue
            if nxt in blocked or not _can_step(grid, position, nxt, jump):
                continue
            visited.add(nxt)
            result.append(nxt)
            queue.append((nxt, steps + 1))

    return result


def linear_path(start: Position, end: Position) -> list[Position]:
    """Straight-line interpolation between two cells, rounded half-up."""
    steps = max(abs(end[0] - start[0]), abs(end[1] - start[1]))
    if steps == 0:
        return [Position(*start)]

    path: list[Position] = []
    for i in range(steps + 1):
        t = i / steps
        point = Position(
            math.floor(start[0] + (end[0] - start[0]) * t + 0.5),
            math.floor(start[1] + (end[1] - start[1]) * t + 0.5),
        )
        if not path or path[-1] != point:
            path.append(point)
    return path


def search_path(
    grid: GridMap,
    start: Position,
    end: Position,
    occupied: Container[Position] = (),
    jump: Optional[int] = None,
    iteration_cap: int = DEFAULT_ITERATION_CAP,
) -> PathSearch:
    """
    A* search from start to end.

    The start cell is always enterable (its occupant is the mover) and
    the end cell may be occupied. Open-set ties resolve by lowest
    f-score, then by insertion order.

    If the open set runs dry or iteration_cap expansions pass without
    reaching end, the result is a straight-line fallback with
    is_fallback set.
    """
    start = Position(*start)
    end = Position(*end)

    if start == end:
        return PathSearch(positions=[start])

    if not grid.is_valid_position(start) or not grid.is_valid_position(end):
        logger.error("Path search outside the map: %s -> %s", start, end)
        return PathSearch()

    order = count()
    open_heap: list[tuple[int, int, Position]] = [(manhattan(start, end), next(order), start)]
    g_score: dict[Position, int] = {start: 0}
    came_from: dict[Position, Position] = {}
    closed: set[Position] = set()
    iterations = 0

    while open_heap and iterations < iteration_cap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            # Stale heap entry superseded by a cheaper one
            continue
        iterations += 1

        if current == end:
            return PathSearch(
                positions=_reconstruct(came_from, current),
                iterations=iterations,
            )

        closed.add(current)

        for neighbor in adjacent(current):
            if neighbor in closed:
                continue
            if not _can_step(grid, current, neighbor, jump):
                continue
            if neighbor in occupied and neighbor != end:
                continue

            tentative = g_score[current] + 1
            if tentative < g_score.get(neighbor, math.inf):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                f = tentative + manhattan(neighbor, end)
                heapq.heappush(open_heap, (f, next(order), neighbor))

    logger.warning(
        "No path from %s to %s after %d iterations; using straight-line fallback",
        start, end, iterations,
    )
    return PathSearch(
        positions=linear_path(start, end),
        is_fallback=True,
        iterations=iterations,
    )


def find_path(
    grid: GridMap,
    start: Position,
    end: Position,
    occupied: Container[Position] = (),
    jump: Optional[int] = None,
    iteration_cap: int = DEFAULT_ITERATION_CAP,
) -> list[Position]:
    """
    Path positions from start to end.

    See search_path(); a fallback path is returned as-is, so callers
    that need collision-checked paths should use search_path().
    """
    return search_path(grid, start, end, occupied, jump, iteration_cap).positions


def _reconstruct(came_from: dict[Position, Position], current: Position) -> list[Position]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path
