"""Hexagonal grid helpers using axial (q, r) coordinates."""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)
DEFAULT_HEX_SIZE = 40.0


@dataclass(frozen=True, order=True)
class AxialCoordinate:
    """Address of a single hex cell."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def __add__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(self.q + other.q, self.r + other.r)

    def __sub__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(self.q - other.q, self.r - other.r)

    def __repr__(self) -> str:
        return f"AxialCoordinate({self.q}, {self.r})"

    @property
    def as_tuple(self) -> Tuple[int, int]:
        return self.q, self.r

    @classmethod
    def of(cls, value: object) -> "AxialCoordinate":
        """Coerce a coordinate, ``(q, r)`` pair or ``{"q", "r"}`` mapping."""

        if isinstance(value, AxialCoordinate):
            return value
        if isinstance(value, Mapping):
            return cls(int(value["q"]), int(value["r"]))
        q, r = value  # type: ignore[misc]
        return cls(int(q), int(r))


ORIGIN = AxialCoordinate(0, 0)

# Order matters: BFS tie-breaking depends on it.
HEX_DIRECTIONS: Tuple[AxialCoordinate, ...] = (
    AxialCoordinate(1, 0),
    AxialCoordinate(1, -1),
    AxialCoordinate(0, -1),
    AxialCoordinate(-1, 0),
    AxialCoordinate(-1, 1),
    AxialCoordinate(0, 1),
)


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def round_to_hex(q: float, r: float) -> AxialCoordinate:
    """Round fractional axial coordinates to the nearest hex.

    The component with the largest rounding error is rebuilt from the other
    two so the cube constraint ``q + r + s == 0`` holds.
    """

    s = -q - r
    rounded_q = _round_half_away(q)
    rounded_r = _round_half_away(r)
    rounded_s = _round_half_away(s)

    q_diff = abs(rounded_q - q)
    r_diff = abs(rounded_r - r)
    s_diff = abs(rounded_s - s)

    if q_diff > r_diff and q_diff > s_diff:
        rounded_q = -rounded_r - rounded_s
    elif r_diff > s_diff:
        rounded_r = -rounded_q - rounded_s

    return AxialCoordinate(int(rounded_q), int(rounded_r))


def neighbors(coord: AxialCoordinate) -> List[AxialCoordinate]:
    return [coord + direction for direction in HEX_DIRECTIONS]


def distance(a: AxialCoordinate, b: AxialCoordinate) -> int:
    dq = a.q - b.q
    dr = a.r - b.r
    return max(abs(dq), abs(dr), abs(dq + dr))


def is_in_range(coord: AxialCoordinate, center: AxialCoordinate, radius: int) -> bool:
    return distance(coord, center) <= radius


def coordinates_in_range(center: AxialCoordinate, radius: int) -> Set[AxialCoordinate]:
    """All hexes within ``radius`` steps of ``center``."""

    coordinates: Set[AxialCoordinate] = set()
    for q in range(-radius, radius + 1):
        r1 = max(-radius, -q - radius)
        r2 = min(radius, -q + radius)
        for r in range(r1, r2 + 1):
            coordinates.add(AxialCoordinate(center.q + q, center.r + r))
    return coordinates


def linear_path(start: AxialCoordinate, end: AxialCoordinate) -> List[AxialCoordinate]:
    """Straight line of hexes from ``start`` to ``end``, both included."""

    steps = distance(start, end)
    if steps == 0:
        return [start]
    path: List[AxialCoordinate] = []
    for i in range(steps + 1):
        t = i / steps
        q = start.q + t * (end.q - start.q)
        r = start.r + t * (end.r - start.r)
        path.append(round_to_hex(q, r))
    return path


def find_path(
    start: AxialCoordinate,
    goal: AxialCoordinate,
    obstacles: Iterable[AxialCoordinate] = (),
    *,
    radius: Optional[int] = None,
    center: AxialCoordinate = ORIGIN,
) -> List[AxialCoordinate]:
    """Shortest walkable path from ``start`` to ``goal``.

    Without obstacles this is the straight line. With obstacles a
    breadth-first search over :data:`HEX_DIRECTIONS` is used. Returns an empty
    list when ``goal`` cannot be reached.

    Pass ``radius`` to bound the search to the board; the result is then a
    shortest path on that board. When ``radius`` is ``None`` the search only
    visits cells within ``distance(start, goal) + len(obstacles) + 1`` of
    ``start``. That band is a heuristic: when an obstacle layout forces a wide
    detour the result can be longer than the true shortest path, or empty
    even though a path exists.
    """

    blocked = set(obstacles)
    if not blocked:
        return linear_path(start, goal)
    if goal in blocked:
        return []
    if start == goal:
        return [start]

    if radius is not None:
        def walkable(cell: AxialCoordinate) -> bool:
            return is_in_range(cell, center, radius) and cell not in blocked
    else:
        search_limit = distance(start, goal) + len(blocked) + 1

        def walkable(cell: AxialCoordinate) -> bool:
            return distance(cell, start) <= search_limit and cell not in blocked

    came_from: Dict[AxialCoordinate, Optional[AxialCoordinate]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for cell in neighbors(current):
            if cell in came_from or not walkable(cell):
                continue
            came_from[cell] = current
            queue.append(cell)

    if goal not in came_from:
        logger.debug("No path from %s to %s around %d obstacles", start, goal, len(blocked))
        return []

    path: List[AxialCoordinate] = []
    node: Optional[AxialCoordinate] = goal
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


@dataclass(frozen=True)
class HexMap:
    """Projection between axial coordinates and screen pixels."""

    hex_size: float = DEFAULT_HEX_SIZE
    center_offset: Tuple[float, float] = (0.0, 0.0)

    def pixel_position(self, coord: AxialCoordinate) -> Tuple[float, float]:
        x = self.hex_size * (1.5 * coord.q)
        y = self.hex_size * (SQRT3 / 2.0 * coord.q + SQRT3 * coord.r)
        return x + self.center_offset[0], y + self.center_offset[1]

    def axial_coordinate(self, point: Sequence[float]) -> AxialCoordinate:
        x = point[0] - self.center_offset[0]
        y = point[1] - self.center_offset[1]
        q = (2.0 / 3.0 * x) / self.hex_size
        r = (-1.0 / 3.0 * x + SQRT3 / 3.0 * y) / self.hex_size
        return round_to_hex(q, r)

    def corners(self, coord: AxialCoordinate, scale: float = 1.0) -> List[Tuple[float, float]]:
        """Polygon outline of a flat-top hex, used for drawing tiles."""

        cx, cy = self.pixel_position(coord)
        radius = self.hex_size * scale
        return [
            (cx + radius * math.cos(i * math.pi / 3.0), cy + radius * math.sin(i * math.pi / 3.0))
            for i in range(6)
        ]


__all__ = [
    "AxialCoordinate",
    "DEFAULT_HEX_SIZE",
    "HEX_DIRECTIONS",
    "HexMap",
    "ORIGIN",
    "coordinates_in_range",
    "distance",
    "find_path",
    "is_in_range",
    "linear_path",
    "neighbors",
    "round_to_hex",
]
