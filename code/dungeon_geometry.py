"""Geometry helpers for working with tiles, directions, and rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class Direction(Enum):
    """Outward directions of a room edge; y grows downwards."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value


CARDINAL_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(d.vector for d in Direction)

# Bit order for neighbour masks: N, NE, E, SE, S, SW, W, NW.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)


@dataclass(frozen=True, order=True)
class TilePos:
    """Grid cell address. Natural ordering is column-major; sort on (y, x) for row-major."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def offset(self, dx: int, dy: int) -> TilePos:
        return TilePos(self.x + dx, self.y + dy)

    def step(self, direction: Direction) -> TilePos:
        return TilePos(self.x + direction.dx, self.y + direction.dy)

    def cardinal_neighbors(self) -> Iterator[TilePos]:
        for dx, dy in CARDINAL_OFFSETS:
            yield TilePos(self.x + dx, self.y + dy)

    def neighbors(self) -> Iterator[TilePos]:
        """Yield all 8 surrounding tiles in ``NEIGHBOR_OFFSETS`` order."""
        for dx, dy in NEIGHBOR_OFFSETS:
            yield TilePos(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Rect:
    """Half-open integer rectangle, used for partition regions and room bounds."""

    x: int
    y: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        """First column past the right edge."""
        return self.x + self.width

    @property
    def max_y(self) -> int:
        """First row past the bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> TilePos:
        """Integer centre cell; rounds towards the top-left for even sizes."""
        return TilePos(self.x + self.width // 2, self.y + self.height // 2)

    def overlaps(self, other: Rect) -> bool:
        """True when the two rects share at least one cell."""
        if self.max_x <= other.x or other.max_x <= self.x:
            return False
        if self.max_y <= other.y or other.max_y <= self.y:
            return False
        return True

    def expand(self, margin: int) -> Rect:
        """Grow by ``margin`` cells on every side."""
        if margin == 0:
            return self
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def inset(self, margin: int) -> Rect:
        """Return a rect shrunk by ``margin`` on all sides; sizes may go non-positive."""
        return self.expand(-margin)

    def contains(self, point: TilePos) -> bool:
        """Membership test for a single cell."""
        return self.x <= point.x < self.max_x and self.y <= point.y < self.max_y

    def contains_rect(self, other: Rect) -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def tiles(self) -> Iterator[TilePos]:
        """Yield every tile in row-major order."""
        for ty in range(self.y, self.max_y):
            for tx in range(self.x, self.max_x):
                yield TilePos(tx, ty)
