"""Core dataclasses used by the dungeon generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from dungeon_geometry import Direction, Rect, TilePos


class TileKind(Enum):
    """Semantic classification of a grid cell."""

    UNSET = 0  # Untouched and solid; no Floor neighbour.
    FLOOR = 1
    WALL = 2
    DOOR = 3

    @property
    def passable(self) -> bool:
        return self in (TileKind.FLOOR, TileKind.DOOR)


class DecorationKind(Enum):
    PILLAR = "pillar"
    TORCH = "torch"
    CHEST = "chest"
    POTION = "potion"
    BLOOD = "blood"
    CRACK = "crack"
    SKULL = "skull"
    BONES = "bones"

    @property
    def is_treasure(self) -> bool:
        return self in (DecorationKind.CHEST, DecorationKind.POTION)

    @property
    def is_cosmetic(self) -> bool:
        return self in COSMETIC_KINDS


COSMETIC_KINDS: Tuple[DecorationKind, ...] = (
    DecorationKind.BLOOD,
    DecorationKind.CRACK,
    DecorationKind.SKULL,
    DecorationKind.BONES,
)


@dataclass
class Room:
    """A carved rectangular room.

    ``index`` is the discovery order across the whole generation and
    ``leaf_index`` points at the owning partition leaf.
    """

    x: int
    y: int
    width: int
    height: int
    index: int = -1
    leaf_index: int = -1

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> TilePos:
        return self.bounds.center

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def contains(self, tile: TilePos) -> bool:
        return self.bounds.contains(tile)

    def intersects(self, other: Room) -> bool:
        return self.bounds.overlaps(other.bounds)

    def cells(self) -> Iterator[TilePos]:
        return self.bounds.tiles()

    def boundary_cells(self) -> Iterator[Tuple[TilePos, Direction]]:
        """Yield edge tiles with their outward direction, row-major.

        Corners come up once per outward side, vertical side first.
        """
        for tile in self.cells():
            if tile.y == self.y:
                yield tile, Direction.NORTH
            elif tile.y == self.bottom - 1:
                yield tile, Direction.SOUTH
            if tile.x == self.x:
                yield tile, Direction.WEST
            elif tile.x == self.right - 1:
                yield tile, Direction.EAST


@dataclass
class PartitionNode:
    """One rectangle of the BSP tree, stored in the tree's node arena."""

    index: int
    rect: Rect
    depth: int
    left_child: Optional[int] = None
    right_child: Optional[int] = None
    room: Optional[Room] = None

    @property
    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None

    @property
    def children(self) -> Tuple[int, ...]:
        return tuple(c for c in (self.left_child, self.right_child) if c is not None)


@dataclass
class Corridor:
    """1-tile-wide L-shaped passage joining the centres of two rooms."""

    room_a_index: int
    room_b_index: int
    horizontal_first: bool
    tiles: Tuple[TilePos, ...]
    # Straight runs as (start, end) pairs, inclusive; single-tile runs are dropped.
    segments: Tuple[Tuple[TilePos, TilePos], ...] = field(default=())
    index: int = -1

    def __len__(self) -> int:
        return len(self.tiles)


@dataclass(frozen=True)
class Decoration:
    kind: DecorationKind
    pos: TilePos
    room_index: Optional[int] = None
