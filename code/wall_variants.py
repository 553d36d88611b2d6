"""Presentation lookup from a wall's floor-neighbour mask to a wall variant.

The grid only stores which of the 8 neighbours are open; picking the variant
is left to whoever draws the map, so renderers can pass their own lookup.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

# Bits follow dungeon_geometry.NEIGHBOR_OFFSETS.
N = 1 << 0
NE = 1 << 1
E = 1 << 2
SE = 1 << 3
S = 1 << 4
SW = 1 << 5
W = 1 << 6
NW = 1 << 7


class WallVariant(Enum):
    NORTH = "north"  # Floor directly below; the wall faces the viewer.
    SOUTH = "south"
    SOUTH_OPEN_WEST = "south_open_west"
    SOUTH_OPEN_EAST = "south_open_east"
    WEST = "west"
    EAST = "east"
    CORNER_NORTH_WEST = "corner_north_west"
    CORNER_NORTH_EAST = "corner_north_east"
    CORNER_SOUTH_WEST = "corner_south_west"
    CORNER_SOUTH_EAST = "corner_south_east"
    SOLID = "solid"


WallVariantLookup = Callable[[int], WallVariant]


def faces_north(mask: int) -> bool:
    """True for walls with open floor directly below them."""
    return bool(mask & S)


def default_wall_variant(mask: int) -> WallVariant:
    """Cardinal neighbours win over diagonals; below, above, east, west in that order."""
    if mask & S:
        return WallVariant.NORTH
    if mask & N:
        # South walls are drawn differently where the floor also wraps around a side.
        if mask & W:
            return WallVariant.SOUTH_OPEN_WEST
        if mask & E:
            return WallVariant.SOUTH_OPEN_EAST
        return WallVariant.SOUTH
    if mask & E:
        return WallVariant.WEST
    if mask & W:
        return WallVariant.EAST
    if mask & NE:
        return WallVariant.CORNER_SOUTH_WEST
    if mask & NW:
        return WallVariant.CORNER_SOUTH_EAST
    if mask & SE:
        return WallVariant.CORNER_NORTH_WEST
    if mask & SW:
        return WallVariant.CORNER_NORTH_EAST
    return WallVariant.SOLID


def collapsed_wall_variant(mask: int) -> WallVariant:
    """Lookup for renderers without visual variety."""
    return WallVariant.SOLID
