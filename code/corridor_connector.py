"""Join sibling subtrees of the partition tree with L-shaped corridors."""

from __future__ import annotations

import random
from typing import List, Set, Tuple

from dungeon_geometry import TilePos
from dungeon_models import Corridor, Room
from partition_tree import PartitionTree
from room_carver import get_room


def _inclusive_range(start: int, end: int) -> range:
    step = 1 if end >= start else -1
    return range(start, end + step, step)


def l_corridor_tiles(
    start: TilePos, end: TilePos, horizontal_first: bool
) -> Tuple[Tuple[TilePos, ...], Tuple[Tuple[TilePos, TilePos], ...]]:
    """Return the tiles of a 1-wide L path from ``start`` to ``end`` and its straight runs.

    Horizontal-first runs along the source row, then down the destination
    column; vertical-first runs down the source column, then along the
    destination row. Both ends are included.
    """
    if horizontal_first:
        bend = TilePos(end.x, start.y)
        first = [TilePos(x, start.y) for x in _inclusive_range(start.x, end.x)]
        second = [TilePos(end.x, y) for y in _inclusive_range(start.y, end.y)]
    else:
        bend = TilePos(start.x, end.y)
        first = [TilePos(start.x, y) for y in _inclusive_range(start.y, end.y)]
        second = [TilePos(x, end.y) for x in _inclusive_range(start.x, end.x)]

    # The bend tile is shared by both runs.
    tiles = tuple(first + second[1:])
    segments = tuple(
        (run_start, run_end)
        for run_start, run_end in ((start, bend), (bend, end))
        if run_start != run_end
    )
    return tiles, segments


class CorridorConnector:
    """Walks the partition tree bottom-up and links each pair of sibling subtrees.

    Every internal node whose two children both resolve to a representative
    room gets one corridor between those rooms. By induction over the tree
    this connects every room to every other, even when some leaves carved
    nothing.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def create_corridor(self, room_a: Room, room_b: Room) -> Corridor:
        horizontal_first = self.rng.random() < 0.5
        tiles, segments = l_corridor_tiles(room_a.center, room_b.center, horizontal_first)
        return Corridor(
            room_a_index=room_a.index,
            room_b_index=room_b.index,
            horizontal_first=horizontal_first,
            tiles=tiles,
            segments=segments,
        )

    def connect(self, tree: PartitionTree) -> List[Corridor]:
        corridors: List[Corridor] = []
        for node in tree.iter_postorder():
            if node.is_leaf or node.left_child is None or node.right_child is None:
                continue
            left_room = get_room(tree, node.left_child, self.rng)
            right_room = get_room(tree, node.right_child, self.rng)
            if left_room is None or right_room is None:
                continue
            corridor = self.create_corridor(left_room, right_room)
            corridor.index = len(corridors)
            corridors.append(corridor)
        return corridors


def corridor_cells(corridors: List[Corridor]) -> Set[TilePos]:
    cells: Set[TilePos] = set()
    for corridor in corridors:
        cells.update(corridor.tiles)
    return cells
