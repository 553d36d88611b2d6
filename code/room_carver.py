"""Room placement inside partition leaves."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from dungeon_config import DungeonConfig
from dungeon_models import Room
from partition_tree import PartitionTree

logger = logging.getLogger(__name__)


class RoomCarver:
    """Places at most one room per leaf, keeping ``room_margin`` to the leaf edges."""

    def __init__(self, config: DungeonConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng

    def create_room(self, tree: PartitionTree, leaf_index: int) -> Optional[Room]:
        """Carve a room into the leaf, or return None when the leaf is too small.

        Too-small leaves are an expected outcome on deep or lopsided splits;
        they simply contribute no room.
        """
        leaf = tree.node(leaf_index)
        if not leaf.is_leaf:
            raise ValueError(f"Node {leaf_index} is not a leaf")

        margin = self.config.room_margin
        min_size = self.config.min_room_size
        available = leaf.rect.inset(margin)
        if available.width < min_size or available.height < min_size:
            return None

        width = self.rng.randint(min_size, available.width)
        height = self.rng.randint(min_size, available.height)
        x = available.x + self.rng.randint(0, available.width - width)
        y = available.y + self.rng.randint(0, available.height - height)

        room = Room(x, y, width, height, leaf_index=leaf_index)
        leaf.room = room
        return room

    def carve_rooms(self, tree: PartitionTree) -> List[Room]:
        """Visit leaves in discovery order and return every room carved."""
        rooms: List[Room] = []
        skipped = 0
        for leaf in tree.leaves():
            room = self.create_room(tree, leaf.index)
            if room is None:
                skipped += 1
                continue
            room.index = len(rooms)
            rooms.append(room)
        if skipped:
            logger.debug("Skipped %d leaves too small for a room", skipped)
        return rooms


def get_room(tree: PartitionTree, node_index: int, rng: random.Random) -> Optional[Room]:
    """Resolve the representative room of a subtree.

    A leaf yields its own room. An internal node picks randomly between its
    subtrees when both produced a room, propagates whichever one did
    otherwise, and yields None when neither did.
    """
    node = tree.node(node_index)
    if node.is_leaf:
        return node.room

    left_room = get_room(tree, node.left_child, rng) if node.left_child is not None else None
    right_room = get_room(tree, node.right_child, rng) if node.right_child is not None else None
    if left_room is None:
        return right_room
    if right_room is None:
        return left_room
    return left_room if rng.random() < 0.5 else right_room
