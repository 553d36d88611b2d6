"""Binary space partitioning of the map into leaf regions."""

from __future__ import annotations

import math
import random
from typing import Iterator, List

from dungeon_config import DungeonConfig
from dungeon_constants import SPLIT_ASPECT_RATIO
from dungeon_geometry import Rect
from dungeon_models import PartitionNode


class PartitionTree:
    """Arena-backed BSP tree; node 0 is the root covering the whole map.

    Children are referenced by index into ``nodes`` so traversals can use an
    explicit stack instead of recursion.
    """

    def __init__(self, config: DungeonConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng
        self.nodes: List[PartitionNode] = []
        self._add_node(Rect(0, 0, config.map_size, config.map_size), depth=0)

    @property
    def root(self) -> PartitionNode:
        return self.nodes[0]

    def node(self, index: int) -> PartitionNode:
        return self.nodes[index]

    def _add_node(self, rect: Rect, depth: int) -> int:
        index = len(self.nodes)
        self.nodes.append(PartitionNode(index=index, rect=rect, depth=depth))
        return index

    def can_split(self, node: PartitionNode) -> bool:
        if not node.is_leaf:
            return False
        if node.depth >= self.config.max_depth:
            return False
        rect = node.rect
        min_size = self.config.min_split_size
        return rect.width >= min_size and rect.height >= min_size

    def choose_vertical_split(self, rect: Rect) -> bool:
        """True splits into left/right children, False into top/bottom."""
        if rect.width / rect.height >= SPLIT_ASPECT_RATIO:
            return True
        if rect.height / rect.width >= SPLIT_ASPECT_RATIO:
            return False
        return self.rng.random() < 0.5

    def split_offset(self, dimension: int) -> int:
        """Pick a split position near the middle of ``dimension``.

        The result is clamped to ``[1, dimension - 1]`` so both children keep
        a positive size.
        """
        half = math.ceil(dimension / 2)
        jitter = int(dimension * self.config.split_percentage)
        offset = self.rng.randint(half - jitter, half + jitter)
        return max(1, min(dimension - 1, offset))

    def split(self, node_index: int) -> bool:
        """Split a leaf in two. Returns False and leaves it untouched when it cannot split."""
        node = self.nodes[node_index]
        if not self.can_split(node):
            return False

        rect = node.rect
        depth = node.depth + 1
        if self.choose_vertical_split(rect):
            offset = self.split_offset(rect.width)
            first = Rect(rect.x, rect.y, offset, rect.height)
            second = Rect(rect.x + offset, rect.y, rect.width - offset, rect.height)
        else:
            offset = self.split_offset(rect.height)
            first = Rect(rect.x, rect.y, rect.width, offset)
            second = Rect(rect.x, rect.y + offset, rect.width, rect.height - offset)

        node.left_child = self._add_node(first, depth)
        node.right_child = self._add_node(second, depth)
        return True

    def build(self) -> int:
        """Split depth-first in pre-order until every branch ends in a leaf.

        Returns the number of leaves.
        """
        stack = [self.root.index]
        while stack:
            index = stack.pop()
            if self.split(index):
                node = self.nodes[index]
                # Right pushed first so the left subtree is split first.
                stack.append(node.right_child)
                stack.append(node.left_child)
        return sum(1 for _ in self.leaves())

    def iter_preorder(self) -> Iterator[PartitionNode]:
        stack = [self.root.index]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def iter_postorder(self) -> Iterator[PartitionNode]:
        stack = [(self.root.index, False)]
        while stack:
            index, expanded = stack.pop()
            node = self.nodes[index]
            if expanded or node.is_leaf:
                yield node
                continue
            stack.append((index, True))
            for child in reversed(node.children):
                stack.append((child, False))

    def leaves(self) -> Iterator[PartitionNode]:
        """Leaves in pre-order (left to right)."""
        return (node for node in self.iter_preorder() if node.is_leaf)

    def max_depth_reached(self) -> int:
        return max(node.depth for node in self.nodes)
