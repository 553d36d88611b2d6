"""Shared constants for the BSP dungeon generator."""

from __future__ import annotations

MAP_SIZE = 48  # Maps are always square.
MAX_DEPTH = 4
SPLIT_PERCENTAGE = 0.3  # Max jitter of a split offset, as a fraction of the split dimension.
MIN_SPLIT_SIZE = 12  # Below this no room fits once margins are taken off.
MIN_ROOM_SIZE = 4
ROOM_MARGIN = 2
CORRIDOR_WIDTH = 1
MAX_DOORS_PER_ROOM = 3
GRID_PADDING = 2  # Generation touches [-GRID_PADDING, MAP_SIZE + GRID_PADDING) on both axes.

# A node splits along its long axis once the aspect ratio reaches this value.
SPLIT_ASPECT_RATIO = 1.25

# Decoration defaults. Chances are per trial, in [0, 1].
PILLAR_MIN_AREA = 15
PILLAR_MIN_DIMENSION = 4
PILLAR_COUNT_RANGE = (3, 8)
PILLAR_SIZE = 2
TREASURE_CHANCE = 0.006
TREASURE_ROOM_CHANCE = 0.25
TREASURE_ROOM_CHANCE_PER_DEPTH = 0.01
CHEST_RATIO = 0.5
COSMETIC_CHANCE = 0.05
TORCH_CHANCE = 0.2

RANDOM_SEED = None  # Set to a number for reproducible behavior (for debugging); set to None to produce a different dungeon on every run.
