"""Pillars, treasure, cosmetic clutter and torches.

None of the randomness here changes which rooms are reachable: pillars stay
one tile clear of every room edge, so the room's outer ring of floor (and
every corridor entrance on it) survives. Floor pockets that pillars cut off
from that ring are filled in, so nothing gets placed where it cannot be
reached.
"""

from __future__ import annotations

import logging
import random
from typing import List, Sequence

from connectivity import reachable_cells
from dungeon_config import DecorationConfig
from dungeon_constants import PILLAR_SIZE
from dungeon_geometry import Rect, TilePos
from dungeon_models import COSMETIC_KINDS, Decoration, DecorationKind, Room, TileKind
from tile_grid import TileGrid
from wall_variants import faces_north

logger = logging.getLogger(__name__)


class DecorationPlacer:
    def __init__(self, config: DecorationConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng
        self.treasure_rooms: List[int] = []

    def wants_pillars(self, room: Room) -> bool:
        return (
            room.area > self.config.pillar_min_area
            and room.width > self.config.pillar_min_dimension
            and room.height > self.config.pillar_min_dimension
        )

    def add_pillars(self, room: Room, grid: TileGrid) -> List[Decoration]:
        """Punch 2x2 holes into the room interior and wall them in.

        A hole that would sit next to a door is skipped, otherwise its wall
        would see nothing but doors.
        """
        if not self.wants_pillars(room):
            return []
        low, high = self.config.pillar_count_range
        pillars: List[Decoration] = []
        for _ in range(self.rng.randint(low, high)):
            left = room.x + self.rng.randint(1, room.width - PILLAR_SIZE - 1)
            top = room.y + self.rng.randint(1, room.height - PILLAR_SIZE - 1)
            footprint = Rect(left, top, PILLAR_SIZE, PILLAR_SIZE)
            if self._touches_door(footprint, grid):
                continue
            for pos in footprint.tiles():
                grid.set_kind(pos, TileKind.UNSET)
            pillars.append(Decoration(DecorationKind.PILLAR, TilePos(left, top), room.index))
        if pillars:
            self._fill_pockets(room, grid)
            grid.infer_walls(room.bounds)
        return pillars

    @staticmethod
    def _touches_door(footprint: Rect, grid: TileGrid) -> bool:
        return any(grid.kind_at(pos) is TileKind.DOOR for pos in footprint.expand(1).tiles())

    @staticmethod
    def _fill_pockets(room: Room, grid: TileGrid) -> int:
        """Turn floor that pillars cut off from the room's outer ring back into rock."""
        reachable = reachable_cells(grid, TilePos(room.x, room.y), room.bounds)
        pockets = [pos for pos in room.cells() if grid.is_passable(pos) and pos not in reachable]
        for pos in pockets:
            grid.set_kind(pos, TileKind.UNSET)
        if pockets:
            logger.debug("Filled %d sealed cells in room %d", len(pockets), room.index)
        return len(pockets)

    def add_treasure(self, room: Room, grid: TileGrid, depth: int) -> List[Decoration]:
        """Roll every floor cell of the room for treasure, then for clutter."""
        chance = self.config.treasure_chance
        all_chests = self.rng.random() < self.config.treasure_room_probability(depth)
        if all_chests:
            chance = self.config.treasure_room_chance
            self.treasure_rooms.append(room.index)

        placed: List[Decoration] = []
        for pos in grid.floor_cells_in(room.bounds):
            if self.rng.random() < chance:
                if all_chests or self.rng.random() < self.config.chest_ratio:
                    kind = DecorationKind.CHEST
                else:
                    kind = DecorationKind.POTION
                placed.append(Decoration(kind, pos, room.index))
                continue
            if self.rng.random() < self.config.cosmetic_chance:
                kind = self.rng.choice(COSMETIC_KINDS)
                placed.append(Decoration(kind, pos, room.index))
        return placed

    def add_torches(self, grid: TileGrid) -> List[Decoration]:
        """Hang torches on walls that face the viewer (floor directly below)."""
        torches: List[Decoration] = []
        for pos in grid.cells_of_kind(TileKind.WALL):
            if not faces_north(grid.wall_mask(pos)):
                continue
            if self.rng.random() < self.config.torch_chance:
                torches.append(Decoration(DecorationKind.TORCH, pos))
        return torches

    def decorate(self, rooms: Sequence[Room], grid: TileGrid, depth: int) -> List[Decoration]:
        decorations: List[Decoration] = []
        for room in rooms:
            decorations.extend(self.add_pillars(room, grid))
            decorations.extend(self.add_treasure(room, grid, depth))
        decorations.extend(self.add_torches(grid))
        return decorations
