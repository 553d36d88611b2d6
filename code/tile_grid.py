"""Sparse tile grid plus floor, wall and door inference."""

from __future__ import annotations

import random
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from dungeon_geometry import NEIGHBOR_OFFSETS, Direction, Rect, TilePos
from dungeon_models import Room, TileKind

KIND_GLYPHS: Dict[TileKind, str] = {
    TileKind.UNSET: " ",
    TileKind.FLOOR: ".",
    TileKind.WALL: "#",
    TileKind.DOOR: "+",
}


class TileGrid:
    """Maps integer tile coordinates to a ``TileKind``.

    Cells that were never touched read as UNSET. Generation only writes inside
    ``window``, a padded square around the map. For every wall the grid also
    keeps an 8-bit mask of its open neighbours (bit order of
    ``NEIGHBOR_OFFSETS``), which is what wall-variant lookups consume.
    """

    def __init__(self, window: Rect) -> None:
        self.window = window
        self._cells: Dict[TilePos, TileKind] = {}
        self._wall_masks: Dict[TilePos, int] = {}

    @classmethod
    def for_map(cls, map_size: int, padding: int) -> TileGrid:
        return cls(Rect(-padding, -padding, map_size + 2 * padding, map_size + 2 * padding))

    # --- Queries -----------------------------------------------------------

    def kind_at(self, pos: TilePos) -> TileKind:
        return self._cells.get(pos, TileKind.UNSET)

    def is_passable(self, pos: TilePos) -> bool:
        return self.kind_at(pos).passable

    def wall_mask(self, pos: TilePos) -> int:
        return self._wall_masks.get(pos, 0)

    def cells_of_kind(self, kind: TileKind) -> List[TilePos]:
        if kind is TileKind.UNSET:
            return [pos for pos in self.window.tiles() if pos not in self._cells]
        return sorted(
            (pos for pos, value in self._cells.items() if value is kind),
            key=lambda p: (p.y, p.x),
        )

    def count(self, kind: TileKind) -> int:
        if kind is TileKind.UNSET:
            return self.window.area - len(self._cells)
        return sum(1 for value in self._cells.values() if value is kind)

    def items(self) -> Iterator[Tuple[TilePos, TileKind]]:
        """Non-UNSET cells in row-major order."""
        for pos in sorted(self._cells, key=lambda p: (p.y, p.x)):
            yield pos, self._cells[pos]

    def floor_cells_in(self, rect: Rect) -> List[TilePos]:
        return [pos for pos in rect.tiles() if self.kind_at(pos) is TileKind.FLOOR]

    def random_floor_cell(self, room: Room, rng: random.Random) -> TilePos:
        """Uniformly sample a Floor cell inside ``room``.

        Falls back to the room centre when it holds no Floor cells, e.g. when
        the grid has not been rendered yet.
        """
        cells = self.floor_cells_in(room.bounds)
        if not cells:
            return room.center
        return rng.choice(cells)

    def to_rows(self, window: Optional[Rect] = None) -> List[str]:
        area = window if window is not None else self.window
        return [
            "".join(KIND_GLYPHS[self.kind_at(TilePos(x, y))] for x in range(area.x, area.max_x))
            for y in range(area.y, area.max_y)
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return (
            self.window == other.window
            and self._cells == other._cells
            and self._wall_masks == other._wall_masks
        )

    # --- Mutation ----------------------------------------------------------

    def set_kind(self, pos: TilePos, kind: TileKind) -> None:
        if kind is TileKind.UNSET:
            self._cells.pop(pos, None)
        else:
            self._cells[pos] = kind
        if kind is not TileKind.WALL:
            self._wall_masks.pop(pos, None)

    def open_neighbor_mask(self, pos: TilePos) -> int:
        mask = 0
        for bit, (dx, dy) in enumerate(NEIGHBOR_OFFSETS):
            if self.kind_at(TilePos(pos.x + dx, pos.y + dy)).passable:
                mask |= 1 << bit
        return mask

    def fill_floor(self, rooms: Iterable[Room], corridor_tiles: Iterable[TilePos]) -> int:
        """First render pass: room interiors and corridor cells become FLOOR."""
        cells = set(corridor_tiles)
        for room in rooms:
            cells.update(room.cells())
        for pos in cells:
            self.set_kind(pos, TileKind.FLOOR)
        return len(cells)

    def infer_walls(self, window: Optional[Rect] = None) -> int:
        """Wall every UNSET cell that touches an open cell (8-connected).

        Existing walls inside the scanned area get their mask refreshed and go
        back to UNSET if nothing open touches them any more. Returns the
        number of walls added.
        """
        area = window if window is not None else self.window
        added = 0
        for pos in area.tiles():
            kind = self.kind_at(pos)
            if kind is not TileKind.UNSET and kind is not TileKind.WALL:
                continue
            mask = self.open_neighbor_mask(pos)
            if not mask:
                if kind is TileKind.WALL:
                    self.set_kind(pos, TileKind.UNSET)
                continue
            if kind is TileKind.UNSET:
                self._cells[pos] = TileKind.WALL
                added += 1
            self._wall_masks[pos] = mask
        return added

    def infer_doors(self, rooms: Iterable[Room], max_doors_per_room: int) -> Dict[int, List[TilePos]]:
        """Mark room boundary cells that open onto outside floor as doors.

        Candidates are scanned row-major along each room's boundary and the
        first ``max_doors_per_room`` win. A corner is tried against both of
        its outward sides.
        """
        doors: Dict[int, List[TilePos]] = {}
        for room in rooms:
            placed: List[TilePos] = []
            for tile, direction in room.boundary_cells():
                if len(placed) >= max_doors_per_room:
                    break
                if self.kind_at(tile) is not TileKind.FLOOR:
                    continue
                outward = tile.step(direction)
                if room.contains(outward) or self.kind_at(outward) is not TileKind.FLOOR:
                    continue
                self.set_kind(tile, TileKind.DOOR)
                placed.append(tile)
            doors[room.index] = placed
        return doors

    def _is_floor(self, pos: TilePos, direction: Direction) -> bool:
        return self.kind_at(pos.step(direction)) is TileKind.FLOOR

    def optimize(
        self,
        *,
        fill_thin_walls: bool = True,
        smooth_outer_corners: bool = True,
        remove_isolated_walls: bool = True,
    ) -> int:
        """Cleanup pass over the walls; returns how many walls were changed.

        All decisions are made against a snapshot of the current walls:

        * thin walls with floor on two opposite sides become floor,
        * walls with floor on exactly two perpendicular sides (and not on the
          opposite two) become floor, rounding off corridor bends,
        * walls with fewer than two floor-or-wall cardinal neighbours are
          specks: they become floor when floor sits right next to them and
          go back to UNSET when nothing open touches them at all.

        Walls are re-inferred afterwards so every new floor is walled in.
        """
        to_floor: List[TilePos] = []
        to_unset: List[TilePos] = []
        for pos in self.cells_of_kind(TileKind.WALL):
            north = self._is_floor(pos, Direction.NORTH)
            east = self._is_floor(pos, Direction.EAST)
            south = self._is_floor(pos, Direction.SOUTH)
            west = self._is_floor(pos, Direction.WEST)

            if fill_thin_walls and ((north and south) or (east and west)):
                to_floor.append(pos)
                continue

            if smooth_outer_corners and north != south and east != west:
                to_floor.append(pos)
                continue

            if remove_isolated_walls:
                solid_or_open = sum(
                    1
                    for neighbor in pos.cardinal_neighbors()
                    if self.kind_at(neighbor) in (TileKind.FLOOR, TileKind.WALL)
                )
                if solid_or_open >= 2:
                    continue
                if north or east or south or west:
                    to_floor.append(pos)
                elif not self.open_neighbor_mask(pos):
                    to_unset.append(pos)

        for pos in to_floor:
            self.set_kind(pos, TileKind.FLOOR)
        for pos in to_unset:
            self.set_kind(pos, TileKind.UNSET)
        changed = len(to_floor) + len(to_unset)
        if changed:
            self.infer_walls()
        return changed
