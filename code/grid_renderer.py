"""Render a generated level to an ASCII grid."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from dungeon_geometry import Rect, TilePos
from dungeon_models import Decoration, DecorationKind, TileKind
from tile_grid import TileGrid
from wall_variants import WallVariant, WallVariantLookup, default_wall_variant

WALL_GLYPHS: Dict[WallVariant, str] = {
    WallVariant.NORTH: "▀",
    WallVariant.SOUTH: "▄",
    WallVariant.SOUTH_OPEN_WEST: "▄",
    WallVariant.SOUTH_OPEN_EAST: "▄",
    WallVariant.WEST: "▌",
    WallVariant.EAST: "▐",
    WallVariant.CORNER_NORTH_WEST: "┌",
    WallVariant.CORNER_NORTH_EAST: "┐",
    WallVariant.CORNER_SOUTH_WEST: "└",
    WallVariant.CORNER_SOUTH_EAST: "┘",
    WallVariant.SOLID: "#",
}

DECORATION_GLYPHS: Dict[DecorationKind, str] = {
    DecorationKind.TORCH: "*",
    DecorationKind.CHEST: "$",
    DecorationKind.POTION: "!",
    DecorationKind.BLOOD: ",",
    DecorationKind.CRACK: ",",
    DecorationKind.SKULL: ",",
    DecorationKind.BONES: ",",
}


def draw_to_grid(
    grid: TileGrid,
    decorations: Iterable[Decoration] = (),
    *,
    wall_lookup: WallVariantLookup = default_wall_variant,
    window: Optional[Rect] = None,
) -> List[List[str]]:
    """Draws tiles, then decorations on top, into a row-major character grid."""
    area = window if window is not None else grid.window
    rows: List[List[str]] = []
    for y in range(area.y, area.max_y):
        row: List[str] = []
        for x in range(area.x, area.max_x):
            pos = TilePos(x, y)
            kind = grid.kind_at(pos)
            if kind is TileKind.WALL:
                row.append(WALL_GLYPHS.get(wall_lookup(grid.wall_mask(pos)), "#"))
            elif kind is TileKind.FLOOR:
                row.append(".")
            elif kind is TileKind.DOOR:
                row.append("+")
            else:
                row.append(" ")
        rows.append(row)

    for decoration in decorations:
        glyph = DECORATION_GLYPHS.get(decoration.kind)
        # Pillars are already drawn as walls.
        if glyph is None or not area.contains(decoration.pos):
            continue
        rows[decoration.pos.y - area.y][decoration.pos.x - area.x] = glyph
    return rows


def print_grid(rows: List[List[str]], horizontal_sep: str = "") -> None:
    """Prints the ASCII grid to the console."""
    for row in rows:
        print(horizontal_sep.join(row))
