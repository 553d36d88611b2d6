import pytest

from dungeon_geometry import TilePos
from dungeon_models import TileKind
from grid_renderer import WALL_GLYPHS, draw_to_grid
from tile_grid import TileGrid
from wall_variants import (
    E,
    N,
    NE,
    NW,
    S,
    SE,
    SW,
    W,
    WallVariant,
    collapsed_wall_variant,
    default_wall_variant,
    faces_north,
)


@pytest.mark.parametrize(
    "mask,expected",
    [
        (S, WallVariant.NORTH),
        (S | N | E, WallVariant.NORTH),
        (N, WallVariant.SOUTH),
        (N | W, WallVariant.SOUTH_OPEN_WEST),
        (N | E, WallVariant.SOUTH_OPEN_EAST),
        (E, WallVariant.WEST),
        (E | W, WallVariant.WEST),
        (W, WallVariant.EAST),
        (NE, WallVariant.CORNER_SOUTH_WEST),
        (NW, WallVariant.CORNER_SOUTH_EAST),
        (SE, WallVariant.CORNER_NORTH_WEST),
        (SW, WallVariant.CORNER_NORTH_EAST),
        (0, WallVariant.SOLID),
    ],
)
def test_default_wall_variant_priorities(mask, expected):
    assert default_wall_variant(mask) is expected


def test_cardinals_win_over_diagonals():
    assert default_wall_variant(E | NE | SE) is WallVariant.WEST


def test_faces_north_checks_floor_below():
    assert faces_north(S | W)
    assert not faces_north(N | SE | SW)


def test_collapsed_lookup_ignores_mask():
    assert {collapsed_wall_variant(mask) for mask in range(256)} == {WallVariant.SOLID}


def test_renderer_uses_pluggable_lookup():
    grid = TileGrid.for_map(5, padding=1)
    grid.set_kind(TilePos(2, 2), TileKind.FLOOR)
    grid.infer_walls()

    fancy = draw_to_grid(grid)
    plain = draw_to_grid(grid, wall_lookup=collapsed_wall_variant)

    # Window starts at -1, so (2, 1) sits at row 2, column 3.
    assert fancy[2][3] == WALL_GLYPHS[WallVariant.NORTH]
    assert fancy[3][3] == "."
    assert plain[2][3] == "#"
    assert sum(row.count("#") for row in plain) == 8
