import random
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from dungeon_config import DecorationConfig, DungeonConfig
from dungeon_generator import DungeonGenerator, GenerationResult
from dungeon_models import Room
from tile_grid import TileGrid

SCENARIO_SEED = 1234


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def dungeon_config() -> DungeonConfig:
    return DungeonConfig(map_size=48, max_depth=4, random_seed=SCENARIO_SEED)


@pytest.fixture
def generated(dungeon_config: DungeonConfig) -> GenerationResult:
    return DungeonGenerator(dungeon_config).generate(progression_depth=1)


@pytest.fixture
def make_result() -> Callable[..., GenerationResult]:
    def _make_result(
        *,
        seed: int = SCENARIO_SEED,
        depth: int = 1,
        decoration: Optional[DecorationConfig] = None,
        **overrides,
    ) -> GenerationResult:
        config = DungeonConfig(
            decoration=decoration if decoration is not None else DecorationConfig(),
            **overrides,
        )
        return DungeonGenerator(config).generate(progression_depth=depth, seed=seed)

    return _make_result


@pytest.fixture
def floor_grid() -> Callable[..., TileGrid]:
    """Builds a small grid with the given rooms and corridor cells already floored."""

    def _floor_grid(rooms: list[Room], corridor_tiles=(), map_size: int = 20) -> TileGrid:
        grid = TileGrid.for_map(map_size, padding=2)
        grid.fill_floor(rooms, corridor_tiles)
        return grid

    return _floor_grid
