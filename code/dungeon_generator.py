"""DungeonGenerator runs the linear BSP generation pipeline."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import IntEnum
from time import perf_counter
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from connectivity import room_components
from corridor_connector import CorridorConnector, corridor_cells
from decoration_placer import DecorationPlacer
from dungeon_config import DungeonConfig
from dungeon_geometry import TilePos
from dungeon_models import Corridor, Decoration, Room
from metrics import GenerationMetrics, GenerationStats, compute_stats
from partition_tree import PartitionTree
from room_carver import RoomCarver
from tile_grid import TileGrid

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationStage(IntEnum):
    PARTITION = 0
    CARVE = 1
    CONNECT = 2
    RENDER_FLOOR = 3
    RENDER_WALLS_AND_DOORS = 4
    OPTIMIZE = 5
    DECORATE = 6
    STATS = 7

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class GenerationResult:
    """Everything one generation call hands to the rest of the game.

    Treat it as read-only; the next regeneration replaces it wholesale.
    """

    seed: int
    progression_depth: int
    rooms: List[Room]
    corridors: List[Corridor]
    grid: TileGrid
    decorations: List[Decoration]
    stats: GenerationStats
    doors: Dict[int, List[TilePos]] = field(default_factory=dict)
    # Default stream for spawn sampling, seeded from the level seed.
    spawn_rng: random.Random = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.spawn_rng = random.Random(self.seed)

    @property
    def is_empty(self) -> bool:
        return not self.rooms

    def random_floor_cell(self, room: Room, rng: Optional[random.Random] = None) -> TilePos:
        """Sample a Floor cell of ``room``, from the result's seeded stream unless ``rng`` is given."""
        return self.grid.random_floor_cell(room, rng if rng is not None else self.spawn_rng)


class DungeonGenerator:
    """Manages the overall process of generating a dungeon floor.

    Every ``generate`` call builds its own ``random.Random`` and its own tree
    and grid, so separate calls never share state. A single call is not
    re-entrant.
    """

    def __init__(self, config: DungeonConfig) -> None:
        self.config = config
        self.metrics: Optional[GenerationMetrics] = None
        self._next_stage = GenerationStage.PARTITION

    def _resolve_seed(self, seed: Optional[int]) -> int:
        if seed is not None:
            return seed
        if self.config.random_seed is not None:
            return self.config.random_seed
        # Pick a seed and log it, so a bad level can be reproduced later.
        seed = random.randint(0, 1_000_000)
        logger.info("Using random seed %d", seed)
        return seed

    def _run_stage(self, stage: GenerationStage, func: Callable[..., T], *args, **kwargs) -> T:
        if stage != self._next_stage:
            raise RuntimeError(
                f"Stage {stage.label} cannot run before {self._next_stage.label}"
            )
        start = perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration = perf_counter() - start
            if self.metrics is not None:
                self.metrics.record_stage_run(stage.label, duration)
            logger.debug("Stage %s took %.2fms", stage.label, duration * 1000)
            self._next_stage = GenerationStage(min(stage + 1, GenerationStage.STATS))

    def generate(self, progression_depth: int = 1, seed: Optional[int] = None) -> GenerationResult:
        """Generate one level.

        A pathological configuration can legitimately produce zero rooms;
        that comes back as an empty result (``result.is_empty``) rather than
        an exception, and the caller decides whether to retry with a new seed.
        """
        if progression_depth < 1:
            raise ValueError("progression_depth must be at least 1")

        config = self.config
        seed = self._resolve_seed(seed)
        rng = random.Random(seed)
        self.metrics = GenerationMetrics() if config.collect_metrics else None
        self._next_stage = GenerationStage.PARTITION
        start = perf_counter()

        tree = PartitionTree(config, rng)
        self._run_stage(GenerationStage.PARTITION, tree.build)

        carver = RoomCarver(config, rng)
        rooms = self._run_stage(GenerationStage.CARVE, carver.carve_rooms, tree)

        connector = CorridorConnector(rng)
        corridors = self._run_stage(GenerationStage.CONNECT, connector.connect, tree)

        grid = TileGrid.for_map(config.map_size, config.grid_padding)
        self._run_stage(
            GenerationStage.RENDER_FLOOR, grid.fill_floor, rooms, corridor_cells(corridors)
        )
        doors = self._run_stage(
            GenerationStage.RENDER_WALLS_AND_DOORS, self._render_walls_and_doors, grid, rooms
        )
        self._run_stage(
            GenerationStage.OPTIMIZE,
            grid.optimize,
            fill_thin_walls=config.fill_thin_walls,
            smooth_outer_corners=config.smooth_outer_corners,
            remove_isolated_walls=config.remove_isolated_walls,
        )

        placer = DecorationPlacer(config.decoration, rng)
        decorations = self._run_stage(
            GenerationStage.DECORATE, placer.decorate, rooms, grid, progression_depth
        )

        stage_times = self.metrics.stage_times() if self.metrics is not None else {}
        stats = self._run_stage(
            GenerationStage.STATS,
            compute_stats,
            rooms=rooms,
            corridors=corridors,
            grid=grid,
            decorations=decorations,
            map_area=config.map_area,
            max_partition_depth=tree.max_depth_reached(),
            treasure_room_count=len(placer.treasure_rooms),
            generation_time=perf_counter() - start,
            stage_times=stage_times,
        )

        result = GenerationResult(
            seed=seed,
            progression_depth=progression_depth,
            rooms=rooms,
            corridors=corridors,
            grid=grid,
            decorations=decorations,
            stats=stats,
            doors=doors,
        )
        self._report(result)
        return result

    def _render_walls_and_doors(
        self, grid: TileGrid, rooms: List[Room]
    ) -> Dict[int, List[TilePos]]:
        grid.infer_walls()
        return grid.infer_doors(rooms, self.config.max_doors_per_room)

    def _report(self, result: GenerationResult) -> None:
        if result.is_empty:
            logger.warning(
                "Seed %d produced no rooms (map_size=%d, min_room_size=%d); regenerate with other parameters",
                result.seed,
                self.config.map_size,
                self.config.min_room_size,
            )
            return

        logger.info(
            "Generated %d rooms and %d corridors in %.1fms (seed %d, utilization %.1f%%)",
            result.stats.room_count,
            result.stats.corridor_count,
            result.stats.generation_time * 1000,
            result.seed,
            result.stats.map_utilization * 100,
        )
        if self.config.verify_connectivity:
            components = room_components(result.grid, result.rooms)
            if len(components) > 1:
                logger.warning(
                    "Seed %d produced %d disconnected room groups: %s",
                    result.seed,
                    len(components),
                    components,
                )


def generate_level(
    config: Optional[DungeonConfig] = None,
    progression_depth: int = 1,
    seed: Optional[int] = None,
) -> Tuple[List[Room], TileGrid, GenerationStats]:
    """Convenience wrapper returning the three consumer-facing outputs."""
    result = DungeonGenerator(config or DungeonConfig()).generate(progression_depth, seed)
    return result.rooms, result.grid, result.stats
