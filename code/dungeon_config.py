"""Configuration containers for the BSP dungeon generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

import dungeon_constants as constants


def _check_probability(name: str, value: float) -> float:
    value = float(value)
    if not (0.0 <= value <= 1.0):
        raise ValueError(f"DecorationConfig {name} must lie within [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class DecorationConfig:
    """Tunables for pillar, treasure, cosmetic and torch placement."""

    # Rooms need area > pillar_min_area and both sides > pillar_min_dimension for pillars.
    pillar_min_area: int = constants.PILLAR_MIN_AREA
    pillar_min_dimension: int = constants.PILLAR_MIN_DIMENSION
    pillar_count_range: Tuple[int, int] = constants.PILLAR_COUNT_RANGE
    treasure_chance: float = constants.TREASURE_CHANCE
    # Chance for an all-chest room grows by this much per progression depth level.
    treasure_room_chance_per_depth: float = constants.TREASURE_ROOM_CHANCE_PER_DEPTH
    treasure_room_chance: float = constants.TREASURE_ROOM_CHANCE
    chest_ratio: float = constants.CHEST_RATIO
    cosmetic_chance: float = constants.COSMETIC_CHANCE
    torch_chance: float = constants.TORCH_CHANCE

    def __post_init__(self) -> None:
        if self.pillar_min_area < 0:
            raise ValueError("DecorationConfig pillar_min_area cannot be negative")
        # Pillars sit at interior offsets [1, dim - 3], so rooms must be wider than 3.
        if self.pillar_min_dimension < 3:
            raise ValueError("DecorationConfig pillar_min_dimension must be at least 3")

        low, high = (int(v) for v in self.pillar_count_range)
        if low < 0:
            raise ValueError("DecorationConfig pillar_count_range cannot be negative")
        if high < low:
            raise ValueError("DecorationConfig pillar_count_range must be (min, max) with max >= min")
        object.__setattr__(self, "pillar_count_range", (low, high))

        for name in (
            "treasure_chance",
            "treasure_room_chance_per_depth",
            "treasure_room_chance",
            "chest_ratio",
            "cosmetic_chance",
            "torch_chance",
        ):
            object.__setattr__(self, name, _check_probability(name, getattr(self, name)))

    def treasure_room_probability(self, depth: int) -> float:
        """Chance that a room on progression ``depth`` becomes an all-chest room."""
        return min(1.0, max(0, depth) * self.treasure_room_chance_per_depth)

    @classmethod
    def disabled(cls) -> "DecorationConfig":
        """No pillars, treasure, cosmetics or torches."""
        return cls(
            pillar_count_range=(0, 0),
            treasure_chance=0.0,
            treasure_room_chance_per_depth=0.0,
            treasure_room_chance=0.0,
            cosmetic_chance=0.0,
            torch_chance=0.0,
        )


@dataclass
class DungeonConfig:
    """Aggregates all tunable parameters for dungeon generation."""

    map_size: int = constants.MAP_SIZE
    max_depth: int = constants.MAX_DEPTH
    split_percentage: float = constants.SPLIT_PERCENTAGE
    # Nodes with either side below this refuse to split.
    min_split_size: int = constants.MIN_SPLIT_SIZE
    min_room_size: int = constants.MIN_ROOM_SIZE
    # Minimum empty tiles between a room and its leaf's boundary.
    room_margin: int = constants.ROOM_MARGIN
    corridor_width: int = constants.CORRIDOR_WIDTH
    max_doors_per_room: int = constants.MAX_DOORS_PER_ROOM
    grid_padding: int = constants.GRID_PADDING

    # Cleanup passes run after wall and door inference.
    fill_thin_walls: bool = True
    smooth_outer_corners: bool = True
    remove_isolated_walls: bool = True

    decoration: DecorationConfig = field(default_factory=DecorationConfig)
    random_seed: Optional[int] = constants.RANDOM_SEED
    collect_metrics: bool = True
    # Run a networkx flood fill after generation and log a warning on disconnected rooms.
    verify_connectivity: bool = False

    def __post_init__(self) -> None:
        if self.map_size <= 0:
            raise ValueError("DungeonConfig map_size must be positive")
        if self.max_depth <= 0:
            raise ValueError("DungeonConfig max_depth must be positive")
        if not (0.0 <= self.split_percentage < 0.5):
            raise ValueError("DungeonConfig split_percentage must lie within [0, 0.5)")
        if self.min_split_size <= 1:
            raise ValueError("DungeonConfig min_split_size must be at least 2")
        if self.min_room_size <= 0:
            raise ValueError("DungeonConfig min_room_size must be positive")
        if self.room_margin <= 0:
            raise ValueError("DungeonConfig room_margin must be positive")
        if self.corridor_width != 1:
            raise ValueError("DungeonConfig corridor_width is fixed at 1")
        if self.max_doors_per_room < 0:
            raise ValueError("DungeonConfig max_doors_per_room cannot be negative")
        if self.grid_padding < 1:
            raise ValueError("DungeonConfig grid_padding must be at least 1")
        if not isinstance(self.decoration, DecorationConfig):
            raise ValueError("DungeonConfig decoration must be a DecorationConfig")

    @property
    def map_area(self) -> int:
        return self.map_size * self.map_size
