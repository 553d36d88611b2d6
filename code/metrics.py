"""Instrumentation and summary statistics for a generation run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence

from dungeon_models import Corridor, Decoration, DecorationKind, Room, TileKind
from tile_grid import TileGrid


@dataclass
class StageMetrics:
    """Aggregated timing for a single pipeline stage."""

    name: str
    invocations: int = 0
    total_time: float = 0.0

    def record(self, duration: float) -> None:
        self.invocations += 1
        self.total_time += duration


@dataclass
class GenerationMetrics:
    """Container for stage metrics recorded during a generation run."""

    stages: Dict[str, StageMetrics] = field(default_factory=dict)

    def record_stage_run(self, name: str, duration: float) -> None:
        metrics = self.stages.get(name)
        if metrics is None:
            metrics = StageMetrics(name=name)
            self.stages[name] = metrics
        metrics.record(duration)

    def stage_times(self) -> Dict[str, float]:
        return {name: metrics.total_time for name, metrics in self.stages.items()}


@dataclass(frozen=True)
class GenerationStats:
    """Read-only aggregate over the artifacts of one generation call."""

    room_count: int
    total_room_area: int
    average_room_area: float
    min_room_area: int
    max_room_area: int
    corridor_count: int
    corridor_segment_count: int
    floor_count: int
    wall_count: int
    door_count: int
    decoration_count: int
    decoration_counts: Mapping[str, int]
    treasure_room_count: int
    max_partition_depth: int
    generation_time: float
    stage_times: Mapping[str, float]
    map_utilization: float

    @property
    def is_empty(self) -> bool:
        """A zero-room run is unusable; callers should regenerate with another seed."""
        return self.room_count == 0

    def summary(self) -> str:
        lines = [
            "Dungeon generation stats:",
            f"- Generation time: {self.generation_time:.3f}s",
            f"- Rooms: {self.room_count}",
            f"- Total room area: {self.total_room_area}",
            f"- Average room area: {self.average_room_area:.1f}",
            f"- Corridors: {self.corridor_count} ({self.corridor_segment_count} segments)",
            f"- Tiles: {self.floor_count} floor, {self.wall_count} wall, {self.door_count} door",
            f"- Decorations: {self.decoration_count}",
            f"- Treasure rooms: {self.treasure_room_count}",
            f"- Max partition depth: {self.max_partition_depth}",
            f"- Max room area: {self.max_room_area}",
            f"- Min room area: {self.min_room_area}",
            f"- Map utilization: {self.map_utilization:.1%}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, object]:
        return {
            "room_count": self.room_count,
            "total_room_area": self.total_room_area,
            "average_room_area": self.average_room_area,
            "min_room_area": self.min_room_area,
            "max_room_area": self.max_room_area,
            "corridor_count": self.corridor_count,
            "corridor_segment_count": self.corridor_segment_count,
            "floor_count": self.floor_count,
            "wall_count": self.wall_count,
            "door_count": self.door_count,
            "decoration_count": self.decoration_count,
            "decoration_counts": dict(self.decoration_counts),
            "treasure_room_count": self.treasure_room_count,
            "max_partition_depth": self.max_partition_depth,
            "generation_time": self.generation_time,
            "stage_times": dict(self.stage_times),
            "map_utilization": self.map_utilization,
        }


def compute_stats(
    *,
    rooms: Sequence[Room],
    corridors: Sequence[Corridor],
    grid: TileGrid,
    decorations: Sequence[Decoration],
    map_area: int,
    max_partition_depth: int,
    treasure_room_count: int = 0,
    generation_time: float = 0.0,
    stage_times: Mapping[str, float] | None = None,
) -> GenerationStats:
    areas = [room.area for room in rooms]
    total_area = sum(areas)
    kind_counts: Counter[str] = Counter(decoration.kind.value for decoration in decorations)
    return GenerationStats(
        room_count=len(rooms),
        total_room_area=total_area,
        average_room_area=total_area / len(areas) if areas else 0.0,
        min_room_area=min(areas) if areas else 0,
        max_room_area=max(areas) if areas else 0,
        corridor_count=len(corridors),
        corridor_segment_count=sum(len(corridor.segments) for corridor in corridors),
        floor_count=grid.count(TileKind.FLOOR),
        wall_count=grid.count(TileKind.WALL),
        door_count=grid.count(TileKind.DOOR),
        decoration_count=len(decorations),
        decoration_counts={kind.value: kind_counts.get(kind.value, 0) for kind in DecorationKind},
        treasure_room_count=treasure_room_count,
        max_partition_depth=max_partition_depth,
        generation_time=generation_time,
        stage_times=dict(stage_times or {}),
        map_utilization=total_area / map_area if map_area > 0 else 0.0,
    )
