import logging
import random
from itertools import combinations

import networkx as nx
import pytest

from connectivity import build_floor_graph, room_components, rooms_connected
from dungeon_config import DecorationConfig, DungeonConfig
from dungeon_generator import DungeonGenerator, GenerationStage, generate_level
from dungeon_models import TileKind
from partition_tree import PartitionTree

SEEDS = [0, 1, 7, 77, 1234, 98765]
LAYOUTS = [
    {},
    {"map_size": 80, "max_depth": 6},
    {"map_size": 64, "max_depth": 8, "room_margin": 1},
]


def _assert_wall_invariants(grid) -> None:
    for pos in grid.window.tiles():
        kind = grid.kind_at(pos)
        if kind is TileKind.WALL:
            assert any(grid.kind_at(n) is TileKind.FLOOR for n in pos.neighbors()), f"wall {pos} touches no floor"
        elif kind is TileKind.UNSET:
            assert not any(grid.is_passable(n) for n in pos.neighbors()), f"unset {pos} touches floor"


def test_default_scenario_produces_a_usable_level(generated, dungeon_config):
    stats = generated.stats

    assert generated.seed == dungeon_config.random_seed
    assert stats.room_count >= 1
    assert stats.room_count == len(generated.rooms)
    assert 0.0 < stats.map_utilization < 1.0
    assert stats.corridor_count == stats.room_count - 1
    assert stats.floor_count > 0 and stats.wall_count > 0


@pytest.mark.parametrize("seed", SEEDS)
def test_rooms_never_overlap(make_result, seed):
    result = make_result(seed=seed)

    for first, second in combinations(result.rooms, 2):
        assert not first.intersects(second)


@pytest.mark.parametrize("seed", SEEDS)
def test_every_room_is_reachable(make_result, seed):
    result = make_result(seed=seed)

    assert rooms_connected(result.grid, result.rooms)
    assert len(room_components(result.grid, result.rooms)) == 1


@pytest.mark.parametrize("layout", LAYOUTS)
@pytest.mark.parametrize("seed", SEEDS)
def test_wall_and_unset_invariants_hold(make_result, seed, layout):
    result = make_result(seed=seed, depth=3, **layout)

    _assert_wall_invariants(result.grid)


@pytest.mark.parametrize("layout", LAYOUTS)
@pytest.mark.parametrize("seed", SEEDS)
def test_all_open_tiles_form_one_region(make_result, seed, layout):
    result = make_result(seed=seed, depth=3, **layout)

    assert nx.number_connected_components(build_floor_graph(result.grid)) == 1


@pytest.mark.parametrize("seed", SEEDS)
def test_rooms_keep_their_margin_inside_the_leaf(make_result, seed):
    result = make_result(seed=seed)
    config = DungeonConfig()
    # Partitioning is the first consumer of the seeded source, so it can be replayed.
    tree = PartitionTree(config, random.Random(seed))
    tree.build()

    for room in result.rooms:
        leaf = tree.node(room.leaf_index)
        assert leaf.is_leaf
        assert leaf.rect.inset(config.room_margin).contains_rect(room.bounds)
        assert room.width >= config.min_room_size
        assert room.height >= config.min_room_size


@pytest.mark.parametrize("cap", [0, 1, 3])
def test_door_cap_is_respected(make_result, cap):
    result = make_result(seed=1234, max_doors_per_room=cap)

    for room in result.rooms:
        on_boundary = {
            pos
            for pos, _ in room.boundary_cells()
            if result.grid.kind_at(pos) is TileKind.DOOR
        }
        assert len(on_boundary) <= cap
        assert len(result.doors[room.index]) <= cap


def test_degenerate_config_returns_empty_result(make_result, caplog):
    with caplog.at_level(logging.WARNING):
        result = make_result(map_size=4, min_room_size=10)

    assert result.is_empty
    assert result.rooms == []
    assert result.corridors == []
    assert result.stats.room_count == 0
    assert result.stats.map_utilization == 0.0
    assert result.grid.count(TileKind.FLOOR) == 0
    assert any("produced no rooms" in record.getMessage() for record in caplog.records)


def test_random_floor_cell_samples_room_floor(generated):
    room = max(generated.rooms, key=lambda r: r.area)
    rng = random.Random(42)

    for _ in range(1000):
        pos = generated.random_floor_cell(room, rng)
        assert room.contains(pos)
        assert generated.grid.kind_at(pos) is TileKind.FLOOR


def test_random_floor_cell_defaults_to_a_seeded_stream(make_result):
    first = make_result(seed=77)
    second = make_result(seed=77)
    room = max(first.rooms, key=lambda r: r.area)

    picks = [first.random_floor_cell(room) for _ in range(20)]

    assert picks == [second.random_floor_cell(room) for _ in range(20)]
    assert all(first.grid.kind_at(pos) is TileKind.FLOOR for pos in picks)


def test_same_seed_gives_identical_levels(make_result):
    first = make_result(seed=555, depth=3)
    second = make_result(seed=555, depth=3)

    assert first.rooms == second.rooms
    assert first.grid == second.grid
    assert first.grid.to_rows() == second.grid.to_rows()
    assert first.decorations == second.decorations
    assert first.doors == second.doors


def test_different_seeds_differ(make_result):
    assert make_result(seed=1).grid.to_rows() != make_result(seed=2).grid.to_rows()


def test_explicit_seed_overrides_config_seed(dungeon_config):
    result = DungeonGenerator(dungeon_config).generate(seed=31)

    assert result.seed == 31


def test_missing_seed_is_drawn_and_reported(monkeypatch):
    monkeypatch.setattr("dungeon_generator.random.randint", lambda a, b: 4242)

    result = DungeonGenerator(DungeonConfig()).generate()

    assert result.seed == 4242


def test_progression_depth_must_be_positive(dungeon_config):
    with pytest.raises(ValueError):
        DungeonGenerator(dungeon_config).generate(progression_depth=0)


def test_deep_levels_turn_every_room_into_a_treasure_room(make_result):
    result = make_result(depth=100)

    assert result.stats.treasure_room_count == result.stats.room_count
    kinds = {d.kind.value for d in result.decorations if d.kind.is_treasure}
    assert kinds <= {"chest"}


def test_disabled_decorations_leave_no_decorations(make_result):
    result = make_result(decoration=DecorationConfig.disabled())

    assert result.decorations == []
    assert result.stats.decoration_count == 0


def test_decorations_sit_on_valid_tiles(make_result):
    result = make_result(seed=7, depth=5)

    for decoration in result.decorations:
        kind = result.grid.kind_at(decoration.pos)
        if decoration.kind.value == "torch":
            assert kind is TileKind.WALL
        elif decoration.kind.value != "pillar":
            assert kind is TileKind.FLOOR


def test_stage_timings_are_recorded(generated):
    assert list(generated.stats.stage_times) == [
        stage.label for stage in GenerationStage if stage is not GenerationStage.STATS
    ]
    assert all(value >= 0.0 for value in generated.stats.stage_times.values())
    assert generated.stats.generation_time > 0.0


def test_metrics_can_be_switched_off(make_result):
    result = make_result(collect_metrics=False)

    assert result.stats.stage_times == {}


def test_stages_cannot_run_out_of_order(dungeon_config):
    generator = DungeonGenerator(dungeon_config)

    with pytest.raises(RuntimeError):
        generator._run_stage(GenerationStage.CARVE, lambda: None)

    assert generator._run_stage(GenerationStage.PARTITION, lambda: 5) == 5
    with pytest.raises(RuntimeError):
        generator._run_stage(GenerationStage.PARTITION, lambda: None)


def test_connectivity_check_stays_quiet_on_good_levels(caplog):
    config = DungeonConfig(random_seed=1234, verify_connectivity=True)

    with caplog.at_level(logging.WARNING):
        DungeonGenerator(config).generate()

    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]


def test_generate_level_returns_consumer_outputs():
    rooms, grid, stats = generate_level(DungeonConfig(), seed=1234)

    assert len(rooms) == stats.room_count
    assert grid.count(TileKind.FLOOR) == stats.floor_count
