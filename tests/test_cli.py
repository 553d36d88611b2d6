import math
import sys

import pytest

import benchmark_generation
import main
from dungeon_config import DungeonConfig


def test_main_prints_level_and_stats(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["main.py", "--seed", "5", "--plain-walls"])

    main.main()

    out = capsys.readouterr().out
    assert "Seed 5" in out
    assert "Dungeon generation stats:" in out
    assert "#" in out and "." in out


def test_main_exits_on_empty_level(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--map-size", "4", "--min-room-size", "10", "--seed", "1"])

    with pytest.raises(SystemExit):
        main.main()


def test_main_rejects_invalid_configuration(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--split-percentage", "0.9"])

    with pytest.raises(SystemExit):
        main.main()


@pytest.mark.parametrize(
    "pct,expected",
    [
        (0, 1.0),
        (50, 2.5),
        (100, 4.0),
    ],
)
def test_percentile_interpolates(pct, expected):
    assert benchmark_generation.percentile([4.0, 1.0, 3.0, 2.0], pct) == pytest.approx(expected)


def test_percentile_of_nothing_is_nan():
    assert math.isnan(benchmark_generation.percentile([], 50))


def test_benchmark_runs_are_reproducible():
    config = DungeonConfig()

    first = benchmark_generation.run_benchmark(config, num_runs=3, seed=10, depth=1)
    second = benchmark_generation.run_benchmark(config, num_runs=3, seed=10, depth=1)

    assert [r.seed for r in first] == [r.seed for r in second]
    assert [r.room_count for r in first] == [r.room_count for r in second]
    for result in first:
        assert result.room_group_count == 1
        assert result.room_graph_cycles == 0
        assert 0.0 < result.map_utilization < 1.0


def test_benchmark_rejects_non_positive_depth(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["benchmark_generation.py", "--runs", "1", "--depth", "0"])

    with pytest.raises(SystemExit, match="at least 1"):
        benchmark_generation.main()
