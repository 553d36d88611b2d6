#!/usr/bin/env python3

# Runs dungeon generation over many seeds, collecting and reporting metrics.
# Used to track both speed and layout quality (room counts, utilization, connectivity).

from __future__ import annotations

import argparse
import datetime
import json
import math
import os
import random
import statistics
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from connectivity import (
    build_room_graph,
    room_components,
    room_graph_cycle_count,
    room_graph_diameter,
)
from dungeon_config import DungeonConfig
from dungeon_generator import DungeonGenerator

PERCENTILES = [1.0, 5.0] + [float(value) for value in range(10, 100, 10)] + [99.0]

DEFAULT_MIN_ROOMS = 4
DEFAULT_UTILIZATION_THRESHOLD = 0.2


@dataclass
class GenerationRunResult:
    seed: int
    duration: float
    room_count: int
    corridor_count: int
    door_count: int
    decoration_count: int
    map_utilization: float
    average_room_area: float
    max_partition_depth: int
    room_group_count: int
    room_graph_diameter: int
    room_graph_cycles: int
    stage_times: Dict[str, float]


def percentile(values: List[float], pct: float) -> float:
    if not values:
        return float("nan")
    ordered = sorted(values)
    if pct <= 0:
        return ordered[0]
    if pct >= 100:
        return ordered[-1]
    rank = (len(ordered) - 1) * (pct / 100.0)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    fraction = rank - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * fraction


def fraction_at_least(values: List[float], threshold: float) -> float:
    if not values:
        return float("nan")
    return sum(1 for value in values if value >= threshold) / len(values)


def json_safe_number(value: float | int | None) -> float | int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def basic_stats(values: List[float]) -> Dict[str, float]:
    return {
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "min": min(values),
        "max": max(values),
        "stdev": statistics.stdev(values) if len(values) > 1 else float("nan"),
    }


def percentile_label(pct: float) -> str:
    return f"p{int(pct)}" if float(pct).is_integer() else f"p{pct:g}"


@dataclass
class MetricDefinition:
    key: str
    name: str
    values: List[float]
    value_formatter: Callable[[float], str] = lambda value: f"{value:.3f}"
    success_threshold: float | None = None

    def fmt(self, value: float) -> str:
        return "nan" if math.isnan(value) else self.value_formatter(value)

    def report(self) -> None:
        print(self.name + ":")
        if not self.values:
            print("  (no data)")
            return
        stats = basic_stats(self.values)
        print(
            "  Count {count}, mean {mean}, median {median}, min {min}, max {max}, stdev {stdev}".format(
                count=len(self.values),
                **{key: self.fmt(value) for key, value in stats.items()},
            )
        )
        parts = [
            f"{percentile_label(pct)}={self.fmt(percentile(self.values, pct))}"
            for pct in PERCENTILES
        ]
        print("  Percentiles: " + ", ".join(parts))
        if self.success_threshold is not None:
            rate = fraction_at_least(self.values, self.success_threshold)
            print(f"  Success rate {rate:.1%} (>= {self.fmt(self.success_threshold)})")

    def to_json(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {"count": len(self.values)}
        if self.values:
            summary.update(
                {key: json_safe_number(value) for key, value in basic_stats(self.values).items()}
            )
        summary["percentiles"] = {
            percentile_label(pct): json_safe_number(percentile(self.values, pct)) if self.values else None
            for pct in PERCENTILES
        }
        if self.success_threshold is not None:
            summary["success_threshold"] = self.success_threshold
            summary["success_rate"] = json_safe_number(
                fraction_at_least(self.values, self.success_threshold)
            )
        return summary


def git_output(args: List[str]) -> str | None:
    try:
        completed = subprocess.run(
            args,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
        return completed.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def run_single_generation(config: DungeonConfig, seed: int, depth: int) -> GenerationRunResult:
    """Run one generation with the provided seed and collect metrics."""
    result = DungeonGenerator(config).generate(progression_depth=depth, seed=seed)
    stats = result.stats
    room_graph = build_room_graph(result.rooms, result.corridors)
    return GenerationRunResult(
        seed=seed,
        duration=stats.generation_time,
        room_count=stats.room_count,
        corridor_count=stats.corridor_count,
        door_count=stats.door_count,
        decoration_count=stats.decoration_count,
        map_utilization=stats.map_utilization,
        average_room_area=stats.average_room_area,
        max_partition_depth=stats.max_partition_depth,
        room_group_count=len(room_components(result.grid, result.rooms)),
        room_graph_diameter=room_graph_diameter(room_graph),
        room_graph_cycles=room_graph_cycle_count(room_graph),
        stage_times=dict(stats.stage_times),
    )


def run_benchmark(config: DungeonConfig, num_runs: int, seed: int | None, depth: int) -> List[GenerationRunResult]:
    """Run the generator multiple times with seeds drawn from one harness RNG."""
    rng = random.Random(seed)
    return [
        run_single_generation(config, rng.randint(0, 1_000_000), depth)
        for _ in range(num_runs)
    ]


def format_seconds(value: float) -> str:
    if value >= 1.0:
        return f"{value:.3f}s"
    return f"{value * 1000:.1f}ms"


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the dungeon generator multiple times and report timing and quality statistics."
    )
    parser.add_argument("-n", "--runs", type=int, default=50, help="Number of generations (default: 50)")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Optional seed for the benchmark harness RNG; keeps run seeds reproducible",
    )
    parser.add_argument("--map-size", type=int, default=DungeonConfig().map_size)
    parser.add_argument("--max-depth", type=int, default=DungeonConfig().max_depth)
    parser.add_argument("--depth", type=int, default=1, help="Progression depth passed to every run")
    parser.add_argument(
        "--min-rooms",
        type=float,
        default=DEFAULT_MIN_ROOMS,
        help="Room count a run needs to count as a success",
    )
    parser.add_argument(
        "--utilization-threshold",
        type=float,
        default=DEFAULT_UTILIZATION_THRESHOLD,
        help="Minimum map utilization to consider coverage acceptable",
    )
    parser.add_argument(
        "--run-description",
        type=str,
        default=None,
        help="Optional description for this benchmark run; defaults to the latest commit message",
    )
    args = parser.parse_args()

    if args.runs <= 0:
        raise SystemExit("Number of runs must be a positive integer")
    if not (0.0 <= args.utilization_threshold <= 1.0):
        raise SystemExit("Utilization threshold must be within [0, 1]")
    if args.depth < 1:
        raise SystemExit("Progression depth must be at least 1")
    try:
        config = DungeonConfig(map_size=args.map_size, max_depth=args.max_depth)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    results = run_benchmark(config, args.runs, args.seed, args.depth)

    for idx, result in enumerate(results, start=1):
        print(
            "Run {idx:02d}: {time} (seed {seed}) | rooms {rooms} | corridors {corridors}"
            " | utilization {util:.1%} | groups {groups} | diameter {diameter}".format(
                idx=idx,
                time=format_seconds(result.duration),
                seed=result.seed,
                rooms=result.room_count,
                corridors=result.corridor_count,
                util=result.map_utilization,
                groups=result.room_group_count,
                diameter=result.room_graph_diameter,
            )
        )

    durations = [result.duration for result in results]
    worst_index = durations.index(max(durations))
    disconnected = [result.seed for result in results if result.room_group_count > 1]
    empty = [result.seed for result in results if result.room_count == 0]
    looped = [result.seed for result in results if result.room_graph_cycles > 0]

    metrics = [
        MetricDefinition("generation_time", "Generation time", durations, lambda v: f"{v:.4f}s"),
        MetricDefinition(
            "rooms",
            "Rooms placed",
            [float(r.room_count) for r in results],
            lambda v: f"{v:.0f}",
            success_threshold=args.min_rooms,
        ),
        MetricDefinition(
            "corridors", "Corridors", [float(r.corridor_count) for r in results], lambda v: f"{v:.0f}"
        ),
        MetricDefinition("doors", "Doors", [float(r.door_count) for r in results], lambda v: f"{v:.0f}"),
        MetricDefinition(
            "utilization",
            "Map utilization",
            [r.map_utilization for r in results],
            lambda v: f"{v:.1%}",
            success_threshold=args.utilization_threshold,
        ),
        MetricDefinition(
            "average_room_area",
            "Average room area",
            [r.average_room_area for r in results],
            lambda v: f"{v:.1f}",
        ),
        MetricDefinition(
            "room_graph_diameter",
            "Room graph diameter",
            [float(r.room_graph_diameter) for r in results],
            lambda v: f"{v:.0f}",
        ),
    ]

    print()
    print(f"Worst-case generation time: {format_seconds(durations[worst_index])} (seed {results[worst_index].seed})")
    print(f"Disconnected runs: {len(disconnected)} {disconnected if disconnected else ''}")
    print(f"Zero-room runs: {len(empty)} {empty if empty else ''}")
    print(f"Runs with corridor loops: {len(looped)} {looped if looped else ''}")
    aggregated: Dict[str, Any] = {}
    for metric in metrics:
        print()
        metric.report()
        aggregated[metric.key] = metric.to_json()

    stage_names = sorted({name for result in results for name in result.stage_times})
    if stage_names:
        print()
        print("Stage timing summary:")
        for name in stage_names:
            times = [result.stage_times.get(name, 0.0) for result in results]
            print(f"  {name}: total={format_seconds(sum(times))}, avg={format_seconds(statistics.mean(times))}")

    commit_message = git_output(["git", "log", "-1", "--pretty=%B"])
    run_description = (
        args.run_description.strip()
        if args.run_description
        else (commit_message or "Latest commit message unavailable.")
    )
    timestamp = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
    script_dir = os.path.dirname(os.path.abspath(__file__))
    benchmarks_dir = os.path.abspath(os.path.join(script_dir, "..", "benchmarks"))
    os.makedirs(benchmarks_dir, exist_ok=True)
    output_path = os.path.join(benchmarks_dir, f"benchmark-{timestamp.strftime('%Y%m%dT%H%M%SZ')}.json")

    benchmark_data = {
        "benchmark_run_info": {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "git_commit_hash": git_output(["git", "rev-parse", "HEAD"]),
            "run_description": run_description,
            "num_iterations": args.runs,
            "parameters": {
                "seed": args.seed,
                "map_size": args.map_size,
                "max_depth": args.max_depth,
                "depth": args.depth,
                "min_rooms": args.min_rooms,
                "utilization_threshold": args.utilization_threshold,
            },
        },
        "aggregated_results": aggregated,
        "worst_case_run": {"seed": results[worst_index].seed, "duration_seconds": durations[worst_index]},
        "disconnected_seeds": disconnected,
        "zero_room_seeds": empty,
    }
    with open(output_path, "w", encoding="utf-8") as handle:
        json.dump(benchmark_data, handle, indent=2, sort_keys=True)
        handle.write("\n")
    print(f"\nSaved benchmark results to {os.path.relpath(output_path)}")


if __name__ == "__main__":
    main()
