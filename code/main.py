#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging

from dungeon_config import DecorationConfig, DungeonConfig
from dungeon_generator import DungeonGenerator
from grid_renderer import draw_to_grid, print_grid
from wall_variants import collapsed_wall_variant, default_wall_variant


def build_parser() -> argparse.ArgumentParser:
    defaults = DungeonConfig()
    parser = argparse.ArgumentParser(description="Generate a BSP dungeon floor and print it.")
    parser.add_argument("--map-size", type=int, default=defaults.map_size)
    parser.add_argument("--max-depth", type=int, default=defaults.max_depth)
    parser.add_argument("--split-percentage", type=float, default=defaults.split_percentage)
    parser.add_argument("--min-room-size", type=int, default=defaults.min_room_size)
    parser.add_argument("--room-margin", type=int, default=defaults.room_margin)
    parser.add_argument("--max-doors", type=int, default=defaults.max_doors_per_room)
    parser.add_argument(
        "--depth",
        type=int,
        default=1,
        help="Progression depth of the level; deeper levels roll more treasure rooms",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--no-decorations", action="store_true")
    parser.add_argument(
        "--plain-walls",
        action="store_true",
        help="Draw every wall with the same glyph instead of per-orientation variants",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = DungeonConfig(
            map_size=args.map_size,
            max_depth=args.max_depth,
            split_percentage=args.split_percentage,
            min_room_size=args.min_room_size,
            room_margin=args.room_margin,
            max_doors_per_room=args.max_doors,
            decoration=DecorationConfig.disabled() if args.no_decorations else DecorationConfig(),
            random_seed=args.seed,
            verify_connectivity=True,
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    if args.depth < 1:
        raise SystemExit("Progression depth must be at least 1")

    result = DungeonGenerator(config).generate(progression_depth=args.depth)
    if result.is_empty:
        raise SystemExit(f"No rooms generated with seed {result.seed}; try another seed.")

    wall_lookup = collapsed_wall_variant if args.plain_walls else default_wall_variant
    rows = draw_to_grid(result.grid, result.decorations, wall_lookup=wall_lookup)
    print_grid(rows)
    print(f"Seed {result.seed}")
    print(result.stats.summary())


if __name__ == "__main__":
    main()
