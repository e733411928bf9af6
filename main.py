"""Entry point for the sled racer."""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace
from pathlib import Path

from sled_racer import GameConfig, SledGame


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Steer a sled down an endless mountain track.")
    parser.add_argument(
        "--seed",
        type=int,
        help="Optional random seed for obstacle placement and scenery.",
    )
    parser.add_argument(
        "--width",
        type=int,
        help="Canvas width in pixels (default: config value).",
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Canvas height in pixels (default: config value).",
    )
    parser.add_argument(
        "--leaderboard",
        type=Path,
        help="Path of the leaderboard JSON file (default: ~/.sled_racer/leaderboard.json).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.seed is not None:
        random.seed(args.seed)
    else:
        random.seed()

    config = GameConfig()

    width, height = config.canvas_size
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height
    if (width, height) != config.canvas_size:
        config = replace(config, canvas_size=(width, height))

    if args.leaderboard is not None:
        config = replace(config, leaderboard=replace(config.leaderboard, path=args.leaderboard))

    game = SledGame(config=config)
    game.run()


if __name__ == "__main__":
    main()
