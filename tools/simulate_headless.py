"""Run many headless sessions with a simple bot and summarise survival."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sled_racer.config import GameConfig
from sled_racer.input import InputState
from sled_racer.noise import NoiseSource
from sled_racer.simulation import Simulation


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure how long a centre-following bot survives.")
    parser.add_argument("--runs", type=int, default=20, help="Number of sessions to simulate.")
    parser.add_argument("--max-ticks", type=int, default=60 * 180, help="Tick cap per session.")
    parser.add_argument("--deadband", type=float, default=6.0, help="Bot ignores centre errors below this.")
    parser.add_argument("--seed", type=int, help="Seed for numpy and random.")
    return parser.parse_args()


def bot_inputs(sim: Simulation, deadband: float) -> InputState:
    state = sim.state
    if not state.segments:
        return InputState()
    world_y = state.offset + state.player.y
    index = min(sim.collisions.segment_index(state, world_y), len(state.segments) - 1)
    error = state.segments[index].x - state.player.x
    if error > deadband:
        return InputState(steer=1)
    if error < -deadband:
        return InputState(steer=-1)
    return InputState()


def run_session(sim: Simulation, max_ticks: int, deadband: float) -> tuple[int, int, int]:
    sim.reset()
    peak_segments = 0
    peak_obstacles = 0
    for _ in range(max_ticks):
        sim.step(bot_inputs(sim, deadband))
        peak_segments = max(peak_segments, len(sim.state.segments))
        peak_obstacles = max(peak_obstacles, len(sim.state.obstacles))
        if sim.crashed:
            break
    return sim.state.score, peak_segments, peak_obstacles


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.WARNING)
    rng = np.random.default_rng(args.seed)
    if args.seed is not None:
        random.seed(args.seed)

    config = GameConfig()
    sim = Simulation(config, noise=NoiseSource(config.noise, rng=rng))

    scores = np.zeros(args.runs, dtype=np.int64)
    segments = np.zeros(args.runs, dtype=np.int64)
    obstacles = np.zeros(args.runs, dtype=np.int64)
    for i in range(args.runs):
        sim.noise.reseed()
        scores[i], segments[i], obstacles[i] = run_session(sim, args.max_ticks, args.deadband)

    seconds = scores / config.clock.ticks_per_second
    print(f"Runs: {args.runs}")
    print(f"Survival (s): mean={seconds.mean():.1f} median={np.median(seconds):.1f} p90={np.percentile(seconds, 90):.1f}")
    print(f"Peak segments: max={segments.max()} mean={segments.mean():.1f}")
    print(f"Peak obstacles: max={obstacles.max()} mean={obstacles.mean():.1f}")


if __name__ == "__main__":
    main()
