"""Obstacle placement on already generated track."""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from .config import ObstacleConfig
from .state import Obstacle, SimulationState, make_obstacle

logger = logging.getLogger(__name__)


class ObstacleSpawner:
    """Drops obstacles onto the track on a tick-based cadence."""

    def __init__(
        self,
        config: ObstacleConfig,
        uniform: Optional[Callable[[float, float], float]] = None,
    ) -> None:
        self.cfg = config
        self.uniform = uniform or random.uniform

    def spawn_rate(self, tick: int, easy_mode_ticks: int) -> int:
        if tick < easy_mode_ticks:
            return self.cfg.easy_spawn_rate
        return self.cfg.hard_spawn_rate

    def try_spawn(self, state: SimulationState, tick: int, easy_mode_ticks: int) -> Optional[Obstacle]:
        """Add one obstacle if this tick falls on the spawn cadence."""
        if tick % self.spawn_rate(tick, easy_mode_ticks) != 0:
            return None
        segments = state.segments
        if len(segments) <= self.cfg.min_segments:
            return None

        # Stay well behind the frontier so the obstacle sits on settled track.
        index = max(self.cfg.lookback, len(segments) - self.cfg.lookback)
        if index >= len(segments):
            return None
        obstacle = make_obstacle(
            segments[index],
            self.cfg.jitter,
            self.cfg.limit,
            self.uniform,
            (self.cfg.width, self.cfg.height),
        )
        if obstacle is None:
            logger.warning("Skipping obstacle spawn: segment %d is invalid", index)
            return None
        state.obstacles.append(obstacle)
        logger.debug("Spawned obstacle at (%.1f, %.1f) on tick %d", obstacle.x, obstacle.y, tick)
        return obstacle

    def seed(self, state: SimulationState) -> int:
        """Scatter the opening obstacles over a freshly generated track."""
        segments = state.segments
        if len(segments) <= self.cfg.seed_min_segments:
            return 0

        added = 0
        stop = len(segments) - self.cfg.seed_start
        for index in range(self.cfg.seed_start, stop, self.cfg.seed_every):
            obstacle = make_obstacle(
                segments[index],
                self.cfg.seed_jitter,
                self.cfg.seed_limit,
                self.uniform,
                (self.cfg.width, self.cfg.height),
            )
            if obstacle is None:
                logger.warning("Skipping opening obstacle: segment %d is invalid", index)
                continue
            state.obstacles.append(obstacle)
            added += 1
        return added
