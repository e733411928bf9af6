"""Eviction of geometry that has scrolled behind the player."""

from __future__ import annotations

import logging

from .config import PruneConfig
from .state import SimulationState, is_finite

logger = logging.getLogger(__name__)


class GeometryPruner:
    """Keeps the segment and obstacle lists bounded."""

    def __init__(self, config: PruneConfig) -> None:
        self.cfg = config

    def prune_track(self, state: SimulationState) -> int:
        """Drop up to ``max_removals`` stale segments from the head."""
        removed = 0
        segments = state.segments
        while len(segments) > self.cfg.keep_segments and removed < self.cfg.max_removals:
            head = segments[0]
            if not (is_finite(head.y) and head.y - state.offset < -self.cfg.segment_behind):
                break
            segments.pop(0)
            removed += 1
        return removed

    def prune_obstacles(self, state: SimulationState) -> int:
        before = len(state.obstacles)
        try:
            state.obstacles = [
                obstacle
                for obstacle in state.obstacles
                if is_finite(obstacle.y) and obstacle.y - state.offset > -self.cfg.obstacle_behind
            ]
        except (AttributeError, TypeError) as exc:
            logger.error("Obstacle sweep failed (%s); clearing all obstacles", exc)
            state.obstacles = []
        return before - len(state.obstacles)

    def prune(self, state: SimulationState, tick: int) -> tuple[int, int]:
        """Run the per-tick track trim and the periodic obstacle sweep."""
        segments_removed = self.prune_track(state)
        obstacles_removed = 0
        if tick % self.cfg.obstacle_interval == 0:
            obstacles_removed = self.prune_obstacles(state)
        return segments_removed, obstacles_removed
