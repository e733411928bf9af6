"""Boundary and obstacle collision checks against the scrolling world."""

from __future__ import annotations

import logging
import math
from typing import Optional

from .config import CollisionConfig
from .state import CrashEvent, SimulationState, TrackSegment, is_finite, make_segment
from .track import TrackGenerator

logger = logging.getLogger(__name__)


class CollisionDetector:
    """Finds the first crash condition for the player on the current tick."""

    def __init__(self, config: CollisionConfig, generator: TrackGenerator) -> None:
        self.cfg = config
        self.generator = generator

    @property
    def step(self) -> float:
        return self.generator.cfg.segment_step

    def check(self, state: SimulationState) -> Optional[CrashEvent]:
        if state.crashed:
            return None

        player = state.player
        world_y = state.offset + player.y
        if not is_finite(world_y):
            return None

        if not state.segments:
            self.generator.extend(state, self.generator.cfg.batch_size)
            return None

        segment = self._segment_at(state, world_y)
        if segment is not None and self._outside_track(state, segment):
            return CrashEvent(kind="boundary", tick=state.tick, world_y=world_y)

        return self._check_obstacles(state, world_y)

    def segment_index(self, state: SimulationState, world_y: float) -> int:
        """Translate a world y into a position in the (pruned) segment list."""
        world_index = max(0, math.floor(world_y / self.step))
        head = state.segments[0]
        head_index = round(head.y / self.step) if is_finite(head.y) else 0
        return max(0, world_index - head_index)

    def _segment_at(self, state: SimulationState, world_y: float) -> Optional[TrackSegment]:
        world_index = max(0, math.floor(world_y / self.step))
        index = self.segment_index(state, world_y)
        if index >= len(state.segments):
            logger.debug("Player ran past the frontier at index %d; extending", index)
            self.generator.extend(state, self.generator.cfg.batch_size)
            index = min(index, len(state.segments) - 1)

        segment = state.segments[index]
        if not is_finite(segment.x, segment.w):
            logger.warning("Repairing corrupt track segment at index %d", index)
            segment = make_segment(
                self.generator.width / 2,
                world_index * self.step,
                self.generator.width,
                self.generator.cfg.lane_width,
            )
            state.segments[index] = segment
        return segment

    @staticmethod
    def _outside_track(state: SimulationState, segment: TrackSegment) -> bool:
        player = state.player
        edges = (segment.left, segment.right, player.left, player.right)
        if not is_finite(*edges):
            return False
        return player.right < segment.left or player.left > segment.right

    def _check_obstacles(self, state: SimulationState, world_y: float) -> Optional[CrashEvent]:
        player = state.player
        obstacles = state.obstacles
        for i in range(len(obstacles) - 1, -1, -1):
            obstacle = obstacles[i]
            if not is_finite(obstacle.x, obstacle.y, obstacle.w, obstacle.h):
                logger.warning("Dropping corrupt obstacle %r", obstacle)
                del obstacles[i]
                continue

            dy = abs(obstacle.y - world_y)
            if dy > self.cfg.near_distance:
                continue
            dx = abs(obstacle.x - player.x)
            if (
                dy < (player.h + obstacle.h) / self.cfg.hitbox_divisor
                and dx < (player.w + obstacle.w) / self.cfg.hitbox_divisor
            ):
                return CrashEvent(kind="obstacle", tick=state.tick, world_y=world_y, obstacle=obstacle)
        return None
