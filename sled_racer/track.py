"""Lazy generation of the curving track ribbon."""

from __future__ import annotations

import logging

from .config import TrackConfig
from .noise import NoiseSource
from .state import SimulationState, TrackSegment, is_finite, make_segment

logger = logging.getLogger(__name__)


class TrackGenerator:
    """Appends segments ahead of the player, one fixed step apart."""

    def __init__(self, config: TrackConfig, noise: NoiseSource, width: float, height: float) -> None:
        self.cfg = config
        self.noise = noise
        self.width = width
        self.height = height

    def extend(self, state: SimulationState, n: int) -> int:
        """Append ``n`` segments and return how many were added.

        Requests outside ``(0, max_batch]`` are ignored.
        """
        if n <= 0 or n > self.cfg.max_batch:
            logger.debug("Ignoring track extension of %s segments", n)
            return 0

        last = state.frontier
        last_y = last.y if last is not None else 0.0
        last_x = last.x if last is not None else self.width / 2
        if not is_finite(last_x) or last_x < 0 or last_x > self.width:
            last_x = self.width / 2
        if not is_finite(last_y):
            last_y = float(len(state.segments)) * self.cfg.segment_step

        for _ in range(n):
            y = last_y + self.cfg.segment_step
            try:
                segment = self._next_segment(state.noise_offset, last_x, y)
            except Exception as exc:
                logger.warning("Track segment at y=%.1f failed (%s); using centre line", y, exc)
                segment = make_segment(self.width / 2, y, self.width, self.cfg.lane_width)
            state.segments.append(segment)
            last_y = segment.y
            last_x = segment.x
            state.noise_offset += self.cfg.noise_step
        return n

    def _next_segment(self, noise_offset: float, last_x: float, y: float) -> TrackSegment:
        width = self.width
        sample = self.noise.sample(noise_offset)
        if not is_finite(sample):
            raise ValueError(f"noise returned {sample!r}")
        target = sample * width * self.cfg.target_span + width * self.cfg.target_base
        target = max(width * self.cfg.soft_min, min(width * self.cfg.soft_max, target))

        curve = last_x + (target - last_x) * self.cfg.curve
        curve = max(width * self.cfg.hard_min, min(width * self.cfg.hard_max, curve))
        return make_segment(curve, y, width, self.cfg.lane_width)

    def needs_extension(self, state: SimulationState, offset: float) -> bool:
        if len(state.segments) < self.cfg.min_segments:
            return True
        frontier = state.frontier
        if frontier is None or not is_finite(frontier.y):
            return True
        return frontier.y - offset < self.height * self.cfg.lookahead_screens

    def ensure_ahead(self, state: SimulationState) -> int:
        """Generate another batch if the frontier is too close."""
        if not self.needs_extension(state, state.offset):
            return 0
        return self.extend(state, self.cfg.batch_size)
