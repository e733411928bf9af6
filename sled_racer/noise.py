"""Smooth 1-D Perlin noise used to bend the track."""

from __future__ import annotations

import math
from typing import Optional

import noise
import numpy as np

from .config import NoiseConfig


class NoiseSource:
    """Multi-octave Perlin noise rescaled to ``[0, 1]``.

    ``base`` selects one of the library's permutation tables, so two sources
    with different bases give different track shapes for the same offsets.
    """

    def __init__(
        self,
        config: Optional[NoiseConfig] = None,
        rng: Optional[np.random.Generator] = None,
        base: Optional[int] = None,
    ) -> None:
        self.cfg = config or NoiseConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self.base = base if base is not None else self._draw_base()

    def _draw_base(self) -> int:
        return int(self._rng.integers(0, self.cfg.base_range))

    def reseed(self, rng: Optional[np.random.Generator] = None) -> None:
        """Pick a fresh permutation base, giving a new track shape."""
        if rng is not None:
            self._rng = rng
        self.base = self._draw_base()

    def sample(self, offset: float) -> float:
        if not math.isfinite(offset):
            raise ValueError(f"noise offset must be finite, got {offset!r}")

        value = noise.pnoise1(
            float(offset),
            octaves=self.cfg.octaves,
            persistence=self.cfg.falloff,
            repeat=self.cfg.repeat,
            base=self.base,
        )
        return max(0.0, min(1.0, (value + 1.0) / 2.0))
