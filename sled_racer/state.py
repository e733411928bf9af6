"""Mutable simulation state shared by the engine components."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional


def is_finite(*values: float) -> bool:
    """Return True when every value is a real, finite number."""
    try:
        return all(math.isfinite(value) for value in values)
    except TypeError:
        return False


@dataclass
class TrackSegment:
    """One sample of the track centreline at a fixed world y."""

    x: float
    y: float
    w: float = 120.0

    @property
    def left(self) -> float:
        return self.x - self.w / 2

    @property
    def right(self) -> float:
        return self.x + self.w / 2


@dataclass
class Obstacle:
    """Static hazard placed on the track in world coordinates."""

    x: float
    y: float
    w: float = 12.0
    h: float = 20.0


@dataclass
class Player:
    """The sled. Only ``x`` and ``steer`` change while racing."""

    x: float
    y: float
    w: float = 16.0
    h: float = 24.0
    steer: float = 0.0

    @property
    def left(self) -> float:
        return self.x - self.w / 2

    @property
    def right(self) -> float:
        return self.x + self.w / 2


@dataclass
class Particle:
    """Crash debris, in canvas coordinates."""

    x: float
    y: float
    vx: float
    vy: float
    life: int

    def update(self, gravity: float) -> None:
        self.x += self.vx
        self.y += self.vy
        self.vy += gravity
        self.life -= 1

    @property
    def alive(self) -> bool:
        return self.life > 0


@dataclass(frozen=True)
class CrashEvent:
    """Describes the collision that ended a run."""

    kind: str  # "boundary" | "obstacle"
    tick: int
    world_y: float
    obstacle: Optional[Obstacle] = None


@dataclass
class SimulationState:
    """Everything a single run mutates; recreated wholesale on reset."""

    player: Player
    segments: list[TrackSegment] = field(default_factory=list)
    obstacles: list[Obstacle] = field(default_factory=list)
    particles: list[Particle] = field(default_factory=list)
    offset: float = 0.0
    speed: float = 0.0
    score: int = 0
    tick: int = 0
    noise_offset: float = 0.0
    crashed: bool = False
    crash: Optional[CrashEvent] = None

    @property
    def frontier(self) -> Optional[TrackSegment]:
        return self.segments[-1] if self.segments else None


def make_segment(x: float, y: float, width: float, lane_width: float = 120.0) -> TrackSegment:
    """Build a segment whose centre is always finite and on the canvas.

    Any ``x`` that is not a finite number inside ``[0, width]`` is replaced
    with the canvas centre.
    """
    if not is_finite(x) or x < 0 or x > width:
        x = width / 2
    return TrackSegment(x=float(x), y=float(y), w=lane_width)


def make_obstacle(
    segment: Optional[TrackSegment],
    jitter: float,
    limit: float,
    uniform: Callable[[float, float], float],
    size: tuple[float, float] = (12.0, 20.0),
) -> Optional[Obstacle]:
    """Place an obstacle near ``segment.x``; None if the segment is unusable."""
    if segment is None or not is_finite(segment.x, segment.y):
        return None
    x = segment.x + uniform(-jitter, jitter)
    if not is_finite(x):
        return None
    x = max(segment.x - limit, min(segment.x + limit, x))
    return Obstacle(x=x, y=segment.y, w=size[0], h=size[1])
