"""Configuration data structures for the sled racer."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class TrackConfig:
    """Parameters for the procedurally generated track ribbon."""

    segment_step: float = 50.0  # world units between consecutive segments
    lane_width: float = 120.0
    max_batch: int = 100  # extend() silently ignores larger requests
    batch_size: int = 20
    min_segments: int = 40
    lookahead_screens: float = 4.0  # frontier must stay this many canvas heights ahead
    noise_step: float = 0.05
    target_span: float = 0.4  # noise maps onto 0.3..0.7 of the width
    target_base: float = 0.3
    soft_min: float = 0.2
    soft_max: float = 0.8
    hard_min: float = 0.1
    hard_max: float = 0.9
    curve: float = 0.3  # lerp factor toward the noise target


@dataclass(frozen=True)
class NoiseConfig:
    """Shape of the Perlin noise driving the track curvature."""

    octaves: int = 4
    falloff: float = 0.5
    repeat: int = 1024
    # pnoise1 indexes a 512-entry permutation table, so bases stay below 256
    base_range: int = 256


@dataclass(frozen=True)
class ObstacleConfig:
    """Spawning cadence and placement limits for obstacles."""

    width: float = 12.0
    height: float = 20.0
    easy_spawn_rate: int = 360  # ticks between spawns
    hard_spawn_rate: int = 240
    min_segments: int = 20
    lookback: int = 10
    jitter: float = 35.0
    limit: float = 50.0
    seed_start: int = 8
    seed_every: int = 6
    seed_min_segments: int = 10
    seed_jitter: float = 25.0
    seed_limit: float = 40.0


@dataclass(frozen=True)
class ClockConfig:
    """Speed curve for the two-phase difficulty."""

    base_speed: float = 0.8
    easy_mode_ticks: int = 20 * 60  # 20 seconds at 60 ticks per second
    easy_speed_gain: float = 0.5
    easy_acceleration: float = 0.01
    hard_base_speed: float = 1.3
    hard_ramp_ticks: float = 300.0
    hard_speed_gain: float = 4.0
    hard_acceleration: float = 0.04
    brake_friction: float = 0.02
    boost: float = 0.1
    ticks_per_second: int = 60


@dataclass(frozen=True)
class PlayerConfig:
    """Sled dimensions and steering response."""

    width: float = 16.0
    height: float = 24.0
    steer_damping: float = 0.9  # per-tick decay when no direction is held


@dataclass(frozen=True)
class CollisionConfig:
    """Hitbox tuning for obstacle collisions."""

    near_distance: float = 50.0  # vertical cheap-reject distance
    hitbox_divisor: float = 2.5  # > 2 shrinks the hitbox below the sprite bounds


@dataclass(frozen=True)
class PruneConfig:
    """Limits for evicting geometry that scrolled behind the player."""

    keep_segments: int = 50
    segment_behind: float = 300.0
    max_removals: int = 3
    obstacle_behind: float = 200.0
    obstacle_interval: int = 60  # ticks between obstacle sweeps


@dataclass(frozen=True)
class ParticleConfig:
    """Crash burst particles."""

    count: int = 50
    life: int = 60
    gravity: float = 0.1
    spread_x: float = 2.0
    lift_y: float = 5.0


@dataclass(frozen=True)
class RenderingConfig:
    """Colours and layout for the pygame front-end."""

    sky_top: tuple[int, int, int] = (135, 206, 235)
    sky_bottom: tuple[int, int, int] = (255, 182, 193)
    mountain_color: tuple[int, int, int] = (100, 150, 100)
    mountain_shadow: tuple[int, int, int] = (80, 120, 80)
    track_color: tuple[int, int, int] = (200, 200, 200)
    edge_color: tuple[int, int, int] = (100, 100, 100)
    obstacle_color: tuple[int, int, int] = (255, 100, 0)
    wheel_color: tuple[int, int, int] = (50, 50, 50)
    sled_color: tuple[int, int, int] = (0, 200, 255)
    sled_accent: tuple[int, int, int] = (255, 0, 0)
    particle_color: tuple[int, int, int] = (255, 200, 0)
    ui_color: tuple[int, int, int] = (255, 255, 255)
    score_color: tuple[int, int, int] = (255, 255, 0)
    easy_color: tuple[int, int, int] = (100, 255, 100)
    warning_color: tuple[int, int, int] = (255, 200, 0)
    danger_color: tuple[int, int, int] = (255, 80, 80)
    warning_seconds: int = 15
    danger_seconds: int = 10
    max_speed_display: float = 8.0
    visible_margin: float = 50.0


@dataclass(frozen=True)
class TouchConfig:
    """On-screen control pads for mouse and touch play."""

    button_size: int = 60
    margin: int = 20
    gap: int = 10
    idle_color: tuple[int, int, int, int] = (50, 100, 150, 150)
    held_color: tuple[int, int, int, int] = (100, 150, 255, 150)


@dataclass(frozen=True)
class LeaderboardConfig:
    """Local leaderboard storage and submission settings."""

    path: Path = field(default_factory=lambda: Path.home() / ".sled_racer" / "leaderboard.json")
    max_entries: int = 10
    min_score: int = 10
    max_email_length: int = 50
    submit_timeout: float = 5.0


@dataclass(frozen=True)
class GameConfig:
    """High-level configuration of the game."""

    canvas_size: tuple[int, int] = (400, 600)
    target_fps: int = 60
    track: TrackConfig = field(default_factory=TrackConfig)
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    obstacles: ObstacleConfig = field(default_factory=ObstacleConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    prune: PruneConfig = field(default_factory=PruneConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    render: RenderingConfig = field(default_factory=RenderingConfig)
    touch: TouchConfig = field(default_factory=TouchConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)

    @property
    def width(self) -> float:
        return float(self.canvas_size[0])

    @property
    def height(self) -> float:
        return float(self.canvas_size[1])
