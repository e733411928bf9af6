"""World scrolling and the difficulty speed curve."""

from __future__ import annotations

import math

from .config import ClockConfig, PlayerConfig
from .state import Player, SimulationState, is_finite


class WorldClock:
    """Advances speed, world offset, and score once per tick."""

    def __init__(self, config: ClockConfig) -> None:
        self.cfg = config

    def is_hard_mode(self, tick: int) -> bool:
        return tick >= self.cfg.easy_mode_ticks

    def target_speed(self, tick: int) -> float:
        if not self.is_hard_mode(tick):
            return self.cfg.base_speed + (tick / self.cfg.easy_mode_ticks) * self.cfg.easy_speed_gain
        hard_ticks = tick - self.cfg.easy_mode_ticks
        return self.cfg.hard_base_speed + (hard_ticks / self.cfg.hard_ramp_ticks) * self.cfg.hard_speed_gain

    def acceleration(self, tick: int) -> float:
        if not self.is_hard_mode(tick):
            return self.cfg.easy_acceleration
        return self.cfg.hard_acceleration

    def easy_seconds_left(self, tick: int) -> int:
        """Whole seconds until hard mode starts, 0 once it has."""
        remaining = self.cfg.easy_mode_ticks - tick
        if remaining <= 0:
            return 0
        return math.ceil(remaining / self.cfg.ticks_per_second)

    def advance(self, state: SimulationState, brake: bool = False, boost: bool = False) -> int:
        """Run one tick of the speed model and return the tick just simulated.

        The offset is the running sum of per-tick speeds.
        """
        tick = state.tick
        speed = state.speed if is_finite(state.speed) else self.cfg.base_speed
        speed += self.acceleration(tick)
        speed = max(0.0, min(self.target_speed(tick), speed))

        if brake:
            speed -= self.cfg.brake_friction
        if boost:
            speed += self.cfg.boost
        state.speed = max(0.0, speed)

        if not is_finite(state.offset):
            state.offset = 0.0
        state.offset += state.speed
        state.score += 1
        state.tick = tick + 1
        return tick


def steer(player: Player, direction: int, width: float, config: PlayerConfig) -> None:
    """Apply one tick of damped steering and keep the sled on the canvas."""
    if direction < 0:
        player.steer = -1.0
    elif direction > 0:
        player.steer = 1.0
    else:
        player.steer *= config.steer_damping
    x = player.x + player.steer
    if not is_finite(x):
        x = width / 2
    player.x = max(0.0, min(width, x))
