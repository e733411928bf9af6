"""Per-tick orchestration of the track, obstacle, clock and collision engine."""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from .clock import WorldClock, steer
from .collision import CollisionDetector
from .config import GameConfig
from .input import InputState
from .noise import NoiseSource
from .obstacles import ObstacleSpawner
from .pruner import GeometryPruner
from .state import CrashEvent, Particle, Player, SimulationState
from .track import TrackGenerator

logger = logging.getLogger(__name__)


class Simulation:
    """Owns one run of the game and steps it one tick at a time.

    Order within a tick: clock, track, spawner, collision, pruner. Nothing
    raised by the engine leaves :meth:`step`; corrupt numbers are repaired
    where they are read.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        noise: Optional[NoiseSource] = None,
        uniform: Optional[Callable[[float, float], float]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.uniform = uniform or random.uniform
        self.noise = noise or NoiseSource(self.config.noise)
        self.clock = WorldClock(self.config.clock)
        self.track = TrackGenerator(self.config.track, self.noise, self.config.width, self.config.height)
        self.spawner = ObstacleSpawner(self.config.obstacles, self.uniform)
        self.collisions = CollisionDetector(self.config.collision, self.track)
        self.pruner = GeometryPruner(self.config.prune)
        self.state = self._new_state()
        self.reset()

    def _new_state(self) -> SimulationState:
        player_cfg = self.config.player
        player = Player(
            x=self.config.width / 2,
            y=self.config.height / 2,
            w=player_cfg.width,
            h=player_cfg.height,
        )
        return SimulationState(player=player)

    def reset(self) -> None:
        """Throw away the current run and lay out a fresh opening stretch."""
        self.state = self._new_state()
        self.state.speed = self.config.clock.base_speed
        self.track.extend(self.state, self.config.track.batch_size)
        seeded = self.spawner.seed(self.state)
        logger.info(
            "New run: %d segments, %d opening obstacles",
            len(self.state.segments),
            seeded,
        )

    @property
    def crashed(self) -> bool:
        return self.state.crashed

    @property
    def survival_seconds(self) -> int:
        return self.state.score // self.config.clock.ticks_per_second

    def step(self, inputs: Optional[InputState] = None) -> Optional[CrashEvent]:
        """Advance one tick and return the crash it caused, if any."""
        inputs = inputs or InputState()
        state = self.state
        self._update_particles()
        if state.crashed:
            return None

        tick = self.clock.advance(state, brake=inputs.brake, boost=inputs.boost)
        steer(state.player, inputs.steer, self.config.width, self.config.player)
        self.track.ensure_ahead(state)
        self.spawner.try_spawn(state, tick, self.config.clock.easy_mode_ticks)

        event = self.collisions.check(state)
        if event is not None:
            self.crash(event)

        self.pruner.prune(state, tick)
        return event

    def crash(self, event: CrashEvent) -> bool:
        """Enter the crashed state; repeated calls change nothing."""
        state = self.state
        if state.crashed:
            return False
        state.crashed = True
        state.crash = event
        state.speed = 0.0

        particles = self.config.particles
        player = state.player
        for _ in range(particles.count):
            state.particles.append(
                Particle(
                    x=player.x,
                    y=player.y,
                    vx=self.uniform(-particles.spread_x, particles.spread_x),
                    vy=self.uniform(-particles.lift_y, 0.0),
                    life=particles.life,
                )
            )
        logger.info(
            "Crashed (%s) at tick %d, score %d, offset %.1f",
            event.kind,
            event.tick,
            state.score,
            state.offset,
        )
        return True

    def _update_particles(self) -> None:
        gravity = self.config.particles.gravity
        survivors: list[Particle] = []
        for particle in self.state.particles:
            particle.update(gravity)
            if particle.alive:
                survivors.append(particle)
        self.state.particles = survivors
