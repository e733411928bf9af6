"""Shared fixtures for the engine tests."""

from __future__ import annotations

from sled_racer.collision import CollisionDetector
from sled_racer.config import CollisionConfig, GameConfig, TrackConfig
from sled_racer.state import Player, SimulationState, TrackSegment
from sled_racer.track import TrackGenerator

WIDTH = 400.0
HEIGHT = 600.0


class FixedNoise:
    """Noise stand-in that always returns the same value."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value
        self.calls = 0

    def sample(self, offset: float) -> float:
        self.calls += 1
        return self.value


class BrokenNoise:
    """Noise stand-in that fails on every call."""

    def sample(self, offset: float) -> float:
        raise RuntimeError("noise backend unavailable")


def centre_uniform(lo: float, hi: float) -> float:
    return (lo + hi) / 2


def make_state(player_x: float = 200.0, player_y: float = 300.0) -> SimulationState:
    return SimulationState(player=Player(x=player_x, y=player_y))


def straight_track(state: SimulationState, count: int, x: float = 200.0, first: int = 1) -> None:
    for k in range(first, first + count):
        state.segments.append(TrackSegment(x=x, y=k * 50.0, w=120.0))


def make_generator(noise=None) -> TrackGenerator:
    return TrackGenerator(TrackConfig(), noise or FixedNoise(0.5), WIDTH, HEIGHT)


def make_detector(noise=None) -> CollisionDetector:
    return CollisionDetector(CollisionConfig(), make_generator(noise))


def small_config() -> GameConfig:
    return GameConfig(canvas_size=(int(WIDTH), int(HEIGHT)))
