"""Sled racer game package."""

from .config import GameConfig
from .game import SledGame
from .input import InputState, KeyboardInput, PointerInput, TouchControls
from .leaderboard import LeaderboardError, LeaderboardStore, LeaderboardSubmitter
from .noise import NoiseSource
from .simulation import Simulation
from .state import CrashEvent, Obstacle, Player, SimulationState, TrackSegment

__all__ = [
    "SledGame",
    "GameConfig",
    "Simulation",
    "SimulationState",
    "TrackSegment",
    "Obstacle",
    "Player",
    "CrashEvent",
    "NoiseSource",
    "InputState",
    "KeyboardInput",
    "PointerInput",
    "TouchControls",
    "LeaderboardStore",
    "LeaderboardSubmitter",
    "LeaderboardError",
]
