"""
Catch Core - The simulation heart of the game.

Main exports:
- Session: Game orchestrator (start, intents, ticks, snapshots)
- CatchEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from catchball.catch_core.config_loader import GameConfig, load_config
from catchball.catch_core.entities import FallingObject, PaddleState, Playfield
from catchball.catch_core.clock import Clock, ClockState, TickHandle
from catchball.catch_core.rng import RandomSource
from catchball.catch_core.spawner import Spawner
from catchball.catch_core.integrator import advance, advance_all
from catchball.catch_core.collision import CollisionOutcome, CollisionResolver
from catchball.catch_core.progression import (
    GameStatus,
    ProgressionController,
    ProgressState,
    TickDelta,
)
from catchball.catch_core.input_controller import InputController, Intent
from catchball.catch_core.events import EventKind, GameEvent
from catchball.catch_core.state_snapshot import GameSnapshot, SnapshotBuilder
from catchball.catch_core.session import Session, TickResult
from catchball.catch_core.env_gym import CatchEnv

__all__ = [
    "GameConfig",
    "load_config",
    "FallingObject",
    "PaddleState",
    "Playfield",
    "Clock",
    "ClockState",
    "TickHandle",
    "RandomSource",
    "Spawner",
    "advance",
    "advance_all",
    "CollisionOutcome",
    "CollisionResolver",
    "GameStatus",
    "ProgressionController",
    "ProgressState",
    "TickDelta",
    "InputController",
    "Intent",
    "EventKind",
    "GameEvent",
    "GameSnapshot",
    "SnapshotBuilder",
    "Session",
    "TickResult",
    "CatchEnv",
]
