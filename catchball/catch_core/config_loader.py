"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class PlayfieldConfig:
    """Initial playfield geometry."""
    width: int                   # Playfield width in pixels
    height: int                  # Playfield height in pixels
    object_size: int             # Falling object diameter in pixels


@dataclass(frozen=True)
class PaddleConfig:
    """Paddle geometry and movement."""
    width: int                   # Fixed width in pixels
    height: int                  # Catch band height in pixels
    step_percent: float          # Move per intent, percent of playfield width


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn cadence and randomized attributes."""
    min_interval_ms: float
    max_interval_ms: float
    per_level_reduction_ms: float
    margin_percent: float
    start_y_percent: float
    base_speed: float
    speed_per_level: float
    speed_jitter: float
    palette: Tuple[str, ...]


@dataclass(frozen=True)
class ProgressionConfig:
    """Score, lives and level rules."""
    catch_reward: int
    initial_lives: int
    level_up_score_threshold: int
    level_up_bonus_lives: int


@dataclass(frozen=True)
class ClockConfig:
    """Tick cadence."""
    tick_interval_ms: float


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_objects: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    playfield: PlayfieldConfig
    paddle: PaddleConfig
    spawn: SpawnConfig
    progression: ProgressionConfig
    clock: ClockConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def num_tags(self) -> int:
        """Number of visual tags in the palette."""
        return len(self.spawn.palette)

    def get_tag_index(self, tag: str) -> int:
        """Get the palette index of a visual tag."""
        try:
            return self.spawn.palette.index(tag)
        except ValueError:
            raise ValueError(f"Unknown visual tag: {tag!r}") from None


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    playfield = config.playfield
    if playfield.width <= 0 or playfield.height <= 0:
        raise ValueError(
            f"Playfield dimensions must be positive, got {playfield.width}x{playfield.height}"
        )
    if playfield.object_size <= 0:
        raise ValueError(f"object_size must be positive, got {playfield.object_size}")

    paddle = config.paddle
    if paddle.width <= 0 or paddle.height <= 0:
        raise ValueError(f"Paddle dimensions must be positive, got {paddle.width}x{paddle.height}")
    if paddle.width > playfield.width:
        raise ValueError(
            f"Paddle width ({paddle.width}) exceeds playfield width ({playfield.width})"
        )
    if paddle.step_percent <= 0:
        raise ValueError(f"paddle.step_percent must be positive, got {paddle.step_percent}")

    spawn = config.spawn
    if spawn.min_interval_ms <= 0:
        raise ValueError(f"spawn.min_interval_ms must be positive, got {spawn.min_interval_ms}")
    if spawn.min_interval_ms > spawn.max_interval_ms:
        raise ValueError(
            f"spawn.min_interval_ms ({spawn.min_interval_ms}) exceeds "
            f"max_interval_ms ({spawn.max_interval_ms})"
        )
    if spawn.per_level_reduction_ms < 0:
        raise ValueError("spawn.per_level_reduction_ms must not be negative")
    if not 0 <= spawn.margin_percent < 50:
        raise ValueError(f"spawn.margin_percent must be in [0, 50), got {spawn.margin_percent}")
    if spawn.base_speed <= 0:
        raise ValueError(f"spawn.base_speed must be positive, got {spawn.base_speed}")
    if spawn.speed_per_level < 0 or spawn.speed_jitter < 0:
        raise ValueError("spawn.speed_per_level and spawn.speed_jitter must not be negative")
    if not spawn.palette:
        raise ValueError("spawn.palette must contain at least one tag")

    progression = config.progression
    if progression.catch_reward <= 0:
        raise ValueError(f"catch_reward must be positive, got {progression.catch_reward}")
    if progression.initial_lives <= 0:
        raise ValueError(f"initial_lives must be positive, got {progression.initial_lives}")
    if progression.level_up_score_threshold <= 0:
        raise ValueError("level_up_score_threshold must be positive")

    if config.clock.tick_interval_ms <= 0:
        raise ValueError(f"tick_interval_ms must be positive, got {config.clock.tick_interval_ms}")
    if config.observation.max_objects <= 0:
        raise ValueError("observation.max_objects must be positive")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    playfield_data = raw["playfield"]
    playfield = PlayfieldConfig(
        width=int(playfield_data["width"]),
        height=int(playfield_data["height"]),
        object_size=int(playfield_data.get("object_size", 30))
    )

    paddle_data = raw["paddle"]
    paddle = PaddleConfig(
        width=int(paddle_data["width"]),
        height=int(paddle_data["height"]),
        step_percent=float(paddle_data.get("step_percent", 5.0))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        min_interval_ms=float(spawn_data["min_interval_ms"]),
        max_interval_ms=float(spawn_data["max_interval_ms"]),
        per_level_reduction_ms=float(spawn_data["per_level_reduction_ms"]),
        margin_percent=float(spawn_data.get("margin_percent", 5.0)),
        start_y_percent=float(spawn_data.get("start_y_percent", -5.0)),
        base_speed=float(spawn_data["base_speed"]),
        speed_per_level=float(spawn_data.get("speed_per_level", 0.0)),
        speed_jitter=float(spawn_data.get("speed_jitter", 0.0)),
        palette=tuple(str(tag) for tag in spawn_data["palette"])
    )

    progression_data = raw["progression"]
    progression = ProgressionConfig(
        catch_reward=int(progression_data.get("catch_reward", 10)),
        initial_lives=int(progression_data.get("initial_lives", 3)),
        level_up_score_threshold=int(progression_data["level_up_score_threshold"]),
        level_up_bonus_lives=int(progression_data.get("level_up_bonus_lives", 1))
    )

    clock_data = raw.get("clock", {})
    clock = ClockConfig(
        tick_interval_ms=float(clock_data.get("tick_interval_ms", 16))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 100000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_objects=int(obs_data.get("max_objects", 64))
    )

    config = GameConfig(
        playfield=playfield,
        paddle=paddle,
        spawn=spawn,
        progression=progression,
        clock=clock,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
