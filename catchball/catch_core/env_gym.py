"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the catch game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from catchball.catch_core.config_loader import GameConfig, load_config
from catchball.catch_core.input_controller import Intent
from catchball.catch_core.session import Session

logger = logging.getLogger(__name__)

# Discrete action -> intent
ACTION_INTENTS = {
    0: None,
    1: Intent.LEFT,
    2: Intent.RIGHT,
}


class CatchEnv(gym.Env):
    """
    Catch-the-ball game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move left, 2 = move right.
        One env step applies the intent, then runs exactly one tick.

    Observation Space:
        Dict with score/lives/level/status, paddle position and padded
        object arrays (see GameSnapshot.to_obs_dict).

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, lives, level, delta_score, caught, missed, etc.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        debug: bool = False,
    ):
        """
        Initialize catch environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already-loaded configuration; takes precedence over config_path.
            debug: If True, log every step at DEBUG level.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)
        self._debug = debug
        if debug:
            logging.getLogger("catchball").setLevel(logging.DEBUG)

        self._session = Session(config=self._config)
        self._tick_ms = self._config.clock.tick_interval_ms
        self._now_ms = 0.0

        self.action_space = spaces.Discrete(len(ACTION_INTENTS))
        self.observation_space = self._build_observation_space()

        logger.debug(
            "CatchEnv initialized: playfield %dx%d, max objects %d",
            self._config.playfield.width,
            self._config.playfield.height,
            self._config.observation.max_objects,
        )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.observation.max_objects
        num_tags = self._config.num_tags

        return spaces.Dict({
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "status": spaces.Box(low=0, high=2, shape=(), dtype=np.int32),
            "paddle_x": spaces.Box(low=0, high=100, shape=(), dtype=np.float32),
            "objects_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "obj_x": spaces.Box(low=0, high=100, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_speed": spaces.Box(low=0, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_tag": spaces.Box(low=-1, high=num_tags - 1, shape=(max_obj,), dtype=np.int16),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for the spawn sequence.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._now_ms = 0.0
        snapshot = self._session.start(seed=seed)

        info = self._session.get_info()
        info["delta_score"] = 0
        info["caught"] = 0
        info["missed"] = 0
        return snapshot.to_obs_dict(), info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 stay, 1 left, 2 right.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if action not in ACTION_INTENTS:
            raise ValueError(f"Invalid action {action}, expected one of {sorted(ACTION_INTENTS)}")

        intent = ACTION_INTENTS[action]
        if intent is not None:
            self._session.intent(intent)

        result = self._session.tick(self._now_ms)
        self._now_ms += self._tick_ms

        info = self._session.get_info()
        if result is None:
            info["delta_score"] = 0
            info["caught"] = 0
            info["missed"] = 0
        else:
            info["delta_score"] = result.delta.score_gained
            info["caught"] = len(result.outcome.caught)
            info["missed"] = len(result.outcome.missed)

        terminated = self._session.is_over
        truncated = not terminated and self._session.tick_count >= self._config.caps.max_ticks

        if self._debug:
            logger.debug(
                "Step: action=%d, delta_score=%d, lives=%d, objects=%d",
                action, info["delta_score"], info["lives"], info["objects_count"],
            )
            if terminated:
                logger.debug("TERMINATED: score=%d, level=%d", info["score"], info["level"])

        return self._session.snapshot().to_obs_dict(), 0.0, terminated, truncated, info

    def close(self) -> None:
        """Stop the session clock."""
        self._session.stop()

    @property
    def session(self) -> Session:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
