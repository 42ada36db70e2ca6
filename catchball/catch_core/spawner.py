"""
Spawner
=======

Creates falling objects at a level-dependent cadence with randomized
horizontal position, fall speed and visual tag.
"""

from __future__ import annotations

import logging
from typing import Optional

from catchball.catch_core.config_loader import GameConfig, get_config
from catchball.catch_core.entities import FallingObject
from catchball.catch_core.rng import RandomSource

logger = logging.getLogger(__name__)


class Spawner:
    """
    Level-aware object spawner.

    The spawn interval shrinks by a fixed amount per level and is clamped at
    ``min_interval_ms`` so spawning never runs away at high levels.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[RandomSource] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            rng: Random source. A fresh unseeded one if None.
        """
        if config is None:
            config = get_config()

        self._spawn = config.spawn
        self._rng = rng if rng is not None else RandomSource()
        self._next_uid: int = 0

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def spawn_interval(self, level: int) -> float:
        """
        Milliseconds that must elapse between spawns at a level.

        Args:
            level: Current level (1-based).

        Returns:
            ``max(min_interval, max_interval - (level - 1) * reduction)``.
        """
        spawn = self._spawn
        raw = spawn.max_interval_ms - (level - 1) * spawn.per_level_reduction_ms
        return max(spawn.min_interval_ms, raw)

    def fall_speed(self, level: int) -> float:
        """Draw a fall speed for a new object at a level."""
        spawn = self._spawn
        jitter = self._rng.uniform(0.0, spawn.speed_jitter) if spawn.speed_jitter > 0 else 0.0
        return spawn.base_speed + (level - 1) * spawn.speed_per_level + jitter

    def maybe_spawn(
        self,
        level: int,
        elapsed_since_last_spawn: Optional[float]
    ) -> Optional[FallingObject]:
        """
        Spawn one object if the spawn interval has passed.

        Args:
            level: Current level.
            elapsed_since_last_spawn: Milliseconds since the previous spawn,
                or None if nothing has spawned yet this session.

        Returns:
            The new object, or None if it is not yet time to spawn.
        """
        if (
            elapsed_since_last_spawn is not None
            and elapsed_since_last_spawn <= self.spawn_interval(level)
        ):
            return None

        spawn = self._spawn
        obj = FallingObject(
            uid=self._next_uid,
            x=self._rng.uniform(spawn.margin_percent, 100.0 - spawn.margin_percent),
            y=spawn.start_y_percent,
            speed=self.fall_speed(level),
            tag=self._rng.choice(spawn.palette)
        )
        self._next_uid += 1
        logger.debug("Spawned %r at level %d", obj, level)
        return obj

    def reset(self, seed: Optional[int] = None) -> None:
        """Restart uid numbering, optionally reseeding the random source."""
        self._next_uid = 0
        if seed is not None:
            self._rng.reset(seed)
