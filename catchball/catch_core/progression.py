"""
Progression
===========

Owns score, lives and level, and the Idle/Active/Over state machine.

Each tick's deltas are computed from one immutable ProgressState and applied
as a single replacement, so score, lives and level are never observed
half-updated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from catchball.catch_core.config_loader import GameConfig, get_config


class GameStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    OVER = "over"


@dataclass(frozen=True)
class ProgressState:
    """Score, lives, level and status at one instant."""
    score: int
    lives: int
    level: int
    status: GameStatus

    @staticmethod
    def idle() -> "ProgressState":
        return ProgressState(score=0, lives=0, level=1, status=GameStatus.IDLE)


@dataclass(frozen=True)
class TickDelta:
    """What one tick did to the progression state."""
    before: ProgressState
    after: ProgressState
    score_gained: int = 0
    lives_lost: int = 0
    leveled_up: bool = False

    @property
    def new_level(self) -> int:
        return self.after.level

    @property
    def game_over(self) -> bool:
        return self.before.status is GameStatus.ACTIVE and self.after.status is GameStatus.OVER

    @staticmethod
    def unchanged(state: ProgressState) -> "TickDelta":
        return TickDelta(before=state, after=state)


class ProgressionController:
    """
    Applies collision outcomes to score, lives and level.

    Transitions:
    - IDLE -> ACTIVE and OVER -> ACTIVE: ``start()``
    - ACTIVE -> ACTIVE: ``apply()`` while lives remain
    - ACTIVE -> OVER: ``apply()`` drops lives to zero

    Level-up advances at most one level per tick even when the score
    overshoots several thresholds at once.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize progression controller.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        rules = config.progression
        self._catch_reward = rules.catch_reward
        self._initial_lives = rules.initial_lives
        self._threshold = rules.level_up_score_threshold
        self._bonus_lives = rules.level_up_bonus_lives
        self._state = ProgressState.idle()

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def lives(self) -> int:
        return self._state.lives

    @property
    def level(self) -> int:
        return self._state.level

    def level_up_threshold(self, level: int) -> int:
        """Score needed to leave ``level``."""
        return level * self._threshold

    def start(self) -> ProgressState:
        """Enter ACTIVE with a fresh score, lives and level."""
        self._state = ProgressState(
            score=0,
            lives=self._initial_lives,
            level=1,
            status=GameStatus.ACTIVE
        )
        return self._state

    def apply(self, caught_count: int, missed_count: int) -> TickDelta:
        """
        Apply one tick's catches and misses.

        Args:
            caught_count: Objects caught this tick.
            missed_count: Objects missed this tick.

        Returns:
            TickDelta describing the single state change. Unchanged if the
            game is not ACTIVE.
        """
        before = self._state
        if before.status is not GameStatus.ACTIVE:
            return TickDelta.unchanged(before)

        score_gained = caught_count * self._catch_reward
        score = before.score + score_gained
        lives = max(0, before.lives - missed_count)
        lives_lost = before.lives - lives
        level = before.level

        leveled_up = score_gained > 0 and score >= self.level_up_threshold(before.level)
        if leveled_up:
            level += 1
            lives += self._bonus_lives

        status = GameStatus.OVER if lives <= 0 else GameStatus.ACTIVE
        after = replace(before, score=score, lives=lives, level=level, status=status)
        self._state = after

        return TickDelta(
            before=before,
            after=after,
            score_gained=score_gained,
            lives_lost=lives_lost,
            leveled_up=leveled_up
        )
