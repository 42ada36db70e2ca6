"""
Input Controller
================

Maps directional intents to paddle positions, clamped to the playfield.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

from catchball.catch_core.config_loader import GameConfig, get_config
from catchball.catch_core.entities import PaddleState, Playfield
from catchball.catch_core.progression import GameStatus


class Intent(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["Intent", str]) -> "Intent":
        """Accept an Intent or its string name (case-insensitive)."""
        if isinstance(value, Intent):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown intent: {value!r} (expected 'left' or 'right')") from None


class InputController:
    """
    Moves the paddle one fixed step per intent.

    The paddle center is clamped to ``[w/2, 100 - w/2]`` where ``w`` is the
    paddle width as a percentage of the playfield width. Intents outside the
    ACTIVE status are ignored.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._step = config.paddle.step_percent
        self._width_px = config.paddle.width
        self._height_px = config.paddle.height

    @property
    def step_percent(self) -> float:
        return self._step

    def centered(self) -> PaddleState:
        """A paddle at the playfield center."""
        return PaddleState(x=50.0, width_px=self._width_px, height_px=self._height_px)

    def bounds(self, paddle: PaddleState, playfield: Playfield) -> Tuple[float, float]:
        """Allowed range for the paddle center, in percent."""
        half = min(paddle.width_percent(playfield), 100.0) / 2.0
        return (half, 100.0 - half)

    def clamp(self, paddle: PaddleState, playfield: Playfield) -> PaddleState:
        """Pull the paddle back inside the playfield (e.g. after a resize)."""
        if playfield.is_degenerate:
            return paddle
        low, high = self.bounds(paddle, playfield)
        return paddle.moved_to(max(low, min(high, paddle.x)))

    def apply_intent(
        self,
        paddle: PaddleState,
        intent: Union[Intent, str],
        status: GameStatus,
        playfield: Playfield
    ) -> PaddleState:
        """
        Apply one directional intent.

        Args:
            paddle: Current paddle.
            intent: LEFT or RIGHT.
            status: Current game status.
            playfield: Current playfield dimensions.

        Returns:
            New paddle state, or the same paddle if the intent is ignored.
        """
        intent = Intent.parse(intent)
        if status is not GameStatus.ACTIVE or playfield.is_degenerate:
            return paddle

        delta = -self._step if intent is Intent.LEFT else self._step
        low, high = self.bounds(paddle, playfield)
        return paddle.moved_to(max(low, min(high, paddle.x + delta)))
