"""
Game Events
===========

Discrete notifications published by the Session. Listeners only observe;
nothing they do feeds back into the simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class EventKind(str, Enum):
    GAME_STARTED = "game_started"
    OBJECT_CAUGHT = "object_caught"
    OBJECT_MISSED = "object_missed"
    LEVEL_UP = "level_up"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    """Record of a game event. Only the fields named for its kind are set."""
    kind: EventKind
    object_uid: Optional[int] = None
    level: Optional[int] = None
    score: Optional[int] = None

    @staticmethod
    def game_started() -> "GameEvent":
        return GameEvent(EventKind.GAME_STARTED)

    @staticmethod
    def object_caught(object_uid: int) -> "GameEvent":
        return GameEvent(EventKind.OBJECT_CAUGHT, object_uid=object_uid)

    @staticmethod
    def object_missed(object_uid: int) -> "GameEvent":
        return GameEvent(EventKind.OBJECT_MISSED, object_uid=object_uid)

    @staticmethod
    def level_up(level: int) -> "GameEvent":
        return GameEvent(EventKind.LEVEL_UP, level=level)

    @staticmethod
    def game_over(score: int, level: int) -> "GameEvent":
        return GameEvent(EventKind.GAME_OVER, score=score, level=level)

    def __repr__(self) -> str:
        if self.kind in (EventKind.OBJECT_CAUGHT, EventKind.OBJECT_MISSED):
            return f"GameEvent({self.kind.value}, uid={self.object_uid})"
        if self.kind is EventKind.LEVEL_UP:
            return f"GameEvent(level_up={self.level})"
        if self.kind is EventKind.GAME_OVER:
            return f"GameEvent(game_over, score={self.score}, level={self.level})"
        return f"GameEvent({self.kind.value})"


EventListener = Callable[[GameEvent], None]
