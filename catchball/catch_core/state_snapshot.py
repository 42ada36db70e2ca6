"""
State Snapshot
==============

Read-only view of a session for renderers and agents. Object data is packed
into fixed-size numpy arrays with a mask for the variable object count.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from catchball.catch_core.config_loader import GameConfig, get_config
from catchball.catch_core.entities import FallingObject, PaddleState, Playfield
from catchball.catch_core.progression import GameStatus, ProgressState

STATUS_CODES = {
    GameStatus.IDLE: 0,
    GameStatus.ACTIVE: 1,
    GameStatus.OVER: 2,
}


@dataclass(frozen=True)
class GameSnapshot:
    """
    Everything a renderer needs for one frame.

    ``objects`` holds every live object; the padded arrays hold at most
    ``max_objects`` of them, in spawn order.
    """
    # Progression
    score: int
    lives: int
    level: int
    status: GameStatus
    tick_count: int

    # Paddle
    paddle_x: float
    paddle_width_px: float
    paddle_height_px: float

    # Playfield (for de-normalization)
    playfield_width: float
    playfield_height: float
    object_size: float

    objects: Tuple[FallingObject, ...]
    objects_count: int

    # Object arrays (fixed size, padded)
    obj_uid: np.ndarray               # (MAX_OBJ,) int64
    obj_x: np.ndarray                 # (MAX_OBJ,) float32
    obj_y: np.ndarray                 # (MAX_OBJ,) float32
    obj_speed: np.ndarray             # (MAX_OBJ,) float32
    obj_tag: np.ndarray               # (MAX_OBJ,) int16, palette index
    obj_mask: np.ndarray              # (MAX_OBJ,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "level": np.array(self.level, dtype=np.int32),
            "status": np.array(STATUS_CODES[self.status], dtype=np.int32),
            "paddle_x": np.array(self.paddle_x, dtype=np.float32),
            "objects_count": np.array(self.objects_count, dtype=np.int32),
            "obj_x": self.obj_x,
            "obj_y": self.obj_y,
            "obj_speed": self.obj_speed,
            "obj_tag": self.obj_tag,
            "obj_mask": self.obj_mask,
        }


class SnapshotBuilder:
    """Builds snapshots. Arrays are fresh per snapshot so old ones stay valid."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_objects = config.observation.max_objects
        self._palette = config.spawn.palette

    @property
    def max_objects(self) -> int:
        return self._max_objects

    def build(
        self,
        progress: ProgressState,
        paddle: PaddleState,
        playfield: Playfield,
        objects: Sequence[FallingObject],
        tick_count: int
    ) -> GameSnapshot:
        """Build a snapshot from current session state."""
        obj_uid = np.full(self._max_objects, -1, dtype=np.int64)
        obj_x = np.zeros(self._max_objects, dtype=np.float32)
        obj_y = np.zeros(self._max_objects, dtype=np.float32)
        obj_speed = np.zeros(self._max_objects, dtype=np.float32)
        obj_tag = np.full(self._max_objects, -1, dtype=np.int16)
        obj_mask = np.zeros(self._max_objects, dtype=bool)

        count = min(len(objects), self._max_objects)
        for i, obj in enumerate(objects[:count]):
            obj_uid[i] = obj.uid
            obj_x[i] = obj.x
            obj_y[i] = obj.y
            obj_speed[i] = obj.speed
            obj_tag[i] = self._tag_index(obj.tag)
            obj_mask[i] = True

        for array in (obj_uid, obj_x, obj_y, obj_speed, obj_tag, obj_mask):
            array.flags.writeable = False

        return GameSnapshot(
            score=progress.score,
            lives=progress.lives,
            level=progress.level,
            status=progress.status,
            tick_count=tick_count,
            paddle_x=paddle.x,
            paddle_width_px=paddle.width_px,
            paddle_height_px=paddle.height_px,
            playfield_width=playfield.width_px,
            playfield_height=playfield.height_px,
            object_size=playfield.object_size_px,
            objects=tuple(objects),
            objects_count=len(objects),
            obj_uid=obj_uid,
            obj_x=obj_x,
            obj_y=obj_y,
            obj_speed=obj_speed,
            obj_tag=obj_tag,
            obj_mask=obj_mask
        )

    def _tag_index(self, tag: str) -> int:
        try:
            return self._palette.index(tag)
        except ValueError:
            return -1
