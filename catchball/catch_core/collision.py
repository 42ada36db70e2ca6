"""
Collision Resolver
==================

Classifies advanced objects as caught, missed or still falling against the
paddle's bounding box.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from catchball.catch_core.entities import FallingObject, PaddleState, Playfield


@dataclass(frozen=True)
class CollisionOutcome:
    """Partition of one tick's objects. Input order is preserved in each group."""
    caught: Tuple[FallingObject, ...]
    missed: Tuple[FallingObject, ...]
    falling: Tuple[FallingObject, ...]

    @property
    def total(self) -> int:
        return len(self.caught) + len(self.missed) + len(self.falling)


class CollisionResolver:
    """
    Paddle collision tests, done in pixel space.

    An object is caught when its bottom edge is inside the catch band
    ``[H - paddle_height, H]`` and its horizontal center is inside
    ``[paddle_center - width/2, paddle_center + width/2]``. Both ranges are
    inclusive. A non-caught object stays falling while its center is above
    ``H + object_size``; past that it is missed.
    """

    def is_caught(
        self,
        obj: FallingObject,
        paddle: PaddleState,
        playfield: Playfield
    ) -> bool:
        """Check whether a single object lands on the paddle."""
        height = playfield.height_px
        bottom = playfield.percent_to_px_y(obj.y) + playfield.object_size_px / 2.0
        if not (height - paddle.height_px <= bottom <= height):
            return False

        center_x = playfield.percent_to_px_x(obj.x)
        paddle_x = playfield.percent_to_px_x(paddle.x)
        half_width = paddle.width_px / 2.0
        return paddle_x - half_width <= center_x <= paddle_x + half_width

    def is_falling(self, obj: FallingObject, playfield: Playfield) -> bool:
        """True while the object has not fully passed the bottom of the playfield."""
        return playfield.percent_to_px_y(obj.y) < playfield.height_px + playfield.object_size_px

    def resolve(
        self,
        objects: Iterable[FallingObject],
        paddle: PaddleState,
        playfield: Playfield
    ) -> CollisionOutcome:
        """
        Partition objects into caught, missed and falling.

        Args:
            objects: Objects already advanced for this tick.
            paddle: Paddle position at resolve time.
            playfield: Current playfield dimensions.

        Returns:
            CollisionOutcome with every input object in exactly one group.
        """
        caught: List[FallingObject] = []
        missed: List[FallingObject] = []
        falling: List[FallingObject] = []

        for obj in objects:
            if self.is_caught(obj, paddle, playfield):
                caught.append(obj)
            elif self.is_falling(obj, playfield):
                falling.append(obj)
            else:
                missed.append(obj)

        return CollisionOutcome(tuple(caught), tuple(missed), tuple(falling))
