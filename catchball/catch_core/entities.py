"""
Entities
========

Plain value types for the things that live on the playfield: falling objects,
the paddle, and the playfield itself.

Horizontal and vertical positions are percentages of the playfield so the
simulation is independent of the window size; sizes are pixels.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Playfield:
    """Current playfield dimensions in pixels."""
    width_px: float
    height_px: float
    object_size_px: float

    @property
    def is_degenerate(self) -> bool:
        """True if any dimension is zero or negative (ticks become no-ops)."""
        return self.width_px <= 0 or self.height_px <= 0 or self.object_size_px <= 0

    def percent_to_px_x(self, x_percent: float) -> float:
        return x_percent / 100.0 * self.width_px

    def percent_to_px_y(self, y_percent: float) -> float:
        return y_percent / 100.0 * self.height_px


@dataclass(frozen=True)
class FallingObject:
    """
    A single falling object.

    ``x`` and ``y`` locate the object's center. ``speed`` is pixels per tick
    and never changes after creation; the Integrator converts it to percent.
    """
    uid: int
    x: float
    y: float
    speed: float
    tag: str

    def moved_to(self, y: float) -> "FallingObject":
        """Copy of this object at a new vertical position."""
        return replace(self, y=y)

    def __repr__(self) -> str:
        return f"FallingObject({self.uid}: x={self.x:.1f}%, y={self.y:.1f}%, {self.tag})"


@dataclass(frozen=True)
class PaddleState:
    """Paddle center (percent) with fixed pixel size."""
    x: float
    width_px: float
    height_px: float

    def width_percent(self, playfield: Playfield) -> float:
        """Paddle width as a percentage of the playfield width."""
        return self.width_px / playfield.width_px * 100.0

    def moved_to(self, x: float) -> "PaddleState":
        return replace(self, x=x)
