"""
Integrator
==========

Constant-velocity vertical fall. Purely kinematic: no bounds or collision
logic lives here.
"""

from __future__ import annotations

from typing import Iterable, List

from catchball.catch_core.entities import FallingObject


def fall_delta_percent(speed: float, playfield_height_px: float) -> float:
    """Convert a per-tick pixel speed to a per-tick percent of playfield height."""
    if playfield_height_px <= 0:
        raise ValueError(f"Playfield height must be positive, got {playfield_height_px}")
    return speed * (100.0 / playfield_height_px)


def advance(obj: FallingObject, playfield_height_px: float) -> FallingObject:
    """Return ``obj`` moved down by one tick."""
    return obj.moved_to(obj.y + fall_delta_percent(obj.speed, playfield_height_px))


def advance_all(
    objects: Iterable[FallingObject],
    playfield_height_px: float
) -> List[FallingObject]:
    """Advance every object by one tick, preserving order."""
    return [advance(obj, playfield_height_px) for obj in objects]
