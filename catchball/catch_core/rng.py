"""
RNG - Injectable Random Source
==============================

Wraps ``random.Random`` so spawn attributes can be drawn from a seeded
generator in tests and from fresh entropy in normal play.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Random source used by the Spawner.

    Pass a seed for a reproducible sequence, or leave it as None for real
    entropy. Any object with ``uniform`` and ``choice`` methods can be
    injected in its place.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        """Seed the source was last (re)initialized with."""
        return self._seed

    def uniform(self, low: float, high: float) -> float:
        """Draw a float uniformly from [low, high]."""
        return self._rng.uniform(low, high)

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return self._rng.choice(options)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the source with optional new seed.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
