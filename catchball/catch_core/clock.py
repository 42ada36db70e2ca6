"""
Clock
=====

Fixed-cadence tick scheduler driven by host timestamps.

The host (a pygame frame loop, a timer, a Gymnasium step) calls ``pump``
with a monotonically increasing millisecond timestamp. The clock fires at
most one tick per pump once ``tick_interval_ms`` has elapsed since the
previous tick.

Every ``start`` issues a new TickHandle tagged with a generation number.
``cancel`` bumps the generation, so any handle from before the cancel,
including one held by a host timer that fires late, can never run its
callback again.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


def monotonic_ms() -> float:
    """Default time source: monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class ClockState(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class TickHandle:
    """
    One scheduling lease on a Clock.

    A handle is live only while its generation matches the clock's and the
    clock is running.
    """

    def __init__(self, clock: "Clock", generation: int, callback: TickCallback):
        self._clock = clock
        self._generation = generation
        self._callback = callback

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_live(self) -> bool:
        return self._clock.is_current(self)

    def fire(self, now_ms: float) -> bool:
        """
        Run the tick callback if this handle is still live.

        Returns:
            True if the callback ran.
        """
        if not self.is_live:
            return False
        self._callback(now_ms)
        return True

    def cancel(self) -> None:
        """Cancel the clock if this handle is still the live one."""
        if self.is_live:
            self._clock.cancel()


class Clock:
    """
    Cancellable tick scheduler.

    Lifecycle: CREATED -> RUNNING -> STOPPED, and back to RUNNING on the next
    ``start``. ``cancel`` is idempotent.
    """

    def __init__(
        self,
        tick_interval_ms: float,
        time_source: Optional[Callable[[], float]] = None
    ):
        """
        Initialize clock.

        Args:
            tick_interval_ms: Minimum spacing between ticks.
            time_source: Returns the current time in ms. Monotonic if None.
        """
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")

        self._interval = float(tick_interval_ms)
        self._time_source = time_source or monotonic_ms
        self._state = ClockState.CREATED
        self._generation: int = 0
        self._handle: Optional[TickHandle] = None
        self._last_tick_ms: Optional[float] = None

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def tick_interval_ms(self) -> float:
        return self._interval

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def handle(self) -> Optional[TickHandle]:
        """The live handle, or None when not running."""
        return self._handle

    @property
    def is_running(self) -> bool:
        return self._state is ClockState.RUNNING

    def now(self) -> float:
        return self._time_source()

    def is_current(self, handle: TickHandle) -> bool:
        return (
            self._state is ClockState.RUNNING
            and handle is self._handle
            and handle.generation == self._generation
        )

    def start(self, on_tick: TickCallback) -> TickHandle:
        """
        Start (or restart) ticking.

        Any previously issued handle is invalidated first.

        Args:
            on_tick: Called with the tick timestamp in ms.

        Returns:
            The new live handle.
        """
        self.cancel()
        self._generation += 1
        self._handle = TickHandle(self, self._generation, on_tick)
        self._state = ClockState.RUNNING
        self._last_tick_ms = None
        logger.debug("Clock started (generation %d)", self._generation)
        return self._handle

    def cancel(self) -> None:
        """Stop ticking. Safe to call any number of times."""
        if self._state is not ClockState.RUNNING:
            return
        self._generation += 1
        self._handle = None
        self._state = ClockState.STOPPED
        logger.debug("Clock cancelled (generation now %d)", self._generation)

    def is_due(self, now_ms: float) -> bool:
        """True if a tick should fire at ``now_ms``."""
        if self._state is not ClockState.RUNNING:
            return False
        if self._last_tick_ms is None:
            return True
        return now_ms - self._last_tick_ms >= self._interval

    def pump(self, now_ms: Optional[float] = None) -> bool:
        """
        Fire one tick if due.

        Args:
            now_ms: Host timestamp in ms. Reads the time source if None.
                Timestamps earlier than the last tick never fire.

        Returns:
            True if a tick fired.
        """
        if now_ms is None:
            now_ms = self.now()

        handle = self._handle
        if handle is None or not self.is_due(now_ms):
            return False

        self._last_tick_ms = now_ms
        return handle.fire(now_ms)
