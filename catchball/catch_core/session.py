"""
Session
=======

Main game orchestrator combining the clock, spawner, integrator, collision
resolver, progression and input.

One tick, in fixed order:
    Spawner -> Integrator -> CollisionResolver -> ProgressionController
    -> terminal check (cancels the clock on game over)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from catchball.catch_core.clock import Clock, ClockState
from catchball.catch_core.collision import CollisionOutcome, CollisionResolver
from catchball.catch_core.config_loader import GameConfig, get_config
from catchball.catch_core.entities import FallingObject, PaddleState, Playfield
from catchball.catch_core.events import EventListener, GameEvent
from catchball.catch_core.input_controller import InputController, Intent
from catchball.catch_core.integrator import advance_all
from catchball.catch_core.progression import (
    GameStatus,
    ProgressionController,
    ProgressState,
    TickDelta,
)
from catchball.catch_core.rng import RandomSource
from catchball.catch_core.spawner import Spawner
from catchball.catch_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    """Result of a single tick."""
    timestamp_ms: float
    spawned: Optional[FallingObject]
    outcome: CollisionOutcome
    delta: TickDelta

    @property
    def terminated(self) -> bool:
        return self.delta.game_over


class Session:
    """
    One play of the game, restartable any number of times.

    The session exclusively owns the live objects, the paddle and the clock
    handle. Objects and paddle change only inside a tick or an intent;
    listeners receive events but get no mutable access.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        time_source: Optional[Callable[[], float]] = None
    ):
        """
        Initialize session.

        Args:
            config: Game configuration. Uses default if None.
            seed: Seed for the spawn random source. Ignored if ``rng`` is given.
            rng: Random source to inject (e.g. a seeded one in tests).
            time_source: Millisecond clock for ``pump()`` without a timestamp.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else RandomSource(seed)

        # Subsystems
        self._clock = Clock(config.clock.tick_interval_ms, time_source)
        self._spawner = Spawner(config, self._rng)
        self._resolver = CollisionResolver()
        self._progression = ProgressionController(config)
        self._input = InputController(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Session state
        self._playfield = Playfield(
            width_px=config.playfield.width,
            height_px=config.playfield.height,
            object_size_px=config.playfield.object_size
        )
        self._paddle: PaddleState = self._input.centered()
        self._objects: List[FallingObject] = []
        self._last_spawn_ms: Optional[float] = None
        self._tick_count: int = 0
        self._in_tick: bool = False
        self._listeners: List[EventListener] = []

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def progression(self) -> ProgressionController:
        return self._progression

    @property
    def status(self) -> GameStatus:
        return self._progression.status

    @property
    def state(self) -> ProgressState:
        return self._progression.state

    @property
    def score(self) -> int:
        return self._progression.score

    @property
    def lives(self) -> int:
        return self._progression.lives

    @property
    def level(self) -> int:
        return self._progression.level

    @property
    def is_over(self) -> bool:
        return self.status is GameStatus.OVER

    @property
    def paddle(self) -> PaddleState:
        return self._paddle

    @property
    def playfield(self) -> Playfield:
        return self._playfield

    @property
    def objects(self) -> Tuple[FallingObject, ...]:
        """Live falling objects, in spawn order."""
        return tuple(self._objects)

    @property
    def tick_count(self) -> int:
        """Ticks executed since the last start."""
        return self._tick_count

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> None:
        """Register a listener for game events."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener %r failed on %r", listener, event)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a new game from IDLE or OVER.

        Clears all objects, recenters the paddle, resets score/lives/level and
        starts a fresh clock handle. Any tick scheduled by a previous game is
        invalidated.

        Args:
            seed: Reseed the spawn random source. Keeps current if None.

        Returns:
            Initial game snapshot.
        """
        self._clock.cancel()

        self._objects = []
        self._paddle = self._input.clamp(self._input.centered(), self._playfield)
        self._last_spawn_ms = None
        self._tick_count = 0
        self._spawner.reset(seed)
        self._progression.start()

        self._clock.start(self._on_tick)
        logger.info("Game started")
        self._emit(GameEvent.game_started())
        return self.snapshot()

    def stop(self) -> None:
        """Cancel the clock. Idempotent; game state is left as is."""
        self._clock.cancel()

    def intent(self, direction: Union[Intent, str]) -> PaddleState:
        """
        Move the paddle one step. Ignored unless the game is ACTIVE.

        Args:
            direction: ``Intent.LEFT``/``Intent.RIGHT`` or "left"/"right".

        Returns:
            The paddle after the intent.
        """
        self._paddle = self._input.apply_intent(
            self._paddle, direction, self.status, self._playfield
        )
        return self._paddle

    def resize(self, width_px: float, height_px: float) -> None:
        """
        Update the playfield size (e.g. on window resize).

        Zero or negative dimensions are accepted; ticks are no-ops until the
        playfield is valid again.
        """
        self._playfield = Playfield(
            width_px=width_px,
            height_px=height_px,
            object_size_px=self._playfield.object_size_px
        )
        self._paddle = self._input.clamp(self._paddle, self._playfield)

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def pump(self, now_ms: Optional[float] = None) -> bool:
        """
        Host entry point: fire a tick if one is due.

        Args:
            now_ms: Host timestamp in ms. Reads the clock's time source if None.

        Returns:
            True if a tick ran.
        """
        return self._clock.pump(now_ms)

    def _on_tick(self, now_ms: float) -> None:
        self.tick(now_ms)

    def tick(self, now_ms: float) -> Optional[TickResult]:
        """
        Execute one simulation step.

        Args:
            now_ms: Tick timestamp in ms.

        Returns:
            TickResult, or None if the tick was skipped (not ACTIVE, clock
            not running, degenerate playfield, or re-entrant call).
        """
        if self.status is not GameStatus.ACTIVE or self._clock.state is not ClockState.RUNNING:
            return None
        if self._in_tick:
            logger.warning("Ignoring re-entrant tick at %.1f ms", now_ms)
            return None
        if self._playfield.is_degenerate:
            logger.debug("Degenerate playfield %r, skipping tick", self._playfield)
            return None

        self._in_tick = True
        try:
            return self._run_tick(now_ms)
        finally:
            self._in_tick = False

    def _run_tick(self, now_ms: float) -> TickResult:
        level = self._progression.level

        # Spawn
        elapsed = None if self._last_spawn_ms is None else now_ms - self._last_spawn_ms
        spawned = self._spawner.maybe_spawn(level, elapsed)
        if spawned is not None:
            self._objects.append(spawned)
            self._last_spawn_ms = now_ms

        # Advance and resolve
        advanced = advance_all(self._objects, self._playfield.height_px)
        outcome = self._resolver.resolve(advanced, self._paddle, self._playfield)
        self._objects = list(outcome.falling)

        # Progression
        delta = self._progression.apply(len(outcome.caught), len(outcome.missed))
        self._tick_count += 1

        # Terminal check
        if delta.game_over:
            self._clock.cancel()

        for obj in outcome.caught:
            self._emit(GameEvent.object_caught(obj.uid))
        for obj in outcome.missed:
            self._emit(GameEvent.object_missed(obj.uid))
        if delta.leveled_up:
            logger.info("Level up: %d (score %d)", delta.new_level, delta.after.score)
            self._emit(GameEvent.level_up(delta.new_level))
        if delta.game_over:
            logger.info("Game over: score=%d, level=%d", delta.after.score, delta.after.level)
            self._emit(GameEvent.game_over(delta.after.score, delta.after.level))

        return TickResult(
            timestamp_ms=now_ms,
            spawned=spawned,
            outcome=outcome,
            delta=delta
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Build a read-only snapshot for rendering."""
        return self._snapshot_builder.build(
            progress=self._progression.state,
            paddle=self._paddle,
            playfield=self._playfield,
            objects=self._objects,
            tick_count=self._tick_count
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self.score,
            "lives": self.lives,
            "level": self.level,
            "status": self.status.value,
            "objects_count": len(self._objects),
            "tick_count": self._tick_count,
            "spawn_interval_ms": self._spawner.spawn_interval(self.level),
        }
