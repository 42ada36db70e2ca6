"""
Tests for the Session orchestrator.
"""

import pytest

from catchball.catch_core.clock import ClockState
from catchball.catch_core.config_loader import load_config
from catchball.catch_core.events import EventKind
from catchball.catch_core.progression import GameStatus
from catchball.catch_core.session import Session

TICK_MS = 16


class CenterRandom:
    """Always draws the midpoint: objects spawn above the centered paddle."""

    def uniform(self, low, high):
        return (low + high) / 2.0

    def choice(self, options):
        return options[0]

    def reset(self, seed=None):
        pass


class EdgeRandom(CenterRandom):
    """Always draws the low end: objects spawn at the left margin."""

    def uniform(self, low, high):
        return low


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def events():
    return []


def make_session(config, events, rng=None, seed=42):
    session = Session(config=config, seed=seed, rng=rng)
    session.subscribe(events.append)
    return session


def run_ticks(session, count, start_ms=0.0):
    """Tick ``count`` times at the configured cadence; returns results."""
    results = []
    now = start_ms
    for _ in range(count):
        results.append(session.tick(now))
        now += TICK_MS
    return results


def run_until_over(session, limit=20000):
    now = 0.0
    for _ in range(limit):
        session.tick(now)
        now += TICK_MS
        if session.is_over:
            return now
    raise AssertionError("game did not end")


class TestStart:
    """Test session start and restart."""

    def test_idle_before_start(self, config, events):
        session = make_session(config, events)

        assert session.status is GameStatus.IDLE
        assert session.tick(0) is None
        assert session.clock.state is ClockState.CREATED

    def test_start(self, config, events):
        session = make_session(config, events)
        snapshot = session.start()

        assert snapshot.status is GameStatus.ACTIVE
        assert (snapshot.score, snapshot.lives, snapshot.level) == (0, 3, 1)
        assert snapshot.objects_count == 0
        assert snapshot.paddle_x == 50.0
        assert session.clock.state is ClockState.RUNNING
        assert [e.kind for e in events] == [EventKind.GAME_STARTED]

    def test_restart_clears_objects_and_paddle(self, config, events):
        session = make_session(config, events)
        session.start()
        session.intent("left")
        run_ticks(session, 50)
        assert session.objects

        session.start()

        assert session.objects == ()
        assert session.paddle.x == 50.0
        assert session.tick_count == 0

    def test_restart_after_game_over(self, config, events):
        session = make_session(config, events, rng=EdgeRandom())
        session.start()
        run_until_over(session)

        session.start()

        assert session.status is GameStatus.ACTIVE
        assert (session.score, session.lives, session.level) == (0, 3, 1)
        assert session.objects == ()
        assert session.clock.is_running


class TestTick:
    """Test the per-tick pipeline."""

    def test_first_tick_spawns(self, config, events):
        session = make_session(config, events)
        session.start()

        result = session.tick(0)

        assert result.spawned is not None
        assert len(session.objects) == 1

    def test_at_most_one_spawn_per_tick(self, config, events):
        session = make_session(config, events)
        session.start()

        now = 0.0
        for _ in range(20):
            before = len(session.objects)
            result = session.tick(now)
            assert len(session.objects) - before <= 1
            assert result.spawned is not None
            now += 10000.0

    def test_spawn_respects_interval(self, config, events):
        session = make_session(config, events)
        session.start()

        results = run_ticks(session, 200)
        spawn_times = [r.timestamp_ms for r in results if r.spawned is not None]
        interval = session.spawner.spawn_interval(1)

        for earlier, later in zip(spawn_times, spawn_times[1:]):
            assert later - earlier > interval

    def test_monotonic_fall(self, config, events):
        session = make_session(config, events)
        session.start()

        last_y = {}
        now = 0.0
        for _ in range(500):
            session.tick(now)
            now += TICK_MS
            for obj in session.objects:
                if obj.uid in last_y:
                    assert obj.y >= last_y[obj.uid]
                last_y[obj.uid] = obj.y

    def test_accounting_every_tick(self, config, events):
        session = make_session(config, events)
        session.start()

        now = 0.0
        for _ in range(3000):
            before = session.state
            result = session.tick(now)
            now += TICK_MS
            if result is None:
                break

            caught = len(result.outcome.caught)
            missed = len(result.outcome.missed)
            bonus = config.progression.level_up_bonus_lives if result.delta.leveled_up else 0

            assert session.score == before.score + 10 * caught
            assert session.lives == max(0, before.lives - missed) + bonus

    def test_centered_objects_are_caught(self, config, events):
        session = make_session(config, events, rng=CenterRandom())
        session.start()

        run_ticks(session, 400)

        caught = [e for e in events if e.kind is EventKind.OBJECT_CAUGHT]
        assert caught
        assert not [e for e in events if e.kind is EventKind.OBJECT_MISSED]
        assert session.score == 10 * len(caught)
        assert session.lives == 3

    def test_level_up_event(self, config, events):
        session = make_session(config, events, rng=CenterRandom())
        session.start()

        now = 0.0
        while session.level == 1 and now < 60000:
            session.tick(now)
            now += TICK_MS

        level_ups = [e for e in events if e.kind is EventKind.LEVEL_UP]
        assert session.level == 2
        assert session.lives == 4
        assert [e.level for e in level_ups] == [2]

    def test_snapshot_reflects_tick(self, config, events):
        session = make_session(config, events)
        session.start()
        run_ticks(session, 10)

        snapshot = session.snapshot()
        assert snapshot.tick_count == 10
        assert snapshot.objects == session.objects
        assert snapshot.paddle_x == session.paddle.x


class TestGameOver:
    """Test the terminal transition and tick cancellation."""

    def test_missed_objects_end_game(self, config, events):
        session = make_session(config, events, rng=EdgeRandom())
        session.start()

        run_until_over(session)

        assert session.status is GameStatus.OVER
        assert session.lives == 0
        assert session.clock.state is ClockState.STOPPED
        missed = [e for e in events if e.kind is EventKind.OBJECT_MISSED]
        assert len(missed) == 3

    def test_single_game_over_event(self, config, events):
        session = make_session(config, events, rng=EdgeRandom())
        session.start()
        now = run_until_over(session)
        run_ticks(session, 100, start_ms=now)

        over = [e for e in events if e.kind is EventKind.GAME_OVER]
        assert len(over) == 1
        assert over[0].score == session.score
        assert over[0].level == session.level

    def test_no_tick_after_game_over(self, config, events):
        session = make_session(config, events, rng=EdgeRandom())
        session.start()
        now = run_until_over(session)
        snapshot = session.snapshot()

        assert session.tick(now + TICK_MS) is None
        assert not session.pump(now + 10000)
        after = session.snapshot()

        assert after.objects == snapshot.objects
        assert after.tick_count == snapshot.tick_count

    def test_stop_mid_sequence(self, config, events):
        session = make_session(config, events)
        session.start()
        run_ticks(session, 30)
        objects = session.objects
        count = session.tick_count

        session.stop()
        session.stop()

        assert session.tick(10000) is None
        assert not session.pump(20000)
        assert session.objects == objects
        assert session.tick_count == count

    def test_stale_handle_after_restart(self, config, events):
        session = make_session(config, events)
        session.start()
        old_handle = session.clock.handle
        run_ticks(session, 5)

        session.start()

        assert not old_handle.fire(5000)
        assert session.tick_count == 0
        assert session.objects == ()


class TestIntentsAndPlayfield:
    """Test paddle intents and degenerate playfields."""

    def test_intents_ignored_while_idle(self, config, events):
        session = make_session(config, events)
        session.intent("left")

        assert session.paddle.x == 50.0

    def test_intent_moves_paddle_immediately(self, config, events):
        session = make_session(config, events)
        session.start()
        session.intent("right")

        assert session.paddle.x == pytest.approx(50.0 + config.paddle.step_percent)

    def test_intents_ignored_after_game_over(self, config, events):
        session = make_session(config, events, rng=EdgeRandom())
        session.start()
        run_until_over(session)
        paddle = session.paddle

        session.intent("left")
        assert session.paddle == paddle

    def test_degenerate_playfield_tick_is_noop(self, config, events):
        session = make_session(config, events)
        session.start()
        run_ticks(session, 5)
        objects = session.objects

        session.resize(0, 500)
        assert session.tick(1000) is None
        assert session.objects == objects

        session.resize(1000, 500)
        assert session.tick(2000) is not None

    def test_resize_clamps_paddle(self, config, events):
        session = make_session(config, events)
        session.start()
        for _ in range(20):
            session.intent("right")

        session.resize(300, 500)

        assert session.paddle.x == pytest.approx(100 - session.paddle.width_percent(session.playfield) / 2)


class TestListeners:
    """Listeners observe but cannot break the simulation."""

    def test_failing_listener_does_not_abort_tick(self, config, events):
        session = make_session(config, events, rng=CenterRandom())

        def broken(event):
            raise RuntimeError("boom")

        session.subscribe(broken)
        session.start()
        run_ticks(session, 400)

        assert session.score > 0
        assert any(e.kind is EventKind.OBJECT_CAUGHT for e in events)

    def test_reentrant_tick_rejected(self, config, events):
        session = make_session(config, events, rng=CenterRandom())
        nested = []

        def reenter(event):
            if event.kind is EventKind.OBJECT_CAUGHT:
                nested.append(session.tick(99999))

        session.subscribe(reenter)
        session.start()
        run_ticks(session, 400)

        assert nested
        assert all(result is None for result in nested)

    def test_unsubscribe(self, config, events):
        session = make_session(config, events)
        session.unsubscribe(events.append)
        session.start()

        assert events == []


class TestPump:
    """Test host-driven ticking through the clock."""

    def test_pump_drives_ticks(self, config, events):
        session = make_session(config, events)
        session.start()

        fired = [session.pump(t) for t in (0, 5, 16, 20, 40)]

        assert fired == [True, False, True, False, True]
        assert session.tick_count == 3

    def test_pump_before_start(self, config, events):
        session = make_session(config, events)
        assert not session.pump(0)
