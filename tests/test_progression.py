"""
Tests for score, lives, level and the game status state machine.
"""

import pytest

from catchball.catch_core.config_loader import load_config
from catchball.catch_core.progression import GameStatus, ProgressionController


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def progression(config):
    controller = ProgressionController(config)
    controller.start()
    return controller


class TestStart:
    """Test IDLE/OVER -> ACTIVE."""

    def test_initially_idle(self, config):
        controller = ProgressionController(config)
        assert controller.status is GameStatus.IDLE

    def test_start_resets(self, progression):
        assert progression.status is GameStatus.ACTIVE
        assert progression.score == 0
        assert progression.lives == 3
        assert progression.level == 1

    def test_apply_while_idle_is_noop(self, config):
        controller = ProgressionController(config)
        delta = controller.apply(5, 5)

        assert delta.before == delta.after
        assert controller.status is GameStatus.IDLE

    def test_restart_after_over(self, progression):
        progression.apply(0, 3)
        assert progression.status is GameStatus.OVER

        progression.start()
        assert progression.status is GameStatus.ACTIVE
        assert (progression.score, progression.lives, progression.level) == (0, 3, 1)


class TestScoring:
    """Test per-tick accounting."""

    def test_catch_reward_is_ten(self, progression):
        delta = progression.apply(2, 0)

        assert delta.score_gained == 20
        assert progression.score == 20

    def test_miss_costs_a_life(self, progression):
        delta = progression.apply(0, 1)

        assert delta.lives_lost == 1
        assert progression.lives == 2
        assert progression.status is GameStatus.ACTIVE

    def test_catch_and_miss_same_tick(self, progression):
        progression.apply(1, 1)

        assert progression.score == 10
        assert progression.lives == 2

    @pytest.mark.parametrize("caught,missed", [(0, 0), (1, 0), (0, 1), (3, 2)])
    def test_accounting_identity(self, progression, caught, missed):
        before = progression.state
        delta = progression.apply(caught, missed)

        assert delta.after.score == before.score + 10 * caught
        assert delta.after.lives == before.lives - missed


class TestLevelUp:
    """Test level thresholds."""

    def test_level_up_at_threshold(self, progression):
        delta = progression.apply(10, 0)

        assert delta.leveled_up
        assert delta.new_level == 2
        assert progression.lives == 4

    def test_threshold_scales_with_level(self, progression):
        progression.apply(10, 0)          # 100 -> level 2
        delta = progression.apply(9, 0)   # 190 < 200
        assert not delta.leveled_up
        assert progression.level == 2

        delta = progression.apply(1, 0)   # 200 -> level 3
        assert delta.leveled_up
        assert progression.level == 3

    def test_single_level_per_tick_on_overshoot(self, progression):
        """A 300-point jump from level 1 gives level 2 and one bonus life."""
        delta = progression.apply(30, 0)

        assert progression.score == 300
        assert progression.level == 2
        assert progression.lives == 4
        assert delta.leveled_up

    def test_no_level_up_without_score_gain(self, progression):
        progression.apply(30, 0)          # level 2, score 300 >= 200
        delta = progression.apply(0, 0)

        assert not delta.leveled_up
        assert progression.level == 2

        delta = progression.apply(1, 0)   # score increases, catches up one level
        assert delta.leveled_up
        assert progression.level == 3

    def test_level_never_decreases(self, progression):
        levels = []
        for caught, missed in [(10, 0), (0, 1), (5, 0), (5, 1), (0, 1)]:
            progression.apply(caught, missed)
            levels.append(progression.level)

        assert levels == sorted(levels)


class TestGameOver:
    """Test ACTIVE -> OVER."""

    def test_over_when_lives_reach_zero(self, progression):
        progression.apply(0, 2)
        assert progression.status is GameStatus.ACTIVE

        delta = progression.apply(0, 1)
        assert delta.game_over
        assert progression.status is GameStatus.OVER
        assert progression.lives == 0

    def test_lives_floor_at_zero(self, progression):
        delta = progression.apply(0, 5)

        assert progression.lives == 0
        assert delta.lives_lost == 3
        assert delta.game_over

    def test_apply_after_over_is_noop(self, progression):
        progression.apply(1, 3)
        state = progression.state

        delta = progression.apply(4, 0)
        assert not delta.game_over
        assert progression.state == state

    def test_score_kept_at_game_over(self, progression):
        progression.apply(4, 0)
        progression.apply(0, 3)

        assert progression.score == 40
        assert progression.status is GameStatus.OVER

    def test_level_up_bonus_applies_before_terminal_check(self, progression):
        progression.apply(9, 2)           # score 90, lives 1
        delta = progression.apply(1, 1)   # reaches 100, loses last life, gains bonus

        assert delta.leveled_up
        assert progression.lives == 1
        assert progression.status is GameStatus.ACTIVE
