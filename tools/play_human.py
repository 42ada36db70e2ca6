"""
Human Play Mode
================

Play the catch game interactively with keyboard control.

Controls:
    - Left/Right or A/D: Move paddle
    - Space/Enter: Start game
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from catchball.catch_core.config_loader import load_config, GameConfig
from catchball.catch_core.events import EventKind, GameEvent
from catchball.catch_core.input_controller import Intent
from catchball.catch_core.progression import GameStatus
from catchball.catch_core.session import Session
from catchball.catch_core.state_snapshot import GameSnapshot
from catchball.logging_config import setup_logging

logger = logging.getLogger("catchball.tools.play_human")

# Palette tag -> RGB
TAG_COLORS = {
    "red": (239, 68, 68),
    "orange": (249, 115, 22),
    "yellow": (234, 179, 8),
    "green": (34, 197, 94),
    "blue": (59, 130, 246),
    "purple": (168, 85, 247),
}
DEFAULT_TAG_COLOR = (220, 220, 220)

HUD_HEIGHT = 48


class CatchRenderer:
    """Draws a snapshot: objects as circles, paddle as a rectangle, HUD on top."""

    def __init__(self):
        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 30)
        self._bg = (96, 120, 220)
        self._hud_bg = (245, 245, 250)
        self._text_dark = (40, 40, 60)
        self._paddle_color = (29, 78, 216)
        self._message = ""

    def set_message(self, message: str) -> None:
        self._message = message

    def render(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        screen.fill(self._bg)
        width = snapshot.playfield_width
        height = snapshot.playfield_height

        for obj in snapshot.objects:
            cx = int(obj.x / 100.0 * width)
            cy = HUD_HEIGHT + int(obj.y / 100.0 * height)
            color = TAG_COLORS.get(obj.tag, DEFAULT_TAG_COLOR)
            pygame.draw.circle(screen, color, (cx, cy), int(snapshot.object_size / 2))

        paddle_cx = snapshot.paddle_x / 100.0 * width
        paddle_rect = pygame.Rect(
            int(paddle_cx - snapshot.paddle_width_px / 2),
            HUD_HEIGHT + int(height - snapshot.paddle_height_px),
            int(snapshot.paddle_width_px),
            int(snapshot.paddle_height_px)
        )
        pygame.draw.rect(screen, self._paddle_color, paddle_rect, border_radius=12)

        self._draw_hud(screen, snapshot)

        if snapshot.status is not GameStatus.ACTIVE:
            self._draw_overlay(screen, snapshot)

    def _draw_hud(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        pygame.draw.rect(screen, self._hud_bg, pygame.Rect(0, 0, screen.get_width(), HUD_HEIGHT))
        text = f"Score: {snapshot.score}    Lives: {snapshot.lives}    Level: {snapshot.level}"
        surface = self._font_medium.render(text, True, self._text_dark)
        screen.blit(surface, (16, (HUD_HEIGHT - surface.get_height()) // 2))
        if self._message:
            note = self._font_medium.render(self._message, True, self._text_dark)
            screen.blit(note, (screen.get_width() - note.get_width() - 16,
                               (HUD_HEIGHT - note.get_height()) // 2))

    def _draw_overlay(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        screen.blit(overlay, (0, 0))

        if snapshot.status is GameStatus.OVER:
            title = "Game Over!"
            subtitle = f"Final Score: {snapshot.score} - press Space to play again"
        else:
            title = "Catch the falling balls!"
            subtitle = "Press Space to start"

        title_surf = self._font_large.render(title, True, (255, 255, 255))
        sub_surf = self._font_medium.render(subtitle, True, (255, 255, 255))
        cx = screen.get_width() // 2
        cy = screen.get_height() // 2
        screen.blit(title_surf, (cx - title_surf.get_width() // 2, cy - 40))
        screen.blit(sub_surf, (cx - sub_surf.get_width() // 2, cy + 20))


class HumanPlayer:
    """Interactive host: keyboard -> intents, frame timestamps -> ticks."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for human play. Install with: pip install pygame")

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        pygame.init()
        pygame.key.set_repeat(150, 40)
        self._screen = pygame.display.set_mode(
            (config.playfield.width, config.playfield.height + HUD_HEIGHT),
            pygame.RESIZABLE
        )
        pygame.display.set_caption("Catch the Ball")

        self._clock = pygame.time.Clock()
        self._renderer = CatchRenderer()
        self._session = Session(config=config, seed=seed)
        self._session.subscribe(self._on_event)
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        while self._running:
            self._handle_events()
            self._session.pump(pygame.time.get_ticks())
            self._renderer.render(self._screen, self._session.snapshot())
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        self._session.stop()
        pygame.quit()
        return self._session.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                self._session.resize(event.w, event.h - HUD_HEIGHT)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key in (pygame.K_LEFT, pygame.K_a):
                    self._session.intent(Intent.LEFT)
                elif event.key in (pygame.K_RIGHT, pygame.K_d):
                    self._session.intent(Intent.RIGHT)
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if self._session.status is not GameStatus.ACTIVE:
                        self._session.start(seed=self._seed)
                elif event.key == pygame.K_r:
                    self._session.start(seed=self._seed)

    def _on_event(self, event: GameEvent) -> None:
        if event.kind is EventKind.LEVEL_UP:
            self._renderer.set_message(f"Level {event.level}!")
        elif event.kind is EventKind.GAME_STARTED:
            self._renderer.set_message("")
        elif event.kind is EventKind.GAME_OVER:
            self._renderer.set_message(f"Final score {event.score}")


def main():
    parser = argparse.ArgumentParser(description="Play the catch game interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(args.config)
        player = HumanPlayer(config=config, seed=args.seed, target_fps=args.fps)
        score = player.run()
        logger.info("Final Score: %d", score)
        return 0
    except ImportError as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
