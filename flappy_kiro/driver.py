"""Frame driving: one tick plus one render per invocation, and the app entry point."""

from __future__ import annotations

import logging
import os
import sys

import pygame

from .config import FPS, WINDOW_HEIGHT, WINDOW_WIDTH, high_score_path
from .game import Game
from .render import Renderer
from .storage import JsonFileStore

logger = logging.getLogger(__name__)


class FrameDriver:
    """Pulls tick then render in lockstep; usable headless as a stepper."""

    def __init__(self, game: Game, renderer: Renderer | None = None) -> None:
        self.game = game
        self.renderer = renderer
        self.frames = 0

    def step(self) -> None:
        self.game.tick()
        if self.renderer is not None:
            self.renderer.draw(self.game)
        self.frames += 1

    def run_frames(self, n: int) -> None:
        for _ in range(n):
            self.step()


def is_activate_event(event: pygame.event.Event) -> bool:
    if event.type == pygame.KEYDOWN:
        return event.key == pygame.K_SPACE
    if event.type == pygame.MOUSEBUTTONDOWN:
        return event.button == 1
    return False


class PygameDriver(FrameDriver):
    """Real-time loop synchronised to the display via ``pygame.time.Clock``."""

    def __init__(self, game: Game, screen: pygame.Surface | None = None) -> None:
        pygame.init()
        if screen is None:
            screen = pygame.display.set_mode((game.width, game.height), pygame.DOUBLEBUF)
        pygame.display.set_caption("Flappy Kiro")
        super().__init__(game, Renderer(screen))
        self.clock = pygame.time.Clock()
        self.paused = False
        self.running = True

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type in (pygame.WINDOWMINIMIZED, pygame.WINDOWHIDDEN):
            if not self.paused:
                logger.debug("Window hidden; pausing")
            self.paused = True
        elif event.type in (pygame.WINDOWRESTORED, pygame.WINDOWSHOWN):
            self.paused = False
        elif is_activate_event(event):
            self.game.activate()

    def run(self) -> None:
        while self.running:
            self.clock.tick(FPS)
            # Input is applied between ticks, never during one.
            for event in pygame.event.get():
                self.handle_event(event)
            if not self.running:
                break
            if self.paused:
                continue
            self.step()
            pygame.display.flip()
        pygame.quit()


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("FLAPPY_KIRO_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = JsonFileStore(high_score_path())
    game = Game(WINDOW_WIDTH, WINDOW_HEIGHT, store=store)
    logger.info("Starting Flappy Kiro (high score %d)", game.high_score)
    PygameDriver(game).run()
    sys.exit(0)
