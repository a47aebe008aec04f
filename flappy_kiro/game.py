"""Simulation core for Flappy Kiro: session state, phases and the per-tick update."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from .config import (
    GRAVITY,
    JUMP_POWER,
    PIPE_GAP,
    PIPE_MIN_HEIGHT,
    PIPE_SPAWN_INTERVAL,
    PIPE_SPEED,
    TRAIL_EVERY,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .entities import ParticleSystem, Pipe, Player
from .storage import HighScoreBook, KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


class Phase(Enum):
    START = "start"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


@dataclass
class Session:
    """Everything that belongs to one play attempt."""

    player: Player = field(default_factory=Player)
    pipes: list[Pipe] = field(default_factory=list)
    score: int = 0
    frame_count: int = 0
    confetti_triggered: bool = False

    def reset(self) -> None:
        self.player.reset()
        self.pipes.clear()
        self.score = 0
        self.frame_count = 0
        self.confetti_triggered = False


class Game:
    """Top-level game controller: owns the phase, the session and the particles."""

    def __init__(
        self,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        store: KeyValueStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.phase = Phase.START
        self.session = Session()
        self.particles = ParticleSystem(width, height, self.rng)
        self.scores = HighScoreBook(store if store is not None else MemoryStore())
        self.scores.load()

    @property
    def high_score(self) -> int:
        return self.scores.high_score

    @property
    def player(self) -> Player:
        return self.session.player

    @property
    def pipes(self) -> list[Pipe]:
        return self.session.pipes

    def _enter(self, phase: Phase) -> None:
        logger.debug("Phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def activate(self) -> None:
        """The single input event: tap, click or spacebar."""
        if self.phase is Phase.START:
            self.reset()
            self._enter(Phase.PLAYING)
        elif self.phase is Phase.PLAYING:
            self.session.player.jump(JUMP_POWER)
        elif self.phase is Phase.GAME_OVER:
            # Session state is left alone until the next start.
            self._enter(Phase.START)

    def reset(self) -> None:
        self.session.reset()

    def tick(self) -> None:
        self.update_player()
        self.update_pipes()
        self.particles.update()
        self.check_collisions()

    def update_player(self) -> None:
        if self.phase is not Phase.PLAYING:
            return
        s = self.session
        player = s.player
        player.update(GRAVITY)
        if s.frame_count % TRAIL_EVERY == 0:
            self.particles.emit_trail(*player.center)
        if player.out_of_bounds(self.height):
            self.particles.emit_explosion(*player.center)
            self.trigger_game_over()

    def spawn_pipe(self) -> Pipe:
        top = self.rng.uniform(PIPE_MIN_HEIGHT, self.height - PIPE_GAP - PIPE_MIN_HEIGHT)
        pipe = Pipe(self.width, top, PIPE_GAP)
        self.session.pipes.append(pipe)
        return pipe

    def update_pipes(self) -> None:
        if self.phase is not Phase.PLAYING:
            return
        s = self.session
        s.frame_count += 1
        if s.frame_count % PIPE_SPAWN_INTERVAL == 0:
            self.spawn_pipe()

        for pipe in s.pipes:
            pipe.update(PIPE_SPEED)
            if not pipe.scored and pipe.passed(s.player):
                pipe.scored = True
                s.score += 1
                self.reconcile_high_score()
                self.particles.emit_sparkles(*pipe.gap_center)

        s.pipes[:] = [p for p in s.pipes if not p.offscreen()]

    def check_collisions(self) -> None:
        if self.phase is not Phase.PLAYING:
            return
        player = self.session.player
        for pipe in self.session.pipes:
            if pipe.hits(player):
                self.particles.emit_explosion(*player.center)
                self.trigger_game_over()
                break

    def trigger_game_over(self) -> None:
        if self.phase is not Phase.PLAYING:
            return
        self._enter(Phase.GAME_OVER)
        logger.info("Game over with score %d", self.session.score)
        self.reconcile_high_score()

    def reconcile_high_score(self) -> None:
        s = self.session
        previous = self.scores.submit(s.score)
        # No celebration for the very first recorded score.
        if previous and not s.confetti_triggered:
            self.particles.emit_confetti()
            s.confetti_triggered = True

    def score_text(self) -> str:
        return f"Score: {self.session.score} | High Score: {self.high_score}"
