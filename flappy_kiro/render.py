"""Rendering composition for Flappy Kiro (pygame)."""

from __future__ import annotations

import logging
import math
import os

import pygame

from .config import (
    BLACK_900,
    GREY_300,
    OVERLAY_ALPHA,
    PIPE_CAP_HEIGHT,
    PIPE_CAP_OVERHANG,
    PLAYER_SIZE,
    PURPLE_400,
    PURPLE_500,
    SKY_TOP,
    SPRITE_PATH,
    WHITE,
)
from .entities import Particle, ParticleKind, Pipe, Player, particle_alpha
from .game import Game, Phase
from .utils import vertical_gradient, with_alpha

logger = logging.getLogger(__name__)


class Renderer:
    """Draws one frame of a :class:`Game` onto a target surface."""

    def __init__(self, surface: pygame.Surface, sprite_path: str | os.PathLike[str] | None = SPRITE_PATH) -> None:
        if not pygame.font.get_init():
            pygame.font.init()
        self.surface = surface
        self.width, self.height = surface.get_size()
        self.font_title = pygame.font.SysFont(None, 56, bold=True)
        self.font_big = pygame.font.SysFont(None, 38)
        self.font_mid = pygame.font.SysFont(None, 32)
        self.font_small = pygame.font.SysFont(None, 26)
        self.bg = pygame.surfarray.make_surface(vertical_gradient(self.width, self.height, SKY_TOP, BLACK_900))
        self.overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.overlay.fill((0, 0, 0, OVERLAY_ALPHA))
        self.sprite = self._load_sprite(sprite_path)

    def _load_sprite(self, path: str | os.PathLike[str] | None) -> pygame.Surface:
        if path is None:
            return self._fallback_sprite()
        try:
            image = pygame.image.load(os.fspath(path))
        except (pygame.error, FileNotFoundError) as e:
            logger.warning("Could not load sprite %s (%s); using fallback", path, e)
            return self._fallback_sprite()
        return pygame.transform.scale(image, (PLAYER_SIZE, PLAYER_SIZE))

    @staticmethod
    def _fallback_sprite() -> pygame.Surface:
        s = pygame.Surface((PLAYER_SIZE, PLAYER_SIZE), pygame.SRCALPHA)
        pygame.draw.rect(s, PURPLE_500, s.get_rect(), border_radius=PLAYER_SIZE // 5)
        eye = (int(PLAYER_SIZE * 0.65), int(PLAYER_SIZE * 0.4))
        pygame.draw.circle(s, WHITE, eye, PLAYER_SIZE // 7)
        return s

    def draw(self, game: Game) -> None:
        surf = self.surface
        surf.blit(self.bg, (0, 0))
        if game.phase in (Phase.PLAYING, Phase.GAME_OVER):
            # Particles sit behind the pipes and the player.
            self.draw_particles(game.particles.drawable(), game.session.frame_count)
            self.draw_pipes(game.pipes)
            self.draw_player(game.player)
        if game.phase is Phase.START:
            self._draw_start_screen()
        elif game.phase is Phase.GAME_OVER:
            self._draw_game_over_screen(game)
        self._draw_hud(game)

    def draw_particles(self, particles: list[Particle], tick: int) -> None:
        for p in particles:
            color = with_alpha(p.color, particle_alpha(p, tick))
            if p.kind is ParticleKind.CONFETTI and p.rotation is not None:
                w = max(1, int(p.size))
                piece = pygame.Surface((w, w * 2), pygame.SRCALPHA)
                piece.fill(color)
                rot = pygame.transform.rotate(piece, -math.degrees(p.rotation))
                self.surface.blit(rot, rot.get_rect(center=(int(p.x), int(p.y))))
                continue
            r = max(1, int(round(p.size)))
            dot = pygame.Surface((r * 2 + 2, r * 2 + 2), pygame.SRCALPHA)
            pygame.draw.circle(dot, color, (r + 1, r + 1), r)
            self.surface.blit(dot, (int(p.x) - r - 1, int(p.y) - r - 1))

    def draw_pipes(self, pipes: list[Pipe]) -> None:
        surf = self.surface
        for pipe in pipes:
            x, w = int(pipe.x), int(pipe.width)
            top, bottom = int(pipe.top_height), int(pipe.bottom_y)
            pygame.draw.rect(surf, PURPLE_500, pygame.Rect(x, 0, w, top))
            pygame.draw.rect(surf, PURPLE_500, pygame.Rect(x, bottom, w, self.height - bottom))
            cap_w = w + 2 * PIPE_CAP_OVERHANG
            pygame.draw.rect(surf, PURPLE_400, pygame.Rect(x - PIPE_CAP_OVERHANG, top - PIPE_CAP_HEIGHT, cap_w, PIPE_CAP_HEIGHT))
            pygame.draw.rect(surf, PURPLE_400, pygame.Rect(x - PIPE_CAP_OVERHANG, bottom, cap_w, PIPE_CAP_HEIGHT))

    def draw_player(self, player: Player) -> None:
        rot = pygame.transform.rotate(self.sprite, -math.degrees(player.rotation))
        cx, cy = player.center
        self.surface.blit(rot, rot.get_rect(center=(int(cx), int(cy))))

    def _blit_text(self, font: pygame.font.Font, text: str, color: tuple[int, int, int], center: tuple[int, int]) -> None:
        label = font.render(text, True, color)
        self.surface.blit(label, label.get_rect(center=center))

    def _draw_start_screen(self) -> None:
        self.surface.blit(self.overlay, (0, 0))
        cx, cy = self.width // 2, self.height // 2
        self._blit_text(self.font_title, "Flappy Kiro", WHITE, (cx, cy - 50))
        self._blit_text(self.font_small, "Press SPACE or click to start!", GREY_300, (cx, cy + 20))

    def _draw_game_over_screen(self, game: Game) -> None:
        self.surface.blit(self.overlay, (0, 0))
        cx, cy = self.width // 2, self.height // 2
        self._blit_text(self.font_title, "Game Over!", PURPLE_500, (cx, cy - 70))
        self._blit_text(self.font_big, f"Score: {game.session.score}", WHITE, (cx, cy - 10))
        self._blit_text(self.font_mid, f"High Score: {game.high_score}", PURPLE_400, (cx, cy + 30))
        self._blit_text(self.font_small, "Press SPACE or click to restart", GREY_300, (cx, cy + 70))

    def _draw_hud(self, game: Game) -> None:
        label = self.font_small.render(game.score_text(), True, WHITE)
        self.surface.blit(label, label.get_rect(midtop=(self.width // 2, 12)))
