"""Game entities: the player sprite, gap obstacles and cosmetic particles.

Nothing here touches pygame; drawing lives in :mod:`flappy_kiro.render`.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .config import (
    CONFETTI_COLORS,
    CONFETTI_COUNT,
    CONFETTI_GRAVITY,
    CONFETTI_LIFE,
    CONFETTI_SPAWN_Y,
    EXPLOSION_COUNT,
    EXPLOSION_JITTER,
    EXPLOSION_LIFE,
    GRAVITY,
    JUMP_POWER,
    PIPE_GAP,
    PIPE_SPEED,
    PIPE_WIDTH,
    PLAYER_SIZE,
    PLAYER_START_Y,
    PLAYER_X,
    PURPLE_400,
    PURPLE_500,
    ROTATION_FACTOR,
    ROTATION_MAX_DEG,
    ROTATION_MIN_DEG,
    SPARKLE_COUNT,
    SPARKLE_LIFE,
    TRAIL_LIFE,
    TRAIL_SIZE,
    WHITE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .utils import clamp, is_finite_point, twinkle


class Player:
    def __init__(self, x: float = PLAYER_X, y: float = PLAYER_START_Y, size: int = PLAYER_SIZE) -> None:
        self.start_x = float(x)
        self.start_y = float(y)
        self.width = size
        self.height = size
        self.reset()

    def reset(self) -> None:
        self.x = self.start_x
        self.y = self.start_y
        self.velocity = 0.0

    def jump(self, power: float = JUMP_POWER) -> None:
        self.velocity = power

    def update(self, gravity: float = GRAVITY) -> None:
        """Semi-implicit Euler step: velocity first, then position."""
        self.velocity += gravity
        self.y += self.velocity

    @property
    def rotation(self) -> float:
        """Visual tilt in radians, derived from the current vertical speed."""
        deg = clamp(self.velocity * ROTATION_FACTOR, ROTATION_MIN_DEG, ROTATION_MAX_DEG)
        return math.radians(deg)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def out_of_bounds(self, field_height: float) -> bool:
        return self.y + self.height > field_height or self.y < 0


class Pipe:
    """A pair of barriers with a passable vertical gap."""

    def __init__(self, x: float, top_height: float, gap: float = PIPE_GAP, width: float = PIPE_WIDTH) -> None:
        self.x = float(x)
        self.top_height = float(top_height)
        self.gap = float(gap)
        self.width = width
        self.scored = False

    @property
    def bottom_y(self) -> float:
        return self.top_height + self.gap

    @property
    def gap_center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.top_height + self.gap / 2

    def update(self, speed: float = PIPE_SPEED) -> None:
        self.x -= speed

    def offscreen(self) -> bool:
        return self.x + self.width < 0

    def passed(self, player: Player) -> bool:
        # Right edge strictly left of the player's left edge.
        return self.x + self.width < player.x

    def overlaps_x(self, player: Player) -> bool:
        return player.x + player.width > self.x and player.x < self.x + self.width

    def hits(self, player: Player) -> bool:
        if not self.overlaps_x(player):
            return False
        return player.y < self.top_height or player.y + player.height > self.bottom_y


class ParticleKind(Enum):
    TRAIL = "trail"
    EXPLOSION = "explosion"
    SPARKLE = "sparkle"
    CONFETTI = "confetti"


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    max_life: int
    size: float
    color: tuple[int, int, int]
    kind: ParticleKind
    life: float = 1.0
    # Confetti only
    rotation: float | None = None
    rotation_speed: float | None = None

    def update(self, field_height: float) -> bool:
        """Advance one tick. Returns False once the particle should be retired."""
        if self.kind is ParticleKind.CONFETTI:
            self.vy += CONFETTI_GRAVITY
            if self.rotation is not None and self.rotation_speed is not None:
                self.rotation += self.rotation_speed
        self.x += self.vx
        self.y += self.vy
        self.life -= 1 / self.max_life
        if self.kind is ParticleKind.CONFETTI and self.y > field_height:
            return False
        return self.life > 0


def particle_alpha(particle: Particle, tick: int) -> float:
    """Render opacity in [0, 1] for a particle at the given tick."""
    if particle.kind is ParticleKind.CONFETTI:
        return 1.0
    if particle.kind is ParticleKind.SPARKLE:
        return clamp(particle.life * twinkle(tick, particle.x), 0.0, 1.0)
    return clamp(particle.life, 0.0, 1.0)


class ParticleSystem:
    """Owns every live particle; spawns bursts and retires expired ones."""

    def __init__(
        self,
        width: float = WINDOW_WIDTH,
        height: float = WINDOW_HEIGHT,
        rng: random.Random | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.particles: list[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def of_kind(self, kind: ParticleKind) -> list[Particle]:
        return [p for p in self.particles if p.kind is kind]

    def clear(self) -> None:
        self.particles.clear()

    def emit_trail(self, x: float, y: float) -> None:
        self.particles.append(Particle(x, y, 0.0, 0.0, TRAIL_LIFE, TRAIL_SIZE, PURPLE_500, ParticleKind.TRAIL))

    def emit_explosion(self, x: float, y: float) -> None:
        rng = self.rng
        count = rng.randint(*EXPLOSION_COUNT)
        for i in range(count):
            angle = math.tau * i / count + rng.uniform(-EXPLOSION_JITTER, EXPLOSION_JITTER)
            speed = rng.uniform(1.0, 3.0)
            color = PURPLE_500 if i % 2 == 0 else WHITE
            self.particles.append(
                Particle(
                    x,
                    y,
                    math.cos(angle) * speed,
                    math.sin(angle) * speed,
                    rng.randint(*EXPLOSION_LIFE),
                    rng.uniform(2.0, 4.0),
                    color,
                    ParticleKind.EXPLOSION,
                )
            )

    def emit_sparkles(self, x: float, y: float) -> None:
        rng = self.rng
        for _ in range(rng.randint(*SPARKLE_COUNT)):
            angle = rng.uniform(0.0, math.tau)
            speed = rng.uniform(0.0, 0.5)
            color = PURPLE_400 if rng.random() > 0.5 else WHITE
            self.particles.append(
                Particle(
                    x,
                    y,
                    math.cos(angle) * speed,
                    math.sin(angle) * speed,
                    rng.randint(*SPARKLE_LIFE),
                    rng.uniform(2.0, 4.0),
                    color,
                    ParticleKind.SPARKLE,
                )
            )

    def emit_confetti(self) -> None:
        rng = self.rng
        for _ in range(rng.randint(*CONFETTI_COUNT)):
            self.particles.append(
                Particle(
                    rng.uniform(0.0, self.width),
                    CONFETTI_SPAWN_Y,
                    rng.uniform(-1.0, 1.0),
                    rng.uniform(1.0, 3.0),
                    CONFETTI_LIFE,
                    rng.uniform(3.0, 6.0),
                    rng.choice(CONFETTI_COLORS),
                    ParticleKind.CONFETTI,
                    rotation=rng.uniform(0.0, math.tau),
                    rotation_speed=rng.uniform(-0.1, 0.1),
                )
            )

    def update(self) -> None:
        self.particles = [p for p in self.particles if p.update(self.height)]

    def drawable(self) -> list[Particle]:
        """Particles safe to render; malformed ones are skipped, not removed."""
        return [p for p in self.particles if is_finite_point(p.x, p.y) and p.life >= 0]
