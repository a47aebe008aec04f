"""Game configuration constants for Flappy Kiro."""

from __future__ import annotations

import os
from pathlib import Path

# Playfield
WINDOW_WIDTH = 480
WINDOW_HEIGHT = 600
FPS = 60

# Physics (per tick; the tick rate is the frame rate)
GRAVITY = 0.15  # px/tick^2
JUMP_POWER = -3.0  # px/tick

# Player
PLAYER_X = 100
PLAYER_START_Y = 300
PLAYER_SIZE = 40
ROTATION_MIN_DEG = -30.0
ROTATION_MAX_DEG = 90.0
ROTATION_FACTOR = 3.0  # degrees per unit of vertical speed

# Obstacles
PIPE_SPEED = 1.5  # px/tick
PIPE_SPAWN_INTERVAL = 180  # ticks
PIPE_GAP = 180
PIPE_WIDTH = 60
PIPE_MIN_HEIGHT = 50
PIPE_CAP_OVERHANG = 5
PIPE_CAP_HEIGHT = 20

# Particles
TRAIL_EVERY = 3  # ticks between trail particles
TRAIL_LIFE = 30
TRAIL_SIZE = 3.0
EXPLOSION_COUNT = (15, 20)
EXPLOSION_LIFE = (30, 40)
EXPLOSION_JITTER = 0.25  # rad
SPARKLE_COUNT = (8, 12)
SPARKLE_LIFE = (20, 30)
CONFETTI_COUNT = (30, 40)
CONFETTI_LIFE = 200
CONFETTI_SPAWN_Y = -20.0
CONFETTI_GRAVITY = 0.15

# Brand palette
PURPLE_500 = (121, 14, 203)  # #790ECB
PURPLE_400 = (155, 63, 232)  # #9B3FE8
BLACK_900 = (10, 10, 10)
GREY_750 = (42, 42, 42)
GREY_700 = (58, 58, 58)
GREY_300 = (176, 176, 176)
WHITE = (255, 255, 255)
SKY_TOP = (26, 26, 46)  # #1a1a2e
OVERLAY_ALPHA = 178  # ~70% black

CONFETTI_COLORS = (
    PURPLE_500,
    PURPLE_400,
    WHITE,
    (255, 215, 0),  # gold
    (255, 165, 0),  # orange
    (0, 206, 209),  # cyan
    (255, 105, 180),  # pink
)

# Persistence
HIGH_SCORE_KEY = "flappyKiroHighScore"
HIGH_SCORE_FILE = "highscore.json"

# Assets
SPRITE_PATH = Path(__file__).resolve().parent.parent / "assets" / "kiro-logo.png"


def data_dir() -> Path:
    """Directory holding persisted data; ``FLAPPY_KIRO_HOME`` overrides it."""
    override = os.environ.get("FLAPPY_KIRO_HOME")
    if override:
        return Path(override)
    return Path.home() / ".flappy_kiro"


def high_score_path() -> Path:
    return data_dir() / HIGH_SCORE_FILE
