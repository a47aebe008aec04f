"""Math and color utility functions used across the game."""

from __future__ import annotations

import math

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a numeric value into the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def is_finite_point(x: float, y: float) -> bool:
    return math.isfinite(x) and math.isfinite(y)


def twinkle(tick: int, x: float) -> float:
    """Sparkle opacity multiplier, oscillating in [0.4, 1.0]."""
    return math.sin(tick * 0.3 + x) * 0.3 + 0.7


def with_alpha(color: tuple[int, int, int], alpha: float) -> tuple[int, int, int, int]:
    """Attach a 0..1 opacity to an RGB color as an 8-bit alpha channel."""
    return (*color, int(clamp(alpha, 0.0, 1.0) * 255))


def vertical_gradient(
    w: int,
    h: int,
    top: tuple[int, int, int],
    bottom: tuple[int, int, int],
) -> np.ndarray:
    """Linear top-to-bottom gradient as a (w, h, 3) uint8 array.

    The array uses surfarray orientation (x first) so it can be handed
    straight to ``pygame.surfarray.make_surface``.
    """
    t = np.linspace(0.0, 1.0, h, dtype=np.float32)[:, None]
    top_c = np.asarray(top, dtype=np.float32)[None, :]
    bottom_c = np.asarray(bottom, dtype=np.float32)[None, :]
    column = top_c * (1.0 - t) + bottom_c * t  # (h, 3)
    c = np.clip(np.rint(column), 0, 255).astype(np.uint8)
    return np.broadcast_to(c[None, :, :], (w, h, 3)).copy()
