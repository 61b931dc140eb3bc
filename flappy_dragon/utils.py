"""Numeric guards and sprite generation helpers used across the game."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a numeric value into the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def checked_elapsed(elapsed_ms: float) -> float:
    """Return elapsed_ms as a float, rejecting negative or non-finite deltas.

    A misbehaving timer must not leak NaN or time travel into the physics, so
    the tick is refused outright instead of being folded into the accumulator.
    """
    elapsed = float(elapsed_ms)
    if not math.isfinite(elapsed) or elapsed < 0.0:
        raise ValueError(f"elapsed time must be finite and non-negative, got {elapsed_ms!r}")
    return elapsed


def check_layout(screen_height: int, gap_center_min: int, gap_center_max: int) -> None:
    """Raise ValueError when the gap-center range cannot fit above the floor row."""
    if gap_center_min < 0 or gap_center_min >= gap_center_max:
        raise ValueError(f"empty gap-center range [{gap_center_min}, {gap_center_max})")
    # Last row is the floor; every drawable gap center must sit above it.
    if gap_center_max > screen_height - 1:
        raise ValueError(
            f"gap-center range [{gap_center_min}, {gap_center_max}) does not fit a "
            f"screen {screen_height} tiles high"
        )


def dragon_pose_array(
    size: int,
    wing_offset: int,
    body: tuple[int, int, int],
    wing: tuple[int, int, int],
    eye: tuple[int, int, int],
    colorkey: tuple[int, int, int],
) -> np.ndarray:
    """Rasterize one side-view dragon pose into a (size, size, 3) surfarray.

    Arrays are indexed [x, y] to match pygame.surfarray. The wing is a thick
    line from the shoulder back to a tip raised or lowered by wing_offset.
    """
    s = size / 16.0
    x = np.arange(size, dtype=np.float32)
    X, Y = np.meshgrid(x, x, indexing="ij")

    img = np.empty((size, size, 3), dtype=np.uint8)
    img[:, :] = colorkey

    body_mask = ((X - 7 * s) / (5 * s)) ** 2 + ((Y - 9 * s) / (3 * s)) ** 2 <= 1.0
    head_mask = (X - 12 * s) ** 2 + (Y - 7 * s) ** 2 <= (2.2 * s) ** 2
    tail_mask = (np.abs(Y - 10 * s - (2 * s - X) * 0.5) <= s) & (X <= 2.5 * s)
    img[body_mask | head_mask | tail_mask] = body

    # Wing: from shoulder (7, 8) to tip (2, 8 + offset), two px thick
    t = np.clip((7 * s - X) / (5 * s), 0.0, 1.0)
    wing_y = 8 * s + wing_offset * s * t
    wing_mask = (np.abs(Y - wing_y) <= 1.0 * s) & (X >= 2 * s) & (X <= 7 * s)
    img[wing_mask] = wing

    ex, ey = int(round(13 * s)), int(round(6 * s))
    img[ex, ey] = eye
    return img


def build_pose_arrays(
    size: int,
    offsets: Sequence[int],
    body: tuple[int, int, int],
    wing: tuple[int, int, int],
    eye: tuple[int, int, int],
    colorkey: tuple[int, int, int],
) -> list[np.ndarray]:
    """Generate the whole wing-pose atlas, one array per offset."""
    return [dragon_pose_array(size, off, body, wing, eye, colorkey) for off in offsets]
