"""Game entities: the player-controlled dragon and the gap obstacle.

Both live in tile coordinates. The player's world_x grows by one tile per
physics step while the screen stays anchored to the player, so an obstacle's
screen column is its world_x minus the player's world_x.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from .config import (
    ANIMATION_FRAMES,
    BASE_GAP_SIZE,
    DRAGON_FRAMES,
    FLAP_IMPULSE,
    GAP_CENTER_MAX,
    GAP_CENTER_MIN,
    GRAVITY,
    MIN_GAP_SIZE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TERMINAL_VELOCITY,
)
from .utils import clamp

Cell = tuple[int, int]


class Player:
    def __init__(self, world_x: int, y: float) -> None:
        self.world_x = int(world_x)
        self.y = float(y)
        self.velocity = 0.0
        self.animation_frame = 0

    def advance(self) -> None:
        """One physics step: gravity, integrate, floor clamp, scroll, animate."""
        self.velocity = min(self.velocity + GRAVITY, TERMINAL_VELOCITY)
        self.y = max(0.0, self.y + self.velocity)
        self.world_x += 1
        self.animation_frame = (self.animation_frame + 1) % ANIMATION_FRAMES

    def flap(self) -> None:
        self.velocity -= FLAP_IMPULSE

    @property
    def screen_x(self) -> int:
        # The world scrolls under the dragon; it never leaves the left column.
        return 0

    @property
    def screen_y(self) -> float:
        return self.y

    @property
    def sprite_index(self) -> int:
        return DRAGON_FRAMES[self.animation_frame]


def gap_size_for_score(score: int) -> int:
    """Gap height for the given score: shrinks by one per point, never below the minimum."""
    return max(MIN_GAP_SIZE, BASE_GAP_SIZE - score)


@dataclass(frozen=True)
class ObstacleGeometry:
    """Screen cells to fill for one obstacle, plus the floor row."""

    screen_x: int
    above: list[Cell] = field(default_factory=list)
    below: list[Cell] = field(default_factory=list)
    floor: list[Cell] = field(default_factory=list)


class Obstacle:
    def __init__(self, world_x: int, gap_center: int, gap_size: int) -> None:
        self._world_x = int(world_x)
        self.gap_center = int(gap_center)
        self.gap_size = max(MIN_GAP_SIZE, int(gap_size))

    @classmethod
    def generate(cls, world_x: int, score: int, rng: random.Random) -> "Obstacle":
        gap_center = rng.randrange(GAP_CENTER_MIN, GAP_CENTER_MAX)
        return cls(world_x, gap_center, gap_size_for_score(score))

    @property
    def world_x(self) -> int:
        return self._world_x

    @property
    def half_size(self) -> int:
        return self.gap_size // 2

    @property
    def gap_top(self) -> int:
        return self.gap_center - self.half_size

    @property
    def gap_bottom(self) -> int:
        return self.gap_center + self.half_size

    def render_geometry(self, player_world_x: int) -> ObstacleGeometry:
        screen_x = self._world_x - player_world_x
        floor_row = SCREEN_HEIGHT - 1
        # Clamp so a gap hugging the edges never yields a negative range.
        top = int(clamp(self.gap_top, 0, floor_row))
        bottom = int(clamp(self.gap_bottom, 0, floor_row))
        return ObstacleGeometry(
            screen_x=screen_x,
            above=[(screen_x, y) for y in range(0, top)],
            below=[(screen_x, y) for y in range(bottom, floor_row)],
            floor=[(x, floor_row) for x in range(SCREEN_WIDTH)],
        )

    def collides(self, player: Player) -> bool:
        # Point-in-time check: only the step where the columns coincide counts.
        if player.world_x != self._world_x:
            return False
        row = int(player.y)
        return row < self.gap_top or row > self.gap_bottom
