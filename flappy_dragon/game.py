"""Game session state machine and the pygame host that drives it."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

import pygame

from .config import (
    COL_BACKGROUND,
    COL_FLOOR,
    COL_MENU_BACKGROUND,
    COL_OBSTACLE,
    COL_TEXT,
    COL_TITLE,
    DRAGON_BODY,
    DRAGON_EYE,
    DRAGON_WING,
    FPS,
    FRAME_DURATION_MS,
    GAP_CENTER_MAX,
    GAP_CENTER_MIN,
    PLAYER_SCALE,
    PLAYER_START_X,
    PLAYER_START_Y,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SPRITE_COLORKEY,
    TILE_SIZE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    WING_POSE_OFFSETS,
)
from .entities import Obstacle, ObstacleGeometry, Player
from .utils import build_pose_arrays, check_layout, checked_elapsed

logger = logging.getLogger(__name__)


class GameMode(Enum):
    MENU = "menu"
    PLAYING = "playing"
    END = "end"


class InputEvent(Enum):
    NONE = "none"
    FLAP = "flap"
    START = "start"
    QUIT = "quit"


@dataclass(frozen=True)
class RenderFrame:
    """Everything the host needs to draw one frame."""

    mode: GameMode
    score: int
    player_y: float
    sprite_index: int
    animation_frame: int
    obstacle: ObstacleGeometry


class Session:
    """Owns the player, the live obstacle, the score and the step accumulator.

    The host calls tick() once per rendered frame with the real time elapsed
    since the previous call and at most one input event. Physics advances in
    fixed FRAME_DURATION_MS steps, at most one per tick: time beyond a single
    overdue step is dropped rather than caught up.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        check_layout(SCREEN_HEIGHT, GAP_CENTER_MIN, GAP_CENTER_MAX)
        self.rng = rng if rng is not None else random.Random()
        self.mode = GameMode.MENU
        self.quitting = False
        self.player = Player(PLAYER_START_X, PLAYER_START_Y)
        self.obstacle = Obstacle.generate(SCREEN_WIDTH, 0, self.rng)
        self.score = 0
        self.frame_accumulator = 0.0

    def restart(self) -> None:
        self.player = Player(PLAYER_START_X, PLAYER_START_Y)
        self.frame_accumulator = 0.0
        self.score = 0
        self.obstacle = Obstacle.generate(SCREEN_WIDTH, 0, self.rng)
        self.mode = GameMode.PLAYING
        logger.info("Starting new run")

    def tick(self, elapsed_ms: float, event: InputEvent = InputEvent.NONE) -> None:
        elapsed = checked_elapsed(elapsed_ms)
        if self.quitting:
            return
        if self.mode is GameMode.MENU or self.mode is GameMode.END:
            self._handle_menu(event)
        elif self.mode is GameMode.PLAYING:
            self._play(elapsed, event)
        else:
            raise AssertionError(f"unhandled mode {self.mode!r}")

    def _handle_menu(self, event: InputEvent) -> None:
        if event is InputEvent.START:
            self.restart()
        elif event is InputEvent.QUIT:
            self.quitting = True
            logger.info("Quit requested from %s", self.mode.value)

    def _play(self, elapsed: float, event: InputEvent) -> None:
        self.frame_accumulator += elapsed
        if self.frame_accumulator > FRAME_DURATION_MS:
            self.frame_accumulator = 0.0
            self.player.advance()

        if event is InputEvent.FLAP:
            self.player.flap()

        if self.player.world_x > self.obstacle.world_x:
            self.score += 1
            self.obstacle = Obstacle.generate(self.player.world_x + SCREEN_WIDTH, self.score, self.rng)
            logger.debug(
                "Obstacle cleared, score=%d next at x=%d gap=%d@%d",
                self.score,
                self.obstacle.world_x,
                self.obstacle.gap_size,
                self.obstacle.gap_center,
            )

        if int(self.player.y) > SCREEN_HEIGHT or self.obstacle.collides(self.player):
            self.mode = GameMode.END
            logger.info("Game over with score %d", self.score)

    def snapshot(self) -> RenderFrame:
        return RenderFrame(
            mode=self.mode,
            score=self.score,
            player_y=self.player.screen_y,
            sprite_index=self.player.sprite_index,
            animation_frame=self.player.animation_frame,
            obstacle=self.obstacle.render_geometry(self.player.world_x),
        )


KEY_BINDINGS = {
    pygame.K_SPACE: InputEvent.FLAP,
    pygame.K_p: InputEvent.START,
    pygame.K_q: InputEvent.QUIT,
    pygame.K_ESCAPE: InputEvent.QUIT,
}


def translate_events(events: list[pygame.event.Event]) -> tuple[InputEvent, bool]:
    """Map polled pygame events to the first bound input and a window-close flag."""
    result = InputEvent.NONE
    closed = False
    for event in events:
        if event.type == pygame.QUIT:
            closed = True
        elif event.type == pygame.KEYDOWN and result is InputEvent.NONE:
            result = KEY_BINDINGS.get(event.key, InputEvent.NONE)
    return result, closed


class Game:
    """Top-level host: owns the window and clock, feeds the session, draws frames."""

    def __init__(self, rng: random.Random | None = None) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.DOUBLEBUF)
        pygame.display.set_caption("Flappy Dragon")
        self.clock = pygame.time.Clock()
        self.font_big = pygame.font.SysFont(None, 40)
        self.font_small = pygame.font.SysFont(None, 22)
        self.sprites = self._build_sprites()
        self.session = Session(rng)

    def _build_sprites(self) -> list[pygame.Surface]:
        size = TILE_SIZE * PLAYER_SCALE
        sprites: list[pygame.Surface] = []
        for arr in build_pose_arrays(size, WING_POSE_OFFSETS, DRAGON_BODY, DRAGON_WING, DRAGON_EYE, SPRITE_COLORKEY):
            surf = pygame.surfarray.make_surface(arr)
            surf.set_colorkey(SPRITE_COLORKEY)
            sprites.append(surf)
        return sprites

    def draw(self) -> None:
        frame = self.session.snapshot()
        if frame.mode is GameMode.PLAYING:
            self._draw_playfield(self.screen, frame)
        elif frame.mode is GameMode.MENU:
            self._draw_menu(self.screen, "Welcome to Flappy Dragon!")
        elif frame.mode is GameMode.END:
            self._draw_menu(self.screen, "You are dead!", score=frame.score)
        pygame.display.flip()

    def _draw_playfield(self, surf: pygame.Surface, frame: RenderFrame) -> None:
        surf.fill(COL_BACKGROUND)
        geom = frame.obstacle
        for x, y in geom.floor:
            pygame.draw.rect(surf, COL_FLOOR, (x * TILE_SIZE, y * TILE_SIZE, TILE_SIZE, TILE_SIZE))
        # Obstacle tiles are a vertical bar centered in the cell
        bar_w = max(2, TILE_SIZE // 4)
        for x, y in geom.above + geom.below:
            px = x * TILE_SIZE + (TILE_SIZE - bar_w) // 2
            pygame.draw.rect(surf, COL_OBSTACLE, (px, y * TILE_SIZE, bar_w, TILE_SIZE))

        sprite = self.sprites[frame.sprite_index]
        surf.blit(sprite, (0, int(frame.player_y * TILE_SIZE)))

        flap_text = self.font_small.render("Press SPACE to Flap", True, COL_TEXT)
        score_text = self.font_small.render(f"Score: {frame.score}", True, COL_TEXT)
        surf.blit(flap_text, (2, 2))
        surf.blit(score_text, (2, 2 + TILE_SIZE))

    def _draw_menu(self, surf: pygame.Surface, title: str, score: int | None = None) -> None:
        surf.fill(COL_MENU_BACKGROUND)
        cx = WINDOW_WIDTH // 2
        title_text = self.font_big.render(title, True, COL_TITLE)
        surf.blit(title_text, title_text.get_rect(center=(cx, 5 * TILE_SIZE)))
        if score is not None:
            score_text = self.font_small.render(f"You earned {score} points", True, COL_TEXT)
            surf.blit(score_text, score_text.get_rect(center=(cx, 7 * TILE_SIZE)))
        for row, label in ((9, "(P) Play Game"), (10, "(Q) Quit Game")):
            text = self.font_small.render(label, True, COL_TEXT)
            surf.blit(text, text.get_rect(center=(cx, row * TILE_SIZE)))

    def run(self) -> None:
        while not self.session.quitting:
            elapsed_ms = self.clock.tick(FPS)
            event, closed = translate_events(pygame.event.get())
            if closed:
                logger.info("Window closed")
                break
            self.session.tick(elapsed_ms, event)
            self.draw()
        pygame.quit()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    Game().run()
