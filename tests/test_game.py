import os
import random

os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import math

import pygame
import pytest

from flappy_dragon.config import (
    FRAME_DURATION_MS,
    PLAYER_SCALE,
    PLAYER_START_X,
    PLAYER_START_Y,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TILE_SIZE,
    WING_POSE_OFFSETS,
)
from flappy_dragon.entities import Obstacle, Player, gap_size_for_score
from flappy_dragon.game import Game, GameMode, InputEvent, Session, translate_events


def setup_module(module: object) -> None:
    pygame.init()


def teardown_module(module: object) -> None:
    pygame.quit()


def playing_session(seed: int = 1) -> Session:
    s = Session(random.Random(seed))
    s.tick(0, InputEvent.START)
    return s


def test_session_starts_in_menu() -> None:
    s = Session(random.Random(0))
    assert s.mode is GameMode.MENU
    assert not s.quitting
    s.tick(16, InputEvent.FLAP)
    assert s.mode is GameMode.MENU


def test_menu_start_and_quit() -> None:
    s = playing_session()
    assert s.mode is GameMode.PLAYING
    assert s.player.world_x == PLAYER_START_X
    assert s.player.y == PLAYER_START_Y
    assert s.obstacle.world_x == SCREEN_WIDTH

    q = Session(random.Random(0))
    q.tick(16, InputEvent.QUIT)
    assert q.quitting


def test_quit_ignored_while_playing() -> None:
    s = playing_session()
    s.tick(0, InputEvent.QUIT)
    assert s.mode is GameMode.PLAYING
    assert not s.quitting


def test_fixed_step_accumulates() -> None:
    s = playing_session()
    step = FRAME_DURATION_MS / 10
    for _ in range(10):
        s.tick(step)
    # Exactly at the threshold is not past it
    assert s.player.world_x == PLAYER_START_X
    s.tick(step)
    assert s.player.world_x == PLAYER_START_X + 1
    assert s.frame_accumulator == 0.0


def test_overdue_steps_are_dropped() -> None:
    s = playing_session()
    s.tick(FRAME_DURATION_MS * 10)
    assert s.player.world_x == PLAYER_START_X + 1
    assert s.frame_accumulator == 0.0


def test_flap_applied_once_per_event() -> None:
    s = playing_session()
    s.tick(0, InputEvent.FLAP)
    assert s.player.velocity == pytest.approx(-1.0)
    s.tick(0)
    assert s.player.velocity == pytest.approx(-1.0)


def test_obstacle_replacement_scores() -> None:
    s = playing_session()
    s.score = 3
    s.obstacle = Obstacle(50, 12, gap_size_for_score(3))
    s.player = Player(51, 12)
    s.tick(0)
    assert s.score == 4
    assert s.obstacle.world_x == 51 + SCREEN_WIDTH
    assert s.obstacle.gap_size == gap_size_for_score(4)
    assert s.mode is GameMode.PLAYING


def test_collision_ends_game() -> None:
    s = playing_session()
    s.obstacle = Obstacle(50, 12, 4)
    s.player = Player(50, 3)
    s.tick(0)
    assert s.mode is GameMode.END
    assert s.score == 0


def test_falling_through_floor_ends_game() -> None:
    s = playing_session()
    s.player.y = SCREEN_HEIGHT + 1
    s.tick(0)
    assert s.mode is GameMode.END


def test_restart_from_end_is_idempotent() -> None:
    s = playing_session(5)
    for _ in range(200):
        s.tick(FRAME_DURATION_MS + 1, InputEvent.FLAP if s.player.y > 15 else InputEvent.NONE)
        if s.mode is GameMode.END:
            break
    s.mode = GameMode.END
    s.tick(0, InputEvent.START)

    fresh = playing_session(11)
    for a in (s, fresh):
        assert a.mode is GameMode.PLAYING
        assert a.score == 0
        assert a.frame_accumulator == 0.0
        assert (a.player.world_x, a.player.y, a.player.velocity, a.player.animation_frame) == (
            PLAYER_START_X,
            PLAYER_START_Y,
            0.0,
            0,
        )
        assert a.obstacle.world_x == SCREEN_WIDTH
        assert a.obstacle.gap_size == gap_size_for_score(0)


def test_end_quit_sets_flag() -> None:
    s = playing_session()
    s.mode = GameMode.END
    s.tick(0, InputEvent.QUIT)
    assert s.quitting


def test_bad_elapsed_rejected_without_mutation() -> None:
    s = playing_session()
    s.tick(30)
    with pytest.raises(ValueError):
        s.tick(-5)
    with pytest.raises(ValueError):
        s.tick(math.nan)
    assert s.frame_accumulator == 30


def test_snapshot_reflects_state() -> None:
    s = playing_session()
    frame = s.snapshot()
    assert frame.mode is GameMode.PLAYING
    assert frame.score == 0
    assert frame.player_y == PLAYER_START_Y
    assert frame.obstacle.screen_x == SCREEN_WIDTH - PLAYER_START_X
    assert len(frame.obstacle.floor) == SCREEN_WIDTH


def test_translate_events() -> None:
    events = [
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q),
    ]
    assert translate_events(events) == (InputEvent.FLAP, False)
    assert translate_events([pygame.event.Event(pygame.QUIT)]) == (InputEvent.NONE, True)
    assert translate_events([]) == (InputEvent.NONE, False)


def test_game_init_and_draw_each_mode() -> None:
    g = Game(random.Random(2))
    assert len(g.sprites) == len(WING_POSE_OFFSETS)
    assert g.sprites[0].get_size() == (TILE_SIZE * PLAYER_SCALE, TILE_SIZE * PLAYER_SCALE)
    g.draw()
    g.session.tick(0, InputEvent.START)
    g.draw()
    g.session.mode = GameMode.END
    g.draw()


def test_game_run_stops_on_window_close() -> None:
    g = Game(random.Random(3))
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    g.run()
    assert g.session.mode is GameMode.MENU
