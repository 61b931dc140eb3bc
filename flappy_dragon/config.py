from __future__ import annotations

"""Game configuration constants for Flappy Dragon."""

# Grid (the world is laid out in tiles, not pixels)
SCREEN_WIDTH = 40  # tiles
SCREEN_HEIGHT = 25  # tiles
TILE_SIZE = 16  # px per tile
WINDOW_WIDTH = SCREEN_WIDTH * TILE_SIZE
WINDOW_HEIGHT = SCREEN_HEIGHT * TILE_SIZE
FPS = 60

# Fixed-step simulation
FRAME_DURATION_MS = 75.0  # ms of real time per physics step

# Physics (tiles per step)
GRAVITY = 0.1
TERMINAL_VELOCITY = 2.0
FLAP_IMPULSE = 1.0

# Player
PLAYER_START_X = 5
PLAYER_START_Y = 20
PLAYER_SCALE = 2  # sprite is drawn at 2x2 tiles

# Obstacles
GAP_CENTER_MIN = 5  # inclusive
GAP_CENTER_MAX = 20  # exclusive
BASE_GAP_SIZE = 10
MIN_GAP_SIZE = 2

# Sprite animation: frame table indexes into the generated wing poses
DRAGON_FRAMES = (0, 1, 2, 3, 2, 1)
ANIMATION_FRAMES = len(DRAGON_FRAMES)
WING_POSE_OFFSETS = (-5, -2, 1, 4)  # wing tip rise/fall per pose, px

# Palette
COL_BACKGROUND = (0, 0, 128)  # navy
COL_MENU_BACKGROUND = (0, 0, 0)
COL_TEXT = (255, 255, 255)
COL_TITLE = (255, 255, 0)
COL_OBSTACLE = (255, 255, 255)
COL_FLOOR = (255, 255, 255)
DRAGON_BODY = (200, 60, 40)
DRAGON_WING = (240, 140, 60)
DRAGON_EYE = (250, 250, 250)
SPRITE_COLORKEY = (255, 0, 255)
