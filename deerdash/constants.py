"""DeerDash play field geometry and default tuning values."""

SCREEN_WIDTH = 900
SCREEN_HEIGHT = 480
GROUND_Y = SCREEN_HEIGHT - 90
CEILING_Y = 12

AVATAR_X = 120
AVATAR_WIDTH = 86
AVATAR_HEIGHT = 82
AVATAR_REST_Y = GROUND_Y - AVATAR_HEIGHT

# Motion (px, px/s, px/s^2)
GRAVITY = 2100.0
JUMP_VELOCITY = -800.0
FLIGHT_THRUST = -900.0
GROUNDED_TOLERANCE = 1.0

FLIGHT_THRESHOLD = 200.0
SCORE_RATE = 10.0

# Scroll speed = BASE_SPEED + min(score * SPEED_RAMP, MAX_SPEED_BONUS)
BASE_SPEED = 340.0
SPEED_RAMP = 1.5
MAX_SPEED_BONUS = 260.0
CULL_MARGIN = -10.0

SPIKE_WIDTH_RANGE = (30.0, 55.0)
SPIKE_HEIGHT_RANGE = (55.0, 79.0)
SPIKE_SPAWN_RANGE = (0.9, 1.8)

BLOCK_WIDTH_RANGE = (90.0, 200.0)
BLOCK_HEIGHT_RANGE = (28.0, 44.0)
BLOCK_SPAWN_RANGE = (1.0, 1.8)

INITIAL_SPIKE_TIMER = 1.6
INITIAL_BLOCK_TIMER = 1.2
RESET_SPAWN_TIMER = 1.2

MAX_FRAME_DT = 0.032
MAX_OBSTACLES = 16
