"""Tunable game parameters."""

from typing import Tuple

from flax.struct import dataclass, field

from deerdash.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, GROUND_Y, CEILING_Y, AVATAR_X, AVATAR_WIDTH, AVATAR_HEIGHT,
    GRAVITY, JUMP_VELOCITY, FLIGHT_THRUST, GROUNDED_TOLERANCE, FLIGHT_THRESHOLD,
    SCORE_RATE, BASE_SPEED, SPEED_RAMP, MAX_SPEED_BONUS, CULL_MARGIN,
    SPIKE_WIDTH_RANGE, SPIKE_HEIGHT_RANGE, SPIKE_SPAWN_RANGE,
    BLOCK_WIDTH_RANGE, BLOCK_HEIGHT_RANGE, BLOCK_SPAWN_RANGE,
    INITIAL_SPIKE_TIMER, INITIAL_BLOCK_TIMER, RESET_SPAWN_TIMER,
)


@dataclass
class GameParams:
    """Physics, pacing and geometry of a DeerDash session.

    Every engine function takes a ``GameParams`` so a variant game can be built
    without touching module constants. Numeric fields are pytree leaves and may be
    traced; ``spawn_enabled`` is static and selects code paths at trace time.

    Attributes:
        play_width, play_height: Size of the play field in pixels
        ground_y: Y coordinate of the ground line
        ceiling_y: Smallest y the avatar top may reach
        avatar_x, avatar_width, avatar_height: Fixed avatar box
        gravity: Downward acceleration (px/s^2)
        jump_velocity: Vertical velocity set by a grounded jump
        flight_thrust: Vertical velocity set by a flight press
        grounded_tolerance: Distance from the rest pose still counted as grounded
        flight_threshold: Score at which flight and ceiling blocks unlock
        score_rate: Score gained per second of play
        base_speed, speed_ramp, max_speed_bonus: Scroll speed ramp
        cull_margin: Obstacles whose right edge falls to this x are removed
        spike_*_range, block_*_range: Uniform ranges for sizes and spawn intervals
        initial_spike_timer, initial_block_timer: Timers of a brand new session
        reset_spawn_timer: Both timers after a reset
        spawn_enabled: Disables both obstacle streams when False
    """
    play_width: float = float(SCREEN_WIDTH)
    play_height: float = float(SCREEN_HEIGHT)
    ground_y: float = float(GROUND_Y)
    ceiling_y: float = float(CEILING_Y)
    avatar_x: float = float(AVATAR_X)
    avatar_width: float = float(AVATAR_WIDTH)
    avatar_height: float = float(AVATAR_HEIGHT)

    gravity: float = GRAVITY
    jump_velocity: float = JUMP_VELOCITY
    flight_thrust: float = FLIGHT_THRUST
    grounded_tolerance: float = GROUNDED_TOLERANCE

    flight_threshold: float = FLIGHT_THRESHOLD
    score_rate: float = SCORE_RATE

    base_speed: float = BASE_SPEED
    speed_ramp: float = SPEED_RAMP
    max_speed_bonus: float = MAX_SPEED_BONUS
    cull_margin: float = CULL_MARGIN

    spike_width_range: Tuple[float, float] = SPIKE_WIDTH_RANGE
    spike_height_range: Tuple[float, float] = SPIKE_HEIGHT_RANGE
    spike_spawn_range: Tuple[float, float] = SPIKE_SPAWN_RANGE
    block_width_range: Tuple[float, float] = BLOCK_WIDTH_RANGE
    block_height_range: Tuple[float, float] = BLOCK_HEIGHT_RANGE
    block_spawn_range: Tuple[float, float] = BLOCK_SPAWN_RANGE

    initial_spike_timer: float = INITIAL_SPIKE_TIMER
    initial_block_timer: float = INITIAL_BLOCK_TIMER
    reset_spawn_timer: float = RESET_SPAWN_TIMER

    spawn_enabled: bool = field(pytree_node=False, default=True)

    @property
    def rest_y(self):
        """Avatar top when standing on the ground."""
        return self.ground_y - self.avatar_height


DEFAULT_PARAMS = GameParams()


def validate_params(params: GameParams) -> GameParams:
    """Check a parameter set for values the engine cannot run with.

    Args:
        params: Parameters to check

    Returns:
        The same parameters, for chaining

    Raises:
        ValueError: If a range is inverted or a physical constant has the wrong sign
    """
    ranges = {
        "spike_width_range": params.spike_width_range,
        "spike_height_range": params.spike_height_range,
        "spike_spawn_range": params.spike_spawn_range,
        "block_width_range": params.block_width_range,
        "block_height_range": params.block_height_range,
        "block_spawn_range": params.block_spawn_range,
    }
    for name, (low, high) in ranges.items():
        if low > high:
            raise ValueError(f"{name} is inverted: ({low}, {high})")
        if low <= 0:
            raise ValueError(f"{name} must be strictly positive, got ({low}, {high})")

    if params.gravity <= 0:
        raise ValueError(f"gravity must be positive, got {params.gravity}")
    if params.jump_velocity >= 0 or params.flight_thrust >= 0:
        raise ValueError(
            f"jump_velocity and flight_thrust must point up (negative), "
            f"got {params.jump_velocity} and {params.flight_thrust}"
        )
    if params.ceiling_y >= params.rest_y:
        raise ValueError(
            f"ceiling_y ({params.ceiling_y}) must be above the rest pose ({params.rest_y})"
        )
    if params.play_width <= 0:
        raise ValueError(f"play_width must be positive, got {params.play_width}")
    return params
