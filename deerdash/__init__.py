"""DeerDash: a jump-and-fly endless runner simulated with JAX."""

from deerdash.constants import *
from deerdash.params import GameParams, DEFAULT_PARAMS, validate_params
from deerdash.state import (
    SessionStatus, AvatarState, ObstaclePool, Obstacle, SessionState, create_session,
)
from deerdash.session import press_action, reset_session, start_session, apply_control, end_session
from deerdash.scoring import flight_unlocked
from deerdash.engine import update, tick, run_frames, snapshot, Snapshot, sanitize_dt
from deerdash.clock import FrameClock

__all__ = [
    "GameParams",
    "DEFAULT_PARAMS",
    "validate_params",
    "SessionStatus",
    "AvatarState",
    "ObstaclePool",
    "Obstacle",
    "SessionState",
    "create_session",
    "press_action",
    "reset_session",
    "start_session",
    "apply_control",
    "end_session",
    "flight_unlocked",
    "update",
    "tick",
    "run_frames",
    "snapshot",
    "Snapshot",
    "sanitize_dt",
    "FrameClock",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "GROUND_Y",
    "CEILING_Y",
    "AVATAR_REST_Y",
]
