"""DeerDash frame engine."""

from typing import Tuple

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass

from deerdash.collision import detect_collision
from deerdash.obstacles import scroll_obstacles, scroll_speed
from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.physics import integrate_avatar
from deerdash.scoring import accumulate_score, flight_unlocked
from deerdash.session import press_action, end_session
from deerdash.spawner import advance_spawners
from deerdash.state import SessionState, SessionStatus, Obstacle, ObstaclePool


def sanitize_dt(dt) -> jnp.ndarray:
    """Negative, NaN and infinite frame times become zero."""
    dt = jnp.asarray(dt, dtype=jnp.float32)
    return jnp.where(jnp.isfinite(dt) & (dt > 0), dt, 0.0)


def advance(state: SessionState, dt, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Run one frame of the playing pipeline.

    Physics, spawning, scrolling, scoring, then collision. Spawning and scrolling
    see the score from the start of the frame.
    """
    state = state.replace(avatar=integrate_avatar(state.avatar, dt, params))
    state = advance_spawners(state, dt, params)
    state = scroll_obstacles(state, dt, params)
    state = accumulate_score(state, dt, params)
    return jax.lax.cond(detect_collision(state, params), end_session, lambda s: s, state)


def update(state: SessionState, dt, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Advance the session by ``dt`` seconds. Only a PLAYING session moves."""
    dt = sanitize_dt(dt)
    return jax.lax.cond(
        state.status == int(SessionStatus.PLAYING),
        lambda s: advance(s, dt, params),
        lambda s: s,
        state,
    )


def tick(state: SessionState, dt, pressed=False, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """One host frame: apply at most one pending action, then update."""
    state = jax.lax.cond(
        jnp.asarray(pressed, dtype=jnp.bool_),
        lambda s: press_action(s, params),
        lambda s: s,
        state,
    )
    return update(state, dt, params)


@jax.jit
def run_frames(
    state: SessionState,
    dts: jnp.ndarray,
    presses: jnp.ndarray = None,
    params: GameParams = DEFAULT_PARAMS,
) -> Tuple[SessionState, SessionState]:
    """Tick through a sequence of frames.

    Args:
        state: Starting session
        dts: Frame times in seconds, shape (n,)
        presses: Optional boolean press flags, shape (n,)
        params: Game parameters

    Returns:
        Tuple of (final state, stacked per-frame states)
    """
    if presses is None:
        presses = jnp.zeros(dts.shape, dtype=jnp.bool_)

    def frame(s, x):
        dt, pressed = x
        s = tick(s, dt, pressed, params)
        return s, s

    return jax.lax.scan(frame, state, (dts, presses))


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of a session for drawing, taken between frames."""
    status: SessionStatus
    avatar_y: float
    avatar_vy: float
    spikes: Tuple[Obstacle, ...]
    blocks: Tuple[Obstacle, ...]
    score: float
    best: float
    flight_unlocked: bool
    speed: float


def _host_obstacles(pool: ObstaclePool) -> Tuple[Obstacle, ...]:
    count = int(pool.count)
    xs, widths, heights = (np.asarray(a)[:count] for a in (pool.x, pool.width, pool.height))
    return tuple(Obstacle(float(x), float(w), float(h)) for x, w, h in zip(xs, widths, heights))


def snapshot(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> Snapshot:
    """Copy a single (non-batched) session to host memory."""
    score = float(state.score)
    return Snapshot(
        status=SessionStatus(int(state.status)),
        avatar_y=float(state.avatar.y),
        avatar_vy=float(state.avatar.vy),
        spikes=_host_obstacles(state.spikes),
        blocks=_host_obstacles(state.blocks),
        score=score,
        best=float(state.best),
        flight_unlocked=bool(flight_unlocked(score, params)),
        speed=float(scroll_speed(score, params)),
    )
