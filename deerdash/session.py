"""Session lifecycle: reset, start, in-game control and game over."""

import jax
import jax.numpy as jnp

from deerdash.obstacles import clear
from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.physics import is_grounded
from deerdash.scoring import flight_unlocked, settle_best
from deerdash.state import SessionState, SessionStatus


def _status(value: SessionStatus) -> jnp.ndarray:
    return jnp.asarray(int(value), dtype=jnp.int32)


def reset_session(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Put the avatar back at rest and clear the run. ``best`` and ``rng`` survive."""
    return state.replace(
        avatar=state.avatar.replace(
            y=jnp.full_like(state.avatar.y, params.rest_y),
            vy=jnp.zeros_like(state.avatar.vy),
        ),
        spikes=clear(state.spikes),
        blocks=clear(state.blocks),
        score=jnp.zeros_like(state.score),
        last_floor=jnp.zeros_like(state.last_floor),
        spike_timer=jnp.full_like(state.spike_timer, params.reset_spawn_timer),
        block_timer=jnp.full_like(state.block_timer, params.reset_spawn_timer),
    )


def start_session(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Reset and begin playing."""
    return reset_session(state, params).replace(status=_status(SessionStatus.PLAYING))


def apply_control(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """In-game press: flight thrust once unlocked, otherwise a jump from the ground.

    Airborne presses before flight is unlocked are ignored.
    """
    vy = jnp.where(
        flight_unlocked(state.score, params),
        params.flight_thrust,
        jnp.where(is_grounded(state.avatar, params), params.jump_velocity, state.avatar.vy),
    )
    return state.replace(avatar=state.avatar.replace(vy=vy.astype(state.avatar.vy.dtype)))


def press_action(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Handle the single input action.

    READY and GAME_OVER start a fresh run, PLAYING forwards to ``apply_control``.
    """
    return jax.lax.switch(
        state.status,
        [
            lambda s: start_session(s, params),
            lambda s: apply_control(s, params),
            lambda s: start_session(s, params),
        ],
        state,
    )


def end_session(state: SessionState) -> SessionState:
    """Collision outcome: freeze the run and settle the best score."""
    return settle_best(state).replace(status=_status(SessionStatus.GAME_OVER))
