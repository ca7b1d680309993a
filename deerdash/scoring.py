"""Score accrual, best tracking and progression."""

import jax.numpy as jnp

from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.state import SessionState


def flight_unlocked(score, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Flight is available once the score reaches the threshold."""
    return score >= params.flight_threshold


def accumulate_score(state: SessionState, dt, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Add ``dt`` seconds worth of score.

    ``best`` follows the integer part of the score: it is only raised when a new
    integer boundary is crossed.
    """
    score = (state.score + dt * params.score_rate).astype(state.score.dtype)
    floor = jnp.floor(score).astype(state.last_floor.dtype)
    crossed = floor != state.last_floor
    best = jnp.where(crossed & (floor > state.best), floor.astype(state.best.dtype), state.best)
    return state.replace(
        score=score,
        last_floor=jnp.where(crossed, floor, state.last_floor),
        best=best,
    )


def settle_best(state: SessionState) -> SessionState:
    """Raise ``best`` to the raw, non-floored score. Used when a run ends."""
    return state.replace(best=jnp.maximum(state.best, state.score))
