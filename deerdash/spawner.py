"""Procedural obstacle spawning."""

import jax
import jax.numpy as jnp

from deerdash.obstacles import push
from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.scoring import flight_unlocked
from deerdash.state import ObstaclePool, SessionState


def uniform(key: jax.Array, bounds) -> jnp.ndarray:
    """Scalar float32 drawn uniformly from ``bounds = (low, high)``."""
    low, high = bounds
    return jax.random.uniform(key, (), dtype=jnp.float32, minval=low, maxval=high)


def spawn_obstacle(
    pool: ObstaclePool,
    key: jax.Array,
    width_range,
    height_range,
    play_width,
) -> ObstaclePool:
    """Append a randomly sized obstacle just past the right edge of the play field."""
    key_width, key_height = jax.random.split(key)
    width = uniform(key_width, width_range)
    height = uniform(key_height, height_range)
    return push(pool, play_width + width, width, height)


def _run_stream(pool, timer, enabled, spawn_key, timer_key, width_range, height_range, spawn_range, play_width):
    due = enabled & (timer <= 0)
    pool = jax.lax.cond(
        due,
        lambda p: spawn_obstacle(p, spawn_key, width_range, height_range, play_width),
        lambda p: p,
        pool,
    )
    timer = jnp.where(due, uniform(timer_key, spawn_range), timer)
    return pool, timer


def advance_spawners(state: SessionState, dt, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Count down both spawn timers and spawn the obstacles that are due.

    Ceiling blocks only appear once flight is unlocked. Until then their timer is
    held at the shortest interval so the first block follows the unlock quickly.
    """
    if not params.spawn_enabled:
        return state

    rng, spike_key, spike_timer_key, block_key, block_timer_key = jax.random.split(state.rng, 5)

    spikes, spike_timer = _run_stream(
        state.spikes,
        state.spike_timer - dt,
        True,
        spike_key,
        spike_timer_key,
        params.spike_width_range,
        params.spike_height_range,
        params.spike_spawn_range,
        params.play_width,
    )

    unlocked = flight_unlocked(state.score, params)
    block_timer = jnp.where(unlocked, state.block_timer - dt, params.block_spawn_range[0])
    blocks, block_timer = _run_stream(
        state.blocks,
        block_timer,
        unlocked,
        block_key,
        block_timer_key,
        params.block_width_range,
        params.block_height_range,
        params.block_spawn_range,
        params.play_width,
    )

    return state.replace(
        rng=rng,
        spikes=spikes,
        blocks=blocks,
        spike_timer=spike_timer.astype(state.spike_timer.dtype),
        block_timer=block_timer.astype(state.block_timer.dtype),
    )
