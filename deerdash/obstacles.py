"""Obstacle pool operations and scrolling."""

import jax.numpy as jnp

from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.state import ObstaclePool, SessionState


def live_mask(pool: ObstaclePool) -> jnp.ndarray:
    """Boolean mask of the occupied slots."""
    return jnp.arange(pool.capacity) < pool.count


def push(pool: ObstaclePool, x, width, height) -> ObstaclePool:
    """Append an obstacle after the live ones. A full pool drops it."""
    return pool.replace(
        x=pool.x.at[pool.count].set(x, mode="drop"),
        width=pool.width.at[pool.count].set(width, mode="drop"),
        height=pool.height.at[pool.count].set(height, mode="drop"),
        count=jnp.minimum(pool.count + 1, pool.capacity).astype(pool.count.dtype),
    )


def shift(pool: ObstaclePool, distance) -> ObstaclePool:
    """Move every live obstacle left by ``distance`` pixels."""
    return pool.replace(x=jnp.where(live_mask(pool), pool.x - distance, pool.x))


def cull(pool: ObstaclePool, margin) -> ObstaclePool:
    """Drop obstacles whose right edge reached ``margin``, keeping spawn order."""
    keep = live_mask(pool) & (pool.x + pool.width > margin)
    # Stable sort moves kept slots to the front without reordering them
    order = jnp.argsort(jnp.logical_not(keep), stable=True)
    count = jnp.sum(keep).astype(pool.count.dtype)
    occupied = jnp.arange(pool.capacity) < count
    return pool.replace(
        x=jnp.where(occupied, pool.x[order], 0.0),
        width=jnp.where(occupied, pool.width[order], 0.0),
        height=jnp.where(occupied, pool.height[order], 0.0),
        count=count,
    )


def clear(pool: ObstaclePool) -> ObstaclePool:
    return pool.replace(
        x=jnp.zeros_like(pool.x),
        width=jnp.zeros_like(pool.width),
        height=jnp.zeros_like(pool.height),
        count=jnp.zeros_like(pool.count),
    )


def scroll_speed(score, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Scroll speed in px/s: a linear ramp on score, capped."""
    return params.base_speed + jnp.minimum(score * params.speed_ramp, params.max_speed_bonus)


def scroll_obstacles(state: SessionState, dt, params: GameParams = DEFAULT_PARAMS) -> SessionState:
    """Advance both obstacle streams and retire the ones that left the screen."""
    distance = scroll_speed(state.score, params) * dt
    return state.replace(
        spikes=cull(shift(state.spikes, distance), params.cull_margin),
        blocks=cull(shift(state.blocks, distance), params.cull_margin),
    )
