"""Axis-aligned collision detection between the avatar and obstacles."""

import jax.numpy as jnp

from deerdash.obstacles import live_mask
from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.state import AvatarState, ObstaclePool, SessionState


def overlaps(a_left, a_right, a_top, a_bottom, b_left, b_right, b_top, b_bottom) -> jnp.ndarray:
    """Strict AABB overlap: boxes sharing only an edge do not overlap."""
    overlap_x = (a_right > b_left) & (a_left < b_right)
    overlap_y = (a_bottom > b_top) & (a_top < b_bottom)
    return overlap_x & overlap_y


def hit_mask(avatar: AvatarState, pool: ObstaclePool, top, bottom, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Per-slot overlap of the avatar with the live obstacles of ``pool``.

    Args:
        avatar: Avatar to test
        pool: Obstacle stream
        top: Top edge of each obstacle, shape of ``pool.x`` or broadcastable
        bottom: Bottom edge of each obstacle
        params: Avatar geometry

    Returns:
        Boolean array with one entry per slot, False for free slots
    """
    hits = overlaps(
        params.avatar_x,
        params.avatar_x + params.avatar_width,
        avatar.y,
        avatar.y + params.avatar_height,
        pool.x,
        pool.x + pool.width,
        top,
        bottom,
    )
    return hits & live_mask(pool)


def first_hit(mask: jnp.ndarray):
    """First colliding slot in spawn order.

    Returns:
        Tuple of (any slot collides, index of the first one or -1)
    """
    hit = jnp.any(mask)
    return hit, jnp.where(hit, jnp.argmax(mask), -1)


def spike_hits(avatar: AvatarState, spikes: ObstaclePool, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Spikes stand on the ground line."""
    return hit_mask(avatar, spikes, params.ground_y - spikes.height, params.ground_y, params)


def block_hits(avatar: AvatarState, blocks: ObstaclePool, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Blocks hang from the top of the play field."""
    return hit_mask(avatar, blocks, 0.0, blocks.height, params)


def detect_collision(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """True when the avatar touches any spike or ceiling block."""
    spike_hit, _ = first_hit(spike_hits(state.avatar, state.spikes, params))
    block_hit, _ = first_hit(block_hits(state.avatar, state.blocks, params))
    return spike_hit | block_hit
