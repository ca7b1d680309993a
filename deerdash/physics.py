"""Avatar physics and motion."""

import jax.numpy as jnp

from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.state import AvatarState


def integrate_avatar(avatar: AvatarState, dt, params: GameParams = DEFAULT_PARAMS) -> AvatarState:
    """Apply gravity for ``dt`` seconds and clamp the avatar to the play field.

    A ceiling hit only cancels upward velocity so the avatar falls back at once;
    landing cancels all vertical motion.
    """
    vy = avatar.vy + params.gravity * dt
    y = avatar.y + vy * dt

    hit_ceiling = y < params.ceiling_y
    vy = jnp.where(hit_ceiling & (vy < 0), 0.0, vy)
    y = jnp.where(hit_ceiling, params.ceiling_y, y)

    rest_y = params.rest_y
    hit_ground = y > rest_y
    vy = jnp.where(hit_ground, 0.0, vy)
    y = jnp.where(hit_ground, rest_y, y)

    return avatar.replace(y=y.astype(avatar.y.dtype), vy=vy.astype(avatar.vy.dtype))


def is_grounded(avatar: AvatarState, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Avatar stands on the ground, within ``grounded_tolerance`` pixels."""
    return avatar.y >= params.rest_y - params.grounded_tolerance
