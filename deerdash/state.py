"""DeerDash session state structures."""

import enum

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode

from deerdash.constants import MAX_OBSTACLES
from deerdash.params import GameParams, DEFAULT_PARAMS


class SessionStatus(enum.IntEnum):
    """Lifecycle of a session, stored as int32 in ``SessionState.status``."""
    READY = 0
    PLAYING = 1
    GAME_OVER = 2


@dataclass(frozen=True)
class AvatarState:
    """Vertical motion of the avatar. Its x and size are fixed by ``GameParams``."""
    y: jnp.ndarray
    vy: jnp.ndarray


@dataclass(frozen=True)
class ObstaclePool:
    """Fixed-capacity obstacle stream.

    Slots ``[0, count)`` hold the live obstacles in spawn order, the rest are zero.
    """
    x: jnp.ndarray
    width: jnp.ndarray
    height: jnp.ndarray
    count: jnp.ndarray

    @property
    def capacity(self) -> int:
        return self.x.shape[-1]


@dataclass(frozen=True)
class Obstacle:
    """Host-side copy of a single live obstacle."""
    x: float
    width: float
    height: float


class SessionState(PyTreeNode):
    """Everything one DeerDash session needs between frames.

    Attributes:
        rng: Random source for obstacle generation
        avatar: Avatar position and velocity
        spikes: Ground spike stream
        blocks: Ceiling block stream
        status: ``SessionStatus`` value
        score: Current score, real valued
        best: Best score seen during the process lifetime
        spike_timer: Seconds until the next ground spike
        block_timer: Seconds until the next ceiling block
        last_floor: Last integer score boundary crossed
    """
    rng: jax.Array
    avatar: AvatarState
    spikes: ObstaclePool
    blocks: ObstaclePool
    status: jnp.ndarray
    score: jnp.ndarray
    best: jnp.ndarray
    spike_timer: jnp.ndarray
    block_timer: jnp.ndarray
    last_floor: jnp.ndarray


def resting_avatar(params: GameParams = DEFAULT_PARAMS) -> AvatarState:
    """Avatar standing still on the ground."""
    return AvatarState(
        y=jnp.asarray(params.rest_y, dtype=jnp.float32),
        vy=jnp.zeros((), dtype=jnp.float32),
    )


def empty_pool(capacity: int = MAX_OBSTACLES) -> ObstaclePool:
    return ObstaclePool(
        x=jnp.zeros(capacity, dtype=jnp.float32),
        width=jnp.zeros(capacity, dtype=jnp.float32),
        height=jnp.zeros(capacity, dtype=jnp.float32),
        count=jnp.zeros((), dtype=jnp.int32),
    )


def create_session(
    rng: jax.Array = jax.random.PRNGKey(0),
    params: GameParams = DEFAULT_PARAMS,
    capacity: int = MAX_OBSTACLES,
) -> SessionState:
    """Create a session waiting for its first start action."""
    return SessionState(
        rng=rng,
        avatar=resting_avatar(params),
        spikes=empty_pool(capacity),
        blocks=empty_pool(capacity),
        status=jnp.asarray(int(SessionStatus.READY), dtype=jnp.int32),
        score=jnp.zeros((), dtype=jnp.float32),
        best=jnp.zeros((), dtype=jnp.float32),
        spike_timer=jnp.asarray(params.initial_spike_timer, dtype=jnp.float32),
        block_timer=jnp.asarray(params.initial_block_timer, dtype=jnp.float32),
        last_floor=jnp.zeros((), dtype=jnp.int32),
    )
