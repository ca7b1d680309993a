"""Test configuration and fixtures for DeerDash tests."""

import jax
import jax.numpy as jnp
import pytest

from deerdash import GameParams, create_session, start_session, tick, update
from deerdash.obstacles import push


@pytest.fixture
def quiet_params():
    """Parameters with both obstacle streams switched off."""
    return GameParams(spawn_enabled=False)


@pytest.fixture
def fresh_session():
    """Provide a session waiting for its first start action."""
    return create_session(jax.random.PRNGKey(0))


@pytest.fixture
def playing_session(quiet_params):
    """Provide a started session without spawning."""
    return start_session(create_session(jax.random.PRNGKey(0), quiet_params), quiet_params)


@pytest.fixture(scope="session")
def jit_tick():
    return jax.jit(tick)


@pytest.fixture(scope="session")
def jit_update():
    return jax.jit(update)


def f32(value):
    return jnp.asarray(value, dtype=jnp.float32)


def with_score(state, score):
    """Helper to move a session to a given score without crossing boundaries."""
    return state.replace(
        score=f32(score),
        last_floor=jnp.asarray(int(score), dtype=jnp.int32),
    )


def with_avatar(state, y, vy=0.0):
    return state.replace(avatar=state.avatar.replace(y=f32(y), vy=f32(vy)))


def place_spike(state, x, width, height):
    """Helper to put a ground spike in the live set."""
    return state.replace(spikes=push(state.spikes, x, width, height))


def place_block(state, x, width, height):
    """Helper to put a ceiling block in the live set."""
    return state.replace(blocks=push(state.blocks, x, width, height))
