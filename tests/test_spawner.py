"""Tests for procedural obstacle spawning."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from deerdash import DEFAULT_PARAMS, GameParams, create_session, start_session
from deerdash.spawner import spawn_obstacle, advance_spawners
from deerdash.state import empty_pool
from conftest import f32, with_score


@pytest.fixture
def spawning_session():
    """A started session with spawning enabled."""
    return start_session(create_session(jax.random.PRNGKey(3)))


class TestSpawnObstacle:
    """Test a single randomly sized obstacle."""

    def test_spawn_ranges(self):
        keys = jax.random.split(jax.random.PRNGKey(0), 1000)
        pools = jax.vmap(
            lambda k: spawn_obstacle(empty_pool(4), k, (30.0, 55.0), (55.0, 79.0), 900.0)
        )(keys)

        widths, heights, xs = pools.width[:, 0], pools.height[:, 0], pools.x[:, 0]
        assert bool(jnp.all(pools.count == 1))
        assert float(widths.min()) >= 30.0 and float(widths.max()) <= 55.0
        assert float(heights.min()) >= 55.0 and float(heights.max()) <= 79.0
        # Obstacles enter just past the right edge
        np.testing.assert_allclose(xs, 900.0 + widths, rtol=1e-6)

    def test_spawn_is_deterministic(self):
        key = jax.random.PRNGKey(42)
        a = spawn_obstacle(empty_pool(4), key, (30.0, 55.0), (55.0, 79.0), 900.0)
        b = spawn_obstacle(empty_pool(4), key, (30.0, 55.0), (55.0, 79.0), 900.0)

        assert float(a.width[0]) == float(b.width[0])
        assert float(a.height[0]) == float(b.height[0])


class TestSpikeStream:
    """Test the ground spike timer."""

    def test_timer_counts_down(self, spawning_session):
        state = advance_spawners(spawning_session, 0.1)

        assert float(state.spike_timer) == pytest.approx(1.1)
        assert int(state.spikes.count) == 0

    def test_spawn_when_due(self, spawning_session):
        state = spawning_session.replace(spike_timer=f32(0.01))
        state = advance_spawners(state, 0.02)

        assert int(state.spikes.count) == 1
        low, high = DEFAULT_PARAMS.spike_spawn_range
        assert low <= float(state.spike_timer) <= high
        assert 30.0 <= float(state.spikes.width[0]) <= 55.0

    def test_same_seed_same_obstacles(self, spawning_session):
        a = advance_spawners(spawning_session.replace(spike_timer=f32(0.0)), 0.01)
        b = advance_spawners(spawning_session.replace(spike_timer=f32(0.0)), 0.01)

        assert float(a.spikes.width[0]) == float(b.spikes.width[0])
        assert float(a.spike_timer) == float(b.spike_timer)
        assert bool(jnp.all(a.rng == b.rng))

    def test_rng_advances(self, spawning_session):
        state = advance_spawners(spawning_session, 0.01)
        assert not bool(jnp.all(state.rng == spawning_session.rng))


class TestBlockStream:
    """Test ceiling blocks and their flight gate."""

    def test_no_blocks_before_flight(self, spawning_session):
        state = spawning_session.replace(block_timer=f32(0.0))
        state = advance_spawners(state, 0.5)

        assert int(state.blocks.count) == 0
        # Timer is held at the shortest interval while locked
        assert float(state.block_timer) == pytest.approx(DEFAULT_PARAMS.block_spawn_range[0])

    def test_blocks_after_flight(self, spawning_session):
        state = with_score(spawning_session, 200.0).replace(block_timer=f32(0.01))
        state = advance_spawners(state, 0.02)

        assert int(state.blocks.count) == 1
        assert 90.0 <= float(state.blocks.width[0]) <= 200.0
        assert 28.0 <= float(state.blocks.height[0]) <= 44.0
        low, high = DEFAULT_PARAMS.block_spawn_range
        assert low <= float(state.block_timer) <= high


class TestDisabled:
    """Test parameters that switch spawning off."""

    def test_disabled_spawning_leaves_state(self):
        params = GameParams(spawn_enabled=False)
        state = start_session(create_session(jax.random.PRNGKey(0), params), params)
        state = state.replace(spike_timer=f32(0.0))

        result = advance_spawners(state, 0.5, params)

        assert int(result.spikes.count) == 0
        assert float(result.spike_timer) == 0.0
        assert bool(jnp.all(result.rng == state.rng))
