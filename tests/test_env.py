"""Tests for the reinforcement learning environment."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from deerdash import AVATAR_REST_Y, GameParams, SessionStatus
from deerdash.env import DeerDashEnv, upcoming_obstacles, observe
from deerdash.state import empty_pool
from conftest import place_spike


@pytest.fixture(scope="module")
def env():
    return DeerDashEnv()


class TestConstruction:
    """Test environment options."""

    def test_invalid_render_mode(self):
        with pytest.raises(ValueError):
            DeerDashEnv(render_mode="human")

    def test_invalid_color_scheme(self):
        with pytest.raises(ValueError):
            DeerDashEnv(color_scheme="neon")

    def test_invalid_params(self):
        with pytest.raises(ValueError):
            DeerDashEnv(params=GameParams(gravity=-1.0))
        with pytest.raises(ValueError):
            DeerDashEnv(params=GameParams(spike_width_range=(55.0, 30.0)))

    def test_from_minutes(self):
        env = DeerDashEnv(fps=60, frame_skip=4)
        env.from_minutes(1)
        assert env.max_num_steps_per_episodes == 900


class TestResetStep:
    """Test the functional reset/step interface."""

    def test_reset(self, env):
        state, obs, info = env.reset(jax.random.PRNGKey(0))

        assert int(state.status) == SessionStatus.PLAYING
        assert obs.shape == (env.observation_size,)
        assert obs.dtype == jnp.float32
        assert float(info["score"]) == 0.0
        assert int(state.time) == 0

    def test_noop_step_reward(self, env):
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        state, obs, reward, terminated, truncated, info = env.step(state, 0)

        # frame_skip frames of 1/60 s at 10 points per second
        assert float(reward) == pytest.approx(4 / 60 * 10, rel=1e-4)
        assert not bool(terminated)
        assert not bool(truncated)
        assert int(state.time) == 1
        assert float(info["score"]) == pytest.approx(float(reward))

    def test_jump_action(self, env):
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        state, *_ = env.step(state, 1)
        assert float(state.avatar.y) < AVATAR_REST_Y

    def test_collision_terminates(self, env):
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        state = place_spike(state, 150.0, 40.0, 60.0)

        state, _, _, terminated, _, info = env.step(state, 0)

        assert bool(terminated)
        assert int(state.status) == SessionStatus.GAME_OVER
        assert float(info["best"]) == pytest.approx(float(info["score"]))

    def test_truncation(self):
        env = DeerDashEnv(max_num_steps_per_episodes=2)
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        state, _, _, _, truncated, _ = env.step(state, 0)
        assert not bool(truncated)
        state, _, _, _, truncated, _ = env.step(state, 0)
        assert bool(truncated)

    def test_vmap(self, env):
        keys = jax.random.split(jax.random.PRNGKey(0), 8)
        states, obs, _ = jax.vmap(env.reset)(keys)
        assert obs.shape == (8, env.observation_size)

        actions = jnp.array([0, 1] * 4)
        states, obs, rewards, terminated, truncated, _ = jax.vmap(env.step)(states, actions)
        assert rewards.shape == (8,)
        ys = np.asarray(states.avatar.y)
        assert np.all(ys[1::2] < AVATAR_REST_Y)
        assert np.all(ys[0::2] == AVATAR_REST_Y)


class TestObservation:
    """Test observation features."""

    def test_empty_pool_padding(self):
        features = upcoming_obstacles(empty_pool(16), GameParams())
        np.testing.assert_allclose(features, [[1.0, 0.0, 0.0]] * 3)

    def test_nearest_obstacle_first(self, playing_session):
        params = GameParams()
        state = place_spike(playing_session, 800.0, 40.0, 60.0)
        state = place_spike(state, 400.0, 30.0, 70.0)
        state = place_spike(state, 10.0, 30.0, 70.0)  # behind the avatar

        features = np.asarray(upcoming_obstacles(state.spikes, params))

        assert features[0, 0] == pytest.approx((400.0 - 120.0) / 900.0)
        assert features[1, 0] == pytest.approx((800.0 - 120.0) / 900.0)
        np.testing.assert_allclose(features[2], [1.0, 0.0, 0.0])

    def test_observe_resting(self, playing_session):
        obs = observe(playing_session)
        assert obs.shape == (22,)
        assert float(obs[0]) == 0.0
        assert float(obs[2]) == 0.0


class TestRender:
    """Test env rendering."""

    def test_render_rgb_array(self, env):
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        frame = env.render(state)

        assert frame.shape == (480, 900, 3)
        assert frame.dtype == np.uint8

    def test_render_disabled(self):
        env = DeerDashEnv(render_mode=None)
        state, _, _ = env.reset(jax.random.PRNGKey(0))
        assert env.render(state) is None
