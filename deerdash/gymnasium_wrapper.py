"""
Gymnasium compatibility wrapper for DeerDash.

Exposes the JAX environment through the Gymnasium API while keeping the
jit-compiled engine underneath.
"""

from typing import Dict, Optional, Tuple
import jax
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from deerdash.env import DeerDashEnv


class GymnasiumWrapper(gym.Env):
    """
    Gymnasium-compatible wrapper for a DeerDash environment.

    The wrapper keeps the current session and an RNG key so it can offer the
    stateful ``reset``/``step`` API.

    Example:
        ```python
        from deerdash.gymnasium_wrapper import make_gymnasium_env

        env = make_gymnasium_env(frame_skip=2)
        obs, info = env.reset(seed=0)
        obs, reward, terminated, truncated, info = env.step(1)
        ```
    """

    def __init__(self, env: DeerDashEnv, seed: Optional[int] = None):
        """
        Args:
            env: A DeerDash environment instance
            seed: Optional seed for obstacle generation
        """
        self.env = env
        self._state = None
        self._rng_key = jax.random.PRNGKey(seed if seed is not None else 42)

        self.metadata = env.metadata.copy()
        self.render_mode = env.render_mode
        self.action_space = spaces.Discrete(env.num_actions)
        self.observation_space = spaces.Box(
            low=-np.inf, high=np.inf, shape=(env.observation_size,), dtype=np.float32
        )
        self.spec = None

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Start a new episode.

        Args:
            seed: Optional seed for this episode
            options: Unused

        Returns:
            Tuple of (observation, info)
        """
        if seed is not None:
            self._rng_key = jax.random.PRNGKey(seed)

        reset_key, self._rng_key = jax.random.split(self._rng_key)
        self._state, observation, info = self.env.reset(reset_key)

        observation = np.array(observation)
        info = {k: np.array(v) for k, v in info.items()}
        return observation, info

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Execute one environment step.

        Args:
            action: 0 for no-op, 1 for jump/thrust

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if self._state is None:
            raise RuntimeError("Must call reset() before step()")

        (self._state, observation, reward,
         terminated, truncated, info) = self.env.step(self._state, action)

        observation = np.array(observation)
        info = {k: np.array(v) for k, v in info.items()}
        return observation, float(reward), bool(terminated), bool(truncated), info

    def render(self) -> Optional[np.ndarray]:
        if self._state is None:
            return None
        return self.env.render(self._state)

    def close(self):
        pass

    @property
    def unwrapped(self):
        """Access the underlying DeerDash environment."""
        return self.env


class VectorizedGymnasiumWrapper:
    """
    Runs ``num_envs`` sessions in lockstep through ``jax.vmap``.
    """

    def __init__(self, env: DeerDashEnv, num_envs: int, seed: Optional[int] = None):
        """
        Args:
            env: A DeerDash environment instance
            num_envs: Number of parallel sessions
            seed: Optional seed for obstacle generation
        """
        self.env = env
        self.num_envs = num_envs
        self._states = None

        base_key = jax.random.PRNGKey(seed if seed is not None else 42)
        self._rng_keys = jax.random.split(base_key, num_envs)

        single_wrapper = GymnasiumWrapper(env, seed=0)
        self.action_space = single_wrapper.action_space
        self.observation_space = single_wrapper.observation_space
        self.metadata = single_wrapper.metadata.copy()
        self.spec = None

        self._vmap_reset = jax.vmap(env.reset)
        self._vmap_step = jax.vmap(env.step)

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None):
        """Reset all sessions."""
        if seed is not None:
            self._rng_keys = jax.random.split(jax.random.PRNGKey(seed), self.num_envs)

        reset_keys = jax.random.split(self._rng_keys[0], self.num_envs)
        self._rng_keys = jax.random.split(self._rng_keys[-1], self.num_envs)

        self._states, observations, infos = self._vmap_reset(reset_keys)
        return np.array(observations), {k: np.array(v) for k, v in infos.items()}

    def step(self, actions):
        """Step all sessions with the given actions."""
        if self._states is None:
            raise RuntimeError("Must call reset() before step()")

        (self._states, observations, rewards,
         terminated, truncated, infos) = self._vmap_step(self._states, np.asarray(actions))

        return (
            np.array(observations),
            np.array(rewards),
            np.array(terminated),
            np.array(truncated),
            {k: np.array(v) for k, v in infos.items()},
        )

    def close(self):
        pass


def make_gymnasium_env(seed: Optional[int] = None, **kwargs) -> GymnasiumWrapper:
    """
    Create a Gymnasium-compatible DeerDash environment.

    Args:
        seed: Optional seed for obstacle generation
        **kwargs: Arguments passed to DeerDashEnv

    Returns:
        GymnasiumWrapper instance
    """
    return GymnasiumWrapper(DeerDashEnv(**kwargs), seed=seed)


def make_vectorized_env(num_envs: int, seed: Optional[int] = None, **kwargs) -> VectorizedGymnasiumWrapper:
    """
    Create a vectorized Gymnasium-compatible DeerDash environment.

    Args:
        num_envs: Number of parallel sessions
        seed: Optional seed for obstacle generation
        **kwargs: Arguments passed to DeerDashEnv

    Returns:
        VectorizedGymnasiumWrapper instance
    """
    return VectorizedGymnasiumWrapper(DeerDashEnv(**kwargs), num_envs, seed=seed)
