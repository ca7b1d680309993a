from typing import Tuple, Dict, Any
import jax
import jax.numpy as jnp

from flax.struct import dataclass
from gymnax.environments.environment import Environment, EnvParams
from gymnax.environments.spaces import Discrete, Box

from deerdash.env import DeerDashEnv, DeerDashEnvState


@dataclass
class DeerDashEnvParams(EnvParams):
    """Gymnax-compatible parameters for the DeerDash environment."""
    max_steps_in_episode: int = 4500


class DeerDashGymnaxWrapper(Environment[DeerDashEnvState, DeerDashEnvParams]):
    """Gymnax wrapper for DeerDashEnv."""

    def __init__(self, env: DeerDashEnv):
        """Initialize wrapper with a DeerDashEnv instance.

        Args:
            env: Configured DeerDashEnv instance
        """
        self._env = env

    @property
    def default_params(self) -> DeerDashEnvParams:
        return DeerDashEnvParams(
            max_steps_in_episode=self._env.max_num_steps_per_episodes
        )

    def step_env(
            self,
            key: jax.Array,
            state: DeerDashEnvState,
            action: int,
            params: DeerDashEnvParams,
    ) -> Tuple[jax.Array, DeerDashEnvState, jax.Array, jax.Array, Dict[Any, Any]]:
        """Execute one environment step."""
        next_state, obs, reward, terminated, truncated, info = self._env.step(state, action)
        done = terminated | truncated
        return obs, next_state, reward, done, info

    def reset_env(
            self,
            key: jax.Array,
            params: DeerDashEnvParams
    ) -> Tuple[jax.Array, DeerDashEnvState]:
        """Reset environment to initial state."""
        state, obs, info = self._env.reset(key)
        return obs, state

    @property
    def name(self) -> str:
        return "DeerDash-v0"

    @property
    def num_actions(self) -> int:
        return self._env.num_actions

    def action_space(self, params: DeerDashEnvParams) -> Discrete:
        return Discrete(self.num_actions)

    def observation_space(self, params: DeerDashEnvParams) -> Box:
        return Box(
            low=-jnp.inf,
            high=jnp.inf,
            shape=(self._env.observation_size,),
            dtype=jnp.float32
        )
