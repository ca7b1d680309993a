"""Headless simulation of many environment steps."""

from typing import Callable, Dict, Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np

from deerdash.env import DeerDashEnv, DeerDashEnvState
from deerdash.logging import scan_with_progress

Policy = Callable[[jax.Array, jnp.ndarray], jnp.ndarray]


def random_policy(num_actions: int = 2) -> Policy:
    """Policy sampling actions uniformly."""
    def policy(rng: jax.Array, observation: jnp.ndarray):
        return jax.random.randint(rng, (), 0, num_actions)
    return policy


def simulate(
    env: DeerDashEnv,
    rng: jax.Array,
    num_steps: int,
    policy: Optional[Policy] = None,
    show_progress: bool = True,
) -> Tuple[DeerDashEnvState, Dict[str, jnp.ndarray]]:
    """Roll ``policy`` through ``num_steps`` environment steps.

    Terminated or truncated episodes are reset inside the scan, so the returned
    metrics cover every episode that started.

    Returns:
        Tuple of (final environment state, per-step metrics with keys "score",
        "best", "reward", "terminated" and "truncated")
    """
    if policy is None:
        policy = random_policy(env.num_actions)

    def env_step(carry, x):
        rng, state, observation = carry
        rng, rng_action, rng_reset = jax.random.split(rng, 3)
        action = policy(rng_action, observation)
        next_state, next_observation, reward, terminated, truncated, info = env.step(state, action)
        metrics = {
            "score": info["score"],
            "best": info["best"],
            "reward": reward,
            "terminated": terminated,
            "truncated": truncated,
        }

        next_state, next_observation, _ = jax.lax.cond(
            terminated | truncated,
            env.reset,
            lambda _: (next_state, next_observation, info),
            rng_reset,
        )
        return (rng, next_state, next_observation), metrics

    if show_progress:
        env_step = scan_with_progress(num_steps, desc=f"DeerDash rollout ({num_steps:,} steps)")(env_step)

    @jax.jit
    def run(rng):
        rng, rng_reset = jax.random.split(rng)
        state, observation, _ = env.reset(rng_reset)
        (_, final_state, _), metrics = jax.lax.scan(
            env_step, (rng, state, observation), jnp.arange(num_steps)
        )
        return final_state, metrics

    return run(rng)


def summarize(metrics: Dict[str, jnp.ndarray]) -> Dict[str, float]:
    """Reduce rollout metrics to per-episode statistics.

    An episode's final score is the score at the step it terminated or was
    truncated. The trailing unfinished episode is ignored.
    """
    scores = np.asarray(metrics["score"])
    ended = np.asarray(metrics["terminated"]) | np.asarray(metrics["truncated"])
    finals = scores[ended]
    return {
        "steps": int(scores.shape[0]),
        "episodes": int(ended.sum()),
        "crashes": int(np.asarray(metrics["terminated"]).sum()),
        "mean_score": float(finals.mean()) if finals.size else 0.0,
        "max_score": float(finals.max()) if finals.size else 0.0,
        "best": float(np.asarray(metrics["best"]).max()) if "best" in metrics else 0.0,
        "total_reward": float(np.asarray(metrics["reward"]).sum()),
    }
