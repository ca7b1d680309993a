import dataclasses
from functools import partial
from typing import Any, Dict, Optional

import jax
import jax.numpy as jnp
import numpy as np

from deerdash.engine import update, snapshot
from deerdash.obstacles import live_mask, scroll_speed
from deerdash.params import GameParams, DEFAULT_PARAMS, validate_params
from deerdash.rendering import render_frame, create_color_scheme, load_avatar_sprite
from deerdash.scoring import flight_unlocked
from deerdash.session import apply_control, start_session
from deerdash.state import SessionState, SessionStatus, ObstaclePool, create_session

NUM_OBSERVED_OBSTACLES = 3


class DeerDashEnvState(SessionState):
    """Session state with episode bookkeeping.

    Attributes:
        time: Current timestep in the episode
        previous_score: Score from the previous step (for reward calculation)
        current_score: Current score in the episode
    """
    time: jnp.ndarray = 0
    previous_score: jnp.ndarray = 0.
    current_score: jnp.ndarray = 0.


def asdict_non_recursive(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dictionary without recursive conversion.

    Args:
        obj: Dataclass instance to convert

    Returns:
        Dictionary mapping field names to their values
    """
    return {field.name: getattr(obj, field.name) for field in dataclasses.fields(obj)}


def upcoming_obstacles(pool: ObstaclePool, params: GameParams, k: int = NUM_OBSERVED_OBSTACLES) -> jnp.ndarray:
    """Features of the ``k`` nearest obstacles not yet behind the avatar.

    Returns:
        Array of shape (k, 3) with (distance ahead, width, height) normalised by the
        play field, padded with (1, 0, 0) when fewer obstacles are ahead
    """
    ahead = live_mask(pool) & (pool.x + pool.width > params.avatar_x)
    distance = jnp.where(ahead, pool.x - params.avatar_x, jnp.inf)
    order = jnp.argsort(distance)[:k]
    valid = jnp.isfinite(distance[order])
    features = jnp.stack(
        [
            distance[order] / params.play_width,
            pool.width[order] / params.play_width,
            pool.height[order] / params.ground_y,
        ],
        axis=-1,
    )
    padding = jnp.array([1.0, 0.0, 0.0], dtype=jnp.float32)
    return jnp.where(valid[:, None], features, padding).astype(jnp.float32)


def observe(state: SessionState, params: GameParams = DEFAULT_PARAMS) -> jnp.ndarray:
    """Flat float32 observation vector of a session."""
    avatar = jnp.stack([
        (params.rest_y - state.avatar.y) / params.rest_y,
        state.avatar.vy / 1000.0,
        flight_unlocked(state.score, params).astype(jnp.float32),
        (scroll_speed(state.score, params) - params.base_speed) / params.max_speed_bonus,
    ]).astype(jnp.float32)
    return jnp.concatenate([
        avatar,
        upcoming_obstacles(state.spikes, params).ravel(),
        upcoming_obstacles(state.blocks, params).ravel(),
    ])


class DeerDashEnv:
    """JAX-compatible DeerDash environment for reinforcement learning.

    Provides an OpenAI Gym-style interface over the frame engine with JIT
    compilation, so thousands of sessions can be simulated with ``jax.vmap``.
    Action 0 does nothing, action 1 jumps (or thrusts once flight is unlocked).
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 60}

    def __init__(
        self,
        params: GameParams = DEFAULT_PARAMS,
        max_num_steps_per_episodes: int = 4500,
        fps: int = 60,
        frame_skip: int = 4,
        render_mode: Optional[str] = "rgb_array",
        render_scale: float = 1.0,
        color_scheme: str = "meadow",
        sprite_path: Optional[str] = None,
    ):
        """Initialize the DeerDash RL environment.

        Args:
            params: Game parameters
            max_num_steps_per_episodes: Maximum steps before episode truncation
            fps: Simulated frame rate
            frame_skip: Number of frames simulated per environment step
            render_mode: Rendering mode ("rgb_array" or None)
            render_scale: Scaling factor for rendered frames
            color_scheme: Color scheme for rendering ("meadow", "dusk", "mono")
            sprite_path: Optional avatar image, a placeholder is drawn without it
        """
        self.params = validate_params(params)
        self.max_num_steps_per_episodes = max_num_steps_per_episodes
        self.fps = fps
        self.frame_skip = frame_skip

        self.render_mode = render_mode
        self.render_scale = render_scale
        self.color_scheme = color_scheme

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(
                f"Unsupported render_mode '{render_mode}'. "
                f"Supported modes: {self.metadata['render_modes']}"
            )
        create_color_scheme(color_scheme)

        self.sprite = load_avatar_sprite(sprite_path, self.params) if sprite_path is not None else None

    @property
    def frame_time(self) -> float:
        """Seconds of simulated time per frame."""
        return 1.0 / self.fps

    def from_minutes(self, minutes: float):
        """Set episode length based on desired gameplay duration.

        Args:
            minutes: Desired episode length in real-world minutes
        """
        self.max_num_steps_per_episodes = int(minutes * 60 * self.fps) // self.frame_skip

    @partial(jax.jit, static_argnums=0)
    def reset(self, rng: jax.random.PRNGKey):
        """Start a fresh session, already playing.

        Args:
            rng: JAX random key driving obstacle generation

        Returns:
            Tuple of:
                - state: Initial DeerDashEnvState
                - observation: Initial observation vector
                - info: Dictionary with initial score and best
        """
        session = start_session(create_session(rng, self.params), self.params)
        state = DeerDashEnvState(
            **asdict_non_recursive(session),
            time=jnp.zeros((), dtype=jnp.int32),
            previous_score=jnp.zeros((), dtype=jnp.float32),
            current_score=jnp.zeros((), dtype=jnp.float32),
        )
        return state, observe(state, self.params), {"score": state.current_score, "best": state.best}

    @partial(jax.jit, static_argnums=0)
    def step(self, state: DeerDashEnvState, action: int | jnp.ndarray):
        """Execute one environment step.

        Applies the action once, then simulates ``frame_skip`` frames.

        Args:
            state: Current environment state
            action: 0 for no-op, 1 for jump/thrust

        Returns:
            Tuple of:
                - next_state: Updated environment state
                - observation: Observation vector
                - reward: Score gained during the step
                - terminated: Boolean indicating if the avatar crashed
                - truncated: Boolean indicating if the episode was truncated (max steps)
                - info: Dictionary with current score and best
        """
        playing = state.status == int(SessionStatus.PLAYING)
        state = jax.lax.cond(
            (action == 1) & playing,
            lambda s: apply_control(s, self.params),
            lambda s: s,
            state,
        )

        def frame(s, _):
            return update(s, self.frame_time, self.params), None

        final_state, _ = jax.lax.scan(frame, state, length=self.frame_skip)

        previous_score = final_state.previous_score
        current_score = final_state.score
        reward = current_score - previous_score

        final_state = final_state.replace(
            current_score=current_score,
            previous_score=current_score,
            time=final_state.time + 1,
        )

        terminated = final_state.status == int(SessionStatus.GAME_OVER)
        truncated = final_state.time >= self.max_num_steps_per_episodes
        return (
            final_state,
            observe(final_state, self.params),
            reward,
            terminated,
            truncated,
            {"score": final_state.current_score, "best": final_state.best},
        )

    def render(self, state: SessionState) -> Optional[np.ndarray]:
        """Render the current environment state.

        Args:
            state: Environment state to render

        Returns:
            RGB array of shape (height, width, 3) if render_mode="rgb_array", else None
        """
        if self.render_mode == "rgb_array":
            return render_frame(
                snapshot(state, self.params),
                params=self.params,
                sprite=self.sprite,
                scale=self.render_scale,
                color_scheme=self.color_scheme,
            )
        return None

    @property
    def num_actions(self) -> int:
        return 2

    @property
    def observation_size(self) -> int:
        return 4 + 2 * 3 * NUM_OBSERVED_OBSTACLES
