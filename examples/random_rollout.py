import time

import jax

from deerdash.env import DeerDashEnv
from deerdash.logging import SessionLogger
from deerdash.rendering import create_video
from deerdash.rollout import simulate, summarize

if __name__ == "__main__":
    env = DeerDashEnv(frame_skip=4)
    logger = SessionLogger("Rollout")

    num_steps = 10000
    logger.log_session_start({"num_steps": num_steps, "frame_skip": env.frame_skip, "fps": env.fps})

    rng = jax.random.PRNGKey(0)

    start = time.time()
    final_state, metrics = jax.block_until_ready(simulate(env, rng, num_steps))
    logger.info(f"Execution time (s): {time.time() - start:.2f}")

    logger.log_summary(summarize(metrics))

    # Replay a short episode frame by frame
    state, _, _ = env.reset(jax.random.PRNGKey(1))
    frames = []
    for i in range(300):
        state, _, _, terminated, _, _ = env.step(state, int(i % 20 == 0))
        frames.append(env.render(state))
        if terminated:
            break

    create_video(frames, filename="deerdash_random.mp4", fps=env.fps / env.frame_skip)
