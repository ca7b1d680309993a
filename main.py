"""
Playable DeerDash window
"""

import argparse
import time
from collections import deque

import jax
import numpy as np
import pygame

from deerdash import create_session, snapshot, tick, FrameClock, SessionStatus, DEFAULT_PARAMS
from deerdash.logging import SessionLogger
from deerdash.rendering import render_frame, load_avatar_sprite

ACTION_KEYS = (pygame.K_SPACE, pygame.K_UP)


def draw(screen, frame: np.ndarray):
    """Blit an RGB frame of shape (height, width, 3) onto the window."""
    surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
    screen.blit(surface, (0, 0))


def run_game(seed=0, scale=1.0, color_scheme="meadow", sprite_path=None, fps=60):
    """Main game loop: input -> action queue -> engine tick -> render."""
    params = DEFAULT_PARAMS
    logger = SessionLogger("DeerDash")
    logger.log_session_start({
        "seed": seed,
        "scale": scale,
        "color_scheme": color_scheme,
        "sprite": sprite_path or "placeholder",
        "fps": fps,
    })

    pygame.init()
    width, height = int(params.play_width * scale), int(params.play_height * scale)
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption("DeerDash")
    pygame_clock = pygame.time.Clock()

    sprite = load_avatar_sprite(sprite_path, params) if sprite_path else None

    state = create_session(jax.random.PRNGKey(seed), params)
    step = jax.jit(tick)
    # Compile before the first frame so the clock does not see the compile stall
    step(state, 0.0, False, params)

    frame_clock = FrameClock()
    pending = deque()
    status = SessionStatus.READY
    flight_logged = False
    running = True

    print("🎮 Controls: SPACE/UP/click = start, jump or fly, ESC = quit")

    while running:
        pygame_clock.tick(fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in ACTION_KEYS:
                    pending.append(True)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                pending.append(True)

        # One queued press per frame, the rest wait for the following frames
        pressed = bool(pending.popleft()) if pending else False
        previous_best = float(state.best)
        state = step(state, frame_clock.tick(time.perf_counter()), pressed, params)

        snap = snapshot(state, params)
        if snap.status != status:
            if snap.status == SessionStatus.PLAYING:
                logger.log_run_start()
                flight_logged = False
            elif snap.status == SessionStatus.GAME_OVER:
                logger.log_game_over(snap.score, snap.best, previous_best)
            status = snap.status
        if snap.flight_unlocked and not flight_logged:
            logger.log_flight_unlocked(snap.score)
            flight_logged = True

        draw(screen, render_frame(snap, params, sprite, scale, color_scheme))
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Play DeerDash")
    parser.add_argument("--seed", type=int, default=0, help="Obstacle generation seed (default: 0)")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scaling factor (default: 1.0)")
    parser.add_argument(
        "--color_scheme",
        type=str,
        default="meadow",
        help="Color scheme: meadow, dusk or mono (default: meadow)",
    )
    parser.add_argument("--sprite", type=str, default="public/deer.png", help="Avatar image (default: public/deer.png)")
    parser.add_argument("--fps", type=int, default=60, help="Target frame rate (default: 60)")
    args = parser.parse_args()

    run_game(args.seed, args.scale, args.color_scheme, args.sprite, args.fps)
