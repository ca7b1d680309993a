"""DeerDash rendering utilities for visualization."""
import time
from typing import Dict, Optional, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from deerdash.logging import ConsoleLogger
from deerdash.params import GameParams, DEFAULT_PARAMS
from deerdash.state import SessionStatus

Color = Tuple[int, int, int]

logger = ConsoleLogger("Rendering")

OVERLAY_TEXT = {
    SessionStatus.READY: "Press space (or click) to start",
    SessionStatus.GAME_OVER: "Ouch! Press space to try again",
}


def create_color_scheme(scheme: str = "meadow") -> Dict[str, Color]:
    """Get predefined color schemes for DeerDash rendering.

    Args:
        scheme: Color scheme name ("meadow", "dusk", "mono")

    Returns:
        Mapping of scene element to RGB color
    """
    schemes = {
        "meadow": {
            "sky_top": (249, 228, 207),
            "sky_bottom": (245, 195, 135),
            "ground": (214, 176, 126),
            "ground_edge": (194, 141, 76),
            "spike": (138, 59, 29),
            "spike_edge": (93, 36, 16),
            "block": (245, 158, 11),
            "block_edge": (180, 83, 9),
            "avatar": (242, 124, 45),
            "avatar_detail": (255, 243, 224),
            "hud": (75, 45, 18),
            "overlay": (110, 110, 110),
        },
        "dusk": {
            "sky_top": (40, 36, 80),
            "sky_bottom": (190, 90, 110),
            "ground": (70, 52, 60),
            "ground_edge": (40, 28, 36),
            "spike": (220, 220, 230),
            "spike_edge": (150, 150, 170),
            "block": (120, 200, 255),
            "block_edge": (60, 120, 190),
            "avatar": (255, 190, 90),
            "avatar_detail": (60, 40, 30),
            "hud": (245, 240, 255),
            "overlay": (235, 225, 245),
        },
        "mono": {
            "sky_top": (255, 255, 255),
            "sky_bottom": (220, 220, 220),
            "ground": (120, 120, 120),
            "ground_edge": (60, 60, 60),
            "spike": (30, 30, 30),
            "spike_edge": (0, 0, 0),
            "block": (80, 80, 80),
            "block_edge": (0, 0, 0),
            "avatar": (0, 0, 0),
            "avatar_detail": (255, 255, 255),
            "hud": (0, 0, 0),
            "overlay": (60, 60, 60),
        },
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def load_avatar_sprite(path: str, params: GameParams = DEFAULT_PARAMS) -> Optional[np.ndarray]:
    """Load the avatar image resized to the avatar box.

    A missing or unreadable image is not an error: a warning is logged and None is
    returned, and ``render_frame`` draws a placeholder instead.

    Returns:
        RGBA uint8 array of shape (avatar_height, avatar_width, 4), or None
    """
    size = (int(params.avatar_width), int(params.avatar_height))
    try:
        with Image.open(path) as image:
            sprite = image.convert("RGBA").resize(size, Image.Resampling.NEAREST)
    except OSError as e:
        logger.warning(f"Avatar sprite '{path}' unavailable ({e}), drawing placeholder")
        return None
    return np.asarray(sprite, dtype=np.uint8)


def _sky(width: int, height: int, top: Color, bottom: Color) -> np.ndarray:
    t = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
    column = (1.0 - t) * np.array(top, np.float32) + t * np.array(bottom, np.float32)
    return np.repeat(column[:, None, :], width, axis=1).astype(np.uint8)


def _blit_rgba(frame: np.ndarray, sprite: np.ndarray, x: int, y: int):
    """Alpha-blend ``sprite`` onto ``frame`` with its top-left at (x, y), clipped."""
    h, w = sprite.shape[:2]
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + w, frame.shape[1]), min(y + h, frame.shape[0])
    if x0 >= x1 or y0 >= y1:
        return
    patch = sprite[y0 - y:y1 - y, x0 - x:x1 - x].astype(np.float32)
    alpha = patch[..., 3:4] / 255.0
    region = frame[y0:y1, x0:x1].astype(np.float32)
    frame[y0:y1, x0:x1] = (alpha * patch[..., :3] + (1.0 - alpha) * region).astype(np.uint8)


def _draw_avatar(frame, y: int, params: GameParams, colors, sprite: Optional[np.ndarray]):
    x = int(params.avatar_x)
    w, h = int(params.avatar_width), int(params.avatar_height)
    if sprite is not None:
        _blit_rgba(frame, sprite, x, y)
    else:
        cv2.rectangle(frame, (x, y), (x + w - 1, y + h - 1), colors["avatar"], thickness=-1)
        cv2.rectangle(frame, (x + 12, y + 14), (x + 35, y + 37), colors["avatar_detail"], thickness=-1)


def render_frame(
    snap,
    params: GameParams = DEFAULT_PARAMS,
    sprite: Optional[np.ndarray] = None,
    scale: float = 1.0,
    color_scheme: str = "meadow",
    show_hud: bool = True,
) -> np.ndarray:
    """Draw a session snapshot.

    Args:
        snap: ``engine.Snapshot`` of the session
        params: Geometry the snapshot was produced with
        sprite: RGBA avatar image from ``load_avatar_sprite``, None for the placeholder
        scale: Output scaling factor
        color_scheme: Color scheme name
        show_hud: Draw score, best and the status overlay

    Returns:
        RGB uint8 array of shape (height*scale, width*scale, 3)
    """
    colors = create_color_scheme(color_scheme)
    width = int(params.play_width)
    height = int(params.play_height)
    ground_y = int(params.ground_y)

    frame = _sky(width, height, colors["sky_top"], colors["sky_bottom"])

    cv2.rectangle(frame, (0, ground_y), (width - 1, height - 1), colors["ground"], thickness=-1)
    cv2.line(frame, (0, ground_y + 1), (width - 1, ground_y + 1), colors["ground_edge"], thickness=3)

    for block in snap.blocks:
        left, right = int(round(block.x)), int(round(block.x + block.width))
        bottom = int(round(block.height))
        cv2.rectangle(frame, (left, 0), (right, bottom), colors["block"], thickness=-1)
        cv2.rectangle(frame, (left, 0), (right, bottom), colors["block_edge"], thickness=2)

    for spike in snap.spikes:
        points = np.array(
            [
                [spike.x, ground_y],
                [spike.x + spike.width / 2, ground_y - spike.height],
                [spike.x + spike.width, ground_y],
            ],
            dtype=np.float32,
        ).round().astype(np.int32)
        cv2.fillPoly(frame, [points], colors["spike"])
        cv2.polylines(frame, [points], True, colors["spike_edge"], thickness=2)

    _draw_avatar(frame, int(round(snap.avatar_y)), params, colors, sprite)

    if show_hud:
        font = cv2.FONT_HERSHEY_SIMPLEX
        cv2.putText(frame, f"Score: {int(snap.score)}", (20, 36), font, 0.7, colors["hud"], 2, cv2.LINE_AA)
        cv2.putText(frame, f"Best: {int(snap.best)}", (20, 62), font, 0.7, colors["hud"], 2, cv2.LINE_AA)
        text = OVERLAY_TEXT.get(snap.status)
        if text is not None:
            (text_width, _), _ = cv2.getTextSize(text, font, 0.9, 2)
            cv2.putText(frame, text, ((width - text_width) // 2, 110), font, 0.9, colors["overlay"], 2, cv2.LINE_AA)

    if scale != 1.0:
        frame = cv2.resize(
            frame,
            (int(width * scale), int(height * scale)),
            interpolation=cv2.INTER_NEAREST,
        )
    return frame


def create_video(
        frames: Sequence[np.ndarray],
        filename: str = None,
        fps: float = 60.0,
        display: bool = False,
) -> None:
    """Display and/or save a sequence of rendered frames.

    Args:
        frames: RGB frames from ``render_frame``, all of the same shape
        filename: If provided, save video to this MP4 file
        fps: Video frame rate
        display: If True, show video in window (press 'q' to quit, space to pause)
    """
    if len(frames) == 0:
        return
    height, width = frames[0].shape[:2]

    writer = None
    if filename:
        fourcc = cv2.VideoWriter_fourcc(*'mp4v')
        writer = cv2.VideoWriter(filename, fourcc, fps, (width, height))

    if display:
        window_name = "DeerDash (q=quit, space=pause)"
        cv2.namedWindow(window_name, cv2.WINDOW_AUTOSIZE)

    frame_delay = 1.0 / fps if display else 0
    paused = False

    try:
        for i, frame in enumerate(frames):
            start_time = time.time()
            frame_bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)

            if writer:
                writer.write(frame_bgr)

            if display:
                cv2.putText(frame_bgr, f"Frame {i + 1}/{len(frames)}",
                            (width - 220, 25), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
                cv2.imshow(window_name, frame_bgr)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q') or key == 27:  # 'q' or ESC
                    break
                elif key == ord(' '):
                    paused = not paused

                while paused:
                    key = cv2.waitKey(30) & 0xFF
                    if key == ord(' '):
                        paused = False
                    elif key == ord('q') or key == 27:
                        return

                sleep_time = max(0, frame_delay - (time.time() - start_time))
                if sleep_time > 0:
                    time.sleep(sleep_time)

    finally:
        if writer:
            writer.release()
        if display:
            cv2.destroyAllWindows()

    if filename:
        logger.info(f"Video saved: {filename} ({len(frames)} frames, {fps} FPS, {len(frames) / fps:.1f}s)")
