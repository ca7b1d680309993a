"""Host-side frame clock producing bounded frame times."""

import math
from typing import Optional

from deerdash.constants import MAX_FRAME_DT


class FrameClock:
    """Turns monotonically increasing host timestamps into frame times.

    Frame times are clamped to ``max_delta`` seconds so a stall (window drag,
    debugger, slow first JIT compile) cannot make the avatar tunnel through an
    obstacle or the ground. The first tick returns 0.
    """

    def __init__(self, max_delta: float = MAX_FRAME_DT):
        if not max_delta > 0:
            raise ValueError(f"max_delta must be positive, got {max_delta}")
        self.max_delta = max_delta
        self._last: Optional[float] = None
        self.elapsed = 0.0
        self.frames = 0

    def tick(self, timestamp: float) -> float:
        """Register a new frame timestamp (seconds) and return its frame time."""
        if self._last is None or not math.isfinite(timestamp):
            delta = 0.0
        else:
            delta = min(max(0.0, timestamp - self._last), self.max_delta)
        if math.isfinite(timestamp) and (self._last is None or timestamp > self._last):
            self._last = timestamp
        self.elapsed += delta
        self.frames += 1
        return delta

    def reset(self):
        self._last = None
        self.elapsed = 0.0
        self.frames = 0
