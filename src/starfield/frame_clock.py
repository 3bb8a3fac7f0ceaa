import math
from collections import deque

from starfield.constants import FRAME_WINDOW, MIN_FPS_SAMPLES


def round_half_up(value):
    """Round to the nearest integer, halves going up (not to even)."""
    return int(math.floor(value + 0.5))


class FrameClock:
    """Rolling window of tick timestamps (milliseconds)."""

    def __init__(self, window=FRAME_WINDOW, min_samples=MIN_FPS_SAMPLES):
        self._timestamps = deque(maxlen=window)
        self.min_samples = min_samples

    def __len__(self):
        return len(self._timestamps)

    def record(self, now_ms):
        self._timestamps.append(now_ms)

    def estimate_fps(self):
        """
        Mean-interval frame rate over the window, or None with too few samples.
        """
        if len(self._timestamps) < self.min_samples:
            return None

        # Consecutive deltas telescope to (last - first) / (n - 1)
        avg_delta = (self._timestamps[-1] - self._timestamps[0]) / (len(self._timestamps) - 1)
        if avg_delta <= 0:
            return None
        return round_half_up(1000 / avg_delta)

    def reset(self):
        self._timestamps.clear()
