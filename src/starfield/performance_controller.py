import logging
import math
from enum import Enum
from typing import Optional

from starfield.cache import CountCache, save_count
from starfield.constants import (
    CACHE_KEY,
    CALIBRATION_ACCEPT,
    CALIBRATION_MAX_ATTEMPTS,
    CALIBRATION_RATIO_CAP,
    CALIBRATION_WINDOW_MS,
    MIN_STAR_COUNT,
    OPTIMIZATION_ACCEPT,
    OPTIMIZATION_COOLDOWN_MS,
    OPTIMIZATION_DAMPING,
    OPTIMIZATION_MAX_STEP,
    OPTIMIZATION_MIN_CHANGE,
    OPTIMIZATION_WINDOW_MS,
    TARGET_FPS,
)
from starfield.frame_clock import round_half_up

logger = logging.getLogger(__name__)


class Phase(Enum):
    INITIAL_CALIBRATION = "initial-calibration"
    CONTINUOUS_OPTIMIZATION = "continuous-optimization"


class PerformanceController:
    """
    Tunes the size of a ParticleField so the animation runs near TARGET_FPS.

    Calibration runs first: one measurement per second, large multiplicative
    corrections, at most CALIBRATION_MAX_ATTEMPTS of them. Afterwards the
    controller only makes small, rate-limited corrections so steady-state
    playback never visibly jumps. The result is persisted through the count
    cache after calibration and after every later adjustment.
    """

    def __init__(self, field, frame_clock, max_star_count, cache: Optional[CountCache] = None,
                 debug=False, target_fps=TARGET_FPS, cache_key=CACHE_KEY):
        self.field = field
        self.frame_clock = frame_clock
        self.max_star_count = max_star_count
        self.cache = cache
        self.cache_key = cache_key
        self.debug = debug
        self.target_fps = target_fps

        self.phase = Phase.INITIAL_CALIBRATION
        self.window_start = None
        self.attempts = 0
        self.last_adjustment = None

    def _log(self, message):
        if self.debug:
            logger.info(message)
        else:
            logger.debug(message)

    def _clamp(self, count):
        return max(MIN_STAR_COUNT, min(self.max_star_count, count))

    def _persist(self, count):
        save_count(self.cache, self.cache_key, count)

    def resume(self):
        """Reopen the measurement window after a pause. Phase and counters are kept."""
        self.window_start = None

    def evaluate(self, now):
        """Run one controller step at time `now` (milliseconds)."""
        if self.window_start is None:
            self.window_start = now
            return

        if self.phase is Phase.INITIAL_CALIBRATION:
            self._calibrate(now)
        else:
            self._optimize(now)

    def _measure(self):
        fps = self.frame_clock.estimate_fps()
        if not fps:
            return None, None
        return fps, fps / self.target_fps

    def _finish_calibration(self, now, reason):
        self.phase = Phase.CONTINUOUS_OPTIMIZATION
        self.window_start = now
        self._persist(len(self.field))
        self._log(f"[+] Calibration complete ({reason}): {len(self.field)} stars after {self.attempts} attempt(s)")

    def _calibrate(self, now):
        if now - self.window_start < CALIBRATION_WINDOW_MS:
            return

        fps, ratio = self._measure()
        if fps is None:
            return

        low, high = CALIBRATION_ACCEPT
        if low <= ratio <= high:
            self._finish_calibration(now, f"{fps} fps")
            return
        if self.attempts >= CALIBRATION_MAX_ATTEMPTS:
            self._finish_calibration(now, "attempt limit")
            return

        self.attempts += 1
        current = len(self.field)
        aggressiveness = 0.75 + min(ratio, CALIBRATION_RATIO_CAP) / 20
        new_count = self._clamp(round_half_up(current * ratio * aggressiveness))

        if new_count == self.max_star_count == current and ratio > high:
            self._finish_calibration(now, "star cap reached")
            return

        self._log(
            f"[i] Calibration attempt {self.attempts}: {fps} fps (ratio {ratio:.2f}), "
            f"stars {current} -> {new_count}"
        )
        self.field.resize(new_count)
        self.window_start = now

    def _optimize(self, now):
        if now - self.window_start < OPTIMIZATION_WINDOW_MS:
            return
        if self.last_adjustment is not None and now - self.last_adjustment < OPTIMIZATION_COOLDOWN_MS:
            self.window_start = now
            return

        fps, ratio = self._measure()
        if fps is None:
            self.window_start = now
            return

        low, high = OPTIMIZATION_ACCEPT
        if low <= ratio <= high:
            self.window_start = now
            return

        current = len(self.field)
        proposed = current * ratio * OPTIMIZATION_DAMPING
        # Bounds rounded inwards so a single step never exceeds the limit
        step_low = math.ceil(current * (1 - OPTIMIZATION_MAX_STEP))
        step_high = math.floor(current * (1 + OPTIMIZATION_MAX_STEP))
        new_count = self._clamp(max(step_low, min(step_high, round_half_up(proposed))))

        change = abs(new_count - current) / current if current else 1.0
        if change < OPTIMIZATION_MIN_CHANGE:
            self._log(f"[i] Ignoring {change:.1%} adjustment at {fps} fps")
            self.window_start = now
            return

        self._log(f"[i] Optimizing: {fps} fps (ratio {ratio:.2f}), stars {current} -> {new_count}")
        self.field.resize(new_count)
        self._persist(new_count)
        self.last_adjustment = now
        self.window_start = now

    def set_max_star_count(self, max_star_count):
        self.max_star_count = max_star_count
