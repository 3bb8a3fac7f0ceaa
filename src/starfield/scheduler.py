"""
Frame scheduling and time sources for the animation loop.

A scheduler is anything with ``request_frame(callback) -> handle`` and
``cancel_frame(handle)``: run `callback` once when the host is ready to
repaint. Clocks are zero-argument callables returning milliseconds.
"""

import itertools
import time
from typing import Callable, Hashable, Protocol


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> Hashable: ...

    def cancel_frame(self, handle: Hashable) -> None: ...


class ResizeNotifier(Protocol):
    def add_resize_listener(self, listener: Callable[[int, int], None]) -> None: ...

    def remove_resize_listener(self, listener: Callable[[int, int], None]) -> None: ...


def perf_clock_ms():
    return time.perf_counter() * 1000


class ManualScheduler:
    """Queues frame callbacks until `run_pending` is called."""

    def __init__(self):
        self._pending = {}
        self._handles = itertools.count(1)

    @property
    def pending(self):
        return len(self._pending)

    def request_frame(self, callback):
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._pending.pop(handle, None)

    def run_pending(self):
        """Run every callback queued so far; callbacks they queue wait for the next call."""
        batch, self._pending = self._pending, {}
        for callback in batch.values():
            callback()
        return len(batch)


class SyntheticClock:
    """A clock that only moves when told to."""

    def __init__(self, start_ms=0.0):
        self.now = float(start_ms)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now

    def set(self, ms):
        self.now = float(ms)
