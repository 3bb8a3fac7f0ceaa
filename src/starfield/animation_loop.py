from enum import Enum

from starfield.constants import MAX_FRAME_DELTA_MS, NOMINAL_FRAME_MS


class LoopState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class AnimationLoop:
    """
    Drives one tick per host frame: record timing, let the controller
    adjust the field, advance the stars, draw, then ask for another frame.

    Everything inside a tick is synchronous. `stop()` cancels the pending
    frame; a tick already in progress finishes but does not reschedule.
    """

    def __init__(self, scheduler, clock, frame_clock, controller, field, compositor, config):
        self.scheduler = scheduler
        self.clock = clock
        self.frame_clock = frame_clock
        self.controller = controller
        self.field = field
        self.compositor = compositor
        self.config = config

        self.state = LoopState.IDLE
        self.ticks = 0
        self._handle = None
        self._last_tick = None

    @property
    def running(self):
        return self.state is LoopState.RUNNING

    def start(self):
        if self.running:
            return
        self.state = LoopState.RUNNING
        # Time spent idle is not frame time
        self._last_tick = None
        self.frame_clock.reset()
        self.controller.resume()
        self.tick()

    def stop(self):
        self.state = LoopState.IDLE
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None

    def _step(self, now):
        if not self.config.delta_time:
            return self.config.speed
        if self._last_tick is None:
            elapsed = NOMINAL_FRAME_MS
        else:
            elapsed = min(max(now - self._last_tick, 0.0), MAX_FRAME_DELTA_MS)
        return self.config.speed * elapsed / NOMINAL_FRAME_MS

    def tick(self):
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
        now = self.clock()

        self.frame_clock.record(now)
        self.controller.evaluate(now)
        self.field.advance(self._step(now))
        self.compositor.draw(self.field, self.config)

        self._last_tick = now
        self.ticks += 1
        if self.running:
            self._handle = self.scheduler.request_frame(self.tick)
