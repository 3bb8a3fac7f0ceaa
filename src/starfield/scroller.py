import logging
from typing import Callable, Optional

from starfield.animation_loop import AnimationLoop
from starfield.cache import CountCache, load_count
from starfield.compositor import Compositor
from starfield.config import StarfieldConfig
from starfield.constants import CACHE_KEY
from starfield.errors import ResourceUnavailable
from starfield.frame_clock import FrameClock
from starfield.particle_field import ParticleField
from starfield.performance_controller import PerformanceController
from starfield.scheduler import FrameScheduler, ManualScheduler, ResizeNotifier, perf_clock_ms
from starfield.surface import Surface, require_surface

logger = logging.getLogger(__name__)


class Starfield:
    """
    A scrolling 3D starfield that keeps its star count tuned to the frame rate.

    `surface` is the Surface to draw into. `scheduler` decides when the next
    tick runs (a ManualScheduler by default, so nothing runs until its
    pending frames are run), `clock` returns milliseconds, `cache` persists
    the calibrated count and `resize_notifier` reports host size changes.
    """

    def __init__(
        self,
        surface: Surface,
        options: Optional[dict] = None,
        *,
        scheduler: Optional[FrameScheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        cache: Optional[CountCache] = None,
        resize_notifier: Optional[ResizeNotifier] = None,
        rng=None,
    ):
        self.surface = require_surface(surface)
        self.config = StarfieldConfig.from_options(options)
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.clock = clock if clock is not None else perf_clock_ms
        self.cache = cache

        count = self._resolve_star_count()
        self.field = ParticleField.create(
            count,
            self.config.star_size.range,
            self.config.star_colors.hue_range,
            rng=rng,
        )
        self.frame_clock = FrameClock()
        self.controller = PerformanceController(
            self.field,
            self.frame_clock,
            self.config.max_star_count,
            cache=cache,
            debug=self.config.debug,
        )
        self.compositor = Compositor(self.surface)
        self.loop = AnimationLoop(
            self.scheduler,
            self.clock,
            self.frame_clock,
            self.controller,
            self.field,
            self.compositor,
            self.config,
        )

        self._resize_notifier = resize_notifier
        if resize_notifier is not None:
            resize_notifier.add_resize_listener(self._on_host_resize)
        self._destroyed = False

        logger.info(f"[+] Starfield ready: {count} stars on {self.surface.width}x{self.surface.height}")
        if not self.config.delta_time:
            logger.debug("[i] Frame-rate compensation disabled, stars move a fixed step per tick")

        if self.config.auto_start:
            self.start()

    def _resolve_star_count(self):
        cached = None
        if self.config.star_count == "auto":
            cached = load_count(self.cache, CACHE_KEY)
            if cached is not None:
                logger.info(f"[i] Using cached star count {cached}")
        return self.config.initial_star_count(cached)

    @property
    def running(self):
        return self.loop.running

    @property
    def star_count(self):
        return len(self.field)

    @property
    def phase(self):
        return self.controller.phase

    def start(self):
        if self._destroyed:
            raise ResourceUnavailable("Starfield has been destroyed")
        self.loop.start()

    def stop(self):
        self.loop.stop()

    def tick(self):
        self.loop.tick()

    def resize(self, width=None, height=None):
        """Resize the surface (when a size is given) and drop the cached background."""
        if width is not None or height is not None:
            self.surface.resize(
                width if width is not None else self.surface.width,
                height if height is not None else self.surface.height,
            )
        self.compositor.invalidate_background()

    def _on_host_resize(self, width, height):
        self.resize(width, height)

    def update_config(self, partial):
        new_config = self.config.merged(partial)

        was_running = self.running
        if was_running:
            self.stop()

        self.config = new_config
        self.loop.config = new_config
        self.controller.debug = new_config.debug

        if "star_count" in partial:
            self.field.resize(self._resolve_star_count())

        if "max_star_count" in partial:
            self.controller.set_max_star_count(new_config.max_star_count)
            if len(self.field) > new_config.max_star_count:
                self.field.resize(new_config.max_star_count)

        size_range = new_config.star_size.range if "star_size" in partial else None
        hue_range = None
        if "hue" in partial.get("star_colors", {}):
            hue_range = new_config.star_colors.hue_range
        if size_range is not None or hue_range is not None:
            self.field.restyle(size_range=size_range, hue_range=hue_range)

        if "background" in partial:
            self.compositor.invalidate_background()

        if was_running:
            self.start()

    def get_current_fps(self):
        return self.frame_clock.estimate_fps() or 0

    def destroy(self):
        if self._destroyed:
            return
        self.stop()
        if self._resize_notifier is not None:
            self._resize_notifier.remove_resize_listener(self._on_host_resize)
            self._resize_notifier = None
        self.surface.clear()
        self.surface.release()
        self.field.clear()
        self._destroyed = True
        logger.info("[+] Starfield destroyed")
