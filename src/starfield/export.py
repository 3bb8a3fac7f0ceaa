import logging

import cv2
from moviepy import VideoClip

from starfield.scheduler import ManualScheduler, SyntheticClock
from starfield.scroller import Starfield
from starfield.surface import Surface

logger = logging.getLogger(__name__)


class FrameRenderer:
    """
    Renders the starfield frame by frame for MoviePy.

    The loop runs exactly as it does live, except that the clock follows the
    clip's timestamps and pending frames are run on demand. The controller
    therefore measures the clip's own frame rate.
    """

    def __init__(self, width, height, options=None, cache=None, rng=None):
        options = dict(options or {})
        options["auto_start"] = False

        self.clock = SyntheticClock()
        self.scheduler = ManualScheduler()
        self.surface = Surface(width, height)
        self.starfield = Starfield(
            self.surface,
            options,
            scheduler=self.scheduler,
            clock=self.clock,
            cache=cache,
            rng=rng,
        )
        self._last_t = None

    def make_frame(self, t):
        """
        The callback function for MoviePy.
        Generates a single RGB video frame at time t (seconds).
        """
        # MoviePy may ask for the same (or an earlier) frame again
        if self._last_t is None or t > self._last_t:
            self.clock.set(t * 1000)
            if not self.starfield.running:
                self.starfield.start()
            else:
                self.scheduler.run_pending()
            self._last_t = t
        return cv2.cvtColor(self.surface.frame, cv2.COLOR_BGR2RGB)

    def close(self):
        self.starfield.destroy()


def render_video(output, width, height, fps, duration, options=None, cache=None, rng=None):
    renderer = FrameRenderer(width, height, options=options, cache=cache, rng=rng)
    logger.info(f"[+] Preparing render: {width}x{height} @ {fps}fps")
    logger.info(f"[+] Duration: {duration:.2f} seconds")

    try:
        video_clip = VideoClip(renderer.make_frame, duration=duration)
        logger.info("[+] Rendering video... (This may take a while)")
        video_clip.write_videofile(
            str(output),
            fps=fps,
            codec="libx264",
            audio=False,
            threads=4,
            preset="medium",
            logger="bar",
        )
    finally:
        final_count = renderer.starfield.star_count
        renderer.close()

    logger.info(f"[+] Done! Saved to {output} ({final_count} stars at the end)")
    return final_count
