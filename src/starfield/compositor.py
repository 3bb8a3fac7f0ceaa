import colorsys
import logging
from functools import lru_cache

import cv2
import numpy as np

from starfield.config import Background, hex_to_bgr
from starfield.constants import BRIGHTNESS_FALLOFF, CIRCLE_SHIFT, COLOR_CACHE_SIZE
from starfield.projector import project

logger = logging.getLogger(__name__)


def render_gradient(background, width, height):
    """
    Rasterise a multi-stop background gradient to a BGR image.

    Radial gradients are ellipses centred on the frame reaching the last stop
    at the corners; linear gradients run from top to bottom.
    """
    stops = np.array([hex_to_bgr(c) for c in background.colors], dtype=np.float32)
    num_stops = len(stops)

    ys = (np.arange(height, dtype=np.float32) + 0.5)[:, None]
    xs = (np.arange(width, dtype=np.float32) + 0.5)[None, :]
    if background.kind == "radial":
        nx = (xs - width / 2) / (width / 2)
        ny = (ys - height / 2) / (height / 2)
        t = np.sqrt(nx**2 + ny**2) / np.sqrt(2)
    else:
        t = np.broadcast_to(ys / height, (height, width))
    t = np.clip(t, 0.0, 1.0)

    # Find which two color stops to interpolate between
    position = t * (num_stops - 1)
    idx = np.minimum(position.astype(np.int32), num_stops - 2)
    frac = (position - idx)[..., None]
    image = stops[idx] * (1 - frac) + stops[idx + 1] * frac
    return np.rint(image).astype(np.uint8)


@lru_cache(maxsize=COLOR_CACHE_SIZE)
def hsl_to_bgr(hue, saturation, lightness):
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 100, saturation / 100)
    return (b * 255, g * 255, r * 255)


class Compositor:
    """
    Draws one frame: background, the previous frame as a fading trail, then
    every visible star.
    """

    def __init__(self, surface):
        self.surface = surface
        self._scratch = None
        self._gradient = None
        self._gradient_key = None

    def invalidate_background(self):
        self._gradient = None
        self._gradient_key = None

    def _background(self, background):
        if not isinstance(background, Background):
            return None
        key = (background, self.surface.width, self.surface.height)
        if self._gradient is None or self._gradient_key != key:
            logger.debug(f"[i] Rendering {background.kind} background {key[1]}x{key[2]}")
            self._gradient = render_gradient(background, key[1], key[2])
            self._gradient_key = key
        return self._gradient

    def _snapshot(self, frame):
        if self._scratch is None or self._scratch.shape != frame.shape:
            self._scratch = np.empty_like(frame)
        np.copyto(self._scratch, frame)
        return self._scratch

    def draw(self, field, config):
        frame = self.surface.frame
        trail = config.trail_effect

        previous = self._snapshot(frame) if trail > 0 else None

        gradient = self._background(config.background)
        if gradient is None:
            frame.fill(0)
        else:
            np.copyto(frame, gradient)

        if previous is not None:
            cv2.addWeighted(frame, 1.0 - trail, previous, trail, 0, dst=frame)

        return self._draw_stars(frame, field, config)

    def _draw_stars(self, frame, field, config):
        height, width = frame.shape[:2]
        center_x, center_y = width / 2, height / 2
        colors = config.star_colors

        drawn = 0
        for particle in field:
            p = project(particle.x, particle.y, particle.z, config.focal_length, center_x, center_y)
            if p.scale <= 0:
                continue

            radius = particle.base_size * p.scale
            # Skip anything entirely off-screen
            if (
                p.screen_x + radius < 0
                or p.screen_x - radius > width
                or p.screen_y + radius < 0
                or p.screen_y - radius > height
            ):
                continue

            alpha = min(1.0, p.scale * BRIGHTNESS_FALLOFF)
            color = hsl_to_bgr(particle.hue, colors.saturation, colors.lightness)
            if blend_disc(frame, p.screen_x, p.screen_y, radius, color, alpha):
                drawn += 1
        return drawn


def blend_disc(frame, x, y, radius, color, alpha):
    """
    Paint an anti-aliased disc over `frame` at opacity `alpha`.

    The disc is rasterised into a coverage mask for its bounding box only,
    then blended source-over into that region.
    """
    height, width = frame.shape[:2]
    x0, x1 = max(int(x - radius) - 1, 0), min(int(x + radius) + 2, width)
    y0, y1 = max(int(y - radius) - 1, 0), min(int(y + radius) + 2, height)
    if x0 >= x1 or y0 >= y1:
        return False

    multiplier = 1 << CIRCLE_SHIFT
    mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
    cv2.circle(
        mask,
        (int(round((x - x0) * multiplier)), int(round((y - y0) * multiplier))),
        int(round(radius * multiplier)),
        255,
        -1,
        cv2.LINE_AA,
        CIRCLE_SHIFT,
    )

    weight = (mask.astype(np.float32) / 255 * alpha)[..., None]
    region = frame[y0:y1, x0:x1]
    blended = region * (1 - weight) + np.asarray(color, dtype=np.float32) * weight
    region[:] = np.rint(blended).astype(np.uint8)
    return True
