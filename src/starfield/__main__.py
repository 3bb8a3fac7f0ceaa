#!/usr/bin/env python3
"""
Starfield CLI Tool
==================

Shows a scrolling 3D starfield in a window, or renders it to a video file.
The number of stars is tuned automatically to hold 60 frames per second and
the calibrated count is remembered between runs.

Usage:
    python -m starfield                       (live preview, Esc or q to quit)
    python -m starfield --output stars.mp4 --duration 20
    python -m starfield -h                    (for help)
"""

import argparse
import logging
import sys
from pathlib import Path

from starfield.cache import DEFAULT_CACHE_PATH, JsonFileCache
from starfield.constants import DEFAULT_FPS, DEFAULT_RESOLUTION
from starfield.errors import ConfigurationError, ResourceUnavailable

logger = logging.getLogger(__name__)


def star_count(value):
    if value == "auto":
        return value
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected 'auto' or an integer (got {value!r})") from None


def get_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="starfield",
        description="Scrolling 3D starfield with automatic performance tuning.",
    )
    parser.add_argument("--output", "-o", type=Path, help="Render to this video file instead of a window")
    parser.add_argument("--width", type=int, default=DEFAULT_RESOLUTION[0], help="Frame width")
    parser.add_argument("--height", type=int, default=DEFAULT_RESOLUTION[1], help="Frame height")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Video frames per second")
    parser.add_argument("--duration", type=float, default=10.0, help="Video duration in seconds")
    parser.add_argument("--star-count", type=star_count, default="auto", help="Star count or 'auto'")
    parser.add_argument("--max-star-count", type=int, default=2000, help="Ceiling for auto-tuning")
    parser.add_argument("--speed", type=float, default=0.6, help="Forward speed per 60fps frame")
    parser.add_argument("--focal-length", type=float, default=300, help="Perspective focal length")
    parser.add_argument("--trail", type=float, default=0.3, help="Trail opacity (0 disables trails)")
    parser.add_argument("--hue", type=float, nargs="+", default=[180, 260], help="Hue or hue range")
    parser.add_argument("--no-background", action="store_true", help="Plain black background")
    parser.add_argument("--cache-file", type=Path, default=DEFAULT_CACHE_PATH, help="Where to remember the star count")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the count cache")
    parser.add_argument("--debug", action="store_true", help="Log performance tuning decisions")
    return parser.parse_args(argv)


def build_options(args):
    options = {
        "star_count": args.star_count,
        "max_star_count": args.max_star_count,
        "speed": args.speed,
        "focal_length": args.focal_length,
        "trail_effect": args.trail,
        "star_colors": {"hue": args.hue[0] if len(args.hue) == 1 else args.hue},
        "debug": args.debug,
    }
    if args.no_background:
        options["background"] = False
    return options


def preview(args, options, cache):
    from starfield.display import WindowHost
    from starfield.scroller import Starfield
    from starfield.surface import Surface

    surface = Surface(args.width, args.height)
    host = WindowHost(surface)
    starfield = Starfield(surface, options, scheduler=host, cache=cache, resize_notifier=host)
    try:
        host.run()
    finally:
        logger.info(f"[i] {starfield.star_count} stars at {starfield.get_current_fps()} fps")
        starfield.destroy()


def main(argv=None):
    args = get_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
    )

    cache = None if args.no_cache else JsonFileCache(args.cache_file)
    options = build_options(args)

    try:
        if args.output:
            from starfield.export import render_video

            # Offline timing says nothing about this machine, so the cache is left alone
            render_video(args.output, args.width, args.height, args.fps, args.duration, options)
        else:
            preview(args, options, cache)
    except ConfigurationError as e:
        sys.exit(f"[!] {e}")
    except ResourceUnavailable as e:
        sys.exit(f"[!] Cannot draw: {e}")


if __name__ == "__main__":
    main()
