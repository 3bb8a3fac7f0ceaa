"""
Typed starfield configuration.

User options arrive as (possibly nested) dicts and are resolved into a
`StarfieldConfig`. `StarfieldConfig.merged` validates the whole candidate
before returning it, so a rejected update never touches the current config.
"""

import math
import os
import re
from dataclasses import dataclass, field, replace
from typing import Tuple, Union

from starfield.constants import MIN_STAR_COUNT
from starfield.errors import ConfigurationError

HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")
BACKGROUND_KINDS = ("radial", "linear")


@dataclass(frozen=True)
class StarSize:
    min: float = 0.5
    max: float = 2.0

    @property
    def range(self) -> Tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class StarColors:
    hue: Union[float, Tuple[float, float]] = (180, 260)
    saturation: float = 70
    lightness: float = 90

    @property
    def hue_range(self) -> Tuple[float, float]:
        if isinstance(self.hue, tuple):
            return self.hue
        return (self.hue, self.hue)


@dataclass(frozen=True)
class DeviceDetection:
    mobile: int = 200
    desktop: int = 500


@dataclass(frozen=True)
class Background:
    kind: str = "radial"
    colors: Tuple[str, ...] = ("#001018", "#000000")


@dataclass(frozen=True)
class StarfieldConfig:
    star_count: Union[str, int] = "auto"
    max_star_count: int = 2000
    speed: float = 0.6
    focal_length: float = 300
    trail_effect: float = 0.3
    star_size: StarSize = field(default_factory=StarSize)
    star_colors: StarColors = field(default_factory=StarColors)
    device_detection: DeviceDetection = field(default_factory=DeviceDetection)
    background: Union[Background, bool] = field(default_factory=Background)
    debug: bool = False
    auto_start: bool = True
    delta_time: bool = True

    @classmethod
    def from_options(cls, options=None):
        return cls().merged(options or {})

    def merged(self, partial):
        """Return a validated copy with `partial` applied on top."""
        if not isinstance(partial, dict):
            raise ConfigurationError(f"Options must be a dict (got {type(partial).__name__})")
        _reject_unknown(partial, _TOP_LEVEL, "")

        changes = {}
        for name, value in partial.items():
            if name in _SCALARS:
                changes[name] = _SCALARS[name](value, name)
            elif name == "star_size":
                changes[name] = _merge_star_size(self.star_size, value)
            elif name == "star_colors":
                changes[name] = _merge_star_colors(self.star_colors, value)
            elif name == "device_detection":
                changes[name] = _merge_device_detection(self.device_detection, value)
            elif name == "background":
                changes[name] = _merge_background(self.background, value)

        return replace(self, **changes)

    def initial_star_count(self, cached=None):
        """Resolve the starting count, preferring a cached calibration."""
        if self.star_count != "auto":
            return self.star_count
        if cached is not None:
            return max(MIN_STAR_COUNT, min(self.max_star_count, cached))
        cpus = os.cpu_count() or 1
        if cpus <= 4:
            return self.device_detection.mobile
        return self.device_detection.desktop


def _number(value, name, low, high):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"Invalid {name}: must be a finite number between {low} and {high} (got {value!r})"
        )
    if not math.isfinite(value) or value < low or value > high:
        raise ConfigurationError(
            f"Invalid {name}: must be a finite number between {low} and {high} (got {value!r})"
        )
    return value


def _integer(value, name, low, high):
    _number(value, name, low, high)
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"Invalid {name}: must be a whole number (got {value!r})")
    return int(value)


def _flag(value, name):
    if not isinstance(value, bool):
        raise ConfigurationError(f"Invalid {name}: must be true or false (got {value!r})")
    return value


def _star_count(value, name):
    if value == "auto":
        return value
    return _integer(value, name, 1, 10000)


_SCALARS = {
    "star_count": _star_count,
    "max_star_count": lambda v, n: _integer(v, n, 100, 50000),
    "speed": lambda v, n: _number(v, n, 0.01, 10),
    "focal_length": lambda v, n: _number(v, n, 50, 1000),
    "trail_effect": lambda v, n: _number(v, n, 0, 1),
    "debug": _flag,
    "auto_start": _flag,
    "delta_time": _flag,
}
_TOP_LEVEL = set(_SCALARS) | {"star_size", "star_colors", "device_detection", "background"}


def _reject_unknown(options, allowed, prefix):
    unknown = sorted(set(options) - set(allowed))
    if unknown:
        raise ConfigurationError(f"Unknown option(s): {', '.join(prefix + k for k in unknown)}")


def _group(value, name, allowed):
    if not isinstance(value, dict):
        raise ConfigurationError(f"Invalid {name}: must be a dict (got {value!r})")
    _reject_unknown(value, allowed, name + ".")
    return value


def _merge_star_size(current, value):
    value = _group(value, "star_size", ("min", "max"))
    low = _number(value["min"], "star_size.min", 0.1, 10) if "min" in value else current.min
    high = _number(value["max"], "star_size.max", 0.1, 10) if "max" in value else current.max
    if low > high:
        raise ConfigurationError("star_size.min must be less than or equal to star_size.max")
    return StarSize(low, high)


def _hue(value):
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ConfigurationError("star_colors.hue array must contain exactly 2 values [min, max]")
        return (
            _number(value[0], "star_colors.hue[0]", 0, 360),
            _number(value[1], "star_colors.hue[1]", 0, 360),
        )
    return _number(value, "star_colors.hue", 0, 360)


def _merge_star_colors(current, value):
    value = _group(value, "star_colors", ("hue", "saturation", "lightness"))
    changes = {}
    if "hue" in value:
        changes["hue"] = _hue(value["hue"])
    if "saturation" in value:
        changes["saturation"] = _number(value["saturation"], "star_colors.saturation", 0, 100)
    if "lightness" in value:
        changes["lightness"] = _number(value["lightness"], "star_colors.lightness", 0, 100)
    return replace(current, **changes)


def _merge_device_detection(current, value):
    value = _group(value, "device_detection", ("mobile", "desktop"))
    changes = {
        key: _integer(value[key], f"device_detection.{key}", 1, 10000)
        for key in ("mobile", "desktop")
        if key in value
    }
    return replace(current, **changes)


def _merge_background(current, value):
    if value is False:
        return False
    value = _group(value, "background", ("kind", "colors"))
    base = current if isinstance(current, Background) else Background()
    changes = {}
    if "kind" in value:
        if value["kind"] not in BACKGROUND_KINDS:
            raise ConfigurationError(
                f"Invalid background.kind: must be one of {', '.join(BACKGROUND_KINDS)} (got {value['kind']!r})"
            )
        changes["kind"] = value["kind"]
    if "colors" in value:
        colors = value["colors"]
        if isinstance(colors, str) or not isinstance(colors, (list, tuple)) or len(colors) < 2:
            raise ConfigurationError("background.colors must be a list of at least 2 '#rrggbb' colors")
        for color in colors:
            if not isinstance(color, str) or not HEX_COLOR.match(color):
                raise ConfigurationError(f"Invalid background color: {color!r}")
        changes["colors"] = tuple(colors)
    return replace(base, **changes)


def hex_to_bgr(color):
    """'#rrggbb' or '#rgb' to an OpenCV (b, g, r) tuple."""
    digits = color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)
