import numpy as np
import pytest

from starfield.frame_clock import FrameClock
from starfield.particle_field import ParticleField


class RecordingField(ParticleField):
    """ParticleField that remembers every resize request."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.resizes = []

    def resize(self, new_count):
        self.resizes.append((len(self), int(new_count)))
        super().resize(new_count)


class FailingCache:
    def load(self, key):
        raise OSError("storage disabled")

    def save(self, key, value):
        raise OSError("storage disabled")


def fps_interval(fps):
    return 1000 / fps


def drive(controller, frame_clock, start, fps, duration):
    """Feed ticks at a steady frame rate straight into the controller."""
    interval = fps_interval(fps)
    t = start
    while t < start + duration:
        t += interval
        frame_clock.record(t)
        controller.evaluate(t)
    return t


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def frame_clock():
    return FrameClock()


@pytest.fixture
def make_field(rng):
    def _make(count, size_range=(0.5, 2.0), hue_range=(180, 260)):
        field = RecordingField(size_range, hue_range, rng=rng)
        ParticleField.resize(field, count)
        return field

    return _make
