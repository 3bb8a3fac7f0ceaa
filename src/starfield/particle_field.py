import logging

import numpy as np

from starfield.constants import RECYCLE_Z
from starfield.particle import respawn, sample_hue, sample_particle, sample_size

logger = logging.getLogger(__name__)


class ParticleField:
    """
    Owns the stars. Growing appends fresh stars and shrinking truncates the
    tail, so stars that survive a resize keep their state.
    """

    def __init__(self, size_range, hue_range, rng=None):
        self.size_range = tuple(size_range)
        self.hue_range = tuple(hue_range)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._particles = []

    @classmethod
    def create(cls, n, size_range, hue_range, rng=None):
        field = cls(size_range, hue_range, rng=rng)
        field.resize(n)
        return field

    def __len__(self):
        return len(self._particles)

    def __iter__(self):
        return iter(self._particles)

    def __getitem__(self, index):
        return self._particles[index]

    def _sample(self):
        return sample_particle(self.rng, self.size_range, self.hue_range)

    def advance(self, step):
        """Move every star `step` units towards the camera, recycling passed ones."""
        recycled = 0
        for particle in self._particles:
            particle.z -= step
            if particle.z <= RECYCLE_Z:
                respawn(particle, self.rng, self.size_range, self.hue_range)
                recycled += 1
        return recycled

    def resize(self, new_count):
        new_count = int(new_count)
        if new_count < 0:
            raise ValueError(f"Particle count must be non-negative (got {new_count})")

        current = len(self._particles)
        if new_count > current:
            self._particles.extend(self._sample() for _ in range(new_count - current))
        elif new_count < current:
            del self._particles[new_count:]

        if new_count != current:
            logger.debug(f"[i] Field resized {current} -> {new_count}")

    def restyle(self, size_range=None, hue_range=None):
        """
        Resample size and/or hue of every existing star. Positions are kept.
        """
        if size_range is not None:
            self.size_range = tuple(size_range)
        if hue_range is not None:
            self.hue_range = tuple(hue_range)

        for particle in self._particles:
            if size_range is not None:
                particle.base_size = sample_size(self.rng, self.size_range)
            if hue_range is not None:
                particle.hue = sample_hue(self.rng, self.hue_range)

    def clear(self):
        self._particles.clear()
