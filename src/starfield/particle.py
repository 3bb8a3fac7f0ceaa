from starfield.constants import SPAWN_XY_RANGE, SPAWN_Z_RANGE


class Particle:
    """Represents a single star travelling towards the camera."""

    def __init__(self, x, y, z, base_size, hue):
        self.x = x
        self.y = y
        self.z = z
        self.base_size = base_size
        self.hue = hue

    def as_tuple(self):
        return (self.x, self.y, self.z, self.base_size, self.hue)

    def __repr__(self):
        return (
            f"Particle(x={self.x:.1f}, y={self.y:.1f}, z={self.z:.1f}, "
            f"base_size={self.base_size:.2f}, hue={self.hue:.1f})"
        )


def sample_size(rng, size_range):
    low, high = size_range
    return low + rng.random() * (high - low)


def sample_hue(rng, hue_range):
    low, high = hue_range
    return low + rng.random() * (high - low)


def sample_particle(rng, size_range, hue_range):
    """Draw a fresh star anywhere in the spawn volume."""
    return Particle(
        x=rng.uniform(*SPAWN_XY_RANGE),
        y=rng.uniform(*SPAWN_XY_RANGE),
        z=rng.uniform(*SPAWN_Z_RANGE),
        base_size=sample_size(rng, size_range),
        hue=sample_hue(rng, hue_range),
    )


def respawn(particle, rng, size_range, hue_range):
    """Resample every field of `particle` in place."""
    fresh = sample_particle(rng, size_range, hue_range)
    particle.x = fresh.x
    particle.y = fresh.y
    particle.z = fresh.z
    particle.base_size = fresh.base_size
    particle.hue = fresh.hue
