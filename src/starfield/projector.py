from typing import NamedTuple


class Projection(NamedTuple):
    screen_x: float
    screen_y: float
    scale: float


def project(x, y, z, focal_length, center_x, center_y):
    """
    Perspective-project a world point onto the screen.

    Points with a non-positive scale are at or behind the focal plane and
    must not be drawn.
    """
    denominator = focal_length + z
    if denominator == 0:
        return Projection(center_x, center_y, 0.0)
    scale = focal_length / denominator
    return Projection(center_x + x * scale, center_y + y * scale, scale)
