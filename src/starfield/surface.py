import numpy as np

from starfield.errors import ResourceUnavailable


class Surface:
    """
    A BGR frame buffer the compositor draws into (OpenCV channel order).
    """

    def __init__(self, width, height):
        self.frame = None
        self.resize(width, height)

    @property
    def width(self):
        return self._frame().shape[1]

    @property
    def height(self):
        return self._frame().shape[0]

    @property
    def released(self):
        return self.frame is None

    def _frame(self):
        if self.frame is None:
            raise ResourceUnavailable("Drawing surface has been released")
        return self.frame

    def resize(self, width, height):
        if isinstance(width, bool) or isinstance(height, bool):
            raise ResourceUnavailable(f"Invalid surface size: {width}x{height}")
        try:
            width, height = int(width), int(height)
        except (TypeError, ValueError) as e:
            raise ResourceUnavailable(f"Invalid surface size: {width}x{height}") from e
        if width <= 0 or height <= 0:
            raise ResourceUnavailable(f"Invalid surface size: {width}x{height}")

        if self.frame is None or self.frame.shape[:2] != (height, width):
            self.frame = np.zeros((height, width, 3), dtype=np.uint8)

    def clear(self):
        self._frame().fill(0)

    def release(self):
        self.frame = None


def require_surface(surface):
    if not isinstance(surface, Surface):
        raise ResourceUnavailable(
            f"A Surface is required to draw the starfield (got {type(surface).__name__})"
        )
    if surface.released:
        raise ResourceUnavailable("Drawing surface has been released")
    return surface
