"""Errors raised by the pyramid builder and the warp."""


class WarpedSamplingError(ValueError):
    """Base class for all warped sampling failures."""


class MalformedPyramidError(WarpedSamplingError):
    """Density grid or pyramid does not have the required shape or values."""


class DegenerateBoxError(WarpedSamplingError):
    """Inverse interpolation over a zero-width interval."""


class DegenerateDensityError(WarpedSamplingError):
    """A cell with no measured density mass still received points."""

    def __init__(self, level: int, x: int, y: int, count: int, mass: float):
        self.level = level
        self.x = x
        self.y = y
        self.count = count
        self.mass = mass
        super().__init__(
            f"Zero density mass ({mass!r}) at level {level}, block ({x}, {y}) "
            f"with {count} point(s) routed into it"
        )
