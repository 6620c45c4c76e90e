"""
Box algebra for the density warp.

A Box2D is an axis-aligned rectangle given by its min and max corners.
Boxes appear in two coordinate spaces: reference space (where the unwarped
points live) and texture space (where the warped points land). A single box
never mixes the two.

Edge grids describe a non-uniform 2x2 subdivision of a box:

    edges[0] = (x0, y0)     outer min corner
    edges[1] = (x1, y1)     inner split lines
    edges[2] = (x2, y2)     outer max corner

Child i spans columns bit0(i) and rows bit1(i) of that grid.
"""

from __future__ import annotations
from typing import NamedTuple, Sequence

import numpy as np

from .errors import DegenerateBoxError


class Box2D(NamedTuple):
    """Axis-aligned rectangle."""
    min: tuple[float, float]
    max: tuple[float, float]

    @property
    def width(self) -> float:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> float:
        return self.max[1] - self.min[1]

    def contains(self, x: float, y: float) -> bool:
        """Closed containment test."""
        return (self.min[0] <= x <= self.max[0] and
                self.min[1] <= y <= self.max[1])


UNIT_BOX = Box2D((0.0, 0.0), (1.0, 1.0))


def lerp(a, b, t):
    """Linear interpolation: a + t * (b - a)."""
    return a + t * (b - a)


def inverse_lerp(a: float, b: float, m):
    """
    Fraction of m along the interval [a, b].

    `m` may be a scalar or a numpy array. Raises DegenerateBoxError when the
    interval has zero width, since the division would produce NaN/Inf.
    """
    if a == b:
        raise DegenerateBoxError(f"Cannot invert interpolation over [{a!r}, {b!r}]")
    return (m - a) / (b - a)


def child_box(edges: Sequence[Sequence[float]], child_index: int) -> Box2D:
    """Box of child `child_index` (bit0 = column, bit1 = row) in an edge grid."""
    ox = child_index & 1
    oy = (child_index & 2) >> 1
    return Box2D(
        (edges[ox][0], edges[oy][1]),
        (edges[ox + 1][0], edges[oy + 1][1]),
    )


def remap_points(points: np.ndarray, source: Box2D, target: Box2D) -> np.ndarray:
    """
    Map (N, 2) points from `source` to `target` independently per axis.

    Each coordinate's fraction within `source` is interpolated into the
    matching axis range of `target`.
    """
    fx = inverse_lerp(source.min[0], source.max[0], points[:, 0])
    fy = inverse_lerp(source.min[1], source.max[1], points[:, 1])
    out = np.empty_like(points, dtype=np.float64)
    out[:, 0] = lerp(target.min[0], target.max[0], fx)
    out[:, 1] = lerp(target.min[1], target.max[1], fy)
    return out
