"""
Hierarchical density-guided warp.

Points in the unit square (reference space) are pushed down a quadtree that
follows a coarsest-first density pyramid. At every level the current
reference box is cut into four sub-boxes whose areas are proportional to the
weighted densities of the 2x2 block being read:

    +-----------+-----+        row_split        = (TL + TR) / sum
    |    TL     | TR  |        top_col_split    = TL / (TL + TR)
    +-------+---+-----+        bottom_col_split = BL / (BL + BR)
    |  BL   |    BR   |
    +-------+---------+

Every point falls into exactly one sub-box and carries on into the matching
block of the next (finer) level. Once the pyramid runs out of resolution the
point's fractional position inside its final reference box is mapped into
the uniform texture-space cell of that block.

Output is produced leaf by leaf in pre-order (TL, TR, BL, BR at every
level), so it is grouped by cell rather than in input order. Use
warp_indexed() to keep track of which input point went where.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from .box import Box2D, UNIT_BOX, child_box, lerp, remap_points
from .errors import DegenerateDensityError
from .pyramid import validate_pyramid


ON_DEGENERATE = ("raise", "uniform")


class SplitFractions(NamedTuple):
    """Split positions of a cell, each in [0, 1]."""
    row: float
    top_col: float
    bottom_col: float


UNIFORM_SPLIT = SplitFractions(0.5, 0.5, 0.5)


class WarpResult(NamedTuple):
    """Warped points, the input index of each, and the leaf texture boxes."""
    points: np.ndarray
    order: np.ndarray
    boxes: list[Box2D]


def _fraction(part: float, whole: float) -> float:
    # A row without mass has zero height; where it is cut does not matter.
    if whole > 0:
        return part / whole
    return 0.5


def split_fractions(tl: float, tr: float, bl: float, br: float) -> SplitFractions:
    """
    Split fractions of a cell from its four weighted densities.

    The caller guarantees tl + tr + bl + br > 0.
    """
    total = tl + tr + bl + br
    top = tl + tr
    return SplitFractions(
        row=top / total,
        top_col=_fraction(tl, top),
        bottom_col=_fraction(bl, total - top),
    )


def split_box(box: Box2D, fractions: SplitFractions) -> list[Box2D]:
    """Cut `box` into its TL, TR, BL, BR children at `fractions`."""
    row_edge = lerp(box.min[1], box.max[1], fractions.row)

    top = (
        (box.min[0], box.min[1]),
        (lerp(box.min[0], box.max[0], fractions.top_col), row_edge),
        (box.max[0], box.max[1]),
    )
    bottom = (
        top[0],
        (lerp(box.min[0], box.max[0], fractions.bottom_col), row_edge),
        top[2],
    )
    return [
        child_box(top, 0),
        child_box(top, 1),
        child_box(bottom, 2),
        child_box(bottom, 3),
    ]


def classify(points: np.ndarray, children: list[Box2D]) -> np.ndarray:
    """
    Child index (0..3) of every point in a split box.

    Points above or on the row edge go to the top row, then points left of
    or on that row's column edge go to the left column.
    """
    bottom = points[:, 1] > children[0].max[1]
    right = np.where(
        bottom,
        points[:, 0] > children[2].max[0],
        points[:, 0] > children[0].max[0],
    )
    return bottom.astype(np.intp) * 2 + right.astype(np.intp)


def texture_box(level: int, x: int, y: int) -> Box2D:
    """Uniform texture-space box of the 2x2 block at (x, y) of `level`."""
    inv_size = 1.0 / (1 << (level + 1))
    return Box2D(
        (x * inv_size, y * inv_size),
        ((x + 2) * inv_size, (y + 2) * inv_size),
    )


def _remap_uniform(points: np.ndarray, source: Box2D, target: Box2D) -> np.ndarray:
    """remap_points(), mapping collapsed axes onto the middle of the target."""
    out = np.empty_like(points, dtype=np.float64)
    for axis in (0, 1):
        lo, hi = source.min[axis], source.max[axis]
        if hi > lo:
            f = (points[:, axis] - lo) / (hi - lo)
        else:
            f = 0.5
        out[:, axis] = lerp(target.min[axis], target.max[axis], f)
    return out


@dataclass
class _Warp:
    levels: list[np.ndarray]
    on_degenerate: str
    propagate_scale: bool
    chunks: list[np.ndarray] = field(default_factory=list)
    orders: list[np.ndarray] = field(default_factory=list)
    boxes: list[Box2D] = field(default_factory=list)

    def degenerate(self, level, x, y, points, mass):
        if self.on_degenerate == "raise":
            raise DegenerateDensityError(level, x, y, len(points), float(mass))

    def leaf(self, level, x, y, mass, box, points, indices):
        tex = texture_box(level, x, y)
        if not mass > 0:
            self.degenerate(level, x, y, points, mass)
            warped = _remap_uniform(points, box, tex)
        else:
            warped = remap_points(points, box, tex)
        self.chunks.append(warped)
        self.orders.append(indices)
        self.boxes.append(tex)

    def recurse(self, level, x, y, scale, mass, box, points, indices):
        if level >= len(self.levels):
            self.leaf(level, x, y, mass, box, points, indices)
            return

        grid = self.levels[level]
        pdfs = (
            scale * grid[y, x],
            scale * grid[y, x + 1],
            scale * grid[y + 1, x],
            scale * grid[y + 1, x + 1],
        )

        total = pdfs[0] + pdfs[1] + pdfs[2] + pdfs[3]
        if not (total > 0 and np.isfinite(total)):
            self.degenerate(level, x, y, points, total)
            fractions = UNIFORM_SPLIT
        else:
            fractions = split_fractions(*pdfs)

        children = split_box(box, fractions)
        which = classify(points, children)

        for idx in range(4):
            mask = which == idx
            if not mask.any():
                continue
            ox = (idx & 1) << 1
            oy = idx & 2
            self.recurse(
                level + 1,
                (x << 1) + ox,
                (y << 1) + oy,
                pdfs[idx] if self.propagate_scale else 1.0,
                pdfs[idx],
                children[idx],
                points[mask],
                indices[mask],
            )


def _as_points(points) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Points must have shape (N, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Points contain non-finite coordinates")
    if np.any(arr < 0.0) or np.any(arr > 1.0):
        raise ValueError("Points must lie within the unit square")
    return arr


def warp_detailed(levels: list[np.ndarray], points, *,
                  on_degenerate: str = "raise",
                  propagate_scale: bool = True) -> WarpResult:
    """
    Warp points through a coarsest-first density pyramid.

    Args:
        levels: Density grids, level 0 is 2x2 and each following level
                doubles both dimensions.
        points: (N, 2) array-like of reference points in [0, 1]^2.
        on_degenerate: "raise" fails with DegenerateDensityError when points
                       reach a cell without density mass; "uniform" splits
                       such cells evenly instead.
        propagate_scale: Carry each child's weighted density down as the
                         scale of its children (True) or reset it to 1.0.

    Returns:
        WarpResult with the warped (N, 2) points in leaf pre-order, the input
        index of each output point, and the texture box of every leaf visited.
    """
    if on_degenerate not in ON_DEGENERATE:
        raise ValueError(f"on_degenerate must be one of {ON_DEGENERATE}, got {on_degenerate!r}")
    validate_pyramid(levels)
    pts = _as_points(points)

    if len(pts) == 0:
        return WarpResult(np.empty((0, 2)), np.empty(0, dtype=np.intp), [])

    state = _Warp([np.asarray(level, dtype=np.float64) for level in levels],
                  on_degenerate, propagate_scale)
    state.recurse(0, 0, 0, 1.0, 1.0, UNIT_BOX, pts, np.arange(len(pts)))

    return WarpResult(
        np.concatenate(state.chunks),
        np.concatenate(state.orders),
        state.boxes,
    )


def warp(levels: list[np.ndarray], points, **kwargs) -> np.ndarray:
    """Warp points; the result is grouped by leaf cell, not in input order."""
    return warp_detailed(levels, points, **kwargs).points


def warp_indexed(levels: list[np.ndarray], points, **kwargs) -> tuple[np.ndarray, np.ndarray]:
    """Warp points and return (warped, order), order[i] = input index of warped[i]."""
    result = warp_detailed(levels, points, **kwargs)
    return result.points, result.order
