"""
Density pyramid construction.

The base grid is box-filtered 2x2 -> 1 repeatedly until one of its
dimensions reaches 2. build_pyramid() returns the levels finest first;
the warp walks them coarsest first, so callers reverse them with
coarse_first() before warping.

    base (2^k x 2^k) -> ... -> 4x4 -> 2x2        k levels in total
"""

from __future__ import annotations

import numpy as np

from .errors import MalformedPyramidError


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _check_values(grid: np.ndarray, what: str):
    if not np.all(np.isfinite(grid)):
        raise MalformedPyramidError(f"{what} contains non-finite values")
    if np.any(grid < 0):
        raise MalformedPyramidError(f"{what} contains negative density values")


def _frozen(grid: np.ndarray) -> np.ndarray:
    grid.setflags(write=False)
    return grid


def downsample_2x2(grid: np.ndarray) -> np.ndarray:
    """Replace every non-overlapping 2x2 block with the mean of its 4 values."""
    h, w = grid.shape
    if h % 2 or w % 2:
        raise MalformedPyramidError(f"Cannot halve a {w}x{h} grid: odd dimension")
    return grid.reshape(h // 2, 2, w // 2, 2).mean(axis=(1, 3))


def build_pyramid(base) -> list[np.ndarray]:
    """
    Build the density pyramid for a base grid.

    Args:
        base: 2D array-like of non-negative densities, shape (H, W) with both
              H and W powers of two and at least 2.

    Returns:
        List of float64 grids, finest (the base) first, ending with the level
        where a dimension reached 2. Every grid is read-only.
    """
    grid = np.array(base, dtype=np.float64)
    if grid.ndim != 2:
        raise MalformedPyramidError(f"Base density grid must be 2D, got shape {grid.shape}")
    h, w = grid.shape
    if h < 2 or w < 2 or not (_is_power_of_two(h) and _is_power_of_two(w)):
        raise MalformedPyramidError(
            f"Base density grid must have power-of-two dimensions >= 2, got {w}x{h}"
        )
    _check_values(grid, "Base density grid")

    levels = [_frozen(grid)]
    while min(grid.shape) > 2:
        grid = downsample_2x2(grid)
        levels.append(_frozen(grid))
    return levels


def coarse_first(pyramid: list[np.ndarray]) -> list[np.ndarray]:
    """Reverse a finest-first pyramid into the order the warp consumes."""
    return list(reversed(pyramid))


def validate_pyramid(levels: list[np.ndarray]):
    """
    Check a coarsest-first pyramid before warping.

    Level 0 must be exactly 2x2 and every following level must double both
    dimensions of the previous one.
    """
    if len(levels) == 0:
        raise MalformedPyramidError("Pyramid has no levels")
    prev = None
    for i, level in enumerate(levels):
        level = np.asarray(level)
        if level.ndim != 2:
            raise MalformedPyramidError(f"Level {i} must be 2D, got shape {level.shape}")
        if prev is None:
            if level.shape != (2, 2):
                raise MalformedPyramidError(
                    f"Coarsest level must be 2x2, got {level.shape[1]}x{level.shape[0]}"
                )
        elif level.shape != (prev[0] * 2, prev[1] * 2):
            raise MalformedPyramidError(
                f"Level {i} is {level.shape[1]}x{level.shape[0]}, "
                f"expected {prev[1] * 2}x{prev[0] * 2}"
            )
        _check_values(level, f"Level {i}")
        prev = level.shape


def format_levels(levels: list[np.ndarray], max_levels: int = 4) -> str:
    """
    Text dump of the coarsest levels of a coarsest-first pyramid.

    Columns are grouped in pairs by '|' and rows by a dashed rule, so every
    2x2 block the warp reads at that level is boxed.
    """
    lines = []
    for midx, level in enumerate(levels[:max_levels]):
        lines.append(f"Pixels {midx}:")
        rule = "-" * (level.shape[1] * 7 + level.shape[1] // 2 + 6)
        for idx, row in enumerate(level):
            if idx % 2 == 0:
                lines.append(rule)
            cells = "".join(
                f"{p:6.3f} {'|' if c & 1 else ''}" for c, p in enumerate(row)
            )
            lines.append(f"{idx:3} : {cells}")
        lines.append("")
    return "\n".join(lines)
