"""Halton low-discrepancy point source."""

from __future__ import annotations

import numpy as np


def radical_inverse(i: int, base: int) -> float:
    """Digits of `i` in `base`, mirrored about the radix point."""
    if base < 2:
        raise ValueError(f"Halton base must be >= 2, got {base}")
    f = 1.0
    r = 0.0
    while i:
        f /= base
        r += f * (i % base)
        i //= base
    return r


def halton_points(count: int, bases: tuple[int, int] = (2, 3), start: int = 1) -> np.ndarray:
    """
    First `count` 2D Halton points, as an (count, 2) float64 array in [0, 1)^2.

    Indexing starts at 1 so the first point is (1/2, 1/3) rather than the
    origin.
    """
    if count < 0:
        raise ValueError(f"Point count must be non-negative, got {count}")
    if start < 0:
        raise ValueError(f"Start index must be non-negative, got {start}")
    pts = np.empty((count, 2), dtype=np.float64)
    for n in range(count):
        pts[n, 0] = radical_inverse(start + n, bases[0])
        pts[n, 1] = radical_inverse(start + n, bases[1])
    return pts
