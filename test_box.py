"""Box algebra: interpolation, inverse interpolation and child boxes."""

import numpy as np
import pytest

from warped_sampling.box import (
    Box2D, UNIT_BOX, child_box, inverse_lerp, lerp, remap_points,
)
from warped_sampling.errors import DegenerateBoxError


def test_lerp_endpoints_and_midpoint():
    assert lerp(2.0, 6.0, 0.0) == 2.0
    assert lerp(2.0, 6.0, 1.0) == 6.0
    assert lerp(2.0, 6.0, 0.25) == 3.0


def test_inverse_lerp_undoes_lerp():
    assert inverse_lerp(2.0, 6.0, 3.0) == 0.25
    assert inverse_lerp(2.0, 6.0, lerp(2.0, 6.0, 0.625)) == pytest.approx(0.625)


def test_inverse_lerp_accepts_arrays():
    m = np.array([0.0, 0.5, 1.0])
    np.testing.assert_allclose(inverse_lerp(0.0, 2.0, m), [0.0, 0.25, 0.5])


def test_inverse_lerp_zero_width_raises():
    with pytest.raises(DegenerateBoxError):
        inverse_lerp(0.3, 0.3, 0.3)
    # Still a ValueError for callers that only know the builtin
    with pytest.raises(ValueError):
        inverse_lerp(1.0, 1.0, np.array([1.0]))


def test_child_box_picks_column_and_row_from_index_bits():
    edges = ((0.0, 0.0), (0.25, 0.75), (1.0, 1.0))
    assert child_box(edges, 0) == Box2D((0.0, 0.0), (0.25, 0.75))
    assert child_box(edges, 1) == Box2D((0.25, 0.0), (1.0, 0.75))
    assert child_box(edges, 2) == Box2D((0.0, 0.75), (0.25, 1.0))
    assert child_box(edges, 3) == Box2D((0.25, 0.75), (1.0, 1.0))


def test_box_extent_and_containment():
    box = Box2D((0.25, 0.5), (0.75, 1.0))
    assert box.width == 0.5
    assert box.height == 0.5
    assert box.contains(0.25, 1.0)
    assert not box.contains(0.2, 0.6)
    assert UNIT_BOX.contains(0.0, 0.0) and UNIT_BOX.contains(1.0, 1.0)


def test_remap_points_per_axis():
    source = Box2D((0.0, 0.5), (0.5, 1.0))
    target = Box2D((0.5, 0.0), (1.0, 0.25))
    pts = np.array([[0.0, 0.5], [0.25, 0.75], [0.5, 1.0]])
    np.testing.assert_allclose(
        remap_points(pts, source, target),
        [[0.5, 0.0], [0.75, 0.125], [1.0, 0.25]],
    )


def test_remap_points_collapsed_source_raises():
    flat = Box2D((0.5, 0.0), (0.5, 1.0))
    with pytest.raises(DegenerateBoxError):
        remap_points(np.array([[0.5, 0.5]]), flat, UNIT_BOX)
