"""Halton point source."""

import numpy as np
import pytest

from warped_sampling.halton import halton_points, radical_inverse


@pytest.mark.parametrize("i, base, expected", [
    (0, 2, 0.0),
    (1, 2, 0.5),
    (2, 2, 0.25),
    (3, 2, 0.75),
    (1, 3, 1.0 / 3.0),
    (2, 3, 2.0 / 3.0),
    (3, 3, 1.0 / 9.0),
])
def test_radical_inverse(i, base, expected):
    assert radical_inverse(i, base) == pytest.approx(expected)


def test_first_points_start_at_index_one():
    pts = halton_points(3)
    np.testing.assert_allclose(pts, [[0.5, 1 / 3], [0.25, 2 / 3], [0.75, 1 / 9]])


def test_points_in_half_open_unit_square():
    pts = halton_points(1000)
    assert pts.shape == (1000, 2)
    assert np.all(pts >= 0.0) and np.all(pts < 1.0)
    # Low discrepancy: every quadrant gets close to a quarter
    counts = np.histogram2d(pts[:, 0], pts[:, 1], bins=2, range=[[0, 1], [0, 1]])[0]
    assert np.all(np.abs(counts - 250) <= 20)


def test_start_offset():
    np.testing.assert_array_equal(halton_points(4, start=3), halton_points(6)[2:])


def test_invalid_arguments():
    assert halton_points(0).shape == (0, 2)
    with pytest.raises(ValueError):
        halton_points(-1)
    with pytest.raises(ValueError):
        radical_inverse(5, 1)
