"""Image loading and luminance extraction."""

import numpy as np
import pytest
from PIL import Image

from warped_sampling.density import (
    density_from_pixels, load_density, load_image, luminance,
)


def test_luminance_of_primaries():
    pixels = np.array([[[255, 0, 0, 255], [0, 255, 0, 255]],
                       [[0, 0, 255, 0], [255, 255, 255, 255]]], dtype=np.uint8)
    np.testing.assert_allclose(luminance(pixels), [[0.299, 0.587], [0.114, 1.0]])


def test_luminance_float_input_is_already_normalized():
    pixels = np.full((2, 2, 3), 0.5)
    np.testing.assert_allclose(luminance(pixels), np.full((2, 2), 0.5))


def test_luminance_rejects_bad_shape():
    with pytest.raises(ValueError):
        luminance(np.zeros((4, 4)))
    with pytest.raises(ValueError):
        luminance(np.zeros((4, 4, 2)))


def test_invert_and_floor():
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[0, 0, :3] = 255
    np.testing.assert_allclose(
        density_from_pixels(pixels, invert=True),
        [[0.0, 1.0], [1.0, 1.0]], atol=1e-12,
    )
    np.testing.assert_allclose(
        density_from_pixels(pixels, floor=0.01),
        [[1.01, 0.01], [0.01, 0.01]],
    )
    with pytest.raises(ValueError):
        density_from_pixels(pixels, floor=-1.0)


def test_load_image_and_density(tmp_path):
    arr = np.zeros((8, 8, 3), dtype=np.uint8)
    arr[:, 4:] = 255
    path = tmp_path / "half.png"
    Image.fromarray(arr).save(path)

    rgba = load_image(path)
    assert rgba.shape == (8, 8, 4)
    assert rgba.dtype == np.uint8

    density = load_density(path)
    assert density.shape == (8, 8)
    np.testing.assert_allclose(density[:, :4], 0.0)
    np.testing.assert_allclose(density[:, 4:], 1.0)


def test_load_image_resample(tmp_path):
    path = tmp_path / "odd.png"
    Image.fromarray(np.full((12, 20), 128, dtype=np.uint8)).save(path)
    assert load_image(path, size=16).shape == (16, 16, 4)
    np.testing.assert_allclose(load_density(path, size=8), 128 / 255, atol=1e-6)


def test_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "nope.png")
