"""
Image -> base density grid.

Density is the Rec. 601 luma of the image, computed on channels normalized
to 0-1. Alpha is ignored.
"""

from __future__ import annotations
from pathlib import Path

import numpy as np
from PIL import Image


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Luminance of an (H, W, 3) or (H, W, 4) pixel array.

    Integer arrays are taken as 0-255; float arrays as already in 0-1.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected (H, W, 3) or (H, W, 4) pixels, got shape {pixels.shape}")
    rgb = pixels[..., :3].astype(np.float64)
    if np.issubdtype(pixels.dtype, np.integer):
        rgb /= 255.0
    return rgb @ LUMA_WEIGHTS


def load_image(path: Path, size: int | None = None) -> np.ndarray:
    """
    Load an image file as an (H, W, 4) uint8 RGBA array.

    With `size` set the image is box-resampled to size x size first, which
    is how images without power-of-two dimensions are brought into shape.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    with Image.open(path) as img:
        img = img.convert('RGBA')
        if size is not None:
            img = img.resize((size, size), Image.BOX)
        return np.array(img)


def density_from_pixels(pixels: np.ndarray, floor: float = 0.0, invert: bool = False) -> np.ndarray:
    """
    Base density grid for an RGBA/RGB pixel array.

    Args:
        pixels: (H, W, 3|4) pixel array.
        floor: Constant added to every cell, keeps black regions reachable.
        invert: Use darkness (1 - luminance) as density, as stippling does.
    """
    if floor < 0:
        raise ValueError(f"Density floor must be non-negative, got {floor}")
    lum = luminance(pixels)
    if invert:
        lum = 1.0 - lum
    # Rounding can leave tiny negatives after inversion
    return np.clip(lum, 0.0, None) + floor


def load_density(path: Path, floor: float = 0.0, invert: bool = False,
                 size: int | None = None) -> np.ndarray:
    """Load an image file straight into a base density grid."""
    return density_from_pixels(load_image(path, size=size), floor=floor, invert=invert)
