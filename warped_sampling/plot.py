"""Render warped points over their source image."""

from __future__ import annotations
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.collections import PatchCollection
from matplotlib.patches import Rectangle

from .box import Box2D


def plot_warp(image: np.ndarray, warped: np.ndarray, path: Path,
              points: np.ndarray | None = None,
              boxes: list[Box2D] | None = None,
              title: str | None = None):
    """
    Save a PNG of the warped points drawn on top of `image`.

    Args:
        image: (H, W, 3|4) pixel array used as background.
        warped: (N, 2) warped points in texture space [0, 1]^2.
        path: Output PNG path.
        points: Optional (N, 2) unwarped input points, drawn in red.
        boxes: Optional texture-space leaf boxes, drawn as yellow outlines.
        title: Optional figure title.
    """
    h, w = image.shape[:2]
    fig, ax = plt.subplots(figsize=(8, 8 * h / w))
    ax.imshow(image, origin='upper', extent=(0, w, h, 0))

    if boxes:
        rects = [
            Rectangle((b.min[0] * w, b.min[1] * h), b.width * w, b.height * h)
            for b in boxes
        ]
        ax.add_collection(PatchCollection(rects, facecolor='none',
                                          edgecolor='#ffff44', linewidth=0.5))

    if points is not None and len(points):
        ax.scatter(points[:, 0] * w, points[:, 1] * h, s=6, facecolors='none',
                   edgecolors='#ee0000', linewidths=0.5, alpha=0.6)

    if len(warped):
        ax.scatter(warped[:, 0] * w, warped[:, 1] * h, s=6, facecolors='none',
                   edgecolors='#00ee00', linewidths=0.5, alpha=0.8)

    ax.set_xlim(0, w)
    ax.set_ylim(h, 0)
    ax.axis('off')
    if title:
        ax.set_title(title)

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close(fig)
