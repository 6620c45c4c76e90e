"""Density-guided warping of low-discrepancy point sets."""

from .box import Box2D, UNIT_BOX, child_box, inverse_lerp, lerp, remap_points
from .density import density_from_pixels, load_density, load_image, luminance
from .errors import (
    DegenerateBoxError,
    DegenerateDensityError,
    MalformedPyramidError,
    WarpedSamplingError,
)
from .halton import halton_points, radical_inverse
from .pyramid import build_pyramid, coarse_first, format_levels, validate_pyramid
from .warp import (
    SplitFractions,
    WarpResult,
    split_box,
    split_fractions,
    warp,
    warp_detailed,
    warp_indexed,
)

__version__ = "0.1.0"
