"""
Warp a Halton point set so its density follows an image's luminance.

Pipeline:
1. Load the image as RGBA (optionally box-resampled to a square size)
2. Luminance -> base density grid
3. Build the 2x2 box-filtered density pyramid
4. Warp Halton (2, 3) points through the pyramid, coarsest level first
5. Save a PNG of the warped points over the image

Usage:
    warped-sampling photo.png
    warped-sampling photo.png --count 250 --show-boxes
    warped-sampling photo.png --size 512 --invert --floor 0.01 -o stipple.png
    warped-sampling photo.png --points-out warped.csv --dump-levels 3
"""

import argparse
import csv
import sys
from pathlib import Path

from .density import density_from_pixels, load_image
from .errors import WarpedSamplingError
from .halton import halton_points
from .plot import plot_warp
from .pyramid import build_pyramid, coarse_first, format_levels
from .warp import warp_detailed


def write_points_csv(path: Path, warped, order):
    """Write warped points as index,x,y rows, index being the input position."""
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['index', 'x', 'y'])
        for idx, (x, y) in zip(order, warped):
            writer.writerow([int(idx), f"{x:.9f}", f"{y:.9f}"])


def run(args) -> int:
    verbose = not args.quiet

    if not args.image.exists():
        print(f"Error: Input file not found: {args.image}", file=sys.stderr)
        return 1

    output = args.output
    if output is None:
        output = args.image.with_name(f"{args.image.stem}_warped.png")

    try:
        pixels = load_image(args.image, size=args.size)
        density = density_from_pixels(pixels, floor=args.floor, invert=args.invert)
        if verbose:
            h, w = density.shape
            print(f"Input:  {args.image} ({w}x{h})")

        levels = coarse_first(build_pyramid(density))
        if verbose:
            print(f"Pyramid: {len(levels)} levels")
        if args.dump_levels:
            print()
            print(format_levels(levels, max_levels=args.dump_levels))

        points = halton_points(args.count)
        if verbose:
            print(f"Warping {args.count:,} Halton points...")
        result = warp_detailed(
            levels, points,
            on_degenerate="uniform" if args.uniform_fallback else "raise",
            propagate_scale=not args.unit_scale,
        )
    except WarpedSamplingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if verbose:
        print(f"  {len(result.boxes):,} leaf cells visited")

    output.parent.mkdir(parents=True, exist_ok=True)
    plot_warp(
        pixels, result.points, output,
        points=points[result.order] if args.show_input else None,
        boxes=result.boxes if args.show_boxes else None,
        title=f"Warped sampling ({args.count:,} points)",
    )
    if verbose:
        print(f"Saved: {output}")

    if args.points_out:
        args.points_out.parent.mkdir(parents=True, exist_ok=True)
        write_points_csv(args.points_out, result.points, result.order)
        if verbose:
            print(f"Saved: {args.points_out}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Warp low-discrepancy points to follow image luminance'
    )
    parser.add_argument('image', type=Path,
                        help='Input image (power-of-two size unless --size is given)')
    parser.add_argument('--count', '-n', type=int, default=10000,
                        help='Number of Halton points (default: 10000)')
    parser.add_argument('--size', type=int, default=None,
                        help='Resample the image to SIZE x SIZE first (power of two)')
    parser.add_argument('--floor', type=float, default=0.0,
                        help='Constant added to every density cell (default: 0)')
    parser.add_argument('--invert', action='store_true',
                        help='Use darkness instead of brightness as density')
    parser.add_argument('--uniform-fallback', action='store_true',
                        help='Split zero-density cells evenly instead of failing')
    parser.add_argument('--unit-scale', action='store_true',
                        help='Reset the accumulated scale to 1.0 at every level')
    parser.add_argument('--show-input', action='store_true',
                        help='Also draw the unwarped input points')
    parser.add_argument('--show-boxes', action='store_true',
                        help='Also draw the leaf texture boxes')
    parser.add_argument('--dump-levels', type=int, default=0, metavar='K',
                        help='Print the K coarsest pyramid levels')
    parser.add_argument('-o', '--output', type=Path, default=None,
                        help='Output PNG (default: <image>_warped.png)')
    parser.add_argument('--points-out', type=Path, default=None,
                        help='Also write the warped points as CSV')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Quiet mode')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.count < 0:
        print("Error: --count must be non-negative", file=sys.stderr)
        sys.exit(1)
    if args.size is not None and args.size < 2:
        print("Error: --size must be at least 2", file=sys.stderr)
        sys.exit(1)
    if args.floor < 0:
        print("Error: --floor must be non-negative", file=sys.stderr)
        sys.exit(1)
    sys.exit(run(args))


if __name__ == '__main__':
    main()
