#!/usr/bin/env python3
"""
Generate a cylindrical lithophane STL from an image.

The image is wrapped around a cylinder of the given diameter; darker pixels
become thicker walls. Optional fixed-thickness borders are added at the top
and bottom, blended into the relief over a transition band.

Usage:
    python scripts/generate_lithophane.py --image photo.png --output lamp.stl
    python scripts/generate_lithophane.py -i photo.png -o lamp.stl --diameter 90 --rough-face outside
    python scripts/generate_lithophane.py -i photo.png -o lamp.stl --border-top-height 0 --ascii --check
"""
import sys
import argparse
import logging
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lithophane import (
    LithophaneConfig,
    LithophaneValidationError,
    RoughFace,
    generate_lithophane,
)

DEFAULTS = LithophaneConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generate_lithophane",
        description="Generate a cylindrical lithophane STL file from an image.",
    )
    parser.add_argument(
        "-i", "--image", required=True,
        help="Path to the source image (PNG, JPEG, ...)",
    )
    parser.add_argument(
        "-o", "--output", required=True,
        help="Path to the destination .stl file",
    )
    parser.add_argument(
        "-d", "--diameter", type=float, default=DEFAULTS.diameter,
        help=f"Cylinder diameter in mm, measured on the flat face (default: {DEFAULTS.diameter})",
    )
    parser.add_argument(
        "-n", "--thickness-min", type=float, default=DEFAULTS.min_thickness,
        help=f"Minimum (lightest) thickness in mm (default: {DEFAULTS.min_thickness})",
    )
    parser.add_argument(
        "-x", "--thickness-max", type=float, default=DEFAULTS.max_thickness,
        help=f"Maximum (darkest) thickness in mm (default: {DEFAULTS.max_thickness})",
    )
    for edge in ("top", "bottom"):
        parser.add_argument(
            f"--border-{edge}-height", type=float,
            default=getattr(DEFAULTS, f"{edge}_border_height"),
            help=f"Height of the {edge} border in mm, 0 = no border "
                 f"(default: {getattr(DEFAULTS, f'{edge}_border_height')})",
        )
        parser.add_argument(
            f"--border-{edge}-thickness", type=float,
            default=getattr(DEFAULTS, f"{edge}_border_thickness"),
            help=f"Thickness of the {edge} border in mm "
                 f"(default: {getattr(DEFAULTS, f'{edge}_border_thickness')})",
        )
        parser.add_argument(
            f"--border-{edge}-transition", type=float,
            default=getattr(DEFAULTS, f"{edge}_border_transition"),
            help=f"Length of the band blending the {edge} border into the image, in mm "
                 f"(default: {getattr(DEFAULTS, f'{edge}_border_transition')})",
        )
    relief = parser.add_mutually_exclusive_group()
    relief.add_argument(
        "--rough-face", default=DEFAULTS.rough_face.value,
        choices=[f.value for f in RoughFace],
        help=f"Which face carries the relief (default: {DEFAULTS.rough_face.value})",
    )
    relief.add_argument(
        "--flat-inside", action="store_true",
        help="Flat face inside, relief outside (same as --rough-face outside)",
    )
    parser.add_argument(
        "--ascii", action="store_true",
        help="Write ASCII STL instead of binary",
    )
    parser.add_argument(
        "--check", action="store_true",
        help="Report watertightness and volume of the generated mesh",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> LithophaneConfig:
    rough_face = RoughFace.OUTSIDE if args.flat_inside else RoughFace(args.rough_face)
    return LithophaneConfig(
        image_path=args.image,
        output_path=args.output,
        diameter=args.diameter,
        min_thickness=args.thickness_min,
        max_thickness=args.thickness_max,
        top_border_height=args.border_top_height,
        top_border_thickness=args.border_top_thickness,
        top_border_transition=args.border_top_transition,
        bottom_border_height=args.border_bottom_height,
        bottom_border_thickness=args.border_bottom_thickness,
        bottom_border_transition=args.border_bottom_transition,
        rough_face=rough_face,
        ascii=args.ascii,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("generate_lithophane")

    config = config_from_args(args)
    try:
        result = generate_lithophane(config, report=args.check)
    except LithophaneValidationError as exc:
        parser.error(str(exc))
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if result.report is not None:
        for key, value in result.report.items():
            log.info("%s: %s", key, value)

    print(
        f"Wrote {result.triangle_count} triangles to {result.output_path} "
        f"({result.image_width}x{result.image_height} px, "
        f"height {result.model_height_mm:.1f} mm)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
