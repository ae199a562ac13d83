#!/usr/bin/env python3
"""
Screenshot Map Locator - command line entry point
Prints the world position shown in each map screenshot
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config import PREPROCESSING, settings
from core import CoordinateTransform, MapCalibration, MapLoader, MapPreprocessor, RecognitionPipeline
from matching import FeatureMapMatcher


def parse_calibration(text: str) -> MapCalibration:
    """Parse 'scale_x,offset_x,scale_y,offset_y'"""
    try:
        scale_x, offset_x, scale_y, offset_y = (float(v) for v in text.split(','))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected scale_x,offset_x,scale_y,offset_y, got {text!r}")
    return MapCalibration(scale_x, offset_x, scale_y, offset_y)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Locate the player's world position from map screenshots")
    parser.add_argument('screenshots', nargs='+', help="Screenshot files to recognize")
    parser.add_argument('--map', dest='map_path', default=None,
                        help="Reference map image (default: search data locations)")
    parser.add_argument('--calibration', type=parse_calibration, default=None,
                        help="Affine calibration as scale_x,offset_x,scale_y,offset_y")
    parser.add_argument('--max-dimension', type=int, default=PREPROCESSING.MAX_DIMENSION,
                        help="Downscale screenshots larger than this (default: %(default)s)")
    parser.add_argument('--debug', action='store_true', help="Verbose output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.debug:
        settings.DEBUG = True

    reference_map = MapLoader.load_map(args.map_path)
    if reference_map is None:
        print("\nFailed to load reference map. Exiting.")
        return 2

    try:
        transform = CoordinateTransform(args.calibration)
        preprocessor = MapPreprocessor(max_dimension=args.max_dimension)
    except ValueError as e:
        print(f"\nInvalid configuration: {e}")
        return 2

    pipeline = RecognitionPipeline(
        FeatureMapMatcher(reference_map),
        transform=transform,
        preprocessor=preprocessor
    )

    all_ok = True
    for path, outcome in pipeline.recognize_many(args.screenshots):
        if outcome.success:
            print(f"{path}: {outcome.coordinate.format()}")
        else:
            all_ok = False
            print(f"{path}: FAILED ({outcome.reason.value})")

    return 0 if all_ok else 1


if __name__ == '__main__':
    sys.exit(main())
