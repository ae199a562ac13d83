"""
Configuration settings for the screenshot map locator
Values tuned for full-screen map screenshots at 1080p-4K
"""

from dataclasses import dataclass
from typing import Tuple

# Global debug flag - set to True to enable verbose logging
DEBUG = False


@dataclass(frozen=True)
class PreprocessingConfig:
    """Screenshot normalization settings"""
    # Screenshots larger than this on either axis are downscaled uniformly
    MAX_DIMENSION: int = 1920


@dataclass(frozen=True)
class WorldBounds:
    """Approximate playable world extent (inclusive, both axes)"""
    LIMIT: float = 3000.0


@dataclass(frozen=True)
class MapCalibrationConfig:
    """
    Default affine calibration from reference map pixels to world coordinates.

    world_x = SCALE_X * image_x + OFFSET_X
    world_y = SCALE_Y * image_y + OFFSET_Y

    The reference map is 1 px per world unit with the world origin at the
    map centre; swap these out when using a different reference map.
    """
    SCALE_X: float = 1.0
    OFFSET_X: float = -3000.0
    SCALE_Y: float = 1.0
    OFFSET_Y: float = -3000.0

    # Optional (image_x, image_y, world_x, world_y) pairs; when present they
    # take priority and the transform is fitted by least squares
    CALIBRATION_POINTS: Tuple[Tuple[float, float, float, float], ...] = ()


@dataclass(frozen=True)
class MatchingConfig:
    """AKAZE feature matching configuration"""
    AKAZE_THRESHOLD: float = 0.0008
    MAX_MAP_FEATURES: int = 20000
    RATIO_TEST_THRESHOLD: float = 0.75
    MIN_INLIERS: int = 8
    MIN_INLIER_RATIO: float = 0.3
    RANSAC_REPROJ_THRESHOLD: float = 5.0


# Create singleton instances
PREPROCESSING = PreprocessingConfig()
WORLD_BOUNDS = WorldBounds()
CALIBRATION = MapCalibrationConfig()
MATCHING = MatchingConfig()
