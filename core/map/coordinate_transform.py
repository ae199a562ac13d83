"""Coordinate system transformations"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence, Tuple
from config import CALIBRATION
from models.recognition import ImageCoordinate, WorldCoordinate


@dataclass(frozen=True)
class MapCalibration:
    """Per-axis affine parameters from reference map pixels to world units"""
    scale_x: float
    offset_x: float
    scale_y: float
    offset_y: float

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float, float, float]]) -> 'MapCalibration':
        """
        Fit calibration by least squares.

        Args:
            points: (image_x, image_y, world_x, world_y) pairs, at least two
                    with distinct image positions on each axis

        Returns:
            Fitted MapCalibration
        """
        if len(points) < 2:
            raise ValueError(f"Need at least 2 calibration points, got {len(points)}")

        img_xs = np.array([img_x for img_x, _, _, _ in points], dtype=np.float64)
        img_ys = np.array([img_y for _, img_y, _, _ in points], dtype=np.float64)
        world_xs = np.array([world_x for _, _, world_x, _ in points], dtype=np.float64)
        world_ys = np.array([world_y for _, _, _, world_y in points], dtype=np.float64)

        if np.ptp(img_xs) == 0 or np.ptp(img_ys) == 0:
            raise ValueError("Calibration points must span both image axes")

        A_x = np.column_stack([img_xs, np.ones(len(img_xs))])
        scale_x, offset_x = np.linalg.lstsq(A_x, world_xs, rcond=None)[0]

        A_y = np.column_stack([img_ys, np.ones(len(img_ys))])
        scale_y, offset_y = np.linalg.lstsq(A_y, world_ys, rcond=None)[0]

        return cls(float(scale_x), float(offset_x), float(scale_y), float(offset_y))

    @classmethod
    def default(cls) -> 'MapCalibration':
        """Calibration from config (points win over explicit parameters)"""
        if CALIBRATION.CALIBRATION_POINTS:
            return cls.from_points(CALIBRATION.CALIBRATION_POINTS)
        return cls(CALIBRATION.SCALE_X, CALIBRATION.OFFSET_X,
                   CALIBRATION.SCALE_Y, CALIBRATION.OFFSET_Y)


class CoordinateTransform:
    """Maps matcher image coordinates to world coordinates and back"""

    def __init__(self, calibration: MapCalibration = None):
        self.calibration = calibration or MapCalibration.default()

        params = (self.calibration.scale_x, self.calibration.offset_x,
                  self.calibration.scale_y, self.calibration.offset_y)
        if not all(np.isfinite(params)):
            raise ValueError(f"Calibration parameters must be finite: {params}")
        if self.calibration.scale_x == 0 or self.calibration.scale_y == 0:
            raise ValueError("Calibration scale must be non-zero on both axes")

    def to_world(self, img: ImageCoordinate) -> WorldCoordinate:
        """Convert reference map pixel coordinates to world coordinates"""
        c = self.calibration
        return WorldCoordinate(
            x=float(c.scale_x * img.x + c.offset_x),
            y=float(c.scale_y * img.y + c.offset_y)
        )

    def to_image(self, world: WorldCoordinate) -> ImageCoordinate:
        """Convert world coordinates back to reference map pixel coordinates"""
        c = self.calibration
        return ImageCoordinate(
            x=float((world.x - c.offset_x) / c.scale_x),
            y=float((world.y - c.offset_y) / c.scale_y)
        )
