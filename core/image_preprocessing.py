"""
Screenshot preprocessing for big-map matching.
Bounds the image size with a uniform downscale, then reduces it to grayscale.
"""

import cv2
import numpy as np
from typing import Optional, Tuple, Union

from config import PREPROCESSING
from models.recognition import Failure, FailureReason


class MapPreprocessor:
    """Turns an arbitrary screenshot into a grayscale map fragment"""

    def __init__(self, max_dimension: int = PREPROCESSING.MAX_DIMENSION):
        """
        Initialize preprocessor.

        Args:
            max_dimension: Largest allowed width or height of the output (default 1920)
        """
        if max_dimension <= 0:
            raise ValueError(f"max_dimension must be positive, got {max_dimension}")
        self.max_dimension = max_dimension

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        """
        Output (width, height) for an input of the given size.

        Uses a single scale factor for both axes so the affine calibration
        of the reference map still applies to the matched fragment.
        """
        if width <= self.max_dimension and height <= self.max_dimension:
            return width, height

        scale = min(self.max_dimension / width, self.max_dimension / height)
        out_w = min(self.max_dimension, max(1, int(round(width * scale))))
        out_h = min(self.max_dimension, max(1, int(round(height * scale))))
        return out_w, out_h

    def prepare(self, raw: np.ndarray) -> Union[np.ndarray, Failure]:
        """
        Downscale (if needed) and convert to grayscale.

        Args:
            raw: Screenshot (grayscale, BGR or BGRA; any integer or float
                 pixel type). Not modified.

        Returns:
            New 2-D uint8 array, or Failure(EMPTY_MAP_REGION) for empty or
            unsupported input
        """
        if raw is None or raw.size == 0 or raw.ndim not in (2, 3):
            return Failure(FailureReason.EMPTY_MAP_REGION, detail="Screenshot has no pixels")

        if raw.ndim == 3 and raw.shape[2] not in (1, 3, 4):
            return Failure(FailureReason.EMPTY_MAP_REGION,
                           detail=f"Unsupported channel count: {raw.shape[2]}")

        height, width = raw.shape[:2]
        out_w, out_h = self.target_size(width, height)

        img = self._to_uint8(raw)
        if img is None:
            return Failure(FailureReason.EMPTY_MAP_REGION,
                           detail=f"Unsupported pixel type: {raw.dtype}")

        if (out_w, out_h) != (width, height):
            # INTER_AREA avoids aliasing when shrinking
            img = cv2.resize(img, (out_w, out_h), interpolation=cv2.INTER_AREA)

        return self._to_grayscale(img)

    @staticmethod
    def _to_uint8(img: np.ndarray) -> Optional[np.ndarray]:
        """
        Map pixel values onto 0-255.

        Integer images are scaled by their dtype's maximum (a 16-bit 32768
        becomes 128); float images are min-max normalized. Returns None for
        dtypes that are neither.
        """
        if img.dtype == np.uint8:
            return img

        if img.dtype == np.bool_:
            return img.astype(np.uint8) * 255

        if np.issubdtype(img.dtype, np.integer):
            scaled = img.astype(np.float64) * (255.0 / np.iinfo(img.dtype).max)
            return np.clip(np.rint(scaled), 0, 255).astype(np.uint8)

        if np.issubdtype(img.dtype, np.floating):
            values = np.nan_to_num(img.astype(np.float32), nan=0.0, posinf=0.0, neginf=0.0)
            return cv2.normalize(values, None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)

        return None

    @staticmethod
    def _to_grayscale(img: np.ndarray) -> np.ndarray:
        """Single-channel copy of a uint8 image"""
        if img.ndim == 2:
            return img.copy()
        if img.shape[2] == 1:
            return img[:, :, 0].copy()
        if img.shape[2] == 4:
            return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


# Shared default instance with the configured size bound (holds no mutable state)
PREPROCESSOR = MapPreprocessor()
