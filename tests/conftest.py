"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
import cv2
from unittest.mock import Mock

from core.map.coordinate_transform import CoordinateTransform, MapCalibration
from models.recognition import ImageCoordinate


# === Test Data Fixtures ===

@pytest.fixture
def mock_screenshot():
    """Create a mock screenshot (1920x1080 BGR)."""
    return np.random.randint(0, 255, (1080, 1920, 3), dtype=np.uint8)


@pytest.fixture
def mock_screenshot_small():
    """Create a small mock screenshot for faster tests."""
    return np.random.randint(0, 255, (100, 100, 3), dtype=np.uint8)


@pytest.fixture
def mock_screenshot_4k():
    """Create an oversized (3840x2160) screenshot."""
    return np.zeros((2160, 3840, 3), dtype=np.uint8)


@pytest.fixture
def synthetic_map():
    """
    Create a deterministic 800x800 grayscale map full of distinct shapes.

    Sharp-edged shapes on a textured background give AKAZE plenty of
    repeatable corners.
    """
    rng = np.random.RandomState(42)
    img = np.full((800, 800), 128, dtype=np.uint8)

    # Low-frequency background variation
    ys, xs = np.mgrid[0:800, 0:800]
    img = (img + 40 * np.sin(xs / 37.0) * np.cos(ys / 53.0)).astype(np.uint8)

    for _ in range(250):
        kind = rng.randint(0, 3)
        color = int(rng.randint(0, 256))
        x, y = int(rng.randint(0, 800)), int(rng.randint(0, 800))
        if kind == 0:
            cv2.circle(img, (x, y), int(rng.randint(4, 25)), color, -1)
        elif kind == 1:
            w, h = int(rng.randint(6, 40)), int(rng.randint(6, 40))
            cv2.rectangle(img, (x, y), (x + w, y + h), color, -1)
        else:
            x2, y2 = int(rng.randint(0, 800)), int(rng.randint(0, 800))
            cv2.line(img, (x, y), (x2, y2), color, int(rng.randint(1, 4)))
    return img


@pytest.fixture
def screenshot_file(tmp_path, mock_screenshot_small):
    """Write a small screenshot to disk and return its path."""
    path = tmp_path / 'screenshot.png'
    cv2.imwrite(str(path), mock_screenshot_small)
    return path


# === Matcher Fixtures ===

@pytest.fixture
def mock_matcher():
    """Create a mock big-map matcher that always finds (3500, 2800)."""
    matcher = Mock()
    matcher.match_position.return_value = ImageCoordinate(3500.0, 2800.0)
    return matcher


@pytest.fixture
def sentinel_matcher():
    """Create a mock matcher that reports the (0, 0) failure sentinel."""
    matcher = Mock()
    matcher.match_position.return_value = ImageCoordinate(0.0, 0.0)
    return matcher


@pytest.fixture
def failing_matcher():
    """Create a mock matcher that raises."""
    matcher = Mock()
    matcher.match_position.side_effect = RuntimeError("reference map not loaded")
    return matcher


# === Calibration Fixtures ===

@pytest.fixture
def identity_offset_transform():
    """1 px per world unit, world origin at image (3000, 3000)."""
    return CoordinateTransform(MapCalibration(1.0, -3000.0, 1.0, -3000.0))


@pytest.fixture
def scaled_transform():
    """2 world units per px on x, -0.5 on y (flipped axis)."""
    return CoordinateTransform(MapCalibration(2.0, -4000.0, -0.5, 1500.0))
