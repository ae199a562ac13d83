"""
Tests for FeatureMapMatcher against a synthetic reference map, plus an
end-to-end run of the recognition pipeline with the real matcher.
"""

import pytest
import numpy as np
import cv2
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from core.image_preprocessing import MapPreprocessor
from core.map.coordinate_transform import CoordinateTransform, MapCalibration
from core.recognition_pipeline import RecognitionPipeline
from matching import FeatureMapMatcher, NO_MATCH
from models.recognition import FailureReason


# Crop of the synthetic map used as a "screenshot": rows 200-500, cols 250-550
CROP_Y, CROP_X, CROP_H, CROP_W = 200, 250, 300, 300
CROP_CENTRE = (CROP_X + CROP_W / 2.0, CROP_Y + CROP_H / 2.0)


@pytest.fixture
def matcher(synthetic_map):
    return FeatureMapMatcher(synthetic_map, max_map_features=0)


@pytest.fixture
def crop(synthetic_map):
    return synthetic_map[CROP_Y:CROP_Y + CROP_H, CROP_X:CROP_X + CROP_W].copy()


class TestFeatureMapMatcherInitialization:

    @pytest.mark.parametrize("reference", [
        None,
        np.zeros((0, 0), dtype=np.uint8),
        np.zeros((10, 10, 3), dtype=np.uint8),
    ])
    def test_rejects_bad_reference(self, reference):
        with pytest.raises(ValueError):
            FeatureMapMatcher(reference)

    def test_features_are_lazy(self, matcher):
        assert matcher.desc_map is None
        matcher.ensure_reference_features()
        assert matcher.desc_map is not None
        assert len(matcher.kp_map) > 100

    def test_max_map_features(self, synthetic_map):
        matcher = FeatureMapMatcher(synthetic_map, max_map_features=50)
        matcher.ensure_reference_features()
        assert len(matcher.kp_map) == 50

    def test_featureless_reference(self):
        matcher = FeatureMapMatcher(np.full((200, 200), 128, dtype=np.uint8))
        with pytest.raises(ValueError):
            matcher.match_position(np.full((50, 50), 128, dtype=np.uint8))

    def test_featureless_reference_is_not_recomputed(self):
        """A reference map without features fails fast on later calls."""
        matcher = FeatureMapMatcher(np.full((200, 200), 128, dtype=np.uint8))
        fragment = np.full((50, 50), 128, dtype=np.uint8)

        with patch.object(matcher, "_create_detector", wraps=matcher._create_detector) as create:
            for _ in range(3):
                with pytest.raises(ValueError):
                    matcher.match_position(fragment)

        assert create.call_count == 1
        assert matcher.desc_map is None


class TestFeatureMapMatcherMatching:

    def test_locates_crop_centre(self, matcher, crop):
        position = matcher.match_position(crop)

        assert position != NO_MATCH
        assert position.x == pytest.approx(CROP_CENTRE[0], abs=3.0)
        assert position.y == pytest.approx(CROP_CENTRE[1], abs=3.0)

    def test_match_with_reason_success(self, matcher, crop):
        position, reason = matcher.match_with_reason(crop)

        assert position != NO_MATCH
        assert reason is None

    def test_locates_downscaled_crop(self, matcher, synthetic_map):
        """A half-size view of a larger region still maps to its centre."""
        region = synthetic_map[100:700, 100:700]
        small = cv2.resize(region, (300, 300), interpolation=cv2.INTER_AREA)

        position = matcher.match_position(small)

        assert position.x == pytest.approx(400.0, abs=6.0)
        assert position.y == pytest.approx(400.0, abs=6.0)

    def test_blank_fragment_is_sentinel(self, matcher):
        position = matcher.match_position(np.zeros((200, 200), dtype=np.uint8))
        assert position == NO_MATCH

    def test_match_with_reason_failure(self, matcher):
        position, reason = matcher.match_with_reason(np.zeros((200, 200), dtype=np.uint8))

        assert position == NO_MATCH
        assert reason == "No features detected in fragment"

    def test_concurrent_calls_share_features(self, matcher, crop):
        with ThreadPoolExecutor(max_workers=4) as executor:
            positions = list(executor.map(matcher.match_position, [crop] * 4))

        for position in positions:
            assert position.x == pytest.approx(CROP_CENTRE[0], abs=3.0)
            assert position.y == pytest.approx(CROP_CENTRE[1], abs=3.0)


class TestEndToEnd:
    """Screenshot file -> world coordinate with the real matcher."""

    @pytest.fixture
    def pipeline(self, matcher):
        # World origin at map pixel (400, 400), 2 world units per pixel
        calibration = MapCalibration(2.0, -800.0, 2.0, -800.0)
        return RecognitionPipeline(matcher, transform=CoordinateTransform(calibration))

    def test_colour_screenshot_file(self, pipeline, crop, tmp_path):
        path = tmp_path / 'map.png'
        cv2.imwrite(str(path), cv2.cvtColor(crop, cv2.COLOR_GRAY2BGR))

        outcome = pipeline.recognize(str(path))

        assert outcome.success is True
        assert outcome.coordinate.x == pytest.approx(2.0 * CROP_CENTRE[0] - 800.0, abs=6.0)
        assert outcome.coordinate.y == pytest.approx(2.0 * CROP_CENTRE[1] - 800.0, abs=6.0)

    def test_oversized_screenshot_is_downscaled_before_matching(self, matcher, synthetic_map):
        """Upscaled 2x view, bounded back to 300 px by the preprocessor."""
        big = cv2.resize(synthetic_map[250:550, 250:550], (600, 600), interpolation=cv2.INTER_CUBIC)
        pipeline = RecognitionPipeline(
            matcher,
            transform=CoordinateTransform(MapCalibration(1.0, -400.0, 1.0, -400.0)),
            preprocessor=MapPreprocessor(max_dimension=300)
        )

        outcome = pipeline.recognize_image(big)

        assert outcome.success is True
        assert outcome.coordinate.x == pytest.approx(0.0, abs=4.0)
        assert outcome.coordinate.y == pytest.approx(0.0, abs=4.0)

    def test_blank_screenshot_is_no_match(self, pipeline):
        outcome = pipeline.recognize_image(np.zeros((300, 300, 3), dtype=np.uint8))
        assert outcome.reason == FailureReason.NO_MATCH
