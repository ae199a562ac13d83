"""
Big-map position matchers.

A matcher takes a grayscale map fragment and reports where its centre lies in
the reference map's pixel space. (0, 0) means "no match".
"""

import threading

import cv2
import numpy as np
from typing import Optional, Protocol, Tuple

from config import MATCHING
from models.recognition import ImageCoordinate

NO_MATCH = ImageCoordinate(0.0, 0.0)


class BigMapMatcher(Protocol):
    """Anything that can locate a grayscale fragment on the reference map"""

    def match_position(self, fragment: np.ndarray) -> ImageCoordinate:
        ...


class FeatureMapMatcher:
    """
    AKAZE feature matcher against a single reference map.

    Reference features are computed lazily on first use and shared by all
    callers; computing them is guarded by a lock so concurrent recognitions
    can share one matcher instance.
    """

    def __init__(self,
                 reference_map: np.ndarray,
                 max_map_features: int = MATCHING.MAX_MAP_FEATURES,
                 ratio_test_threshold: float = MATCHING.RATIO_TEST_THRESHOLD,
                 min_inliers: int = MATCHING.MIN_INLIERS,
                 min_inlier_ratio: float = MATCHING.MIN_INLIER_RATIO,
                 ransac_threshold: float = MATCHING.RANSAC_REPROJ_THRESHOLD,
                 akaze_threshold: float = MATCHING.AKAZE_THRESHOLD):
        """
        Initialize matcher.

        Args:
            reference_map: Grayscale reference map
            max_map_features: Maximum number of AKAZE features to keep from map (0 = all)
            ratio_test_threshold: Lowe's ratio test threshold (0.7-0.8)
            min_inliers: Minimum absolute number of RANSAC inliers
            min_inlier_ratio: Minimum ratio of inliers to good matches (0.0-1.0)
            ransac_threshold: RANSAC reprojection error threshold
            akaze_threshold: AKAZE detector response threshold
        """
        if reference_map is None or reference_map.ndim != 2 or reference_map.size == 0:
            raise ValueError("reference_map must be a non-empty grayscale image")

        self.reference_map = reference_map
        self.max_map_features = max_map_features
        self.ratio_test_threshold = ratio_test_threshold
        self.min_inliers = min_inliers
        self.min_inlier_ratio = min_inlier_ratio
        self.ransac_threshold = ransac_threshold
        self.akaze_threshold = akaze_threshold

        self.kp_map = None
        self.desc_map = None
        self._reference_error: Optional[str] = None
        self._features_lock = threading.Lock()

    def _create_detector(self):
        """New AKAZE detector (instances are not shared between threads)"""
        return cv2.AKAZE_create(
            descriptor_type=cv2.AKAZE_DESCRIPTOR_MLDB,
            threshold=self.akaze_threshold,
            nOctaves=4,
            nOctaveLayers=4,
            diffusivity=cv2.KAZE_DIFF_PM_G2  # Edge-preserving diffusion
        )

    def ensure_reference_features(self):
        """Compute reference map features once; a featureless map fails every call"""
        with self._features_lock:
            if self._reference_error is not None:
                raise ValueError(self._reference_error)
            if self.desc_map is not None:
                return

            print("Computing reference map features...")
            kp, desc = self._create_detector().detectAndCompute(self.reference_map, None)

            if desc is None or len(kp) == 0:
                self._reference_error = "Failed to detect features in reference map"
                raise ValueError(self._reference_error)

            if self.max_map_features > 0 and len(kp) > self.max_map_features:
                # Keep the strongest responses
                indices = np.argsort([k.response for k in kp])[::-1][:self.max_map_features]
                kp = [kp[i] for i in indices]
                desc = desc[indices]

            print(f"Reference map features: {len(kp)}")
            self.kp_map = kp
            self.desc_map = desc

    def match_position(self, fragment: np.ndarray) -> ImageCoordinate:
        """
        Locate the centre of fragment on the reference map.

        Args:
            fragment: Grayscale map fragment

        Returns:
            Centre position in reference map pixels, or (0, 0) if not found
        """
        position, _ = self.match_with_reason(fragment)
        return position

    def match_with_reason(self, fragment: np.ndarray) -> Tuple[ImageCoordinate, Optional[str]]:
        """
        Like match_position, but also returns why matching failed.

        Returns:
            (position, None) on success, (NO_MATCH, reason) on failure
        """
        self.ensure_reference_features()

        kp, desc = self._create_detector().detectAndCompute(fragment, None)

        if desc is None or len(kp) < 2:
            return NO_MATCH, "No features detected in fragment"

        if len(self.kp_map) < 2:
            return NO_MATCH, "Not enough map features for matching"

        # BFMatcher with Hamming distance (binary MLDB descriptors)
        matcher = cv2.BFMatcher(cv2.NORM_HAMMING, crossCheck=False)
        matches = matcher.knnMatch(desc, self.desc_map, k=2)

        # Apply Lowe's ratio test
        good_matches = []
        for match_pair in matches:
            if len(match_pair) == 2:
                m, n = match_pair
                if m.distance < self.ratio_test_threshold * n.distance:
                    good_matches.append(m)

        if len(good_matches) < self.min_inliers:
            return NO_MATCH, f"Not enough good matches ({len(good_matches)} < {self.min_inliers})"

        src_pts = np.float32([kp[m.queryIdx].pt for m in good_matches]).reshape(-1, 1, 2)
        dst_pts = np.float32([self.kp_map[m.trainIdx].pt for m in good_matches]).reshape(-1, 1, 2)

        H, mask = cv2.findHomography(src_pts, dst_pts, cv2.RANSAC, self.ransac_threshold)

        if H is None:
            return NO_MATCH, "Homography estimation failed"

        inliers = int(np.sum(mask))
        required_inliers = max(self.min_inliers, int(len(good_matches) * self.min_inlier_ratio))
        if inliers < required_inliers:
            return NO_MATCH, f"Not enough inliers ({inliers} < {required_inliers})"

        h, w = fragment.shape[:2]
        centre = np.float32([[[w / 2.0, h / 2.0]]])
        cx, cy = cv2.perspectiveTransform(centre, H)[0, 0]

        if not (np.isfinite(cx) and np.isfinite(cy)):
            return NO_MATCH, "Degenerate homography"

        return ImageCoordinate(float(cx), float(cy)), None
