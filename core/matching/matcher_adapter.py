"""
Matcher adaptation: turns the big-map matcher's (0, 0) convention into an
explicit "no match" and its exceptions into a tagged failure.
"""

import math
import numpy as np
from typing import Optional, Union

from models.recognition import Failure, FailureReason, ImageCoordinate


class MatcherAdapter:
    """
    Wraps a BigMapMatcher.

    Thread safety: holds no mutable state of its own; the wrapped matcher is
    responsible for its own synchronization.
    """

    def __init__(self, matcher):
        """
        Initialize adapter.

        Args:
            matcher: Object with match_position(fragment) -> ImageCoordinate
        """
        self.matcher = matcher

    def locate(self, fragment: np.ndarray) -> Union[ImageCoordinate, None, Failure]:
        """
        Locate fragment on the reference map.

        Returns:
            - ImageCoordinate for a real match
            - None if the matcher reported (0, 0)
            - Failure(INTERNAL_ERROR) if the matcher raised or returned garbage
        """
        try:
            position = self.matcher.match_position(fragment)
        except Exception as e:
            print(f"[MatcherAdapter] Matcher exception: {e}")
            return Failure(FailureReason.INTERNAL_ERROR, detail=f"Matcher error: {e}")

        try:
            x, y = float(position.x), float(position.y)
        except (AttributeError, TypeError, ValueError):
            try:
                x, y = (float(v) for v in position)
            except (TypeError, ValueError):
                return Failure(FailureReason.INTERNAL_ERROR,
                               detail=f"Matcher returned unusable position: {position!r}")

        if not (math.isfinite(x) and math.isfinite(y)):
            return Failure(FailureReason.INTERNAL_ERROR,
                           detail=f"Matcher returned non-finite position: ({x}, {y})")

        coordinate = ImageCoordinate(x, y)
        if coordinate.is_sentinel():
            return None

        return coordinate
