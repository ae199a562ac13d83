"""
Screenshot recognition pipeline.

preprocess -> match -> transform -> validate, stopping at the first failure.
Every call is independent; the pipeline keeps no state between calls.
"""

import os
import cv2
import numpy as np
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from config import WORLD_BOUNDS, settings
from core.image_preprocessing import PREPROCESSOR, MapPreprocessor
from core.map.coordinate_transform import CoordinateTransform
from core.map.coordinate_validator import is_valid_coordinate
from core.matching.matcher_adapter import MatcherAdapter
from models.recognition import (
    Failure, FailureReason, RecognitionOutcome, Success
)


class RecognitionPipeline:
    """
    Locates the player on the world map from a map screenshot.

    Responsibilities:
    - Decode screenshot files
    - Normalize the screenshot into a grayscale map fragment
    - Locate the fragment on the reference map
    - Convert the match into world coordinates and sanity-check them
    """

    def __init__(self, matcher, transform: CoordinateTransform = None,
                 preprocessor: MapPreprocessor = None,
                 bound: float = WORLD_BOUNDS.LIMIT):
        """
        Initialize pipeline.

        Args:
            matcher: BigMapMatcher (match_position(fragment) -> ImageCoordinate)
            transform: Image-to-world transform (default calibration if None)
            preprocessor: Screenshot preprocessor (shared PREPROCESSOR if None)
            bound: World coordinate limit used for validation
        """
        self.adapter = MatcherAdapter(matcher)
        self.transform = transform or CoordinateTransform()
        self.preprocessor = preprocessor or PREPROCESSOR
        self.bound = bound

    def recognize(self, source: Union[str, bytes, os.PathLike, np.ndarray, None]) -> RecognitionOutcome:
        """Recognize from a file path or an already-decoded image"""
        if source is None or isinstance(source, (str, bytes, os.PathLike)):
            return self.recognize_file(source)
        return self.recognize_image(source)

    def recognize_file(self, path: Union[str, bytes, os.PathLike, None]) -> RecognitionOutcome:
        """
        Recognize position from a screenshot file.

        Args:
            path: Screenshot file path

        Returns:
            Success or Failure (FILE_NOT_FOUND, UNREADABLE_IMAGE, or any
            failure from recognize_image)
        """
        if not path or not Path(os.fsdecode(path)).is_file():
            print(f"[RecognitionPipeline] Screenshot file not found: {path!r}")
            return Failure(FailureReason.FILE_NOT_FOUND, detail=f"No such file: {path!r}")

        try:
            screenshot = cv2.imread(os.fsdecode(path), cv2.IMREAD_COLOR)
        except cv2.error as e:
            print(f"[RecognitionPipeline] Could not decode {path}: {e}")
            return Failure(FailureReason.UNREADABLE_IMAGE, detail=str(e))

        if screenshot is None or screenshot.size == 0:
            print(f"[RecognitionPipeline] Could not decode {path}")
            return Failure(FailureReason.UNREADABLE_IMAGE, detail=f"Not a readable image: {path}")

        if settings.DEBUG:
            print(f"[RecognitionPipeline] Loaded {path}: {screenshot.shape}")

        return self.recognize_image(screenshot)

    def recognize_image(self, raw: np.ndarray) -> RecognitionOutcome:
        """
        Recognize position from a decoded screenshot.

        Args:
            raw: Screenshot (grayscale, BGR or BGRA). Not modified.

        Returns:
            Success(WorldCoordinate), or Failure with EMPTY_MAP_REGION,
            NO_MATCH, OUT_OF_BOUNDS (coordinate attached) or INTERNAL_ERROR
        """
        if raw is None or getattr(raw, 'size', 0) == 0:
            print("[RecognitionPipeline] Screenshot is empty")
            return Failure(FailureReason.EMPTY_MAP_REGION, detail="Screenshot has no pixels")

        try:
            fragment = self.preprocessor.prepare(raw)
        except cv2.error as e:
            print(f"[RecognitionPipeline] Preprocessing error: {e}")
            return Failure(FailureReason.INTERNAL_ERROR, detail=f"Preprocessing error: {e}")

        if isinstance(fragment, Failure):
            print(f"[RecognitionPipeline] Could not extract map region: {fragment.detail}")
            return fragment

        position = self.adapter.locate(fragment)
        if isinstance(position, Failure):
            return position
        if position is None:
            print("[RecognitionPipeline] Map matching failed, no position found")
            return Failure(FailureReason.NO_MATCH, detail="Fragment not found on reference map")

        world = self.transform.to_world(position)

        if not is_valid_coordinate(world, self.bound):
            print(f"[RecognitionPipeline] Position ({world.x:.1f}, {world.y:.1f}) "
                  f"outside world bounds +/-{self.bound:g}")
            return Failure(FailureReason.OUT_OF_BOUNDS, coordinate=world,
                           detail=f"Outside +/-{self.bound:g}")

        if settings.DEBUG:
            print(f"[RecognitionPipeline] Image ({position.x:.1f}, {position.y:.1f}) "
                  f"-> world ({world.x:.1f}, {world.y:.1f})")

        return Success(world)

    def recognize_many(self, paths: Iterable[Union[str, bytes, os.PathLike]]) -> List[Tuple[str, RecognitionOutcome]]:
        """Recognize each file in turn; one outcome per path, in order"""
        return [(os.fsdecode(path), self.recognize_file(path)) for path in paths]
