"""Core functionality module"""

from .map.coordinate_transform import CoordinateTransform, MapCalibration
from .map.coordinate_validator import is_valid_coordinate
from .map.map_loader import MapLoader
from .image_preprocessing import MapPreprocessor, PREPROCESSOR
from .matching.matcher_adapter import MatcherAdapter
from .recognition_pipeline import RecognitionPipeline

__all__ = ['CoordinateTransform', 'MapCalibration', 'is_valid_coordinate', 'MapLoader',
           'MapPreprocessor', 'PREPROCESSOR',
           'MatcherAdapter', 'RecognitionPipeline']
