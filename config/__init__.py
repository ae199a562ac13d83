"""Configuration module for the screenshot map locator"""

from .settings import (
    PREPROCESSING,
    WORLD_BOUNDS,
    CALIBRATION,
    MATCHING,
    DEBUG
)

from .paths import (
    CACHE_PATHS
)

__all__ = [
    'PREPROCESSING',
    'WORLD_BOUNDS',
    'CALIBRATION',
    'MATCHING',
    'DEBUG',
    'CACHE_PATHS'
]
