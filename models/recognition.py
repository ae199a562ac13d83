"""Data models for screenshot position recognition"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class ImageCoordinate:
    """Position in the reference map's pixel space"""
    x: float
    y: float

    def is_sentinel(self) -> bool:
        """(0, 0) is what the matcher returns when it finds nothing"""
        return self.x == 0 and self.y == 0


@dataclass(frozen=True)
class WorldCoordinate:
    """Position in the game's world coordinate system"""
    x: float
    y: float

    def format(self) -> str:
        """Render as 'x,y' with one decimal place, e.g. '123.4,-56.7'"""
        return f"{self.x:.1f},{self.y:.1f}"


class FailureReason(Enum):
    """Why a recognition attempt produced no position"""
    FILE_NOT_FOUND = 'file-not-found'
    UNREADABLE_IMAGE = 'unreadable-image'
    EMPTY_MAP_REGION = 'empty-map-region'
    NO_MATCH = 'no-match'
    OUT_OF_BOUNDS = 'out-of-bounds'
    INTERNAL_ERROR = 'internal-error'


@dataclass(frozen=True)
class Success:
    """Recognition produced a plausible world position"""
    coordinate: WorldCoordinate

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            'success': True,
            'x': self.coordinate.x,
            'y': self.coordinate.y,
            'text': self.coordinate.format()
        }


@dataclass(frozen=True)
class Failure:
    """
    Recognition failed at some stage.

    `coordinate` is only set for OUT_OF_BOUNDS, where the transform worked but
    the result fell outside the world extent.
    """
    reason: FailureReason
    coordinate: Optional[WorldCoordinate] = None
    detail: str = ''

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict:
        result = {
            'success': False,
            'reason': self.reason.value,
            'detail': self.detail
        }
        if self.coordinate is not None:
            result['x'] = self.coordinate.x
            result['y'] = self.coordinate.y
        return result


RecognitionOutcome = Union[Success, Failure]
