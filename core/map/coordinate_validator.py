"""Plausibility check for recognized world coordinates"""

import math
from config import WORLD_BOUNDS
from models.recognition import WorldCoordinate


def is_valid_coordinate(coord: WorldCoordinate, bound: float = WORLD_BOUNDS.LIMIT) -> bool:
    """True if both axes lie within [-bound, bound] inclusive"""
    if not (math.isfinite(coord.x) and math.isfinite(coord.y)):
        return False
    return -bound <= coord.x <= bound and -bound <= coord.y <= bound
