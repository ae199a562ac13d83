"""Big-map matching module"""

from .big_map_matcher import BigMapMatcher, FeatureMapMatcher, NO_MATCH

__all__ = ['BigMapMatcher', 'FeatureMapMatcher', 'NO_MATCH']
