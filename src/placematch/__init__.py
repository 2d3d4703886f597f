"""placematch - Place name matching system."""

from placematch.config import MatchConfig
from placematch.matcher import MatcherStats, PlaceMatcher
from placematch.resources import ResourceStore
from placematch.types import MatchResult, NormalizedPlace

__all__ = [
    "MatchConfig",
    "MatcherStats",
    "MatchResult",
    "NormalizedPlace",
    "PlaceMatcher",
    "ResourceStore",
]
