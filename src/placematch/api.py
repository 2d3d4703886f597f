"""Process-wide matching API backed by a default matcher.

The default matcher is built when this module is imported, so resources are
loaded before any comparison can run. ``set_threshold`` and ``set_weights``
change the configuration seen by every caller of this module; code that
needs a stable configuration across a batch should take
``get_matcher().snapshot()`` first.
"""

from __future__ import annotations

from placematch.matcher import PlaceMatcher
from placematch.types import MatchResult

_matcher = PlaceMatcher()


def get_matcher() -> PlaceMatcher:
    return _matcher


def match(name1: str, name2: str) -> bool:
    """True when the two names score strictly above the threshold."""
    return _matcher.match(name1, name2)


def match_degree(name1: str, name2: str) -> float:
    return _matcher.match_degree(name1, name2)


def is_same_place(name1: str, name2: str) -> MatchResult:
    return _matcher.is_same_place(name1, name2)


def set_threshold(threshold: float) -> None:
    _matcher.set_threshold(threshold)


def set_weights(surface: float, token: float, phonetic: float = 0.0) -> None:
    _matcher.set_weights(surface, token, phonetic)
