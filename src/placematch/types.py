"""Core types for the placematch place name matching system."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class NormalizedPlace:
    original: str
    canonical_text: str
    clean: str
    removed_stopwords: list[str] = field(default_factory=list)


@dataclass
class MatchResult:
    name1: str
    name2: str
    clean1: str
    clean2: str
    score: float
    is_match: bool
    reasons: list[str] = field(default_factory=list)
    features: dict[str, float] = field(default_factory=dict)
