"""Configuration for the placematch place name matching system."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


def validate_threshold(threshold: float) -> float:
    threshold = float(threshold)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")
    return threshold


def validate_weight(name: str, weight: float) -> float:
    weight = float(weight)
    if not math.isfinite(weight) or weight < 0.0:
        raise ValueError(f"{name} weight must be a finite non-negative number, got {weight}")
    return weight


@dataclass
class ScoringWeights:
    surface: float = 0.35  # Jaro-Winkler on clean names
    token: float = 0.30  # TF-IDF cosine on segmented tokens
    phonetic: float = 0.35  # Jaro-Winkler on pinyin renderings

    def __post_init__(self) -> None:
        self.surface = validate_weight("surface", self.surface)
        self.token = validate_weight("token", self.token)
        self.phonetic = validate_weight("phonetic", self.phonetic)

    @property
    def total(self) -> float:
        return self.surface + self.token + self.phonetic


@dataclass
class Thresholds:
    match: float = 0.85
    length_skew: int = 8  # max character length difference between clean names

    def __post_init__(self) -> None:
        self.match = validate_threshold(self.match)
        if isinstance(self.length_skew, bool) or not isinstance(self.length_skew, int):
            raise ValueError(f"length_skew must be an integer, got {self.length_skew!r}")
        if self.length_skew < 0:
            raise ValueError(f"length_skew must be non-negative, got {self.length_skew}")


@dataclass
class TfIdfConfig:
    total_docs: int = 10000  # size of the corpus the IDF table was trained on
    default_idf: float = 1.0  # table value assumed for unseen tokens

    def __post_init__(self) -> None:
        if self.total_docs <= 0:
            raise ValueError(f"total_docs must be positive, got {self.total_docs}")
        if not math.isfinite(self.default_idf) or self.default_idf < 0:
            raise ValueError(f"default_idf must be non-negative, got {self.default_idf}")


@dataclass
class MatchConfig:
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: Thresholds = field(default_factory=Thresholds)
    tfidf: TfIdfConfig = field(default_factory=TfIdfConfig)
