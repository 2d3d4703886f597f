"""Similarity signals for clean place names and their weighted combination."""

from __future__ import annotations

import math
from collections import Counter
from typing import Protocol

import numpy as np
import structlog
from rapidfuzz.distance import JaroWinkler

from placematch.config import MatchConfig, TfIdfConfig
from placematch.resources import IDFTable
from placematch.types import MatchResult, NormalizedPlace

log = structlog.get_logger()

PREFIX_WEIGHT = 0.1  # Jaro-Winkler prefix scale; rapidfuzz caps the prefix at 4


class Segmenter(Protocol):
    """Protocol for word segmenters (e.g. jieba)."""

    def segment(self, text: str) -> list[str]: ...


class PhoneticEncoder(Protocol):
    """Protocol for phonetic renderers (e.g. pinyin)."""

    def to_phonetic(self, text: str) -> str: ...


def surface_score(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1]; 0 when either side is empty."""
    if not a or not b:
        return 0.0
    # Fixed argument order keeps the score symmetric
    if b < a:
        a, b = b, a
    return float(JaroWinkler.similarity(a, b, prefix_weight=PREFIX_WEIGHT))


def _segment(text: str, segmenter: Segmenter) -> list[str]:
    try:
        tokens = segmenter.segment(text)
    except Exception:
        log.warning("segmentation_failed", text=text, exc_info=True)
        return []
    return [t for t in tokens if t and t.strip()]


def term_frequencies(tokens: list[str]) -> Counter[str]:
    counts = Counter(tokens)
    return Counter({t: c for t, c in counts.items() if c >= 1})


def token_score(
    a: str,
    b: str,
    segmenter: Segmenter,
    idf_table: IDFTable,
    tfidf: TfIdfConfig | None = None,
) -> float:
    """TF-IDF weighted cosine similarity between the token vectors of a and b.

    Term frequency is dampened as log(1 + count). A token's weight is
    log(total_docs / (1 + table_value)), with default_idf standing in for
    tokens missing from the table.
    """
    tfidf = tfidf or TfIdfConfig()
    tf_a = term_frequencies(_segment(a, segmenter))
    tf_b = term_frequencies(_segment(b, segmenter))
    if not tf_a or not tf_b:
        return 0.0

    vocab = sorted(tf_a.keys() | tf_b.keys())
    idf = np.array(
        [
            math.log(tfidf.total_docs / (1.0 + idf_table.get(token, tfidf.default_idf)))
            for token in vocab
        ]
    )
    vec_a = np.log1p(np.array([tf_a[t] for t in vocab], dtype=float)) * idf
    vec_b = np.log1p(np.array([tf_b[t] for t in vocab], dtype=float)) * idf

    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0 or norm_b == 0:
        return 0.0

    cosine = float(np.dot(vec_a, vec_b)) / (norm_a * norm_b)
    return min(1.0, max(0.0, cosine))


def _render(text: str, encoder: PhoneticEncoder) -> str:
    try:
        return encoder.to_phonetic(text)
    except Exception:
        log.warning("phonetic_conversion_failed", text=text, exc_info=True)
        return text


def phonetic_score(a: str, b: str, encoder: PhoneticEncoder) -> float:
    """Surface similarity of the phonetic renderings of a and b."""
    return surface_score(_render(a, encoder), _render(b, encoder))


def score_pair(
    a: NormalizedPlace,
    b: NormalizedPlace,
    config: MatchConfig,
    segmenter: Segmenter,
    encoder: PhoneticEncoder,
    idf_table: IDFTable,
) -> MatchResult:
    """Score a pair of normalized names.

    Short-circuits, in order: an empty clean name scores 0, a length
    difference above the skew threshold scores 0, identical clean names
    score 1 and always match. Otherwise the score is the weighted sum of the
    surface, token and phonetic signals and matches when it is strictly
    above the threshold.
    """
    weights = config.scoring
    features: dict[str, float] = {}
    reasons: list[str] = []

    def _result(score: float, is_match: bool) -> MatchResult:
        return MatchResult(
            name1=a.original,
            name2=b.original,
            clean1=a.clean,
            clean2=b.clean,
            score=score,
            is_match=is_match,
            reasons=reasons,
            features=features,
        )

    if not a.clean or not b.clean:
        reasons.append("empty_after_normalization")
        return _result(0.0, False)

    skew = abs(len(a.clean) - len(b.clean))
    features["length_skew"] = float(skew)
    if skew > config.thresholds.length_skew:
        reasons.append("length_skew")
        return _result(0.0, False)

    if a.clean == b.clean:
        reasons.append("exact_clean_match")
        return _result(1.0, True)

    surface = surface_score(a.clean, b.clean)
    token = token_score(a.clean, b.clean, segmenter, idf_table, config.tfidf)
    phonetic = phonetic_score(a.clean, b.clean, encoder) if weights.phonetic > 0 else 0.0
    features["surface"] = surface
    features["token"] = token
    features["phonetic"] = phonetic

    if surface >= 0.9:
        reasons.append("surface_high")
    if token >= 0.8:
        reasons.append("token_overlap_high")
    if phonetic >= 0.9:
        reasons.append("phonetic_high")

    total = weights.surface * surface + weights.token * token + weights.phonetic * phonetic
    features["final_score"] = total

    return _result(total, total > config.thresholds.match)
