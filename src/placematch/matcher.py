"""Main orchestration: normalization, scoring and decision for name pairs."""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

import structlog

from placematch.config import MatchConfig, validate_threshold, validate_weight
from placematch.normalize import ScriptConverter, normalize
from placematch.resources import ResourceStore
from placematch.scoring import PhoneticEncoder, Segmenter, score_pair
from placematch.types import MatchResult, NormalizedPlace

log = structlog.get_logger()


@dataclass
class MatcherStats:
    """Statistics collected by score_pairs."""

    pairs: int = 0
    matches: int = 0
    empty_inputs: int = 0
    length_skews: int = 0
    exact_matches: int = 0

    def record(self, result: MatchResult) -> None:
        self.pairs += 1
        if result.is_match:
            self.matches += 1
        if "empty_after_normalization" in result.reasons:
            self.empty_inputs += 1
        elif "length_skew" in result.reasons:
            self.length_skews += 1
        elif "exact_clean_match" in result.reasons:
            self.exact_matches += 1

    def merge(self, other: MatcherStats) -> None:
        self.pairs += other.pairs
        self.matches += other.matches
        self.empty_inputs += other.empty_inputs
        self.length_skews += other.length_skews
        self.exact_matches += other.exact_matches


class PlaceMatcher:
    """Decides whether two place names refer to the same place.

    Resources and collaborators are shared by reference and never mutated.
    The configuration is replaced wholesale by the setters, and every
    comparison reads it once, so a comparison never sees a half-applied
    update. Use ``with_config`` or ``snapshot`` to pin a configuration for
    a batch.
    """

    def __init__(
        self,
        resources: ResourceStore | None = None,
        config: MatchConfig | None = None,
        segmenter: Segmenter | None = None,
        converter: ScriptConverter | None = None,
        phonetic: PhoneticEncoder | None = None,
    ) -> None:
        if segmenter is None or converter is None or phonetic is None:
            from placematch.chinese import JiebaSegmenter, OpenCCConverter, PinyinEncoder

            segmenter = segmenter or JiebaSegmenter()
            converter = converter or OpenCCConverter()
            phonetic = phonetic or PinyinEncoder()

        self.resources = resources or ResourceStore.load()
        self.config = config or MatchConfig()
        self.segmenter = segmenter
        self.converter = converter
        self.phonetic = phonetic
        self.stats = MatcherStats()
        self._stats_lock = threading.Lock()

    def normalize(self, name: str) -> NormalizedPlace:
        return normalize(name, self.resources.stopwords, self.converter)

    def is_same_place(
        self, name1: str, name2: str, config: MatchConfig | None = None
    ) -> MatchResult:
        """Score a pair of raw names; ``config`` overrides the bound one for this call."""
        config = config or self.config
        a = self.normalize(name1)
        b = self.normalize(name2)
        result = score_pair(
            a, b, config, self.segmenter, self.phonetic, self.resources.idf_table
        )
        log.debug(
            "is_same_place",
            clean1=result.clean1,
            clean2=result.clean2,
            score=round(result.score, 4),
            is_match=result.is_match,
            reasons=result.reasons,
        )
        return result

    def match_degree(
        self, name1: str, name2: str, config: MatchConfig | None = None
    ) -> float:
        return self.is_same_place(name1, name2, config).score

    def match(self, name1: str, name2: str, config: MatchConfig | None = None) -> bool:
        return self.is_same_place(name1, name2, config).is_match

    def set_threshold(self, threshold: float) -> None:
        threshold = validate_threshold(threshold)
        config = self.config
        self.config = replace(config, thresholds=replace(config.thresholds, match=threshold))
        log.info("threshold_updated", threshold=threshold)

    def set_weights(self, surface: float, token: float, phonetic: float = 0.0) -> None:
        """Set one weight per signal; leaving out ``phonetic`` disables that signal."""
        scoring = replace(
            self.config.scoring,
            surface=validate_weight("surface", surface),
            token=validate_weight("token", token),
            phonetic=validate_weight("phonetic", phonetic),
        )
        self.config = replace(self.config, scoring=scoring)
        log.info(
            "weights_updated",
            surface=scoring.surface,
            token=scoring.token,
            phonetic=scoring.phonetic,
        )

    def with_config(self, config: MatchConfig) -> PlaceMatcher:
        """Return a matcher sharing this one's resources but bound to ``config``."""
        return PlaceMatcher(
            resources=self.resources,
            config=config,
            segmenter=self.segmenter,
            converter=self.converter,
            phonetic=self.phonetic,
        )

    def snapshot(self) -> PlaceMatcher:
        """Return a matcher pinned to a copy of the current configuration."""
        return self.with_config(copy.deepcopy(self.config))

    def score_pairs(self, pairs: Iterable[tuple[str, str]]) -> list[MatchResult]:
        """Score every pair with one configuration, collecting stats."""
        config = self.config
        batch = MatcherStats()
        results: list[MatchResult] = []
        for i, (name1, name2) in enumerate(pairs):
            result = self.is_same_place(name1, name2, config)
            results.append(result)
            batch.record(result)

            if (i + 1) % 1000 == 0:
                log.info("score_pairs_progress", processed=i + 1, matches=batch.matches)

        # Batches may run concurrently on one matcher
        with self._stats_lock:
            self.stats.merge(batch)
        return results
