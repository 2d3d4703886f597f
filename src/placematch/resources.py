"""Stopword and IDF resources, loaded once and shared read-only."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Generic, TypeVar

import structlog

log = structlog.get_logger()

DEFAULT_DATA_DIR = Path(__file__).parent / "data"
STOPWORDS_FILE = "stopwords.txt"
IDF_FILE = "idf_map.txt"

# Used when stopwords.txt cannot be read
FALLBACK_STOPWORDS = ("国家重点", "风景名胜区", "景区", "路", "街", "大道")

T = TypeVar("T")


@dataclass(frozen=True)
class StopwordSet:
    """Stopwords ordered longest first, so longer phrases are removed before
    any shorter stopword they contain."""

    words: tuple[str, ...] = ()

    @classmethod
    def from_words(cls, words: Iterable[str]) -> StopwordSet:
        unique = {w.strip() for w in words if w.strip()}
        return cls(tuple(sorted(unique, key=lambda w: (-len(w), w))))

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self.words


@dataclass(frozen=True, eq=False)
class IDFTable:
    weights: Mapping[str, float]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, float]) -> IDFTable:
        return cls(MappingProxyType(dict(mapping)))

    @classmethod
    def empty(cls) -> IDFTable:
        return cls.from_mapping({})

    def get(self, token: str, default: float) -> float:
        return self.weights.get(token, default)

    def __len__(self) -> int:
        return len(self.weights)

    def __contains__(self, token: object) -> bool:
        return token in self.weights


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of loading one resource file.

    ``fallback`` is set when the file could not be used at all and ``value``
    holds the built-in default instead. ``warnings`` are event names for the
    initializer to log.
    """

    value: T
    fallback: bool = False
    warnings: tuple[str, ...] = ()
    skipped: int = 0


def load_stopwords(path: Path) -> LoadResult[StopwordSet]:
    """Load stopwords.txt (one stopword per line)."""
    if not path.exists():
        return LoadResult(
            StopwordSet.from_words(FALLBACK_STOPWORDS),
            fallback=True,
            warnings=("stopwords_missing",),
        )
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return LoadResult(
            StopwordSet.from_words(FALLBACK_STOPWORDS),
            fallback=True,
            warnings=("stopwords_unreadable",),
        )
    return LoadResult(StopwordSet.from_words(text.splitlines()))


def parse_idf_lines(lines: Iterable[str]) -> tuple[dict[str, float], int]:
    """Parse ``token=idf`` lines.

    Returns the parsed mapping and the number of malformed lines skipped.
    Blank lines are ignored without counting.
    """
    weights: dict[str, float] = {}
    skipped = 0
    for line in lines:
        if not line.strip():
            continue
        token, sep, value = line.partition("=")
        token = token.strip()
        if not sep or not token:
            skipped += 1
            continue
        try:
            idf = float(value.strip())
        except ValueError:
            skipped += 1
            continue
        if not math.isfinite(idf) or idf < 0:
            skipped += 1
            continue
        weights[token] = idf
    return weights, skipped


def load_idf_table(path: Path) -> LoadResult[IDFTable]:
    """Load idf_map.txt; a missing file yields an empty table."""
    if not path.exists():
        return LoadResult(IDFTable.empty(), fallback=True, warnings=("idf_table_missing",))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return LoadResult(IDFTable.empty(), fallback=True, warnings=("idf_table_unreadable",))

    weights, skipped = parse_idf_lines(text.splitlines())
    warnings = ("idf_lines_skipped",) if skipped else ()
    return LoadResult(IDFTable.from_mapping(weights), warnings=warnings, skipped=skipped)


def resolve_data_dir(data_dir: str | Path | None = None) -> Path:
    if data_dir is not None:
        return Path(data_dir)
    env = os.environ.get("PLACEMATCH_DATA")
    return Path(env) if env else DEFAULT_DATA_DIR


@dataclass(frozen=True)
class ResourceStore:
    """Stopwords and IDF table shared by every matcher built from it."""

    stopwords: StopwordSet
    idf_table: IDFTable

    @classmethod
    def load(cls, data_dir: str | Path | None = None) -> ResourceStore:
        base = resolve_data_dir(data_dir)
        stopwords = load_stopwords(base / STOPWORDS_FILE)
        idf_table = load_idf_table(base / IDF_FILE)

        for result, filename in ((stopwords, STOPWORDS_FILE), (idf_table, IDF_FILE)):
            for warning in result.warnings:
                log.warning(
                    warning,
                    path=str(base / filename),
                    fallback=result.fallback,
                    skipped=result.skipped or None,
                )

        log.debug(
            "resources_loaded",
            data_dir=str(base),
            stopwords=len(stopwords.value),
            idf_tokens=len(idf_table.value),
        )
        return cls(stopwords=stopwords.value, idf_table=idf_table.value)

    @classmethod
    def from_values(
        cls,
        stopwords: Iterable[str] = (),
        idf: Mapping[str, float] | None = None,
    ) -> ResourceStore:
        return cls(
            stopwords=StopwordSet.from_words(stopwords),
            idf_table=IDFTable.from_mapping(idf or {}),
        )
