"""Place name normalization pipeline."""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Protocol

import structlog

from placematch.resources import StopwordSet
from placematch.types import NormalizedPlace

log = structlog.get_logger()

# Symbols used as separators in place names that Unicode does not class as punctuation
EXTRA_PUNCTUATION = frozenset("$^+=¥￥")

_LATIN = re.compile(r"[A-Za-z]")


class ScriptConverter(Protocol):
    """Protocol for script canonicalizers (e.g. traditional -> simplified)."""

    def to_canonical(self, text: str) -> str: ...


def remove_punctuation(text: str) -> str:
    """Drop Unicode punctuation (categories P*) and the extra separator symbols."""
    return "".join(
        ch
        for ch in text
        if ch not in EXTRA_PUNCTUATION and not unicodedata.category(ch).startswith("P")
    )


@lru_cache(maxsize=1024)
def _word_pattern(stopword: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(stopword) + r"\b", re.IGNORECASE)


def strip_stopwords(text: str, stopwords: StopwordSet) -> tuple[str, list[str]]:
    """Remove stopwords longest first.

    Stopwords containing a Latin letter are removed as whole words only;
    anything else (Han text has no word boundaries) is removed wherever it
    occurs.

    Returns:
        Tuple of (remaining_text, removed_stopwords).
    """
    removed: list[str] = []
    for word in stopwords:
        if _LATIN.search(word):
            text, count = _word_pattern(word).subn("", text)
        else:
            count = text.count(word)
            if count:
                text = text.replace(word, "")
        if count:
            removed.append(word)
    return text, removed


def canonicalize(text: str, converter: ScriptConverter | None) -> str:
    if converter is None:
        return text
    try:
        return converter.to_canonical(text)
    except Exception:
        log.warning("script_conversion_failed", text=text, exc_info=True)
        return text


def normalize(
    name: str,
    stopwords: StopwordSet,
    converter: ScriptConverter | None = None,
) -> NormalizedPlace:
    """Normalize a raw place name into its clean comparison string.

    The clean string may be empty when the name was nothing but stopwords
    and punctuation.
    """
    canonical = canonicalize(name, converter)
    text, removed = strip_stopwords(canonical, stopwords)
    clean = remove_punctuation(text).strip()

    return NormalizedPlace(
        original=name,
        canonical_text=canonical,
        clean=clean,
        removed_stopwords=removed,
    )
