"""Shared fixtures: deterministic stand-ins for the segmenter, converter and encoder."""

import pytest

from placematch.matcher import PlaceMatcher
from placematch.resources import ResourceStore


class CharSegmenter:
    """Segmenter treating every character as a token."""

    def segment(self, text: str) -> list[str]:
        return list(text)


class MappingConverter:
    """ScriptConverter replacing characters from a fixed table."""

    def __init__(self, table: dict[str, str] | None = None):
        self.table = table or {}

    def to_canonical(self, text: str) -> str:
        return "".join(self.table.get(ch, ch) for ch in text)


class LowerEncoder:
    """PhoneticEncoder that records its inputs and lowercases them."""

    def __init__(self):
        self.calls: list[str] = []

    def to_phonetic(self, text: str) -> str:
        self.calls.append(text)
        return text.lower()


class BrokenCollaborator:
    """Raises from every capability method."""

    def segment(self, text: str) -> list[str]:
        raise RuntimeError("segmenter down")

    def to_canonical(self, text: str) -> str:
        raise RuntimeError("converter down")

    def to_phonetic(self, text: str) -> str:
        raise RuntimeError("encoder down")


STOPWORDS = ["国家重点", "风景名胜区", "景区", "路", "街", "大道", "Scenic Area"]


@pytest.fixture
def resources() -> ResourceStore:
    return ResourceStore.from_values(STOPWORDS, {})


@pytest.fixture
def encoder() -> LowerEncoder:
    return LowerEncoder()


@pytest.fixture
def matcher(resources: ResourceStore, encoder: LowerEncoder) -> PlaceMatcher:
    return PlaceMatcher(
        resources=resources,
        segmenter=CharSegmenter(),
        converter=MappingConverter({"東": "东"}),
        phonetic=encoder,
    )
