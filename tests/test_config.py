"""Tests for configuration validation."""

import pytest

from placematch.config import MatchConfig, ScoringWeights, TfIdfConfig, Thresholds


def test_defaults():
    config = MatchConfig()
    assert config.scoring.total == pytest.approx(1.0)
    assert config.thresholds.match == 0.85
    assert config.thresholds.length_skew == 8
    assert config.tfidf.total_docs == 10000


@pytest.mark.parametrize("match", [7, -0.1, 1.01, float("nan")])
def test_threshold_out_of_range_rejected(match):
    with pytest.raises(ValueError):
        Thresholds(match=match)


@pytest.mark.parametrize("length_skew", [-1, 2.5, True])
def test_invalid_length_skew_rejected(length_skew):
    with pytest.raises(ValueError):
        Thresholds(length_skew=length_skew)


@pytest.mark.parametrize(
    "kwargs",
    [{"surface": -5}, {"token": float("inf")}, {"phonetic": float("nan")}],
)
def test_invalid_weights_rejected(kwargs):
    with pytest.raises(ValueError):
        ScoringWeights(**kwargs)


def test_boundary_values_accepted():
    assert Thresholds(match=0.0, length_skew=0).match == 0.0
    assert Thresholds(match=1).match == 1.0
    assert ScoringWeights(surface=0, token=0, phonetic=0).total == 0.0


def test_invalid_tfidf_rejected():
    with pytest.raises(ValueError):
        TfIdfConfig(total_docs=0)
    with pytest.raises(ValueError):
        TfIdfConfig(default_idf=-1.0)


def test_config_override_cannot_carry_invalid_threshold(matcher):
    with pytest.raises(ValueError):
        matcher.match("abcd", "abce", MatchConfig(thresholds=Thresholds(match=7)))
