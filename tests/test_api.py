"""Tests for the process-wide API and the default collaborators."""

import pytest

from placematch import api


@pytest.fixture(autouse=True)
def restore_default_config():
    matcher = api.get_matcher()
    saved = matcher.config
    yield
    matcher.config = saved


def test_identity():
    assert api.match_degree("杭州西湖", "杭州西湖") == 1.0


def test_symmetry():
    a, b = "北京市朝阳区", "北京朝阳"
    assert api.match_degree(a, b) == api.match_degree(b, a)


def test_degenerate_inputs():
    assert api.match_degree("", "anything") == 0.0
    assert api.match_degree("国家重点风景名胜区", "") == 0.0


def test_stopword_invariance():
    assert api.match_degree("西湖风景名胜区", "西湖") == 1.0
    assert api.match("西湖风景名胜区", "西湖") is True


def test_punctuation_invariance():
    assert api.match_degree("北京市，朝阳区！", "北京市朝阳区") == 1.0


def test_traditional_and_simplified_agree():
    assert api.match("東湖風景名勝區", "东湖") is True


def test_english_stopwords():
    result = api.is_same_place("Jiuzhaigou Scenic Area", "Jiuzhaigou")
    assert result.score == 1.0


def test_score_bounded():
    score = api.match_degree("上海浦东新区", "浦东新区")
    assert 0.0 <= score <= api.get_matcher().config.scoring.total


def test_threshold_setter_affects_match():
    score = api.match_degree("北京朝阳区", "北京朝阳")
    assert 0.0 < score < 1.0

    api.set_threshold(0.0)
    assert api.match("北京朝阳区", "北京朝阳") is True
    api.set_threshold(1.0)
    assert api.match("北京朝阳区", "北京朝阳") is False


def test_weights_setter_affects_degree():
    before = api.match_degree("北京朝阳区", "北京朝阳")
    api.set_weights(1.0, 0.0, 0.0)
    surface_only = api.match_degree("北京朝阳区", "北京朝阳")
    assert surface_only != before
    assert api.get_matcher().config.scoring.total == 1.0
