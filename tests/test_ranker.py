"""Tests for the sample gate, skew gate, scoring and top-N cut."""

import math

import pytest

from trendminer.mining.entities import ComboStatistics, FeatureSubset
from trendminer.mining.policy import MiningPolicy
from trendminer.mining.ranker import pattern_score, rank_patterns


def _stats(subset, **combos):
    return {subset: {key: ComboStatistics(wins=w, total=t) for key, (w, t) in combos.items()}}


def test_score_formula():
    assert pattern_score(0.8, 30, 1) == pytest.approx(0.8 * math.log(30) * 0.1)
    # A losing lean scores like the mirrored winning lean
    assert pattern_score(0.2, 30, 3) == pytest.approx(pattern_score(0.8, 30, 3))


def test_sample_gate_small_subsets_need_30_games():
    subset = FeatureSubset(("a", "b", "c", "d"))
    trends = rank_patterns(_stats(subset, x=(29, 29), y=(24, 30)))
    assert [t.combo for t in trends] == ["y"]


def test_sample_gate_large_subsets_need_25_games():
    subset = FeatureSubset(("a", "b", "c", "d", "e"))
    trends = rank_patterns(_stats(subset, x=(24, 24), y=(20, 25)))
    assert [t.combo for t in trends] == ["y"]
    assert all(t.games >= 25 for t in trends)


@pytest.mark.parametrize(
    "wins,kept",
    [
        (33, True),  # 0.55 exactly
        (32, False),  # 0.533
        (30, False),  # 0.5
        (28, False),  # 0.467
        (27, True),  # 0.45 exactly
        (6, True),  # 0.1
    ],
)
def test_skew_gate(wins, kept):
    subset = FeatureSubset(("a",))
    trends = rank_patterns(_stats(subset, x=(wins, 60)))
    assert bool(trends) is kept
    for trend in trends:
        assert trend.win_pct >= 0.55 or trend.win_pct <= 0.45


def test_trend_fields():
    subset = FeatureSubset(("primary_era", "same_league"))
    (trend,) = rank_patterns(_stats(subset, **{"good|yes": (12, 40)}))
    assert trend.combo == "good|yes"
    assert trend.games == 40
    assert trend.win_pct == pytest.approx(0.3)
    assert trend.opponent_win_pct == pytest.approx(0.7)
    assert trend.features == ("primary_era", "same_league")
    assert trend.feature_count == 2
    assert trend.to_dict()["perspective"] == "primary"


def test_top_n_keeps_highest_scores_in_order():
    subset = FeatureSubset(("a", "b"))
    combos = {f"c{i}": (30 + i, 40 + i) for i in range(25)}
    stats = _stats(subset, **combos)
    trends = rank_patterns(stats)

    assert len(trends) == 15
    scores = [t.score for t in trends]
    assert scores == sorted(scores, reverse=True)

    every_score = sorted(
        (pattern_score(w / t, t, 2) for w, t in combos.values()), reverse=True
    )
    assert scores == pytest.approx(every_score[:15])


def test_more_features_win_ties_on_skew_and_sample():
    small = FeatureSubset(("a",))
    large = FeatureSubset(("a", "b", "c"))
    stats = {**_stats(small, x=(24, 30)), **_stats(large, y=(24, 30))}
    trends = rank_patterns(stats)
    assert [t.combo for t in trends] == ["y", "x"]


def test_equal_scores_keep_aggregation_order():
    subset = FeatureSubset(("a",))
    trends = rank_patterns(_stats(subset, first=(24, 30), second=(24, 30), third=(24, 30)))
    assert [t.combo for t in trends] == ["first", "second", "third"]


def test_no_qualifying_combos_is_empty_not_error():
    subset = FeatureSubset(("a",))
    assert rank_patterns(_stats(subset, x=(5, 10), y=(20, 40))) == []


def test_policy_overrides():
    subset = FeatureSubset(("a",))
    policy = MiningPolicy(min_games_default=5, top_n_patterns=1)
    trends = rank_patterns(_stats(subset, x=(5, 5), y=(0, 10)), policy)
    assert len(trends) == 1
    assert trends[0].combo == "y"  # ln(10) beats ln(5) at the same skew
