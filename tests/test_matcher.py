"""Tests for matching today's games against retained patterns."""

from conftest import today_row

from trendminer.mining.entities import TrendMatch
from trendminer.mining.matcher import group_today_rows, match_today_games


def _trend(combo, features, win_pct=0.8, games=30):
    return TrendMatch(
        combo=combo,
        games=games,
        win_pct=win_pct,
        opponent_win_pct=1 - win_pct,
        features=tuple(features),
    )


def test_matching_game_produces_match_with_trend_details():
    trend = _trend("good", ["primary_era"])
    (match,) = match_today_games([today_row("g1", primary_era=3.1)], [trend])

    assert match.to_dict() == {
        "unique_id": "g1",
        "primary_team": "NYY",
        "opponent_team": "BOS",
        "is_home_team": True,
        "combo": "good",
        "win_pct": 0.8,
        "opponent_win_pct": trend.opponent_win_pct,
        "games": 30,
        "feature_count": 1,
        "features": ["primary_era"],
        "perspective": "primary",
    }


def test_poor_era_never_matches_good_pattern():
    trend = _trend("good", ["primary_era"])
    assert match_today_games([today_row("g1", primary_era=5.0)], [trend]) == []


def test_each_pattern_uses_its_own_feature_subset():
    trends = [
        _trend("good|hot", ["primary_era", "primary_streak"]),
        _trend("yes", ["same_league"]),
    ]
    rows = [today_row("g1", primary_era=3.0, primary_streak=5, same_league=0)]
    matches = match_today_games(rows, trends)
    assert [m.combo for m in matches] == ["good|hot"]


def test_one_game_can_match_several_patterns():
    trends = [_trend("good", ["primary_era"]), _trend("hot", ["primary_streak"])]
    rows = [today_row("g1", primary_era=3.0, primary_streak=5)]
    assert [m.combo for m in match_today_games(rows, trends)] == ["good", "hot"]


def test_duplicate_rows_of_a_game_match_once():
    trend = _trend("good", ["primary_era"])
    rows = [
        today_row("g1", primary_era=3.0),
        today_row("g1", primary_era=3.3),
        today_row("g2", primary_era=2.0),
    ]
    matches = match_today_games(rows, [trend])
    assert [(m.unique_id, m.combo) for m in matches] == [("g1", "good"), ("g2", "good")]


def test_same_combo_from_different_patterns_is_emitted_once_per_game():
    trends = [_trend("good", ["primary_era"]), _trend("good", ["primary_ops"], win_pct=0.3)]
    rows = [today_row("g1", primary_era=3.0, primary_ops=0.9)]
    matches = match_today_games(rows, trends)
    assert len(matches) == 1
    assert matches[0].trend.features == ("primary_era",)


def test_later_variant_can_match_when_first_does_not():
    trend = _trend("good", ["primary_era"])
    rows = [
        today_row("g1", primary_team="BOS", opponent_team="NYY", primary_era=5.0),
        today_row("g1", primary_team="NYY", opponent_team="BOS", primary_era=3.0),
    ]
    (match,) = match_today_games(rows, [trend])
    assert match.primary_team == "NYY"


def test_no_combo_repeats_within_a_game():
    trends = [
        _trend("good", ["primary_era"]),
        _trend("good", ["opponent_era"]),
        _trend("hot", ["primary_streak"]),
    ]
    rows = [today_row("g1", primary_era=3.0, opponent_era=2.5, primary_streak=4)] * 3
    combos = [m.combo for m in match_today_games(rows, trends)]
    assert len(combos) == len(set(combos))


def test_missing_identifiers_fall_back_to_placeholders():
    trend = _trend("good", ["primary_era"])
    rows = [{"primary_era": 3.0, "primary_team": None}]
    (match,) = match_today_games(rows, [trend])
    assert match.unique_id == "unknown"
    assert match.primary_team == "Unknown"
    assert match.opponent_team == "Unknown"
    assert match.is_home_team is False


def test_group_today_rows_keeps_feed_order():
    rows = [today_row("b"), today_row("a"), today_row("b"), {}]
    groups = group_today_rows(rows)
    assert [game_id for game_id, _ in groups] == ["b", "a"]
    assert len(groups[0][1]) == 2


def test_rows_without_ids_are_separate_games():
    rows = [
        {"primary_era": 3.0, "primary_team": "NYY", "opponent_team": "BOS"},
        {"primary_era": 3.1, "primary_team": "LAD", "opponent_team": "SFG"},
    ]
    groups = group_today_rows(rows)
    assert [game_id for game_id, _ in groups] == ["unknown", "unknown"]

    matches = match_today_games(rows, [_trend("good", ["primary_era"])])
    assert [(m.unique_id, m.primary_team) for m in matches] == [("unknown", "NYY"), ("unknown", "LAD")]


def test_no_trends_no_matches():
    assert match_today_games([today_row("g1", primary_era=3.0)], []) == []
