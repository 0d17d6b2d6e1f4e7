"""Tests for the feature value discretizer."""

import math

import pytest

from trendminer.mining.discretizer import bin_value, combo_key


@pytest.mark.parametrize(
    "feature,value,expected",
    [
        # ERA - lower is better
        ("primary_era", 3.49, "good"),
        ("primary_era", 3.5, "average"),
        ("primary_era", 4.49, "average"),
        ("opponent_era", 4.5, "poor"),
        # WHIP has its own thresholds
        ("primary_whip", 1.19, "good"),
        ("primary_whip", 1.2, "average"),
        ("primary_whip", 1.4, "poor"),
        # Win percentage - higher is better
        ("primary_win_pct", 0.44, "poor"),
        ("primary_win_pct", 0.45, "average"),
        ("primary_win_pct", 0.55, "good"),
        # OPS
        ("primary_ops", 0.699, "poor"),
        ("primary_ops", 0.7, "average"),
        ("primary_ops", 0.8, "good"),
        # Streaks
        ("primary_streak", -3, "cold"),
        ("primary_streak", -2, "neutral"),
        ("primary_streak", 2, "neutral"),
        ("primary_streak", 3, "hot"),
        # Runs in recent games
        ("primary_last_runs", 2, "low"),
        ("primary_last_runs", 3, "medium"),
        ("primary_last_runs", 6, "medium"),
        ("primary_last_runs", 7, "high"),
        # Run line
        ("primary_rl", -1.5, "favorite"),
        ("primary_rl", 0, "underdog"),
        ("primary_rl", 1.5, "underdog"),
        # Over/under line
        ("o_u_line", 8.0, "low"),
        ("o_u_line", 8.5, "medium"),
        ("o_u_line", 9.5, "medium"),
        ("o_u_line", 10.0, "high"),
        # Betting volume as a 0-1 share
        ("primary_handle", 0, "minimal"),
        ("primary_handle", -0.1, "minimal"),
        ("primary_handle", 0.29, "low"),
        ("primary_bets", 0.3, "medium"),
        ("primary_bets", 0.6, "high"),
        # Flags
        ("same_division", True, "yes"),
        ("same_league", 0, "no"),
        ("primary_handedness", 1, "yes"),
        ("primary_last_win", False, "no"),
        # Last-3 form
        ("primary_last_3", 0.2, "poor"),
        ("primary_last_3", 0.5, "average"),
        ("primary_last_3", 0.7, "good"),
    ],
)
def test_bin_rules(feature, value, expected):
    assert bin_value(feature, value) == expected


@pytest.mark.parametrize("value", [None, math.nan, float("nan")])
def test_missing_values_bin_to_null(value):
    assert bin_value("primary_era", value) == "null"
    assert bin_value("same_league", value) == "null"
    assert bin_value("venue", value) == "null"


def test_numeric_strings_are_parsed():
    assert bin_value("primary_era", "3.2") == "good"
    assert bin_value("primary_streak", " 4 ") == "hot"


@pytest.mark.parametrize("feature", ["primary_era", "primary_ops", "o_u_line", "primary_handle"])
def test_unparseable_numeric_values_bin_to_null(feature):
    assert bin_value(feature, "n/a") == "null"
    assert bin_value(feature, ["3.0"]) == "null"


def test_precedence_first_rule_wins():
    # "era" is checked before "win_pct", so an ERA-ish win_pct column bins as ERA
    assert bin_value("era_win_pct", 0.9) == "good"
    # "whip" before "streak"
    assert bin_value("whip_streak", 5) == "poor"


def test_run_line_and_total_need_exact_identifier():
    # Not the run line feature: falls through to the default
    assert bin_value("opponent_rl", -1.5) == "-1.5"
    assert bin_value("o_u_line_open", 7.5) == "7.5"


def test_default_stringifies_value():
    assert bin_value("venue", "Fenway") == "Fenway"
    assert bin_value("month", 6) == "6"


def test_default_keeps_integral_floats_and_ints_together():
    # A column with a missing value is read back as floats
    assert bin_value("month", 6.0) == bin_value("month", 6)
    assert bin_value("day_night", True) == "true"


def test_combo_key_joins_in_subset_order():
    row = {"primary_era": 3.0, "primary_streak": 5, "same_league": 0}
    assert combo_key(row, ["primary_era", "primary_streak", "same_league"]) == "good|hot|no"
    assert combo_key(row, ["same_league", "primary_era"]) == "no|good"


def test_combo_key_treats_absent_feature_as_null():
    assert combo_key({"primary_era": 5.0}, ["primary_era", "primary_ops"]) == "poor|null"


def test_values_that_bin_the_same_share_a_key():
    assert combo_key({"primary_era": 2.1}, ["primary_era"]) == combo_key(
        {"primary_era": 3.4}, ["primary_era"]
    )
