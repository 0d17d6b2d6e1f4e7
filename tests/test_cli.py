"""Tests for the typer CLI, run against the per-test database."""

import json
from contextlib import contextmanager

import pytest
from conftest import SLATE_DATE, era_history, today_row
from sqlalchemy import inspect
from typer.testing import CliRunner

from trendminer.cli import commands
from trendminer.database.init_db import reset_database
from trendminer.database.models import SavedTrendPattern

runner = CliRunner()


@pytest.fixture(autouse=True)
def test_session(db, monkeypatch):
    @contextmanager
    def session_context():
        yield db

    monkeypatch.setattr(commands, "get_session_context", session_context)


def test_mine_prints_json(load_training, load_today):
    load_training(era_history())
    load_today([today_row("t1", primary_era=3.2)])

    result = runner.invoke(
        commands.app,
        ["mine", "--model-name", "ERA", "-f", "primary_era", "--game-date", SLATE_DATE.isoformat(), "--json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [t["combo"] for t in payload["trend_matches"]] == ["good"]
    assert [m["unique_id"] for m in payload["today_matches"]] == ["t1"]


def test_mine_renders_tables(load_training, load_today):
    load_training(era_history())
    load_today([today_row("t1", primary_era=3.2)])

    result = runner.invoke(
        commands.app,
        ["mine", "--model-name", "ERA", "-f", "primary_era", "--game-date", SLATE_DATE.isoformat()],
    )

    assert result.exit_code == 0, result.output
    assert "Top 1 patterns" in result.output
    assert "NYY vs BOS" in result.output


def test_mine_failure_exits_nonzero(load_today):
    load_today([today_row("t1", primary_era=3.2)])
    result = runner.invoke(commands.app, ["mine", "--model-name", "ERA", "-f", "primary_era"])
    assert result.exit_code == 1


def test_settle_and_roi_with_nothing_saved():
    assert runner.invoke(commands.app, ["settle"]).exit_code == 0
    result = runner.invoke(commands.app, ["roi"])
    assert result.exit_code == 0
    assert "0 patterns" in result.output


def test_reset_db_clears_saved_patterns(db, engine, monkeypatch):
    db.add(
        SavedTrendPattern(
            user_id="user-1",
            pattern_name="Aces",
            features=["primary_era"],
            feature_count=1,
            combo="good",
            target="moneyline",
            win_pct=0.8,
            opponent_win_pct=0.2,
            games=30,
            dominant_side="primary",
        )
    )
    db.commit()
    db.close()
    monkeypatch.setattr(commands, "reset_database", lambda: reset_database(bind=engine))

    result = runner.invoke(commands.app, ["reset-db", "--yes"])

    assert result.exit_code == 0, result.output
    assert db.query(SavedTrendPattern).count() == 0
    assert "saved_trend_patterns" in inspect(engine).get_table_names()


def test_reset_db_asks_first(monkeypatch):
    calls = []
    monkeypatch.setattr(commands, "reset_database", lambda: calls.append("reset"))

    result = runner.invoke(commands.app, ["reset-db"], input="n\n")

    assert result.exit_code == 1
    assert calls == []
