"""Shared pytest fixtures.

Every test gets its own in-memory SQLite database. StaticPool keeps a single
connection alive so the ORM session, pandas and the API test client all see
the same database.

The record-store views are plain tables here, written with
DataFrame.to_sql in the same flattened shape the ingestion side produces.
"""

from datetime import date

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from trendminer.config import settings
from trendminer.database.init_db import create_database

SLATE_DATE = date(2025, 6, 1)


def training_row(game_id, won, **features):
    """One historical team-perspective row."""
    return {
        "unique_id": game_id,
        "primary_team": "NYY",
        "opponent_team": "BOS",
        "is_home_team": True,
        "primary_win": won,
        "primary_runline_win": won,
        "ou_result": 0,
        **features,
    }


def today_row(game_id, primary_team="NYY", opponent_team="BOS", is_home_team=True, **features):
    """One row of the day's slate."""
    return {
        "unique_id": game_id,
        "date": SLATE_DATE.isoformat(),
        "primary_team": primary_team,
        "opponent_team": opponent_team,
        "is_home_team": is_home_team,
        **features,
    }


def era_history():
    """40 games: 30 with a good ERA (24 wins), 10 with a poor ERA (2 wins)."""
    rows = [training_row(f"g{i}", 1 if i < 24 else 0, primary_era=3.0) for i in range(30)]
    rows += [training_row(f"p{i}", 1 if i < 2 else 0, primary_era=5.0) for i in range(10)]
    return rows


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def load_training(engine):
    """Write rows into the training view."""

    def _load(rows):
        pd.DataFrame(rows).to_sql(settings.training_table, engine, index=False, if_exists="replace")

    return _load


@pytest.fixture
def load_today(engine):
    """Write rows into the today view."""

    def _load(rows):
        pd.DataFrame(rows).to_sql(settings.today_table, engine, index=False, if_exists="replace")

    return _load
