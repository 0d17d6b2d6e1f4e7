"""SQLAlchemy database models for the trend mining service.

This file defines the tables this service owns using SQLAlchemy ORM
(Object-Relational Mapping).

Model Categories:
1. Model Registry: One row per custom model run (write-only from the miner)
2. Saved Patterns: Trend patterns a user chose to keep and follow
3. Pattern Tracking: Daily matches of saved patterns and their ROI summary

The historical training rows and today's slate are NOT modelled here. They
live in flattened views maintained by the ingestion side, with one column per
feature, and are read by name through the record store.

For beginners:

SQLAlchemy ORM: A Python toolkit that lets you work with databases using Python
classes instead of raw SQL. Each class represents a database table, and
instances represent rows.

JSON columns: Feature lists vary per run, so they are stored as JSON arrays
rather than spread over a fixed set of columns.
"""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

# Base class for all database models
Base = declarative_base()


def utc_now() -> datetime:
    """Naive UTC timestamp. Every stored time and every default "today" uses this clock."""
    return datetime.now(UTC).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()


def generate_model_id() -> str:
    """Generate the public identifier handed back for a model run."""
    return str(uuid.uuid4())


class CustomModel(Base):
    """A persisted model run: the feature set and target a user mined with.

    Created exactly once per mining request, before any aggregation happens,
    and never updated or deleted by the miner. The target column holds the
    resolved outcome column (e.g. "primary_win"), not the public target name.
    """

    __tablename__ = "custom_models"

    id = Column(Integer, primary_key=True, index=True)
    model_id = Column(String(36), unique=True, nullable=False, index=True, default=generate_model_id)
    model_name = Column(String(200), nullable=False)
    selected_features = Column(JSON, nullable=False)  # Ordered list of feature identifiers
    target = Column(String(100), nullable=False)  # Resolved outcome column

    created_at = Column(DateTime, default=utc_now)


class SavedTrendPattern(Base):
    """A trend pattern saved by a user so it can be checked against each day's slate."""

    __tablename__ = "saved_trend_patterns"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(100), nullable=False, index=True)
    pattern_name = Column(String(200), nullable=False)
    model_id = Column(String(36), nullable=True)  # Run the pattern was mined in, if known

    # Pattern definition
    features = Column(JSON, nullable=False)  # Ordered feature subset
    feature_count = Column(Integer, nullable=False)
    combo = Column(String(500), nullable=False)  # Combo key the features must bin to
    target = Column(String(100), nullable=False)  # Public target name (moneyline, ...)

    # Historical strength at save time
    win_pct = Column(Float, nullable=False)
    opponent_win_pct = Column(Float, nullable=False)
    games = Column(Integer, nullable=False)
    dominant_side = Column(String(10), nullable=False)  # "primary" or "opponent"

    created_at = Column(DateTime, default=utc_now)

    daily_matches = relationship(
        "PatternDailyMatch", back_populates="pattern", cascade="all, delete-orphan"
    )
    roi = relationship(
        "PatternROI", back_populates="pattern", cascade="all, delete-orphan", uselist=False
    )


class PatternDailyMatch(Base):
    """A game on a given day that satisfied a saved pattern."""

    __tablename__ = "pattern_daily_matches"

    id = Column(Integer, primary_key=True, index=True)
    saved_pattern_id = Column(
        Integer, ForeignKey("saved_trend_patterns.id"), nullable=False, index=True
    )
    match_date = Column(Date, nullable=False, index=True)
    unique_id = Column(String(100), nullable=False)

    # Matchup
    primary_team = Column(String(100), nullable=False, default="Unknown")
    opponent_team = Column(String(100), nullable=False, default="Unknown")
    is_home_game = Column(Boolean, nullable=False, default=False)

    # Prices captured from the slate
    primary_ml = Column(Float)
    opponent_ml = Column(Float)

    # Outcomes (None until the game is settled)
    primary_win = Column(Integer)
    primary_runline_win = Column(Integer)
    ou_result = Column(Integer)

    created_at = Column(DateTime, default=utc_now)

    pattern = relationship("SavedTrendPattern", back_populates="daily_matches")

    # Constraints
    __table_args__ = (
        UniqueConstraint("saved_pattern_id", "match_date", "unique_id"),
        Index("idx_daily_match_unique_id", "unique_id"),
    )


class PatternROI(Base):
    """Latest return-on-investment summary for a saved pattern."""

    __tablename__ = "pattern_roi"

    id = Column(Integer, primary_key=True, index=True)
    saved_pattern_id = Column(
        Integer, ForeignKey("saved_trend_patterns.id"), unique=True, nullable=False, index=True
    )
    total_games = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    total_bet_amount = Column(Float, nullable=False, default=0.0)  # One unit per game
    total_payout = Column(Float, nullable=False, default=0.0)
    roi_percentage = Column(Float, nullable=False, default=0.0)  # Average ROI per bet
    last_updated = Column(DateTime, default=utc_now, onupdate=utc_now)

    pattern = relationship("SavedTrendPattern", back_populates="roi")
