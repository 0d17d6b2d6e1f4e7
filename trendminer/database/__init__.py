"""Database package initialization."""

from .connection import SessionLocal, engine, get_db, get_session, get_session_context
from .models import Base, CustomModel, PatternDailyMatch, PatternROI, SavedTrendPattern

__all__ = [
    "Base",
    "CustomModel",
    "PatternDailyMatch",
    "PatternROI",
    "SavedTrendPattern",
    "SessionLocal",
    "engine",
    "get_db",
    "get_session",
    "get_session_context",
]
