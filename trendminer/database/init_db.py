"""Create and drop the tables this service owns.

- create_database(): registry, saved patterns, daily matches, ROI
- drop_database(): remove them again
- reset_database(): drop + create

The record-store views (training rows and today's slate) belong to the
ingestion side and are never created or dropped here.
"""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url

from ..config.settings import settings
from .connection import engine
from .models import Base

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def create_database(bind=None):
    """Create every service-owned table that does not exist yet."""
    try:
        if bind is None:
            _ensure_sqlite_directory(settings.database_url)

        Base.metadata.create_all(bind=bind or engine)
        logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))

    except Exception:
        logger.exception("Failed to create database")
        raise


def drop_database(bind=None):
    """Drop every service-owned table. Saved patterns and run history are lost."""
    try:
        Base.metadata.drop_all(bind=bind or engine)
        logger.info("Dropped tables: %s", ", ".join(sorted(Base.metadata.tables)))

    except Exception:
        logger.exception("Failed to drop database")
        raise


def reset_database(bind=None):
    logger.info("Resetting database...")
    drop_database(bind)
    create_database(bind)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_database()
