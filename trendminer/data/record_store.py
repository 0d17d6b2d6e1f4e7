"""Record store adapter: historical training rows and today's slate.

Both sources are flattened views maintained by the ingestion side, one
column per feature plus identifiers and outcome columns. Their column sets
change whenever a feature is added, so they are reflected by name at read
time instead of being mapped as ORM classes.

Rows come back as plain dicts. Missing values are normalized to None (pandas
reports them as NaN/NaT) so the discretizer's "null" rule and the "not
truthy is not a win" rule apply uniformly.
"""

import logging
from datetime import date
from typing import Any

import pandas as pd
from sqlalchemy import Date, MetaData, Table, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trendminer.config.settings import settings
from trendminer.database.models import utc_today
from trendminer.mining.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to row dicts with missing values as None."""
    if frame.empty:
        return []
    cleaned = frame.astype(object).where(frame.notna(), None)
    return cleaned.to_dict(orient="records")


class RecordStore:
    """Read-only access to the training and today views."""

    def __init__(
        self,
        db: Session,
        training_table: str | None = None,
        today_table: str | None = None,
        date_column: str | None = None,
    ):
        self.db = db
        self.training_table = training_table or settings.training_table
        self.today_table = today_table or settings.today_table
        self.date_column = date_column or settings.today_date_column

    def _reflect(self, name: str) -> Table:
        return Table(name, MetaData(), autoload_with=self.db.connection())

    def _read(self, name: str, where=None) -> list[dict[str, Any]]:
        try:
            table = self._reflect(name)
            statement = select(table)
            if where is not None:
                statement = statement.where(where(table))
            frame = pd.read_sql(statement, self.db.connection())
        except (SQLAlchemyError, KeyError) as e:
            logger.exception("Failed to read %s", name)
            raise UpstreamError(f"Failed to fetch {name}: {e}") from e
        return frame_to_rows(frame)

    def load_training_rows(self) -> list[dict[str, Any]]:
        """Every historical row, one per team-perspective per game."""
        rows = self._read(self.training_table)
        logger.info("Loaded %d training records", len(rows))
        return rows

    def load_today_rows(self, game_date: date | None = None) -> list[dict[str, Any]]:
        """Rows of the slate for ``game_date`` (today in UTC by default)."""
        game_date = game_date or utc_today()

        def on_date(table: Table):
            column = table.c[self.date_column]
            # Views expose the slate date either as a DATE or as ISO text
            value = game_date if isinstance(column.type, Date) else game_date.isoformat()
            return column == value

        rows = self._read(self.today_table, where=on_date)
        logger.info("Found %d rows for %s", len(rows), game_date.isoformat())
        return rows

    def load_rows_for_games(self, unique_ids: list[str]) -> list[dict[str, Any]]:
        """Training rows for specific games - used to settle tracked matches."""
        if not unique_ids:
            return []
        return self._read(
            self.training_table,
            where=lambda table: table.c["unique_id"].in_(unique_ids),
        )
