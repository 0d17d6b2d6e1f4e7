"""Saved patterns: keep a mined pattern and check it against each day's slate.

A user who likes a pattern from a mining run can save it. Every day the saved
patterns are checked against the slate with the same discretizer and combo
key rules as mining, and each hit is recorded in pattern_daily_matches so its
result can be settled and scored for ROI later.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trendminer.config.settings import settings
from trendminer.data.record_store import RecordStore
from trendminer.database.models import PatternDailyMatch, SavedTrendPattern, utc_today

from .aggregator import is_win
from .discretizer import combo_key, is_missing
from .entities import TrendMatch
from .exceptions import InvalidModelConfigError, PatternNotFoundError, UpstreamError
from .matcher import UNKNOWN_TEAM, group_today_rows
from .policy import MiningPolicy

logger = logging.getLogger(__name__)

OUTCOME_COLUMNS = ("primary_win", "primary_runline_win", "ou_result")


def dominant_side(win_pct: float) -> str:
    """Which side of the matchup a pattern historically favours."""
    return "primary" if win_pct >= 0.5 else "opponent"


def _as_flag(value: Any) -> int | None:
    return None if is_missing(value) else int(is_win(value))


def _as_price(value: Any) -> float | None:
    if is_missing(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class SavedPatternService:
    """Manage saved patterns and their daily matches."""

    def __init__(
        self,
        db: Session,
        record_store: RecordStore | None = None,
        policy: MiningPolicy | None = None,
    ):
        self.db = db
        self.record_store = record_store or RecordStore(db)
        self.policy = policy or MiningPolicy.from_settings(settings)

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to %s", action)
            raise UpstreamError(f"Failed to {action}: {e}") from e

    def save_pattern(
        self,
        user_id: str,
        pattern_name: str,
        trend: TrendMatch,
        target: str,
        model_id: str | None = None,
    ) -> SavedTrendPattern:
        """Persist a mined pattern for a user."""
        if not user_id or not pattern_name:
            raise InvalidModelConfigError("user_id and pattern_name are required")
        if not trend.features:
            raise InvalidModelConfigError("a saved pattern needs at least one feature")

        pattern = SavedTrendPattern(
            user_id=user_id,
            pattern_name=pattern_name,
            model_id=model_id,
            features=list(trend.features),
            feature_count=trend.feature_count,
            combo=trend.combo,
            target=target,
            win_pct=trend.win_pct,
            opponent_win_pct=trend.opponent_win_pct,
            games=trend.games,
            dominant_side=dominant_side(trend.win_pct),
        )
        self.db.add(pattern)
        self._commit("save pattern")
        self.db.refresh(pattern)
        logger.info("Saved pattern %d (%s) for user %s", pattern.id, pattern_name, user_id)
        return pattern

    def list_patterns(self, user_id: str) -> list[SavedTrendPattern]:
        return (
            self.db.query(SavedTrendPattern)
            .filter(SavedTrendPattern.user_id == user_id)
            .order_by(SavedTrendPattern.id)
            .all()
        )

    def delete_pattern(self, pattern_id: int) -> None:
        pattern = self.db.get(SavedTrendPattern, pattern_id)
        if pattern is None:
            raise PatternNotFoundError(f"Saved pattern {pattern_id} not found")
        self.db.delete(pattern)
        self._commit("delete pattern")

    def _upsert_daily_match(self, pattern: SavedTrendPattern, match_date: date, row: dict) -> None:
        unique_id = str(row.get("unique_id"))
        record = (
            self.db.query(PatternDailyMatch)
            .filter(
                PatternDailyMatch.saved_pattern_id == pattern.id,
                PatternDailyMatch.match_date == match_date,
                PatternDailyMatch.unique_id == unique_id,
            )
            .first()
        )
        if record is None:
            record = PatternDailyMatch(
                saved_pattern_id=pattern.id, match_date=match_date, unique_id=unique_id
            )
            self.db.add(record)

        record.primary_team = row.get("primary_team") or UNKNOWN_TEAM
        record.opponent_team = row.get("opponent_team") or UNKNOWN_TEAM
        record.is_home_game = bool(row.get("is_home_team") or False)
        record.primary_ml = _as_price(row.get("primary_ml"))
        record.opponent_ml = _as_price(row.get("opponent_ml"))

    def check_saved_patterns(self, user_id: str, game_date: date | None = None) -> list[dict[str, Any]]:
        """Check a user's saved patterns against a day's slate.

        Each (pattern, game) hit is returned once and upserted into
        pattern_daily_matches. Hits on rows without a game id are returned
        but not tracked. No saved patterns or no games means no matches,
        not an error.
        """
        game_date = game_date or utc_today()
        patterns = self.list_patterns(user_id)
        logger.info("Checking %d saved patterns for user %s", len(patterns), user_id)
        if not patterns:
            return []

        games = group_today_rows(self.record_store.load_today_rows(game_date))
        matches = []

        for pattern in patterns:
            for game_id, variants in games:
                row = next(
                    (
                        variant
                        for variant in variants
                        if combo_key(variant, pattern.features, self.policy.combo_delimiter)
                        == pattern.combo
                    ),
                    None,
                )
                if row is None:
                    continue
                matches.append(
                    {
                        "pattern_id": pattern.id,
                        "pattern_name": pattern.pattern_name,
                        "unique_id": game_id,
                        "primary_team": row.get("primary_team") or UNKNOWN_TEAM,
                        "opponent_team": row.get("opponent_team") or UNKNOWN_TEAM,
                        "is_home_game": bool(row.get("is_home_team") or False),
                        "win_pct": pattern.win_pct,
                        "opponent_win_pct": pattern.opponent_win_pct,
                        "games": pattern.games,
                        "target": pattern.target,
                    }
                )
                if row.get("unique_id") is None:
                    # Nothing to settle it against later
                    logger.debug("Not tracking id-less match for pattern %d", pattern.id)
                    continue
                self._upsert_daily_match(pattern, game_date, row)

        self._commit("record daily matches")
        logger.info("Found %d matches for %d saved patterns", len(matches), len(patterns))
        return matches

    def settle_daily_matches(self) -> int:
        """Copy final outcomes onto tracked matches whose games are now historical.

        A finished game shows up in the training view, possibly from the other
        team's perspective; in that case the win columns are flipped (the
        over/under result is the same from both sides).

        Returns:
            Number of daily matches settled
        """
        unsettled = (
            self.db.query(PatternDailyMatch)
            .filter(
                PatternDailyMatch.primary_win.is_(None),
                PatternDailyMatch.primary_runline_win.is_(None),
                PatternDailyMatch.ou_result.is_(None),
            )
            .all()
        )
        if not unsettled:
            return 0

        rows_by_game: dict[str, list[dict]] = {}
        for row in self.record_store.load_rows_for_games(sorted({m.unique_id for m in unsettled})):
            rows_by_game.setdefault(str(row.get("unique_id")), []).append(row)

        settled = 0
        for match in unsettled:
            rows = rows_by_game.get(match.unique_id)
            if not rows:
                continue
            same_side = next((r for r in rows if r.get("primary_team") == match.primary_team), None)
            row = same_side or rows[0]
            outcomes = {column: _as_flag(row.get(column)) for column in OUTCOME_COLUMNS}
            if same_side is None:
                for column in ("primary_win", "primary_runline_win"):
                    if outcomes[column] is not None:
                        outcomes[column] = 1 - outcomes[column]
            if all(value is None for value in outcomes.values()):
                continue
            for column, value in outcomes.items():
                setattr(match, column, value)
            settled += 1

        self._commit("settle daily matches")
        logger.info("Settled %d of %d tracked matches", settled, len(unsettled))
        return settled
