"""Return on investment of saved patterns.

Every settled daily match of a saved pattern is treated as a one-unit bet on
the side the pattern favours:

- moneyline: the favoured team at its moneyline price
- runline: the favoured team to cover, at the standard -110 price
- over_under: over when the pattern favours the primary side, else under,
  at the standard -110 price

ROI of a single bet with American odds:
- loss: -100%
- win at +150: +150%
- win at -150: 10000 / 150 = +66.67%

Only matches dated on or after the day the pattern was saved are counted.
"""

import logging
from dataclasses import asdict, dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trendminer.database.models import PatternDailyMatch, PatternROI, SavedTrendPattern, utc_now

from .exceptions import UpstreamError

logger = logging.getLogger(__name__)

STANDARD_ODDS = -110


@dataclass
class ROICalculation:
    """ROI summary of one saved pattern."""

    saved_pattern_id: int
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    total_roi_percentage: float = 0.0
    average_roi_percentage: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


def is_valid_price(odds: float | None) -> bool:
    """American odds are at least 100 in magnitude; anything else is a bad feed value."""
    return odds is not None and abs(odds) >= 100


def calculate_bet_roi(odds: float, won: bool) -> float:
    """ROI percentage of a single bet at American odds (see is_valid_price)."""
    if not won:
        return -100.0
    if odds > 0:
        return float(odds)
    return 10000 / abs(odds)


def predicts_primary(pattern: SavedTrendPattern) -> bool:
    """True when the pattern backs the primary team (or the over)."""
    if pattern.dominant_side:
        return pattern.dominant_side == "primary"
    return pattern.win_pct > pattern.opponent_win_pct


def grade_match(pattern: SavedTrendPattern, match: PatternDailyMatch) -> tuple[bool, float] | None:
    """Grade one tracked match as a bet.

    Returns:
        (won, roi_percentage), or None when the match cannot be graded yet
        (missing outcome, missing or malformed price) or the target is unknown
    """
    backs_primary = predicts_primary(pattern)

    if pattern.target == "moneyline":
        odds = match.primary_ml if backs_primary else match.opponent_ml
        if match.primary_win is None or not is_valid_price(odds):
            return None
        won = match.primary_win == (1 if backs_primary else 0)
        return won, calculate_bet_roi(odds, won)

    if pattern.target == "runline":
        if match.primary_runline_win is None:
            return None
        won = match.primary_runline_win == (1 if backs_primary else 0)
        return won, calculate_bet_roi(STANDARD_ODDS, won)

    if pattern.target == "over_under":
        if match.ou_result is None:
            return None
        won = match.ou_result == (1 if backs_primary else 0)
        return won, calculate_bet_roi(STANDARD_ODDS, won)

    logger.warning("Unknown target type %r on pattern %d", pattern.target, pattern.id)
    return None


def calculate_pattern_roi(pattern: SavedTrendPattern, matches: list[PatternDailyMatch]) -> ROICalculation:
    result = ROICalculation(saved_pattern_id=pattern.id)
    since = pattern.created_at.date() if pattern.created_at else None

    for match in matches:
        if since is not None and match.match_date < since:
            continue
        graded = grade_match(pattern, match)
        if graded is None:
            logger.debug("Skipping ungraded match %s for pattern %d", match.unique_id, pattern.id)
            continue
        won, roi = graded
        result.total_games += 1
        if won:
            result.wins += 1
        else:
            result.losses += 1
        result.total_roi_percentage += roi

    if result.total_games:
        result.average_roi_percentage = result.total_roi_percentage / result.total_games
    return result


class PatternROIService:
    """Recompute and store ROI summaries for every saved pattern."""

    def __init__(self, db: Session):
        self.db = db

    def recalculate_all(self) -> list[ROICalculation]:
        patterns = self.db.query(SavedTrendPattern).order_by(SavedTrendPattern.id).all()
        if not patterns:
            logger.info("No saved patterns found")
            return []

        calculations = []
        for pattern in patterns:
            matches = (
                self.db.query(PatternDailyMatch)
                .filter(PatternDailyMatch.saved_pattern_id == pattern.id)
                .order_by(PatternDailyMatch.match_date, PatternDailyMatch.id)
                .all()
            )
            calculation = calculate_pattern_roi(pattern, matches)
            self._store(calculation)
            calculations.append(calculation)
            logger.info(
                "Pattern %s: %d games, %d wins, %d losses, avg ROI %.2f%%",
                pattern.pattern_name,
                calculation.total_games,
                calculation.wins,
                calculation.losses,
                calculation.average_roi_percentage,
            )

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to store pattern ROI")
            raise UpstreamError(f"Failed to store pattern ROI: {e}") from e
        return calculations

    def _store(self, calculation: ROICalculation) -> None:
        record = (
            self.db.query(PatternROI)
            .filter(PatternROI.saved_pattern_id == calculation.saved_pattern_id)
            .first()
        )
        if record is None:
            record = PatternROI(saved_pattern_id=calculation.saved_pattern_id)
            self.db.add(record)

        record.total_games = calculation.total_games
        record.wins = calculation.wins
        record.losses = calculation.losses
        record.total_bet_amount = float(calculation.total_games)  # One unit per game
        record.total_payout = calculation.total_games + calculation.total_roi_percentage / 100
        record.roi_percentage = calculation.average_roi_percentage
        record.last_updated = utc_now()
