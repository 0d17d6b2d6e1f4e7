"""Trend mining service - orchestrates one custom model run end to end.

Control flow of run_custom_model():

    validate request
      -> record the run in the model registry (fatal on failure)
      -> load training rows, keep one row per game
      -> generate feature subsets
      -> aggregate win/total counts per (subset, combo key)
      -> rank: sample gate, skew gate, score, top 15
      -> load today's slate and match it against the retained patterns
      -> assemble the result, echoing the public target name

The pipeline steps are plain functions in their own modules; this class only
wires them to the registry and the record store. Each call owns its own
counters, nothing is shared between requests.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from trendminer.config.settings import settings
from trendminer.data.record_store import RecordStore

from .aggregator import aggregate_patterns, deduplicate_training_rows, resolve_target_column
from .combinations import generate_feature_subsets
from .entities import CustomModelResult
from .exceptions import InvalidModelConfigError
from .matcher import match_today_games
from .policy import MiningPolicy
from .ranker import rank_patterns
from .registry import ModelRegistry

logger = logging.getLogger(__name__)


def validate_model_config(model_name: str, selected_features: list[str], target: str) -> None:
    """Reject requests that cannot be mined, before anything is written.

    Raises:
        InvalidModelConfigError: Blank name, no features, repeated or blank
            feature names, or blank target
    """
    if not model_name or not model_name.strip():
        raise InvalidModelConfigError("model_name is required")
    if not selected_features:
        raise InvalidModelConfigError("selected_features must contain at least one feature")
    if any(not feature or not feature.strip() for feature in selected_features):
        raise InvalidModelConfigError("selected_features must not contain blank names")
    duplicates = sorted({f for f in selected_features if selected_features.count(f) > 1})
    if duplicates:
        raise InvalidModelConfigError(f"selected_features lists {', '.join(duplicates)} more than once")
    if not target or not target.strip():
        raise InvalidModelConfigError("target is required")


class TrendMiningService:
    """Service layer for custom model runs."""

    def __init__(
        self,
        db: Session,
        policy: MiningPolicy | None = None,
        record_store: RecordStore | None = None,
        registry: ModelRegistry | None = None,
    ):
        self.db = db
        self.policy = policy or MiningPolicy.from_settings(settings)
        self.record_store = record_store or RecordStore(db)
        self.registry = registry or ModelRegistry(db)

    def run_custom_model(
        self,
        model_name: str,
        selected_features: list[str],
        target: str,
        game_date: date | None = None,
    ) -> CustomModelResult:
        """Mine historical patterns for a feature set and match today's games.

        Args:
            model_name: Display name for the run
            selected_features: Features to mine over, in selection order
            target: Public target name - moneyline, runline or over_under
            game_date: Slate to match against (today in UTC by default)

        Returns:
            CustomModelResult with the run id, up to 15 ranked patterns and
            today's matches

        Raises:
            InvalidModelConfigError: The request is not minable
            UpstreamError: The registry write or a record-store read failed
        """
        logger.info(
            "Building custom model: name=%s features=%s target=%s",
            model_name,
            selected_features,
            target,
        )
        validate_model_config(model_name, selected_features, target)

        target_column = resolve_target_column(target)
        logger.info("Target mapping: %s -> %s", target, target_column)

        model_id = self.registry.record_run(model_name, selected_features, target_column)

        training_rows = deduplicate_training_rows(self.record_store.load_training_rows())

        subsets = generate_feature_subsets(selected_features, self.policy)
        logger.info("Evaluating %d feature subsets", len(subsets))

        stats = aggregate_patterns(training_rows, subsets, target_column, self.policy)
        trend_matches = rank_patterns(stats, self.policy)

        today_matches = []
        if trend_matches:
            today_rows = self.record_store.load_today_rows(game_date)
            today_matches = match_today_games(today_rows, trend_matches, self.policy)

        logger.info(
            "Found %d trend matches and %d today matches", len(trend_matches), len(today_matches)
        )
        return CustomModelResult(
            model_id=model_id,
            trend_matches=trend_matches,
            today_matches=today_matches,
            target=target,
        )
