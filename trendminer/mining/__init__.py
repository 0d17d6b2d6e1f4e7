"""Trend pattern mining: discretize, combine, aggregate, rank and match.

The pure pipeline steps are exported here. The database-backed services
(TrendMiningService, SavedPatternService, PatternROIService, ModelRegistry)
are imported from their own modules.
"""

from .aggregator import aggregate_patterns, deduplicate_training_rows, resolve_target_column
from .combinations import generate_feature_subsets
from .discretizer import bin_value, combo_key
from .entities import ComboStatistics, CustomModelResult, FeatureSubset, Perspective, TodayMatch, TrendMatch
from .exceptions import InvalidModelConfigError, PatternNotFoundError, TrendMinerError, UpstreamError
from .matcher import match_today_games
from .policy import MiningPolicy
from .ranker import pattern_score, rank_patterns

__all__ = [
    "ComboStatistics",
    "CustomModelResult",
    "FeatureSubset",
    "InvalidModelConfigError",
    "MiningPolicy",
    "PatternNotFoundError",
    "Perspective",
    "TodayMatch",
    "TrendMatch",
    "TrendMinerError",
    "UpstreamError",
    "aggregate_patterns",
    "bin_value",
    "combo_key",
    "deduplicate_training_rows",
    "generate_feature_subsets",
    "match_today_games",
    "pattern_score",
    "rank_patterns",
    "resolve_target_column",
]
