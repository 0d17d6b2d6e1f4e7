"""Pattern ranker: turn raw combo counters into the run's top patterns.

Three filters, then a sort:

1. Sample gate - at least 25 games for subsets of 5+ features, 30 otherwise
2. Skew gate - win fraction >= 0.55 or <= 0.45; near-50% combos are noise
3. Score - max(win_pct, 1 - win_pct) * ln(games) * (subset_size / 10)
4. Sort by score, highest first, and keep the top 15

The score rewards a stronger lean either way, a bigger sample (on a log
scale) and, slightly, a pattern built from more features. Candidates past
the cut are dropped entirely and can never match today's games.
"""

import logging
import math

from .aggregator import AggregationResult
from .entities import TrendMatch
from .policy import MiningPolicy

logger = logging.getLogger(__name__)


def pattern_score(win_pct: float, games: int, subset_size: int) -> float:
    """Composite ranking score of one candidate pattern."""
    return max(win_pct, 1 - win_pct) * math.log(games) * (subset_size / 10)


def rank_patterns(stats: AggregationResult, policy: MiningPolicy | None = None) -> list[TrendMatch]:
    """Filter, score and truncate aggregated combos into TrendMatches.

    Ties keep aggregation order (subset order, then first-seen combo), so the
    output is deterministic.
    """
    policy = policy or MiningPolicy()
    candidates = []

    for subset, combos in stats.items():
        min_games = policy.min_games_for(subset.size)
        for combo, entry in combos.items():
            if entry.total < min_games:
                continue
            win_pct = entry.win_pct
            if policy.win_pct_lower < win_pct < policy.win_pct_upper:
                continue
            candidates.append(
                TrendMatch(
                    combo=combo,
                    games=entry.total,
                    win_pct=win_pct,
                    opponent_win_pct=1 - win_pct,
                    features=subset.features,
                    score=pattern_score(win_pct, entry.total, subset.size),
                )
            )

    candidates.sort(key=lambda trend: trend.score, reverse=True)
    logger.info(
        "%d combos qualified, keeping top %d", len(candidates), min(len(candidates), policy.top_n_patterns)
    )
    return candidates[: policy.top_n_patterns]
