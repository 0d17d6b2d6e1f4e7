"""Pattern aggregator - the computational core of a mining pass.

For every training row and every feature subset, the row's combo key is
computed through the discretizer and that key's counters are bumped: its
total always, its wins when the row's outcome for the target is truthy.

Counters live in one hash map per subset, keyed by combo key, so the pass is
O(rows x subsets x subset_size) with no nested scans. Dict insertion order
makes the result deterministic for a given row order.

Two supporting steps live here as well:
- resolve_target_column(): public target name -> outcome column
- deduplicate_training_rows(): one row per game, so a game seen from both
  teams' perspectives is never counted twice
"""

import logging
from typing import Any

from .discretizer import combo_key
from .entities import ComboStatistics, FeatureSubset
from .policy import MiningPolicy

logger = logging.getLogger(__name__)

GAME_ID_COLUMN = "unique_id"

TARGET_COLUMNS = {
    "moneyline": "primary_win",
    "runline": "primary_runline_win",
    "over_under": "ou_result",
}

AggregationResult = dict[FeatureSubset, dict[str, ComboStatistics]]


def resolve_target_column(target: str) -> str:
    """Map a public target name to its outcome column.

    Unrecognized names pass through unchanged. Such a column normally does
    not exist in the training rows, so every row counts as a loss and no
    pattern clears the skew gate on the winning side.
    """
    column = TARGET_COLUMNS.get(target)
    if column is None:
        logger.warning("Unrecognized target %r, using it as the outcome column as-is", target)
        return target
    return column


def is_win(outcome: Any) -> bool:
    """Only 1 and True count as a win; null, 0 and anything else do not."""
    return outcome is True or outcome == 1


def deduplicate_training_rows(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the first row seen for each game id, drop the rest.

    Rows without a game id cannot be matched to another perspective and are
    all kept.
    """
    seen: set[Any] = set()
    unique_rows = []
    missing_ids = 0

    for row in rows:
        if not row:
            continue
        game_id = row.get(GAME_ID_COLUMN)
        if game_id is None:
            missing_ids += 1
            unique_rows.append(row)
            continue
        if game_id in seen:
            continue
        seen.add(game_id)
        unique_rows.append(row)

    if missing_ids:
        logger.warning("%d training rows have no %s and were kept as-is", missing_ids, GAME_ID_COLUMN)
    logger.info("Deduplicated %d training rows to %d games", len(rows), len(unique_rows))
    return unique_rows


def aggregate_patterns(
    rows: list[dict[str, Any]],
    subsets: list[FeatureSubset],
    target_column: str,
    policy: MiningPolicy | None = None,
) -> AggregationResult:
    """Count wins and totals per (feature subset, combo key).

    Args:
        rows: Deduplicated training rows
        subsets: Feature subsets from the combination generator
        target_column: Resolved outcome column
        policy: Supplies the combo key delimiter

    Returns:
        Mapping subset -> combo key -> counters, in first-seen order
    """
    policy = policy or MiningPolicy()
    stats: AggregationResult = {subset: {} for subset in subsets}

    for row in rows:
        won = is_win(row.get(target_column))
        for subset in subsets:
            key = combo_key(row, subset.features, policy.combo_delimiter)
            entry = stats[subset].get(key)
            if entry is None:
                entry = stats[subset][key] = ComboStatistics()
            entry.total += 1
            if won:
                entry.wins += 1

    logger.debug(
        "Aggregated %d rows over %d subsets into %d combos",
        len(rows),
        len(subsets),
        sum(len(combos) for combos in stats.values()),
    )
    return stats
