"""Today matcher: find today's games that satisfy a retained pattern."""

import logging
from typing import Any

from .discretizer import combo_key
from .entities import TodayMatch, TrendMatch
from .policy import MiningPolicy

logger = logging.getLogger(__name__)

UNKNOWN_GAME_ID = "unknown"
UNKNOWN_TEAM = "Unknown"


def group_today_rows(rows: list[dict[str, Any]]) -> list[tuple[str, list[dict[str, Any]]]]:
    """Group the day's rows by game id, keeping feed order.

    The same game can show up several times in the slate (one row per
    flattening pass); each appearance is kept as a variant of that game.
    A row without a game id cannot be tied to any other row, so it forms
    a group of its own under the "unknown" id.

    Returns:
        (game_id, variants) pairs in order of first appearance
    """
    games: dict[str, list[dict[str, Any]]] = {}
    groups = []
    for row in rows:
        if not row:
            continue
        game_id = row.get("unique_id")
        if game_id is None:
            groups.append((UNKNOWN_GAME_ID, [row]))
            continue
        game_id = str(game_id)
        if game_id not in games:
            games[game_id] = []
            groups.append((game_id, games[game_id]))
        games[game_id].append(row)
    return groups


def match_today_games(
    rows: list[dict[str, Any]], trends: list[TrendMatch], policy: MiningPolicy | None = None
) -> list[TodayMatch]:
    """Match every unique game of today's slate against the retained patterns.

    Each pattern's own feature subset is binned on each variant of a game and
    compared with the pattern's combo key. A (game, combo key) pair is
    emitted at most once, even when another variant or another pattern
    produces the same key. Games matching nothing produce nothing.
    """
    policy = policy or MiningPolicy()
    matches = []
    games = group_today_rows(rows)

    for game_id, variants in games:
        emitted: set[str] = set()
        for row in variants:
            for trend in trends:
                key = combo_key(row, trend.features, policy.combo_delimiter)
                if key != trend.combo or key in emitted:
                    continue
                emitted.add(key)
                matches.append(
                    TodayMatch(
                        unique_id=game_id,
                        primary_team=row.get("primary_team") or UNKNOWN_TEAM,
                        opponent_team=row.get("opponent_team") or UNKNOWN_TEAM,
                        is_home_team=bool(row.get("is_home_team") or False),
                        trend=trend,
                    )
                )

    matched_games = len({m.unique_id for m in matches})
    logger.info("Matched %d of %d games to %d patterns", matched_games, len(games), len(trends))
    return matches
