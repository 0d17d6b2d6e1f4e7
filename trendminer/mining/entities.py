"""In-memory entities created and discarded within a single mining request.

Only the model run (persisted through the registry) outlives a request; every
type here is rebuilt from scratch on each call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Perspective(Enum):
    """Side of the matchup a pattern describes.

    Mining always works from the primary team's row, so PRIMARY is the only
    variant. The product once also carried an "opponent" tag with no code
    path producing it; it is intentionally not modelled.
    """

    PRIMARY = "primary"


@dataclass(frozen=True)
class FeatureSubset:
    """Ordered, repetition-free list of feature identifiers evaluated together."""

    features: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.features)


@dataclass
class ComboStatistics:
    """Win/total counters for one (FeatureSubset, combo key) pair."""

    wins: int = 0
    total: int = 0

    @property
    def win_pct(self) -> float:
        return self.wins / self.total if self.total else 0.0


@dataclass(frozen=True)
class TrendMatch:
    """A retained, ranked historical pattern."""

    combo: str
    games: int
    win_pct: float
    opponent_win_pct: float
    features: tuple[str, ...]
    score: float = field(default=0.0, compare=False)
    perspective: Perspective = Perspective.PRIMARY

    @property
    def feature_count(self) -> int:
        return len(self.features)

    def to_dict(self) -> dict[str, Any]:
        return {
            "combo": self.combo,
            "games": self.games,
            "win_pct": self.win_pct,
            "opponent_win_pct": self.opponent_win_pct,
            "feature_count": self.feature_count,
            "features": list(self.features),
            "perspective": self.perspective.value,
        }


@dataclass(frozen=True)
class TodayMatch:
    """Evidence that one of today's games satisfies a retained pattern."""

    unique_id: str
    primary_team: str
    opponent_team: str
    is_home_team: bool
    trend: TrendMatch

    @property
    def combo(self) -> str:
        return self.trend.combo

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_id": self.unique_id,
            "primary_team": self.primary_team,
            "opponent_team": self.opponent_team,
            "is_home_team": self.is_home_team,
            "combo": self.trend.combo,
            "win_pct": self.trend.win_pct,
            "opponent_win_pct": self.trend.opponent_win_pct,
            "games": self.trend.games,
            "feature_count": self.trend.feature_count,
            "features": list(self.trend.features),
            "perspective": self.trend.perspective.value,
        }


@dataclass
class CustomModelResult:
    """Everything a mining run hands back to its caller."""

    model_id: str
    trend_matches: list[TrendMatch]
    today_matches: list[TodayMatch]
    target: str  # Public target name as requested, not the resolved column

    def to_dict(self) -> dict[str, Any]:
        return {
            "model_id": self.model_id,
            "trend_matches": [trend.to_dict() for trend in self.trend_matches],
            "today_matches": [match.to_dict() for match in self.today_matches],
            "target": self.target,
        }
