"""Mining policy constants as an immutable value object."""

from dataclasses import dataclass

from trendminer.config.settings import Settings


@dataclass(frozen=True)
class MiningPolicy:
    """Fixed policy constants that bound and filter a mining pass.

    The defaults are the production values. They are policy, not derived from
    any statistical principle, and are kept as literal constants so that a
    mining run is reproducible. Override them through Settings (environment
    or .env) rather than by editing the algorithm code.
    """

    combo_delimiter: str = "|"
    five_feature_subset_cap: int = 20
    four_feature_subset_cap: int = 30
    large_subset_size: int = 5
    min_games_large_subset: int = 25
    min_games_default: int = 30
    win_pct_upper: float = 0.55
    win_pct_lower: float = 0.45
    top_n_patterns: int = 15

    @classmethod
    def from_settings(cls, settings: Settings) -> "MiningPolicy":
        return cls(
            combo_delimiter=settings.combo_delimiter,
            five_feature_subset_cap=settings.five_feature_subset_cap,
            four_feature_subset_cap=settings.four_feature_subset_cap,
            large_subset_size=settings.large_subset_size,
            min_games_large_subset=settings.min_games_large_subset,
            min_games_default=settings.min_games_default,
            win_pct_upper=settings.win_pct_upper,
            win_pct_lower=settings.win_pct_lower,
            top_n_patterns=settings.top_n_patterns,
        )

    def min_games_for(self, subset_size: int) -> int:
        """Minimum sample a combo needs before it can become a pattern."""
        if subset_size >= self.large_subset_size:
            return self.min_games_large_subset
        return self.min_games_default
