"""Configuration for the trend mining service.

All knobs live on one pydantic-settings class: where the API listens, which
database holds the run registry and the record-store views, and the policy
constants that bound every mining pass (subset caps, sample gates, skew
band, how many patterns are kept).

Values are read from the process environment first, then from a .env file
in the working directory, then from the defaults below. Names are matched
case-insensitively, so TOP_N_PATTERNS=10 and top_n_patterns=10 are the
same override.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings.

    Examples:
    - `DATABASE_URL=postgresql://user@host/trends` points the service at the
      database that already holds the ingestion views
    - `MIN_GAMES_DEFAULT=40` tightens the sample gate for small subsets
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # HTTP server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False  # uvicorn --reload, development only

    # Registry database (also hosts the record-store views)
    database_url: str = "sqlite:///data/database/trends.db"
    database_pool_size: int = 5
    database_echo: bool = False  # Echo every SQL statement

    # Record store views, produced by the ingestion side
    training_table: str = "training_data_team_view"  # One row per team-perspective per game
    today_table: str = "input_values_team_format_view"  # Today's slate, same flattened shape
    today_date_column: str = "date"  # Column used to pick today's rows

    # Mining policy
    combo_delimiter: str = "|"  # Joins bin labels into a combo key
    five_feature_subset_cap: int = 20  # Max size-5 subsets evaluated (needs 6+ features)
    four_feature_subset_cap: int = 30  # Max size-4 subsets evaluated (needs 5+ features)
    large_subset_size: int = 5  # Subsets this large use the relaxed sample gate
    min_games_large_subset: int = 25  # Minimum sample for large subsets
    min_games_default: int = 30  # Minimum sample for everything else
    win_pct_upper: float = 0.55  # Keep combos winning at least this often...
    win_pct_lower: float = 0.45  # ...or at most this often
    top_n_patterns: int = 15  # Patterns retained per run

    # Logging
    log_level: str = "INFO"


settings = Settings()
