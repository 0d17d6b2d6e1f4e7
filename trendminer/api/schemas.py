"""
Pydantic schemas for API request/response models.

Schema Organization:
- Request schemas: Define API input validation
- Response schemas: Define API output structure, matching the JSON contract
  the web client already consumes
- from_attributes: Allows creation from SQLAlchemy ORM objects
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

# ========== MODEL RUN SCHEMAS ==========


class RunModelRequest(BaseModel):
    """Body of a custom model run.

    target is deliberately a plain string: moneyline, runline and over_under
    are mapped to outcome columns, anything else is used as a column name.
    """

    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., min_length=1, description="Display name for the run")
    selected_features: list[str] = Field(..., min_length=1, description="Features to mine over")
    target: str = Field(..., min_length=1, description="moneyline, runline or over_under")
    game_date: date | None = Field(default=None, description="Slate to match (today in UTC by default)")


class TrendMatchResponse(BaseModel):
    """A ranked historical pattern."""

    combo: str  # Bin labels joined with "|"
    games: int  # Sample size
    win_pct: float
    opponent_win_pct: float
    feature_count: int
    features: list[str]
    perspective: str = "primary"


class TodayMatchResponse(BaseModel):
    """One of today's games satisfying a ranked pattern."""

    unique_id: str
    primary_team: str
    opponent_team: str
    is_home_team: bool
    combo: str
    win_pct: float
    opponent_win_pct: float
    games: int
    feature_count: int
    features: list[str]
    perspective: str = "primary"


class RunModelResponse(BaseModel):
    """Result of a custom model run."""

    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    trend_matches: list[TrendMatchResponse]  # At most 15, best score first
    today_matches: list[TodayMatchResponse]
    target: str  # Echoes the requested target name


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str
    details: str


# ========== SAVED PATTERN SCHEMAS ==========


class SavePatternRequest(BaseModel):
    """Save one trend match from a model run."""

    model_config = ConfigDict(protected_namespaces=())

    user_id: str = Field(..., min_length=1)
    pattern_name: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    model_id: str | None = None
    combo: str
    games: int = Field(..., ge=0)
    win_pct: float = Field(..., ge=0, le=1)
    features: list[str] = Field(..., min_length=1)


class SavedPatternResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    user_id: str
    pattern_name: str
    model_id: str | None = None
    features: list[str]
    feature_count: int
    combo: str
    target: str
    win_pct: float
    opponent_win_pct: float
    games: int
    dominant_side: str
    created_at: datetime | None = None


class CheckPatternsRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    game_date: date | None = None


class PatternMatchResponse(BaseModel):
    pattern_id: int
    pattern_name: str
    unique_id: str
    primary_team: str
    opponent_team: str
    is_home_game: bool
    win_pct: float
    opponent_win_pct: float
    games: int
    target: str


class CheckPatternsResponse(BaseModel):
    matches: list[PatternMatchResponse]


class SettleResponse(BaseModel):
    settled: int


class ROICalculationResponse(BaseModel):
    saved_pattern_id: int
    total_games: int
    wins: int
    losses: int
    total_roi_percentage: float
    average_roi_percentage: float


class ROIResponse(BaseModel):
    message: str
    processed_patterns: int
    calculations: list[ROICalculationResponse]
