"""
API endpoints for saved trend patterns.

Endpoints:
- POST /patterns: Save a pattern from a model run
- GET /patterns: List a user's saved patterns
- DELETE /patterns/{pattern_id}: Remove a saved pattern
- POST /patterns/check: Match a user's saved patterns against a day's slate
- POST /patterns/settle: Copy final outcomes onto tracked matches
- POST /patterns/roi: Recompute ROI for every saved pattern
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from trendminer.api.schemas import (
    CheckPatternsRequest,
    CheckPatternsResponse,
    ROIResponse,
    SavedPatternResponse,
    SavePatternRequest,
    SettleResponse,
)
from trendminer.database.connection import get_db
from trendminer.mining.entities import TrendMatch
from trendminer.mining.roi import PatternROIService
from trendminer.mining.saved_patterns import SavedPatternService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patterns", tags=["patterns"])


@router.post("", response_model=SavedPatternResponse, status_code=201)
def save_pattern(request: SavePatternRequest, db: Session = Depends(get_db)):
    """Save a trend match so it is checked against future slates."""
    trend = TrendMatch(
        combo=request.combo,
        games=request.games,
        win_pct=request.win_pct,
        opponent_win_pct=1 - request.win_pct,
        features=tuple(request.features),
    )
    return SavedPatternService(db).save_pattern(
        user_id=request.user_id,
        pattern_name=request.pattern_name,
        trend=trend,
        target=request.target,
        model_id=request.model_id,
    )


@router.get("", response_model=list[SavedPatternResponse])
def list_patterns(user_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return SavedPatternService(db).list_patterns(user_id)


@router.delete("/{pattern_id}", status_code=204)
def delete_pattern(pattern_id: int, db: Session = Depends(get_db)) -> None:
    SavedPatternService(db).delete_pattern(pattern_id)


@router.post("/check", response_model=CheckPatternsResponse)
def check_saved_patterns(request: CheckPatternsRequest, db: Session = Depends(get_db)):
    """Match a user's saved patterns against the slate and record the hits."""
    matches = SavedPatternService(db).check_saved_patterns(request.user_id, request.game_date)
    return {"matches": matches}


@router.post("/settle", response_model=SettleResponse)
def settle_daily_matches(db: Session = Depends(get_db)):
    return {"settled": SavedPatternService(db).settle_daily_matches()}


@router.post("/roi", response_model=ROIResponse)
def calculate_pattern_roi(db: Session = Depends(get_db)):
    """Recompute ROI for all saved patterns from their settled daily matches."""
    calculations = PatternROIService(db).recalculate_all()
    message = (
        "ROI calculation completed successfully" if calculations else "No saved patterns found"
    )
    return {
        "message": message,
        "processed_patterns": len(calculations),
        "calculations": [calculation.to_dict() for calculation in calculations],
    }
