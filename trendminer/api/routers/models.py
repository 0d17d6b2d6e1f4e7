"""
API endpoints for custom model runs.

A run records the chosen feature set in the model registry, mines the
historical records for combinations of binned feature values that lean
strongly toward one outcome, and reports which of today's games fit the
strongest of them.

Failures are raised as domain exceptions and rendered by the handlers
registered in trendminer.api.main.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from trendminer.api.schemas import ErrorResponse, RunModelRequest, RunModelResponse
from trendminer.database.connection import get_db
from trendminer.mining.service import TrendMiningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/models", tags=["models"])


@router.post(
    "/run",
    response_model=RunModelResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def run_custom_model(request: RunModelRequest, db: Session = Depends(get_db)) -> RunModelResponse:
    """
    Mine trend patterns for a feature set and match them against today's games.

    Declared as a plain ``def`` - mining is a synchronous in-memory scan, so
    FastAPI runs it in the threadpool instead of blocking the event loop.
    """
    service = TrendMiningService(db)
    result = service.run_custom_model(
        model_name=request.model_name,
        selected_features=request.selected_features,
        target=request.target,
        game_date=request.game_date,
    )
    return RunModelResponse.model_validate(result.to_dict())
