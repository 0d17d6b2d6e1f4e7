"""
Main FastAPI application for the trend mining service.

The API provides endpoints for:
- Custom model runs (mine patterns, match today's games)
- Saved patterns (save, check against the slate, settle, ROI)
- System health and configuration

Every failure is returned as ``{"error": ..., "details": ...}`` with a
non-2xx status, which is the shape the web client expects:
- 400: the request is not usable (blank name, no features, bad body)
- 404: a saved pattern does not exist
- 500: the registry or record store failed, or anything unexpected
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trendminer import __version__
from trendminer.api.routers import models, patterns
from trendminer.config import settings
from trendminer.mining.exceptions import (
    InvalidModelConfigError,
    PatternNotFoundError,
    TrendMinerError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    yield


app = FastAPI(
    title="Trend Miner API",
    description="Mines historical game records for winning trend patterns",
    version=__version__,
    lifespan=lifespan,
)

# The browser client is served from a different origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    return error_response(400, "Invalid request", str(exc.errors()))


@app.exception_handler(InvalidModelConfigError)
async def invalid_config_handler(_request: Request, exc: InvalidModelConfigError):
    return error_response(400, "Invalid model configuration", str(exc))


@app.exception_handler(PatternNotFoundError)
async def pattern_not_found_handler(_request: Request, exc: PatternNotFoundError):
    return error_response(404, "Pattern not found", str(exc))


@app.exception_handler(UpstreamError)
async def upstream_error_handler(_request: Request, exc: UpstreamError):
    cause = exc.__cause__
    return error_response(500, str(exc), repr(cause) if cause else str(exc))


@app.exception_handler(TrendMinerError)
async def trend_miner_error_handler(_request: Request, exc: TrendMinerError):
    logger.exception("Unhandled trend miner error")
    return error_response(500, str(exc) or "An unknown error occurred", repr(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(_request: Request, exc: Exception):
    logger.exception("Unexpected error")
    return error_response(500, str(exc) or "An unknown error occurred", repr(exc))


@app.get("/")
async def root():
    """Basic API information."""
    return {
        "message": "Trend Miner API",
        "version": __version__,
        "docs": f"http://{settings.api_host}:{settings.api_port}/docs",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "Trend Miner"}


@app.get("/api/config")
async def get_config():
    """Mining policy in effect (non-sensitive values only)."""
    return {
        "combo_delimiter": settings.combo_delimiter,
        "five_feature_subset_cap": settings.five_feature_subset_cap,
        "four_feature_subset_cap": settings.four_feature_subset_cap,
        "large_subset_size": settings.large_subset_size,
        "min_games_large_subset": settings.min_games_large_subset,
        "min_games_default": settings.min_games_default,
        "win_pct_upper": settings.win_pct_upper,
        "win_pct_lower": settings.win_pct_lower,
        "top_n_patterns": settings.top_n_patterns,
        "targets": ["moneyline", "runline", "over_under"],
    }


app.include_router(models.router, prefix="/api", tags=["models"])
app.include_router(patterns.router, prefix="/api", tags=["patterns"])
