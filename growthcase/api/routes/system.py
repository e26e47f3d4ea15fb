"""Health check and config endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from growthcase.api.deps import DbDep, SettingsDep
from growthcase.api.schemas import ConfigCheckResponse, HealthResponse
from growthcase.errors import UnavailableError

router = APIRouter(tags=["system"])

logger = structlog.get_logger()

VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
def health_check(db: DbDep) -> HealthResponse:
    try:
        db_ok = db.check_connection()
    except UnavailableError as exc:
        logger.warning("Health check could not reach the case library", error=str(exc))
        db_ok = False

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=VERSION,
        db_connected=db_ok,
    )


@router.get("/config/check", response_model=ConfigCheckResponse)
def config_check(settings: SettingsDep) -> ConfigCheckResponse:
    """Which integrations are configured and the active ranking policy."""
    return ConfigCheckResponse(
        configured={"anthropic": bool(settings.anthropic_api_key)},
        llm_model=settings.llm_model,
        ranking={
            "min_score": settings.similarity_min_score,
            "top_n": settings.similarity_top_n,
            "candidate_limit": settings.similarity_candidate_limit,
            "null_trend_matches_zero": settings.null_trend_matches_zero,
        },
    )
