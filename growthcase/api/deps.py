"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from growthcase.analysis import AnalysisService
from growthcase.config import Settings
from growthcase.db import Database
from growthcase.similarity import CaseRanker, RankingPolicy


def _get_db(request: Request) -> Database:
    """Get the database instance from app state."""
    return request.app.state.db  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    """Get the settings instance from app state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def _get_ranker(request: Request) -> CaseRanker:
    settings = _get_settings(request)
    return CaseRanker(_get_db(request), RankingPolicy.from_settings(settings))


def _get_analysis_service(request: Request) -> AnalysisService:
    # app.state.llm lets tests swap in a fake model client
    return AnalysisService(
        _get_db(request),
        _get_settings(request),
        llm=getattr(request.app.state, "llm", None),
    )


DbDep = Annotated[Database, Depends(_get_db)]
SettingsDep = Annotated[Settings, Depends(_get_settings)]
RankerDep = Annotated[CaseRanker, Depends(_get_ranker)]
AnalysisServiceDep = Annotated[AnalysisService, Depends(_get_analysis_service)]
