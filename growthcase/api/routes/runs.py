"""Run history and similar-case endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from growthcase.api.deps import DbDep, RankerDep, SettingsDep
from growthcase.api.schemas import HistoryResponse, RunResponse, SimilarResponse
from growthcase.errors import NotFoundError

router = APIRouter(tags=["runs"])


@router.get("/runs", response_model=HistoryResponse)
def list_history(
    db: DbDep,
    settings: SettingsDep,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> HistoryResponse:
    entries = db.list_recent_runs(limit or settings.history_limit)
    return HistoryResponse(runs=entries, total=len(entries))


@router.get("/runs/{run_id}", response_model=RunResponse)
def get_run(
    run_id: str,
    db: DbDep,
) -> RunResponse:
    run = db.get_run(run_id)
    if run is None:
        raise NotFoundError(f"Run {run_id} not found")
    return RunResponse(run=run)


@router.get("/similar", response_model=SimilarResponse)
def similar_cases(
    ranker: RankerDep,
    run_id: str = "",
) -> SimilarResponse:
    return SimilarResponse(similar=ranker.rank(run_id))
