"""Experiment status and outcome endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from growthcase.api.deps import DbDep
from growthcase.api.schemas import (
    OutcomeRecordedResponse,
    OutcomeRequest,
    StatusRequest,
    StatusResponse,
)
from growthcase.models.experiment import ExperimentStatus
from growthcase.models.outcome import Outcome

router = APIRouter(prefix="/experiments", tags=["experiments"])


@router.post("/{experiment_id}/status", response_model=StatusResponse)
def update_status(
    experiment_id: str,
    body: StatusRequest,
    db: DbDep,
) -> StatusResponse:
    updated = db.update_experiment_status(experiment_id, body.status)
    return StatusResponse(id=updated.id, status=updated.status)


@router.post("/{experiment_id}/outcome", response_model=OutcomeRecordedResponse)
def record_outcome(
    experiment_id: str,
    body: OutcomeRequest,
    db: DbDep,
) -> OutcomeRecordedResponse:
    outcome = db.record_outcome(
        Outcome(
            experiment_id=experiment_id,
            outcome_status=body.outcome_status,
            notes=body.notes,
            metrics_delta=body.metrics_delta,
            learnings=body.learnings,
            recommended_next=body.recommended_next,
        )
    )
    return OutcomeRecordedResponse(
        outcome_id=outcome.id,
        experiment_id=experiment_id,
        status=ExperimentStatus.COMPLETED,
    )
