"""Outcome model: an append-only result of running an experiment."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from growthcase.models.base import new_id, utcnow


class OutcomeStatus(StrEnum):
    WIN = "Win"
    LOSS = "Loss"
    NEUTRAL = "Neutral"
    INCONCLUSIVE = "Inconclusive"


class MetricsDelta(BaseModel):
    """Observed change per metric; each entry is independently optional."""

    model_config = ConfigDict(frozen=True)

    roas: float | None = None
    cac: float | None = None
    ctr: float | None = None
    cvr: float | None = None


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    experiment_id: str
    outcome_status: OutcomeStatus
    notes: str = ""
    metrics_delta: MetricsDelta = Field(default_factory=MetricsDelta)
    learnings: list[str] = Field(default_factory=list)
    recommended_next: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
