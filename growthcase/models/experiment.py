"""Experiment model: a proposed test linked to the run that generated it."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from growthcase.models.analysis import BottleneckType
from growthcase.models.base import new_id, utcnow
from growthcase.models.run import Industry


class ExperimentStatus(StrEnum):
    PROPOSED = "Proposed"
    RUNNING = "Running"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


_ALLOWED_TRANSITIONS: dict[ExperimentStatus, frozenset[ExperimentStatus]] = {
    ExperimentStatus.PROPOSED: frozenset({ExperimentStatus.RUNNING, ExperimentStatus.ARCHIVED}),
    ExperimentStatus.RUNNING: frozenset({ExperimentStatus.COMPLETED, ExperimentStatus.ARCHIVED}),
    ExperimentStatus.COMPLETED: frozenset(),
    ExperimentStatus.ARCHIVED: frozenset(),
}


def can_transition(current: ExperimentStatus, target: ExperimentStatus) -> bool:
    """Whether an explicit status change is allowed.

    Re-applying the current status is accepted. Completed and Archived are
    terminal; recording an outcome forces Completed without consulting this.
    """
    return current == target or target in _ALLOWED_TRANSITIONS[current]


class Experiment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    linked_run_id: str
    brand: str = ""
    industry: Industry | None = None
    category: BottleneckType
    name: str
    hypothesis: str = ""
    setup: str = ""
    success_metrics: list[str] = Field(default_factory=list)
    guardrails: list[str] = Field(default_factory=list)
    status: ExperimentStatus = ExperimentStatus.PROPOSED

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
