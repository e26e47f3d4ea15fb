"""API request/response schemas (separate from domain models)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from growthcase.models.analysis import AnalysisResult
from growthcase.models.case import RunHistoryEntry, SimilarCase
from growthcase.models.experiment import ExperimentStatus
from growthcase.models.outcome import MetricsDelta, OutcomeStatus
from growthcase.models.run import CampaignSnapshot, ComputedFields, Run

# --- Responses ---


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    version: str
    db_connected: bool


class ConfigCheckResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    configured: dict[str, bool]
    llm_model: str
    ranking: dict[str, int | bool]


class ExperimentRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    id: str


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: AnalysisResult
    run_id: str
    experiment_ids: list[ExperimentRef] = Field(default_factory=list)
    channel_mix_warning: str | None = None


class RunResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    run: Run


class HistoryResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    runs: list[RunHistoryEntry]
    total: int


class SimilarResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    similar: list[SimilarCase]


class StatusResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    status: ExperimentStatus


class OutcomeRecordedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome_id: str
    experiment_id: str
    status: ExperimentStatus


# --- Requests ---


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    snapshot: CampaignSnapshot
    computed: ComputedFields | None = None
    simulation_mode: bool = False


class StatusRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ExperimentStatus


class OutcomeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome_status: OutcomeStatus
    notes: str = ""
    metrics_delta: MetricsDelta = Field(default_factory=MetricsDelta)
    learnings: list[str] = Field(default_factory=list)
    recommended_next: list[str] = Field(default_factory=list)
