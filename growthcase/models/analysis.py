"""Models for the structured analysis returned by the LLM."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class BottleneckType(StrEnum):
    CREATIVE = "Creative"
    CONVERSION = "Conversion"
    SCALING = "Scaling"
    EFFICIENCY = "Efficiency"


class Summary(BaseModel):
    model_config = ConfigDict(frozen=True)

    one_liner: str


class Bottleneck(BaseModel):
    """One diagnosed constraint and how strongly the data points at it."""

    model_config = ConfigDict(frozen=True)

    type: BottleneckType
    signal_strength: float = Field(ge=0.0, le=1.0)
    reasoning: list[str] = Field(default_factory=list)


class ActionItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    priority: int = Field(ge=1)
    title: str
    expected_impact: str
    risk: str


class ExperimentProposal(BaseModel):
    """An experiment as proposed by the analysis, before it is persisted."""

    model_config = ConfigDict(frozen=True)

    category: BottleneckType
    name: str
    hypothesis: str
    setup: str
    success_metrics: list[str] = Field(default_factory=list)
    guardrails: list[str] = Field(default_factory=list)


class Risk(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_score: int = Field(ge=0, le=100)
    risk_drivers: list[str] = Field(default_factory=list)


class CreativeDirections(BaseModel):
    model_config = ConfigDict(frozen=True)

    angles: list[str] = Field(default_factory=list)
    hooks: list[str] = Field(default_factory=list)
    ctas: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Full diagnosis of a campaign snapshot."""

    model_config = ConfigDict(frozen=True)

    summary: Summary
    bottlenecks: list[Bottleneck] = Field(min_length=2, max_length=4)
    primary_bottleneck: BottleneckType
    secondary_bottlenecks: list[BottleneckType] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    checks_to_confirm: list[str] = Field(default_factory=list)
    risk: Risk
    action_plan: list[ActionItem] = Field(default_factory=list)
    experiments: list[ExperimentProposal] = Field(default_factory=list)
    creative_directions: CreativeDirections = Field(default_factory=CreativeDirections)
