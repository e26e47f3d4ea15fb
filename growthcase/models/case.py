"""Aggregates returned by the case library: experiments with outcomes, similar cases."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from growthcase.models.experiment import Experiment
from growthcase.models.outcome import Outcome
from growthcase.models.run import Run


class ExperimentRecord(BaseModel):
    """An experiment together with its outcomes, most recent first."""

    model_config = ConfigDict(frozen=True)

    experiment: Experiment
    outcomes: list[Outcome] = Field(default_factory=list)


class SimilarCase(BaseModel):
    """A historical run ranked against a target run."""

    model_config = ConfigDict(frozen=True)

    run: Run
    similarity_score: int = Field(ge=0, le=100)
    winning_experiments: list[ExperimentRecord] = Field(default_factory=list)


class RunHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    run: Run
    experiments: list[ExperimentRecord] = Field(default_factory=list)
