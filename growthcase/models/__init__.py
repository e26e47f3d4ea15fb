"""Re-exports all Pydantic models."""

from growthcase.models.analysis import (
    ActionItem,
    AnalysisResult,
    Bottleneck,
    BottleneckType,
    CreativeDirections,
    ExperimentProposal,
    Risk,
    Summary,
)
from growthcase.models.case import ExperimentRecord, RunHistoryEntry, SimilarCase
from growthcase.models.experiment import Experiment, ExperimentStatus, can_transition
from growthcase.models.outcome import MetricsDelta, Outcome, OutcomeStatus
from growthcase.models.run import (
    CampaignMetrics,
    CampaignSnapshot,
    ChannelMix,
    ComputedFields,
    Industry,
    Run,
    TimeWindow,
    TrendSignals,
    channel_mix_warning,
    compute_fields,
)

__all__ = [
    "ActionItem",
    "AnalysisResult",
    "Bottleneck",
    "BottleneckType",
    "CampaignMetrics",
    "CampaignSnapshot",
    "ChannelMix",
    "ComputedFields",
    "CreativeDirections",
    "Experiment",
    "ExperimentProposal",
    "ExperimentRecord",
    "ExperimentStatus",
    "Industry",
    "MetricsDelta",
    "Outcome",
    "OutcomeStatus",
    "Risk",
    "Run",
    "RunHistoryEntry",
    "SimilarCase",
    "Summary",
    "TimeWindow",
    "TrendSignals",
    "can_transition",
    "channel_mix_warning",
    "compute_fields",
]
