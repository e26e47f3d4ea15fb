"""Run model: one completed campaign-performance analysis."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from growthcase.models.analysis import AnalysisResult, BottleneckType
from growthcase.models.base import new_id, utcnow


class Industry(StrEnum):
    BEAUTY = "Beauty"
    WELLNESS = "Wellness"
    FASHION = "Fashion"


class TimeWindow(StrEnum):
    SEVEN_DAYS = "7 days"
    FOURTEEN_DAYS = "14 days"
    THIRTY_DAYS = "30 days"


class ChannelMix(BaseModel):
    """Share of spend per channel, in percent."""

    model_config = ConfigDict(frozen=True)

    meta: float = Field(default=0.0, ge=0.0, le=100.0)
    google: float = Field(default=0.0, ge=0.0, le=100.0)
    tiktok: float = Field(default=0.0, ge=0.0, le=100.0)


class CampaignMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    spend: float = Field(ge=0.0)
    revenue: float = Field(ge=0.0)
    ctr: float = Field(ge=0.0)
    cpm: float = Field(ge=0.0)
    conversion_rate: float = Field(ge=0.0)
    aov: float = Field(ge=0.0)
    ltv: float = Field(ge=0.0)


class TrendSignals(BaseModel):
    """Signed percentage change versus the prior period.

    ``None`` means the metric was not measured, which is distinct from 0.0.
    """

    model_config = ConfigDict(frozen=True)

    roas_delta: float | None = None
    ctr_delta: float | None = None
    cvr_delta: float | None = None


class CampaignSnapshot(BaseModel):
    """User-submitted campaign state that an analysis is run against."""

    model_config = ConfigDict(frozen=True)

    brand_name: str = Field(min_length=1)
    industry: Industry
    time_window: TimeWindow
    channel_mix: ChannelMix = Field(default_factory=ChannelMix)
    metrics: CampaignMetrics
    trends: TrendSignals = Field(default_factory=TrendSignals)
    notes: str = ""


class ComputedFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    roas: float
    cpc: float
    estimated_cac: float


def compute_fields(snapshot: CampaignSnapshot) -> ComputedFields:
    """Derive ROAS, CPC and an estimated CAC from the raw snapshot metrics.

    CTR is a percentage and CPM is per 1000 impressions, so CPC is
    ``cpm / (ctr * 10)``. CAC is approximated as ``aov / roas`` since order
    counts are not collected.
    """
    m = snapshot.metrics
    roas = m.revenue / m.spend if m.spend > 0 else 0.0
    cpc = m.cpm / (m.ctr * 10) if m.ctr > 0 else 0.0
    estimated_cac = m.aov / roas if roas > 0 else 0.0
    return ComputedFields(
        roas=round(roas, 2),
        cpc=round(cpc, 2),
        estimated_cac=round(estimated_cac, 2),
    )


def channel_mix_warning(mix: ChannelMix) -> str | None:
    """Return a warning when a non-empty channel mix does not sum to ~100%."""
    total = mix.meta + mix.google + mix.tiktok
    if total == 0:
        return None
    if abs(total - 100) > 1:
        return f"Channel mix sums to {total:g}% (should be 100%)"
    return None


class Run(BaseModel):
    """One completed analysis, the unit of comparison for similarity.

    Created once when an analysis completes and never updated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)

    # Classification
    industry: Industry
    primary_bottleneck: BottleneckType
    secondary_bottlenecks: list[BottleneckType] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    risk_score: int = Field(ge=0, le=100)
    trends: TrendSignals = Field(default_factory=TrendSignals)

    # Display-only payload
    brand: str = ""
    time_window: TimeWindow | None = None
    channel_mix: ChannelMix | None = None
    metrics: dict[str, float] = Field(default_factory=dict)
    notes: str = ""
    analysis: AnalysisResult | None = None
