"""Preset campaign snapshots for demos and smoke tests."""

from __future__ import annotations

from dataclasses import dataclass

from growthcase.models.run import (
    CampaignMetrics,
    CampaignSnapshot,
    ChannelMix,
    Industry,
    TimeWindow,
    TrendSignals,
)


@dataclass(frozen=True, slots=True)
class Scenario:
    label: str
    description: str
    snapshot: CampaignSnapshot


SCENARIOS: dict[str, Scenario] = {
    "creative-fatigue": Scenario(
        label="Creative Fatigue",
        description="High spend, declining CTR and CVR as the same creatives burn out",
        snapshot=CampaignSnapshot(
            brand_name="Lumière Beauty",
            industry=Industry.BEAUTY,
            time_window=TimeWindow.FOURTEEN_DAYS,
            channel_mix=ChannelMix(meta=70, google=20, tiktok=10),
            metrics=CampaignMetrics(
                spend=28000,
                revenue=58800,
                ctr=0.9,
                cpm=22.5,
                conversion_rate=1.4,
                aov=68,
                ltv=195,
            ),
            trends=TrendSignals(roas_delta=-18, ctr_delta=-24, cvr_delta=-15),
            notes=(
                "Same 3 ad creatives running since week 1. Frequency is now 4.2. "
                "No new UGC or creative variations introduced. Brand awareness "
                "campaign ended 3 weeks ago."
            ),
        ),
    ),
    "scaling-too-fast": Scenario(
        label="Scaling Too Fast",
        description="Rapid budget increase causing a CPM spike and efficiency drop",
        snapshot=CampaignSnapshot(
            brand_name="Vitality Wellness",
            industry=Industry.WELLNESS,
            time_window=TimeWindow.SEVEN_DAYS,
            channel_mix=ChannelMix(meta=55, google=30, tiktok=15),
            metrics=CampaignMetrics(
                spend=42000,
                revenue=63000,
                ctr=1.8,
                cpm=38.4,
                conversion_rate=1.1,
                aov=95,
                ltv=280,
            ),
            trends=TrendSignals(roas_delta=-32, ctr_delta=-8, cvr_delta=-12),
            notes=(
                "Budget increased 3x in 5 days following board approval. Expanded "
                "from 3 to 12 ad sets. Audience overlap warnings appearing in Ads "
                "Manager. No creative refresh done prior to scale."
            ),
        ),
    ),
    "landing-page-drop": Scenario(
        label="Landing Page Drop",
        description="Good CTR but a severe conversion collapse after the click",
        snapshot=CampaignSnapshot(
            brand_name="Atelier Mode",
            industry=Industry.FASHION,
            time_window=TimeWindow.SEVEN_DAYS,
            channel_mix=ChannelMix(meta=45, google=35, tiktok=20),
            metrics=CampaignMetrics(
                spend=18500,
                revenue=27750,
                ctr=2.6,
                cpm=18.2,
                conversion_rate=0.7,
                aov=145,
                ltv=320,
            ),
            trends=TrendSignals(roas_delta=-28, ctr_delta=5, cvr_delta=-45),
            notes=(
                "Deployed new landing page redesign 8 days ago. Mobile checkout flow "
                "changed. A/B test running on product page but may have broken "
                "tracking. Shopify theme update deployed same day."
            ),
        ),
    ),
}


def get_scenario(name: str) -> Scenario:
    try:
        return SCENARIOS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scenario {name!r}; choose from {', '.join(sorted(SCENARIOS))}"
        ) from None
