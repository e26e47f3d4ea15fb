"""Campaign analysis: prompt the LLM for a diagnosis and store the completed run."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from pydantic_ai.exceptions import UnexpectedModelBehavior

from growthcase.errors import AnalysisError
from growthcase.metrics import analysis_runs_total
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
from growthcase.models.experiment import Experiment, ExperimentStatus
from growthcase.models.run import CampaignSnapshot, ComputedFields, Run, compute_fields
from growthcase.retry import RetryExhaustedError, with_retry

if TYPE_CHECKING:
    from growthcase.config import Settings
    from growthcase.db import Database
    from growthcase.protocols import LLMPort

logger = structlog.get_logger()

SYSTEM_PROMPT = """\
You are a senior growth strategist specializing in performance marketing for \
beauty, wellness, and fashion DTC brands across paid social (Meta, TikTok) and \
paid search (Google).

RULES:
1. Classify bottlenecks into exactly these 4 types: Creative, Conversion, Scaling, Efficiency
   - Creative: ad fatigue, low CTR, high frequency, stale creative
   - Conversion: post-click issues, landing page, checkout friction, CVR/AOV
   - Scaling: audience saturation, CPM inflation, ROAS degradation at scale
   - Efficiency: CAC too high, LTV:CAC poor, channel mix sub-optimal
2. Ground every reasoning point in specific metric relationships \
(e.g. "CTR -24% while CPM flat = creative exhaustion, not auction pressure").
3. signal_strength values must sum to approximately 1.0.
4. confidence is 0.0-1.0 reflecting certainty given the available data.
5. risk_score is 0-100, tied directly to metric severity and trend direction, \
and risk_drivers must justify it.
6. Each experiment's category must match the bottleneck it targets, with \
measurable success metrics and enforceable guardrails.
7. checks_to_confirm are specific diagnostic actions that validate the hypothesis.
8. Creative directions must be specific to the industry and primary bottleneck.
9. No generic advice. Every statement must reference the provided data.
"""

_USER_PROMPT_TEMPLATE = """\
Analyze this campaign.

BRAND: {brand} | INDUSTRY: {industry} | WINDOW: {window}
CHANNELS: Meta {meta:g}% | Google {google:g}% | TikTok {tiktok:g}%

METRICS:
Spend: ${spend:,.0f} | Revenue: ${revenue:,.0f} | ROAS: {roas:.2f}x
CTR: {ctr:g}% | CPM: ${cpm:g} | CPC: ${cpc:.2f}
CVR: {cvr:g}% | AOV: ${aov:g} | LTV: ${ltv:g} | Est. CAC: ${cac:.2f}
TRENDS: {trends}

CONTEXT: {notes}
"""


def _format_delta(label: str, value: float | None) -> str | None:
    if value is None:
        return None
    sign = "+" if value > 0 else ""
    return f"{label} Δ: {sign}{value:g}%"


def build_user_prompt(snapshot: CampaignSnapshot, computed: ComputedFields) -> str:
    """Render the snapshot and its computed fields into the analysis prompt."""
    t = snapshot.trends
    trend_parts = [
        part
        for part in (
            _format_delta("ROAS", t.roas_delta),
            _format_delta("CTR", t.ctr_delta),
            _format_delta("CVR", t.cvr_delta),
        )
        if part is not None
    ]
    m = snapshot.metrics
    mix = snapshot.channel_mix
    return _USER_PROMPT_TEMPLATE.format(
        brand=snapshot.brand_name,
        industry=snapshot.industry.value,
        window=snapshot.time_window.value,
        meta=mix.meta,
        google=mix.google,
        tiktok=mix.tiktok,
        spend=m.spend,
        revenue=m.revenue,
        roas=computed.roas,
        ctr=m.ctr,
        cpm=m.cpm,
        cpc=computed.cpc,
        cvr=m.conversion_rate,
        aov=m.aov,
        ltv=m.ltv,
        cac=computed.estimated_cac,
        trends=" | ".join(trend_parts) if trend_parts else "No trend data provided",
        notes=snapshot.notes or "None provided.",
    )


@dataclass(frozen=True, slots=True)
class AnalysisOutcome:
    result: AnalysisResult
    run_id: str
    experiment_ids: list[tuple[str, str]] = field(default_factory=list)
    persisted: bool = True


class AnalysisService:
    """Runs one campaign analysis end to end."""

    def __init__(
        self,
        db: Database,
        settings: Settings,
        llm: LLMPort | None = None,
        retry_base_delay: float = 1.0,
    ) -> None:
        self.db = db
        self.settings = settings
        self._llm = llm
        self.retry_base_delay = retry_base_delay

    @property
    def llm(self) -> LLMPort:
        if self._llm is None:
            from growthcase.llm import LLMClient

            self._llm = LLMClient(self.settings)
        return self._llm

    def analyze(
        self,
        snapshot: CampaignSnapshot,
        computed: ComputedFields | None = None,
        *,
        simulation: bool = False,
    ) -> AnalysisOutcome:
        computed = computed or compute_fields(snapshot)

        if simulation:
            # Simulated runs are demo data and never enter the case library
            analysis_runs_total.labels(mode="simulated").inc()
            run_id = f"sim-{int(time.time() * 1000)}"
            logger.info("Simulated analysis", brand=snapshot.brand_name, run_id=run_id)
            return AnalysisOutcome(
                result=mock_analysis(snapshot),
                run_id=run_id,
                persisted=False,
            )

        if not self.llm.is_available:
            raise AnalysisError(
                "No LLM API key configured. Set ANTHROPIC_API_KEY or use simulation mode."
            )

        result = self._generate(snapshot, computed)
        run, experiments = build_run(snapshot, computed, result)
        self.db.create_run(run, experiments)
        analysis_runs_total.labels(mode="live").inc()

        logger.info(
            "Analysis complete",
            run_id=run.id,
            brand=snapshot.brand_name,
            primary_bottleneck=result.primary_bottleneck.value,
            confidence=result.confidence,
            risk_score=result.risk.risk_score,
        )
        return AnalysisOutcome(
            result=result,
            run_id=run.id,
            experiment_ids=[(e.name, e.id) for e in experiments],
        )

    def _generate(self, snapshot: CampaignSnapshot, computed: ComputedFields) -> AnalysisResult:
        prompt = build_user_prompt(snapshot, computed)
        logger.info(
            "Requesting analysis from LLM",
            brand=snapshot.brand_name,
            industry=snapshot.industry.value,
        )
        try:
            return with_retry(
                lambda: self.llm.generate(prompt, AnalysisResult, system=SYSTEM_PROMPT),
                max_retries=self.settings.llm_max_retries,
                base_delay=self.retry_base_delay,
                retryable=(UnexpectedModelBehavior, ValidationError),
                label="analysis_llm",
            )
        except RetryExhaustedError as exc:
            raise AnalysisError(
                "LLM returned an invalid analysis after retry. Please try again."
            ) from exc


def build_run(
    snapshot: CampaignSnapshot,
    computed: ComputedFields,
    result: AnalysisResult,
) -> tuple[Run, list[Experiment]]:
    """Turn a validated analysis into a Run plus its Proposed experiments."""
    run = Run(
        brand=snapshot.brand_name,
        industry=snapshot.industry,
        time_window=snapshot.time_window,
        primary_bottleneck=result.primary_bottleneck,
        secondary_bottlenecks=list(result.secondary_bottlenecks),
        confidence=result.confidence,
        risk_score=result.risk.risk_score,
        trends=snapshot.trends,
        channel_mix=snapshot.channel_mix,
        metrics={**snapshot.metrics.model_dump(), **computed.model_dump()},
        notes=snapshot.notes,
        analysis=result,
    )
    experiments = [
        Experiment(
            linked_run_id=run.id,
            brand=snapshot.brand_name,
            industry=snapshot.industry,
            category=proposal.category,
            name=proposal.name,
            hypothesis=proposal.hypothesis,
            setup=proposal.setup,
            success_metrics=list(proposal.success_metrics),
            guardrails=list(proposal.guardrails),
            status=ExperimentStatus.PROPOSED,
        )
        for proposal in result.experiments
    ]
    return run, experiments


def mock_analysis(snapshot: CampaignSnapshot) -> AnalysisResult:
    """Deterministic creative-fatigue diagnosis used by simulation mode."""
    brand = snapshot.brand_name or "the brand"
    industry = snapshot.industry.value
    return AnalysisResult(
        summary=Summary(
            one_liner=(
                f"{brand} is experiencing creative fatigue on Meta: ad frequency above 4x "
                "has compressed CTR by ~22%, driving ROAS decline; a creative rotation "
                "sprint is the highest-leverage intervention."
            )
        ),
        bottlenecks=[
            Bottleneck(
                type=BottleneckType.CREATIVE,
                signal_strength=0.54,
                reasoning=[
                    "CTR down 24% while CPM held flat: audience recognition, not auction pressure",
                    "Frequency above 4.2x exceeds the 3.5x engagement-decay threshold",
                    "No creative refresh in 14 days with sustained spend accelerates signal burn",
                ],
            ),
            Bottleneck(
                type=BottleneckType.CONVERSION,
                signal_strength=0.26,
                reasoning=[
                    "CVR -15% is larger than creative fatigue alone explains",
                    "AOV held steady, isolating the issue to click-to-checkout entry",
                ],
            ),
            Bottleneck(
                type=BottleneckType.EFFICIENCY,
                signal_strength=0.12,
                reasoning=[
                    "ROAS -18% with stable CPM indicates marginal audience quality erosion",
                    "Rising estimated CAC at flat AOV compresses contribution margin",
                ],
            ),
            Bottleneck(
                type=BottleneckType.SCALING,
                signal_strength=0.08,
                reasoning=["Creative exhaustion will cap future scaling headroom"],
            ),
        ],
        primary_bottleneck=BottleneckType.CREATIVE,
        secondary_bottlenecks=[BottleneckType.CONVERSION, BottleneckType.EFFICIENCY],
        confidence=0.82,
        checks_to_confirm=[
            "Pull ad-level frequency breakdown and confirm which creatives exceed 4x",
            "Compare pre/post CTR by creative to isolate fatigue by asset age",
            "Review session recordings on the landing page for post-click drop-off",
            "Verify pixel event tracking consistency in Meta Events Manager",
        ],
        risk=Risk(
            risk_score=62,
            risk_drivers=[
                "ROAS -18% trending down with no creative refresh compounds fatigue",
                "CVR -15% signals post-click vulnerability that could deepen",
                "Frequency 4.2x: another 5-7 days at current spend will push CTR below 0.7%",
            ],
        ),
        action_plan=[
            ActionItem(
                priority=1,
                title="Launch Creative Sprint with 6 Net-New Concepts",
                expected_impact="Restore CTR to 1.8-2.1% within 7 days, recover 0.3-0.5x ROAS",
                risk="New creatives need a 3-5 day learning phase",
            ),
            ActionItem(
                priority=2,
                title="Pause or Throttle Creatives with Frequency >4x",
                expected_impact="Immediate CPM efficiency +10-15%",
                risk="Short-term revenue dip of 15-20% during the transition",
            ),
            ActionItem(
                priority=3,
                title="Audit Landing Page Message-to-Creative Alignment",
                expected_impact="Recover 0.2-0.3% CVR if a message mismatch is confirmed",
                risk="Low, diagnostic only until findings are confirmed",
            ),
        ],
        experiments=[
            ExperimentProposal(
                category=BottleneckType.CREATIVE,
                name="UGC Hook Rotation vs Branded Control",
                hypothesis=(
                    f"If UGC-style testimonial hooks replace branded video for {industry} "
                    "audiences, CTR will recover by at least 15% within 7 days because "
                    "social proof reduces creative recognition fatigue"
                ),
                setup=(
                    "Create 3 UGC-style videos (15-30s). A/B test 50/50 against the top "
                    "control creative for at least 7 days, holding other variables constant."
                ),
                success_metrics=["CTR >= 1.8% (vs 1.1%)", "ROAS >= 2.0x", "Frequency <= 3.5x"],
                guardrails=[
                    "Pause if CPA exceeds 2x target for 3 consecutive days",
                    "Minimum 1,000 impressions per creative before evaluating",
                ],
            ),
            ExperimentProposal(
                category=BottleneckType.CONVERSION,
                name="Message-to-Landing-Page Alignment",
                hypothesis=(
                    "If landing page headlines match the ad creative angle, CVR will improve "
                    "by at least 0.3% because reduced message mismatch lowers abandonment"
                ),
                setup=(
                    "Create dedicated landing page variants per top creative angle, route "
                    "traffic via UTM and track for 14 days against a holdout."
                ),
                success_metrics=["CVR >= 2.0% (vs 1.4%)", "Bounce rate -10%", "Add-to-cart >= 6%"],
                guardrails=[
                    "Revert if revenue/session drops below control for 3 consecutive days",
                    "Ensure tracking parity before launch",
                ],
            ),
        ],
        creative_directions=CreativeDirections(
            angles=[
                "Transformation-first: lead with a before/after specific to the category pain",
                "Social proof overload: 5+ authentic customer reviews in the first 3 seconds",
                "Ingredient/process transparency: behind-the-scenes of formulation",
                "Scarcity tied to a real constraint: limited batch, seasonal ingredient",
            ],
            hooks=[
                '"I was spending $120/month on [competitor] until I tried this..."',
                '"POV: You finally found a [product] that actually works"',
                '"The real reason your [problem] isn\'t improving (and what to do)"',
            ],
            ctas=[
                "Shop the formula, limited stock",
                "Start your transformation today",
                "See why 10,000+ fans switched",
            ],
        ),
    )
