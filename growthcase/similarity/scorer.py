"""Similarity scoring between two analysis runs.

A fixed, additive point budget over structured fields:

    primary bottleneck match          35
    shared secondary bottlenecks      10 each, at most 2
    confidence within 0.15 / 0.30     20 / 8
    ROAS, CTR, CVR trend sign match   8, 8, 9

The total is capped at 100 and rounded to an integer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from growthcase.models.run import Run

PRIMARY_MATCH_POINTS = 35
SECONDARY_MATCH_POINTS = 10
MAX_SECONDARY_MATCHES = 2
CONFIDENCE_NEAR = 0.15
CONFIDENCE_NEAR_POINTS = 20
CONFIDENCE_FAR = 0.30
CONFIDENCE_FAR_POINTS = 8
ROAS_TREND_POINTS = 8
CTR_TREND_POINTS = 8
CVR_TREND_POINTS = 9
MAX_SCORE = 100


def trend_sign(value: float | None) -> Literal[-1, 0, 1]:
    """Classify a trend delta. Unmeasured (None) and exactly zero both map to 0."""
    if value is None:
        return 0
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _trend_matches(
    target: float | None,
    candidate: float | None,
    null_matches_zero: bool,
) -> bool:
    if not null_matches_zero and (target is None or candidate is None):
        return False
    return trend_sign(target) == trend_sign(candidate)


def secondary_overlap(target: Run, candidate: Run) -> int:
    """Count target secondary bottlenecks that also appear on the candidate."""
    shared = set(candidate.secondary_bottlenecks)
    return sum(1 for b in target.secondary_bottlenecks if b in shared)


def confidence_points(target: float, candidate: float) -> int:
    diff = abs(target - candidate)
    if diff <= CONFIDENCE_NEAR:
        return CONFIDENCE_NEAR_POINTS
    if diff <= CONFIDENCE_FAR:
        return CONFIDENCE_FAR_POINTS
    return 0


def score_similarity(
    target: Run,
    candidate: Run,
    *,
    null_trend_matches_zero: bool = True,
) -> int:
    """Score how comparable *candidate* is to *target*, from 0 to 100.

    Pure and deterministic. With ``null_trend_matches_zero`` (the default) an
    unmeasured trend counts as a zero trend, so None vs None or None vs 0.0
    awards the trend points. Setting it to False awards trend points only when
    both sides were measured.
    """
    score = 0

    if target.primary_bottleneck == candidate.primary_bottleneck:
        score += PRIMARY_MATCH_POINTS

    overlap = secondary_overlap(target, candidate)
    score += min(overlap, MAX_SECONDARY_MATCHES) * SECONDARY_MATCH_POINTS

    score += confidence_points(target.confidence, candidate.confidence)

    tt, ct = target.trends, candidate.trends
    if _trend_matches(tt.roas_delta, ct.roas_delta, null_trend_matches_zero):
        score += ROAS_TREND_POINTS
    if _trend_matches(tt.ctr_delta, ct.ctr_delta, null_trend_matches_zero):
        score += CTR_TREND_POINTS
    if _trend_matches(tt.cvr_delta, ct.cvr_delta, null_trend_matches_zero):
        score += CVR_TREND_POINTS

    return min(round(score), MAX_SCORE)
