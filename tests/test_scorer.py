"""Tests for the similarity scorer."""

from __future__ import annotations

import random

import pytest

from growthcase.models.analysis import BottleneckType
from growthcase.models.run import Industry
from growthcase.similarity.scorer import (
    confidence_points,
    score_similarity,
    secondary_overlap,
    trend_sign,
)

B = BottleneckType


@pytest.fixture()
def target(make_run):
    return make_run(
        primary=B.CREATIVE,
        secondary=[B.CONVERSION],
        confidence=0.82,
        roas=-18,
        ctr=-24,
        cvr=-15,
    )


@pytest.fixture()
def candidate(make_run):
    return make_run(
        minutes=-60,
        primary=B.CREATIVE,
        secondary=[B.CONVERSION, B.EFFICIENCY],
        confidence=0.75,
        roas=-10,
        ctr=-5,
        cvr=-20,
    )


class TestTrendSign:
    def test_positive(self):
        assert trend_sign(12.5) == 1

    def test_negative(self):
        assert trend_sign(-0.1) == -1

    def test_zero_and_none_are_flat(self):
        assert trend_sign(0.0) == 0
        assert trend_sign(None) == 0


class TestComponents:
    def test_confidence_near_band(self):
        assert confidence_points(0.82, 0.75) == 20

    def test_confidence_band_edges_are_inclusive(self):
        assert confidence_points(0.15, 0.0) == 20
        assert confidence_points(0.0, 0.30) == 8

    def test_confidence_just_outside_band(self):
        assert confidence_points(0.5, 0.6500000004) == 8
        assert confidence_points(0.0, 0.3000000004) == 0

    def test_confidence_difference_compared_unrounded(self):
        # 0.82 - 0.67 evaluates to 0.15000000000000002
        assert confidence_points(0.82, 0.67) == 8

    def test_confidence_far_band(self):
        assert confidence_points(0.82, 0.60) == 8

    def test_confidence_out_of_range(self):
        assert confidence_points(0.82, 0.40) == 0

    def test_secondary_overlap_counts_target_entries(self, make_run):
        t = make_run(secondary=[B.CONVERSION, B.EFFICIENCY, B.SCALING])
        c = make_run(secondary=[B.EFFICIENCY, B.SCALING, B.CONVERSION])
        assert secondary_overlap(t, c) == 3

    def test_secondary_overlap_none_shared(self, make_run):
        t = make_run(secondary=[B.CONVERSION])
        c = make_run(secondary=[B.SCALING])
        assert secondary_overlap(t, c) == 0


class TestScoreSimilarity:
    def test_reference_pair_scores_90(self, target, candidate):
        assert score_similarity(target, candidate) == 90

    def test_primary_and_confidence_mismatch_drops_55(self, target, candidate):
        far = candidate.model_copy(
            update={"primary_bottleneck": B.EFFICIENCY, "confidence": 0.40}
        )
        assert score_similarity(target, candidate) - score_similarity(target, far) == 55

    def test_secondary_points_capped_at_two(self, make_run):
        t = make_run(
            primary=B.CREATIVE,
            secondary=[B.CONVERSION, B.EFFICIENCY, B.SCALING],
            confidence=0.9,
            roas=1,
            ctr=1,
            cvr=1,
        )
        c = make_run(
            primary=B.CONVERSION,
            secondary=[B.CONVERSION, B.EFFICIENCY, B.SCALING],
            confidence=0.1,
            roas=-1,
            ctr=-1,
            cvr=-1,
        )
        assert score_similarity(t, c) == 20

    def test_identical_runs_score_at_most_100(self, make_run):
        run = make_run(secondary=[B.CONVERSION, B.EFFICIENCY, B.SCALING])
        assert score_similarity(run, run) == 100

    def test_opposite_trends_score_nothing_for_trends(self, make_run):
        t = make_run(roas=5, ctr=5, cvr=5)
        c = make_run(roas=-5, ctr=-5, cvr=-5)
        # Same primary and confidence only
        assert score_similarity(t, c) == 55

    def test_null_trend_matches_zero_trend(self, make_run):
        t = make_run(roas=None, ctr=None, cvr=None)
        c = make_run(roas=0.0, ctr=0.0, cvr=0.0)
        assert score_similarity(t, c) == 35 + 20 + 25

    def test_null_trend_matches_null_trend(self, make_run):
        t = make_run(roas=None, ctr=None, cvr=None)
        c = make_run(roas=None, ctr=None, cvr=None)
        assert score_similarity(t, c) == 80

    def test_unmeasured_trends_need_both_sides_when_flag_off(self, make_run):
        t = make_run(roas=None, ctr=0.0, cvr=None)
        c = make_run(roas=0.0, ctr=0.0, cvr=None)
        assert score_similarity(t, c, null_trend_matches_zero=False) == 35 + 20 + 8

    def test_symmetric_when_secondaries_match(self, target, candidate):
        # Overlap is counted from the target's side, so align secondaries first
        candidate = candidate.model_copy(update={"secondary_bottlenecks": [B.CONVERSION]})
        assert score_similarity(target, candidate) == score_similarity(candidate, target)

    def test_deterministic(self, target, candidate):
        scores = {score_similarity(target, candidate) for _ in range(5)}
        assert len(scores) == 1

    def test_score_always_in_range(self, make_run):
        rng = random.Random(1234)
        types = list(B)
        trend_values = [None, 0.0, -12.0, 7.5]

        def random_run():
            return make_run(
                industry=rng.choice(list(Industry)),
                primary=rng.choice(types),
                secondary=rng.sample(types, rng.randint(0, 4)),
                confidence=round(rng.random(), 2),
                roas=rng.choice(trend_values),
                ctr=rng.choice(trend_values),
                cvr=rng.choice(trend_values),
            )

        for _ in range(300):
            score = score_similarity(random_run(), random_run())
            assert isinstance(score, int)
            assert 0 <= score <= 100
