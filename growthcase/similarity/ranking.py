"""Similar-case ranking pipeline.

Resolve the target run, pull a bounded pool of same-industry runs, score
each, drop the noise below the relevance floor, keep the best few and attach
the experiments that previously won for each of them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from growthcase.errors import InvalidInputError, NotFoundError
from growthcase.metrics import similar_cases_returned, similarity_rank_seconds
from growthcase.models.case import SimilarCase
from growthcase.models.experiment import ExperimentStatus
from growthcase.similarity.scorer import score_similarity
from growthcase.similarity.selector import CANDIDATE_LIMIT, select_candidates
from growthcase.similarity.winners import winning_experiments

if TYPE_CHECKING:
    from growthcase.config import Settings
    from growthcase.protocols import CaseRepository

logger = structlog.get_logger()

MIN_SIMILARITY_SCORE = 20
TOP_N = 3


@dataclass(frozen=True, slots=True)
class RankingPolicy:
    min_score: int = MIN_SIMILARITY_SCORE
    top_n: int = TOP_N
    candidate_limit: int = CANDIDATE_LIMIT
    null_trend_matches_zero: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> RankingPolicy:
        return cls(
            min_score=settings.similarity_min_score,
            top_n=settings.similarity_top_n,
            candidate_limit=settings.similarity_candidate_limit,
            null_trend_matches_zero=settings.null_trend_matches_zero,
        )


class CaseRanker:
    """Ranks historical runs against a target run.

    Read-only and stateless per call; persistence errors propagate unchanged
    and no partial result is ever returned.
    """

    def __init__(self, repository: CaseRepository, policy: RankingPolicy | None = None) -> None:
        self.repository = repository
        self.policy = policy or RankingPolicy()

    def rank(self, target_run_id: str) -> list[SimilarCase]:
        if not isinstance(target_run_id, str) or not target_run_id.strip():
            raise InvalidInputError("run_id required")

        start = time.monotonic()
        policy = self.policy

        target = self.repository.get_run(target_run_id)
        if target is None:
            raise NotFoundError(f"Run {target_run_id} not found")

        pool = self.repository.list_runs(
            industry=target.industry,
            exclude_id=target.id,
            limit=policy.candidate_limit,
        )
        candidates = select_candidates(target, pool, limit=policy.candidate_limit)

        scored = [
            (
                candidate,
                score_similarity(
                    target,
                    candidate,
                    null_trend_matches_zero=policy.null_trend_matches_zero,
                ),
            )
            for candidate in candidates
        ]
        relevant = [pair for pair in scored if pair[1] >= policy.min_score]
        # list.sort is stable: equal scores stay newest first
        relevant.sort(key=lambda pair: pair[1], reverse=True)
        top = relevant[: policy.top_n]

        cases = [
            SimilarCase(
                run=run,
                similarity_score=score,
                winning_experiments=winning_experiments(
                    self.repository.list_experiments_for_run(
                        run.id, status=ExperimentStatus.COMPLETED
                    )
                ),
            )
            for run, score in top
        ]

        elapsed = time.monotonic() - start
        similarity_rank_seconds.observe(elapsed)
        similar_cases_returned.observe(len(cases))
        logger.info(
            "Similar cases ranked",
            run_id=target.id,
            industry=target.industry.value,
            candidates=len(candidates),
            above_threshold=len(relevant),
            returned=len(cases),
            top_score=cases[0].similarity_score if cases else None,
            duration_ms=round(elapsed * 1000, 2),
        )
        return cases
