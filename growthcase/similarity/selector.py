"""Candidate selection for similar-case ranking."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from growthcase.models.run import Run

# Hard cap on how many historical runs are scored per request. Older runs
# beyond the cap are not considered even if they would score well.
CANDIDATE_LIMIT = 50


def select_candidates(
    target: Run,
    pool: Iterable[Run],
    limit: int = CANDIDATE_LIMIT,
) -> list[Run]:
    """Runs in the target's industry, excluding the target, newest first.

    Runs created at the same instant keep their order from *pool*.
    """
    eligible = [r for r in pool if r.industry == target.industry and r.id != target.id]
    eligible.sort(key=lambda r: r.created_at, reverse=True)
    return eligible[: max(limit, 0)]
