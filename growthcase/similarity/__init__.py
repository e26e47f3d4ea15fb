"""Similar-case retrieval: scoring, candidate selection, winners and ranking."""

from growthcase.similarity.ranking import CaseRanker, RankingPolicy
from growthcase.similarity.scorer import score_similarity, trend_sign
from growthcase.similarity.selector import CANDIDATE_LIMIT, select_candidates
from growthcase.similarity.winners import is_winner, winning_experiments

__all__ = [
    "CANDIDATE_LIMIT",
    "CaseRanker",
    "RankingPolicy",
    "is_winner",
    "score_similarity",
    "select_candidates",
    "trend_sign",
    "winning_experiments",
]
