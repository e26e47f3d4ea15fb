"""Prometheus metric definitions for growthcase."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# --- Analysis ---

analysis_runs_total = Counter(
    "growthcase_analysis_runs_total",
    "Total campaign analyses performed",
    labelnames=["mode"],
)

# --- LLM tokens ---

llm_tokens_total = Counter(
    "growthcase_llm_tokens_total",
    "Total LLM tokens consumed",
    labelnames=["model", "token_type"],
)

# --- Retry ---

retry_attempts_total = Counter(
    "growthcase_retry_attempts_total",
    "Total retry attempts",
    labelnames=["fn_name"],
)

retry_exhausted_total = Counter(
    "growthcase_retry_exhausted_total",
    "Total times retries were exhausted",
    labelnames=["fn_name"],
)

# --- Similar cases ---

similarity_rank_seconds = Histogram(
    "growthcase_similarity_rank_seconds",
    "Time spent ranking similar cases for a run",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5),
)

similar_cases_returned = Histogram(
    "growthcase_similar_cases_returned",
    "Number of similar cases returned per ranking request",
    buckets=(0, 1, 2, 3, 5, 10),
)

# --- Experiments ---

experiment_transitions_total = Counter(
    "growthcase_experiment_transitions_total",
    "Total experiment status transitions",
    labelnames=["status"],
)

outcomes_total = Counter(
    "growthcase_outcomes_total",
    "Total experiment outcomes recorded",
    labelnames=["outcome_status"],
)
