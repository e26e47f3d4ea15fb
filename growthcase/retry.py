"""Exponential backoff retry for LLM calls that return unusable output."""

from __future__ import annotations

import random
import time
from typing import TYPE_CHECKING, TypeVar

import structlog

from growthcase.metrics import retry_attempts_total, retry_exhausted_total

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Every attempt failed; the last failure is chained as ``__cause__``."""

    def __init__(self, label: str, attempts: int) -> None:
        super().__init__(f"Failed after {attempts} attempts ({label})")
        self.label = label
        self.attempts = attempts


def backoff_delay(attempt: int, base_delay: float, max_delay: float, jitter: bool) -> float:
    """Delay before retry number *attempt* (0-based), capped at *max_delay*.

    Jitter scales the delay by a random factor in [0.5, 1.5).
    """
    delay = min(base_delay * (2**attempt), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    retryable: tuple[type[Exception], ...] = (Exception,),
    label: str | None = None,
) -> T:
    """Call *fn*, retrying up to *max_retries* times on *retryable* errors.

    Anything outside *retryable* propagates from the failing attempt.
    """
    fn_label = label or getattr(fn, "__name__", "fn")
    attempt = 0
    while True:
        try:
            return fn()
        except retryable as exc:
            if attempt >= max_retries:
                retry_exhausted_total.labels(fn_name=fn_label).inc()
                logger.error("Retries exhausted", fn=fn_label, attempts=attempt + 1, error=str(exc))
                raise RetryExhaustedError(fn_label, attempt + 1) from exc

            delay = backoff_delay(attempt, base_delay, max_delay, jitter)
            retry_attempts_total.labels(fn_name=fn_label).inc()
            logger.warning(
                "Retrying after failure",
                fn=fn_label,
                attempt=attempt + 1,
                max_retries=max_retries,
                delay_s=round(delay, 2),
                error=str(exc),
            )
            time.sleep(delay)
            attempt += 1
