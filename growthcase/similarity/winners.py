"""Winning-experiment extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from growthcase.models.experiment import ExperimentStatus
from growthcase.models.outcome import OutcomeStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from growthcase.models.case import ExperimentRecord


def is_winner(record: ExperimentRecord) -> bool:
    """Completed, with at least one Win among its outcomes (any trial counts)."""
    if record.experiment.status != ExperimentStatus.COMPLETED:
        return False
    return any(o.outcome_status == OutcomeStatus.WIN for o in record.outcomes)


def winning_experiments(records: Iterable[ExperimentRecord]) -> list[ExperimentRecord]:
    """Filter a run's experiments down to winners, preserving input order."""
    return [r for r in records if is_winner(r)]
