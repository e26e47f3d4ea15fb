"""Port interfaces (Protocols) between the core and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from pydantic import BaseModel

    from growthcase.models.case import ExperimentRecord
    from growthcase.models.experiment import ExperimentStatus
    from growthcase.models.run import Industry, Run

T = TypeVar("T", bound="BaseModel")


@runtime_checkable
class CaseRepository(Protocol):
    """Read side of the case library consumed by similar-case ranking."""

    def get_run(self, run_id: str) -> Run | None: ...

    def list_runs(
        self,
        *,
        industry: Industry | None = None,
        exclude_id: str | None = None,
        limit: int | None = None,
    ) -> list[Run]:
        """Runs ordered most recently created first."""
        ...

    def list_experiments_for_run(
        self,
        run_id: str,
        status: ExperimentStatus | None = None,
    ) -> list[ExperimentRecord]:
        """Experiments of a run, each with its outcomes most recent first."""
        ...


@runtime_checkable
class LLMPort(Protocol):
    """Interface for structured LLM generation."""

    @property
    def is_available(self) -> bool: ...

    def generate(
        self,
        prompt: str,
        response_model: type[T],
        system: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> T: ...
