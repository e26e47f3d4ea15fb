"""Exception types surfaced by the case library."""

from __future__ import annotations


class CaseLibraryError(Exception):
    """Base class for all growthcase errors."""


class NotFoundError(CaseLibraryError):
    """A caller-supplied identifier does not resolve to a record."""


class UnavailableError(CaseLibraryError):
    """The persistence layer could not be reached or failed internally."""


class InvalidInputError(CaseLibraryError, ValueError):
    """Malformed input, rejected before any persistence call."""


class AnalysisError(CaseLibraryError):
    """The LLM could not produce a usable analysis."""
