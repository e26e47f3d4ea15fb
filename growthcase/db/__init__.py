"""Database package: engine, ORM models, and case library facade."""

from growthcase.db.engine import create_db_engine, create_session_factory
from growthcase.db.facade import Database, LogEntryDict
from growthcase.db.orm import ActivityLogRow, Base, ExperimentRow, OutcomeRow, RunRow

__all__ = [
    "ActivityLogRow",
    "Base",
    "Database",
    "ExperimentRow",
    "LogEntryDict",
    "OutcomeRow",
    "RunRow",
    "create_db_engine",
    "create_session_factory",
]
