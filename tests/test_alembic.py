"""Tests for Alembic migration infrastructure."""

from __future__ import annotations

from typing import TYPE_CHECKING

from alembic.config import Config
from sqlalchemy import create_engine, inspect

from alembic import command
from growthcase.db.orm import Base

if TYPE_CHECKING:
    from pathlib import Path

_TABLES = ("runs", "experiments", "outcomes", "activity_log")


def _config(db_path: Path) -> Config:
    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return cfg


def _inspect(db_path: Path):
    engine = create_engine(f"sqlite:///{db_path}")
    inspector = inspect(engine)
    return engine, inspector


class TestAlembicMigrations:
    def test_upgrade_to_head_creates_all_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        tables = set(inspector.get_table_names())
        engine.dispose()

        assert set(_TABLES) <= tables
        assert "alembic_version" in tables

    def test_migration_matches_orm_columns(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        migrated = {t: {c["name"] for c in inspector.get_columns(t)} for t in _TABLES}
        engine.dispose()

        for table in _TABLES:
            assert migrated[table] == set(Base.metadata.tables[table].columns.keys())

    def test_runs_index_for_candidate_lookup(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        command.upgrade(_config(db_path), "head")

        engine, inspector = _inspect(db_path)
        indexes = {i["name"]: i["column_names"] for i in inspector.get_indexes("runs")}
        engine.dispose()

        assert indexes["idx_runs_industry_created"] == ["industry", "created_at"]

    def test_downgrade_drops_all_tables(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test_alembic.db"
        cfg = _config(db_path)

        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine, inspector = _inspect(db_path)
        tables = set(inspector.get_table_names())
        engine.dispose()

        for table in _TABLES:
            assert table not in tables
