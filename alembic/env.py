"""Alembic environment configuration for growthcase.

Targets the growthcase ORM metadata on SQLite, with render_as_batch=True
so ALTER TABLE works through table rebuilds.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from growthcase.db.orm import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

_DEFAULT_URL = "sqlite:///data/growthcase.db"


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without a connection."""
    url = config.get_main_option("sqlalchemy.url", _DEFAULT_URL)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against a live database."""
    from growthcase.db.engine import create_db_engine

    url = config.get_main_option("sqlalchemy.url", _DEFAULT_URL)
    # sqlite:///relative/path or sqlite:////absolute/path
    db_path = url.replace("sqlite:///", "", 1)
    connectable = create_db_engine(db_path)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
