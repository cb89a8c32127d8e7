"""Alembic environment for the Farmer Social schema.

The URL is resolved in this order: ``alembic -x url=...``, ``ALEMBIC_URL``,
``sqlalchemy.url`` from alembic.ini, then the application settings
(``DATABASE_URL`` / ``TEST_DATABASE_URL``).
"""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from farmer_social.core.settings import settings
from farmer_social.db.session import Base, Database

config = context.config

# Callers embedding Alembic (the test suite) keep their own logging setup.
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def resolve_url() -> str:
    """Return the database URL migrations should run against."""
    x_url = context.get_x_argument(as_dictionary=True).get("url")
    return (
        x_url
        or os.getenv("ALEMBIC_URL")
        or config.get_main_option("sqlalchemy.url")
        or settings.effective_database_url
    )


def include_object(obj, name, type_, reflected, compare_to):
    """Exclude Alembic's own bookkeeping table from autogenerate output."""
    return not (type_ == "table" and name == "alembic_version")


def run_migrations_offline() -> None:
    """Emit SQL for the resolved URL without connecting."""
    context.configure(
        url=resolve_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate through the same engine setup the application uses."""
    # NullPool: a migration run holds one short-lived connection.
    database = Database(resolve_url(), poolclass=pool.NullPool)
    try:
        with database.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                include_object=include_object,
                compare_type=True,
                # SQLite cannot ALTER most constraints in place.
                render_as_batch=connection.dialect.name == "sqlite",
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        database.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
