"""Alembic environment configuration for versionwatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from versionwatch.adapters.sqlalchemy import mapper_registry, start_mappers
from versionwatch.config.storage import get_database_uri

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

start_mappers()

target_metadata = mapper_registry.metadata


def _run_on(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations() -> None:
    """Migrate over the caller's connection, or over ``DATABASE_URI`` from the CLI."""

    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        _run_on(existing_connection)
        return

    url = config.get_main_option("sqlalchemy.url") or get_database_uri()
    engine = create_engine(url, poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _run_on(connection)
    finally:
        engine.dispose()


run_migrations()
