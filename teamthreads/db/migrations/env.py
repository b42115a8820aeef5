"""Alembic async migration environment for the team threads schema.

The database URL comes from ``-x database_url=...`` when given, otherwise
from ``DATABASE_URL`` via Settings. Column types are compared on
autogenerate so changes to the role and message-type enums are detected.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from teamthreads.db.base import Base
from teamthreads.db.models import *  # noqa: F403 - registers every table on Base.metadata
from teamthreads.settings import load_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    """Resolve the database URL for this migration run.

    Returns:
        Async database URL (postgresql+asyncpg://...).

    Raises:
        ValueError: If neither ``-x database_url`` nor DATABASE_URL is set.
    """
    override = context.get_x_argument(as_dictionary=True).get("database_url")
    if override:
        return override
    settings = load_settings()
    if settings.database_url is None:
        raise ValueError("DATABASE_URL must be set (or pass -x database_url=...) for migrations")
    return settings.database_url


def _configure(**kwargs: object) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting to the database."""
    _configure(url=get_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:  # type: ignore[no-untyped-def]
    _configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations on a throwaway async engine."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = get_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
