from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from shift_planner.core.config import get_settings
from shift_planner.db import models  # noqa: F401  # register roster and schedule tables
from shift_planner.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite")


def _database_url(*, async_driver: bool) -> str:
    url = get_settings().database_url
    if async_driver:
        return url
    for driver in _ASYNC_DRIVERS:
        url = url.replace(driver, "")
    return url


def _configure(**kwargs) -> None:
    url = kwargs.get("url") or _database_url(async_driver=True)
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        # SQLite cannot ALTER constraints in place.
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit the schedule schema as SQL without a live connection."""
    _configure(
        url=_database_url(async_driver=False),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_database_url(async_driver=True), poolclass=pool.NullPool)

    async with engine.begin() as connection:
        await connection.run_sync(_run_with_connection)

    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
