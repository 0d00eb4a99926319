"""
Alembic environment for PropertyPulse.

The database URL comes from application settings (``CONFIG`` YAML or the
environment) and can be overridden per run with ``alembic -x url=...``.
Migrations run on an async engine; SQLite gets batch mode so ALTERs work.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context
from propertypulse_backend.config import get_settings
from propertypulse_backend.database import Base, import_models

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

import_models()
target_metadata = Base.metadata


def database_url() -> str:
    """``-x url=...`` wins over the configured ``DATABASE_URL``."""
    override = context.get_x_argument(as_dictionary=True).get("url")
    return override or get_settings().database_url


def configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_offline(url: str) -> None:
    """Write the migration SQL instead of executing it."""
    configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def migrate(connection: Connection) -> None:
    configure(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    engine = async_engine_from_config(
        {**config.get_section(config.config_ini_section, {}), "sqlalchemy.url": url},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline(database_url())
else:
    asyncio.run(run_online(database_url()))
