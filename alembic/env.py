"""
Alembic Migration Environment
===============================

What:  Runs the catalog migrations, from the CLI or from application code.
How:   Three entry paths:
         - offline (`alembic upgrade head --sql`): emit SQL for the URL
         - online CLI: open an unpooled async engine for the URL
         - programmatic: reuse a sync Connection passed in
           `config.attributes["connection"]` (see catalog.migrations)
Who:   `alembic upgrade head`, catalog.migrations.upgrade_schema, tests.

URL resolution:
    sqlalchemy.url set on the Config wins; otherwise DATABASE_URL via
    catalog.config. alembic.ini carries no URL.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from catalog.database import Base

# Registers the products table on Base.metadata for --autogenerate
from catalog.models.product import Product  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def database_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from catalog.config import settings

    config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    return settings.database_url


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    # SQLite cannot ALTER most column properties in place
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an unpooled async engine and apply pending migrations."""
    database_url()
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        asyncio.run(run_async_migrations())
    else:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
