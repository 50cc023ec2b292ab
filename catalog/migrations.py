"""
Catalog Backend - Schema Migrations
=====================================

What:  Programmatic entry points for the Alembic migrations in alembic/.
How:   Builds an Alembic Config in code (no alembic.ini needed) and either
       lets alembic/env.py open its own engine (`main`) or hands it a live
       connection from a Database (`upgrade_schema`, `downgrade_schema`).
Who:   The `catalog-migrate` console script and the test suite.

Usage:
    $ DATABASE_URL=postgresql+asyncpg://... catalog-migrate
"""

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection

from catalog.database import Database

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "alembic"


def alembic_config(database_url: Optional[str] = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if database_url:
        # ConfigParser interpolation treats % as special
        config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def _run_command(connection: Connection, config: Config, action: str, revision: str) -> None:
    config.attributes["connection"] = connection
    getattr(command, action)(config, revision)


async def upgrade_schema(database: Database, revision: str = "head") -> None:
    """Apply migrations up to `revision` on the database's engine."""
    config = alembic_config()
    async with database.engine.begin() as conn:
        await conn.run_sync(_run_command, config, "upgrade", revision)
    logger.info("Schema upgraded to %s", revision)


async def downgrade_schema(database: Database, revision: str = "base") -> None:
    config = alembic_config()
    async with database.engine.begin() as conn:
        await conn.run_sync(_run_command, config, "downgrade", revision)
    logger.info("Schema downgraded to %s", revision)


def main() -> None:
    """Console entry point: upgrade DATABASE_URL to the latest revision."""
    from catalog.config import settings
    from catalog.main import setup_logging

    setup_logging(settings.log_level)
    logger.info("Applying migrations from %s", MIGRATIONS_DIR)
    command.upgrade(alembic_config(settings.database_url), "head")
