"""
Alembic Migration Environment
===============================

What:  Runs Alembic against the async SQLAlchemy setup of the service.
How:   The URL comes from contact_service Settings (DATABASE_URL and
       DATABASE_NAME), not from alembic.ini; migrations run through an
       async engine bridged with connection.run_sync().
Who:   Invoked by the alembic CLI from the repository root.
When:  On deploy, before the service starts with DB_CREATE_SCHEMA=false.

Usage:
    alembic upgrade head          # apply pending migrations
    alembic upgrade head --sql    # print the SQL instead (offline mode)
    alembic downgrade -1          # roll back one revision

    The table name follows COLLECTION, so the same migration creates
    "contacts" or whatever name the deployment configures.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from contact_service.config import settings
from contact_service.database import Base

# Registers the contacts table on Base.metadata for --autogenerate
from contact_service.models.contact import Contact  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# "%" must be escaped for ConfigParser interpolation
config.set_main_option(
    "sqlalchemy.url",
    settings.sqlalchemy_url.render_as_string(hide_password=False).replace("%", "%%"),
)


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting to the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Configure the migration context on a sync connection and run it."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an unpooled async engine and apply pending migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point for online mode; drives the async runner to completion."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
