"""Alembic environment for the housing research tables (async SQLAlchemy)."""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import async_engine_from_config

from housing_api.core.config import get_settings
from housing_api.models import HousingStats, ZipCounty
from housing_api.models.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Ingestion scripts share the database; autogenerate must leave their tables alone.
MANAGED_TABLES = frozenset({HousingStats.__tablename__, ZipCounty.__tablename__})


def include_object(obj, name, type_, reflected, compare_to) -> bool:  # type: ignore[no-untyped-def]
    """Restrict autogenerate to the housing_stats and hud_zip_county tables."""
    if type_ == "table":
        return name in MANAGED_TABLES
    table = getattr(obj, "table", None)
    return table is None or table.name in MANAGED_TABLES


def _configure_kwargs(schema: str | None, **kwargs: object) -> dict[str, object]:
    configure_kwargs: dict[str, object] = {
        "target_metadata": target_metadata,
        "compare_type": True,
        "include_object": include_object,
        **kwargs,
    }
    if schema is not None:
        configure_kwargs["version_table_schema"] = schema
    return configure_kwargs


def run_migrations_offline() -> None:
    """Emit migration SQL for the configured database without connecting."""
    settings = get_settings()
    context.configure(
        **_configure_kwargs(
            settings.database_schema,
            url=settings.database_url,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:  # type: ignore[no-untyped-def]
    """Run migrations synchronously within a connection."""
    schema = get_settings().database_schema
    if schema is not None:
        connection.execute(text(f'SET search_path TO "{schema}", public'))
    is_sqlite = connection.dialect.name == "sqlite"
    context.configure(**_configure_kwargs(schema, connection=connection, render_as_batch=is_sqlite))

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an async engine, ensure the schema exists, then migrate."""
    settings = get_settings()
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = settings.database_url

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        if settings.database_schema is not None:
            await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.database_schema}"'))
            await connection.commit()
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
