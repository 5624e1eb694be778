"""Metro area CLI commands: backfill metro_area from CBSA names and report coverage."""

import asyncio

import typer

metro_app = typer.Typer()


@metro_app.command("sync")
def metro_sync() -> None:
    """Copy cbsa_name into every empty metro_area."""
    asyncio.run(_metro_sync())


async def _metro_sync() -> None:
    from housing_api.core.config import get_settings
    from housing_api.core.database import dispose_engine, get_session_factory, init_engine
    from housing_api.services.metro_service import get_metro_coverage, sync_metro_area

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            updated = await sync_metro_area(session)
            coverage = await get_metro_coverage(session)
    finally:
        await dispose_engine()

    typer.echo(f"Updated {updated} rows")
    typer.echo(f"metro_area populated: {coverage.has_metro_area}/{coverage.total} ({coverage.metro_area_pct}%)")


@metro_app.command("coverage")
def metro_coverage() -> None:
    """Report CBSA and metro_area coverage of housing_stats."""
    asyncio.run(_metro_coverage())


async def _metro_coverage() -> None:
    from housing_api.core.config import get_settings
    from housing_api.core.database import dispose_engine, get_session_factory, init_engine
    from housing_api.services.metro_service import get_metro_coverage

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            coverage = await get_metro_coverage(session)
    finally:
        await dispose_engine()

    typer.echo("\nMetro coverage:")
    typer.echo(f"  Total ZIPs:       {coverage.total}")
    typer.echo(f"  With CBSA name:   {coverage.has_cbsa}")
    typer.echo(f"  Distinct metros:  {coverage.distinct_metros}")
    typer.echo(f"  With metro_area:  {coverage.has_metro_area} ({coverage.metro_area_pct}%)")
