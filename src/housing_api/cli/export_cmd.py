"""Export CLI commands for bulk housing statistics export."""

import asyncio
from pathlib import Path

import typer

export_app = typer.Typer()


@export_app.command("csv")
def export_csv(
    state: str | None = typer.Option(None, "--state", help="Two-letter state abbreviation"),
    zip_codes: str | None = typer.Option(None, "--zip-codes", help="Comma-separated ZIP codes"),
    output: Path | None = typer.Option(None, "--output", help="Output directory"),
) -> None:
    """Export housing records to a CSV file."""
    if not state and not zip_codes:
        typer.echo("Error: provide --state or --zip-codes", err=True)
        raise typer.Exit(code=2)
    asyncio.run(_export_csv(state, zip_codes, output))


async def _export_csv(state: str | None, zip_codes: str | None, output_dir: Path | None) -> None:
    """Async implementation of export."""
    from housing_api.core.config import get_settings
    from housing_api.core.database import dispose_engine, get_session_factory, init_engine
    from housing_api.lib.exporter import export_filename, write_csv
    from housing_api.services.stats_service import fetch_export_rows

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    zips = [z.strip() for z in zip_codes.split(",") if z.strip()] if zip_codes else None

    try:
        factory = get_session_factory()
        async with factory() as session:
            rows = await fetch_export_rows(session, zip_codes=zips, state_abbr=state)
    finally:
        await dispose_engine()

    if not rows:
        typer.echo("No data found")
        raise typer.Exit(code=1)

    export_dir = output_dir or Path(settings.export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / export_filename()
    count = write_csv(path, rows)

    typer.echo("\nExport completed:")
    typer.echo(f"  Records:    {count}")
    typer.echo(f"  File path:  {path}")
