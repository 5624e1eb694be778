"""Typer CLI root application with serve and lookup commands."""

import typer

from housing_api.core.config import get_settings
from housing_api.core.logging import setup_logging

app = typer.Typer(name="housing-api", help="Housing research data API and maintenance CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "housing_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from housing_api.cli.db_cmd import db_app
    from housing_api.cli.export_cmd import export_app
    from housing_api.cli.lookup_cmd import lookup
    from housing_api.cli.metro_cmd import metro_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(metro_app, name="metro", help="Metro area maintenance commands")
    app.add_typer(export_app, name="export", help="Data export commands")
    app.command("lookup")(lookup)


_register_subcommands()
