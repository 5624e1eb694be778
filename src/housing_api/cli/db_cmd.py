"""Schema migration commands for the housing_stats and hud_zip_county tables."""

import typer
from loguru import logger

db_app = typer.Typer()

_ALEMBIC_INI = "alembic.ini"


def _alembic_config():  # type: ignore[no-untyped-def]
    from alembic.config import Config

    return Config(_ALEMBIC_INI)


def _target() -> str:
    """Describe the configured database with the password masked."""
    from sqlalchemy.engine import make_url

    from housing_api.core.config import get_settings

    settings = get_settings()
    target = make_url(settings.database_url).render_as_string(hide_password=True)
    if settings.database_schema:
        target = f"{target} (schema {settings.database_schema})"
    return target


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
) -> None:
    """Create or migrate housing_stats and hud_zip_county up to the target revision."""
    from alembic import command

    logger.info(f"Migrating housing tables on {_target()} to {revision}")
    command.upgrade(_alembic_config(), revision)
    logger.info(f"Housing tables at revision {revision}")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
) -> None:
    """Roll the housing schema back to the target revision."""
    from alembic import command

    logger.warning(f"Rolling housing tables on {_target()} back to {revision}")
    command.downgrade(_alembic_config(), revision)
    logger.info(f"Housing tables rolled back to {revision}")


@db_app.command()
def current() -> None:
    """Show which housing schema revision the database is at."""
    from alembic import command

    typer.echo(f"Database: {_target()}")
    command.current(_alembic_config(), verbose=True)
