"""ZIP lookup CLI command: runs the resolver against the configured database."""

import asyncio

import typer


def lookup(
    zip_code: str = typer.Argument(..., help="Five-digit ZIP code"),
) -> None:
    """Resolve a ZIP code and print the result as JSON."""
    code = asyncio.run(_lookup(zip_code))
    raise typer.Exit(code=code)


async def _lookup(zip_code: str) -> int:
    """Async implementation of lookup. Returns the process exit code."""
    from housing_api.core.config import get_settings
    from housing_api.core.database import dispose_engine, get_session_factory, init_engine
    from housing_api.lib.zip_resolver import InvalidZipCodeError, NotFoundResult, TransientStoreError
    from housing_api.services.zip_service import resolve_zip, to_response

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            result = await resolve_zip(session, zip_code, settings)
    except InvalidZipCodeError as e:
        typer.echo(f"Error: {e}", err=True)
        return 2
    except TransientStoreError as e:
        typer.echo(f"Error: {e.step} failed for {e.zip_code}: {e.message}", err=True)
        return 3
    finally:
        await dispose_engine()

    typer.echo(to_response(result).model_dump_json(indent=2))
    return 1 if isinstance(result, NotFoundResult) else 0
