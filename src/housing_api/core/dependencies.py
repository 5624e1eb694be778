"""FastAPI dependency injection for database sessions and the ZIP resolver."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.core.config import Settings, get_settings
from housing_api.core.database import get_session_factory
from housing_api.lib.zip_resolver import ZipResolver


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_zip_resolver(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ZipResolver:
    """Build a request-scoped ZipResolver over the session's SQL collaborators."""
    from housing_api.services.zip_service import build_resolver

    return build_resolver(session, settings)
