"""Metro service: one-shot backfill of metro_area from the raw CBSA name.

This is the only write the API performs against housing_stats. It copies
``cbsa_name`` into ``metro_area`` wherever the normalized field is empty,
leaving rows that already carry a metro name untouched.
"""

from loguru import logger
from sqlalchemy import and_, distinct, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.models.housing_stats import HousingStats
from housing_api.schemas.quality import MetroCoverageResponse


def _non_empty(column):  # type: ignore[no-untyped-def]
    return and_(column.is_not(None), column != "")


async def sync_metro_area(session: AsyncSession) -> int:
    """Copy cbsa_name into empty metro_area values.

    Args:
        session: Database session.

    Returns:
        Number of rows updated.
    """
    stmt = (
        update(HousingStats)
        .where(
            _non_empty(HousingStats.cbsa_name),
            or_(HousingStats.metro_area.is_(None), HousingStats.metro_area == ""),
        )
        .values(metro_area=HousingStats.cbsa_name, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    await session.commit()
    updated = result.rowcount or 0
    logger.info(f"Synced cbsa_name -> metro_area: {updated} rows updated")
    return updated


async def get_metro_coverage(session: AsyncSession) -> MetroCoverageResponse:
    """Report how many rows carry a CBSA name and a normalized metro_area."""
    query = select(
        func.count(),
        func.count(HousingStats.cbsa_name).filter(_non_empty(HousingStats.cbsa_name)),
        func.count(distinct(HousingStats.cbsa_name)).filter(_non_empty(HousingStats.cbsa_name)),
        func.count().filter(_non_empty(HousingStats.metro_area)),
    )
    total, has_cbsa, distinct_metros, has_metro_area = (await session.execute(query)).one()
    return MetroCoverageResponse(
        total=total,
        has_cbsa=has_cbsa,
        distinct_metros=distinct_metros,
        has_metro_area=has_metro_area,
    )
