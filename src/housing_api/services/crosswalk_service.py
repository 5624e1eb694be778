"""SQL-backed postal crosswalk over the hud_zip_county table."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.lib.zip_resolver import BaseCrosswalk, CrosswalkEntry, StoreUnavailableError
from housing_api.models.zip_county import ZipCounty

_SOURCE = "hud_zip_county"


class SqlCrosswalk(BaseCrosswalk):
    """ZIP-to-county crosswalk backed by an async SQLAlchemy session.

    Args:
        session: Request-scoped database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def entries_for_zip(self, zip_code: str) -> list[CrosswalkEntry]:
        """Return county pairings for a ZIP, largest address share first."""
        query = (
            select(ZipCounty)
            .where(ZipCounty.zip_code == zip_code)
            .order_by(ZipCounty.tot_ratio.desc(), ZipCounty.county_fips)
        )
        try:
            result = await self._session.execute(query)
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(_SOURCE, f"entries_for_zip failed: {e.__class__.__name__}") from e

        return [
            CrosswalkEntry(
                zip_code=row.zip_code,
                county_fips=row.county_fips,
                pref_city=row.pref_city,
                state_abbr=row.state_abbr,
                res_ratio=float(row.res_ratio),
                tot_ratio=float(row.tot_ratio),
            )
            for row in rows
        ]

    async def zips_in_county(self, county_fips: str) -> list[str]:
        query = (
            select(ZipCounty.zip_code)
            .where(ZipCounty.county_fips == county_fips, ZipCounty.res_ratio > 0)
            .distinct()
            .order_by(ZipCounty.zip_code)
        )
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(_SOURCE, f"zips_in_county failed: {e.__class__.__name__}") from e
        return list(result.scalars().all())
