"""SQL-backed housing record store over the housing_stats table."""

from collections.abc import Collection

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.lib.zip_resolver import BaseHousingStore, HousingRecord, NationalAverages, StoreUnavailableError
from housing_api.models.housing_stats import HousingStats

_SOURCE = "housing_stats"

# HousingRecord fields copied straight from the ORM row
_RECORD_FIELDS = tuple(HousingRecord.__dataclass_fields__)


def to_housing_record(row: HousingStats) -> HousingRecord:
    """Convert an ORM row into the resolver's HousingRecord."""
    return HousingRecord(**{name: getattr(row, name) for name in _RECORD_FIELDS})


def _as_float(value: object) -> float | None:
    return float(value) if value is not None else None  # type: ignore[arg-type]


class SqlHousingStore(BaseHousingStore):
    """Housing record store backed by an async SQLAlchemy session.

    Args:
        session: Request-scoped database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lookup_by_zip(self, zip_code: str) -> HousingRecord | None:
        try:
            result = await self._session.execute(select(HousingStats).where(HousingStats.zip_code == zip_code))
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(_SOURCE, f"lookup_by_zip failed: {e.__class__.__name__}") from e
        return to_housing_record(row) if row is not None else None

    async def lookup_many_by_zip(self, zip_codes: Collection[str]) -> list[HousingRecord]:
        if not zip_codes:
            return []
        try:
            result = await self._session.execute(
                select(HousingStats).where(HousingStats.zip_code.in_(list(zip_codes))).order_by(HousingStats.zip_code)
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(_SOURCE, f"lookup_many_by_zip failed: {e.__class__.__name__}") from e
        return [to_housing_record(row) for row in rows]

    async def global_averages(self) -> NationalAverages:
        query = select(
            func.avg(HousingStats.homeownership_rate),
            func.avg(HousingStats.median_home_price),
            func.avg(HousingStats.median_rent),
            func.avg(HousingStats.median_household_income),
        ).where(HousingStats.homeownership_rate.is_not(None))
        try:
            result = await self._session.execute(query)
            homeownership, price, rent, income = result.one()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(_SOURCE, f"global_averages failed: {e.__class__.__name__}") from e
        return NationalAverages(
            avg_homeownership=_as_float(homeownership),
            avg_home_price=_as_float(price),
            avg_rent=_as_float(rent),
            avg_income=_as_float(income),
        )
