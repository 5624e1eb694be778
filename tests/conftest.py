"""Shared test fixtures for settings, async database engine, sessions, and seeded housing rows."""

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from housing_api.core.config import Settings
from housing_api.models import HousingStats, ZipCounty
from housing_api.models.base import Base


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        national_averages_ttl=0,
        store_query_timeout=2.0,
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
async def async_engine(settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a per-test async session."""
    session_factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


def _crosswalk(zip_code: str, county_fips: str, city: str, state: str, res: float, tot: float) -> ZipCounty:
    return ZipCounty(
        zip_code=zip_code,
        county_fips=county_fips,
        pref_city=city,
        state_abbr=state,
        res_ratio=res,
        tot_ratio=tot,
    )


@pytest.fixture
async def seeded_session(async_session: AsyncSession) -> AsyncSession:
    """Session over a small Texas/California dataset with crosswalk rows.

    Travis County (48453): 78701 and 78702 have ZCTA rows, 78711 is a
    government PO-box ZIP with res_ratio 0, 78799 is residential but has no
    ZCTA row. 78703 has no homeownership data and must be ignored by
    aggregates.
    """
    async_session.add_all(
        [
            HousingStats(
                zip_code="78701",
                county_name="Travis",
                state_abbr="TX",
                state_name="Texas",
                cbsa_name="Austin-Round Rock-San Marcos, TX",
                population=10000,
                median_age=33.4,
                median_household_income=98000.0,
                homeownership_rate=45.2,
                vacancy_rate=12.0,
                median_home_price=600000.0,
                median_rent=2100.0,
                owner_occupied_units=2000,
                renter_occupied_units=2400,
                total_housing_units=5000,
            ),
            HousingStats(
                zip_code="78702",
                county_name="Travis",
                state_abbr="TX",
                state_name="Texas",
                metro_area="Austin-Round Rock-San Marcos, TX",
                cbsa_name="Austin-Round Rock-San Marcos, TX",
                population=20000,
                median_age=31.0,
                median_household_income=72000.0,
                homeownership_rate=54.8,
                vacancy_rate=8.0,
                median_home_price=None,
                median_rent=1500.0,
                owner_occupied_units=4000,
                renter_occupied_units=3300,
                total_housing_units=8000,
            ),
            HousingStats(
                zip_code="78703",
                county_name="Travis",
                state_abbr="TX",
                state_name="Texas",
                population=500,
                homeownership_rate=None,
                median_home_price=9000000.0,
            ),
            HousingStats(
                zip_code="90210",
                county_name="Los Angeles",
                state_abbr="CA",
                state_name="California",
                metro_area="Los Angeles-Long Beach-Anaheim, CA",
                cbsa_name="Los Angeles-Long Beach-Anaheim, CA",
                population=21000,
                median_age=46.0,
                median_household_income=154000.0,
                homeownership_rate=60.0,
                vacancy_rate=9.0,
                median_home_price=2000000.0,
                median_rent=2700.0,
            ),
            _crosswalk("78701", "48453", "AUSTIN", "TX", 1.0, 1.0),
            _crosswalk("78702", "48453", "AUSTIN", "TX", 1.0, 1.0),
            _crosswalk("78703", "48453", "AUSTIN", "TX", 1.0, 1.0),
            _crosswalk("78711", "48453", "AUSTIN", "TX", 0.0, 1.0),
            _crosswalk("78799", "48453", "AUSTIN", "TX", 0.9, 0.8),
            _crosswalk("78799", "48491", "AUSTIN", "TX", 0.1, 0.2),
            _crosswalk("99950", "02130", "KETCHIKAN", "AK", 1.0, 1.0),
        ]
    )
    await async_session.commit()
    return async_session
