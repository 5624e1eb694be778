"""End-to-end ZIP resolution over the SQL store and crosswalk (in-memory SQLite)."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.core.config import Settings
from housing_api.lib.zip_resolver import (
    CountyFallbackResult,
    FoundResult,
    NotFoundResult,
    StoreUnavailableError,
    TransientStoreError,
    ZipType,
)
from housing_api.services import zip_service
from housing_api.services.crosswalk_service import SqlCrosswalk
from housing_api.services.housing_store import SqlHousingStore
from housing_api.services.zip_service import get_averages_cache, resolve_zip, to_response


class TestSqlHousingStore:
    @pytest.mark.asyncio
    async def test_lookup_by_zip(self, seeded_session: AsyncSession) -> None:
        record = await SqlHousingStore(seeded_session).lookup_by_zip("78701")
        assert record is not None
        assert record.county_name == "Travis"
        assert record.homeownership_rate == 45.2

    @pytest.mark.asyncio
    async def test_lookup_missing(self, seeded_session: AsyncSession) -> None:
        assert await SqlHousingStore(seeded_session).lookup_by_zip("78711") is None

    @pytest.mark.asyncio
    async def test_lookup_many(self, seeded_session: AsyncSession) -> None:
        records = await SqlHousingStore(seeded_session).lookup_many_by_zip({"78702", "78701", "00000"})
        assert [r.zip_code for r in records] == ["78701", "78702"]

    @pytest.mark.asyncio
    async def test_global_averages_exclude_rows_without_homeownership(self, seeded_session: AsyncSession) -> None:
        averages = await SqlHousingStore(seeded_session).global_averages()
        assert averages.avg_homeownership == pytest.approx(53.3333, rel=1e-4)
        assert averages.avg_home_price == pytest.approx(1300000.0)
        assert averages.avg_rent == pytest.approx(2100.0)
        assert averages.avg_income == pytest.approx(108000.0)

    @pytest.mark.asyncio
    async def test_database_error_wrapped(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("server closed the connection"))
        with pytest.raises(StoreUnavailableError, match="housing_stats"):
            await SqlHousingStore(session).lookup_by_zip("78701")


class TestSqlCrosswalk:
    @pytest.mark.asyncio
    async def test_entries_ordered_by_total_ratio(self, seeded_session: AsyncSession) -> None:
        entries = await SqlCrosswalk(seeded_session).entries_for_zip("78799")
        assert [e.county_fips for e in entries] == ["48453", "48491"]
        assert entries[0].res_ratio == 0.9

    @pytest.mark.asyncio
    async def test_zips_in_county_exclude_non_residential(self, seeded_session: AsyncSession) -> None:
        zips = await SqlCrosswalk(seeded_session).zips_in_county("48453")
        assert zips == ["78701", "78702", "78703", "78799"]

    @pytest.mark.asyncio
    async def test_database_error_wrapped(self) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        with pytest.raises(StoreUnavailableError, match="hud_zip_county"):
            await SqlCrosswalk(session).entries_for_zip("78711")


class TestResolveZip:
    @pytest.mark.asyncio
    async def test_found(self, seeded_session: AsyncSession, settings: Settings) -> None:
        result = await resolve_zip(seeded_session, "78701", settings)
        assert isinstance(result, FoundResult)
        response = to_response(result)
        assert response.record.zip_code == "78701"
        assert response.national_comparison.national_avg_homeownership == 53.33
        assert response.national_comparison.national_avg_home_price == 1300000
        assert response.national_comparison.national_avg_rent == 2100
        assert response.national_comparison.national_avg_income == 108000

    @pytest.mark.asyncio
    async def test_non_residential_fallback(self, seeded_session: AsyncSession, settings: Settings) -> None:
        result = await resolve_zip(seeded_session, "78711", settings)
        assert isinstance(result, CountyFallbackResult)
        assert result.zip_type == ZipType.NON_RESIDENTIAL
        aggregate = result.county_aggregate
        assert aggregate is not None
        assert aggregate.zip_count == 2
        assert aggregate.avg_median_home_price == 600000.0
        assert aggregate.avg_homeownership_rate == pytest.approx(50.0)
        assert aggregate.total_population == 30000
        assert aggregate.county_name == "Travis"

        response = to_response(result)
        assert response.note.startswith("ZIP 78711 (AUSTIN, TX) has no residential addresses")
        assert response.county_aggregate.county_fips == "48453"

    @pytest.mark.asyncio
    async def test_residential_no_census(self, seeded_session: AsyncSession, settings: Settings) -> None:
        result = await resolve_zip(seeded_session, "78799", settings)
        assert isinstance(result, CountyFallbackResult)
        assert result.zip_type == ZipType.RESIDENTIAL_NO_CENSUS
        assert result.requested_zip.county_fips == "48453"

    @pytest.mark.asyncio
    async def test_county_without_data(self, seeded_session: AsyncSession, settings: Settings) -> None:
        result = await resolve_zip(seeded_session, "99950", settings)
        assert isinstance(result, CountyFallbackResult)
        assert result.county_aggregate is None
        assert to_response(result).county_aggregate is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("zip_code", "expected"),
        [("00000", ZipType.NON_RESIDENTIAL_OR_UNKNOWN), ("09499", ZipType.MILITARY), ("00802", ZipType.US_TERRITORY)],
    )
    async def test_not_found(
        self, seeded_session: AsyncSession, settings: Settings, zip_code: str, expected: ZipType
    ) -> None:
        result = await resolve_zip(seeded_session, zip_code, settings)
        assert isinstance(result, NotFoundResult)
        assert result.classification.zip_type == expected
        assert result.sources_checked == [settings.census_vintage, settings.crosswalk_vintage]

    @pytest.mark.asyncio
    async def test_repeat_resolution_identical(self, seeded_session: AsyncSession, settings: Settings) -> None:
        first = to_response(await resolve_zip(seeded_session, "78711", settings))
        second = to_response(await resolve_zip(seeded_session, "78711", settings))
        assert first == second

    @pytest.mark.asyncio
    async def test_store_failure_is_transient(self, settings: Settings) -> None:
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        with pytest.raises(TransientStoreError) as exc_info:
            await resolve_zip(session, "78701", settings)
        assert exc_info.value.step == "primary_lookup"


class TestAveragesCache:
    def test_shared_while_ttl_unchanged(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(zip_service, "_averages_cache", None)
        assert get_averages_cache(300) is get_averages_cache(300)

    def test_replaced_when_ttl_changes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(zip_service, "_averages_cache", None)
        first = get_averages_cache(300)
        second = get_averages_cache(0)
        assert second is not first
        assert second.ttl_seconds == 0
        assert not second.enabled
