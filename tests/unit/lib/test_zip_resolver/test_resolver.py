"""Tests for ZipResolver against in-memory collaborators."""

import pytest

from housing_api.lib.zip_resolver import (
    CountyFallbackResult,
    CrosswalkEntry,
    FoundResult,
    InvalidZipCodeError,
    NationalAveragesCache,
    NotFoundResult,
    ResolutionStatus,
    ResolutionStep,
    TransientStoreError,
    ZipResolver,
    ZipType,
    dominant_entry,
)


@pytest.fixture
def resolver(store, crosswalk, sources) -> ZipResolver:
    return ZipResolver(store, crosswalk, sources=sources, timeout=1.0)


def _entry(county_fips: str, tot_ratio: float) -> CrosswalkEntry:
    return CrosswalkEntry(
        zip_code="78799",
        county_fips=county_fips,
        pref_city="AUSTIN",
        state_abbr="TX",
        res_ratio=0.5,
        tot_ratio=tot_ratio,
    )


class TestFound:
    @pytest.mark.asyncio
    async def test_found_with_national_comparison(self, resolver: ZipResolver) -> None:
        result = await resolver.resolve("78701")
        assert isinstance(result, FoundResult)
        assert result.status == ResolutionStatus.FOUND
        assert result.record.zip_code == "78701"
        assert result.record.homeownership_rate == 45.2
        comparison = result.national_comparison
        assert comparison.avg_homeownership is not None
        assert comparison.avg_home_price is not None
        assert comparison.avg_rent is not None
        assert comparison.avg_income is not None

    @pytest.mark.asyncio
    async def test_found_skips_crosswalk(self, resolver: ZipResolver, crosswalk) -> None:
        crosswalk.fail_on = "entries_for_zip"
        result = await resolver.resolve("78702")
        assert isinstance(result, FoundResult)

    @pytest.mark.asyncio
    async def test_averages_cache_is_shared(self, store, crosswalk, sources) -> None:
        cache = NationalAveragesCache(300)
        resolver = ZipResolver(store, crosswalk, sources=sources, averages_cache=cache)
        await resolver.resolve("78701")
        await resolver.resolve("78702")
        assert store.calls["global_averages"] == 1


class TestCountyFallback:
    @pytest.mark.asyncio
    async def test_non_residential(self, resolver: ZipResolver) -> None:
        result = await resolver.resolve("78711")
        assert isinstance(result, CountyFallbackResult)
        assert result.status == ResolutionStatus.COUNTY_FALLBACK
        assert result.zip_type == ZipType.NON_RESIDENTIAL
        assert result.requested_zip.county_fips == "48453"
        assert result.county_aggregate is not None
        assert result.county_aggregate.zip_count == 2
        assert result.county_aggregate.avg_median_home_price == 300000.0

    @pytest.mark.asyncio
    async def test_residential_no_census_uses_dominant_county(self, resolver: ZipResolver) -> None:
        result = await resolver.resolve("78799")
        assert isinstance(result, CountyFallbackResult)
        assert result.zip_type == ZipType.RESIDENTIAL_NO_CENSUS
        assert result.requested_zip.county_fips == "48453"
        assert result.requested_zip.res_ratio == 0.9

    @pytest.mark.asyncio
    async def test_county_without_data_has_null_aggregate(self, resolver: ZipResolver) -> None:
        result = await resolver.resolve("99950")
        assert isinstance(result, CountyFallbackResult)
        assert result.county_aggregate is None
        assert result.zip_type == ZipType.RESIDENTIAL_NO_CENSUS

    @pytest.mark.asyncio
    async def test_military_range_in_crosswalk_keeps_residential_tag(self, store, crosswalk, sources) -> None:
        crosswalk.rows.append(
            {
                "zip_code": "09012",
                "county_fips": "48453",
                "pref_city": "APO",
                "state_abbr": "AE",
                "res_ratio": 0.0,
                "tot_ratio": 1.0,
            }
        )
        result = await ZipResolver(store, crosswalk, sources=sources).resolve("09012")
        assert isinstance(result, CountyFallbackResult)
        assert result.zip_type == ZipType.NON_RESIDENTIAL

    @pytest.mark.asyncio
    async def test_sources_reported(self, resolver: ZipResolver, sources) -> None:
        result = await resolver.resolve("78711")
        assert isinstance(result, CountyFallbackResult)
        assert result.sources == sources


class TestNotFound:
    @pytest.mark.asyncio
    async def test_unknown(self, resolver: ZipResolver, sources) -> None:
        result = await resolver.resolve("00000")
        assert isinstance(result, NotFoundResult)
        assert result.status == ResolutionStatus.NOT_FOUND
        assert result.classification.zip_type == ZipType.NON_RESIDENTIAL_OR_UNKNOWN
        assert result.classification.suggestion
        assert result.sources_checked == sources.checked

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("zip_code", "expected"),
        [
            ("09499", ZipType.MILITARY),
            ("09500", ZipType.NON_RESIDENTIAL_OR_UNKNOWN),
            ("34099", ZipType.MILITARY),
            ("96601", ZipType.MILITARY),
            ("00802", ZipType.US_TERRITORY),
            ("96799", ZipType.US_TERRITORY),
        ],
    )
    async def test_classification(self, resolver: ZipResolver, zip_code: str, expected: ZipType) -> None:
        result = await resolver.resolve(zip_code)
        assert isinstance(result, NotFoundResult)
        assert result.classification.zip_type == expected


class TestIdempotence:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("zip_code", ["78701", "78711", "00000"])
    async def test_repeat_resolution_is_identical(self, resolver: ZipResolver, zip_code: str) -> None:
        assert await resolver.resolve(zip_code) == await resolver.resolve(zip_code)


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("zip_code", ["", "7870", "787011", "7870a", " 7870", "７８７０１", "78701\n", "09000\n"])
    async def test_invalid_zip_rejected_before_store(self, resolver: ZipResolver, store, zip_code: str) -> None:
        with pytest.raises(InvalidZipCodeError):
            await resolver.resolve(zip_code)
        assert store.calls["lookup_by_zip"] == 0


class TestTransientErrors:
    @pytest.mark.asyncio
    async def test_primary_store_failure(self, resolver: ZipResolver, store) -> None:
        store.fail_on = "lookup_by_zip"
        with pytest.raises(TransientStoreError) as exc_info:
            await resolver.resolve("78701")
        assert exc_info.value.step == ResolutionStep.PRIMARY_LOOKUP
        assert exc_info.value.zip_code == "78701"

    @pytest.mark.asyncio
    async def test_crosswalk_failure_is_not_not_found(self, resolver: ZipResolver, crosswalk) -> None:
        crosswalk.fail_on = "entries_for_zip"
        with pytest.raises(TransientStoreError) as exc_info:
            await resolver.resolve("00000")
        assert exc_info.value.step == ResolutionStep.CROSSWALK_LOOKUP

    @pytest.mark.asyncio
    async def test_aggregate_failure_carries_county(self, resolver: ZipResolver, crosswalk) -> None:
        crosswalk.fail_on = "zips_in_county"
        with pytest.raises(TransientStoreError) as exc_info:
            await resolver.resolve("78711")
        assert exc_info.value.step == ResolutionStep.COUNTY_FALLBACK
        assert exc_info.value.county_fips == "48453"

    @pytest.mark.asyncio
    async def test_timeout(self, store, crosswalk, sources) -> None:
        store.delay = 0.5
        resolver = ZipResolver(store, crosswalk, sources=sources, timeout=0.05)
        with pytest.raises(TransientStoreError, match="timed out"):
            await resolver.resolve("78701")

    @pytest.mark.asyncio
    async def test_malformed_crosswalk_row(self, resolver: ZipResolver, crosswalk) -> None:
        crosswalk.rows.append(
            {
                "zip_code": "12345",
                "county_fips": "36001",
                "pref_city": "X",
                "state_abbr": "NY",
                "res_ratio": 1.5,
                "tot_ratio": 1.0,
            }
        )
        with pytest.raises(TransientStoreError, match="malformed data"):
            await resolver.resolve("12345")


class TestDominantEntry:
    def test_largest_total_ratio_wins(self) -> None:
        assert dominant_entry([_entry("A", 0.2), _entry("B", 0.8)]).county_fips == "B"

    def test_tie_keeps_first(self) -> None:
        assert dominant_entry([_entry("A", 0.5), _entry("B", 0.5)]).county_fips == "A"

    def test_empty(self) -> None:
        assert dominant_entry([]) is None
