"""ZIP lookup service: builds the resolver over SQL collaborators and shapes responses."""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.core.config import Settings
from housing_api.lib.zip_resolver import (
    CountyAggregate,
    CountyFallbackResult,
    DataSources,
    FoundResult,
    NationalAverages,
    NationalAveragesCache,
    NotFoundResult,
    ResolutionResult,
    ZipResolver,
    ZipType,
)
from housing_api.schemas.common import round_age, round_currency, round_rate
from housing_api.schemas.housing import HousingRecordResponse, NationalComparison
from housing_api.schemas.zip_lookup import (
    CountyAggregateResponse,
    DataSourcesResponse,
    RequestedZip,
    ZipCountyFallbackResponse,
    ZipFoundResponse,
    ZipNotFoundResponse,
)
from housing_api.services.crosswalk_service import SqlCrosswalk
from housing_api.services.housing_store import SqlHousingStore

_averages_cache: NationalAveragesCache | None = None


def get_averages_cache(ttl_seconds: int) -> NationalAveragesCache:
    """Return the process-wide national averages cache.

    The cache is created on first use and replaced whenever the configured
    TTL changes, so a TTL of zero always disables caching.
    """
    global _averages_cache  # noqa: PLW0603
    if _averages_cache is None or _averages_cache.ttl_seconds != ttl_seconds:
        if _averages_cache is not None:
            logger.debug(f"National averages cache TTL changed to {ttl_seconds}s")
        _averages_cache = NationalAveragesCache(ttl_seconds)
    return _averages_cache


def build_resolver(session: AsyncSession, settings: Settings) -> ZipResolver:
    """Create a request-scoped resolver over the given session."""
    return ZipResolver(
        SqlHousingStore(session),
        SqlCrosswalk(session),
        sources=DataSources(
            census_vintage=settings.census_vintage,
            crosswalk_vintage=settings.crosswalk_vintage,
        ),
        timeout=settings.store_query_timeout,
        averages_cache=get_averages_cache(settings.national_averages_ttl),
    )


async def resolve_zip(session: AsyncSession, zip_code: str, settings: Settings) -> ResolutionResult:
    """Resolve a ZIP code against the configured database.

    Raises:
        InvalidZipCodeError: If ``zip_code`` is not five digits.
        TransientStoreError: If the database fails or times out.
    """
    resolver = build_resolver(session, settings)
    result = await resolver.resolve(zip_code)
    logger.info(f"Resolved ZIP {zip_code}: {result.status}")
    return result


def national_comparison(averages: NationalAverages) -> NationalComparison:
    return NationalComparison(
        national_avg_homeownership=round_rate(averages.avg_homeownership),
        national_avg_home_price=round_currency(averages.avg_home_price),
        national_avg_rent=round_currency(averages.avg_rent),
        national_avg_income=round_currency(averages.avg_income),
    )


def county_aggregate_response(aggregate: CountyAggregate, census_vintage: str) -> CountyAggregateResponse:
    return CountyAggregateResponse(
        county_fips=aggregate.county_fips,
        county_name=aggregate.county_name,
        state_name=aggregate.state_name,
        state_abbr=aggregate.state_abbr,
        zips_in_county=aggregate.zip_count,
        total_population=aggregate.total_population,
        avg_homeownership_rate=round_rate(aggregate.avg_homeownership_rate),
        avg_median_home_price=round_currency(aggregate.avg_median_home_price),
        avg_median_rent=round_currency(aggregate.avg_median_rent),
        avg_median_household_income=round_currency(aggregate.avg_median_household_income),
        avg_median_age=round_age(aggregate.avg_median_age),
        avg_vacancy_rate=round_rate(aggregate.avg_vacancy_rate),
        data_source=f"{census_vintage} (aggregated from residential ZIPs in county)",
    )


def fallback_note(result: CountyFallbackResult) -> str:
    """Human-readable explanation shown above the county estimate."""
    entry = result.requested_zip
    county = (result.county_aggregate.county_name if result.county_aggregate else None) or "county"
    where = f"ZIP {result.zip_code} ({entry.pref_city}, {entry.state_abbr})"
    if result.zip_type == ZipType.NON_RESIDENTIAL:
        return f"{where} has no residential addresses — showing {county} county-level data instead."
    return f"{where} exists but has no Census ZCTA data — showing {county} county-level data instead."


def to_response(result: ResolutionResult) -> ZipFoundResponse | ZipCountyFallbackResponse | ZipNotFoundResponse:
    """Convert a resolver result into its API response model."""
    match result:
        case FoundResult():
            return ZipFoundResponse(
                record=HousingRecordResponse.model_validate(result.record),
                national_comparison=national_comparison(result.national_comparison),
            )
        case CountyFallbackResult():
            entry = result.requested_zip
            aggregate = (
                county_aggregate_response(result.county_aggregate, result.sources.census_vintage)
                if result.county_aggregate is not None
                else None
            )
            return ZipCountyFallbackResponse(
                zip_code=result.zip_code,
                zip_type=result.zip_type.value,
                note=fallback_note(result),
                requested_zip=RequestedZip(
                    zip_code=entry.zip_code,
                    city=entry.pref_city,
                    state=entry.state_abbr,
                    county_id=entry.county_fips,
                    residential_ratio=entry.res_ratio,
                ),
                county_aggregate=aggregate,
                sources=DataSourcesResponse(
                    census_vintage=result.sources.census_vintage,
                    crosswalk_vintage=result.sources.crosswalk_vintage,
                ),
            )
        case NotFoundResult():
            classification = result.classification
            return ZipNotFoundResponse(
                detail=f"No data found for ZIP code {result.zip_code}",
                zip_code=result.zip_code,
                zip_type=classification.zip_type.value,
                explanation=classification.explanation,
                suggestion=classification.suggestion,
                sources_checked=list(result.sources_checked),
            )
    msg = f"Unhandled resolution result: {result!r}"
    raise TypeError(msg)
