"""Housing research API endpoints: ZIP lookup, aggregates, search, compare, export, quality."""

import re

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse, Response
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.core.config import Settings, get_settings
from housing_api.core.dependencies import get_async_session, get_zip_resolver
from housing_api.lib.exporter import export_filename, render_csv
from housing_api.lib.zip_resolver import TransientStoreError, ZipResolver, validate_zip_code
from housing_api.schemas.common import ErrorResponse
from housing_api.schemas.housing import HousingRecordResponse, ZipSummary
from housing_api.schemas.quality import QualityReportResponse
from housing_api.schemas.stats import (
    CompareRequest,
    CountyListItem,
    CountyStatsResponse,
    NationalSummaryResponse,
    StateListItem,
    StateStatsResponse,
)
from housing_api.schemas.zip_lookup import ZipCountyFallbackResponse, ZipFoundResponse, ZipNotFoundResponse
from housing_api.services.quality_service import get_quality_report
from housing_api.services.stats_service import (
    compare_zips,
    fetch_export_rows,
    get_county_stats,
    get_national_summary,
    get_state_stats,
    list_counties,
    list_states,
    list_zips,
    search,
)
from housing_api.services.zip_service import to_response

research_router = APIRouter(prefix="/research", tags=["research"])

_ZIP_PATTERN = r"^[0-9]{5}$"
_STATE_PATTERN = r"^[A-Za-z]{2}$"
_STATE_RE = re.compile(_STATE_PATTERN)

_STORE_UNAVAILABLE = "Housing data store is temporarily unavailable. Please retry later."


@research_router.get(
    "/stats/zip/{zip_code}",
    response_model=ZipFoundResponse | ZipCountyFallbackResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ZipNotFoundResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def get_zip_stats(
    zip_code: str = Path(..., pattern=_ZIP_PATTERN, description="Five-digit ZIP code"),  # noqa: B008
    resolver: ZipResolver = Depends(get_zip_resolver),  # noqa: B008
) -> ZipFoundResponse | ZipCountyFallbackResponse | JSONResponse:
    """Housing record for a ZIP, or a classified county-level fallback.

    ZIPs without Census ZCTA data but present in the HUD crosswalk return
    200 with a county estimate; ZIPs in neither dataset return 404 with a
    classification explaining why.
    """
    try:
        result = await resolver.resolve(zip_code)
    except TransientStoreError as e:
        logger.error(f"ZIP lookup failed at {e.step} for {e.zip_code}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=_STORE_UNAVAILABLE,
        ) from e

    response = to_response(result)
    if isinstance(response, ZipNotFoundResponse):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=response.model_dump())
    return response


@research_router.get(
    "/stats/state/{state_abbr}",
    response_model=StateStatsResponse,
)
async def get_state_stats_endpoint(
    state_abbr: str = Path(..., pattern=_STATE_PATTERN, description="Two-letter state abbreviation"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> StateStatsResponse:
    """Aggregate housing statistics for a state."""
    result = await get_state_stats(session, state_abbr)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="State not found")
    return result


@research_router.get(
    "/stats/county/{county_name}",
    response_model=CountyStatsResponse,
)
async def get_county_stats_endpoint(
    county_name: str = Path(..., min_length=1, max_length=100),  # noqa: B008
    state: str = Query(..., pattern=_STATE_PATTERN, description="Two-letter state abbreviation"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> CountyStatsResponse:
    """Aggregate housing statistics for a county, with national averages for comparison."""
    result = await get_county_stats(session, county_name, state, settings)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="County not found")
    return result


@research_router.get(
    "/search",
    response_model=list[ZipSummary],
)
async def search_endpoint(
    q: str = Query(..., min_length=2, max_length=100, description="ZIP prefix, county, metro, or state"),  # noqa: B008
    limit: int | None = Query(None, ge=1, description="Maximum results (capped server-side)"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> list[ZipSummary]:
    """Search ZIPs by ZIP prefix, county or metro name, or state abbreviation."""
    effective = min(limit or settings.search_default_limit, settings.search_max_limit)
    return await search(session, q, effective)


@research_router.post(
    "/compare",
    response_model=list[HousingRecordResponse],
)
async def compare_endpoint(
    request: CompareRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> list[HousingRecordResponse]:
    """Side-by-side records for 2 or more ZIP codes, most populous first."""
    if len(request.zip_codes) > settings.compare_max_zips:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {settings.compare_max_zips} ZIP codes",
        )
    return await compare_zips(session, request.zip_codes)


@research_router.get(
    "/export/csv",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_csv_endpoint(
    zip_codes: str | None = Query(None, description="Comma-separated ZIP codes"),  # noqa: B008
    state: str | None = Query(None, description="Two-letter state abbreviation"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> Response:
    """Download housing records as CSV, selected by ZIP list or by state."""
    zips: list[str] | None = None
    try:
        if zip_codes:
            zips = [validate_zip_code(z.strip()) for z in zip_codes.split(",") if z.strip()]
            zips = zips[: settings.export_max_zips]
        if state and not _STATE_RE.fullmatch(state):
            msg = "Invalid state abbreviation"
            raise ValueError(msg)
        rows = await fetch_export_rows(session, zip_codes=zips, state_abbr=state)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No data found")

    body, count = render_csv(rows)
    logger.info(f"CSV export: {count} rows")
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export_filename()}"},
    )


@research_router.get(
    "/quality/report",
    response_model=QualityReportResponse,
)
async def quality_report_endpoint(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> QualityReportResponse:
    """Field completeness of the housing dataset."""
    return await get_quality_report(session)


@research_router.get(
    "/summary",
    response_model=NationalSummaryResponse,
)
async def national_summary_endpoint(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> NationalSummaryResponse:
    """National overview."""
    return await get_national_summary(session)


@research_router.get(
    "/list/states",
    response_model=list[StateListItem],
)
async def list_states_endpoint(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[StateListItem]:
    """All states with ZIP counts and headline averages."""
    return await list_states(session)


@research_router.get(
    "/list/counties",
    response_model=list[CountyListItem],
)
async def list_counties_endpoint(
    state: str = Query(..., pattern=_STATE_PATTERN, description="Two-letter state abbreviation"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[CountyListItem]:
    """Counties within a state."""
    return await list_counties(session, state)


@research_router.get(
    "/list/zips",
    response_model=list[ZipSummary],
)
async def list_zips_endpoint(
    state: str = Query(..., pattern=_STATE_PATTERN, description="Two-letter state abbreviation"),  # noqa: B008
    county: str | None = Query(None, max_length=100, description="County name (case-insensitive)"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> list[ZipSummary]:
    """ZIPs within a county, or the most populous ZIPs of a state."""
    return await list_zips(session, state, county, settings.list_zips_limit)
