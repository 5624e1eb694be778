"""Quality service: completeness report over the housing_stats table."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.lib.quality import score_fields
from housing_api.models.housing_stats import HousingStats
from housing_api.schemas.quality import FieldQuality, QualityReportResponse

# Report name -> column whose non-null count measures it
QUALITY_FIELDS = {
    "homeownership_rate": HousingStats.homeownership_rate,
    "median_home_price": HousingStats.median_home_price,
    "median_rent": HousingStats.median_rent,
    "median_household_income": HousingStats.median_household_income,
    "population": HousingStats.population,
    "state_abbr": HousingStats.state_abbr,
    "county_name": HousingStats.county_name,
    "metro_area": HousingStats.metro_area,
    "redfin_data": HousingStats.redfin_median_sale_price,
}


async def get_quality_report(session: AsyncSession) -> QualityReportResponse:
    """Count non-null values per tracked field and score their completeness."""
    names = list(QUALITY_FIELDS)
    query = select(func.count(), *(func.count(column) for column in QUALITY_FIELDS.values()))
    total, *counts = (await session.execute(query)).one()

    scored = score_fields(total, dict(zip(names, counts, strict=True)))
    return QualityReportResponse(
        total_records=total,
        metrics={
            name: FieldQuality(completeness=field.completeness, status=field.status.value)
            for name, field in scored.items()
        },
    )
