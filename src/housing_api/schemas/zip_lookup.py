"""Pydantic v2 schemas for single-ZIP resolution responses.

The three response shapes share a ``status`` discriminator:
``found``, ``county_fallback`` and ``not_found``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from housing_api.schemas.housing import HousingRecordResponse, NationalComparison


class ZipFoundResponse(BaseModel):
    """The ZIP has its own housing record."""

    status: Literal["found"] = "found"
    record: HousingRecordResponse
    national_comparison: NationalComparison


class RequestedZip(BaseModel):
    """Crosswalk facts about the requested ZIP (dominant county)."""

    zip_code: str
    city: str | None = None
    state: str | None = None
    county_id: str
    residential_ratio: float = Field(description="Share of the ZIP's residential addresses in this county (0-1)")


class CountyAggregateResponse(BaseModel):
    """County-level estimate aggregated from residential ZIPs in the county."""

    county_fips: str | None = None
    county_name: str | None = None
    state_name: str | None = None
    state_abbr: str | None = None
    zips_in_county: int = Field(description="ZIPs contributing homeownership data")
    total_population: int | None = None
    avg_homeownership_rate: float | None = None
    avg_median_home_price: int | None = None
    avg_median_rent: int | None = None
    avg_median_household_income: int | None = None
    avg_median_age: float | None = None
    avg_vacancy_rate: float | None = None
    data_source: str


class DataSourcesResponse(BaseModel):
    """Vintages of the datasets used for a fallback answer."""

    census_vintage: str
    crosswalk_vintage: str


class ZipCountyFallbackResponse(BaseModel):
    """The ZIP exists in the postal crosswalk but has no Census ZCTA record."""

    status: Literal["county_fallback"] = "county_fallback"
    zip_code: str
    zip_type: Literal["non_residential", "residential_no_census"]
    note: str
    requested_zip: RequestedZip
    county_aggregate: CountyAggregateResponse | None = None
    sources: DataSourcesResponse


class ZipNotFoundResponse(BaseModel):
    """The ZIP matches neither dataset."""

    status: Literal["not_found"] = "not_found"
    detail: str
    zip_code: str
    zip_type: Literal["military", "us_territory", "non_residential_or_unknown"]
    explanation: str
    suggestion: str | None = None
    sources_checked: list[str]


ZipLookupResponse = Annotated[
    ZipFoundResponse | ZipCountyFallbackResponse | ZipNotFoundResponse,
    Field(discriminator="status"),
]
