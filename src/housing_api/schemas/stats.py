"""Pydantic v2 schemas for state, county, national and comparison statistics."""

from pydantic import BaseModel, Field, field_validator

from housing_api.lib.zip_resolver import validate_zip_code
from housing_api.schemas.housing import NationalComparison


class StateStatsResponse(BaseModel):
    """Aggregate housing statistics for one state."""

    state_abbr: str
    zip_count: int
    total_population: int | None = None
    avg_homeownership_rate: float | None = None
    avg_median_home_price: int | None = None
    avg_median_rent: int | None = None
    avg_median_household_income: int | None = None
    avg_median_age: float | None = None
    avg_vacancy_rate: float | None = None


class CountyStatsResponse(BaseModel):
    """Aggregate housing statistics for one county, with national baselines."""

    county_name: str
    state_abbr: str
    metro_area: str | None = None
    zip_count: int
    total_population: int | None = None
    avg_homeownership_rate: float | None = None
    avg_median_home_price: int | None = None
    avg_median_rent: int | None = None
    avg_median_household_income: int | None = None
    avg_median_age: float | None = None
    avg_vacancy_rate: float | None = None
    total_housing_units: int | None = None
    total_owner_occupied_units: int | None = None
    total_renter_occupied_units: int | None = None
    comparison: NationalComparison


class NationalSummaryResponse(BaseModel):
    """National overview over ZIPs with homeownership data."""

    total_zips: int
    states: int
    total_population: int | None = None
    avg_homeownership_rate: float | None = None
    avg_median_home_price: int | None = None
    avg_median_rent: int | None = None
    avg_median_household_income: int | None = None
    avg_vacancy_rate: float | None = None


class StateListItem(BaseModel):
    state_abbr: str
    zip_count: int
    total_population: int | None = None
    avg_median_home_price: int | None = None
    avg_homeownership_rate: float | None = None


class CountyListItem(BaseModel):
    county_name: str
    zip_count: int
    total_population: int | None = None
    avg_median_home_price: int | None = None
    avg_homeownership_rate: float | None = None
    avg_median_rent: int | None = None
    avg_median_household_income: int | None = None


class CompareRequest(BaseModel):
    """Request body for a side-by-side ZIP comparison."""

    zip_codes: list[str] = Field(min_length=2, description="Two or more five-digit ZIP codes")

    @field_validator("zip_codes")
    @classmethod
    def validate_zip_codes(cls, v: list[str]) -> list[str]:
        for zip_code in v:
            validate_zip_code(zip_code)
        return v
