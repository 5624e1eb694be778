"""Pydantic v2 schemas for housing records and national comparisons."""

from pydantic import BaseModel, Field


class HousingRecordResponse(BaseModel):
    """Housing and demographic metrics for a single ZIP code."""

    model_config = {"from_attributes": True}

    zip_code: str
    county_name: str | None = None
    state_abbr: str | None = None
    state_name: str | None = None
    metro_area: str | None = None
    population: int | None = None
    median_age: float | None = None
    homeownership_rate: float | None = None
    vacancy_rate: float | None = None
    median_home_price: float | None = None
    median_rent: float | None = None
    median_household_income: float | None = None
    owner_occupied_units: int | None = None
    renter_occupied_units: int | None = None
    total_housing_units: int | None = None
    redfin_median_sale_price: float | None = None
    redfin_median_list_price: float | None = None
    redfin_homes_sold: int | None = None
    redfin_median_days_on_market: float | None = None


class ZipSummary(BaseModel):
    """Compact ZIP row used by search and list endpoints."""

    model_config = {"from_attributes": True}

    zip_code: str
    county_name: str | None = None
    state_abbr: str | None = None
    metro_area: str | None = None
    population: int | None = None
    homeownership_rate: float | None = None
    median_home_price: float | None = None
    median_rent: float | None = None
    median_household_income: float | None = None


class NationalComparison(BaseModel):
    """National baselines over every ZIP with homeownership data."""

    national_avg_homeownership: float | None = Field(description="Percent, two decimals")
    national_avg_home_price: int | None = Field(description="Dollars")
    national_avg_rent: int | None = Field(description="Dollars per month")
    national_avg_income: int | None = Field(description="Dollars per year")
