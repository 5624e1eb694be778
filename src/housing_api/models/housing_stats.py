"""HousingStats model: one row per residential ZIP (Census ZCTA) with ACS metrics.

Populated by an external ingestion job from the Census ACS 5-Year ZCTA
tables, joined with Redfin market snapshots where available. The API never
writes to this table except for the metro-area backfill
(``metro_area`` <- ``cbsa_name``).

Column groups:
    identity      zip_code, county_name, state_abbr, state_name
    geography     metro_area, cbsa_code, cbsa_name
    demographics  population, median_age, median_household_income
    housing       homeownership_rate, vacancy_rate, median_home_price,
                  median_rent, owner/renter/total housing units
    market        redfin_* snapshot fields
"""

from sqlalchemy import Double, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from housing_api.models.base import Base, TimestampMixin


class HousingStats(Base, TimestampMixin):
    """Housing and demographic metrics for a single ZIP code tabulation area."""

    __tablename__ = "housing_stats"

    zip_code: Mapped[str] = mapped_column(String(5), primary_key=True)

    county_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state_abbr: Mapped[str | None] = mapped_column(String(2), nullable=True)
    state_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    metro_area: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cbsa_code: Mapped[str | None] = mapped_column(String(5), nullable=True)
    cbsa_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    population: Mapped[int | None] = mapped_column(Integer, nullable=True)
    median_age: Mapped[float | None] = mapped_column(Double, nullable=True)
    median_household_income: Mapped[float | None] = mapped_column(Double, nullable=True)

    homeownership_rate: Mapped[float | None] = mapped_column(Double, nullable=True)
    vacancy_rate: Mapped[float | None] = mapped_column(Double, nullable=True)
    median_home_price: Mapped[float | None] = mapped_column(Double, nullable=True)
    median_rent: Mapped[float | None] = mapped_column(Double, nullable=True)
    owner_occupied_units: Mapped[int | None] = mapped_column(Integer, nullable=True)
    renter_occupied_units: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_housing_units: Mapped[int | None] = mapped_column(Integer, nullable=True)

    redfin_median_sale_price: Mapped[float | None] = mapped_column(Double, nullable=True)
    redfin_median_list_price: Mapped[float | None] = mapped_column(Double, nullable=True)
    redfin_homes_sold: Mapped[int | None] = mapped_column(Integer, nullable=True)
    redfin_median_days_on_market: Mapped[float | None] = mapped_column(Double, nullable=True)

    __table_args__ = (
        Index("ix_housing_stats_state_abbr", "state_abbr"),
        Index("ix_housing_stats_state_county", "state_abbr", "county_name"),
        Index("ix_housing_stats_metro_area", "metro_area"),
    )
