"""ZipCounty model: HUD USPS ZIP-to-county crosswalk.

Covers every assigned postal ZIP (residential or not), so it can explain
ZIPs that have no Census ZCTA row. A ZIP split across counties has one row
per county; the ratio columns give the share of that ZIP's addresses that
fall inside the county.

HUD column mapping:
    ZIP          -> zip_code       RES_RATIO -> res_ratio
    COUNTY       -> county_fips    BUS_RATIO -> bus_ratio
    USPS_ZIP_PREF_CITY  -> pref_city  OTH_RATIO -> oth_ratio
    USPS_ZIP_PREF_STATE -> state_abbr TOT_RATIO -> tot_ratio
"""

from datetime import datetime

from sqlalchemy import DateTime, Double, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from housing_api.models.base import Base, UUIDMixin


class ZipCounty(Base, UUIDMixin):
    """One (ZIP, county) pairing from the HUD USPS crosswalk."""

    __tablename__ = "hud_zip_county"

    zip_code: Mapped[str] = mapped_column(String(5), nullable=False)
    county_fips: Mapped[str] = mapped_column(String(5), nullable=False)
    pref_city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state_abbr: Mapped[str | None] = mapped_column(String(2), nullable=True)

    res_ratio: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)
    bus_ratio: Mapped[float | None] = mapped_column(Double, nullable=True)
    oth_ratio: Mapped[float | None] = mapped_column(Double, nullable=True)
    tot_ratio: Mapped[float] = mapped_column(Double, nullable=False, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("zip_code", "county_fips", name="uq_hud_zip_county_zip_county"),
        Index("ix_hud_zip_county_zip_code", "zip_code"),
        Index("ix_hud_zip_county_county_fips", "county_fips"),
    )
