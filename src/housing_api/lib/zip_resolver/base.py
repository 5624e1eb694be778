"""Data types, capability interfaces, and errors for ZIP resolution.

The resolver depends only on the two abstract collaborators defined here,
so it can run against the SQL-backed implementations in
``housing_api.services`` or against in-memory fakes.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Collection
from dataclasses import dataclass
from enum import StrEnum

_ZIP_RE = re.compile(r"[0-9]{5}")


class ZipType(StrEnum):
    """Why a ZIP has (or lacks) its own housing record."""

    MILITARY = "military"
    US_TERRITORY = "us_territory"
    NON_RESIDENTIAL = "non_residential"
    RESIDENTIAL_NO_CENSUS = "residential_no_census"
    NON_RESIDENTIAL_OR_UNKNOWN = "non_residential_or_unknown"


class InvalidZipCodeError(ValueError):
    """Raised when a candidate ZIP code is not exactly five ASCII digits."""

    def __init__(self, zip_code: object) -> None:
        self.zip_code = zip_code
        super().__init__(f"Invalid ZIP code format: {zip_code!r} (expected 5 digits)")


def validate_zip_code(zip_code: str) -> str:
    """Return ``zip_code`` unchanged if it is exactly five ASCII digits.

    Raises:
        InvalidZipCodeError: For any other shape (length, non-digits, non-str).
    """
    if not isinstance(zip_code, str) or not _ZIP_RE.fullmatch(zip_code):
        raise InvalidZipCodeError(zip_code)
    return zip_code


@dataclass(frozen=True)
class HousingRecord:
    """Housing and demographic metrics for one residential ZIP."""

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

    def __post_init__(self) -> None:
        if self.population is not None and self.population < 0:
            msg = f"population must be non-negative, got {self.population}"
            raise ValueError(msg)


@dataclass(frozen=True)
class CrosswalkEntry:
    """One (ZIP, county) pairing from the postal crosswalk."""

    zip_code: str
    county_fips: str
    pref_city: str | None
    state_abbr: str | None
    res_ratio: float
    tot_ratio: float

    def __post_init__(self) -> None:
        if not (0.0 <= self.res_ratio <= 1.0):
            msg = f"res_ratio must be between 0 and 1, got {self.res_ratio}"
            raise ValueError(msg)
        if not (0.0 <= self.tot_ratio <= 1.0):
            msg = f"tot_ratio must be between 0 and 1, got {self.tot_ratio}"
            raise ValueError(msg)

    @property
    def is_non_residential(self) -> bool:
        """True when none of this ZIP's residential addresses fall in the county."""
        return self.res_ratio == 0.0


@dataclass(frozen=True)
class NationalAverages:
    """National baselines over every ZIP with homeownership data."""

    avg_homeownership: float | None
    avg_home_price: float | None
    avg_rent: float | None
    avg_income: float | None


class StoreUnavailableError(Exception):
    """Raised by a store/crosswalk implementation on transport or query failure.

    Args:
        source: Name of the failing collaborator (e.g. "housing_stats").
        message: Human-readable error description.
    """

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"{source}: {message}")


class TransientStoreError(Exception):
    """A resolution step could not complete because a collaborator failed.

    Distinct from a not-found outcome: the caller should retry later.

    Args:
        step: Resolution step that failed (e.g. "crosswalk_lookup").
        zip_code: ZIP being resolved.
        message: Human-readable error description.
        county_fips: County being aggregated, when the failure happened there.
    """

    def __init__(self, step: str, zip_code: str, message: str, county_fips: str | None = None) -> None:
        self.step = step
        self.zip_code = zip_code
        self.message = message
        self.county_fips = county_fips
        context = f"zip={zip_code}" + (f", county={county_fips}" if county_fips else "")
        super().__init__(f"{step} failed ({context}): {message}")


class BaseHousingStore(ABC):
    """Read access to the primary housing dataset."""

    @abstractmethod
    async def lookup_by_zip(self, zip_code: str) -> HousingRecord | None:
        """Return the record for an exact ZIP match, or None."""

    @abstractmethod
    async def lookup_many_by_zip(self, zip_codes: Collection[str]) -> list[HousingRecord]:
        """Return the records for every ZIP in ``zip_codes`` that exists."""

    @abstractmethod
    async def global_averages(self) -> NationalAverages:
        """Return null-excluding averages over rows with a homeownership rate."""


class BaseCrosswalk(ABC):
    """Read access to the postal ZIP-to-county crosswalk."""

    @abstractmethod
    async def entries_for_zip(self, zip_code: str) -> list[CrosswalkEntry]:
        """Return every county pairing for a ZIP (empty if unassigned)."""

    @abstractmethod
    async def zips_in_county(self, county_fips: str) -> list[str]:
        """Return the ZIPs with residential addresses (``res_ratio > 0``) in a county."""
