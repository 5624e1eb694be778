"""County-level aggregation over the housing records of a set of ZIPs."""

from collections.abc import Collection, Iterable
from dataclasses import dataclass

from housing_api.lib.zip_resolver.base import BaseHousingStore, HousingRecord


@dataclass(frozen=True)
class CountyAggregate:
    """Null-excluding averages and sums for the ZIPs of one county."""

    county_fips: str | None
    county_name: str | None
    state_name: str | None
    state_abbr: str | None
    zip_count: int
    total_population: int | None
    avg_homeownership_rate: float | None
    avg_median_home_price: float | None
    avg_median_rent: float | None
    avg_median_household_income: float | None
    avg_median_age: float | None
    avg_vacancy_rate: float | None


def mean_of(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the non-null values, or None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def sum_of(values: Iterable[int | None]) -> int | None:
    """Sum of the non-null values, or None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present)


def _max_text(values: Iterable[str | None]) -> str | None:
    present = [v for v in values if v]
    return max(present) if present else None


def aggregate_records(records: Iterable[HousingRecord], county_fips: str | None = None) -> CountyAggregate | None:
    """Aggregate housing records that pass the homeownership completeness gate.

    Rows with a null ``homeownership_rate`` are dropped first; duplicate ZIPs
    count once.

    Args:
        records: Housing records for the county's ZIPs.
        county_fips: County identifier to report on the aggregate.

    Returns:
        CountyAggregate, or None when no record has usable data.
    """
    usable: dict[str, HousingRecord] = {}
    for record in records:
        if record.homeownership_rate is None:
            continue
        usable.setdefault(record.zip_code, record)

    if not usable:
        return None

    rows = list(usable.values())
    return CountyAggregate(
        county_fips=county_fips,
        county_name=_max_text(r.county_name for r in rows),
        state_name=_max_text(r.state_name for r in rows),
        state_abbr=_max_text(r.state_abbr for r in rows),
        zip_count=len(rows),
        total_population=sum_of(r.population for r in rows),
        avg_homeownership_rate=mean_of(r.homeownership_rate for r in rows),
        avg_median_home_price=mean_of(r.median_home_price for r in rows),
        avg_median_rent=mean_of(r.median_rent for r in rows),
        avg_median_household_income=mean_of(r.median_household_income for r in rows),
        avg_median_age=mean_of(r.median_age for r in rows),
        avg_vacancy_rate=mean_of(r.vacancy_rate for r in rows),
    )


async def aggregate_county(
    zip_codes: Collection[str],
    store: BaseHousingStore,
    county_fips: str | None = None,
) -> CountyAggregate | None:
    """Fetch the records for ``zip_codes`` and aggregate them.

    An empty ZIP set short-circuits to None without querying the store.
    """
    if not zip_codes:
        return None
    records = await store.lookup_many_by_zip(zip_codes)
    return aggregate_records(records, county_fips=county_fips)
