"""In-memory collaborators for ZIP resolver tests."""

import asyncio
from collections.abc import Collection

import pytest

from housing_api.lib.zip_resolver import (
    BaseCrosswalk,
    BaseHousingStore,
    CrosswalkEntry,
    DataSources,
    HousingRecord,
    NationalAverages,
    StoreUnavailableError,
)
from housing_api.lib.zip_resolver.aggregator import mean_of


class FakeHousingStore(BaseHousingStore):
    """Dict-backed housing store that counts calls and can be made to fail."""

    def __init__(self, records: list[HousingRecord] | None = None) -> None:
        self.records = {r.zip_code: r for r in records or []}
        self.calls: dict[str, int] = {"lookup_by_zip": 0, "lookup_many_by_zip": 0, "global_averages": 0}
        self.fail_on: str | None = None
        self.delay: float = 0.0

    async def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_on == name:
            raise StoreUnavailableError("housing_stats", "connection refused")

    async def lookup_by_zip(self, zip_code: str) -> HousingRecord | None:
        await self._enter("lookup_by_zip")
        return self.records.get(zip_code)

    async def lookup_many_by_zip(self, zip_codes: Collection[str]) -> list[HousingRecord]:
        await self._enter("lookup_many_by_zip")
        return [self.records[z] for z in zip_codes if z in self.records]

    async def global_averages(self) -> NationalAverages:
        await self._enter("global_averages")
        usable = [r for r in self.records.values() if r.homeownership_rate is not None]
        return NationalAverages(
            avg_homeownership=mean_of(r.homeownership_rate for r in usable),
            avg_home_price=mean_of(r.median_home_price for r in usable),
            avg_rent=mean_of(r.median_rent for r in usable),
            avg_income=mean_of(r.median_household_income for r in usable),
        )


class FakeCrosswalk(BaseCrosswalk):
    """List-backed crosswalk; row dicts become CrosswalkEntry objects on read."""

    def __init__(self, rows: list[dict] | None = None) -> None:
        self.rows = rows or []
        self.fail_on: str | None = None

    async def entries_for_zip(self, zip_code: str) -> list[CrosswalkEntry]:
        if self.fail_on == "entries_for_zip":
            raise StoreUnavailableError("hud_zip_county", "connection reset")
        return [CrosswalkEntry(**row) for row in self.rows if row["zip_code"] == zip_code]

    async def zips_in_county(self, county_fips: str) -> list[str]:
        if self.fail_on == "zips_in_county":
            raise StoreUnavailableError("hud_zip_county", "connection reset")
        return sorted({r["zip_code"] for r in self.rows if r["county_fips"] == county_fips and r["res_ratio"] > 0})


def crosswalk_row(
    zip_code: str,
    county_fips: str,
    *,
    res_ratio: float = 1.0,
    tot_ratio: float = 1.0,
    pref_city: str = "AUSTIN",
    state_abbr: str = "TX",
) -> dict:
    return {
        "zip_code": zip_code,
        "county_fips": county_fips,
        "pref_city": pref_city,
        "state_abbr": state_abbr,
        "res_ratio": res_ratio,
        "tot_ratio": tot_ratio,
    }


@pytest.fixture
def sources() -> DataSources:
    return DataSources(census_vintage="Census ACS 5-Year 2023", crosswalk_vintage="HUD USPS Crosswalk Q4 2025")


@pytest.fixture
def travis_records() -> list[HousingRecord]:
    return [
        HousingRecord(
            zip_code="78701",
            county_name="Travis",
            state_abbr="TX",
            state_name="Texas",
            population=10000,
            median_age=33.4,
            homeownership_rate=45.2,
            vacancy_rate=12.0,
            median_home_price=300000.0,
            median_rent=2100.0,
            median_household_income=98000.0,
        ),
        HousingRecord(
            zip_code="78702",
            county_name="Travis",
            state_abbr="TX",
            state_name="Texas",
            population=20000,
            median_age=31.0,
            homeownership_rate=54.8,
            vacancy_rate=8.0,
            median_home_price=None,
            median_rent=1500.0,
            median_household_income=72000.0,
        ),
    ]


@pytest.fixture
def store(travis_records: list[HousingRecord]) -> FakeHousingStore:
    return FakeHousingStore(travis_records)


@pytest.fixture
def crosswalk() -> FakeCrosswalk:
    return FakeCrosswalk(
        [
            crosswalk_row("78701", "48453"),
            crosswalk_row("78702", "48453"),
            crosswalk_row("78711", "48453", res_ratio=0.0),
            crosswalk_row("78799", "48453", res_ratio=0.9, tot_ratio=0.8),
            crosswalk_row("78799", "48491", res_ratio=0.1, tot_ratio=0.2),
            crosswalk_row("99950", "02130", pref_city="KETCHIKAN", state_abbr="AK"),
        ]
    )
