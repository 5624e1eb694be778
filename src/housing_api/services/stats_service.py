"""Stats service: state/county/national aggregates, listings, search and comparison.

Aggregates run as SQL GROUP BY queries; AVG/SUM already skip NULLs, so a
group with no values yields NULL rather than zero.
"""

import re
from typing import Any

from loguru import logger
from sqlalchemy import distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from housing_api.core.config import Settings
from housing_api.lib.zip_resolver import national_averages
from housing_api.models.housing_stats import HousingStats
from housing_api.schemas.common import round_age, round_currency, round_rate
from housing_api.schemas.housing import HousingRecordResponse, ZipSummary
from housing_api.schemas.stats import (
    CountyListItem,
    CountyStatsResponse,
    NationalSummaryResponse,
    StateListItem,
    StateStatsResponse,
)
from housing_api.services.housing_store import SqlHousingStore
from housing_api.services.zip_service import get_averages_cache, national_comparison

_DIGITS_RE = re.compile(r"[0-9]+")
_STATE_ABBR_RE = re.compile(r"[A-Za-z]{2}")

_SUMMARY_COLUMNS = (
    HousingStats.zip_code,
    HousingStats.county_name,
    HousingStats.state_abbr,
    HousingStats.metro_area,
    HousingStats.population,
    HousingStats.homeownership_rate,
    HousingStats.median_home_price,
    HousingStats.median_rent,
    HousingStats.median_household_income,
)


def _int_or_none(value: Any) -> int | None:
    return int(value) if value is not None else None


def _float_or_none(value: Any) -> float | None:
    return float(value) if value is not None else None


def _by_population():
    return HousingStats.population.desc().nulls_last()


async def get_state_stats(session: AsyncSession, state_abbr: str) -> StateStatsResponse | None:
    """Aggregate statistics for one state, or None if it has no ZIPs."""
    state = state_abbr.upper()
    query = (
        select(
            HousingStats.state_abbr,
            func.count().label("zip_count"),
            func.sum(HousingStats.population),
            func.avg(HousingStats.homeownership_rate),
            func.avg(HousingStats.median_home_price),
            func.avg(HousingStats.median_rent),
            func.avg(HousingStats.median_household_income),
            func.avg(HousingStats.median_age),
            func.avg(HousingStats.vacancy_rate),
        )
        .where(HousingStats.state_abbr == state)
        .group_by(HousingStats.state_abbr)
    )
    row = (await session.execute(query)).one_or_none()
    if row is None:
        return None

    abbr, zip_count, population, homeownership, price, rent, income, age, vacancy = row
    return StateStatsResponse(
        state_abbr=abbr,
        zip_count=zip_count,
        total_population=_int_or_none(population),
        avg_homeownership_rate=round_rate(_float_or_none(homeownership)),
        avg_median_home_price=round_currency(_float_or_none(price)),
        avg_median_rent=round_currency(_float_or_none(rent)),
        avg_median_household_income=round_currency(_float_or_none(income)),
        avg_median_age=round_age(_float_or_none(age)),
        avg_vacancy_rate=round_rate(_float_or_none(vacancy)),
    )


async def get_county_stats(
    session: AsyncSession,
    county_name: str,
    state_abbr: str,
    settings: Settings,
) -> CountyStatsResponse | None:
    """Aggregate statistics for a county (case-insensitive name) with national baselines."""
    state = state_abbr.upper()
    query = (
        select(
            func.max(HousingStats.county_name),
            func.max(HousingStats.metro_area),
            func.count().label("zip_count"),
            func.sum(HousingStats.population),
            func.avg(HousingStats.homeownership_rate),
            func.avg(HousingStats.median_home_price),
            func.avg(HousingStats.median_rent),
            func.avg(HousingStats.median_household_income),
            func.avg(HousingStats.median_age),
            func.avg(HousingStats.vacancy_rate),
            func.sum(HousingStats.total_housing_units),
            func.sum(HousingStats.owner_occupied_units),
            func.sum(HousingStats.renter_occupied_units),
        )
        .where(
            func.lower(HousingStats.county_name) == county_name.strip().lower(),
            HousingStats.state_abbr == state,
        )
    )
    row = (await session.execute(query)).one()
    (
        name,
        metro,
        zip_count,
        population,
        homeownership,
        price,
        rent,
        income,
        age,
        vacancy,
        units,
        owner_units,
        renter_units,
    ) = row
    if not zip_count:
        return None

    averages = await national_averages(SqlHousingStore(session), get_averages_cache(settings.national_averages_ttl))
    return CountyStatsResponse(
        county_name=name,
        state_abbr=state,
        metro_area=metro,
        zip_count=zip_count,
        total_population=_int_or_none(population),
        avg_homeownership_rate=round_rate(_float_or_none(homeownership)),
        avg_median_home_price=round_currency(_float_or_none(price)),
        avg_median_rent=round_currency(_float_or_none(rent)),
        avg_median_household_income=round_currency(_float_or_none(income)),
        avg_median_age=round_age(_float_or_none(age)),
        avg_vacancy_rate=round_rate(_float_or_none(vacancy)),
        total_housing_units=_int_or_none(units),
        total_owner_occupied_units=_int_or_none(owner_units),
        total_renter_occupied_units=_int_or_none(renter_units),
        comparison=national_comparison(averages),
    )


async def get_national_summary(session: AsyncSession) -> NationalSummaryResponse:
    """National overview restricted to ZIPs with homeownership data."""
    query = select(
        func.count(),
        func.count(distinct(HousingStats.state_abbr)),
        func.sum(HousingStats.population),
        func.avg(HousingStats.homeownership_rate),
        func.avg(HousingStats.median_home_price),
        func.avg(HousingStats.median_rent),
        func.avg(HousingStats.median_household_income),
        func.avg(HousingStats.vacancy_rate),
    ).where(HousingStats.homeownership_rate.is_not(None))
    total, states, population, homeownership, price, rent, income, vacancy = (await session.execute(query)).one()
    return NationalSummaryResponse(
        total_zips=total,
        states=states,
        total_population=_int_or_none(population),
        avg_homeownership_rate=round_rate(_float_or_none(homeownership)),
        avg_median_home_price=round_currency(_float_or_none(price)),
        avg_median_rent=round_currency(_float_or_none(rent)),
        avg_median_household_income=round_currency(_float_or_none(income)),
        avg_vacancy_rate=round_rate(_float_or_none(vacancy)),
    )


async def list_states(session: AsyncSession) -> list[StateListItem]:
    query = (
        select(
            HousingStats.state_abbr,
            func.count(),
            func.sum(HousingStats.population),
            func.avg(HousingStats.median_home_price),
            func.avg(HousingStats.homeownership_rate),
        )
        .where(HousingStats.state_abbr.is_not(None))
        .group_by(HousingStats.state_abbr)
        .order_by(HousingStats.state_abbr)
    )
    rows = (await session.execute(query)).all()
    return [
        StateListItem(
            state_abbr=abbr,
            zip_count=count,
            total_population=_int_or_none(population),
            avg_median_home_price=round_currency(_float_or_none(price)),
            avg_homeownership_rate=round_rate(_float_or_none(homeownership)),
        )
        for abbr, count, population, price, homeownership in rows
    ]


async def list_counties(session: AsyncSession, state_abbr: str) -> list[CountyListItem]:
    query = (
        select(
            HousingStats.county_name,
            func.count(),
            func.sum(HousingStats.population),
            func.avg(HousingStats.median_home_price),
            func.avg(HousingStats.homeownership_rate),
            func.avg(HousingStats.median_rent),
            func.avg(HousingStats.median_household_income),
        )
        .where(HousingStats.state_abbr == state_abbr.upper(), HousingStats.county_name.is_not(None))
        .group_by(HousingStats.county_name)
        .order_by(HousingStats.county_name)
    )
    rows = (await session.execute(query)).all()
    return [
        CountyListItem(
            county_name=name,
            zip_count=count,
            total_population=_int_or_none(population),
            avg_median_home_price=round_currency(_float_or_none(price)),
            avg_homeownership_rate=round_rate(_float_or_none(homeownership)),
            avg_median_rent=round_currency(_float_or_none(rent)),
            avg_median_household_income=round_currency(_float_or_none(income)),
        )
        for name, count, population, price, homeownership, rent, income in rows
    ]


async def list_zips(
    session: AsyncSession,
    state_abbr: str,
    county_name: str | None,
    limit: int,
) -> list[ZipSummary]:
    """ZIPs in a state (capped at ``limit``) or every ZIP in one of its counties."""
    query = select(*_SUMMARY_COLUMNS).where(HousingStats.state_abbr == state_abbr.upper())
    if county_name:
        query = query.where(func.lower(HousingStats.county_name) == county_name.strip().lower())
    else:
        query = query.limit(limit)
    query = query.order_by(_by_population(), HousingStats.zip_code)
    rows = (await session.execute(query)).mappings().all()
    return [ZipSummary.model_validate(dict(row)) for row in rows]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search(session: AsyncSession, q: str, limit: int) -> list[ZipSummary]:
    """Search by ZIP prefix (numeric queries) or county/metro substring.

    Numeric queries list matching ZIPs in ZIP order. Text queries are ordered
    by population, and two-letter alphabetic queries also match the state
    abbreviation exactly. LIKE wildcards in ``q`` match literally.
    """
    term = q.strip()
    escaped = _escape_like(term)
    query = select(*_SUMMARY_COLUMNS)
    if _DIGITS_RE.fullmatch(term):
        query = query.where(HousingStats.zip_code.like(f"{escaped}%", escape="\\"))
        query = query.order_by(HousingStats.zip_code)
    else:
        pattern = f"%{escaped}%"
        conditions = [
            HousingStats.county_name.ilike(pattern, escape="\\"),
            HousingStats.metro_area.ilike(pattern, escape="\\"),
            HousingStats.zip_code.like(f"{escaped}%", escape="\\"),
        ]
        if _STATE_ABBR_RE.fullmatch(term):
            conditions.append(HousingStats.state_abbr == term.upper())
        query = query.where(or_(*conditions)).order_by(_by_population(), HousingStats.zip_code)

    query = query.limit(limit)
    rows = (await session.execute(query)).mappings().all()
    logger.debug(f"Search {term!r} returned {len(rows)} rows")
    return [ZipSummary.model_validate(dict(row)) for row in rows]


async def compare_zips(session: AsyncSession, zip_codes: list[str]) -> list[HousingRecordResponse]:
    """Full records for the requested ZIPs, most populous first (missing ZIPs omitted)."""
    query = (
        select(HousingStats)
        .where(HousingStats.zip_code.in_(zip_codes))
        .order_by(_by_population(), HousingStats.zip_code)
    )
    rows = (await session.execute(query)).scalars().all()
    return [HousingRecordResponse.model_validate(row) for row in rows]


async def fetch_export_rows(
    session: AsyncSession,
    *,
    zip_codes: list[str] | None = None,
    state_abbr: str | None = None,
) -> list[dict[str, Any]]:
    """Rows for CSV export, selected by ZIP list or by state.

    Raises:
        ValueError: If neither ``zip_codes`` nor ``state_abbr`` is given.
    """
    query = select(HousingStats)
    if zip_codes:
        query = query.where(HousingStats.zip_code.in_(zip_codes))
    elif state_abbr:
        query = query.where(HousingStats.state_abbr == state_abbr.upper())
    else:
        msg = "Provide zip_codes or state parameter"
        raise ValueError(msg)

    rows = (await session.execute(query.order_by(HousingStats.zip_code))).scalars().all()
    return [HousingRecordResponse.model_validate(row).model_dump() for row in rows]
