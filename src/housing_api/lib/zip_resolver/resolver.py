"""ZIP resolver: primary lookup with crosswalk county fallback.

Resolution runs as a chain of steps, each returning a discriminated result:

    primary_lookup ──hit──> FoundResult (+ national comparison)
          │ miss
    crosswalk_lookup ──no entries──> classify ──> NotFoundResult
          │ dominant county entry
    county_fallback ──> CountyFallbackResult (aggregate may be None)

Each store call runs under the resolver's timeout; collaborator failures,
timeouts and malformed rows surface as TransientStoreError, never as a
not-found result.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeVar

from loguru import logger

from housing_api.lib.zip_resolver.aggregator import CountyAggregate, aggregate_county
from housing_api.lib.zip_resolver.base import (
    BaseCrosswalk,
    BaseHousingStore,
    CrosswalkEntry,
    HousingRecord,
    NationalAverages,
    StoreUnavailableError,
    TransientStoreError,
    ZipType,
    validate_zip_code,
)
from housing_api.lib.zip_resolver.classifier import ZipClassification, classify_zip
from housing_api.lib.zip_resolver.comparator import NationalAveragesCache, national_averages

T = TypeVar("T")


class ResolutionStatus(StrEnum):
    """Terminal state of a resolution."""

    FOUND = "found"
    COUNTY_FALLBACK = "county_fallback"
    NOT_FOUND = "not_found"


class ResolutionStep(StrEnum):
    """Steps that touch a collaborator (used in error context)."""

    PRIMARY_LOOKUP = "primary_lookup"
    NATIONAL_COMPARISON = "national_comparison"
    CROSSWALK_LOOKUP = "crosswalk_lookup"
    COUNTY_FALLBACK = "county_fallback"


@dataclass(frozen=True)
class DataSources:
    """Provenance labels for the two datasets."""

    census_vintage: str
    crosswalk_vintage: str

    @property
    def checked(self) -> list[str]:
        return [self.census_vintage, self.crosswalk_vintage]


@dataclass(frozen=True)
class FoundResult:
    """The ZIP has its own housing record."""

    record: HousingRecord
    national_comparison: NationalAverages
    status: ResolutionStatus = field(default=ResolutionStatus.FOUND, init=False)


@dataclass(frozen=True)
class CountyFallbackResult:
    """The ZIP is a real postal code without ZCTA data; county estimate attached."""

    zip_code: str
    zip_type: ZipType
    requested_zip: CrosswalkEntry
    county_aggregate: CountyAggregate | None
    sources: DataSources
    status: ResolutionStatus = field(default=ResolutionStatus.COUNTY_FALLBACK, init=False)


@dataclass(frozen=True)
class NotFoundResult:
    """The ZIP is in neither dataset; classification explains why."""

    zip_code: str
    classification: ZipClassification
    sources_checked: list[str]
    status: ResolutionStatus = field(default=ResolutionStatus.NOT_FOUND, init=False)


ResolutionResult = FoundResult | CountyFallbackResult | NotFoundResult


def dominant_entry(entries: list[CrosswalkEntry]) -> CrosswalkEntry | None:
    """Pick the county holding the largest share of a ZIP's addresses.

    Ties keep the first entry in the given order.
    """
    if not entries:
        return None
    return max(entries, key=lambda e: e.tot_ratio)


class ZipResolver:
    """Resolve a ZIP to its housing record or a classified fallback.

    Args:
        store: Primary housing record store.
        crosswalk: Postal ZIP-to-county crosswalk.
        sources: Dataset vintages reported as provenance.
        timeout: Per-step timeout in seconds (None for no bound).
        averages_cache: Optional shared cache for national averages.
    """

    def __init__(
        self,
        store: BaseHousingStore,
        crosswalk: BaseCrosswalk,
        *,
        sources: DataSources,
        timeout: float | None = None,
        averages_cache: NationalAveragesCache | None = None,
    ) -> None:
        self._store = store
        self._crosswalk = crosswalk
        self._sources = sources
        self._timeout = timeout
        self._averages_cache = averages_cache

    async def resolve(self, zip_code: str) -> ResolutionResult:
        """Resolve a five-digit ZIP code.

        Raises:
            InvalidZipCodeError: If ``zip_code`` is not five ASCII digits.
            TransientStoreError: If a collaborator fails or times out.
        """
        validate_zip_code(zip_code)

        record = await self._primary_lookup(zip_code)
        if record is not None:
            return await self._found(record)

        dominant = await self._crosswalk_lookup(zip_code)
        if dominant is None:
            return self._unclassified(zip_code)

        return await self._county_fallback(zip_code, dominant)

    async def _primary_lookup(self, zip_code: str) -> HousingRecord | None:
        record = await self._guard(ResolutionStep.PRIMARY_LOOKUP, zip_code, self._store.lookup_by_zip(zip_code))
        logger.debug("ZIP {} primary lookup: {}", zip_code, "hit" if record else "miss")
        return record

    async def _found(self, record: HousingRecord) -> FoundResult:
        averages = await self._guard(
            ResolutionStep.NATIONAL_COMPARISON,
            record.zip_code,
            national_averages(self._store, self._averages_cache),
        )
        return FoundResult(record=record, national_comparison=averages)

    async def _crosswalk_lookup(self, zip_code: str) -> CrosswalkEntry | None:
        entries = await self._guard(
            ResolutionStep.CROSSWALK_LOOKUP,
            zip_code,
            self._crosswalk.entries_for_zip(zip_code),
        )
        dominant = dominant_entry(entries)
        if dominant is not None:
            logger.debug(
                "ZIP {} crosswalk: {} county entries, dominant county {}",
                zip_code,
                len(entries),
                dominant.county_fips,
            )
        return dominant

    async def _county_fallback(self, zip_code: str, dominant: CrosswalkEntry) -> CountyFallbackResult:
        county_fips = dominant.county_fips

        async def _aggregate() -> CountyAggregate | None:
            county_zips = await self._crosswalk.zips_in_county(county_fips)
            return await aggregate_county(county_zips, self._store, county_fips=county_fips)

        aggregate = await self._guard(ResolutionStep.COUNTY_FALLBACK, zip_code, _aggregate(), county_fips)
        zip_type = ZipType.NON_RESIDENTIAL if dominant.is_non_residential else ZipType.RESIDENTIAL_NO_CENSUS

        if aggregate is None:
            logger.info(f"ZIP {zip_code}: county {county_fips} has no usable housing data")

        return CountyFallbackResult(
            zip_code=zip_code,
            zip_type=zip_type,
            requested_zip=dominant,
            county_aggregate=aggregate,
            sources=self._sources,
        )

    def _unclassified(self, zip_code: str) -> NotFoundResult:
        classification = classify_zip(zip_code)
        logger.debug("ZIP {} not in any source, classified as {}", zip_code, classification.zip_type)
        return NotFoundResult(
            zip_code=zip_code,
            classification=classification,
            sources_checked=self._sources.checked,
        )

    async def _guard(
        self,
        step: ResolutionStep,
        zip_code: str,
        awaitable: Awaitable[T],
        county_fips: str | None = None,
    ) -> T:
        """Await a collaborator call under the timeout, normalizing failures."""
        try:
            async with asyncio.timeout(self._timeout):
                return await awaitable
        except TimeoutError as e:
            logger.warning(f"ZIP {zip_code}: {step} timed out after {self._timeout}s")
            raise TransientStoreError(step, zip_code, f"timed out after {self._timeout}s", county_fips) from e
        except StoreUnavailableError as e:
            logger.warning(f"ZIP {zip_code}: {step} failed: {e}")
            raise TransientStoreError(step, zip_code, str(e), county_fips) from e
        except ValueError as e:
            # Dataclass validation rejected a row returned by the collaborator
            logger.warning(f"ZIP {zip_code}: {step} returned malformed data: {e}")
            raise TransientStoreError(step, zip_code, f"malformed data: {e}", county_fips) from e
