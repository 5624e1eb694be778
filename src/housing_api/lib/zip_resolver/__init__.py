"""ZIP resolver library: lookup with classified county fallback.

Public API:
    - ZipResolver: Orchestrates primary lookup, crosswalk fallback, classification
    - classify_zip: Classify a ZIP absent from both datasets
    - aggregate_county / aggregate_records: Null-excluding county aggregates
    - national_averages / NationalAveragesCache: National baselines
    - BaseHousingStore / BaseCrosswalk: Collaborator interfaces
    - validate_zip_code: Five-digit input validation
"""

from housing_api.lib.zip_resolver.aggregator import (
    CountyAggregate,
    aggregate_county,
    aggregate_records,
    mean_of,
    sum_of,
)
from housing_api.lib.zip_resolver.base import (
    BaseCrosswalk,
    BaseHousingStore,
    CrosswalkEntry,
    HousingRecord,
    InvalidZipCodeError,
    NationalAverages,
    StoreUnavailableError,
    TransientStoreError,
    ZipType,
    validate_zip_code,
)
from housing_api.lib.zip_resolver.classifier import ZipClassification, classify_zip
from housing_api.lib.zip_resolver.comparator import NationalAveragesCache, national_averages
from housing_api.lib.zip_resolver.resolver import (
    CountyFallbackResult,
    DataSources,
    FoundResult,
    NotFoundResult,
    ResolutionResult,
    ResolutionStatus,
    ResolutionStep,
    ZipResolver,
    dominant_entry,
)

__all__ = [
    "BaseCrosswalk",
    "BaseHousingStore",
    "CountyAggregate",
    "CountyFallbackResult",
    "CrosswalkEntry",
    "DataSources",
    "FoundResult",
    "HousingRecord",
    "InvalidZipCodeError",
    "NationalAverages",
    "NationalAveragesCache",
    "NotFoundResult",
    "ResolutionResult",
    "ResolutionStatus",
    "ResolutionStep",
    "StoreUnavailableError",
    "TransientStoreError",
    "ZipClassification",
    "ZipResolver",
    "ZipType",
    "aggregate_county",
    "aggregate_records",
    "classify_zip",
    "dominant_entry",
    "mean_of",
    "national_averages",
    "sum_of",
    "validate_zip_code",
]
