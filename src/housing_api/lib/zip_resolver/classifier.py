"""Classification of ZIP codes that have no Census ZCTA record.

Ranges are closed integer intervals over the ZIP's numeric value and are
checked in order; the first matching rule wins.
"""

from dataclasses import dataclass

from housing_api.lib.zip_resolver.base import ZipType

# APO/FPO/DPO: AE (Europe/Middle East), AA (Americas), AP (Pacific)
MILITARY_RANGES: tuple[tuple[int, int], ...] = (
    (9000, 9499),
    (34000, 34099),
    (96200, 96699),
)

# American Samoa, Guam, US Virgin Islands. Puerto Rico has ZCTA data.
US_TERRITORY_RANGES: tuple[tuple[int, int], ...] = (
    (96799, 96799),
    (96910, 96932),
    (801, 851),
)

MILITARY_EXPLANATION = (
    "Military APO/FPO/DPO ZIP — routes mail to overseas military bases. "
    "Census has no residential data for these addresses."
)

US_TERRITORY_EXPLANATION = (
    "US Territory ZIP (Guam, USVI, or American Samoa). "
    "Census ACS does not publish ZIP-level data for these territories."
)

UNKNOWN_EXPLANATION = " ".join(
    [
        "This ZIP code has no Census residential data.",
        "Common reasons: (1) PO Box-only ZIP — no one lives there;",
        "(2) Unique-institution ZIP assigned to a single organization (hospital, university, government building);",
        "(3) ZIP assigned after January 2020 not yet in Census 5-Year ACS data.",
        "None of these categories have homeownership, income, or rent data available from any public source.",
    ]
)

UNKNOWN_SUGGESTION = (
    "Try a nearby residential ZIP code, or use the /search endpoint to find ZIPs by city or county name."
)


@dataclass(frozen=True)
class ZipClassification:
    """Classification tag with a human-readable explanation."""

    zip_type: ZipType
    explanation: str
    suggestion: str | None = None


def _in_ranges(value: int, ranges: tuple[tuple[int, int], ...]) -> bool:
    return any(low <= value <= high for low, high in ranges)


def classify_zip(zip_code: str) -> ZipClassification:
    """Classify a five-digit ZIP that is absent from both datasets.

    Args:
        zip_code: Five-digit numeric ZIP string.

    Returns:
        ZipClassification for the first matching rule.
    """
    value = int(zip_code, 10)

    if _in_ranges(value, MILITARY_RANGES):
        return ZipClassification(zip_type=ZipType.MILITARY, explanation=MILITARY_EXPLANATION)

    if _in_ranges(value, US_TERRITORY_RANGES):
        return ZipClassification(zip_type=ZipType.US_TERRITORY, explanation=US_TERRITORY_EXPLANATION)

    return ZipClassification(
        zip_type=ZipType.NON_RESIDENTIAL_OR_UNKNOWN,
        explanation=UNKNOWN_EXPLANATION,
        suggestion=UNKNOWN_SUGGESTION,
    )
