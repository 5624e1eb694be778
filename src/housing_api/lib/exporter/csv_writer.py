"""CSV export writer for housing statistics rows."""

import csv
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO

# Characters that trigger formula execution in spreadsheet applications
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def _sanitize_cell(value: object) -> object:
    """Sanitize a cell value to prevent CSV formula injection.

    Prefixes string values starting with formula-triggering characters with
    a single quote. Numbers (including negatives) pass through unchanged.
    """
    if isinstance(value, str) and value and value[0] in _FORMULA_PREFIXES:
        return f"'{value}"
    return value


# Default column order for housing exports
DEFAULT_COLUMNS = [
    "zip_code",
    "county_name",
    "state_abbr",
    "state_name",
    "metro_area",
    "population",
    "median_age",
    "homeownership_rate",
    "vacancy_rate",
    "median_home_price",
    "median_rent",
    "median_household_income",
    "owner_occupied_units",
    "renter_occupied_units",
    "total_housing_units",
    "redfin_median_sale_price",
    "redfin_median_list_price",
    "redfin_homes_sold",
    "redfin_median_days_on_market",
]


def write_csv_stream(
    stream: TextIO,
    records: Iterable[dict[str, Any]],
    *,
    columns: list[str] | None = None,
) -> int:
    """Write housing records as CSV to an open text stream.

    Null values become empty cells; values containing commas are quoted.

    Args:
        stream: Writable text stream.
        records: Iterable of housing record dicts.
        columns: Column names to include. Defaults to DEFAULT_COLUMNS.

    Returns:
        Number of records written.
    """
    cols = columns or DEFAULT_COLUMNS
    writer = csv.DictWriter(stream, fieldnames=cols, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()

    count = 0
    for record in records:
        sanitized = {k: _sanitize_cell(v) for k, v in record.items()}
        writer.writerow(sanitized)
        count += 1
    return count


def write_csv(
    output_path: Path,
    records: Iterable[dict[str, Any]],
    *,
    columns: list[str] | None = None,
) -> int:
    """Write housing records to a CSV file.

    Args:
        output_path: Path to write the CSV file.
        records: Iterable of housing record dicts.
        columns: Column names to include. Defaults to DEFAULT_COLUMNS.

    Returns:
        Number of records written.
    """
    with output_path.open("w", newline="", encoding="utf-8") as f:
        return write_csv_stream(f, records, columns=columns)
