"""Exporter library: CSV serialization of housing statistics."""

import io
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from housing_api.lib.exporter.csv_writer import DEFAULT_COLUMNS, write_csv, write_csv_stream


def render_csv(records: Iterable[dict[str, Any]], *, columns: list[str] | None = None) -> tuple[str, int]:
    """Render records to an in-memory CSV string.

    Returns:
        Tuple of (csv_text, record_count).
    """
    buffer = io.StringIO()
    count = write_csv_stream(buffer, records, columns=columns)
    return buffer.getvalue(), count


def export_filename(now: datetime | None = None) -> str:
    """Attachment filename for a CSV export, stamped with the UTC time."""
    stamp = (now or datetime.now(tz=UTC)).strftime("%Y%m%dT%H%M%SZ")
    return f"housing-stats-{stamp}.csv"


__all__ = [
    "DEFAULT_COLUMNS",
    "export_filename",
    "render_csv",
    "write_csv",
    "write_csv_stream",
]
