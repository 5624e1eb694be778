"""Data-quality scoring for housing_stats field completeness."""

from dataclasses import dataclass
from enum import StrEnum


class CompletenessStatus(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


# Lower bound (inclusive) of each status, best first
_STATUS_THRESHOLDS: tuple[tuple[float, CompletenessStatus], ...] = (
    (95.0, CompletenessStatus.EXCELLENT),
    (80.0, CompletenessStatus.GOOD),
    (50.0, CompletenessStatus.FAIR),
)


@dataclass(frozen=True)
class FieldCompleteness:
    completeness: float
    status: CompletenessStatus


def completeness_pct(present: int, total: int) -> float:
    """Percent of rows with a value, rounded to one decimal (0.0 for an empty table)."""
    if total <= 0:
        return 0.0
    return round(present / total * 100, 1)


def completeness_status(pct: float) -> CompletenessStatus:
    for threshold, status in _STATUS_THRESHOLDS:
        if pct >= threshold:
            return status
    return CompletenessStatus.POOR


def score_fields(total: int, present_counts: dict[str, int]) -> dict[str, FieldCompleteness]:
    """Score each field's non-null count against the table size.

    Args:
        total: Total number of rows.
        present_counts: Mapping of field name to its non-null row count.

    Returns:
        Mapping of field name to completeness percentage and status.
    """
    scored: dict[str, FieldCompleteness] = {}
    for name, present in present_counts.items():
        pct = completeness_pct(present, total)
        scored[name] = FieldCompleteness(completeness=pct, status=completeness_status(pct))
    return scored
