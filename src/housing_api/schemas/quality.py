"""Pydantic v2 schemas for data-quality and metro coverage reports."""

from pydantic import BaseModel, Field


class FieldQuality(BaseModel):
    completeness: float = Field(description="Percent of rows with a value (one decimal)")
    status: str = Field(description="excellent (>=95), good (>=80), fair (>=50) or poor")


class QualityReportResponse(BaseModel):
    """Per-field completeness of the housing_stats table."""

    total_records: int
    metrics: dict[str, FieldQuality]


class MetroCoverageResponse(BaseModel):
    """Coverage of raw CBSA names vs the normalized metro_area field."""

    total: int
    has_cbsa: int
    distinct_metros: int
    has_metro_area: int

    @property
    def metro_area_pct(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.has_metro_area / self.total * 100, 1)
