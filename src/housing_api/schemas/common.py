"""Common Pydantic v2 schemas and presentation helpers shared across the API."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error message")
    code: str | None = Field(default=None, description="Machine-readable error code")


class HealthResponse(BaseModel):
    """Liveness/readiness probe result."""

    status: str = Field(description="'ok' when the database answered, otherwise 'error'")
    db: str = Field(description="'connected' or the connection error")


def round_rate(value: float | None) -> float | None:
    """Percent/ratio values: two decimals."""
    return round(value, 2) if value is not None else None


def round_age(value: float | None) -> float | None:
    return round(value, 1) if value is not None else None


def round_currency(value: float | None) -> int | None:
    """Dollar amounts and counts: nearest integer."""
    return int(round(value)) if value is not None else None
