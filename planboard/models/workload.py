"""
Workload summary models.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, model_validator


class WorkloadSummary(BaseModel):
    """Hours per workload category for one period."""

    external_hours: float = 0.0
    internal_hours: float = 0.0
    buffer_hours: float = 0.0
    free_hours: float = Field(0.0, ge=0)
    total_hours: float = 0.0


class WorkloadSummaryByPeriod(BaseModel):
    """Daily (YYYY-MM-DD), weekly (YYYY-Www) and monthly (YYYY-MM) summaries."""

    daily: dict[str, WorkloadSummary] = Field(default_factory=dict)
    weekly: dict[str, WorkloadSummary] = Field(default_factory=dict)
    monthly: dict[str, WorkloadSummary] = Field(default_factory=dict)


class DateRange(BaseModel):
    """Inclusive date range."""

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self
