"""
Workload aggregation over a schedule map.

Sums placed hours per category into daily, weekly and monthly summaries and
derives free capacity for working days.
"""

from typing import Optional

from planboard.core.config import get_settings
from planboard.core.logger import setup_logger
from planboard.models.enums import TodoCategory
from planboard.models.schedule import ScheduleMap
from planboard.models.workload import DateRange, WorkloadSummary, WorkloadSummaryByPeriod
from planboard.services.category_classifier import classify
from planboard.utils.datetime_utils import (
    count_weekdays_in_month,
    date_key,
    is_weekday,
    iter_dates,
    month_key,
    parse_date_key,
    week_key,
)

logger = setup_logger(__name__)

WORKABLE_DAYS_PER_WEEK = 5

CATEGORY_FIELDS = {
    TodoCategory.EXTERNAL: "external_hours",
    TodoCategory.INTERNAL: "internal_hours",
    TodoCategory.BUFFER: "buffer_hours",
}


def _add_hours(summary: WorkloadSummary, category: TodoCategory, hours: float) -> None:
    field = CATEGORY_FIELDS[category]
    setattr(summary, field, getattr(summary, field) + hours)
    summary.total_hours += hours


def format_hours(hours: float) -> str:
    """Format hours for display (e.g. "1.5h")."""
    return f"{hours:.1f}h"


def utilization_percent(summary: WorkloadSummary, capacity_hours: float) -> float:
    """Total hours as a percentage of capacity (0 when capacity is not positive)."""
    if capacity_hours <= 0:
        return 0.0
    return summary.total_hours / capacity_hours * 100


class WorkloadService:
    """Service for workload summaries."""

    def __init__(self, default_capacity_hours: Optional[float] = None):
        """
        Initialize workload service.

        Args:
            default_capacity_hours: Daily capacity when callers pass none
        """
        self.default_capacity_hours = (
            default_capacity_hours
            if default_capacity_hours is not None
            else get_settings().DEFAULT_DAILY_CAPACITY_HOURS
        )

    def aggregate_workload(
        self,
        schedule_map: ScheduleMap,
        date_range: DateRange,
        daily_capacity_hours: Optional[float] = None,
    ) -> WorkloadSummaryByPeriod:
        """
        Aggregate placed hours over a date range.

        Free hours only count working days: a weekday gets capacity minus its
        total, a week gets five days of capacity minus its total, and a month
        gets capacity times its weekday count minus its total, all floored at
        zero. Weekend days keep zero free hours.

        Args:
            schedule_map: Output of SchedulerService.schedule (not modified)
            date_range: Inclusive range to summarize
            daily_capacity_hours: Capacity per working day (None = default)

        Returns:
            WorkloadSummaryByPeriod keyed by date, ISO week and year-month
        """
        capacity = (
            daily_capacity_hours
            if daily_capacity_hours is not None
            else self.default_capacity_hours
        )
        result = WorkloadSummaryByPeriod()

        for day in iter_dates(date_range.start_date, date_range.end_date):
            day_key = date_key(day)
            daily = result.daily.setdefault(day_key, WorkloadSummary())
            weekly = result.weekly.setdefault(week_key(day), WorkloadSummary())
            monthly = result.monthly.setdefault(month_key(day), WorkloadSummary())

            for item in schedule_map.get(day_key, []):
                category = classify(item)
                hours = item.hours or 0.0
                for summary in (daily, weekly, monthly):
                    _add_hours(summary, category, hours)

        for day_key, summary in result.daily.items():
            if is_weekday(parse_date_key(day_key)):
                summary.free_hours = max(0.0, capacity - summary.total_hours)

        for summary in result.weekly.values():
            summary.free_hours = max(
                0.0, capacity * WORKABLE_DAYS_PER_WEEK - summary.total_hours
            )

        for key, summary in result.monthly.items():
            year, month = (int(part) for part in key.split("-"))
            workable_days = count_weekdays_in_month(year, month)
            summary.free_hours = max(0.0, capacity * workable_days - summary.total_hours)

        logger.info(
            f"Aggregated workload {date_range.start_date}..{date_range.end_date}: "
            f"{len(result.daily)} days, {len(result.weekly)} weeks, {len(result.monthly)} months"
        )
        return result
