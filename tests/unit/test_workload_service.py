"""
Unit tests for WorkloadService.
"""

from datetime import date

import pytest

from planboard.models.enums import TodoCategory
from planboard.models.schedule import TodoWithMeta
from planboard.models.task import Todo
from planboard.models.workload import DateRange, WorkloadSummary
from planboard.services.workload_service import (
    WorkloadService,
    format_hours,
    utilization_percent,
)

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 20)


def make_item(
    todo_id: str,
    hours: float,
    day: date = MONDAY,
    text: str = "work",
    is_external: bool = False,
    category: TodoCategory | None = None,
) -> TodoWithMeta:
    todo = Todo(id=todo_id, text=text, start_date=day, estimated_hours=hours)
    return TodoWithMeta(
        todo=todo,
        task_id="task-1",
        task_title="Task",
        source_id=todo_id,
        is_external=is_external,
        category=category,
    )


def test_daily_summary_by_category():
    schedule_map = {
        "2024-01-15": [
            make_item("meeting", 3, is_external=True),
            make_item("build", 2),
            make_item("slack", 1, text="バッファ"),
        ]
    }
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(schedule_map, DateRange(start_date=MONDAY, end_date=MONDAY))

    daily = result.daily["2024-01-15"]
    assert daily.external_hours == 3
    assert daily.internal_hours == 2
    assert daily.buffer_hours == 1
    assert daily.total_hours == 6
    assert daily.free_hours == 2


def test_weekly_and_monthly_free_hours():
    schedule_map = {"2024-01-15": [make_item("build", 6)]}
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(schedule_map, DateRange(start_date=MONDAY, end_date=MONDAY))

    assert result.weekly["2024-W03"].total_hours == 6
    assert result.weekly["2024-W03"].free_hours == 8 * 5 - 6
    # January 2024 has 23 weekdays
    assert result.monthly["2024-01"].free_hours == 8 * 23 - 6


def test_weekend_days_have_no_free_hours():
    schedule_map = {"2024-01-20": [make_item("weekend", 2, day=SATURDAY)]}
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(schedule_map, DateRange(start_date=SATURDAY, end_date=SATURDAY))

    assert result.daily["2024-01-20"].total_hours == 2
    assert result.daily["2024-01-20"].free_hours == 0


def test_free_hours_never_negative():
    schedule_map = {"2024-01-15": [make_item("a", 7), make_item("b", 5)]}
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(schedule_map, DateRange(start_date=MONDAY, end_date=MONDAY))

    assert result.daily["2024-01-15"].total_hours == 12
    assert result.daily["2024-01-15"].free_hours == 0


def test_every_day_in_range_gets_a_summary():
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload({}, DateRange(start_date=MONDAY, end_date=date(2024, 1, 21)))

    assert len(result.daily) == 7
    assert result.daily["2024-01-16"].free_hours == 8
    assert result.daily["2024-01-21"].free_hours == 0
    assert list(result.weekly.keys()) == ["2024-W03"]


def test_entries_outside_range_are_ignored():
    schedule_map = {
        "2024-01-15": [make_item("in", 2)],
        "2024-01-22": [make_item("out", 4, day=date(2024, 1, 22))],
    }
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(schedule_map, DateRange(start_date=MONDAY, end_date=MONDAY))

    assert result.monthly["2024-01"].total_hours == 2


def test_capacity_override_and_explicit_category():
    schedule_map = {"2024-01-15": [make_item("a", 2, category=TodoCategory.BUFFER)]}
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(
        schedule_map,
        DateRange(start_date=MONDAY, end_date=MONDAY),
        daily_capacity_hours=6,
    )

    assert result.daily["2024-01-15"].buffer_hours == 2
    assert result.daily["2024-01-15"].free_hours == 4


def test_week_key_crosses_year_boundary():
    schedule_map = {"2024-12-30": [make_item("a", 1, day=date(2024, 12, 30))]}
    service = WorkloadService(default_capacity_hours=8)

    result = service.aggregate_workload(
        schedule_map, DateRange(start_date=date(2024, 12, 30), end_date=date(2024, 12, 30))
    )

    assert "2025-W01" in result.weekly
    assert "2024-12" in result.monthly


def test_utilization_percent():
    summary = WorkloadSummary(total_hours=6)
    assert utilization_percent(summary, 8) == pytest.approx(75)
    assert utilization_percent(summary, 0) == 0


def test_format_hours():
    assert format_hours(1.5) == "1.5h"
    assert format_hours(8) == "8.0h"
