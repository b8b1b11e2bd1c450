"""Pydantic models (schemas) for the application."""

from planboard.models.enums import FragmentKind, TodoCategory, TodoPriority
from planboard.models.schedule import (
    DailyPlacement,
    LevelingResult,
    ScheduleChange,
    ScheduleFilter,
    ScheduleMap,
    TodoWithMeta,
)
from planboard.models.task import Task, Todo
from planboard.models.workload import DateRange, WorkloadSummary, WorkloadSummaryByPeriod

__all__ = [
    # Enums
    "FragmentKind",
    "TodoCategory",
    "TodoPriority",
    # Task
    "Task",
    "Todo",
    # Schedule
    "DailyPlacement",
    "LevelingResult",
    "ScheduleChange",
    "ScheduleFilter",
    "ScheduleMap",
    "TodoWithMeta",
    # Workload
    "DateRange",
    "WorkloadSummary",
    "WorkloadSummaryByPeriod",
]
