"""
Todo utility functions.

Helper functions for querying todos across tasks.
"""

from datetime import date, datetime, time
from typing import Iterable

from planboard.models.schedule import ScheduleFilter
from planboard.models.task import Task, Todo


class TodoWithTask(Todo):
    """Todo flattened together with its parent task's identity."""

    task_id: str
    task_title: str


def flatten_tasks_to_todos(tasks: Iterable[Task]) -> list[TodoWithTask]:
    """All todos of all tasks, each tagged with its task id and title."""
    return [
        TodoWithTask(**todo.model_dump(), task_id=task.id, task_title=task.title)
        for task in tasks
        for todo in task.todos
    ]


def _starts_within(todo: Todo, start: datetime, end: datetime) -> bool:
    value = todo.calendar_start_datetime
    return value is not None and start <= value <= end


def filter_todos_for_selected_date(
    todos: Iterable[Todo],
    selected_date: date,
    selected_assignee_ids: list[str],
    include_unassigned: bool,
) -> list[Todo]:
    """
    Todos starting on the selected date that pass the assignee filter.

    Todos without a calendar start time are not placed yet and are skipped.
    """
    schedule_filter = ScheduleFilter(
        selected_assignee_ids=selected_assignee_ids,
        include_unassigned=include_unassigned,
    )
    day_start = datetime.combine(selected_date, time.min)
    day_end = datetime.combine(selected_date, time.max)
    return [
        todo
        for todo in todos
        if _starts_within(todo, day_start, day_end) and schedule_filter.accepts(todo)
    ]


def get_todos_in_date_range(todos: Iterable[Todo], start_date: date, end_date: date) -> list[Todo]:
    """Todos whose calendar start falls between the two dates (inclusive)."""
    range_start = datetime.combine(start_date, time.min)
    range_end = datetime.combine(end_date, time.max)
    return [todo for todo in todos if _starts_within(todo, range_start, range_end)]
