"""
Resource leveling service.

This module provides functionality to:
- Redistribute todos backward from each task's due date under a per-assignee
  daily hour cap
- Produce a reviewable change set (old date -> new date)
- Apply only the approved changes to a copy of the tasks
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterator, Optional

from planboard.core.config import get_settings
from planboard.core.exceptions import LevelingDeadlineExceededError
from planboard.core.logger import setup_logger
from planboard.models.schedule import LevelingResult, ScheduleChange
from planboard.models.task import Task, Todo
from planboard.utils.datetime_utils import calculate_calendar_datetime, is_weekday

logger = setup_logger(__name__)

UNASSIGNED = "unassigned"
EPSILON = 1e-9


class LevelingService:
    """Service for per-assignee resource leveling."""

    def __init__(
        self,
        daily_cap_hours: Optional[float] = None,
        lookback_days: Optional[int] = None,
        max_advance_days: Optional[int] = None,
        skip_weekends: bool = False,
    ):
        """
        Initialize leveling service.

        Args:
            daily_cap_hours: Default hours per assignee per day
            lookback_days: Days before the due date searched first (latest first)
            max_advance_days: Days on or after the due date searched when the
                lookback window is full
            skip_weekends: Never place todos on Saturday/Sunday
        """
        settings = get_settings()
        self.daily_cap_hours = (
            daily_cap_hours if daily_cap_hours is not None else settings.DEFAULT_DAILY_CAP_HOURS
        )
        self.lookback_days = (
            lookback_days if lookback_days is not None else settings.LEVELING_LOOKBACK_DAYS
        )
        self.max_advance_days = (
            max_advance_days if max_advance_days is not None else settings.LEVELING_MAX_ADVANCE_DAYS
        )
        self.skip_weekends = skip_weekends

    @staticmethod
    def _assignees(todo: Todo) -> list[str]:
        return [todo.assignee_id or UNASSIGNED]

    def _candidate_dates(self, due_day: date, earliest: Optional[date]) -> Iterator[date]:
        """Dates to try for a todo: the lookback window latest-first, then forward from the due date."""
        for offset in range(1, self.lookback_days + 1):
            day = due_day - timedelta(days=offset)
            if earliest and day < earliest:
                break
            if self.skip_weekends and not is_weekday(day):
                continue
            yield day

        forward_start = max(due_day, earliest) if earliest else due_day
        for offset in range(self.max_advance_days + 1):
            day = forward_start + timedelta(days=offset)
            if self.skip_weekends and not is_weekday(day):
                continue
            yield day

    def _find_date(
        self,
        task: Task,
        todo: Todo,
        cap: float,
        load: dict[tuple[str, date], float],
        earliest: Optional[date],
    ) -> date:
        hours = todo.estimated_hours
        assignees = self._assignees(todo)
        for day in self._candidate_dates(task.due_date.date(), earliest):
            if all(load[(assignee, day)] + hours <= cap + EPSILON for assignee in assignees):
                return day
        raise LevelingDeadlineExceededError(
            f"No date within {self.lookback_days} days before or {self.max_advance_days} days "
            f"after the due date can fit todo {todo.id}",
            task_id=task.id,
            todo_id=todo.id,
            hours=hours,
            cap=cap,
        )

    def plan_leveling(
        self,
        tasks: list[Task],
        daily_cap_hours: Optional[float] = None,
        earliest_date: Optional[date] = None,
    ) -> LevelingResult:
        """
        Level todos backward from their task due dates.

        Tasks are handled in due-date order, todos in list order.
        Completed todos are left where they are and do not count toward load.
        The input tasks are not modified.

        Args:
            tasks: Tasks to level
            daily_cap_hours: Hours per assignee per day (None = default)
            earliest_date: Dates before this are never proposed

        Returns:
            LevelingResult with the change set and the leveled task copies

        Raises:
            LevelingDeadlineExceededError: If a todo cannot be placed
        """
        cap = daily_cap_hours if daily_cap_hours is not None else self.daily_cap_hours
        leveled = [task.model_copy(deep=True) for task in tasks]
        load: dict[tuple[str, date], float] = defaultdict(float)
        changes: list[ScheduleChange] = []

        for task in sorted(leveled, key=lambda t: t.due_date):
            new_end_times = []
            for index, todo in enumerate(task.todos):
                if todo.completed:
                    continue
                if todo.estimated_hours > cap + EPSILON:
                    raise LevelingDeadlineExceededError(
                        f"Todo {todo.id} needs {todo.estimated_hours}h, more than the "
                        f"daily cap of {cap}h",
                        task_id=task.id,
                        todo_id=todo.id,
                        hours=todo.estimated_hours,
                        cap=cap,
                    )

                new_day = self._find_date(task, todo, cap, load, earliest_date)
                for assignee in self._assignees(todo):
                    load[(assignee, new_day)] += todo.estimated_hours

                if new_day != todo.start_date:
                    changes.append(
                        ScheduleChange(
                            task_id=task.id,
                            task_title=task.title,
                            todo_id=todo.id,
                            todo_title=todo.text,
                            old_date=todo.start_date,
                            new_date=new_day,
                        )
                    )

                start, end = calculate_calendar_datetime(new_day, todo.estimated_hours)
                task.todos[index] = todo.model_copy(
                    update={
                        "start_date": new_day,
                        "calendar_start_datetime": start,
                        "calendar_end_datetime": end,
                    }
                )
                new_end_times.append(end)

            # Completed todos keep their times and do not move the due date
            if new_end_times:
                task.due_date = max(new_end_times)

        logger.info(f"Leveling proposed {len(changes)} changes across {len(tasks)} tasks")
        return LevelingResult(changes=changes, tasks=leveled)

    def level_schedule(
        self,
        tasks: list[Task],
        daily_cap_hours: Optional[float] = None,
        earliest_date: Optional[date] = None,
    ) -> list[ScheduleChange]:
        """Change set only (see plan_leveling)."""
        return self.plan_leveling(tasks, daily_cap_hours, earliest_date).changes

    def apply_changes(
        self,
        tasks: list[Task],
        approved: list[ScheduleChange],
    ) -> list[Task]:
        """
        Apply approved changes to copies of the tasks.

        Only todos named by an approved change get a new start date and
        recomputed calendar times; every other field is left untouched.

        Args:
            tasks: Current tasks (not modified)
            approved: Changes accepted by the user

        Returns:
            Updated task copies
        """
        approved_by_todo = {(change.task_id, change.todo_id): change for change in approved}
        applied: set[tuple[str, str]] = set()
        updated_tasks: list[Task] = []

        for task in tasks:
            updated = task.model_copy(deep=True)
            for index, todo in enumerate(updated.todos):
                change = approved_by_todo.get((task.id, todo.id))
                if change is None:
                    continue
                start, end = calculate_calendar_datetime(change.new_date, todo.estimated_hours)
                updated.todos[index] = todo.model_copy(
                    update={
                        "start_date": change.new_date,
                        "calendar_start_datetime": start,
                        "calendar_end_datetime": end,
                    }
                )
                applied.add((task.id, todo.id))
            updated_tasks.append(updated)

        for task_id, todo_id in sorted(approved_by_todo.keys() - applied):
            logger.warning(f"Approved change skipped: todo {todo_id} not found in task {task_id}")

        logger.info(f"Applied {len(applied)}/{len(approved)} approved schedule changes")
        return updated_tasks
