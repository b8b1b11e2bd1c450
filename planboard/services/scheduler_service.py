"""
Scheduler service for multi-day calendar placement.

Handles grouping todos by start date and carrying overflow forward until
every hour has been placed.
"""

import heapq
import math
from datetime import date, timedelta
from typing import Iterable, Optional

from planboard.core.config import BusinessHoursConfig, get_business_hours, get_settings
from planboard.core.exceptions import SchedulingOverflowError
from planboard.core.logger import setup_logger
from planboard.models.enums import TodoPriority
from planboard.models.schedule import DailyPlacement, ScheduleFilter, ScheduleMap, TodoWithMeta
from planboard.models.task import Task, Todo
from planboard.services.category_classifier import with_category
from planboard.services.daily_scheduler import place_day, sort_day_items
from planboard.utils.datetime_utils import date_key, datetime_to_hour, hour_to_datetime

logger = setup_logger(__name__)


class SchedulerService:
    """
    Service for placing todos on the calendar.

    Provides:
    - Assignee filtering and grouping by start date
    - Daily placement with break splitting
    - Overflow carry-over across days
    """

    def __init__(
        self,
        config: Optional[BusinessHoursConfig] = None,
        iteration_factor: Optional[int] = None,
        respect_planned_times: Optional[bool] = None,
    ):
        """
        Initialize scheduler service.

        Args:
            config: Business calendar (None = from settings)
            iteration_factor: Multiplier for the overflow loop bound (None = from settings)
            respect_planned_times: Keep planned start hours on days other than
                today (None = from settings)
        """
        settings = get_settings()
        self.config = config or get_business_hours()
        self.iteration_factor = iteration_factor or settings.SCHEDULE_ITERATION_FACTOR
        self.respect_planned_times = (
            respect_planned_times
            if respect_planned_times is not None
            else settings.RESPECT_PLANNED_TIMES
        )

    def build_todos_by_date(
        self,
        tasks: list[Task],
        schedule_filter: Optional[ScheduleFilter] = None,
    ) -> dict[date, list[TodoWithMeta]]:
        """Group filtered todos by start date, each day sorted for placement."""
        schedule_filter = schedule_filter or ScheduleFilter()
        todos_by_date: dict[date, list[TodoWithMeta]] = {}

        for task in tasks:
            for todo in task.todos:
                if not schedule_filter.accepts(todo):
                    continue
                start_time = (
                    datetime_to_hour(todo.calendar_start_datetime)
                    if todo.calendar_start_datetime
                    else None
                )
                item = TodoWithMeta(
                    todo=todo.model_copy(deep=True),
                    task_id=task.id,
                    task_title=task.title,
                    priority=(
                        todo.priority if todo.priority is not None else TodoPriority.LOW
                    ),
                    due_date=task.due_date,
                    is_external=todo.is_external,
                    source_id=todo.id,
                    start_time=start_time,
                )
                todos_by_date.setdefault(todo.start_date, []).append(with_category(item))

        return {day: sort_day_items(items) for day, items in todos_by_date.items()}

    def process_day(
        self,
        day: date,
        bucket: list[TodoWithMeta],
        carried: list[TodoWithMeta],
        today: Optional[date] = None,
    ) -> DailyPlacement:
        """
        Place a day's own items followed by overflow carried from the day before.

        Planned start hours are kept on every day except today, which is
        always laid out back-to-back.
        """
        honor_planned = self.respect_planned_times and day != today
        return place_day(day, bucket + carried, self.config, honor_planned=honor_planned)

    def schedule(
        self,
        tasks: list[Task],
        schedule_filter: Optional[ScheduleFilter] = None,
        today: Optional[date] = None,
    ) -> ScheduleMap:
        """
        Build the schedule map for all tasks.

        Dates are processed in ascending order. Overflow from a date is
        carried into the next date's queue, which is (re)placed with its own
        items followed by the carried fragments.

        Args:
            tasks: Tasks whose todos are scheduled
            schedule_filter: Assignee filter (None = unassigned only)
            today: Date whose first incomplete item is flagged as next todo;
                planned start hours are not kept on this date (None = date.today())

        Returns:
            Mapping of YYYY-MM-DD to placed items, in date order

        Raises:
            SchedulingOverflowError: If the overflow loop exceeds its bound
        """
        todos_by_date = self.build_todos_by_date(tasks, schedule_filter)
        if not todos_by_date:
            return {}
        today = today or date.today()

        all_items = [item for items in todos_by_date.values() for item in items]
        total_hours = sum(item.hours for item in all_items)
        limit = self.iteration_factor * (
            len(all_items) + math.ceil(total_hours / self.config.max_daily_hours)
        ) + len(todos_by_date)

        pending = list(todos_by_date.keys())
        heapq.heapify(pending)
        queued = set(pending)
        carried: dict[date, list[TodoWithMeta]] = {}
        placed_by_date: dict[date, list[TodoWithMeta]] = {}
        iterations = 0

        while pending:
            iterations += 1
            if iterations > limit:
                raise SchedulingOverflowError(iterations=iterations, limit=limit)

            day = heapq.heappop(pending)
            queued.discard(day)
            placement = self.process_day(
                day,
                todos_by_date.get(day, []),
                carried.pop(day, []),
                today=today,
            )
            placed_by_date[day] = placement.placed

            if placement.overflow:
                next_day = day + timedelta(days=1)
                carried[next_day] = placement.overflow
                if next_day not in queued:
                    heapq.heappush(pending, next_day)
                    queued.add(next_day)

        schedule_map = {date_key(day): placed_by_date[day] for day in sorted(placed_by_date)}
        self.mark_next_todo(schedule_map, today)

        fragment_count = sum(len(items) for items in schedule_map.values())
        logger.info(
            f"Scheduled {len(all_items)} todos into {fragment_count} entries "
            f"across {len(schedule_map)} days ({iterations} day passes)"
        )
        return schedule_map

    @staticmethod
    def mark_next_todo(schedule_map: ScheduleMap, today: date) -> None:
        """Flag the first incomplete item of today's list."""
        items = schedule_map.get(date_key(today))
        if not items:
            return
        for index, item in enumerate(items):
            if not item.todo.completed:
                items[index] = item.model_copy(update={"is_next_todo": True})
                return

    def organize_todos_for_date(self, todos: Iterable[Todo], day: date) -> list[Todo]:
        """
        Re-lay a day's incomplete todos back-to-back from the start hour.

        Completed todos keep their times. A todo that would end after the
        business end hour moves to the next day's start hour.

        Returns:
            Completed todos followed by the re-laid todos
        """
        todos_for_day = [
            todo
            for todo in todos
            if todo.calendar_start_datetime and todo.calendar_start_datetime.date() == day
        ]
        completed = [todo for todo in todos_for_day if todo.completed]
        pending = sorted(
            (todo for todo in todos_for_day if not todo.completed),
            key=lambda todo: todo.calendar_start_datetime,
        )

        current = hour_to_datetime(day, self.config.start_hour)
        organized: list[Todo] = []
        for todo in pending:
            duration = timedelta(minutes=round((todo.estimated_hours or 1) * 60))
            end = current + duration
            if end > hour_to_datetime(current.date(), self.config.end_hour):
                current = hour_to_datetime(current.date() + timedelta(days=1), self.config.start_hour)
                end = current + duration
            organized.append(
                todo.model_copy(
                    update={"calendar_start_datetime": current, "calendar_end_datetime": end}
                )
            )
            current = end

        return completed + organized
