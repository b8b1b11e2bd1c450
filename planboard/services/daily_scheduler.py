"""
Daily placement of todos within business hours.

Places one day's items back-to-back from the start hour, splits items that
straddle the break window, and hands back whatever exceeds the daily maximum
as overflow for the following day.
"""

from collections import deque
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from planboard.core.config import BusinessHoursConfig, get_business_hours
from planboard.core.logger import setup_logger
from planboard.models.enums import FragmentKind
from planboard.models.schedule import DailyPlacement, TodoWithMeta
from planboard.utils.datetime_utils import hour_to_datetime

logger = setup_logger(__name__)

EPSILON = 1e-9


def sort_day_items(items: Iterable[TodoWithMeta]) -> list[TodoWithMeta]:
    """
    Order a day's items before placement.

    Items that already carry a start time come first, by start time; the rest
    follow by priority (higher first), then by their task's due date.
    """

    def sort_key(item: TodoWithMeta) -> tuple:
        if item.start_time is not None:
            return (0, item.start_time, 0, datetime.min)
        return (1, 0.0, -item.priority, item.due_date or datetime.max)

    return sorted(items, key=sort_key)


def _fragment(
    item: TodoWithMeta,
    hours: float,
    kind: FragmentKind,
    start_time: Optional[float] = None,
) -> TodoWithMeta:
    todo = item.todo.model_copy(
        update={
            "estimated_hours": hours,
            "calendar_start_datetime": None,
            "calendar_end_datetime": None,
        }
    )
    return item.model_copy(
        update={
            "todo": todo,
            "kind": kind,
            "start_time": start_time,
            "is_next_todo": False,
        }
    )


def _placed(item: TodoWithMeta, day: date, start_time: float, hours: float) -> TodoWithMeta:
    start = hour_to_datetime(day, start_time)
    todo = item.todo.model_copy(
        update={
            "estimated_hours": hours,
            "calendar_start_datetime": start,
            "calendar_end_datetime": start + timedelta(hours=hours),
        }
    )
    return item.model_copy(update={"todo": todo, "start_time": start_time})


def _planned_start(item: TodoWithMeta, config: BusinessHoursConfig) -> Optional[float]:
    """Planned start hour of a whole item, if it falls in working hours."""
    if item.kind != FragmentKind.WHOLE or item.start_time is None:
        return None
    hour = item.start_time
    if not (config.start_hour <= hour < config.end_hour):
        return None
    if config.break_start <= hour < config.break_end:
        return None
    return hour


def _hours_until_end(start: float, config: BusinessHoursConfig) -> float:
    available = config.end_hour - start
    if start < config.break_start:
        available -= config.break_hours
    return available


def _place_planned(
    item: TodoWithMeta,
    day: date,
    start: float,
    hours: float,
    config: BusinessHoursConfig,
) -> list[TodoWithMeta]:
    if start < config.break_start and start + hours > config.break_start + EPSILON:
        before_break = config.break_start - start
        after_break = hours - before_break
        remainder = _fragment(item, after_break, FragmentKind.BREAK_SPLIT)
        return [
            _placed(item, day, start, before_break),
            _placed(remainder, day, config.break_end, after_break),
        ]
    return [_placed(item, day, start, hours)]


def place_day(
    day: date,
    items: Iterable[TodoWithMeta],
    config: Optional[BusinessHoursConfig] = None,
    honor_planned: bool = False,
) -> DailyPlacement:
    """
    Assign start times to one day's items.

    Items are processed from a work queue in the given order. An item that
    would push the day past max_daily_hours is shortened to the remaining
    capacity and the rest becomes an OVERFLOW fragment; with no capacity left
    the whole item overflows. An item that straddles break_start is cut at the
    break and its remainder is queued as a BREAK_SPLIT fragment behind the
    items already waiting.

    With honor_planned, a whole item whose start_time lies in working hours
    keeps that start instead of taking the cursor. It is split at the break
    in place, and whatever would run past end_hour overflows to the next
    day. Planned items do not move the cursor, so they may overlap items
    placed back-to-back.

    Args:
        day: Calendar day being placed
        items: Items attributed to the day, already sorted
        config: Business calendar (defaults to settings)
        honor_planned: Keep planned start hours of whole items

    Returns:
        DailyPlacement with placed items and overflow fragments
    """
    config = config or get_business_hours()
    queue: deque[TodoWithMeta] = deque(items)
    placed: list[TodoWithMeta] = []
    overflow: list[TodoWithMeta] = []

    cursor = config.start_hour
    worked_hours = 0.0

    while queue:
        item = queue.popleft()
        planned = _planned_start(item, config) if honor_planned else None

        if planned is None and abs(cursor - config.break_start) < EPSILON:
            cursor = config.break_end

        hours = item.hours
        remaining = config.max_daily_hours - worked_hours
        if planned is not None:
            remaining = min(remaining, _hours_until_end(planned, config))

        if hours > remaining + EPSILON:
            if remaining <= EPSILON:
                overflow.append(_fragment(item, hours, FragmentKind.OVERFLOW))
                continue
            overflow.append(_fragment(item, hours - remaining, FragmentKind.OVERFLOW))
            logger.debug(
                f"{day}: {item.fragment_id} overflows {hours - remaining:.2f}h to next day"
            )
            hours = remaining

        if planned is not None:
            placed.extend(_place_planned(item, day, planned, hours, config))
            worked_hours += hours
            continue

        if config.break_start <= cursor < config.break_end:
            cursor = config.break_end

        start = cursor
        if start < config.break_start and start + hours > config.break_start + EPSILON:
            before_break = config.break_start - start
            placed.append(_placed(item, day, start, before_break))
            queue.append(
                _fragment(
                    item,
                    hours - before_break,
                    FragmentKind.BREAK_SPLIT,
                    start_time=config.break_end,
                )
            )
            cursor = config.break_start
            worked_hours += before_break
        else:
            placed.append(_placed(item, day, start, hours))
            cursor = start + hours
            worked_hours += hours

    return DailyPlacement(day=day, placed=placed, overflow=overflow)
