"""
Overlap lane assignment for calendar display.

Groups time-stamped items into lanes so that no two items in the same lane
overlap. The greedy first-fit pass is not guaranteed to use the minimum
number of lanes for every input order.
"""

from datetime import datetime
from typing import Iterable, Optional

from planboard.core.config import BusinessHoursConfig, get_business_hours, get_settings
from planboard.models.schedule import TodoWithMeta


def _interval(item: TodoWithMeta) -> tuple[datetime, datetime]:
    return item.todo.calendar_start_datetime, item.todo.calendar_end_datetime


def intervals_overlap(a: TodoWithMeta, b: TodoWithMeta) -> bool:
    """Strict [start, end) overlap test."""
    start1, end1 = _interval(a)
    start2, end2 = _interval(b)
    return start1 < end2 and end1 > start2


def group_overlapping_todos(items: Iterable[TodoWithMeta]) -> list[list[TodoWithMeta]]:
    """
    Partition items into non-overlapping lanes.

    Items are taken in input order; each goes into the first lane where it
    overlaps no member, or opens a new lane. Items without calendar times
    are not placed yet and are left out.

    Args:
        items: Schedule entries sharing a time window

    Returns:
        Ordered list of lanes
    """
    lanes: list[list[TodoWithMeta]] = []
    for item in items:
        if not item.todo.is_placed:
            continue
        for lane in lanes:
            if not any(intervals_overlap(item, member) for member in lane):
                lane.append(item)
                break
        else:
            lanes.append([item])
    return lanes


def count_lanes(items: Iterable[TodoWithMeta]) -> int:
    """Number of side-by-side columns needed for items."""
    return len(group_overlapping_todos(items))


def filter_todos_for_hour(hour: int, items: Iterable[TodoWithMeta]) -> list[TodoWithMeta]:
    """Items whose calendar start falls in the given hour slot."""
    return [
        item
        for item in items
        if item.todo.is_placed and item.todo.calendar_start_datetime.hour == hour
    ]


def generate_time_options(config: Optional[BusinessHoursConfig] = None) -> list[str]:
    """
    Selectable "HH:MM" start times in 15-minute steps.

    Covers the start hour through the end hour and skips hours inside the
    break window.
    """
    config = config or get_business_hours()
    options: list[str] = []
    hour = int(config.start_hour)
    while hour <= config.end_hour:
        if not (config.break_start <= hour < config.break_end):
            options.extend(f"{hour:02d}:{minute:02d}" for minute in range(0, 60, 15))
        hour += 1
    return options


def generate_time_slots() -> list[int]:
    """Hour rows shown on the calendar."""
    settings = get_settings()
    return list(range(settings.DISPLAY_START_HOUR, settings.DISPLAY_END_HOUR + 1))
