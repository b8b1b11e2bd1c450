"""
Unit tests for overlap lane assignment and time helpers.
"""

from datetime import date, datetime

from planboard.core.config import BusinessHoursConfig
from planboard.models.schedule import TodoWithMeta
from planboard.models.task import Todo
from planboard.services.lane_assigner import (
    count_lanes,
    filter_todos_for_hour,
    generate_time_options,
    generate_time_slots,
    group_overlapping_todos,
    intervals_overlap,
)

DAY = date(2024, 1, 15)


def make_item(todo_id: str, start: tuple[int, int] | None, end: tuple[int, int] | None) -> TodoWithMeta:
    todo = Todo(
        id=todo_id,
        text=todo_id,
        start_date=DAY,
        estimated_hours=1,
        calendar_start_datetime=datetime(2024, 1, 15, *start) if start else None,
        calendar_end_datetime=datetime(2024, 1, 15, *end) if end else None,
    )
    return TodoWithMeta(todo=todo, task_id="task-1", source_id=todo_id)


def lane_ids(lanes) -> list[list[str]]:
    return [[item.source_id for item in lane] for lane in lanes]


def test_overlapping_items_get_separate_lanes():
    first = make_item("a", (9, 0), (10, 0))
    second = make_item("b", (9, 30), (10, 30))
    third = make_item("c", (10, 0), (11, 0))

    lanes = group_overlapping_todos([first, second, third])

    assert lane_ids(lanes) == [["a", "c"], ["b"]]


def test_touching_intervals_do_not_overlap():
    first = make_item("a", (9, 0), (10, 0))
    second = make_item("b", (10, 0), (11, 0))

    assert not intervals_overlap(first, second)
    assert count_lanes([first, second]) == 1


def test_no_lane_contains_overlapping_items():
    items = [
        make_item("a", (9, 0), (12, 0)),
        make_item("b", (9, 0), (10, 0)),
        make_item("c", (10, 0), (11, 0)),
        make_item("d", (9, 30), (10, 30)),
        make_item("e", (11, 0), (13, 0)),
    ]

    lanes = group_overlapping_todos(items)

    for lane in lanes:
        for i, left in enumerate(lane):
            for right in lane[i + 1:]:
                assert not intervals_overlap(left, right)
    assert sum(len(lane) for lane in lanes) == len(items)


def test_unplaced_items_are_skipped():
    lanes = group_overlapping_todos([make_item("a", (9, 0), (10, 0)), make_item("b", None, None)])
    assert lane_ids(lanes) == [["a"]]


def test_empty_input():
    assert group_overlapping_todos([]) == []
    assert count_lanes([]) == 0


def test_filter_todos_for_hour():
    items = [
        make_item("a", (9, 0), (10, 0)),
        make_item("b", (9, 45), (10, 15)),
        make_item("c", (10, 0), (11, 0)),
        make_item("d", None, None),
    ]

    assert [item.source_id for item in filter_todos_for_hour(9, items)] == ["a", "b"]


def test_generate_time_options_skips_break():
    options = generate_time_options(BusinessHoursConfig())

    assert options[0] == "09:00"
    assert options[1] == "09:15"
    assert "11:45" in options
    assert "12:00" not in options
    assert "12:30" not in options
    assert "13:00" in options
    assert options[-1] == "18:45"


def test_generate_time_slots_uses_display_range():
    slots = generate_time_slots()
    assert slots[0] == 7
    assert slots[-1] == 20
