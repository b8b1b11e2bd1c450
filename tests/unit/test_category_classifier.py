"""
Unit tests for category classification.
"""

from datetime import date

from planboard.models.enums import TodoCategory
from planboard.models.schedule import TodoWithMeta
from planboard.models.task import Todo
from planboard.services.category_classifier import classify, with_category


def make_item(
    text: str = "Write report",
    task_title: str = "Quarterly report",
    is_external: bool = False,
    todo_external: bool = False,
    category: TodoCategory | None = None,
) -> TodoWithMeta:
    todo = Todo(
        id="t1",
        text=text,
        start_date=date(2024, 1, 15),
        estimated_hours=1,
        is_external=todo_external,
    )
    return TodoWithMeta(
        todo=todo,
        task_id="task-1",
        task_title=task_title,
        is_external=is_external,
        category=category,
        source_id="t1",
    )


def test_default_is_internal():
    assert classify(make_item()) == TodoCategory.INTERNAL


def test_external_flag():
    assert classify(make_item(is_external=True)) == TodoCategory.EXTERNAL
    assert classify(make_item(todo_external=True)) == TodoCategory.EXTERNAL


def test_buffer_keyword_in_text_or_title():
    assert classify(make_item(text="Review BUFFER")) == TodoCategory.BUFFER
    assert classify(make_item(task_title="予備バッファ")) == TodoCategory.BUFFER


def test_external_wins_over_buffer_keyword():
    assert classify(make_item(text="buffer", is_external=True)) == TodoCategory.EXTERNAL


def test_explicit_category_wins():
    item = make_item(text="buffer", is_external=True, category=TodoCategory.INTERNAL)
    assert classify(item) == TodoCategory.INTERNAL


def test_custom_keywords():
    item = make_item(text="Slack time")
    assert classify(item, buffer_keywords=["slack"]) == TodoCategory.BUFFER
    assert classify(make_item(text="buffer"), buffer_keywords=[]) == TodoCategory.INTERNAL


def test_with_category_returns_copy():
    item = make_item(text="buffer")

    classified = with_category(item)

    assert classified.category == TodoCategory.BUFFER
    assert item.category is None
