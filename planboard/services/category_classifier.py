"""
Workload category classification for scheduled items.
"""

from typing import Optional, Sequence

from planboard.core.config import get_settings
from planboard.models.enums import TodoCategory
from planboard.models.schedule import TodoWithMeta


def classify(
    item: TodoWithMeta,
    buffer_keywords: Optional[Sequence[str]] = None,
) -> TodoCategory:
    """
    Determine the workload category of an item.

    An explicit category always wins. Otherwise imported calendar events are
    external, items whose text or task title mention a buffer keyword are
    buffer, and everything else is internal.

    Args:
        item: Schedule entry to classify
        buffer_keywords: Override for Settings.BUFFER_KEYWORDS

    Returns:
        TodoCategory for the item
    """
    if item.category is not None:
        return item.category

    if item.is_external or item.todo.is_external:
        return TodoCategory.EXTERNAL

    keywords = buffer_keywords if buffer_keywords is not None else get_settings().BUFFER_KEYWORDS
    text = item.todo.text.lower()
    title = (item.task_title or "").lower()
    for keyword in keywords:
        needle = keyword.lower()
        if needle in text or needle in title:
            return TodoCategory.BUFFER

    return TodoCategory.INTERNAL


def with_category(item: TodoWithMeta) -> TodoWithMeta:
    """Copy of item with its category resolved."""
    if item.category is not None:
        return item
    return item.model_copy(update={"category": classify(item)})
