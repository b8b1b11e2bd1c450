"""
Schedule models for calendar placement and leveling outputs.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from planboard.models.enums import FragmentKind, TodoCategory, TodoPriority
from planboard.models.task import Task, Todo

FRAGMENT_SUFFIXES = {
    FragmentKind.WHOLE: "",
    FragmentKind.BREAK_SPLIT: "-after-break",
    FragmentKind.OVERFLOW: "-overflow",
}


class TodoWithMeta(BaseModel):
    """
    Calendar view of a todo (or of a fragment of one).

    The wrapped todo is a private copy; fragments never write back to the
    source todo.
    """

    todo: Todo
    task_id: str
    task_title: Optional[str] = None
    priority: TodoPriority = TodoPriority.LOW
    due_date: Optional[datetime] = Field(None, description="親タスクの期限（並び替え用）")
    is_next_todo: bool = False
    is_external: bool = False
    category: Optional[TodoCategory] = None
    kind: FragmentKind = FragmentKind.WHOLE
    source_id: str = Field(..., description="元のTODO ID")
    start_time: Optional[float] = Field(None, description="開始時刻（時、小数可）")

    @property
    def hours(self) -> float:
        return self.todo.estimated_hours

    @property
    def end_time(self) -> Optional[float]:
        if self.start_time is None:
            return None
        return self.start_time + self.hours

    @computed_field
    @property
    def fragment_id(self) -> str:
        """Stable display id, e.g. "<source>-after-break"."""
        return f"{self.source_id}{FRAGMENT_SUFFIXES[self.kind]}"


ScheduleMap = dict[str, list[TodoWithMeta]]


class ScheduleFilter(BaseModel):
    """Assignee filter applied before todos enter the schedule map."""

    selected_assignee_ids: list[str] = Field(default_factory=list)
    include_unassigned: bool = True

    def accepts(self, todo: Todo) -> bool:
        if todo.assignee_id:
            return todo.assignee_id in self.selected_assignee_ids
        return self.include_unassigned


class DailyPlacement(BaseModel):
    """Result of placing one day's queue."""

    day: date
    placed: list[TodoWithMeta] = Field(default_factory=list)
    overflow: list[TodoWithMeta] = Field(default_factory=list)

    @property
    def placed_hours(self) -> float:
        return sum(item.hours for item in self.placed)

    @property
    def overflow_hours(self) -> float:
        return sum(item.hours for item in self.overflow)


class ScheduleChange(BaseModel):
    """Proposed date move for one todo, pending approval."""

    task_id: str
    task_title: str
    todo_id: str
    todo_title: str
    old_date: date
    new_date: date


class LevelingResult(BaseModel):
    """Leveling proposal: the diff plus the leveled task copies."""

    changes: list[ScheduleChange] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
