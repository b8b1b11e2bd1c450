"""
Task model definitions.

Tasks own an ordered list of todos; todos are the unit of work the scheduling
engine places on the calendar.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from planboard.core.config import get_settings
from planboard.models.enums import TodoPriority
from planboard.utils.datetime_utils import coerce_date, coerce_datetime


def _strict_dates() -> bool:
    return get_settings().STRICT_DATE_PARSING


class Todo(BaseModel):
    """A single schedulable work item."""

    id: str = Field(..., min_length=1)
    text: str = Field("", description="表示テキスト")
    completed: bool = False
    start_date: date = Field(..., description="着手予定日")
    calendar_start_datetime: Optional[datetime] = Field(
        None, description="カレンダー表示用開始日時（未配置ならNone）"
    )
    calendar_end_datetime: Optional[datetime] = Field(
        None, description="カレンダー表示用終了日時（未配置ならNone）"
    )
    estimated_hours: float = Field(0.0, ge=0, description="見積もり工数（時間）")
    actual_hours: float = Field(0.0, ge=0, description="実績工数（時間）")
    assignee_id: Optional[str] = Field(None, description="担当者ID（1人のみ）")
    priority: Optional[TodoPriority] = Field(None, description="優先度 (0/1/2)")
    memo: Optional[str] = None
    is_external: bool = Field(False, description="外部カレンダーから取り込まれた予定")

    @field_validator("start_date", mode="before")
    @classmethod
    def parse_start_date(cls, value: Any) -> Optional[date]:
        return coerce_date(value, strict=_strict_dates())

    @field_validator("calendar_start_datetime", "calendar_end_datetime", mode="before")
    @classmethod
    def parse_calendar_datetime(cls, value: Any) -> Optional[datetime]:
        return coerce_datetime(value, strict=_strict_dates())

    @model_validator(mode="after")
    def validate_calendar_range(self) -> "Todo":
        start = self.calendar_start_datetime
        end = self.calendar_end_datetime
        if start is not None and end is not None and end < start:
            raise ValueError("calendar_end_datetime must not be before calendar_start_datetime")
        return self

    @property
    def is_placed(self) -> bool:
        """Whether the todo has a precise calendar time range."""
        return self.calendar_start_datetime is not None and self.calendar_end_datetime is not None


class Task(BaseModel):
    """A task grouping todos under one due date."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., max_length=500, description="タスクタイトル")
    description: str = Field("", max_length=2000, description="タスクの詳細説明")
    due_date: datetime = Field(..., description="期限")
    todos: list[Todo] = Field(default_factory=list)
    project_id: Optional[str] = Field(None, description="所属プロジェクトID")

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, value: Any) -> Optional[datetime]:
        return coerce_datetime(value, strict=_strict_dates())

    @property
    def implied_start(self) -> Optional[date]:
        """Earliest todo start date."""
        if not self.todos:
            return None
        return min(todo.start_date for todo in self.todos)

    @property
    def implied_end(self) -> datetime:
        return self.due_date
