"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class PlanboardError(Exception):
    """Base exception for planboard."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(PlanboardError):
    """Validation error."""

    pass


class MalformedDateError(ValidationError):
    """A date-bearing field could not be parsed."""

    def __init__(self, value: Any):
        super().__init__(f"Malformed date value: {value!r}", details={"value": value})
        self.value = value


class BusinessLogicError(PlanboardError):
    """Business logic constraint violation."""

    pass


class SchedulingOverflowError(BusinessLogicError):
    """Multi-day scheduling did not drain its overflow queue within the bound."""

    def __init__(self, iterations: int, limit: int):
        super().__init__(
            f"Scheduling exceeded {limit} iterations without draining overflow",
            details={"iterations": iterations, "limit": limit},
        )
        self.iterations = iterations
        self.limit = limit


class LevelingDeadlineExceededError(BusinessLogicError):
    """Resource leveling could not find a date for a todo."""

    def __init__(
        self,
        message: str,
        task_id: str,
        todo_id: str,
        hours: float,
        cap: float,
    ):
        super().__init__(
            message,
            details={"task_id": task_id, "todo_id": todo_id, "hours": hours, "cap": cap},
        )
        self.task_id = task_id
        self.todo_id = todo_id
        self.hours = hours
        self.cap = cap
