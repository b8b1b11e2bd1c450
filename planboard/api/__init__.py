"""API routers."""

from planboard.api import schedule

__all__ = [
    "schedule",
]
