"""
Schedule API endpoints.

Exposes the scheduling engine over JSON: calendar placement, workload
summaries, and leveling preview/apply. Nothing is persisted.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from planboard.core.exceptions import BusinessLogicError, ValidationError
from planboard.models.schedule import (
    LevelingResult,
    ScheduleChange,
    ScheduleFilter,
    ScheduleMap,
)
from planboard.models.task import Task
from planboard.models.workload import DateRange, WorkloadSummaryByPeriod
from planboard.services.leveling_service import LevelingService
from planboard.services.scheduler_service import SchedulerService
from planboard.services.workload_service import WorkloadService

router = APIRouter()


class ScheduleRequest(BaseModel):
    """Tasks to place plus the assignee filter."""
    tasks: list[Task]
    filter: ScheduleFilter = Field(default_factory=ScheduleFilter)
    today: Optional[date] = None


class WorkloadRequest(BaseModel):
    """Schedule map to summarize over a date range."""
    schedule: ScheduleMap
    start_date: date
    end_date: date
    daily_capacity_hours: Optional[float] = Field(None, ge=0)


class LevelingRequest(BaseModel):
    """Tasks to level under a per-assignee daily cap."""
    tasks: list[Task]
    daily_cap_hours: Optional[float] = Field(None, gt=0)
    earliest_date: Optional[date] = None


class ApplyChangesRequest(BaseModel):
    """Tasks plus the changes the user approved."""
    tasks: list[Task]
    approved: list[ScheduleChange]


def get_scheduler_service() -> SchedulerService:
    """Get SchedulerService instance."""
    return SchedulerService()


def get_workload_service() -> WorkloadService:
    """Get WorkloadService instance."""
    return WorkloadService()


def get_leveling_service() -> LevelingService:
    """Get LevelingService instance."""
    return LevelingService()


def build_date_range(start_date: date, end_date: date) -> DateRange:
    """Validate and build a date range."""
    if end_date < start_date:
        raise ValidationError(
            "end_date must not be before start_date",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )
    return DateRange(start_date=start_date, end_date=end_date)


@router.post("", response_model=ScheduleMap)
async def build_schedule(
    payload: ScheduleRequest,
    service: SchedulerService = Depends(get_scheduler_service),
):
    try:
        return service.schedule(payload.tasks, payload.filter, today=payload.today)
    except BusinessLogicError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc


@router.post("/workload", response_model=WorkloadSummaryByPeriod)
async def aggregate_workload(
    payload: WorkloadRequest,
    service: WorkloadService = Depends(get_workload_service),
):
    try:
        date_range = build_date_range(payload.start_date, payload.end_date)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return service.aggregate_workload(payload.schedule, date_range, payload.daily_capacity_hours)


@router.post("/leveling/preview", response_model=LevelingResult)
async def preview_leveling(
    payload: LevelingRequest,
    service: LevelingService = Depends(get_leveling_service),
):
    try:
        return service.plan_leveling(
            payload.tasks,
            daily_cap_hours=payload.daily_cap_hours,
            earliest_date=payload.earliest_date,
        )
    except BusinessLogicError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc


@router.post("/leveling/apply", response_model=list[Task])
async def apply_leveling(
    payload: ApplyChangesRequest,
    service: LevelingService = Depends(get_leveling_service),
):
    return service.apply_changes(payload.tasks, payload.approved)
