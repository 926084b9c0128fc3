"""FastAPI routes for time tracking."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.time_entries.schemas import (
    LogTimeEntryRequest,
    TimeEntryListResponse,
    TimeEntryResponse,
)
from pathos.time_entries.service import TimeEntryService
from pathos.utils.query import parse_limit, parse_offset

router = APIRouter(prefix="/api/time-entries", tags=["time-entries"])

DEFAULT_PAGE_SIZE = 50


def get_time_entry_service() -> TimeEntryService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("TimeEntryService not initialized")


@router.get("")
async def list_time_entries(
    project_id: str | None = Query(None),
    task_id: str | None = Query(None),
    milestone_id: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryListResponse:
    return await service.list_time_entries(
        user_id,
        project_id=project_id,
        task_id=task_id,
        milestone_id=milestone_id,
        limit=parse_limit(limit, DEFAULT_PAGE_SIZE),
        offset=parse_offset(offset),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_time_entry(
    request: LogTimeEntryRequest,
    user_id: str = Depends(get_current_user_id),
    service: TimeEntryService = Depends(get_time_entry_service),
) -> TimeEntryResponse:
    return await service.log_time_entry(user_id, request)
