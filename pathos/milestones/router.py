"""FastAPI routes for milestones."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.milestones.schemas import (
    CreateMilestoneRequest,
    MilestoneResponse,
    PatchMilestoneRequest,
)
from pathos.milestones.service import MilestoneService
from pathos.models import MilestoneStatus
from pathos.utils.query import parse_limit, parse_offset

router = APIRouter(prefix="/api/milestones", tags=["milestones"])

DEFAULT_PAGE_SIZE = 50


def get_milestone_service() -> MilestoneService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("MilestoneService not initialized")


@router.get("")
async def list_milestones(
    project_id: str | None = Query(None),
    status_filter: MilestoneStatus | None = Query(None, alias="status"),
    parent_id: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: MilestoneService = Depends(get_milestone_service),
) -> list[MilestoneResponse]:
    # ?parent_id= (empty) selects root milestones
    return await service.list_milestones(
        user_id,
        project_id=project_id,
        status=status_filter,
        parent_id=parent_id or None,
        roots_only=parent_id == "",
        limit=parse_limit(limit, DEFAULT_PAGE_SIZE),
        offset=parse_offset(offset),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_milestone(
    request: CreateMilestoneRequest,
    user_id: str = Depends(get_current_user_id),
    service: MilestoneService = Depends(get_milestone_service),
) -> MilestoneResponse:
    return await service.create_milestone(user_id, request)


@router.get("/{milestone_id}")
async def get_milestone(
    milestone_id: str,
    user_id: str = Depends(get_current_user_id),
    service: MilestoneService = Depends(get_milestone_service),
) -> MilestoneResponse:
    return await service.get_milestone(user_id, milestone_id)


@router.put("/{milestone_id}")
async def update_milestone(
    milestone_id: str,
    request: PatchMilestoneRequest,
    user_id: str = Depends(get_current_user_id),
    service: MilestoneService = Depends(get_milestone_service),
) -> MilestoneResponse:
    return await service.update_milestone(user_id, milestone_id, request)


@router.delete("/{milestone_id}")
async def delete_milestone(
    milestone_id: str,
    user_id: str = Depends(get_current_user_id),
    service: MilestoneService = Depends(get_milestone_service),
) -> dict:
    await service.delete_milestone(user_id, milestone_id)
    return {"success": True}
