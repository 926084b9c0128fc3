"""FastAPI routes for tasks."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.tasks.schemas import CreateTaskRequest, PatchTaskRequest, TaskResponse
from pathos.tasks.service import TaskService
from pathos.utils.query import parse_bool, parse_limit, parse_offset

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

DEFAULT_PAGE_SIZE = 50


def get_task_service() -> TaskService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("TaskService not initialized")


@router.get("")
async def list_tasks(
    project_id: str | None = Query(None),
    milestone_id: str | None = Query(None),
    completed: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    # ?milestone_id= (empty) selects tasks not attached to a milestone
    return await service.list_tasks(
        user_id,
        project_id=project_id,
        milestone_id=milestone_id or None,
        unassigned_only=milestone_id == "",
        completed=parse_bool(completed),
        limit=parse_limit(limit, DEFAULT_PAGE_SIZE),
        offset=parse_offset(offset),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: CreateTaskRequest,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.create_task(user_id, request)


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.get_task(user_id, task_id)


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    request: PatchTaskRequest,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.update_task(user_id, task_id, request)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
) -> dict:
    await service.delete_task(user_id, task_id)
    return {"success": True}
