"""FastAPI routes for project CRUD."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.models import ProjectStatus
from pathos.projects.schemas import CreateProjectRequest, PatchProjectRequest, ProjectResponse
from pathos.projects.service import ProjectService

router = APIRouter(prefix="/api/projects", tags=["projects"])


def get_project_service() -> ProjectService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("ProjectService not initialized")


@router.get("")
async def list_projects(
    status_filter: ProjectStatus | None = Query(None, alias="status"),
    passion_id: str | None = Query(None),
    owner_id: str | None = Query(None, alias="user_id"),
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    return await service.list_projects(
        user_id, owner_id=owner_id, status=status_filter, passion_id=passion_id,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.create_project(user_id, request)


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.get_project(user_id, project_id)


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    request: PatchProjectRequest,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.update_project(user_id, project_id, request)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service),
) -> dict:
    await service.delete_project(user_id, project_id)
    return {"success": True}
