"""FastAPI routes for the passion catalogue and the caller's passions."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.errors import ValidationError
from pathos.passions.schemas import (
    AddUserPassionRequest,
    CreatePassionRequest,
    PassionResponse,
    UserPassionResponse,
)
from pathos.passions.service import PassionService
from pathos.utils.query import parse_bool

router = APIRouter(prefix="/api", tags=["passions"])


def get_passion_service() -> PassionService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("PassionService not initialized")


@router.get("/passions")
async def list_passions(
    include_user_passions: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: PassionService = Depends(get_passion_service),
) -> list[PassionResponse]:
    return await service.list_passions(
        user_id, include_user_passions=bool(parse_bool(include_user_passions)),
    )


@router.post("/passions", status_code=status.HTTP_201_CREATED)
async def create_passion(
    request: CreatePassionRequest,
    user_id: str = Depends(get_current_user_id),
    service: PassionService = Depends(get_passion_service),
) -> PassionResponse:
    return await service.create_passion(user_id, request)


@router.get("/user/passions")
async def list_user_passions(
    user_id: str = Depends(get_current_user_id),
    service: PassionService = Depends(get_passion_service),
) -> list[UserPassionResponse]:
    return await service.list_user_passions(user_id)


@router.post("/user/passions", status_code=status.HTTP_201_CREATED)
async def add_user_passion(
    request: AddUserPassionRequest,
    user_id: str = Depends(get_current_user_id),
    service: PassionService = Depends(get_passion_service),
) -> UserPassionResponse:
    return await service.add_user_passion(user_id, request.passion_id)


@router.delete("/user/passions")
async def remove_user_passion(
    passion_id: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: PassionService = Depends(get_passion_service),
) -> dict:
    if not passion_id:
        raise ValidationError("passion_id", "passion_id is required")
    await service.remove_user_passion(user_id, passion_id)
    return {"success": True}
