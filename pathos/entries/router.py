"""FastAPI routes for entries."""

from fastapi import APIRouter, Depends, Query, status

from pathos.auth import get_current_user_id
from pathos.entries.schemas import CreateEntryRequest, EntryResponse, PatchEntryRequest
from pathos.entries.service import EntryService
from pathos.models import EntryType
from pathos.utils.query import parse_bool, parse_limit, parse_offset

router = APIRouter(prefix="/api/entries", tags=["entries"])

DEFAULT_PAGE_SIZE = 20


def get_entry_service() -> EntryService:
    """Dependency placeholder — replaced at app startup."""
    raise RuntimeError("EntryService not initialized")


@router.get("")
async def list_entries(
    project_id: str | None = Query(None),
    milestone_id: str | None = Query(None),
    entry_type: EntryType | None = Query(None, alias="type"),
    published: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user_id: str = Depends(get_current_user_id),
    service: EntryService = Depends(get_entry_service),
) -> list[EntryResponse]:
    return await service.list_entries(
        user_id,
        project_id=project_id,
        milestone_id=milestone_id,
        entry_type=entry_type,
        published=parse_bool(published),
        limit=parse_limit(limit, DEFAULT_PAGE_SIZE),
        offset=parse_offset(offset),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: CreateEntryRequest,
    user_id: str = Depends(get_current_user_id),
    service: EntryService = Depends(get_entry_service),
) -> EntryResponse:
    return await service.create_entry(user_id, request)


@router.get("/{entry_id}")
async def get_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    service: EntryService = Depends(get_entry_service),
) -> EntryResponse:
    return await service.get_entry(user_id, entry_id)


@router.put("/{entry_id}")
async def update_entry(
    entry_id: str,
    request: PatchEntryRequest,
    user_id: str = Depends(get_current_user_id),
    service: EntryService = Depends(get_entry_service),
) -> EntryResponse:
    return await service.update_entry(user_id, entry_id, request)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    service: EntryService = Depends(get_entry_service),
) -> dict:
    await service.delete_entry(user_id, entry_id)
    return {"success": True}
