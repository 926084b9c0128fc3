"""Entry service: progress posts, notes, and links under a project."""

import logging
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.entries.schemas import (
    CreateEntryRequest,
    EntryMilestoneRef,
    EntryResponse,
    PatchEntryRequest,
)
from pathos.errors import EntryNotFoundError
from pathos.models import to_iso, utc_now
from pathos.projects.references import resolve_milestone_project
from pathos.utils.json import json_list_str, parse_json_list
from pathos.utils.patch import present_fields, require_non_null

logger = logging.getLogger(__name__)

_LIST_COLUMNS = ("media_urls", "links", "tags")


class EntryService:
    """Entry CRUD scoped to the owner."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_entry(self, user_id: str, request: CreateEntryRequest) -> EntryResponse:
        if "published_at" in request.model_fields_set:
            published_at = to_iso(request.published_at)
        else:
            published_at = utc_now()

        entry_id = str(uuid4())
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            await resolve_milestone_project(repo, request.project_id, request.milestone_id)
            await repo.insert("entries", {
                "entry_id": entry_id,
                "project_id": request.project_id,
                "milestone_id": request.milestone_id,
                "title": request.title,
                "content": request.content,
                "type": request.type,
                "privacy": request.privacy,
                "media_urls": json_list_str(request.media_urls),
                "links": json_list_str(request.links),
                "tags": json_list_str(request.tags),
                "published_at": published_at,
                "created_at": utc_now(),
            })
        return await self.get_entry(user_id, entry_id)

    async def get_entry(self, user_id: str, entry_id: str) -> EntryResponse:
        repo = ScopedRepository(self._db, user_id)
        row = await repo.get("entries", entry_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        return (await self._build_views(repo, [row]))[0]

    async def list_entries(
        self,
        user_id: str,
        *,
        project_id: str | None = None,
        milestone_id: str | None = None,
        entry_type: str | None = None,
        published: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[EntryResponse]:
        """Owned entries, newest publication first. Drafts sort last."""
        filters: dict[str, str] = {}
        if project_id:
            filters["project_id"] = project_id
        if milestone_id:
            filters["milestone_id"] = milestone_id
        if entry_type:
            filters["type"] = entry_type

        where: list[str] = []
        if published is True:
            where.append("published_at IS NOT NULL")
        elif published is False:
            where.append("published_at IS NULL")

        repo = ScopedRepository(self._db, user_id)
        rows = await repo.select(
            "entries",
            filters=filters,
            where=where,
            order_by="published_at DESC, created_at DESC",
            limit=limit,
            offset=offset,
        )
        return await self._build_views(repo, rows)

    async def update_entry(
        self, user_id: str, entry_id: str, request: PatchEntryRequest,
    ) -> EntryResponse:
        """Apply the fields present in the request. The project is fixed."""
        changes = present_fields(request)
        require_non_null(changes, {"title", "type", "privacy"})

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            existing = await repo.get("entries", entry_id)
            if existing is None:
                raise EntryNotFoundError(entry_id)

            if changes.get("milestone_id") is not None:
                await resolve_milestone_project(
                    repo, existing["project_id"], changes["milestone_id"],
                )
            for column in _LIST_COLUMNS:
                if column in changes:
                    changes[column] = json_list_str(changes[column])

            await repo.update("entries", entry_id, changes)

        return await self.get_entry(user_id, entry_id)

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("entries", entry_id) is None:
                raise EntryNotFoundError(entry_id)
            await repo.delete("entries", entry_id)
        logger.info("Deleted entry %s", entry_id)

    @staticmethod
    async def _build_views(repo: ScopedRepository, rows: list[dict]) -> list[EntryResponse]:
        project_ids = sorted({r["project_id"] for r in rows})
        milestone_ids = sorted({r["milestone_id"] for r in rows if r["milestone_id"]})
        project_titles = {
            p["project_id"]: p["title"]
            for p in await repo.select_in("projects", "project_id", project_ids)
        }
        milestones = {
            m["milestone_id"]: m
            for m in await repo.select_in("milestones", "milestone_id", milestone_ids)
        }

        views = []
        for row in rows:
            milestone = milestones.get(row["milestone_id"]) if row["milestone_id"] else None
            views.append(EntryResponse(
                entry_id=row["entry_id"],
                user_id=row["user_id"],
                project_id=row["project_id"],
                milestone_id=row["milestone_id"],
                title=row["title"],
                content=row["content"],
                type=row["type"],
                privacy=row["privacy"],
                media_urls=parse_json_list(row["media_urls"]),
                links=parse_json_list(row["links"]),
                tags=parse_json_list(row["tags"]),
                published_at=row["published_at"],
                created_at=row["created_at"],
                project_title=project_titles.get(row["project_id"]),
                milestone=EntryMilestoneRef(
                    milestone_id=milestone["milestone_id"],
                    title=milestone["title"],
                    status=milestone["status"],
                ) if milestone else None,
            ))
        return views
