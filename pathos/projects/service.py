"""Project service: project CRUD, visibility, and the delete cascade."""

import logging
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.errors import PassionNotFoundError, PassionNotJoinedError, ProjectNotFoundError
from pathos.models import to_iso, utc_now
from pathos.passions.schemas import PassionSummary
from pathos.passions.service import PassionService
from pathos.projects.schemas import (
    CreateProjectRequest,
    OwnerSummary,
    PatchProjectRequest,
    ProjectResponse,
)
from pathos.utils.patch import present_fields, require_non_null

logger = logging.getLogger(__name__)

_PROJECT_SELECT = """
    SELECT pr.*,
           pa.name AS passion_name, pa.slug AS passion_slug,
           pa.icon AS passion_icon, pa.color AS passion_color,
           u.username AS owner_username, u.name AS owner_name
    FROM projects pr
    LEFT JOIN passions pa ON pa.passion_id = pr.passion_id
    LEFT JOIN users u ON u.user_id = pr.user_id
"""

# Children first so foreign keys never dangle mid-cascade
_CASCADE_TABLES = ("time_entries", "entries", "tasks")


class ProjectService:
    """Project CRUD scoped to the owner, with public read access for others."""

    def __init__(self, db: Database, passions: PassionService) -> None:
        self._db = db
        self._passions = passions

    async def create_project(
        self, user_id: str, request: CreateProjectRequest,
    ) -> ProjectResponse:
        """Create a project under a passion.

        Custom passions require the caller to have joined them first.
        """
        passion = await self._passions.get_passion(request.passion_id)
        if passion is None:
            raise PassionNotFoundError(request.passion_id)
        if passion["is_custom"] and not await self._passions.is_member(
            user_id, request.passion_id
        ):
            raise PassionNotJoinedError(request.passion_id)

        project_id = str(uuid4())
        now = utc_now()
        async with self._db.transaction() as tx:
            await ScopedRepository(tx, user_id).insert("projects", {
                "project_id": project_id,
                "passion_id": request.passion_id,
                "title": request.title,
                "description": request.description,
                "status": request.status,
                "stage": request.stage,
                "privacy": request.privacy,
                "start_date": to_iso(request.start_date),
                "end_date": to_iso(request.end_date),
                "created_at": now,
                "updated_at": now,
            })

        return await self._read(project_id)

    async def list_projects(
        self,
        user_id: str,
        *,
        owner_id: str | None = None,
        status: str | None = None,
        passion_id: str | None = None,
    ) -> list[ProjectResponse]:
        """Projects of owner_id (default: the caller).

        Viewing someone else's list shows only their public projects.
        """
        owner_id = owner_id or user_id
        clauses = ["pr.user_id = ?"]
        params: list[str] = [owner_id]

        if status:
            clauses.append("pr.status = ?")
            params.append(status)
        if passion_id:
            clauses.append("pr.passion_id = ?")
            params.append(passion_id)
        if owner_id != user_id:
            clauses.append("pr.privacy = 'public'")

        rows = await self._db.fetchall(
            f"{_PROJECT_SELECT} WHERE {' AND '.join(clauses)} "
            "ORDER BY pr.status ASC, pr.updated_at DESC",
            tuple(params),
        )
        return [self._project_from_row(r) for r in rows]

    async def get_project(self, user_id: str, project_id: str) -> ProjectResponse:
        """Owner sees any project; others only public ones.

        Friends-only visibility is not implemented: a friends project is
        owner-only until a friendship graph exists.
        """
        row = await self._db.fetchone(f"{_PROJECT_SELECT} WHERE pr.project_id = ?", (project_id,))
        if row is None:
            raise ProjectNotFoundError(project_id)
        if row["user_id"] != user_id and row["privacy"] != "public":
            raise ProjectNotFoundError(project_id)
        return self._project_from_row(row)

    async def update_project(
        self, user_id: str, project_id: str, request: PatchProjectRequest,
    ) -> ProjectResponse:
        """Apply the fields present in the request. Owner only."""
        changes = present_fields(request)
        require_non_null(changes, {"title", "status", "stage", "privacy"})

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("projects", project_id) is None:
                raise ProjectNotFoundError(project_id)
            if changes:
                changes["updated_at"] = utc_now()
                await repo.update("projects", project_id, changes)

        return await self._read(project_id)

    async def delete_project(self, user_id: str, project_id: str) -> None:
        """Delete a project with all of its milestones, tasks, entries, and time entries."""
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("projects", project_id) is None:
                raise ProjectNotFoundError(project_id)

            # Time logged under another project against one of these tasks is kept, unlinked
            await tx.execute(
                """
                UPDATE time_entries SET task_id = NULL
                WHERE user_id = ? AND task_id IN (
                    SELECT task_id FROM tasks WHERE project_id = ? AND user_id = ?
                )
                """,
                (user_id, project_id, user_id),
            )
            counts = {}
            for table in _CASCADE_TABLES:
                counts[table] = await repo.delete_where(table, "project_id", project_id)
            # Drop the milestone tree's internal links before removing its rows
            await repo.update_where("milestones", "project_id", project_id, {"parent_id": None})
            counts["milestones"] = await repo.delete_where("milestones", "project_id", project_id)
            await repo.delete("projects", project_id)

        logger.info("Deleted project %s with %s", project_id, counts)

    async def _read(self, project_id: str) -> ProjectResponse:
        row = await self._db.fetchone(f"{_PROJECT_SELECT} WHERE pr.project_id = ?", (project_id,))
        assert row is not None
        return self._project_from_row(row)

    @staticmethod
    def _project_from_row(row: dict) -> ProjectResponse:
        """Convert a joined project row to a response."""
        passion = None
        if row["passion_name"] is not None:
            passion = PassionSummary(
                passion_id=row["passion_id"],
                name=row["passion_name"],
                slug=row["passion_slug"],
                icon=row["passion_icon"],
                color=row["passion_color"],
            )
        owner = None
        if row["owner_username"] is not None:
            owner = OwnerSummary(
                user_id=row["user_id"],
                username=row["owner_username"],
                name=row["owner_name"],
            )
        return ProjectResponse(
            project_id=row["project_id"],
            user_id=row["user_id"],
            passion_id=row["passion_id"],
            title=row["title"],
            description=row["description"],
            status=row["status"],
            stage=row["stage"],
            privacy=row["privacy"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            passion=passion,
            owner=owner,
        )
