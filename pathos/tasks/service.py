"""Task service: to-dos attached to a project and optionally a milestone."""

import logging
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.errors import TaskNotFoundError, ValidationError
from pathos.models import to_iso, utc_now
from pathos.projects.references import resolve_milestone_project
from pathos.tasks.schemas import (
    CreateTaskRequest,
    PatchTaskRequest,
    TaskMilestoneRef,
    TaskResponse,
)
from pathos.utils.patch import present_fields, require_non_null

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_task(self, user_id: str, request: CreateTaskRequest) -> TaskResponse:
        task_id = str(uuid4())
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            project_id = await resolve_milestone_project(
                repo, request.project_id, request.milestone_id,
            )
            await repo.insert("tasks", {
                "task_id": task_id,
                "project_id": project_id,
                "milestone_id": request.milestone_id,
                "title": request.title,
                "description": request.description,
                "completed": 0,
                "completed_at": None,
                "due_date": to_iso(request.due_date),
                "sort_order": request.order,
                "created_at": utc_now(),
            })
        return await self.get_task(user_id, task_id)

    async def get_task(self, user_id: str, task_id: str) -> TaskResponse:
        repo = ScopedRepository(self._db, user_id)
        row = await repo.get("tasks", task_id)
        if row is None:
            raise TaskNotFoundError(task_id)
        return (await self._build_views(repo, [row]))[0]

    async def list_tasks(
        self,
        user_id: str,
        *,
        project_id: str | None = None,
        milestone_id: str | None = None,
        unassigned_only: bool = False,
        completed: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[TaskResponse]:
        """Owned tasks, incomplete first, then by sort order."""
        filters: dict[str, str | int | None] = {}
        if project_id:
            filters["project_id"] = project_id
        if unassigned_only:
            filters["milestone_id"] = None
        elif milestone_id:
            filters["milestone_id"] = milestone_id
        if completed is not None:
            filters["completed"] = int(completed)

        repo = ScopedRepository(self._db, user_id)
        rows = await repo.select(
            "tasks",
            filters=filters,
            order_by="completed ASC, sort_order ASC, created_at ASC",
            limit=limit,
            offset=offset,
        )
        return await self._build_views(repo, rows)

    async def update_task(
        self, user_id: str, task_id: str, request: PatchTaskRequest,
    ) -> TaskResponse:
        """Apply the fields present in the request.

        Flipping ``completed`` sets or clears completed_at in the same write.
        """
        changes = present_fields(request)
        require_non_null(changes, {"title", "completed", "order"})

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            existing = await repo.get("tasks", task_id)
            if existing is None:
                raise TaskNotFoundError(task_id)

            if "project_id" in changes or "milestone_id" in changes:
                milestone_id = changes.get("milestone_id", existing["milestone_id"])
                if "project_id" in changes and changes["project_id"] is None and milestone_id:
                    raise ValidationError(
                        "project_id", "cannot be cleared while the task has a milestone",
                    )
                changes["project_id"] = await resolve_milestone_project(
                    repo, changes.get("project_id", existing["project_id"]), milestone_id,
                )

            if "completed" in changes:
                was_completed = bool(existing["completed"])
                if changes["completed"] and not was_completed:
                    changes["completed_at"] = utc_now()
                elif not changes["completed"]:
                    changes["completed_at"] = None
                changes["completed"] = int(changes["completed"])

            if "order" in changes:
                changes["sort_order"] = changes.pop("order")

            await repo.update("tasks", task_id, changes)

        return await self.get_task(user_id, task_id)

    async def delete_task(self, user_id: str, task_id: str) -> None:
        """Delete a task. Time logged against it is kept, unlinked."""
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("tasks", task_id) is None:
                raise TaskNotFoundError(task_id)
            unlinked = await repo.update_where(
                "time_entries", "task_id", task_id, {"task_id": None},
            )
            await repo.delete("tasks", task_id)
        logger.info("Deleted task %s, unlinked %d time entries", task_id, unlinked)

    @staticmethod
    async def _build_views(repo: ScopedRepository, rows: list[dict]) -> list[TaskResponse]:
        project_ids = sorted({r["project_id"] for r in rows if r["project_id"]})
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
            views.append(TaskResponse(
                task_id=row["task_id"],
                user_id=row["user_id"],
                project_id=row["project_id"],
                milestone_id=row["milestone_id"],
                title=row["title"],
                description=row["description"],
                completed=bool(row["completed"]),
                completed_at=row["completed_at"],
                due_date=row["due_date"],
                order=row["sort_order"],
                created_at=row["created_at"],
                project_title=project_titles.get(row["project_id"]),
                milestone=TaskMilestoneRef(
                    milestone_id=milestone["milestone_id"],
                    title=milestone["title"],
                    status=milestone["status"],
                    target_date=milestone["target_date"],
                    completed_at=milestone["completed_at"],
                ) if milestone else None,
            ))
        return views
