"""Milestone service: the per-project milestone tree.

Milestones are stored flat with a parent_id. Tree questions (is this a
descendant? who are the children?) are answered by walking an id-indexed
map of one project's milestones.
"""

import logging
from collections import defaultdict
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.errors import (
    MilestoneCycleError,
    MilestoneNotFoundError,
    ParentNotFoundError,
    ProjectNotFoundError,
    SelfParentError,
)
from pathos.milestones.progress import compute_progress
from pathos.milestones.schemas import (
    CreateMilestoneRequest,
    MilestoneEntryRef,
    MilestoneRef,
    MilestoneResponse,
    MilestoneTaskRef,
    PatchMilestoneRequest,
)
from pathos.models import to_iso, utc_now
from pathos.utils.patch import present_fields, require_non_null

logger = logging.getLogger(__name__)

# Rows that may point at a milestone and must be unlinked when it goes away
_MILESTONE_REFERRERS = ("tasks", "entries", "time_entries")


class MilestoneService:
    """Milestone CRUD with tree invariants, scoped to the owning user."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_milestone(
        self, user_id: str, request: CreateMilestoneRequest,
    ) -> MilestoneResponse:
        """Create a milestone under an owned project, optionally below a parent."""
        milestone_id = str(uuid4())

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("projects", request.project_id) is None:
                raise ProjectNotFoundError(request.project_id)

            if request.parent_id is not None:
                parent = await repo.get("milestones", request.parent_id)
                if parent is None or parent["project_id"] != request.project_id:
                    raise ParentNotFoundError(request.parent_id)

            await repo.insert("milestones", {
                "milestone_id": milestone_id,
                "project_id": request.project_id,
                "parent_id": request.parent_id,
                "title": request.title,
                "description": request.description,
                "status": "planned",
                "target_date": to_iso(request.target_date),
                "completed_at": None,
                "sort_order": request.order,
                "created_at": utc_now(),
            })

        return await self.get_milestone(user_id, milestone_id)

    async def get_milestone(self, user_id: str, milestone_id: str) -> MilestoneResponse:
        """One milestone with parent, children, tasks, entries, and progress."""
        repo = ScopedRepository(self._db, user_id)
        row = await repo.get("milestones", milestone_id)
        if row is None:
            raise MilestoneNotFoundError(milestone_id)
        views = await self._build_views(repo, [row], with_entries=True)
        return views[0]

    async def list_milestones(
        self,
        user_id: str,
        *,
        project_id: str | None = None,
        status: str | None = None,
        parent_id: str | None = None,
        roots_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[MilestoneResponse]:
        """Owned milestones by sort order, each with its progress."""
        filters: dict[str, str | None] = {}
        if project_id:
            filters["project_id"] = project_id
        if status:
            filters["status"] = status
        if roots_only:
            filters["parent_id"] = None
        elif parent_id:
            filters["parent_id"] = parent_id

        repo = ScopedRepository(self._db, user_id)
        rows = await repo.select(
            "milestones",
            filters=filters,
            order_by="sort_order ASC, created_at ASC",
            limit=limit,
            offset=offset,
        )
        return await self._build_views(repo, rows, with_entries=False)

    async def update_milestone(
        self, user_id: str, milestone_id: str, request: PatchMilestoneRequest,
    ) -> MilestoneResponse:
        """Apply the fields present in the request.

        Reparenting is checked against the project's tree; a status change
        into or out of ``completed`` sets or clears completed_at in the same
        write.
        """
        changes = present_fields(request)
        require_non_null(changes, {"title", "status", "order"})

        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            existing = await repo.get("milestones", milestone_id)
            if existing is None:
                raise MilestoneNotFoundError(milestone_id)

            new_parent = changes.get("parent_id")
            if new_parent is not None:
                await self._check_reparent(repo, existing, new_parent)

            if "status" in changes:
                if changes["status"] == "completed" and existing["status"] != "completed":
                    changes["completed_at"] = utc_now()
                elif changes["status"] != "completed":
                    changes["completed_at"] = None

            if "order" in changes:
                changes["sort_order"] = changes.pop("order")

            await repo.update("milestones", milestone_id, changes)

        return await self.get_milestone(user_id, milestone_id)

    async def delete_milestone(self, user_id: str, milestone_id: str) -> None:
        """Delete a milestone without orphaning anything.

        Child milestones become roots of the same project; tasks, entries,
        and time entries lose their milestone link but are kept.
        """
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            if await repo.get("milestones", milestone_id) is None:
                raise MilestoneNotFoundError(milestone_id)

            promoted = await repo.update_where(
                "milestones", "parent_id", milestone_id, {"parent_id": None},
            )
            unlinked = {
                table: await repo.update_where(
                    table, "milestone_id", milestone_id, {"milestone_id": None},
                )
                for table in _MILESTONE_REFERRERS
            }
            await repo.delete("milestones", milestone_id)

        logger.info(
            "Deleted milestone %s: promoted %d children, unlinked %s",
            milestone_id, promoted, unlinked,
        )

    # -- Internal --

    @staticmethod
    async def _check_reparent(
        repo: ScopedRepository, milestone: dict, new_parent_id: str,
    ) -> None:
        """Reject a parent that is missing, foreign, in another project, self, or a descendant."""
        milestone_id = milestone["milestone_id"]
        if new_parent_id == milestone_id:
            raise SelfParentError(milestone_id)

        siblings = await repo.select(
            "milestones", filters={"project_id": milestone["project_id"]},
        )
        parent_of = {m["milestone_id"]: m["parent_id"] for m in siblings}
        if new_parent_id not in parent_of:
            raise ParentNotFoundError(new_parent_id)

        # Walk up from the candidate; meeting ourselves means it is a descendant
        seen: set[str] = set()
        current: str | None = new_parent_id
        while current is not None and current not in seen:
            if current == milestone_id:
                raise MilestoneCycleError(milestone_id, new_parent_id)
            seen.add(current)
            current = parent_of.get(current)

    @staticmethod
    async def _build_views(
        repo: ScopedRepository, rows: list[dict], *, with_entries: bool,
    ) -> list[MilestoneResponse]:
        """Attach parent, children, tasks, (entries,) and progress to milestone rows.

        Related rows are fetched in one query per kind for the whole page.
        """
        if not rows:
            return []
        ids = [r["milestone_id"] for r in rows]

        children_by_parent: dict[str, list[dict]] = defaultdict(list)
        for child in await repo.select_in(
            "milestones", "parent_id", ids, order_by="sort_order ASC, created_at ASC",
        ):
            children_by_parent[child["parent_id"]].append(child)

        tasks_by_milestone: dict[str, list[dict]] = defaultdict(list)
        for task in await repo.select_in(
            "tasks", "milestone_id", ids, order_by="sort_order ASC, created_at ASC",
        ):
            tasks_by_milestone[task["milestone_id"]].append(task)

        entries_by_milestone: dict[str, list[dict]] = defaultdict(list)
        if with_entries:
            for entry in await repo.select_in(
                "entries", "milestone_id", ids, order_by="published_at DESC, created_at DESC",
            ):
                entries_by_milestone[entry["milestone_id"]].append(entry)

        parent_ids = sorted({r["parent_id"] for r in rows if r["parent_id"]})
        parents = {
            p["milestone_id"]: p
            for p in await repo.select_in("milestones", "milestone_id", parent_ids)
        }
        project_ids = sorted({r["project_id"] for r in rows})
        project_titles = {
            p["project_id"]: p["title"]
            for p in await repo.select_in("projects", "project_id", project_ids)
        }

        views = []
        for row in rows:
            children = children_by_parent[row["milestone_id"]]
            tasks = tasks_by_milestone[row["milestone_id"]]
            parent = parents.get(row["parent_id"]) if row["parent_id"] else None
            views.append(MilestoneResponse(
                milestone_id=row["milestone_id"],
                user_id=row["user_id"],
                project_id=row["project_id"],
                parent_id=row["parent_id"],
                title=row["title"],
                description=row["description"],
                status=row["status"],
                target_date=row["target_date"],
                completed_at=row["completed_at"],
                order=row["sort_order"],
                created_at=row["created_at"],
                project_title=project_titles.get(row["project_id"]),
                parent=_milestone_ref(parent) if parent else None,
                children=[_milestone_ref(c) for c in children],
                tasks=[
                    MilestoneTaskRef(
                        task_id=t["task_id"],
                        title=t["title"],
                        completed=bool(t["completed"]),
                        completed_at=t["completed_at"],
                        due_date=t["due_date"],
                    )
                    for t in tasks
                ],
                entries=[
                    MilestoneEntryRef(
                        entry_id=e["entry_id"],
                        title=e["title"],
                        type=e["type"],
                        published_at=e["published_at"],
                    )
                    for e in entries_by_milestone[row["milestone_id"]]
                ],
                progress=compute_progress(tasks, children),
            ))
        return views


def _milestone_ref(row: dict) -> MilestoneRef:
    return MilestoneRef(
        milestone_id=row["milestone_id"],
        title=row["title"],
        status=row["status"],
        completed_at=row["completed_at"],
        target_date=row["target_date"],
    )
