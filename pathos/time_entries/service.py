"""Time entry service: logging time against projects, tasks, and milestones."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from pathos.db.connection import Database
from pathos.db.scoped import ScopedRepository
from pathos.errors import (
    CrossProjectReferenceError,
    EndBeforeStartError,
    TaskNotFoundError,
    ValidationError,
)
from pathos.models import to_iso, utc_now
from pathos.projects.references import resolve_milestone_project
from pathos.time_entries.schemas import (
    LogTimeEntryRequest,
    TimeEntryListResponse,
    TimeEntryResponse,
)

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 24 * 60


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def span_minutes(started_at: datetime, ended_at: datetime) -> int:
    """Whole minutes between two instants, rounded. Naive values are UTC."""
    return round((_as_utc(ended_at) - _as_utc(started_at)).total_seconds() / 60)


def resolve_duration(
    started_at: datetime, ended_at: datetime, duration: int | None,
) -> int:
    """The duration to store.

    A supplied duration wins over the timestamps; a mismatch is logged, not
    rejected. Either way the result must lie in 1..1440 minutes.
    """
    if _as_utc(ended_at) <= _as_utc(started_at):
        raise EndBeforeStartError()

    computed = span_minutes(started_at, ended_at)
    if duration is None:
        final = computed
    else:
        final = duration
        if duration != computed:
            logger.warning(
                "Supplied duration %d min differs from time range %d min",
                duration, computed,
            )

    if not MIN_DURATION_MINUTES <= final <= MAX_DURATION_MINUTES:
        raise ValidationError(
            "duration",
            f"must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes",
        )
    return final


class TimeEntryService:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def log_time_entry(
        self, user_id: str, request: LogTimeEntryRequest,
    ) -> TimeEntryResponse:
        """Record time spent. Every referenced row must belong to the caller.

        With no project given, the entry takes the project of its milestone
        or task.
        """
        duration = resolve_duration(request.started_at, request.ended_at, request.duration)

        time_entry_id = str(uuid4())
        async with self._db.transaction() as tx:
            repo = ScopedRepository(tx, user_id)
            project_id = await resolve_milestone_project(
                repo, request.project_id, request.milestone_id,
            )
            if request.task_id is not None:
                task = await repo.get("tasks", request.task_id)
                if task is None:
                    raise TaskNotFoundError(request.task_id)
                if project_id is None:
                    project_id = task["project_id"]
                elif task["project_id"] not in (None, project_id):
                    raise CrossProjectReferenceError(
                        request.task_id, project_id, ref_kind="Task",
                    )

            await repo.insert("time_entries", {
                "time_entry_id": time_entry_id,
                "project_id": project_id,
                "task_id": request.task_id,
                "milestone_id": request.milestone_id,
                "description": request.description,
                "duration": duration,
                "started_at": to_iso(request.started_at),
                "ended_at": to_iso(request.ended_at),
                "created_at": utc_now(),
            })

        repo = ScopedRepository(self._db, user_id)
        row = await repo.get("time_entries", time_entry_id)
        assert row is not None
        return (await self._build_views(repo, [row]))[0]

    async def list_time_entries(
        self,
        user_id: str,
        *,
        project_id: str | None = None,
        task_id: str | None = None,
        milestone_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> TimeEntryListResponse:
        """A page of owned time entries, most recent first, with the page's total minutes."""
        filters = {
            column: value
            for column, value in (
                ("project_id", project_id),
                ("task_id", task_id),
                ("milestone_id", milestone_id),
            )
            if value
        }
        repo = ScopedRepository(self._db, user_id)
        rows = await repo.select(
            "time_entries",
            filters=filters,
            order_by="started_at DESC",
            limit=limit,
            offset=offset,
        )
        entries = await self._build_views(repo, rows)
        return TimeEntryListResponse(
            time_entries=entries,
            total_time=sum(e.duration for e in entries),
            count=len(entries),
        )

    @staticmethod
    async def _build_views(
        repo: ScopedRepository, rows: list[dict],
    ) -> list[TimeEntryResponse]:
        def ids(column: str) -> list[str]:
            return sorted({r[column] for r in rows if r[column]})

        project_titles = {
            p["project_id"]: p["title"]
            for p in await repo.select_in(
                "projects", "project_id", ids("project_id"),
            )
        }
        task_titles = {
            t["task_id"]: t["title"]
            for t in await repo.select_in("tasks", "task_id", ids("task_id"))
        }
        milestone_titles = {
            m["milestone_id"]: m["title"]
            for m in await repo.select_in(
                "milestones", "milestone_id", ids("milestone_id"),
            )
        }

        return [
            TimeEntryResponse(
                time_entry_id=row["time_entry_id"],
                user_id=row["user_id"],
                project_id=row["project_id"],
                task_id=row["task_id"],
                milestone_id=row["milestone_id"],
                description=row["description"],
                duration=row["duration"],
                started_at=row["started_at"],
                ended_at=row["ended_at"],
                created_at=row["created_at"],
                project_title=project_titles.get(row["project_id"]),
                task_title=task_titles.get(row["task_id"]),
                milestone_title=milestone_titles.get(row["milestone_id"]),
            )
            for row in rows
        ]
