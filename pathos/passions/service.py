"""Passion service: the global passion taxonomy and user membership."""

import logging
from collections import defaultdict
from pathlib import Path
from uuid import uuid4

import aiosqlite
import yaml

from pathos.db.connection import Database
from pathos.errors import (
    DuplicateUserPassionError,
    PassionNotFoundError,
    SlugConflictError,
    UserPassionNotFoundError,
)
from pathos.models import utc_now
from pathos.passions.schemas import (
    CreatePassionRequest,
    PassionResponse,
    PassionSummary,
    UserPassionResponse,
)
from pathos.passions.slug import unique_slug

logger = logging.getLogger(__name__)

_DEFAULT_PASSIONS_PATH = Path(__file__).parent / "default_passions.yml"


class PassionService:
    """Reads and extends the passion tree; manages user_passions rows."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_passions(
        self, user_id: str, *, include_user_passions: bool = False,
    ) -> list[PassionResponse]:
        """All passions, built-ins first, then by name."""
        rows = await self._db.fetchall(
            "SELECT * FROM passions ORDER BY is_custom ASC, name ASC"
        )
        user_counts = await self._counts(
            "SELECT passion_id, COUNT(*) AS cnt FROM user_passions GROUP BY passion_id"
        )
        project_counts = await self._counts(
            "SELECT passion_id, COUNT(*) AS cnt FROM projects GROUP BY passion_id"
        )

        joined: set[str] | None = None
        if include_user_passions:
            joined_rows = await self._db.fetchall(
                "SELECT passion_id FROM user_passions WHERE user_id = ?",
                (user_id,),
            )
            joined = {r["passion_id"] for r in joined_rows}

        passions = [dict(r) for r in rows]
        return self._build_responses(
            passions,
            user_counts=user_counts,
            project_counts=project_counts,
            joined=joined,
        )

    async def get_passion(self, passion_id: str) -> dict | None:
        """Raw passion row, or None."""
        row = await self._db.fetchone(
            "SELECT * FROM passions WHERE passion_id = ?", (passion_id,)
        )
        return dict(row) if row is not None else None

    async def create_passion(
        self, user_id: str, request: CreatePassionRequest,
    ) -> PassionResponse:
        """Create a custom passion with a unique slug and join the creator to it."""
        passion_id = str(uuid4())
        now = utc_now()
        slug = ""

        try:
            async with self._db.transaction() as tx:
                if request.parent_id is not None:
                    parent = await tx.fetchone(
                        "SELECT passion_id FROM passions WHERE passion_id = ?",
                        (request.parent_id,),
                    )
                    if parent is None:
                        raise PassionNotFoundError(request.parent_id)

                async def slug_taken(candidate: str) -> bool:
                    row = await tx.fetchone(
                        "SELECT 1 FROM passions WHERE slug = ?", (candidate,)
                    )
                    return row is not None

                slug = await unique_slug(request.name, slug_taken)

                await tx.execute(
                    """
                    INSERT INTO passions
                        (passion_id, name, slug, parent_id, is_custom,
                         description, icon, color, created_at)
                    VALUES (?, ?, ?, ?, 1, ?, ?, ?, ?)
                    """,
                    (
                        passion_id,
                        request.name,
                        slug,
                        request.parent_id,
                        request.description,
                        request.icon,
                        request.color,
                        now,
                    ),
                )
                await tx.execute(
                    "INSERT INTO user_passions (user_id, passion_id, created_at) VALUES (?, ?, ?)",
                    (user_id, passion_id, now),
                )
        except aiosqlite.IntegrityError as e:
            if "passions.slug" not in str(e):
                raise
            # Another writer claimed the slug between probe and insert
            raise SlugConflictError(slug) from e

        logger.info("Created custom passion %s (%s)", slug, passion_id)
        passions = await self.list_passions(user_id)
        return next(p for p in passions if p.passion_id == passion_id)

    # -- Membership --

    async def is_member(self, user_id: str, passion_id: str) -> bool:
        row = await self._db.fetchone(
            "SELECT 1 FROM user_passions WHERE user_id = ? AND passion_id = ?",
            (user_id, passion_id),
        )
        return row is not None

    async def list_user_passions(self, user_id: str) -> list[UserPassionResponse]:
        """The caller's passions, by name, with the caller's project count per passion."""
        rows = await self._db.fetchall(
            """
            SELECT up.user_id, up.passion_id, up.created_at AS joined_at
            FROM user_passions up
            JOIN passions p ON p.passion_id = up.passion_id
            WHERE up.user_id = ?
            ORDER BY p.name ASC
            """,
            (user_id,),
        )
        if not rows:
            return []

        all_passions = [dict(r) for r in await self._db.fetchall("SELECT * FROM passions")]
        project_counts = await self._counts(
            "SELECT passion_id, COUNT(*) AS cnt FROM projects WHERE user_id = ? GROUP BY passion_id",
            (user_id,),
        )
        by_id = {
            p.passion_id: p
            for p in self._build_responses(all_passions, project_counts=project_counts)
        }
        return [
            UserPassionResponse(
                user_id=r["user_id"],
                passion_id=r["passion_id"],
                created_at=r["joined_at"],
                passion=by_id[r["passion_id"]],
            )
            for r in rows
        ]

    async def add_user_passion(self, user_id: str, passion_id: str) -> UserPassionResponse:
        """Join the caller to an existing passion."""
        if await self.get_passion(passion_id) is None:
            raise PassionNotFoundError(passion_id)
        if await self.is_member(user_id, passion_id):
            raise DuplicateUserPassionError(passion_id)

        try:
            await self._db.execute(
                "INSERT INTO user_passions (user_id, passion_id, created_at) VALUES (?, ?, ?)",
                (user_id, passion_id, utc_now()),
            )
        except aiosqlite.IntegrityError as e:
            raise DuplicateUserPassionError(passion_id) from e

        memberships = await self.list_user_passions(user_id)
        return next(m for m in memberships if m.passion_id == passion_id)

    async def remove_user_passion(self, user_id: str, passion_id: str) -> None:
        """Leave a passion. The passion itself and its projects are untouched."""
        cursor = await self._db.execute(
            "DELETE FROM user_passions WHERE user_id = ? AND passion_id = ?",
            (user_id, passion_id),
        )
        if cursor.rowcount == 0:
            raise UserPassionNotFoundError(passion_id)

    # -- Seeding --

    async def seed_default_passions(self, path: Path = _DEFAULT_PASSIONS_PATH) -> int:
        """Insert the built-in passion catalogue. Existing slugs are left alone.

        Returns the number of passions created.
        """
        with open(path) as f:
            data = yaml.safe_load(f)
        catalogue = data.get("passions", [])

        created = 0
        async with self._db.transaction() as tx:
            id_by_slug: dict[str, str] = {}
            for item in catalogue:
                existing = await tx.fetchone(
                    "SELECT passion_id FROM passions WHERE slug = ?", (item["slug"],)
                )
                if existing is not None:
                    id_by_slug[item["slug"]] = existing["passion_id"]
                    continue

                passion_id = str(uuid4())
                await tx.execute(
                    """
                    INSERT INTO passions
                        (passion_id, name, slug, parent_id, is_custom,
                         description, icon, color, created_at)
                    VALUES (?, ?, ?, ?, 0, ?, ?, ?, ?)
                    """,
                    (
                        passion_id,
                        item["name"],
                        item["slug"],
                        id_by_slug.get(item.get("parent")),
                        item.get("description")
                        or f"Explore and learn {item['name'].lower()}",
                        item.get("icon"),
                        item.get("color"),
                        utc_now(),
                    ),
                )
                id_by_slug[item["slug"]] = passion_id
                created += 1

        logger.info("Seeded %d default passions (%d in catalogue)", created, len(catalogue))
        return created

    # -- Helpers --

    async def _counts(self, sql: str, params: tuple | None = None) -> dict[str, int]:
        rows = await self._db.fetchall(sql, params)
        return {r["passion_id"]: r["cnt"] for r in rows}

    @staticmethod
    def _build_responses(
        passions: list[dict],
        *,
        user_counts: dict[str, int] | None = None,
        project_counts: dict[str, int] | None = None,
        joined: set[str] | None = None,
    ) -> list[PassionResponse]:
        """Attach parent/children summaries from an id-indexed map of the tree."""
        by_id = {p["passion_id"]: p for p in passions}
        children: dict[str, list[dict]] = defaultdict(list)
        for p in passions:
            if p["parent_id"] is not None:
                children[p["parent_id"]].append(p)

        def summary(row: dict) -> PassionSummary:
            return PassionSummary(
                passion_id=row["passion_id"],
                name=row["name"],
                slug=row["slug"],
                icon=row["icon"],
                color=row["color"],
            )

        responses = []
        for p in passions:
            parent = by_id.get(p["parent_id"]) if p["parent_id"] else None
            responses.append(PassionResponse(
                passion_id=p["passion_id"],
                name=p["name"],
                slug=p["slug"],
                parent_id=p["parent_id"],
                is_custom=bool(p["is_custom"]),
                description=p["description"],
                icon=p["icon"],
                color=p["color"],
                created_at=p["created_at"],
                parent=summary(parent) if parent else None,
                children=[summary(c) for c in children[p["passion_id"]]],
                user_count=(user_counts or {}).get(p["passion_id"], 0),
                project_count=(project_counts or {}).get(p["passion_id"], 0),
                is_joined=(p["passion_id"] in joined) if joined is not None else None,
            ))
        return responses
