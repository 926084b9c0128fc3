"""Shared test helpers: rows inserted directly, and identity headers."""

from uuid import uuid4

from pathos.db.connection import Database
from pathos.models import utc_now


def auth(user_id: str) -> dict[str, str]:
    """Request headers identifying the caller."""
    return {"X-User-Id": user_id}


async def create_user(db: Database, username: str | None = None) -> str:
    """Insert a user with an unusable password hash. Returns user_id."""
    user_id = str(uuid4())
    now = utc_now()
    await db.execute(
        """
        INSERT INTO users (user_id, username, password_hash, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (user_id, username or f"user-{user_id[:8]}", "!", now, now),
    )
    return user_id


async def create_passion(
    db: Database,
    name: str = "Woodworking",
    *,
    is_custom: bool = False,
    member: str | None = None,
) -> str:
    """Insert a passion, optionally joining a user to it. Returns passion_id."""
    passion_id = str(uuid4())
    await db.execute(
        """
        INSERT INTO passions (passion_id, name, slug, is_custom, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (passion_id, name, f"{name.lower()}-{passion_id[:8]}", int(is_custom), utc_now()),
    )
    if member is not None:
        await db.execute(
            "INSERT INTO user_passions (user_id, passion_id, created_at) VALUES (?, ?, ?)",
            (member, passion_id, utc_now()),
        )
    return passion_id


async def create_project_via_api(client, user_id: str, passion_id: str, **overrides) -> dict:
    """POST a project and return its JSON."""
    body = {"title": "Build a bookshelf", "passion_id": passion_id, **overrides}
    resp = await client.post("/api/projects", json=body, headers=auth(user_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_milestone_via_api(
    client, user_id: str, project_id: str, title: str = "Milestone", **overrides,
) -> dict:
    """POST a milestone and return its JSON."""
    body = {"title": title, "project_id": project_id, **overrides}
    resp = await client.post("/api/milestones", json=body, headers=auth(user_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_task_via_api(client, user_id: str, title: str = "Task", **fields) -> dict:
    """POST a task and return its JSON."""
    resp = await client.post(
        "/api/tasks", json={"title": title, **fields}, headers=auth(user_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_entry_via_api(
    client, user_id: str, project_id: str, title: str = "Entry", **fields,
) -> dict:
    """POST an entry and return its JSON."""
    resp = await client.post(
        "/api/entries",
        json={"title": title, "project_id": project_id, **fields},
        headers=auth(user_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def setup_owner(client, db: Database) -> tuple[str, str, dict]:
    """A user who has joined a passion and owns one project."""
    user_id = await create_user(db)
    passion_id = await create_passion(db, member=user_id)
    project = await create_project_via_api(client, user_id, passion_id)
    return user_id, passion_id, project
