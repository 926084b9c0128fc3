"""Database schema DDL. All tables use CREATE IF NOT EXISTS for idempotency."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite

if TYPE_CHECKING:
    from pathos.db.connection import Database

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id TEXT PRIMARY KEY,
    username TEXT UNIQUE NOT NULL,
    email TEXT UNIQUE,
    password_hash TEXT NOT NULL,
    name TEXT,
    location TEXT,
    privacy TEXT NOT NULL DEFAULT 'public',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS passions (
    passion_id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    slug TEXT UNIQUE NOT NULL,
    parent_id TEXT,
    is_custom INTEGER NOT NULL DEFAULT 0,
    description TEXT,
    icon TEXT,
    color TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (parent_id) REFERENCES passions(passion_id)
);

CREATE INDEX IF NOT EXISTS idx_passions_parent_id ON passions(parent_id);

CREATE TABLE IF NOT EXISTS user_passions (
    user_id TEXT NOT NULL,
    passion_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (user_id, passion_id),
    FOREIGN KEY (user_id) REFERENCES users(user_id),
    FOREIGN KEY (passion_id) REFERENCES passions(passion_id)
);

CREATE TABLE IF NOT EXISTS projects (
    project_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    passion_id TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL DEFAULT 'active',
    stage TEXT NOT NULL DEFAULT 'idea',
    privacy TEXT NOT NULL DEFAULT 'public',
    start_date TEXT,
    end_date TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(user_id),
    FOREIGN KEY (passion_id) REFERENCES passions(passion_id)
);

CREATE INDEX IF NOT EXISTS idx_projects_user_id ON projects(user_id);
CREATE INDEX IF NOT EXISTS idx_projects_passion_id ON projects(passion_id);

CREATE TABLE IF NOT EXISTS milestones (
    milestone_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    project_id TEXT NOT NULL,
    parent_id TEXT,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL DEFAULT 'planned',
    target_date TEXT,
    completed_at TEXT,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (parent_id) REFERENCES milestones(milestone_id)
);

CREATE INDEX IF NOT EXISTS idx_milestones_user_id ON milestones(user_id);
CREATE INDEX IF NOT EXISTS idx_milestones_project_id ON milestones(project_id);
CREATE INDEX IF NOT EXISTS idx_milestones_parent_id ON milestones(parent_id);

CREATE TABLE IF NOT EXISTS tasks (
    task_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    project_id TEXT,
    milestone_id TEXT,
    title TEXT NOT NULL,
    description TEXT,
    completed INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT,
    due_date TEXT,
    sort_order INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (milestone_id) REFERENCES milestones(milestone_id)
);

CREATE INDEX IF NOT EXISTS idx_tasks_user_id ON tasks(user_id);
CREATE INDEX IF NOT EXISTS idx_tasks_project_id ON tasks(project_id);
CREATE INDEX IF NOT EXISTS idx_tasks_milestone_id ON tasks(milestone_id);

CREATE TABLE IF NOT EXISTS entries (
    entry_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    project_id TEXT NOT NULL,
    milestone_id TEXT,
    title TEXT NOT NULL,
    content TEXT,
    type TEXT NOT NULL DEFAULT 'progress',
    privacy TEXT NOT NULL DEFAULT 'public',
    media_urls TEXT NOT NULL DEFAULT '[]',
    links TEXT NOT NULL DEFAULT '[]',
    tags TEXT NOT NULL DEFAULT '[]',
    published_at TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (milestone_id) REFERENCES milestones(milestone_id)
);

CREATE INDEX IF NOT EXISTS idx_entries_user_id ON entries(user_id);
CREATE INDEX IF NOT EXISTS idx_entries_project_id ON entries(project_id);
CREATE INDEX IF NOT EXISTS idx_entries_milestone_id ON entries(milestone_id);
CREATE INDEX IF NOT EXISTS idx_entries_published_at ON entries(published_at);

CREATE TABLE IF NOT EXISTS time_entries (
    time_entry_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    project_id TEXT,
    task_id TEXT,
    milestone_id TEXT,
    description TEXT,
    duration INTEGER NOT NULL,
    started_at TEXT NOT NULL,
    ended_at TEXT NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (task_id) REFERENCES tasks(task_id),
    FOREIGN KEY (milestone_id) REFERENCES milestones(milestone_id)
);

CREATE INDEX IF NOT EXISTS idx_time_entries_user_id ON time_entries(user_id);
CREATE INDEX IF NOT EXISTS idx_time_entries_project_id ON time_entries(project_id);

CREATE TABLE IF NOT EXISTS schema_migrations (
    name TEXT PRIMARY KEY,
    applied_at TEXT NOT NULL
);
"""

# Named migrations for databases created by an older schema. Each runs once
# and is recorded in schema_migrations. Empty until the schema first changes.
_MIGRATIONS: list[tuple[str, str]] = []


async def run_migrations(db: "Database") -> None:
    """Apply migrations not yet recorded in schema_migrations.

    A migration whose column already exists (fresh databases get every column
    from SCHEMA_SQL) is recorded as applied without failing.
    """
    rows = await db.fetchall("SELECT name FROM schema_migrations")
    applied = {row["name"] for row in rows}

    for name, sql in _MIGRATIONS:
        if name in applied:
            continue
        try:
            await db.execute(sql)
        except aiosqlite.OperationalError as e:
            if "duplicate column name" not in str(e):
                raise
            logger.debug("Migration %s already reflected in schema", name)
        await db.execute(
            "INSERT INTO schema_migrations (name, applied_at) VALUES (?, ?)",
            (name, datetime.now(UTC).isoformat()),
        )
