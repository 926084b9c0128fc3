"""Tests for the database wrapper: schema, migrations, transactions, scoping."""

import pytest

from pathos.db import schema
from pathos.db.connection import Database
from pathos.db.schema import run_migrations
from pathos.db.scoped import ScopedRepository
from pathos.models import utc_now
from tests.fixtures import create_passion, create_user


async def _insert_project(db: Database, user_id: str, passion_id: str, title: str) -> str:
    project_id = f"p-{title}"
    now = utc_now()
    async with db.transaction() as tx:
        await ScopedRepository(tx, user_id).insert("projects", {
            "project_id": project_id,
            "passion_id": passion_id,
            "title": title,
            "created_at": now,
            "updated_at": now,
        })
    return project_id


class TestSchema:
    async def test_all_tables_created(self, db):
        rows = await db.fetchall("SELECT name FROM sqlite_master WHERE type = 'table'")
        names = {r["name"] for r in rows}
        assert {
            "users", "passions", "user_passions", "projects", "milestones",
            "tasks", "entries", "time_entries", "schema_migrations",
        } <= names

    async def test_pending_migration_applied_and_recorded(self, db, monkeypatch):
        monkeypatch.setattr(
            schema, "_MIGRATIONS",
            [("0001_users_bio", "ALTER TABLE users ADD COLUMN bio TEXT")],
        )
        await run_migrations(db)
        rows = await db.fetchall("SELECT name FROM schema_migrations")
        assert [r["name"] for r in rows] == ["0001_users_bio"]
        columns = await db.fetchall("PRAGMA table_info(users)")
        assert "bio" in {c["name"] for c in columns}

    async def test_rerunning_migrations_is_noop(self, db, monkeypatch):
        monkeypatch.setattr(
            schema, "_MIGRATIONS",
            [("0001_users_bio", "ALTER TABLE users ADD COLUMN bio TEXT")],
        )
        await run_migrations(db)
        await run_migrations(db)
        rows = await db.fetchall("SELECT name FROM schema_migrations")
        assert len(rows) == 1

    async def test_migration_for_existing_column_is_recorded(self, db, monkeypatch):
        monkeypatch.setattr(
            schema, "_MIGRATIONS",
            [("0001_users_location", "ALTER TABLE users ADD COLUMN location TEXT")],
        )
        await run_migrations(db)
        rows = await db.fetchall("SELECT name FROM schema_migrations")
        assert [r["name"] for r in rows] == ["0001_users_location"]


class TestTransaction:
    async def test_commits_on_success(self, db):
        user_id = await create_user(db)
        passion_id = await create_passion(db)
        await _insert_project(db, user_id, passion_id, "kept")
        row = await db.fetchone("SELECT title FROM projects WHERE project_id = 'p-kept'")
        assert row["title"] == "kept"

    async def test_rolls_back_on_error(self, db):
        user_id = await create_user(db)
        passion_id = await create_passion(db)
        with pytest.raises(RuntimeError):
            async with db.transaction() as tx:
                now = utc_now()
                await ScopedRepository(tx, user_id).insert("projects", {
                    "project_id": "p-lost",
                    "passion_id": passion_id,
                    "title": "lost",
                    "created_at": now,
                    "updated_at": now,
                })
                raise RuntimeError("boom")
        assert await db.fetchone("SELECT 1 FROM projects WHERE project_id = 'p-lost'") is None

    async def test_usable_after_rollback(self, db):
        user_id = await create_user(db)
        passion_id = await create_passion(db)
        with pytest.raises(RuntimeError):
            async with db.transaction():
                raise RuntimeError("boom")
        await _insert_project(db, user_id, passion_id, "after")
        assert await db.fetchone("SELECT 1 FROM projects WHERE project_id = 'p-after'")


class TestScopedRepository:
    async def test_foreign_row_looks_missing(self, db):
        alice = await create_user(db, "alice")
        bob = await create_user(db, "bob")
        passion_id = await create_passion(db)
        project_id = await _insert_project(db, alice, passion_id, "mine")

        assert await ScopedRepository(db, alice).get("projects", project_id) is not None
        assert await ScopedRepository(db, bob).get("projects", project_id) is None

    async def test_insert_forces_owner(self, db):
        alice = await create_user(db, "alice")
        passion_id = await create_passion(db)
        now = utc_now()
        async with db.transaction() as tx:
            await ScopedRepository(tx, alice).insert("projects", {
                "project_id": "p-forced",
                "passion_id": passion_id,
                "title": "forced",
                "user_id": "someone-else",
                "created_at": now,
                "updated_at": now,
            })
        row = await db.fetchone("SELECT user_id FROM projects WHERE project_id = 'p-forced'")
        assert row["user_id"] == alice

    async def test_update_and_delete_skip_foreign_rows(self, db):
        alice = await create_user(db, "alice")
        bob = await create_user(db, "bob")
        passion_id = await create_passion(db)
        project_id = await _insert_project(db, alice, passion_id, "guarded")

        async with db.transaction() as tx:
            repo = ScopedRepository(tx, bob)
            await repo.update("projects", project_id, {"title": "hijacked"})
            await repo.delete("projects", project_id)

        row = await db.fetchone("SELECT title FROM projects WHERE project_id = ?", (project_id,))
        assert row["title"] == "guarded"

    async def test_select_none_filter_matches_null(self, db):
        alice = await create_user(db, "alice")
        passion_id = await create_passion(db)
        await _insert_project(db, alice, passion_id, "undescribed")
        rows = await ScopedRepository(db, alice).select(
            "projects", filters={"description": None},
        )
        assert [r["title"] for r in rows] == ["undescribed"]
