"""Ownership-scoped data access.

Every read and write of a user-owned row goes through a ScopedRepository
bound to the caller's user_id. The owner filter is added here and nowhere
else, so a row belonging to someone else looks exactly like a missing row.
"""

from collections.abc import Iterable
from typing import Any, Protocol

import aiosqlite

# table -> primary key column
OWNED_TABLES: dict[str, str] = {
    "projects": "project_id",
    "milestones": "milestone_id",
    "tasks": "task_id",
    "entries": "entry_id",
    "time_entries": "time_entry_id",
}


class Connection(Protocol):
    """What both Database and Transaction provide."""

    async def execute(self, sql: str, params: tuple | None = None) -> aiosqlite.Cursor: ...

    async def fetchone(self, sql: str, params: tuple | None = None) -> aiosqlite.Row | None: ...

    async def fetchall(self, sql: str, params: tuple | None = None) -> list[aiosqlite.Row]: ...


class ScopedRepository:
    """Row access restricted to one owner."""

    def __init__(self, conn: Connection, user_id: str) -> None:
        self._conn = conn
        self.user_id = user_id

    async def get(self, table: str, row_id: str) -> dict | None:
        """Fetch one owned row by primary key. None if absent or foreign."""
        pk = OWNED_TABLES[table]
        row = await self._conn.fetchone(
            f"SELECT * FROM {table} WHERE {pk} = ? AND user_id = ?",
            (row_id, self.user_id),
        )
        return dict(row) if row is not None else None

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        where: Iterable[str] = (),
        order_by: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict]:
        """Fetch owned rows matching equality filters.

        A filter value of None matches NULL. ``where`` takes extra literal
        clauses (no parameters) chosen by the calling service.
        """
        clauses = ["user_id = ?"]
        params: list[Any] = [self.user_id]
        for column, value in (filters or {}).items():
            if value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(value)
        clauses.extend(where)

        sql = f"SELECT * FROM {table} WHERE {' AND '.join(clauses)}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        rows = await self._conn.fetchall(sql, tuple(params))
        return [dict(row) for row in rows]

    async def select_in(
        self, table: str, column: str, values: list[str], *, order_by: str | None = None,
    ) -> list[dict]:
        """Fetch owned rows whose column is one of values."""
        if not values:
            return []
        placeholders = ", ".join("?" for _ in values)
        sql = (
            f"SELECT * FROM {table} WHERE user_id = ? AND {column} IN ({placeholders})"
        )
        if order_by:
            sql += f" ORDER BY {order_by}"
        rows = await self._conn.fetchall(sql, (self.user_id, *values))
        return [dict(row) for row in rows]

    async def insert(self, table: str, values: dict[str, Any]) -> None:
        """Insert a row owned by this user. user_id is always set here."""
        values = {**values, "user_id": self.user_id}
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        await self._conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
            tuple(values.values()),
        )

    async def update(self, table: str, row_id: str, values: dict[str, Any]) -> None:
        """Set columns on one owned row. No-op for an empty update."""
        if not values:
            return
        pk = OWNED_TABLES[table]
        assignments = ", ".join(f"{column} = ?" for column in values)
        await self._conn.execute(
            f"UPDATE {table} SET {assignments} WHERE {pk} = ? AND user_id = ?",
            (*values.values(), row_id, self.user_id),
        )

    async def update_where(
        self, table: str, column: str, value: str, values: dict[str, Any],
    ) -> int:
        """Set columns on every owned row whose column equals value. Returns rowcount."""
        assignments = ", ".join(f"{c} = ?" for c in values)
        cursor = await self._conn.execute(
            f"UPDATE {table} SET {assignments} WHERE {column} = ? AND user_id = ?",
            (*values.values(), value, self.user_id),
        )
        return cursor.rowcount

    async def delete(self, table: str, row_id: str) -> None:
        """Delete one owned row by primary key."""
        pk = OWNED_TABLES[table]
        await self._conn.execute(
            f"DELETE FROM {table} WHERE {pk} = ? AND user_id = ?",
            (row_id, self.user_id),
        )

    async def delete_where(self, table: str, column: str, value: str) -> int:
        """Delete every owned row whose column equals value. Returns rowcount."""
        cursor = await self._conn.execute(
            f"DELETE FROM {table} WHERE {column} = ? AND user_id = ?",
            (value, self.user_id),
        )
        return cursor.rowcount
