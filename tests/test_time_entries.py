"""Tests for logging and listing time entries."""

from tests.fixtures import (
    auth,
    create_milestone_via_api,
    create_project_via_api,
    create_task_via_api,
    create_user,
    setup_owner,
)

START = "2026-05-01T10:00:00Z"


class TestLogTimeEntry:
    async def test_duration_computed_from_range(self, client, db):
        user_id = await create_user(db)
        resp = await client.post("/api/time-entries", headers=auth(user_id), json={
            "started_at": START, "ended_at": "2026-05-01T10:45:00Z",
        })
        assert resp.status_code == 201
        assert resp.json()["duration"] == 45

    async def test_supplied_duration_wins(self, client, db):
        user_id = await create_user(db)
        resp = await client.post("/api/time-entries", headers=auth(user_id), json={
            "duration": 30, "started_at": START, "ended_at": "2026-05-01T10:45:00Z",
        })
        assert resp.json()["duration"] == 30

    async def test_end_before_start_rejected(self, client, db):
        user_id = await create_user(db)
        resp = await client.post("/api/time-entries", headers=auth(user_id), json={
            "started_at": START, "ended_at": START,
        })
        assert resp.status_code == 400
        assert resp.json()["error"] == "invariant_violation"

    async def test_out_of_range_duration_rejected(self, client, db):
        user_id = await create_user(db)
        for duration in (0, 1441):
            resp = await client.post("/api/time-entries", headers=auth(user_id), json={
                "duration": duration, "started_at": START, "ended_at": "2026-05-01T11:00:00Z",
            })
            assert resp.status_code == 400
            assert resp.json()["field"] == "duration"

    async def test_inherits_project_from_task(self, client, db):
        owner, _, project = await setup_owner(client, db)
        task = await create_task_via_api(client, owner, project_id=project["project_id"])
        resp = await client.post("/api/time-entries", headers=auth(owner), json={
            "task_id": task["task_id"], "started_at": START, "ended_at": "2026-05-01T10:10:00Z",
        })
        data = resp.json()
        assert data["project_id"] == project["project_id"]
        assert data["task_title"] == task["title"]
        assert data["project_title"] == project["title"]

    async def test_foreign_references_not_found(self, client, db):
        owner, _, project = await setup_owner(client, db)
        milestone = await create_milestone_via_api(client, owner, project["project_id"])
        task = await create_task_via_api(client, owner)
        other = await create_user(db, "other")

        for ref in (
            {"project_id": project["project_id"]},
            {"milestone_id": milestone["milestone_id"]},
            {"task_id": task["task_id"]},
        ):
            resp = await client.post("/api/time-entries", headers=auth(other), json={
                **ref, "started_at": START, "ended_at": "2026-05-01T10:10:00Z",
            })
            assert resp.status_code == 404, ref

    async def test_milestone_from_other_project_rejected(self, client, db):
        owner, passion_id, project = await setup_owner(client, db)
        other = await create_project_via_api(client, owner, passion_id, title="Other")
        milestone = await create_milestone_via_api(client, owner, other["project_id"])
        resp = await client.post("/api/time-entries", headers=auth(owner), json={
            "project_id": project["project_id"],
            "milestone_id": milestone["milestone_id"],
            "started_at": START,
            "ended_at": "2026-05-01T10:10:00Z",
        })
        assert resp.status_code == 400


class TestListTimeEntries:
    async def test_totals_and_order(self, client, db):
        user_id = await create_user(db)
        for start, end in (
            ("2026-05-01T08:00:00Z", "2026-05-01T08:30:00Z"),
            ("2026-05-02T08:00:00Z", "2026-05-02T09:00:00Z"),
        ):
            await client.post("/api/time-entries", headers=auth(user_id), json={
                "started_at": start, "ended_at": end,
            })

        data = (await client.get("/api/time-entries", headers=auth(user_id))).json()
        assert data["count"] == 2
        assert data["total_time"] == 90
        assert [e["duration"] for e in data["time_entries"]] == [60, 30]

    async def test_scoped_to_caller_and_filtered(self, client, db):
        owner, _, project = await setup_owner(client, db)
        await client.post("/api/time-entries", headers=auth(owner), json={
            "project_id": project["project_id"], "started_at": START,
            "ended_at": "2026-05-01T10:15:00Z",
        })
        await client.post("/api/time-entries", headers=auth(owner), json={
            "started_at": START, "ended_at": "2026-05-01T10:05:00Z",
        })
        other = await create_user(db, "other")

        theirs = (await client.get("/api/time-entries", headers=auth(other))).json()
        assert theirs == {"time_entries": [], "total_time": 0, "count": 0}

        filtered = (await client.get(
            f"/api/time-entries?project_id={project['project_id']}", headers=auth(owner),
        )).json()
        assert filtered["total_time"] == 15


class TestTaskReference:
    async def test_task_from_other_project_rejected(self, client, db):
        owner, passion_id, project = await setup_owner(client, db)
        other = await create_project_via_api(client, owner, passion_id, title="Other")
        task = await create_task_via_api(client, owner, project_id=other["project_id"])
        resp = await client.post("/api/time-entries", headers=auth(owner), json={
            "project_id": project["project_id"],
            "task_id": task["task_id"],
            "started_at": START,
            "ended_at": "2026-05-01T10:10:00Z",
        })
        assert resp.status_code == 400
        assert "Task" in resp.json()["detail"]
