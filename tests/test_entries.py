"""Tests for entries: drafts, URL lists, filters, and milestone consistency."""

from tests.fixtures import (
    auth,
    create_entry_via_api,
    create_milestone_via_api,
    create_project_via_api,
    create_user,
    setup_owner,
)


class TestCreateEntry:
    async def test_defaults_publish_now(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(client, owner, project["project_id"], "First cut")
        assert entry["type"] == "progress"
        assert entry["privacy"] == "public"
        assert entry["published_at"] is not None
        assert entry["media_urls"] == []
        assert entry["tags"] == []

    async def test_explicit_null_is_draft(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(
            client, owner, project["project_id"], published_at=None,
        )
        assert entry["published_at"] is None

    async def test_explicit_time_kept(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(
            client, owner, project["project_id"], published_at="2026-01-02T03:04:05Z",
        )
        assert entry["published_at"] == "2026-01-02T03:04:05+00:00"

    async def test_lists_stored(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(
            client, owner, project["project_id"],
            media_urls=["https://img.example.com/shelf.jpg"],
            links=["https://example.com/plans"],
            tags=["wood", "shelf"],
        )
        fetched = (await client.get(f"/api/entries/{entry['entry_id']}", headers=auth(owner))).json()
        assert fetched["media_urls"] == ["https://img.example.com/shelf.jpg"]
        assert fetched["links"] == ["https://example.com/plans"]
        assert fetched["tags"] == ["wood", "shelf"]

    async def test_invalid_url_rejected(self, client, db):
        owner, _, project = await setup_owner(client, db)
        resp = await client.post("/api/entries", headers=auth(owner), json={
            "title": "Bad", "project_id": project["project_id"], "links": ["not a url"],
        })
        assert resp.status_code == 400

    async def test_project_required(self, client, db):
        user_id = await create_user(db)
        resp = await client.post("/api/entries", headers=auth(user_id), json={"title": "Orphan"})
        assert resp.status_code == 400

    async def test_milestone_from_other_project_rejected(self, client, db):
        owner, passion_id, project = await setup_owner(client, db)
        other = await create_project_via_api(client, owner, passion_id, title="Other")
        milestone = await create_milestone_via_api(client, owner, other["project_id"])
        resp = await client.post("/api/entries", headers=auth(owner), json={
            "title": "Mixed",
            "project_id": project["project_id"],
            "milestone_id": milestone["milestone_id"],
        })
        assert resp.status_code == 400


class TestUpdateEntry:
    async def test_unpublish_and_retag(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(client, owner, project["project_id"], tags=["old"])
        resp = await client.put(
            f"/api/entries/{entry['entry_id']}",
            json={"published_at": None, "tags": ["new"]},
            headers=auth(owner),
        )
        data = resp.json()
        assert data["published_at"] is None
        assert data["tags"] == ["new"]
        assert data["title"] == entry["title"]

    async def test_foreign_entry_not_found(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(client, owner, project["project_id"])
        other = await create_user(db, "other")
        url = f"/api/entries/{entry['entry_id']}"
        assert (await client.get(url, headers=auth(other))).status_code == 404
        assert (await client.put(url, json={"title": "X"}, headers=auth(other))).status_code == 404
        assert (await client.delete(url, headers=auth(other))).status_code == 404


class TestListEntries:
    async def test_published_filter_and_order(self, client, db):
        owner, _, project = await setup_owner(client, db)
        pid = project["project_id"]
        older = await create_entry_via_api(
            client, owner, pid, "Older", published_at="2026-01-01T00:00:00Z",
        )
        newer = await create_entry_via_api(
            client, owner, pid, "Newer", published_at="2026-02-01T00:00:00Z",
        )
        draft = await create_entry_via_api(client, owner, pid, "Draft", published_at=None)

        published = (await client.get("/api/entries?published=true", headers=auth(owner))).json()
        assert [e["entry_id"] for e in published] == [newer["entry_id"], older["entry_id"]]

        drafts = (await client.get("/api/entries?published=false", headers=auth(owner))).json()
        assert [e["entry_id"] for e in drafts] == [draft["entry_id"]]

    async def test_type_filter_and_default_page(self, client, db):
        owner, _, project = await setup_owner(client, db)
        pid = project["project_id"]
        for i in range(22):
            await create_entry_via_api(client, owner, pid, f"E{i}")
        await create_entry_via_api(client, owner, pid, "Note", type="note")

        page = (await client.get("/api/entries", headers=auth(owner))).json()
        assert len(page) == 20

        notes = (await client.get("/api/entries?type=note", headers=auth(owner))).json()
        assert [e["title"] for e in notes] == ["Note"]

    async def test_delete(self, client, db):
        owner, _, project = await setup_owner(client, db)
        entry = await create_entry_via_api(client, owner, project["project_id"])
        url = f"/api/entries/{entry['entry_id']}"
        assert (await client.delete(url, headers=auth(owner))).json() == {"success": True}
        assert (await client.get(url, headers=auth(owner))).status_code == 404
