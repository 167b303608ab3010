from datetime import datetime

from fastapi.testclient import TestClient

from life_notes.main import app

client = TestClient(app)


def create_note(title="Groceries", **fields):
    payload = {"title": title, **fields}
    res = client.post("/api/notes", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def assert_note_shape(note: dict):
    for key in ["id", "title", "content", "tags", "isPinned", "createdAt", "updatedAt"]:
        assert key in note
    assert isinstance(note["id"], str)
    assert isinstance(note["tags"], list)
    assert isinstance(note["isPinned"], bool)
    parse_ts(note["createdAt"])
    parse_ts(note["updatedAt"])


class TestNotesCRUD:
    def test_create_note_defaults(self):
        res = client.post("/api/notes", json={"title": "Plain"})
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        note = body["data"]
        assert_note_shape(note)
        assert note["title"] == "Plain"
        assert note["content"] == ""
        assert note["tags"] == []
        assert note["isPinned"] is False
        assert note["createdAt"] == note["updatedAt"]

    def test_create_note_with_all_fields(self):
        note = create_note("Trip", content="Lisbon", tags=["travel", "2025"], isPinned=True)
        assert note["content"] == "Lisbon"
        assert note["tags"] == ["travel", "2025"]
        assert note["isPinned"] is True

    def test_create_note_ids_are_unique(self):
        first = create_note("One")
        second = create_note("Two")
        assert first["id"] != second["id"]

    def test_create_without_title_is_rejected(self):
        for payload in ({}, {"content": "body only", "isPinned": True}, {"title": ""}, {"title": "   "}):
            res = client.post("/api/notes", json=payload)
            assert res.status_code == 400
            body = res.json()
            assert body["success"] is False
            assert body["error"]["message"] == "Title is required"

    def test_title_is_stored_as_given(self):
        note = create_note("  Padded title  ")
        assert note["title"] == "  Padded title  "
        res = client.put(f"/api/notes/{note['id']}", json={"title": " Renamed "})
        assert res.json()["data"]["title"] == " Renamed "

    def test_get_note_and_not_found(self):
        note = create_note("Read me")
        res = client.get(f"/api/notes/{note['id']}")
        assert res.status_code == 200
        assert res.json()["data"] == note

        res_404 = client.get("/api/notes/does-not-exist")
        assert res_404.status_code == 404
        assert res_404.json() == {"success": False, "error": {"message": "Note not found"}}

    def test_update_merges_only_given_fields(self):
        note = create_note("Draft", content="keep me", tags=["a"])
        res = client.put(f"/api/notes/{note['id']}", json={"title": "Final", "isPinned": True})
        assert res.status_code == 200
        updated = res.json()["data"]
        assert updated["title"] == "Final"
        assert updated["isPinned"] is True
        assert updated["content"] == "keep me"
        assert updated["tags"] == ["a"]
        assert updated["createdAt"] == note["createdAt"]
        assert parse_ts(updated["updatedAt"]) >= parse_ts(note["updatedAt"])

    def test_update_with_empty_body_only_touches_updated_at(self):
        note = create_note("Stable", content="c", tags=["x"], isPinned=True)
        for kwargs in ({"json": {}}, {}):
            res = client.put(f"/api/notes/{note['id']}", **kwargs)
            assert res.status_code == 200
            updated = res.json()["data"]
            for key in ["id", "title", "content", "tags", "isPinned", "createdAt"]:
                assert updated[key] == note[key]
            assert parse_ts(updated["updatedAt"]) >= parse_ts(note["updatedAt"])

    def test_update_can_clear_tags(self):
        note = create_note("Tagged", tags=["a", "b"])
        res = client.put(f"/api/notes/{note['id']}", json={"tags": []})
        assert res.json()["data"]["tags"] == []

    def test_update_rejects_empty_title(self):
        note = create_note("Named")
        res = client.put(f"/api/notes/{note['id']}", json={"title": ""})
        assert res.status_code == 400
        assert res.json()["error"]["message"] == "Title is required"

    def test_update_not_found(self):
        res = client.put("/api/notes/missing", json={"title": "x"})
        assert res.status_code == 404
        assert res.json()["error"]["message"] == "Note not found"

    def test_delete_note(self):
        note = create_note("Bye")
        res = client.delete(f"/api/notes/{note['id']}")
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["data"]["id"] == note["id"]
        assert body["message"] == "Note deleted successfully"

        assert client.get(f"/api/notes/{note['id']}").status_code == 404
        assert client.delete(f"/api/notes/{note['id']}").status_code == 404

    def test_delete_missing_leaves_collection_unchanged(self):
        create_note("A")
        create_note("B")
        res = client.delete("/api/notes/nope")
        assert res.status_code == 404
        assert client.get("/api/notes").json()["meta"]["total"] == 2


class TestNotesListing:
    def test_list_empty(self):
        res = client.get("/api/notes")
        assert res.status_code == 200
        assert res.json() == {"success": True, "data": [], "meta": {"total": 0}}

    def test_filter_by_tag(self):
        create_note("Work", tags=["work"])
        create_note("Home", tags=["home", "chores"])
        res = client.get("/api/notes?tag=home")
        data = res.json()["data"]
        assert [n["title"] for n in data] == ["Home"]
        assert res.json()["meta"]["total"] == 1

    def test_tag_filter_is_exact(self):
        create_note("Work", tags=["workshop"])
        assert client.get("/api/notes?tag=work").json()["data"] == []

    def test_filter_by_pinned(self):
        create_note("Pinned", isPinned=True)
        create_note("Loose")
        pinned = client.get("/api/notes?pinned=true").json()["data"]
        assert [n["title"] for n in pinned] == ["Pinned"]
        unpinned = client.get("/api/notes?pinned=false").json()["data"]
        assert [n["title"] for n in unpinned] == ["Loose"]

    def test_invalid_pinned_value_is_rejected(self):
        res = client.get("/api/notes?pinned=maybe")
        assert res.status_code == 400
        body = res.json()
        assert body["success"] is False
        assert "pinned" in body["error"]["message"]

    def test_blank_pinned_means_no_filter(self):
        create_note("Pinned", isPinned=True)
        create_note("Loose")
        res = client.get("/api/notes?pinned=")
        assert res.status_code == 200
        assert {n["title"] for n in res.json()["data"]} == {"Pinned", "Loose"}

    def test_search_title_or_content_case_insensitive(self):
        create_note("Shopping LIST")
        create_note("Recipes", content="Buy a list of spices")
        create_note("Unrelated", content="nothing here")
        res = client.get("/api/notes?search=list")
        titles = {n["title"] for n in res.json()["data"]}
        assert titles == {"Shopping LIST", "Recipes"}

    def test_filters_are_combined(self):
        create_note("Pinned work", tags=["work"], isPinned=True)
        create_note("Loose work", tags=["work"])
        create_note("Pinned home", tags=["home"], isPinned=True)
        data = client.get("/api/notes?tag=work&pinned=true").json()["data"]
        assert [n["title"] for n in data] == ["Pinned work"]

    def test_sort_pinned_first_then_most_recent(self):
        old = create_note("old")
        create_note("pinned old", isPinned=True)
        create_note("new")
        create_note("pinned new", isPinned=True)
        # Touch "old" so it becomes the most recently updated unpinned note.
        client.put(f"/api/notes/{old['id']}", json={})

        titles = [n["title"] for n in client.get("/api/notes").json()["data"]]
        assert titles == ["pinned new", "pinned old", "old", "new"]
