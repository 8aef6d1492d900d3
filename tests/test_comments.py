"""
Comments API over the in-memory comment store.
"""
import pytest


def test_create_get_list_delete(client, comment_store):
    resp = client.post("/comments", json={"author": "  ana ", "content": "first"})
    assert resp.status_code == 201
    assert resp.get_json() == {"ok": True, "id": 1}
    client.post("/comments", json={"author": "bo", "content": "second"})

    item = client.get("/comments/1").get_json()["item"]
    assert item == {"id": 1, "author": "ana", "content": "first", "created_at": "2025-01-01T00:00:00Z"}

    items = client.get("/comments").get_json()["items"]
    assert [i["id"] for i in items] == [2, 1]
    assert [i["id"] for i in client.get("/comments?limit=1&offset=1").get_json()["items"]] == [1]

    assert client.delete("/comments/1").get_json() == {"ok": True}
    assert client.get("/comments/1").status_code == 404


@pytest.mark.parametrize(
    "body, error",
    [
        ({"content": "x"}, "author_required"),
        ({"author": "  ", "content": "x"}, "author_required"),
        ({"author": "a"}, "content_required"),
        ({"author": "a" * 81, "content": "x"}, "author_too_long"),
        ({"author": "a", "content": "x" * 2001}, "content_too_long"),
    ],
)
def test_create_validation(client, comment_store, body, error):
    resp = client.post("/comments", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"ok": False, "error": error}
    assert comment_store.rows == {}


def test_create_rejects_invalid_json(client):
    resp = client.post("/comments", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_json"


@pytest.mark.parametrize("body", [[], "x", 5])
def test_create_with_non_object_body_reports_missing_author(client, comment_store, body):
    resp = client.post("/comments", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"ok": False, "error": "author_required"}
    assert comment_store.rows == {}


def test_missing_comment(client):
    assert client.get("/comments/99").get_json() == {"ok": False, "error": "not_found"}
    assert client.delete("/comments/99").status_code == 404


def test_non_numeric_id_is_404(client):
    assert client.get("/comments/abc").status_code == 404
