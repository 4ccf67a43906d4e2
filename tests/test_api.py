"""
HTTP-level tests through FastAPI's TestClient.
"""
from __future__ import annotations

from fastapi.testclient import TestClient

from taskapi.app import create_app

from .factories import make_settings


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _signup(client, email="a@x.com", password="p1", name="A") -> str:
    resp = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.text
    return resp.json()["token"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["timestamp"]


def test_signup_and_login(client):
    resp = client.post("/api/auth/signup", json={"email": "a@x.com", "password": "p1", "name": "A"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "a@x.com"
    assert "password" not in body["user"] and "password_hash" not in body["user"]

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "p1"})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == body["user"]["id"]
    assert client.get("/api/profile", headers=_bearer(resp.json()["token"])).status_code == 200


def test_signup_errors(client):
    _signup(client)
    resp = client.post("/api/auth/signup", json={"email": "a@x.com", "password": "zz", "name": "Z"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "Email already exists"}

    resp = client.post("/api/auth/signup", json={"email": "b@x.com", "password": "p1"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email, password, and name are required"}

    resp = client.post("/api/auth/signup", json={"email": 5, "password": "p1", "name": "B"})
    assert resp.status_code == 400


def test_login_errors(client):
    _signup(client)
    assert client.post("/api/auth/login", json={"email": "a@x.com"}).status_code == 400
    wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "zz@x.com", "password": "p1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}


def test_protected_routes_require_valid_token(client):
    resp = client.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Access token required"}

    resp = client.get("/api/tasks", headers={"Authorization": "Bearer"})
    assert resp.status_code == 401

    resp = client.get("/api/profile", headers=_bearer("forged.token"))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Invalid or expired token"}


def test_token_from_other_deployment_is_forbidden(client, tmp_path):
    other = create_app(make_settings(f"sqlite+aiosqlite:///{tmp_path / 'other.db'}", jwt_secret="other"))
    with TestClient(other) as other_client:
        foreign = _signup(other_client)
    assert client.get("/api/tasks", headers=_bearer(foreign)).status_code == 403


def test_profile_update(client):
    token = _signup(client)
    _signup(client, email="b@x.com")

    resp = client.put("/api/profile", headers=_bearer(token), json={"name": "Alice"})
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Alice"

    assert client.put("/api/profile", headers=_bearer(token), json={}).status_code == 400
    assert client.put("/api/profile", headers=_bearer(token), json={"email": "b@x.com"}).status_code == 409
    assert client.get("/api/profile", headers=_bearer(token)).json()["user"]["email"] == "a@x.com"


def test_task_crud(client):
    headers = _bearer(_signup(client))

    resp = client.post("/api/tasks", headers=headers, json={"title": "write docs", "description": "api"})
    assert resp.status_code == 201
    task = resp.json()["task"]

    assert client.post("/api/tasks", headers=headers, json={"description": "no title"}).status_code == 400

    resp = client.put(f"/api/tasks/{task['id']}", headers=headers, json={"status": "done"})
    assert resp.status_code == 200
    assert resp.json()["task"]["status"] == "done"
    assert resp.json()["task"]["description"] == "api"

    assert client.put(f"/api/tasks/{task['id']}", headers=headers, json={}).status_code == 400

    listed = client.get("/api/tasks", headers=headers).json()["tasks"]
    assert [t["id"] for t in listed] == [task["id"]]

    resp = client.delete(f"/api/tasks/{task['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Task deleted successfully"}
    assert client.get(f"/api/tasks/{task['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=headers).status_code == 404


def test_unusable_task_ids_are_not_found(client):
    headers = _bearer(_signup(client))
    client.post("/api/tasks", headers=headers, json={"title": "keep me"})

    for task_id in ("99999999999999999999", "abc", "0", "1.5"):
        path = f"/api/tasks/{task_id}"
        for resp in (
            client.get(path, headers=headers),
            client.put(path, headers=headers, json={"title": "x"}),
            client.delete(path, headers=headers),
        ):
            assert resp.status_code == 404, (task_id, resp.text)
            assert resp.json() == {"error": "Task not found"}

    assert [t["title"] for t in client.get("/api/tasks", headers=headers).json()["tasks"]] == ["keep me"]


def test_cross_owner_scenario_on_default_in_memory_database():
    app = create_app(make_settings("sqlite+aiosqlite:///:memory:"))
    with TestClient(app) as client:
        t1 = _signup(client, "a@x.com", "p1", "A")
        resp = client.post("/api/tasks", headers=_bearer(t1), json={"title": "buy milk"})
        assert resp.status_code == 201
        task = resp.json()["task"]
        assert task["id"] == 1
        assert task["status"] == "pending"

        t2 = _signup(client, "b@x.com", "p2", "B")
        resp = client.get("/api/tasks/1", headers=_bearer(t2))
        assert resp.status_code == 404
        assert resp.json() == {"error": "Task not found"}
        assert client.put("/api/tasks/1", headers=_bearer(t2), json={"title": "x"}).status_code == 404
        assert client.delete("/api/tasks/1", headers=_bearer(t2)).status_code == 404
        assert client.get("/api/tasks", headers=_bearer(t2)).json() == {"tasks": []}

        assert client.get("/api/tasks/1", headers=_bearer(t1)).json()["task"]["title"] == "buy milk"


def test_security_headers(client):
    resp = client.get("/api/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert "X-Process-Time" in resp.headers
