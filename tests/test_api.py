import pytest
from fastapi.testclient import TestClient

from app.infrastructure.database import Base, SessionLocal, engine
from app.interfaces.deps import get_password_hasher, get_seed_service
from app.main import app


@pytest.fixture
def client(hasher):
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    with TestClient(app) as test_client:
        db = SessionLocal()
        try:
            get_seed_service(db, hasher).run()
        finally:
            db.close()
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


def login(client, username="admin_user", password="password123"):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(tokens):
    return {"Authorization": f"Bearer {tokens['access_token']}"}


def test_root_and_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    body = client.get("/").json()
    assert body["status"] == "running"
    assert body["docs"] == "/docs"


def test_responses_carry_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "3f1c2a9e4b7d4e8f9a0b1c2d3e4f5a6b"})
    assert response.headers["X-Request-ID"] == "3f1c2a9e4b7d4e8f9a0b1c2d3e4f5a6b"


def test_login_and_me(client):
    tokens = login(client)
    assert tokens["token_type"] == "bearer"
    assert tokens["user"]["roles"][0]["name"] == "ADMIN"

    me = client.get("/api/auth/me", headers=bearer(tokens))
    assert me.status_code == 200
    assert me.json()["employee_id"] == "EMP0000"


def test_bad_credentials_use_error_envelope(client):
    response = client.post("/api/auth/login", json={"username": "admin_user", "password": "nope-nope"})
    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "UnauthorizedException"
    assert error["message"] == "Invalid username or password"
    assert error["path"] == "/api/auth/login"


def test_locked_account_reports_code(client):
    for _ in range(5):
        client.post("/api/auth/login", json={"username": "host_user", "password": "wrong-pass"})
    response = client.post("/api/auth/login", json={"username": "host_user", "password": "password123"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "ACCOUNT_LOCKED"


def test_validation_errors_use_error_envelope(client):
    response = client.post("/api/auth/login", json={"username": "admin_user"})
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "ValidationError"
    assert error["details"]["errors"]


def test_missing_token_is_rejected(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Missing bearer token"


def test_refresh_and_logout(client):
    tokens = login(client)
    refreshed = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    new_tokens = refreshed.json()

    stale = client.get("/api/auth/me", headers=bearer(tokens))
    assert stale.status_code == 401
    assert stale.json()["error"]["code"] == "INVALID_TOKEN"

    assert client.post("/api/auth/logout", headers=bearer(new_tokens)).status_code == 204
    assert client.get("/api/auth/me", headers=bearer(new_tokens)).status_code == 401


def test_sessions_are_listed_with_previews(client):
    tokens = login(client)
    login(client)
    sessions = client.get("/api/auth/sessions", headers=bearer(tokens)).json()
    assert len(sessions) == 2
    assert all(s["state"] == "ACTIVE" for s in sessions)
    assert all("..." in s["access_token_preview"] for s in sessions)
    assert tokens["access_token"] not in str(sessions)


def test_logout_all_requires_permission(client):
    host = login(client, "host_user")
    admin = login(client)

    denied = client.post(f"/api/auth/users/{host['user']['id']}/logout-all", headers=bearer(host))
    assert denied.status_code == 403

    allowed = client.post(f"/api/auth/users/{host['user']['id']}/logout-all", headers=bearer(admin))
    assert allowed.json() == {"user_id": host["user"]["id"], "revoked_sessions": 1}
    assert client.get("/api/auth/me", headers=bearer(host)).status_code == 401
