"""Tests for the account endpoints (/api/register, /api/login, ...).

Each test gets an isolated data directory via the FastAPI TestClient; the
session cookie set by one request is carried by the client to the next.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from supportspark.api.app import create_app
from supportspark.config import Settings
from supportspark.storage import FileStorage, open_storage


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        data_dir=tmp_path / "data",
        session_secret="test-secret",
        auth_rate_limit=1000,
        seed_demo_data=False,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def storage(tmp_path: Path) -> FileStorage:
    return open_storage(tmp_path / "data", seed_demo=False)


@pytest.fixture()
def client(tmp_path: Path, storage: FileStorage) -> Generator[TestClient, None, None]:
    app = create_app(storage=storage, app_settings=_settings(tmp_path))
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


def _register(client: TestClient, email: str = "alice@example.com", **extra) -> dict:
    body = {"email": email, "password": "correct horse", **extra}
    resp = client.post("/api/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRegister:
    def test_creates_user_and_logs_in(self, client: TestClient, storage: FileStorage) -> None:
        data = _register(client, firstName="Alice", lastName="Smith")
        assert data["email"] == "alice@example.com"
        assert data["firstName"] == "Alice"
        assert "password" not in data
        assert "passwordVersion" not in data

        stored = storage.get_user(data["id"])
        assert stored.password != "correct horse"
        assert stored.password_version == "bcrypt-10"

        me = client.get("/api/auth/user")
        assert me.status_code == 200
        assert me.json()["id"] == data["id"]

    def test_duplicate_email_rejected(self, client: TestClient) -> None:
        _register(client)
        resp = client.post(
            "/api/register", json={"email": "alice@example.com", "password": "other"}
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Email already registered"

    def test_invalid_email_rejected(self, client: TestClient) -> None:
        resp = client.post("/api/register", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 422


class TestLogin:
    def test_login_success(self, client: TestClient) -> None:
        user = _register(client)
        client.post("/api/logout")

        resp = client.post(
            "/api/login", json={"email": "alice@example.com", "password": "correct horse"}
        )
        assert resp.status_code == 200
        assert resp.json()["id"] == user["id"]
        assert "password" not in resp.json()

    def test_wrong_password(self, client: TestClient) -> None:
        _register(client)
        client.post("/api/logout")
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert client.get("/api/auth/user").status_code == 401

    def test_unknown_email(self, client: TestClient) -> None:
        resp = client.post("/api/login", json={"email": "ghost@example.com", "password": "x"})
        assert resp.status_code == 401

    def test_missing_password_version_requires_upgrade(
        self, client: TestClient, storage: FileStorage
    ) -> None:
        from dataclasses import replace

        from supportspark.auth.passwords import hash_password

        user = storage.create_user("legacy@example.com", hash_password("pw"))
        storage.users.put(replace(user, password_version=None))

        resp = client.post("/api/login", json={"email": "legacy@example.com", "password": "pw"})
        assert resp.status_code == 401
        assert "upgrade required" in resp.json()["detail"]


class TestEmailCase:
    def test_login_with_mixed_case_domain(self, client: TestClient) -> None:
        registered = _register(client, email="Alice@Example.COM")
        assert registered["email"] == "Alice@example.com"
        client.post("/api/logout")

        for email in ("Alice@Example.COM", "Alice@example.com"):
            resp = client.post("/api/login", json={"email": email, "password": "correct horse"})
            assert resp.status_code == 200, resp.text
            assert resp.json()["id"] == registered["id"]

    def test_duplicate_detected_across_domain_case(self, client: TestClient) -> None:
        _register(client, email="alice@example.com")
        resp = client.post(
            "/api/register", json={"email": "alice@EXAMPLE.com", "password": "other"}
        )
        assert resp.status_code == 400

    def test_malformed_login_email(self, client: TestClient) -> None:
        resp = client.post("/api/login", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 422


class TestSession:
    def test_anonymous_user_is_unauthorised(self, client: TestClient) -> None:
        assert client.get("/api/auth/user").status_code == 401

    def test_logout_clears_session(self, client: TestClient) -> None:
        _register(client)
        assert client.post("/api/logout").status_code == 200
        assert client.get("/api/auth/user").status_code == 401


class TestRateLimit:
    def test_login_attempts_limited(self, tmp_path: Path, storage: FileStorage) -> None:
        app = create_app(storage=storage, app_settings=_settings(tmp_path, auth_rate_limit=2))
        with TestClient(app) as c:
            body = {"email": "ghost@example.com", "password": "x"}
            assert c.post("/api/login", json=body).status_code == 401
            assert c.post("/api/login", json=body).status_code == 401
            resp = c.post("/api/login", json=body)
            assert resp.status_code == 429
            assert "Retry-After" in resp.headers

    def test_limits_are_per_app(self, tmp_path: Path, storage: FileStorage) -> None:
        for _ in range(2):
            app = create_app(storage=storage, app_settings=_settings(tmp_path, auth_rate_limit=1))
            with TestClient(app) as c:
                assert c.post("/api/login", json={"email": "a@example.com", "password": "x"}).status_code == 401


class TestLifespan:
    def test_opens_storage_from_settings(self, tmp_path: Path) -> None:
        app = create_app(app_settings=_settings(tmp_path, seed_demo_data=True))
        with TestClient(app) as c:
            assert c.get("/health").json() == {"status": "ok"}
            assert c.app.state.storage.get_user("demo-member-sarah") is not None
        assert (tmp_path / "data" / "users.json").exists()
