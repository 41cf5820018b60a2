"""Integration tests for provider discovery, dev login and session tokens."""

import config
from auth.jwt import create_session_token
from auth.providers import hash_value


def test_list_providers_in_dev(client, monkeypatch):
    monkeypatch.setattr(config.settings, "AUTH_GITHUB_ID", "gh-id")
    monkeypatch.setattr(config.settings, "AUTH_GITHUB_SECRET", "gh-secret")
    monkeypatch.setattr(config.settings, "AZURE_AD_TENANT_ID", None)

    response = client.get("/api/v1/auth/providers")

    assert response.status_code == 200
    assert response.json() == [
        {"id": "github", "name": "GitHub", "type": "oauth"},
        {"id": "localdev", "name": "localdev", "type": "credentials"},
    ]


def test_list_providers_hides_localdev_outside_dev(client, monkeypatch):
    monkeypatch.setattr(config.settings, "APP_ENV", "production")

    response = client.get("/api/v1/auth/providers")

    assert "localdev" not in [p["id"] for p in response.json()]


def test_dev_login_returns_session(client):
    """Test: Dev login issues a bearer token usable on /me."""
    response = client.post("/api/v1/auth/dev-login", json={"username": "alice", "password": "x"})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "alice@localhost"
    assert data["user"]["id"] == hash_value("alice@localhost")
    assert data["user"]["isAdmin"] is False

    me = client.get("/api/v1/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alice@localhost"


def test_dev_login_admin(client):
    response = client.post("/api/v1/auth/dev-login", json={"username": "admin"})

    assert response.json()["user"]["isAdmin"] is True


def test_dev_login_disabled_outside_dev(client, monkeypatch):
    monkeypatch.setattr(config.settings, "APP_ENV", "production")

    response = client.post("/api/v1/auth/dev-login", json={"username": "alice"})

    assert response.status_code == 403


def test_me_returns_session_user(client, user_headers):
    response = client.get("/api/v1/me", headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "user-id"
    assert data["isAdmin"] is False
    assert data["tenantId"] == "72f988bf-86f1-41af-91ab-2d7cd011db47"


def test_me_rejects_garbage_token(client):
    response = client.get("/api/v1/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["detail"].startswith("Invalid token")


def test_me_rejects_expired_token(client, regular_user):
    token = create_session_token(regular_user, expires_in_hours=-1)

    response = client.get("/api/v1/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_requires_token(client):
    response = client.get("/api/v1/me")

    assert response.status_code in (401, 403)
