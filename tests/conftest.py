"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; configure the environment first.
os.environ["APP_ENV"] = "dev"
os.environ["NEXTAUTH_SECRET"] = "test-signing-secret"
os.environ["AZURE_AD_CLIENT_ID"] = "0c1d2e3f-4a5b-4c6d-8e7f-9a0b1c2d3e4f"
os.environ["ADMIN_CONSENT_CALLBACK_URL"] = "https://chat.example.com/api/v1/admin/admin-consent-callback"
os.environ["ADMIN_EMAIL_ADDRESS"] = "admin@localhost, Owner@Contoso.com"
os.environ.pop("ALLOWED_TENANT_IDS", None)

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from auth.jwt import create_session_token
from auth.schemas import SessionUser
from auth.secret_provider import get_secret_provider
from main import app

TENANT_GUID = "72f988bf-86f1-41af-91ab-2d7cd011db47"


@pytest.fixture(autouse=True)
def reset_signing_secret():
    """Drop the cached signing secret so each test resolves it afresh."""
    get_secret_provider.cache_clear()
    yield
    get_secret_provider.cache_clear()


@pytest.fixture
def mock_db():
    """AsyncSession stand-in for route tests."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def override_get_db(mock_db):
    """Override get_db dependency for testing."""
    from api.deps import get_db

    async def _get_db():
        yield mock_db

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_get_db):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def admin_user() -> SessionUser:
    return SessionUser(
        id="admin-id",
        name="admin",
        email="admin@localhost",
        is_admin=True,
    )


@pytest.fixture
def regular_user() -> SessionUser:
    return SessionUser(
        id="user-id",
        name="user",
        email="user@localhost",
        is_admin=False,
        tenant_id=TENANT_GUID,
    )


@pytest.fixture
def admin_token(admin_user) -> str:
    return create_session_token(admin_user)


@pytest.fixture
def user_token(regular_user) -> str:
    return create_session_token(regular_user)


@pytest.fixture
def admin_headers(admin_token) -> dict:
    """Bearer authorization header for the admin session."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token) -> dict:
    return {"Authorization": f"Bearer {user_token}"}
