"""Authentication endpoints: provider discovery and local dev sign-in."""

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

import config
from auth.jwt import create_session_token
from auth.providers import authorize_dev_credentials, configure_identity_providers
from auth.schemas import SessionUser

router = APIRouter()


class ProviderInfo(BaseModel):
    """Schema for an enabled sign-in provider."""

    id: str
    name: str
    type: str


class DevLoginRequest(BaseModel):
    """Request schema for dev login."""

    username: str | None = None
    password: str | None = None  # Accepted for form parity, never checked


class LoginResponse(BaseModel):
    """Response schema for a successful sign-in."""

    access_token: str
    token_type: str = "bearer"
    user: SessionUser


@router.get("/auth/providers", response_model=list[ProviderInfo])
async def list_providers():
    """
    List the sign-in providers enabled by the environment.

    Returns:
        list[ProviderInfo]: github, azure-ad and/or localdev
    """
    return [
        ProviderInfo(id=p.id, name=p.name, type=p.type)
        for p in configure_identity_providers()
    ]


@router.post("/auth/dev-login", response_model=LoginResponse)
async def dev_login(request: DevLoginRequest):
    """
    DEV-ONLY endpoint to sign in with the localdev credentials provider.

    Any username is accepted; the email is <username>@localhost and the user
    is an admin when that email is in ADMIN_EMAIL_ADDRESS.

    Returns:
        LoginResponse: Bearer session token and the mapped user
    """
    if config.settings.APP_ENV != "dev":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Dev login is only available in the dev environment",
        )

    user = authorize_dev_credentials(request.username)
    access_token = await run_in_threadpool(create_session_token, user)

    return LoginResponse(access_token=access_token, user=user)
