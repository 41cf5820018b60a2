"""Token payload and identity claim schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ADMIN_CONSENT_PURPOSE = "admin_consent"


class ConsentState(BaseModel):
    """Payload of the signed admin-consent state token."""

    model_config = ConfigDict(populate_by_name=True)

    jti: str
    iat: int
    exp: int
    purpose: Literal["admin_consent"]
    redirect_uri: str = Field(alias="redirectUri")


class SessionUser(BaseModel):
    """Signed-in user as exposed to route handlers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    image: str = ""
    is_admin: bool = Field(default=False, alias="isAdmin")
    tenant_id: str | None = Field(default=None, alias="tenantId")


class SessionClaims(SessionUser):
    """Bearer session token payload."""

    sub: str
    exp: int


class IdTokenClaims(BaseModel):
    """The subset of Azure AD id_token claims the app relies on."""

    model_config = ConfigDict(extra="ignore")

    tid: str | None = None
    oid: str | None = None
    preferred_username: str | None = None


class AzureAdProfile(BaseModel):
    """Azure AD userinfo profile."""

    model_config = ConfigDict(extra="allow")

    sub: str
    name: str | None = None
    email: str | None = None
    preferred_username: str | None = None
    tid: str | None = None


class GitHubProfile(BaseModel):
    """GitHub user profile."""

    model_config = ConfigDict(extra="allow")

    id: int | str
    login: str | None = None
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None


class OAuthTokens(BaseModel):
    """Token set returned by an OAuth provider."""

    model_config = ConfigDict(extra="ignore")

    access_token: str | None = None
    id_token: str | None = None
