"""Identity provider registry and profile mapping.

Providers are enabled by the presence of their environment variables. The
profile mappers turn provider profiles into a SessionUser, attaching the admin
flag (ADMIN_EMAIL_ADDRESS) and, for Azure AD, the tenant restriction
(ALLOWED_TENANT_IDS).
"""

import base64
import hashlib
import logging
from dataclasses import dataclass, field

import httpx
from jose import jwt, JWTError
from pydantic import ValidationError as SchemaError

import config
from auth.errors import AuthenticationError
from auth.schemas import (
    AzureAdProfile,
    GitHubProfile,
    IdTokenClaims,
    OAuthTokens,
    SessionUser,
)

logger = logging.getLogger(__name__)

GRAPH_PHOTO_URL = "https://graph.microsoft.com/v1.0/me/photos/48x48/$value"
AZURE_AD_SCOPE = "openid profile User.Read email"


@dataclass(frozen=True)
class ProviderConfig:
    """An enabled sign-in provider."""

    id: str
    name: str
    type: str  # "oauth" or "credentials"
    client_id: str | None = None
    tenant_id: str | None = None
    scope: str | None = None
    params: dict = field(default_factory=dict)


def configure_identity_providers(settings: config.Settings | None = None) -> list[ProviderConfig]:
    """
    Build the list of providers enabled by the environment.

    Args:
        settings: Settings to read (default: config.settings)

    Returns:
        Enabled providers, in sign-in page order
    """
    settings = settings or config.settings
    providers: list[ProviderConfig] = []

    if settings.AUTH_GITHUB_ID and settings.AUTH_GITHUB_SECRET:
        providers.append(
            ProviderConfig(
                id="github",
                name="GitHub",
                type="oauth",
                client_id=settings.AUTH_GITHUB_ID,
            )
        )

    if (
        settings.AZURE_AD_CLIENT_ID
        and settings.AZURE_AD_CLIENT_SECRET
        and settings.AZURE_AD_TENANT_ID
    ):
        providers.append(
            ProviderConfig(
                id="azure-ad",
                name="Azure Active Directory",
                type="oauth",
                client_id=settings.AZURE_AD_CLIENT_ID,
                tenant_id=settings.AZURE_AD_TENANT_ID,
                scope=AZURE_AD_SCOPE,
            )
        )

    if settings.APP_ENV == "dev":
        providers.append(
            ProviderConfig(
                id="localdev",
                name="localdev",
                type="credentials",
                params={"username": "dev"},
            )
        )

    return providers


def hash_value(value: str) -> str:
    """SHA-256 hex digest, used as a stable user identifier."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def is_admin_email(*candidates: str | None, settings: config.Settings | None = None) -> bool:
    admin_emails = (settings or config.settings).admin_emails
    return any(c and c.lower() in admin_emails for c in candidates)


async def fetch_profile_picture(
    url: str,
    access_token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> str | None:
    """
    Download a profile picture as a data URI.

    Returns:
        data:image/jpeg;base64,... or None when the picture is unavailable
    """
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=10.0)
    try:
        response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error("Failed to fetch profile picture %s: %s", url, e)
        return None
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        logger.error(
            "Failed to fetch profile picture %s: %s", url, response.reason_phrase
        )
        return None

    encoded = base64.b64encode(response.content).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def resolve_tenant_id(profile: AzureAdProfile, tokens: OAuthTokens) -> str | None:
    """Tenant id from the id_token's tid claim, falling back to the profile."""
    if tokens.id_token:
        try:
            claims = IdTokenClaims.model_validate(jwt.get_unverified_claims(tokens.id_token))
            if claims.tid:
                return claims.tid.lower()
        except (JWTError, SchemaError) as e:
            logger.warning("Failed to decode ID token: %s", e)

    if profile.tid:
        return profile.tid.lower()
    return None


async def map_azure_ad_profile(
    profile: dict,
    tokens: dict,
    client: httpx.AsyncClient | None = None,
) -> SessionUser:
    """
    Map an Azure AD profile to a session user.

    Raises:
        AuthenticationError: If the user's tenant is not in ALLOWED_TENANT_IDS
    """
    try:
        parsed = AzureAdProfile.model_validate(profile)
        token_set = OAuthTokens.model_validate(tokens)
    except SchemaError as e:
        raise AuthenticationError(f"Unexpected Azure AD profile: {e}") from e

    tenant_id = resolve_tenant_id(parsed, token_set)
    allowed = config.settings.allowed_tenant_ids
    if allowed and tenant_id and tenant_id not in allowed:
        logger.warning("Login blocked: tenant not allowed: %s", tenant_id)
        raise AuthenticationError("Unauthorized tenant")

    email = parsed.email or parsed.preferred_username or ""
    image = await fetch_profile_picture(GRAPH_PHOTO_URL, token_set.access_token, client)

    return SessionUser(
        id=parsed.sub,
        name=parsed.name or email,
        email=email,
        image=image or "",
        is_admin=is_admin_email(email, parsed.preferred_username),
        tenant_id=tenant_id,
    )


async def map_github_profile(
    profile: dict,
    client: httpx.AsyncClient | None = None,
) -> SessionUser:
    """Map a GitHub profile to a session user."""
    try:
        parsed = GitHubProfile.model_validate(profile)
    except SchemaError as e:
        raise AuthenticationError(f"Unexpected GitHub profile: {e}") from e

    image = None
    if parsed.avatar_url:
        image = await fetch_profile_picture(parsed.avatar_url, None, client)

    email = parsed.email or ""
    return SessionUser(
        id=str(parsed.id),
        name=parsed.name or parsed.login or email,
        email=email,
        image=image or "",
        is_admin=is_admin_email(email),
    )


def authorize_dev_credentials(username: str | None) -> SessionUser:
    """Local development sign-in: any username, no password check."""
    username = username or "dev"
    email = f"{username}@localhost"
    user = SessionUser(
        id=hash_value(email),
        name=username,
        email=email,
        image="",
        is_admin=is_admin_email(email),
    )
    logger.info("Dev user logged in: %s (admin=%s)", email, user.is_admin)
    return user
