"""Admin-consent handshake: signed state issuance and callback verification.

Issuance builds an Azure AD ``/adminconsent`` URL whose ``state`` parameter is
a short-lived JWT tagged with ``purpose=admin_consent``. On callback the state
is verified and the query parameters are classified into a terminal outcome;
the HTTP layer turns that outcome into a redirect.

The ``jti`` claim is issued but not checked for reuse, so a captured state
can be replayed until it expires.
"""

import logging
import re
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, UTC
from urllib.parse import quote, urlencode

from jose import JWTError
from pydantic import ValidationError as SchemaError

import config
from auth.errors import ConfigurationError, ValidationError
from auth.jwt import decode_token, encode_token, parse_expires_in
from auth.schemas import ADMIN_CONSENT_PURPOSE, ConsentState
from auth.secret_provider import get_signing_secret

logger = logging.getLogger(__name__)

TENANT_CLASSES = ("organizations", "common")
_GUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_CONSENTED_VALUES = ("true", "yes")


def validate_tenant_selector(tenant_selector: str | None) -> str:
    """
    Check a tenant selector: 'organizations', 'common' or a tenant GUID.

    Raises:
        ValidationError: If the selector is missing or malformed
    """
    if not tenant_selector:
        raise ValidationError("tenantId is required (or use 'organizations')")
    if tenant_selector in TENANT_CLASSES or _GUID.fullmatch(tenant_selector):
        return tenant_selector
    raise ValidationError("tenantId must be 'organizations', 'common' or a tenant GUID")


def _quote(value: str) -> str:
    return quote(value, safe="")


def build_admin_consent_url(
    tenant_selector: str,
    client_id: str,
    redirect_uri: str,
    expires_in: str | int = "24h",
    *,
    secret: str | None = None,
) -> str:
    """
    Sign a consent state and return the admin-consent authorization URL.

    Args:
        tenant_selector: 'organizations', 'common' or a tenant GUID
        client_id: Application (client) ID of the multi-tenant registration
        redirect_uri: Registered callback URI
        expires_in: State token lifetime (e.g. "24h", "30m", 3600)
        secret: Signing secret (default: the process-wide signing secret)

    Returns:
        https://<authority>/<tenant>/adminconsent?client_id=..&state=..&redirect_uri=..

    Raises:
        ValidationError: Bad tenant selector or lifetime
        ConfigurationError: Missing client id, redirect URI or secret
    """
    validate_tenant_selector(tenant_selector)
    if not client_id:
        raise ConfigurationError("AZURE_AD_CLIENT_ID must be set in environment")
    if not redirect_uri:
        raise ConfigurationError("ADMIN_CONSENT_CALLBACK_URL must be set in environment")
    lifetime = parse_expires_in(expires_in)

    signing_secret = secret if secret is not None else get_signing_secret()

    issued_at = int(datetime.now(UTC).timestamp())
    state = ConsentState(
        jti=secrets.token_hex(16),
        iat=issued_at,
        exp=issued_at + int(lifetime.total_seconds()),
        purpose=ADMIN_CONSENT_PURPOSE,
        redirect_uri=redirect_uri,
    )
    state_jwt = encode_token(state.model_dump(by_alias=True), signing_secret)

    query = urlencode(
        {"client_id": client_id, "state": state_jwt, "redirect_uri": redirect_uri},
        quote_via=quote,
        safe="",
    )
    authority = config.settings.AZURE_AD_AUTHORITY_HOST
    logger.info(
        "Issued admin consent state jti=%s tenant=%s", state.jti, tenant_selector
    )
    return f"https://{authority}/{_quote(tenant_selector)}/adminconsent?{query}"


def generate_admin_consent_url(tenant_selector: str, expires_in: str | int | None = None) -> str:
    """Build a consent URL from the configured client id and callback URL."""
    return build_admin_consent_url(
        tenant_selector,
        client_id=config.settings.AZURE_AD_CLIENT_ID,
        redirect_uri=config.settings.ADMIN_CONSENT_CALLBACK_URL,
        expires_in=expires_in or config.settings.ADMIN_CONSENT_DEFAULT_EXPIRES,
    )


@dataclass(frozen=True)
class ConsentSuccess:
    """Tenant administrator granted consent."""

    tenant: str | None
    jti: str | None = None


@dataclass(frozen=True)
class ConsentFailure:
    """Consent was refused, failed, or the callback could not be trusted."""

    reason: str


ConsentOutcome = ConsentSuccess | ConsentFailure


def classify_consent_callback(
    params: Mapping[str, str],
    *,
    get_secret: Callable[[], str] = get_signing_secret,
    expected_redirect_uri: str | None = None,
) -> ConsentOutcome:
    """
    Verify the callback's state token and classify the consent result.

    Never raises: every failure, including unexpected ones, becomes a
    ConsentFailure with a short reason code.

    Args:
        params: Callback query parameters
        get_secret: Signing secret accessor
        expected_redirect_uri: When set, the state's redirectUri must match it

    Returns:
        ConsentSuccess or ConsentFailure
    """
    try:
        return _classify(params, get_secret, expected_redirect_uri)
    except Exception:
        logger.exception("Unexpected error while verifying admin consent callback")
        return ConsentFailure("server_error")


def _classify(
    params: Mapping[str, str],
    get_secret: Callable[[], str],
    expected_redirect_uri: str | None,
) -> ConsentOutcome:
    state = params.get("state")
    if not state:
        logger.warning("Admin consent callback without state")
        return ConsentFailure("missing_state")

    secret = get_secret()
    try:
        claims = decode_token(state, secret)
    except JWTError as e:
        logger.warning("Admin consent state verification failed: %s", e)
        return ConsentFailure("invalid_state")

    if claims.get("purpose") != ADMIN_CONSENT_PURPOSE:
        logger.warning("Admin consent state purpose mismatch: %r", claims.get("purpose"))
        return ConsentFailure("bad_purpose")

    try:
        consent_state = ConsentState.model_validate(claims)
    except SchemaError as e:
        logger.warning("Admin consent state has unexpected shape: %s", e)
        return ConsentFailure("invalid_state")

    if expected_redirect_uri and consent_state.redirect_uri != expected_redirect_uri:
        logger.warning(
            "Admin consent state redirectUri mismatch: expected=%s got=%s",
            expected_redirect_uri,
            consent_state.redirect_uri,
        )
        return ConsentFailure("redirect_uri_mismatch")

    error = params.get("error")
    if error:
        logger.info("Azure reported admin consent error: %s", error)
        return ConsentFailure(params.get("error_description") or error)

    tenant = params.get("tenant") or params.get("tid")
    admin_consent = params.get("admin_consent") or params.get("admin_consented")
    if admin_consent and admin_consent.lower() in _CONSENTED_VALUES:
        logger.info("Admin consent granted tenant=%s jti=%s", tenant, consent_state.jti)
        return ConsentSuccess(tenant=tenant, jti=consent_state.jti)

    return ConsentFailure("unknown_response")


def _append_query(base_url: str, params: dict[str, str]) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(params, quote_via=quote, safe='')}"


def consent_redirect_url(
    outcome: ConsentOutcome,
    success_base: str | None = None,
    failure_base: str | None = None,
) -> str:
    """Map a consent outcome onto the configured success/failure redirect."""
    if isinstance(outcome, ConsentSuccess):
        base = success_base or config.settings.ADMIN_CONSENT_SUCCESS_REDIRECT
        return _append_query(base, {"consent": "success", "tenant": outcome.tenant or ""})

    base = failure_base or config.settings.ADMIN_CONSENT_FAILURE_REDIRECT
    return _append_query(base, {"consent": "error", "msg": outcome.reason})
