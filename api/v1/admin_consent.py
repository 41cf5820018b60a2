"""Admin consent endpoints: URL generation and Azure AD callback."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

import config
from api.deps import require_admin
from auth.consent import (
    classify_consent_callback,
    consent_redirect_url,
    generate_admin_consent_url,
    validate_tenant_selector,
)
from auth.schemas import SessionUser

logger = logging.getLogger(__name__)

router = APIRouter()


class AdminConsentRequest(BaseModel):
    """
    Request schema for admin consent URL generation.

    tenantId is 'organizations', 'common' or a tenant GUID; expiresIn is a
    state token lifetime such as "24h" (default ADMIN_CONSENT_DEFAULT_EXPIRES).
    """

    tenantId: str | None = None
    expiresIn: str | None = None


class AdminConsentResponse(BaseModel):
    """Response schema for admin consent URL generation."""

    url: str


@router.post("/auth/generate-admin-consent", response_model=AdminConsentResponse)
async def generate_admin_consent(
    request: AdminConsentRequest,
    current_user: SessionUser = Depends(require_admin),
):
    """
    Generate an admin consent URL for an external tenant.

    The URL carries a signed, short-lived state token that the callback
    verifies. Send it to the tenant's Global Administrator.

    Returns:
        AdminConsentResponse: The consent URL

    Raises:
        ValidationError: 400 if tenantId is missing/invalid or expiresIn is malformed
        ConfigurationError: 500 if client id, callback URL or secret is not configured
    """
    tenant_id = validate_tenant_selector(request.tenantId)

    url = await run_in_threadpool(generate_admin_consent_url, tenant_id, request.expiresIn)

    logger.info(
        "Admin consent URL generated by %s for tenant %s", current_user.email, tenant_id
    )
    return AdminConsentResponse(url=url)


@router.get("/admin/admin-consent-callback")
async def admin_consent_callback(request: Request):
    """
    Azure AD redirects here after the administrator answers the consent prompt.

    Always responds with a redirect: to ADMIN_CONSENT_SUCCESS_REDIRECT with
    consent=success&tenant=<id>, or to ADMIN_CONSENT_FAILURE_REDIRECT with
    consent=error&msg=<reason>.
    """
    params = dict(request.query_params)

    outcome = await run_in_threadpool(
        classify_consent_callback,
        params,
        expected_redirect_uri=config.settings.ADMIN_CONSENT_CALLBACK_URL,
    )

    return RedirectResponse(url=consent_redirect_url(outcome))
