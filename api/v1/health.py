"""Health check endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

import config
from api.deps import get_db
from auth.providers import configure_identity_providers

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status, environment and enabled sign-in providers
    """
    return {
        "status": "ok",
        "env": config.settings.ENV,
        "providers": [p.id for p in configure_identity_providers()],
        "admin_consent_configured": bool(
            config.settings.AZURE_AD_CLIENT_ID and config.settings.ADMIN_CONSENT_CALLBACK_URL
        ),
    }


@router.get("/health/db")
async def db_health(db: AsyncSession = Depends(get_db)):
    """
    Check database connectivity.

    Raises:
        HTTPException: 503 if the database cannot be reached
    """
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}",
        )
    return {"db": "ok"}
