"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import admin_consent, auth, health, me, prompts, reporting

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(auth.router, tags=["auth"])
v1_router.include_router(admin_consent.router, tags=["admin-consent"])
v1_router.include_router(me.router, tags=["users"])
v1_router.include_router(reporting.router, tags=["reporting"])
v1_router.include_router(prompts.router, tags=["prompts"])

api_router.include_router(v1_router)
