"""Current user endpoint."""

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from auth.schemas import SessionUser

router = APIRouter()


@router.get("/me", response_model=SessionUser)
async def get_me(current_user: SessionUser = Depends(get_current_user)):
    """Return the signed-in user from the session token."""
    return current_user
