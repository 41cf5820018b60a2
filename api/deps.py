"""FastAPI dependencies for authentication and database."""

from fastapi import Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import decode_session_token
from auth.schemas import SessionUser
from db import get_db as get_db_session

# HTTP Bearer token security scheme
security = HTTPBearer()


async def get_db() -> AsyncSession:
    """
    Dependency to get database session.
    Reuses the get_db function from db.py.
    """
    async for session in get_db_session():
        yield session


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionUser:
    """
    Dependency to get the signed-in user from the bearer session token.

    The first call may resolve the signing secret from Key Vault, so decoding
    runs in the threadpool.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        claims = await run_in_threadpool(decode_session_token, credentials.credentials)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    return SessionUser.model_validate(claims.model_dump())


async def require_admin(
    current_user: SessionUser = Depends(get_current_user),
) -> SessionUser:
    """
    Dependency restricting a route to users on the admin allowlist.

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not authorized to perform this action",
        )
    return current_user
