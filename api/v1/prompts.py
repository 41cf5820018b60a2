"""Prompt library endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from auth.schemas import SessionUser
from models.prompt import PromptCreate, PromptResponse
from services import prompts_service

router = APIRouter()


@router.post("/prompts", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def create_prompt(
    payload: PromptCreate,
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a prompt.

    Any signed-in user may create prompts; only admins may publish them.
    """
    return await prompts_service.create_prompt(db, current_user=current_user, payload=payload)


@router.get("/prompts", response_model=list[PromptResponse])
async def list_prompts(
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List published prompts and the caller's own private prompts."""
    return await prompts_service.list_prompts(db, current_user=current_user)


@router.get("/prompts/{prompt_id}", response_model=PromptResponse)
async def get_prompt(
    prompt_id: str,
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await prompts_service.get_prompt(db, current_user=current_user, prompt_id=prompt_id)


@router.delete("/prompts/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    prompt_id: str,
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a prompt. Owner or admin only."""
    await prompts_service.delete_prompt(db, current_user=current_user, prompt_id=prompt_id)
