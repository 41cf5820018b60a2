"""Service layer for the prompt library."""

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.providers import hash_value
from auth.schemas import SessionUser
from models.prompt import Prompt, PromptCreate
from repos import prompts_repo


def user_hashed_id(user: SessionUser) -> str:
    """Stable owner identifier for a signed-in user."""
    return hash_value(user.email)


async def create_prompt(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    payload: PromptCreate,
) -> Prompt:
    """
    Create a prompt owned by the current user.

    Only admins may publish; prompts from other users are always private.
    """
    prompt = Prompt(
        name=payload.name,
        description=payload.description,
        is_published=payload.is_published if current_user.is_admin else False,
        user_id=user_hashed_id(current_user),
    )
    prompt = await prompts_repo.create(session, prompt)
    await session.commit()
    return prompt


async def list_prompts(
    session: AsyncSession,
    *,
    current_user: SessionUser,
) -> list[Prompt]:
    """Published prompts plus the current user's own."""
    return await prompts_repo.list_visible(session, user_id=user_hashed_id(current_user))


async def get_prompt(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    prompt_id: str,
) -> Prompt:
    """Get a published prompt, or a private one the user may manage."""
    prompt = await prompts_repo.get_by_id(session, prompt_id=prompt_id)
    if prompt and prompt.is_published:
        return prompt
    return await ensure_prompt_operation(
        session, current_user=current_user, prompt_id=prompt_id
    )


async def ensure_prompt_operation(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    prompt_id: str,
) -> Prompt:
    """
    Load a prompt the current user may manage (owner or admin).

    Raises:
        HTTPException: 404 if missing or not manageable by the user
    """
    prompt = await prompts_repo.get_by_id(session, prompt_id=prompt_id)
    if prompt and (current_user.is_admin or prompt.user_id == user_hashed_id(current_user)):
        return prompt

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Prompt not found with id: {prompt_id}",
    )


async def delete_prompt(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    prompt_id: str,
) -> None:
    prompt = await ensure_prompt_operation(
        session, current_user=current_user, prompt_id=prompt_id
    )
    await prompts_repo.delete(session, prompt)
    await session.commit()
