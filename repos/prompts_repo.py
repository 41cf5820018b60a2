"""Repository for Prompt database operations."""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.prompt import Prompt


async def get_by_id(session: AsyncSession, *, prompt_id: str) -> Prompt | None:
    """
    Get a prompt by ID.

    Args:
        session: Database session
        prompt_id: Prompt ID to fetch

    Returns:
        Prompt if found, None otherwise
    """
    result = await session.execute(select(Prompt).where(Prompt.id == prompt_id))
    return result.scalar_one_or_none()


async def list_visible(session: AsyncSession, *, user_id: str) -> list[Prompt]:
    """
    List published prompts plus the user's own private prompts.

    Args:
        session: Database session
        user_id: Hashed user identifier

    Returns:
        List of prompts, newest first
    """
    query = (
        select(Prompt)
        .where(or_(Prompt.is_published.is_(True), Prompt.user_id == user_id))
        .order_by(Prompt.created_at.desc())
    )
    result = await session.execute(query)
    return [prompt for prompt in result.scalars().all()]


async def create(session: AsyncSession, prompt: Prompt) -> Prompt:
    session.add(prompt)
    await session.flush()
    await session.refresh(prompt)
    return prompt


async def delete(session: AsyncSession, prompt: Prompt) -> None:
    await session.delete(prompt)
    await session.flush()
