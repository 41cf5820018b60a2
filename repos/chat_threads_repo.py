"""Repository for chat thread and message queries used by reporting."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.chat_thread import ChatMessage, ChatThread, ThreadActivity


async def list_paged(
    session: AsyncSession,
    *,
    limit: int,
    offset: int,
) -> list[ChatThread]:
    """
    List chat threads, newest first.

    Args:
        session: Database session
        limit: Page size
        offset: Number of threads to skip

    Returns:
        List of chat threads
    """
    query = (
        select(ChatThread)
        .order_by(ChatThread.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(query)
    return [thread for thread in result.scalars().all()]


async def get_by_id(session: AsyncSession, *, thread_id: str) -> ChatThread | None:
    result = await session.execute(select(ChatThread).where(ChatThread.id == thread_id))
    return result.scalar_one_or_none()


async def list_messages(session: AsyncSession, *, thread_id: str) -> list[ChatMessage]:
    """
    List the messages of a thread in conversation order.

    Args:
        session: Database session
        thread_id: Chat thread ID

    Returns:
        Messages ordered by created_at ascending
    """
    query = (
        select(ChatMessage)
        .where(ChatMessage.thread_id == thread_id)
        .order_by(ChatMessage.created_at.asc())
    )
    result = await session.execute(query)
    return [message for message in result.scalars().all()]


async def list_activity_in_window(
    session: AsyncSession,
    *,
    start: datetime,
    end: datetime,
) -> list[ThreadActivity]:
    """
    Project the threads created within [start, end] for aggregation.

    Args:
        session: Database session
        start: Inclusive window start (UTC)
        end: Inclusive window end (UTC)

    Returns:
        Thread activity rows, newest first
    """
    query = (
        select(ChatThread.created_at, ChatThread.user_id, ChatThread.user_name)
        .where(ChatThread.created_at >= start, ChatThread.created_at <= end)
        .order_by(ChatThread.created_at.desc())
    )
    result = await session.execute(query)
    return [
        ThreadActivity(created_at=row.created_at, user_id=row.user_id, user_name=row.user_name)
        for row in result.all()
    ]
