"""Service layer for admin reporting over chat threads."""

import logging
from datetime import datetime, timedelta, UTC

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.schemas import SessionUser
from models.chat_thread import ChatMessage, ChatThread, ThreadActivity, WeeklySummary
from repos import chat_threads_repo

logger = logging.getLogger(__name__)

DEFAULT_WEEKS_BACK = 6
_ONE_MS = timedelta(milliseconds=1)


def _require_admin(current_user: SessionUser) -> None:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not authorized to perform this action",
        )


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def week_start(moment: datetime) -> datetime:
    """Monday 00:00:00 UTC of the week containing moment."""
    moment = _as_utc(moment)
    day = datetime(moment.year, moment.month, moment.day, tzinfo=UTC)
    return day - timedelta(days=day.weekday())


def week_end(monday: datetime) -> datetime:
    """Sunday 23:59:59.999 UTC of the week starting at monday."""
    return monday + timedelta(days=7) - _ONE_MS


def summary_window(weeks_back: int, now: datetime) -> tuple[datetime, datetime]:
    """
    Window covering the last weeks_back weeks, current week included.

    Returns:
        (earliest Monday 00:00, current Sunday 23:59:59.999), both UTC
    """
    this_monday = week_start(now)
    earliest_monday = this_monday - timedelta(weeks=weeks_back - 1)
    return earliest_monday, week_end(this_monday)


def build_weekly_summaries(
    activity: list[ThreadActivity],
    *,
    weeks_back: int,
    now: datetime,
) -> list[WeeklySummary]:
    """
    Bucket thread activity into contiguous UTC weeks.

    Weeks without activity are zero-filled. Threads with no user identifier
    count as conversations but not as users.

    Returns:
        weeks_back summaries, newest week first
    """
    earliest_monday, window_end = summary_window(weeks_back, now)

    conversations: dict[datetime, int] = {}
    users: dict[datetime, set[str]] = {}
    for row in activity:
        created_at = _as_utc(row.created_at)
        if created_at < earliest_monday or created_at > window_end:
            continue
        monday = week_start(created_at)
        conversations[monday] = conversations.get(monday, 0) + 1
        bucket_users = users.setdefault(monday, set())
        if row.user_key:
            bucket_users.add(row.user_key)

    summaries = []
    for i in range(weeks_back):
        monday = earliest_monday + timedelta(weeks=i)
        summaries.append(
            WeeklySummary(
                week_start=monday,
                week_end=week_end(monday),
                unique_users=len(users.get(monday, ())),
                conversations=conversations.get(monday, 0),
            )
        )

    summaries.reverse()
    return summaries


async def find_all_chat_threads_for_admin(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    limit: int,
    offset: int,
) -> list[ChatThread]:
    """
    Page through all chat threads, newest first (admin only).

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    _require_admin(current_user)
    return await chat_threads_repo.list_paged(session, limit=limit, offset=offset)


async def find_all_chat_messages_for_admin(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    thread_id: str,
) -> list[ChatMessage]:
    """
    List a thread's messages in order (admin only).

    Raises:
        HTTPException: 403 if not admin, 404 if the thread does not exist
    """
    _require_admin(current_user)

    thread = await chat_threads_repo.get_by_id(session, thread_id=thread_id)
    if not thread:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Chat thread {thread_id} not found",
        )

    return await chat_threads_repo.list_messages(session, thread_id=thread_id)


async def find_weekly_summaries_for_admin(
    session: AsyncSession,
    *,
    current_user: SessionUser,
    weeks_back: int = DEFAULT_WEEKS_BACK,
    now: datetime | None = None,
) -> list[WeeklySummary]:
    """
    Weekly conversation and unique-user counts (admin only).

    Args:
        session: Database session
        current_user: Signed-in user
        weeks_back: Number of weeks, current week included
        now: Reference time (default: current UTC time)

    Returns:
        weeks_back summaries, newest week first

    Raises:
        HTTPException: 403 if not admin, 400 if weeks_back < 1
    """
    _require_admin(current_user)
    if weeks_back < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="weeks_back must be at least 1",
        )

    now = now or datetime.now(UTC)
    start, end = summary_window(weeks_back, now)
    activity = await chat_threads_repo.list_activity_in_window(session, start=start, end=end)
    logger.debug("Aggregating %d threads between %s and %s", len(activity), start, end)

    return build_weekly_summaries(activity, weeks_back=weeks_back, now=now)
