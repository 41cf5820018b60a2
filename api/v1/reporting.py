"""Admin reporting endpoints over chat history."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from auth.schemas import SessionUser
from models.chat_thread import ChatMessageResponse, ChatThreadResponse, WeeklySummary
from services import reporting_service

router = APIRouter()


@router.get("/reporting/threads", response_model=list[ChatThreadResponse])
async def list_chat_threads(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Page through all users' chat threads, newest first.

    Admin only.
    """
    return await reporting_service.find_all_chat_threads_for_admin(
        db,
        current_user=current_user,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/reporting/threads/{thread_id}/messages",
    response_model=list[ChatMessageResponse],
)
async def list_chat_messages(
    thread_id: str,
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List a chat thread's messages in conversation order. Admin only."""
    return await reporting_service.find_all_chat_messages_for_admin(
        db,
        current_user=current_user,
        thread_id=thread_id,
    )


@router.get("/reporting/weekly", response_model=list[WeeklySummary])
async def weekly_summaries(
    weeks_back: int = Query(reporting_service.DEFAULT_WEEKS_BACK, ge=1, le=52),
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Weekly conversation and unique-user counts, newest week first.

    Weeks run Monday 00:00 to Sunday 23:59:59.999 UTC; the current week is
    included and empty weeks are zero-filled. Admin only.
    """
    return await reporting_service.find_weekly_summaries_for_admin(
        db,
        current_user=current_user,
        weeks_back=weeks_back,
    )
