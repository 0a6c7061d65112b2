"""Notification API Routes."""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import AuthContext, get_auth_context, require_role
from halolight.dependencies import PaginationParams, get_db, get_pagination
from halolight.schemas.responses import ApiResponse, MessageResponse, PageMeta

from .schemas import NotificationCreate, NotificationOut, NotificationPageMeta, ReadAllResult, UnreadCount
from .service import NotificationService

notification_router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationPage(BaseModel):
    success: bool = True
    data: List[NotificationOut]
    meta: NotificationPageMeta


@notification_router.get("", response_model=NotificationPage)
async def list_notifications(
    pagination: PaginationParams = Depends(get_pagination),
    unread_only: bool = Query(False, alias="unreadOnly"),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    notifications, total, unread = await NotificationService(db).list_notifications(
        auth.user_id, page=pagination.page, page_size=pagination.page_size, unread_only=unread_only
    )
    base = PageMeta.create(pagination.page, pagination.page_size, total)
    meta = NotificationPageMeta(**base.model_dump(), unread_count=unread)
    return NotificationPage(data=notifications, meta=meta)


@notification_router.get("/unread-count", response_model=ApiResponse[UnreadCount])
async def unread_count(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=UnreadCount(unread_count=await NotificationService(db).unread_count(auth.user_id)))


@notification_router.put("/read-all", response_model=ApiResponse[ReadAllResult])
async def mark_all_read(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    """Mark every unread notification of the caller as read."""
    return ApiResponse(data=ReadAllResult(count=await NotificationService(db).mark_all_read(auth.user_id)))


@notification_router.put("/{notification_id}/read", response_model=ApiResponse[NotificationOut])
async def mark_read(
    notification_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await NotificationService(db).mark_read(notification_id, auth.user_id))


@notification_router.delete("/{notification_id}", response_model=ApiResponse[MessageResponse])
async def delete_notification(
    notification_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService(db).delete_notification(notification_id, auth.user_id)
    return ApiResponse(data=MessageResponse(message="Notification deleted successfully"))


@notification_router.post(
    "",
    response_model=ApiResponse[NotificationOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role("admin"))],
)
async def create_notification(body: NotificationCreate, db: AsyncSession = Depends(get_db)):
    """Send a notification to a user (admin only)."""
    return ApiResponse(data=await NotificationService(db).create_notification(body))
