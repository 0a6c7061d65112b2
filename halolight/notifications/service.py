"""Notification service."""

import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.models import Notification
from halolight.database.repository import NotificationRepository, UserRepository
from halolight.exceptions import ForbiddenError, NotFoundError
from halolight.utils.datetime import utcnow

from .schemas import NotificationCreate, NotificationOut

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, session: AsyncSession):
        self.notifications = NotificationRepository(session)
        self.users = UserRepository(session)

    async def _get_own(self, notification_id: str, user_id: str) -> Notification:
        notification = await self.notifications.get(notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise ForbiddenError("Cannot access another user's notification")
        return notification

    async def list_notifications(
        self, user_id: str, *, page: int, page_size: int, unread_only: bool = False
    ) -> Tuple[List[NotificationOut], int, int]:
        """Page of the user's notifications plus the total and unread counts."""
        notifications, total = await self.notifications.list_for_user(
            user_id, skip=(page - 1) * page_size, limit=page_size, unread_only=unread_only
        )
        unread = await self.notifications.unread_count(user_id)
        return [NotificationOut.model_validate(n) for n in notifications], total, unread

    async def unread_count(self, user_id: str) -> int:
        return await self.notifications.unread_count(user_id)

    async def mark_read(self, notification_id: str, user_id: str) -> NotificationOut:
        notification = await self._get_own(notification_id, user_id)
        if not notification.read:
            notification = await self.notifications.update(notification_id, {"read": True, "read_at": utcnow()})
        return NotificationOut.model_validate(notification)

    async def mark_all_read(self, user_id: str) -> int:
        return await self.notifications.mark_all_read(user_id)

    async def delete_notification(self, notification_id: str, user_id: str) -> None:
        await self._get_own(notification_id, user_id)
        await self.notifications.delete(notification_id)

    async def create_notification(self, data: NotificationCreate) -> NotificationOut:
        if not await self.users.exists(data.user_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        notification = await self.notifications.create(data.model_dump())
        logger.info(f"Notification {notification.id} sent to {data.user_id}")
        return NotificationOut.model_validate(notification)
