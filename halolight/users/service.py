"""User management service."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.models import UserStatus
from halolight.database.repository import UserRepository
from halolight.exceptions import ConflictError, NotFoundError, ValidationError

from .schemas import UserPublic, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Admin-facing user operations."""

    def __init__(self, session: AsyncSession):
        self.users = UserRepository(session)

    async def list_users(
        self,
        *,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        status: Optional[UserStatus] = None,
    ) -> Tuple[List[UserPublic], int]:
        users, total = await self.users.list_users(
            skip=(page - 1) * page_size,
            limit=page_size,
            search=search,
            status=status.value if status else None,
        )
        return [UserPublic.model_validate(user) for user in users], total

    async def get_user(self, user_id: str) -> UserPublic:
        user = await self.users.get(user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return UserPublic.model_validate(user)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserPublic:
        """Apply a partial update. Email and username must stay unique."""
        if not await self.users.exists(user_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        changes = data.model_dump(exclude_unset=True)
        if changes.get("email") and await self.users.is_taken("email", changes["email"], exclude_id=user_id):
            raise ConflictError("Email already registered")
        if changes.get("username") and await self.users.is_taken("username", changes["username"], exclude_id=user_id):
            raise ConflictError("Username already taken")

        user = await self.users.update(user_id, changes)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        logger.info(f"Updated user {user_id}: {sorted(changes)}")
        return UserPublic.model_validate(user)

    async def delete_user(self, user_id: str, actor_id: str) -> None:
        """Hard-delete a user; owned rows cascade. Self-deletion is refused."""
        if user_id == actor_id:
            raise ValidationError("Cannot delete your own account", code="SELF_DELETE_FORBIDDEN")
        if not await self.users.delete(user_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        logger.info(f"User {user_id} deleted by {actor_id}")
