"""
Repository Pattern for Database Operations

Async CRUD operations shared by every service. The generic repository covers
single-table access; entity repositories add the joins and bulk statements the
services need.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar, cast

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.utils.datetime import utcnow

from .engine import Base
from .models import (
    ActivityLog,
    Document,
    DocumentShare,
    DocumentTag,
    Notification,
    Permission,
    RefreshToken,
    Role,
    RolePermission,
    SharePermission,
    Tag,
    Team,
    TeamMember,
    User,
    UserRole,
)

logger = logging.getLogger(__name__)

# Generic type for repository operations
ModelType = TypeVar("ModelType", bound=Base)


def _rowcount(result: Any) -> int:
    cursor = cast(CursorResult[Any], result)
    return cursor.rowcount or 0


class BaseRepository(Generic[ModelType]):
    """
    Generic repository class for common database operations.
    Every write commits before returning.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        self.session = session
        self.model = model

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Dictionary of field values

        Returns:
            ModelType: Created model instance
        """
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)

        logger.debug(f"Created {self.model.__name__} with id {db_obj.id}")
        return db_obj

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Optional[ModelType]: Model instance or None
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def update(self, id: str, obj_in: Dict[str, Any]) -> Optional[ModelType]:
        """
        Update a record by ID.

        Args:
            id: Record ID
            obj_in: Dictionary of field values to update

        Returns:
            Optional[ModelType]: Updated model instance or None
        """
        db_obj = await self.get(id)
        if not db_obj:
            return None

        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self.session.commit()
        await self.session.refresh(db_obj)

        logger.debug(f"Updated {self.model.__name__} with id {id}")
        return db_obj

    async def delete(self, id: str) -> bool:
        """
        Delete a record by ID.

        Args:
            id: Record ID

        Returns:
            bool: True if deleted, False if not found
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )

        if _rowcount(result) > 0:
            await self.session.commit()
            logger.debug(f"Deleted {self.model.__name__} with id {id}")
            return True

        return False

    async def exists(self, id: str) -> bool:
        """
        Check if a record exists.

        Args:
            id: Record ID

        Returns:
            bool: True if exists, False otherwise
        """
        result = await self.session.execute(
            select(func.count(self.model.id)).where(self.model.id == id)
        )
        return int(result.scalar_one()) > 0

    async def paginate(self, query: Select, skip: int, limit: int) -> Tuple[List[Any], int]:
        """Run ``query`` for one page and return the rows with the unpaged total."""
        total_result = await self.session.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        total = int(total_result.scalar_one())

        result = await self.session.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all()), total


class UserRepository(BaseRepository[User]):
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def is_taken(self, field: str, value: str, exclude_id: Optional[str] = None) -> bool:
        """Return True if another user already holds ``value`` in the unique column ``field``."""
        column = getattr(User, field)
        query = select(func.count(User.id)).where(column == value)
        if exclude_id:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query)
        return int(result.scalar_one()) > 0

    async def update_last_login(self, user_id: str) -> bool:
        """Update user's last login timestamp."""
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(last_login_at=utcnow())
        )

        if _rowcount(result) > 0:
            await self.session.commit()
            return True
        return False

    async def list_users(
        self,
        *,
        skip: int,
        limit: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """Newest-first page of users filtered by free-text search and status."""
        query = select(User)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(User.name.ilike(pattern), User.username.ilike(pattern), User.email.ilike(pattern))
            )
        if status:
            query = query.where(User.status == status)
        query = query.order_by(User.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def get_role_names(self, user_id: str) -> List[str]:
        """Names of every role assigned to the user."""
        result = await self.session.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_permission_strings(self, user_id: str) -> List[str]:
        """De-duplicated ``resource:action`` strings granted through the user's roles."""
        result = await self.session.execute(
            select(Permission.resource, Permission.action)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .where(UserRole.user_id == user_id)
            .distinct()
        )
        return sorted(f"{resource}:{action}" for resource, action in result.all())

    async def assign_role(self, user_id: str, role_id: str) -> None:
        self.session.add(UserRole(user_id=user_id, role_id=role_id))
        await self.session.commit()


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence for issued refresh tokens; a token is valid only while its row exists."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, RefreshToken)

    async def store(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        return await self.create({"user_id": user_id, "token": token, "expires_at": expires_at})

    async def find_valid(self, token: str, user_id: str) -> Optional[RefreshToken]:
        """Row matching the token and its owner whose stored expiry is still in the future."""
        result = await self.session.execute(
            select(RefreshToken).where(
                RefreshToken.token == token,
                RefreshToken.user_id == user_id,
                RefreshToken.expires_at > utcnow(),
            )
        )
        return result.scalar_one_or_none()

    async def rotate(self, consumed_id: str, user_id: str, token: str, expires_at: datetime) -> bool:
        """
        Delete the consumed row and insert its replacement in one transaction.

        Returns False without inserting when the consumed row was already gone,
        which means a concurrent request used the same token first.
        """
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.id == consumed_id)
        )
        if _rowcount(result) == 0:
            return False

        self.session.add(RefreshToken(user_id=user_id, token=token, expires_at=expires_at))
        await self.session.commit()
        return True

    async def delete_by_token(self, token: str) -> int:
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.token == token)
        )
        await self.session.commit()
        return _rowcount(result)

    async def delete_for_user(self, user_id: str) -> int:
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        await self.session.commit()
        return _rowcount(result)

    async def delete_expired(self) -> int:
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.expires_at < utcnow())
        )
        await self.session.commit()
        return _rowcount(result)


class RoleRepository(BaseRepository[Role]):
    """Repository for Role model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Role)

    async def get_by_name(self, name: str) -> Optional[Role]:
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def list_ordered(self) -> List[Role]:
        result = await self.session.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def get_permissions(self, role_id: str) -> List[Permission]:
        result = await self.session.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.resource, Permission.action)
        )
        return list(result.scalars().all())

    async def count_users(self, role_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return int(result.scalar_one())

    async def replace_permissions(self, role_id: str, permission_ids: Iterable[str]) -> None:
        """Swap the role's permission set for ``permission_ids`` atomically."""
        await self.session.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        for permission_id in dict.fromkeys(permission_ids):
            self.session.add(RolePermission(role_id=role_id, permission_id=permission_id))
        await self.session.commit()


class PermissionRepository(BaseRepository[Permission]):
    """Repository for Permission model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Permission)

    async def get_by_code(self, resource: str, action: str) -> Optional[Permission]:
        result = await self.session.execute(
            select(Permission).where(Permission.resource == resource, Permission.action == action)
        )
        return result.scalar_one_or_none()

    async def list_ordered(self) -> List[Permission]:
        result = await self.session.execute(
            select(Permission).order_by(Permission.resource, Permission.action)
        )
        return list(result.scalars().all())

    async def get_many(self, ids: Sequence[str]) -> List[Permission]:
        if not ids:
            return []
        result = await self.session.execute(select(Permission).where(Permission.id.in_(ids)))
        return list(result.scalars().all())

    async def delete_with_links(self, permission_id: str) -> bool:
        """Remove role links first, then the permission itself."""
        await self.session.execute(
            delete(RolePermission).where(RolePermission.permission_id == permission_id)
        )
        result = await self.session.execute(delete(Permission).where(Permission.id == permission_id))
        await self.session.commit()
        return _rowcount(result) > 0


class TeamRepository(BaseRepository[Team]):
    """Repository for Team model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Team)

    async def list_teams(self, *, skip: int, limit: int, search: Optional[str] = None) -> Tuple[List[Team], int]:
        query = select(Team)
        if search:
            query = query.where(Team.name.ilike(f"%{search}%"))
        query = query.order_by(Team.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def member_counts(self, team_ids: Sequence[str]) -> Dict[str, int]:
        if not team_ids:
            return {}
        result = await self.session.execute(
            select(TeamMember.team_id, func.count())
            .where(TeamMember.team_id.in_(team_ids))
            .group_by(TeamMember.team_id)
        )
        return {team_id: int(count) for team_id, count in result.all()}

    async def get_members(self, team_id: str) -> List[Tuple[TeamMember, User]]:
        result = await self.session.execute(
            select(TeamMember, User)
            .join(User, User.id == TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at)
        )
        return [(member, user) for member, user in result.all()]

    async def get_member(self, team_id: str, user_id: str) -> Optional[TeamMember]:
        result = await self.session.execute(
            select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def add_member(self, team_id: str, user_id: str, role: str) -> TeamMember:
        """Add a member; an existing membership is returned unchanged."""
        existing = await self.get_member(team_id, user_id)
        if existing:
            return existing

        member = TeamMember(team_id=team_id, user_id=user_id, role_id=role)
        self.session.add(member)
        await self.session.commit()
        await self.session.refresh(member)
        return member

    async def remove_member(self, team_id: str, user_id: str) -> int:
        result = await self.session.execute(
            delete(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        )
        await self.session.commit()
        return _rowcount(result)


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document, DocumentShare and DocumentTag operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def list_for_owner(
        self,
        owner_id: str,
        *,
        skip: int,
        limit: int,
        search: Optional[str] = None,
        doc_type: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> Tuple[List[Document], int]:
        query = select(Document).where(Document.owner_id == owner_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Document.title.ilike(pattern), Document.content.ilike(pattern)))
        if doc_type:
            query = query.where(Document.type == doc_type)
        if folder:
            query = query.where(Document.folder == folder)
        query = query.order_by(Document.updated_at.desc())
        return await self.paginate(query, skip, limit)

    async def increment_views(self, document_id: str) -> None:
        await self.session.execute(
            update(Document).where(Document.id == document_id).values(views=Document.views + 1)
        )
        await self.session.commit()

    async def get_tags(self, document_ids: Sequence[str]) -> Dict[str, List[Tag]]:
        """Tags of each document, keyed by document id."""
        tags: Dict[str, List[Tag]] = {document_id: [] for document_id in document_ids}
        if not document_ids:
            return tags
        result = await self.session.execute(
            select(DocumentTag.document_id, Tag)
            .join(Tag, Tag.id == DocumentTag.tag_id)
            .where(DocumentTag.document_id.in_(document_ids))
            .order_by(Tag.name)
        )
        for document_id, tag in result.all():
            tags[document_id].append(tag)
        return tags

    async def replace_tags(self, document_id: str, tag_ids: Iterable[str]) -> None:
        await self.session.execute(delete(DocumentTag).where(DocumentTag.document_id == document_id))
        for tag_id in dict.fromkeys(tag_ids):
            self.session.add(DocumentTag(document_id=document_id, tag_id=tag_id))
        await self.session.commit()

    async def get_shares(self, document_id: str) -> List[DocumentShare]:
        result = await self.session.execute(
            select(DocumentShare)
            .where(DocumentShare.document_id == document_id)
            .order_by(DocumentShare.created_at)
        )
        return list(result.scalars().all())

    async def upsert_share(self, document_id: str, user_id: str, permission: SharePermission) -> DocumentShare:
        """Share with a user, updating the permission of an existing share."""
        result = await self.session.execute(
            select(DocumentShare).where(
                DocumentShare.document_id == document_id,
                DocumentShare.shared_with_user_id == user_id,
            )
        )
        share = result.scalar_one_or_none()
        if share:
            share.permission = permission
        else:
            share = DocumentShare(document_id=document_id, shared_with_user_id=user_id, permission=permission)
            self.session.add(share)
        await self.session.commit()
        await self.session.refresh(share)
        return share

    async def remove_share(self, document_id: str, user_id: str) -> int:
        result = await self.session.execute(
            delete(DocumentShare).where(
                DocumentShare.document_id == document_id,
                DocumentShare.shared_with_user_id == user_id,
            )
        )
        await self.session.commit()
        return _rowcount(result)

    async def delete_owned(self, document_ids: Sequence[str], owner_id: str) -> int:
        """Delete the documents among ``document_ids`` that ``owner_id`` owns."""
        result = await self.session.execute(
            delete(Document).where(Document.id.in_(document_ids), Document.owner_id == owner_id)
        )
        await self.session.commit()
        return _rowcount(result)


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Tag)

    async def get_by_name(self, name: str) -> Optional[Tag]:
        result = await self.session.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def list_ordered(self) -> List[Tag]:
        result = await self.session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())

    async def count_existing(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        result = await self.session.execute(select(func.count(Tag.id)).where(Tag.id.in_(ids)))
        return int(result.scalar_one())


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Notification)

    async def list_for_user(
        self, user_id: str, *, skip: int, limit: int, unread_only: bool = False
    ) -> Tuple[List[Notification], int]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        query = query.order_by(Notification.created_at.desc())
        return await self.paginate(query, skip, limit)

    async def unread_count(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.read.is_(False)
            )
        )
        return int(result.scalar_one())

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True, read_at=utcnow())
        )
        await self.session.commit()
        return _rowcount(result)


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for ActivityLog model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ActivityLog)

    async def record(
        self,
        actor_id: Optional[str],
        action: str,
        target_type: str,
        target_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityLog:
        return await self.create(
            {
                "actor_id": actor_id,
                "action": action,
                "target_type": target_type,
                "target_id": target_id,
                "activity_metadata": metadata,
            }
        )

    async def recent_with_actor(self, limit: int) -> List[Tuple[ActivityLog, Optional[User]]]:
        result = await self.session.execute(
            select(ActivityLog, User)
            .outerjoin(User, User.id == ActivityLog.actor_id)
            .order_by(ActivityLog.created_at.desc())
            .limit(limit)
        )
        return [(log, user) for log, user in result.all()]

