"""
Database Models

SQLAlchemy models for the back-office schema. Every primary key is a UUID
string and every timestamp is timezone-aware UTC.
"""

import enum
import uuid

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from halolight.utils.datetime import utcnow

from .engine import Base


def generate_uuid() -> str:
    """Primary key factory."""
    return str(uuid.uuid4())


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class UserStatus(str, enum.Enum):
    """User account status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class SharePermission(str, enum.Enum):
    """Access level granted by a document share."""
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamps to models."""
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class User(Base, TimestampMixin):
    """Registered account. ``password`` holds the bcrypt hash and is never serialised."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    avatar = Column(Text, nullable=True)
    status = Column(
        Enum(UserStatus, name="user_status", native_enum=False, values_callable=_enum_values),
        default=UserStatus.ACTIVE,
        nullable=False,
    )
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    quota_used = Column(BigInteger, default=0, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User {self.username}>"


class Role(Base, TimestampMixin):
    """Named bundle of permissions. The name is immutable once created."""
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False, index=True)
    label = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Role {self.name}>"


class Permission(Base, TimestampMixin):
    """``resource:action`` grant; either segment may be ``*``."""
    __tablename__ = "permissions"
    __table_args__ = (UniqueConstraint("action", "resource", name="uq_permissions_action_resource"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    action = Column(String(100), nullable=False)
    resource = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    @property
    def code(self) -> str:
        return f"{self.resource}:{self.action}"

    def __repr__(self):
        return f"<Permission {self.code}>"


class RolePermission(Base):
    __tablename__ = "role_permissions"

    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = Column(String(36), ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True)


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id = Column(String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)


class Team(Base, TimestampMixin):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(150), nullable=False, index=True)
    description = Column(Text, nullable=True)
    avatar = Column(Text, nullable=True)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    def __repr__(self):
        return f"<Team {self.name}>"


class TeamMember(Base):
    """Team membership; ``role_id`` is a free-form team role such as ``member``."""
    __tablename__ = "team_members"

    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id = Column(String(100), nullable=True)
    joined_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Document(Base, TimestampMixin):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    folder = Column(String(255), nullable=True, index=True)
    type = Column(String(50), nullable=False, default="document")
    size = Column(BigInteger, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)

    def __repr__(self):
        return f"<Document {self.title}>"


class DocumentShare(Base):
    __tablename__ = "document_shares"
    __table_args__ = (UniqueConstraint("document_id", "shared_with_user_id", name="uq_document_shares_user"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    document_id = Column(String(36), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_with_user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    shared_with_team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True)
    permission = Column(
        Enum(SharePermission, name="share_permission", native_enum=False, values_callable=_enum_values),
        default=SharePermission.READ,
        nullable=False,
    )
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class DocumentTag(Base):
    __tablename__ = "document_tags"

    document_id = Column(String(36), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String(36), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)


class File(Base, TimestampMixin):
    """Uploaded file metadata; only read by dashboard statistics."""
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    path = Column(String(1000), nullable=True)
    mime_type = Column(String(150), nullable=True)
    size = Column(BigInteger, default=0, nullable=False)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    is_favorite = Column(Boolean, default=False, nullable=False)


class CalendarEvent(Base, TimestampMixin):
    """Calendar entry; only read by dashboard statistics."""
    __tablename__ = "calendar_events"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    type = Column(String(20), default="meeting", nullable=False)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), default="system", nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, default="", nullable=False)
    link = Column(String(500), nullable=True)
    payload = Column(JSON, nullable=True)
    read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    actor_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(100), nullable=False)
    target_type = Column(String(50), nullable=False)
    target_id = Column(String(36), nullable=True)
    # "metadata" is reserved on declarative classes
    activity_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)


class RefreshToken(Base):
    """Server-side record of an issued refresh token; one row per valid token."""
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(Text, unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires={self.expires_at}>"
