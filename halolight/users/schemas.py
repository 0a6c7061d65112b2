"""User request and response schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from halolight.database.models import UserStatus
from halolight.schemas.base import BaseSchema, reject_null


class UserPublic(BaseSchema):
    """User fields safe to return to clients; the password hash is never included."""
    id: str
    email: str
    phone: Optional[str] = None
    username: str
    name: str
    avatar: Optional[str] = None
    status: UserStatus
    department: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None
    quota_used: int = 0
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserWithRoles(UserPublic):
    """User projection carrying role names and flattened permission strings."""
    roles: List[str] = []
    permissions: List[str] = []


class UserSummary(BaseSchema):
    id: str
    username: str
    name: str
    email: str
    avatar: Optional[str] = None


class UserUpdate(BaseSchema):
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    avatar: Optional[str] = None
    department: Optional[str] = Field(None, max_length=100)
    position: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None
    status: Optional[UserStatus] = None

    @field_validator("email", "username", "name", "status")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)
