"""Team schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from halolight.schemas.base import BaseSchema, reject_null
from halolight.users.schemas import UserSummary


class TeamMemberOut(BaseSchema):
    user_id: str
    role: Optional[str] = None
    joined_at: datetime
    user: UserSummary


class TeamOut(BaseSchema):
    id: str
    name: str
    description: Optional[str] = None
    avatar: Optional[str] = None
    owner_id: str
    owner: Optional[UserSummary] = None
    member_count: int = 0
    members: Optional[List[TeamMemberOut]] = None
    created_at: datetime
    updated_at: datetime


class TeamCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    avatar: Optional[str] = None


class TeamUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class TeamMemberAdd(BaseSchema):
    user_id: str = Field(..., min_length=1)
    role: str = Field("member", min_length=1, max_length=100)
